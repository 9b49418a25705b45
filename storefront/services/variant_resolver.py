"""
Variant Resolver

Maps an in-progress attribute selection onto a product's variant list.

State machine for one product detail session:

    EMPTY -> PARTIAL -> complete: RESOLVED | UNAVAILABLE

A selection is complete when it holds exactly one non-empty value for every
declared attribute. Only a complete selection is matched; "no match" is a
normal outcome (UNAVAILABLE), while two active variants sharing the selected
combination is a catalog integrity error.

Option availability is computed per attribute/value pair in isolation: a
value is available if any active, in-stock variant carries it, regardless of
the other attributes currently selected. The full combination is checked
only once the selection is complete.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

from storefront.core.exceptions import AmbiguousVariantError
from storefront.schemas.variant import ProductVariant


class VariantSelectionState(str, Enum):
    EMPTY = "empty"
    PARTIAL = "partial"
    RESOLVED = "resolved"
    UNAVAILABLE = "unavailable"


@dataclass
class VariantResolution:
    """Result of resolving one selection."""
    state: VariantSelectionState
    variant: Optional[ProductVariant] = None
    effective_price: Optional[float] = None
    stock_quantity: Optional[int] = None
    option_availability: Dict[str, Dict[str, bool]] = field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        return self.state in (VariantSelectionState.RESOLVED, VariantSelectionState.UNAVAILABLE)


def coerce_variants(variants: Iterable[Any]) -> List[ProductVariant]:
    """Accept stored variant documents or ProductVariant instances."""
    return [
        v if isinstance(v, ProductVariant) else ProductVariant.model_validate(v)
        for v in variants or []
    ]


def clean_selection(selection: Optional[Mapping[str, Optional[str]]]) -> Dict[str, str]:
    """Drop cleared attributes (None or blank) from a selection."""
    if not selection:
        return {}
    return {
        name: value
        for name, value in selection.items()
        if isinstance(value, str) and value.strip()
    }


def select_attribute(
    selection: Optional[Mapping[str, Optional[str]]],
    name: str,
    value: Optional[str],
) -> Dict[str, str]:
    """Return a new selection with `name` set to `value`, or removed when value is empty."""
    updated = clean_selection(selection)
    if value is None or not str(value).strip():
        updated.pop(name, None)
    else:
        updated[name] = value
    return updated


def is_complete(attribute_definitions: Mapping[str, List[str]], selection: Mapping[str, Optional[str]]) -> bool:
    if not attribute_definitions:
        return False
    selected = clean_selection(selection)
    return len(selected) == len(selection or {}) and set(selected) == set(attribute_definitions)


def find_match(variants: Iterable[Any], selection: Mapping[str, str]) -> Optional[ProductVariant]:
    """
    Return the active variant whose combination equals `selection` on every key.

    Inactive matches are ignored. Raises AmbiguousVariantError when more
    than one active variant matches.
    """
    matches = [
        v for v in coerce_variants(variants)
        if v.is_active and all(v.attribute_combination.get(k) == val for k, val in selection.items())
    ]
    if len(matches) > 1:
        raise AmbiguousVariantError(selection, len(matches), skus=[m.sku for m in matches])
    return matches[0] if matches else None


def is_option_available(variants: Iterable[Any], attribute: str, value: str) -> bool:
    return any(
        v.is_available and v.attribute_combination.get(attribute) == value
        for v in coerce_variants(variants)
    )


def option_availability(
    attribute_definitions: Mapping[str, List[str]],
    variants: Iterable[Any],
) -> Dict[str, Dict[str, bool]]:
    """Availability of every declared value, keyed attribute -> value -> bool."""
    variants = coerce_variants(variants)
    return {
        attribute: {value: is_option_available(variants, attribute, value) for value in values}
        for attribute, values in (attribute_definitions or {}).items()
    }


def effective_price(variant: ProductVariant, base_price: Optional[float]) -> Optional[float]:
    if variant.price is not None:
        return variant.price
    return float(base_price) if base_price is not None else None


def resolve(
    attribute_definitions: Mapping[str, List[str]],
    variants: Iterable[Any],
    selection: Optional[Mapping[str, Optional[str]]],
    base_price: Optional[float] = None,
) -> VariantResolution:
    """Resolve `selection` to a state, a variant when one is purchasable, and option availability."""
    variants = coerce_variants(variants)
    selected = clean_selection(selection)
    availability = option_availability(attribute_definitions, variants)

    if not selected:
        return VariantResolution(VariantSelectionState.EMPTY, option_availability=availability)

    if not is_complete(attribute_definitions, selected):
        return VariantResolution(VariantSelectionState.PARTIAL, option_availability=availability)

    match = find_match(variants, selected)
    if match is None or not match.is_available:
        return VariantResolution(VariantSelectionState.UNAVAILABLE, option_availability=availability)

    return VariantResolution(
        VariantSelectionState.RESOLVED,
        variant=match,
        effective_price=effective_price(match, base_price),
        stock_quantity=match.stock_quantity,
        option_availability=availability,
    )
