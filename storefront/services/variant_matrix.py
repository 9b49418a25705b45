"""
Variant matrix

Admin-side helpers for authoring a product's variants: attribute value
normalisation, generation of the full combination matrix and validation of
a variant configuration before it is written.
"""
import itertools
import logging
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from storefront.core.exceptions import ValidationError
from storefront.schemas.variant import ProductVariant
from storefront.services.variant_resolver import coerce_variants

logger = logging.getLogger(__name__)


def normalize_attribute_values(values: Iterable[Any]) -> List[str]:
    """Trim values, drop empties and duplicates; first occurrence wins."""
    normalized = []
    for value in values or []:
        if value is None:
            continue
        value = str(value).strip()
        if value and value not in normalized:
            normalized.append(value)
    return normalized


def normalize_attribute_definitions(definitions: Mapping[str, Iterable[Any]]) -> Dict[str, List[str]]:
    """Normalise every attribute's values; attributes left with no values are dropped."""
    normalized = {}
    for name, values in (definitions or {}).items():
        name = str(name).strip()
        cleaned = normalize_attribute_values(values)
        if name and cleaned:
            normalized[name] = cleaned
    return normalized


def combination_key(combination: Mapping[str, str]) -> Tuple[Tuple[str, str], ...]:
    return tuple(sorted(combination.items()))


def generate_variant_matrix(
    attribute_definitions: Mapping[str, List[str]],
    existing_variants: Iterable[Any] = (),
) -> List[ProductVariant]:
    """
    Every combination of the declared attribute values, in definition order.

    Existing variants with an identical combination are kept as they are;
    new combinations start active with zero stock and no price override.
    """
    definitions = normalize_attribute_definitions(attribute_definitions)
    if not definitions:
        return []

    existing = {}
    for variant in coerce_variants(existing_variants):
        existing.setdefault(combination_key(variant.attribute_combination), variant)

    names = list(definitions)
    matrix = []
    for values in itertools.product(*(definitions[name] for name in names)):
        combination = dict(zip(names, values))
        variant = existing.get(combination_key(combination))
        if variant is None:
            variant = ProductVariant(attribute_combination=combination, stock_quantity=0, is_active=True)
        matrix.append(variant)

    logger.debug(f"Generated {len(matrix)} variant combinations ({len(existing)} existing)")
    return matrix


def validate_variant_config(
    attribute_definitions: Mapping[str, List[str]],
    variants: Iterable[Any],
) -> List[ProductVariant]:
    """
    Check a variant configuration before it is persisted.

    Every variant must cover exactly the declared attributes with allowed
    values, and no two active variants may share a combination.
    """
    variants = coerce_variants(variants)
    declared = set(attribute_definitions)
    active_keys = {}

    for index, variant in enumerate(variants):
        field = f"variants.{index}.attributeCombination"
        combination = variant.attribute_combination

        if set(combination) != declared:
            missing = sorted(declared - set(combination))
            extra = sorted(set(combination) - declared)
            raise ValidationError(
                f"Variant {index} must cover exactly the declared attributes "
                f"(missing: {missing}, unexpected: {extra})",
                field=field,
            )

        for name, value in combination.items():
            if value not in attribute_definitions[name]:
                raise ValidationError(
                    f"Variant {index} uses {value!r} which is not an allowed value of {name}",
                    field=f"{field}.{name}",
                )

        if not variant.is_active:
            continue
        key = combination_key(combination)
        if key in active_keys:
            raise ValidationError(
                f"Variants {active_keys[key]} and {index} are both active with combination {combination}",
                field=field,
            )
        active_keys[key] = index

    return variants
