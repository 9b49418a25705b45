import pytest

from storefront.core.exceptions import AmbiguousVariantError
from storefront.schemas.variant import ProductVariant
from storefront.services.variant_resolver import (
    VariantSelectionState,
    effective_price,
    find_match,
    is_complete,
    is_option_available,
    option_availability,
    resolve,
    select_attribute,
)

DEFINITIONS = {"Color": ["Red", "Blue"], "Size": ["S", "M"]}

VARIANTS = [
    {"attributeCombination": {"Color": "Red", "Size": "S"}, "sku": "TEE-RED-S", "stockQuantity": 3, "isActive": True},
    {"attributeCombination": {"Color": "Red", "Size": "M"}, "sku": "TEE-RED-M", "stockQuantity": 0, "isActive": True},
]


class TestCompleteness:
    def test_partial_selection_is_never_resolved(self):
        result = resolve(DEFINITIONS, VARIANTS, {"Color": "Red"})
        assert result.state == VariantSelectionState.PARTIAL
        assert result.variant is None
        assert not result.is_complete

    def test_empty_selection(self):
        assert resolve(DEFINITIONS, VARIANTS, {}).state == VariantSelectionState.EMPTY
        assert resolve(DEFINITIONS, VARIANTS, None).state == VariantSelectionState.EMPTY
        assert resolve(DEFINITIONS, VARIANTS, {"Color": None, "Size": ""}).state == VariantSelectionState.EMPTY

    def test_extra_key_is_incomplete(self):
        selection = {"Color": "Red", "Size": "S", "Material": "Cotton"}
        assert not is_complete(DEFINITIONS, selection)
        assert resolve(DEFINITIONS, VARIANTS, selection).state == VariantSelectionState.PARTIAL

    def test_blank_value_is_incomplete(self):
        assert not is_complete(DEFINITIONS, {"Color": "Red", "Size": " "})

    def test_product_without_attributes_never_completes(self):
        assert not is_complete({}, {})
        assert resolve({}, [], {"Color": "Red"}).state == VariantSelectionState.PARTIAL


class TestResolution:
    def test_in_stock_match_resolves(self):
        result = resolve(DEFINITIONS, VARIANTS, {"Color": "Red", "Size": "S"}, base_price=20)
        assert result.state == VariantSelectionState.RESOLVED
        assert result.variant.sku == "TEE-RED-S"
        assert result.stock_quantity == 3
        assert result.effective_price == 20.0
        assert result.is_complete

    def test_out_of_stock_match_is_unavailable(self):
        result = resolve(DEFINITIONS, VARIANTS, {"Color": "Red", "Size": "M"})
        assert result.state == VariantSelectionState.UNAVAILABLE
        assert result.variant is None
        assert result.is_complete

    def test_missing_combination_is_unavailable(self):
        result = resolve(DEFINITIONS, VARIANTS, {"Color": "Blue", "Size": "S"})
        assert result.state == VariantSelectionState.UNAVAILABLE

    def test_inactive_match_is_unavailable(self):
        variants = [{"attributeCombination": {"Color": "Red", "Size": "S"}, "stockQuantity": 9, "isActive": False}]
        result = resolve(DEFINITIONS, variants, {"Color": "Red", "Size": "S"})
        assert result.state == VariantSelectionState.UNAVAILABLE

    def test_variant_price_overrides_base_price(self):
        variants = [{"attributeCombination": {"Color": "Blue", "Size": "M"}, "price": 24.5, "stockQuantity": 1}]
        result = resolve(DEFINITIONS, variants, {"Color": "Blue", "Size": "M"}, base_price=20)
        assert result.effective_price == 24.5

    def test_two_active_matches_are_ambiguous(self):
        duplicated = VARIANTS + [
            {"attributeCombination": {"Color": "Red", "Size": "S"}, "sku": "TEE-RED-S-2", "stockQuantity": 1},
        ]
        with pytest.raises(AmbiguousVariantError) as exc_info:
            resolve(DEFINITIONS, duplicated, {"Color": "Red", "Size": "S"})
        assert exc_info.value.details["match_count"] == 2
        assert exc_info.value.details["skus"] == ["TEE-RED-S", "TEE-RED-S-2"]

    def test_inactive_duplicate_is_not_ambiguous(self):
        duplicated = VARIANTS + [
            {"attributeCombination": {"Color": "Red", "Size": "S"}, "stockQuantity": 5, "isActive": False},
        ]
        match = find_match(duplicated, {"Color": "Red", "Size": "S"})
        assert match.sku == "TEE-RED-S"

    def test_accepts_variant_models(self):
        variants = [ProductVariant(attribute_combination={"Color": "Blue", "Size": "S"}, stock_quantity=2)]
        result = resolve(DEFINITIONS, variants, {"Color": "Blue", "Size": "S"})
        assert result.state == VariantSelectionState.RESOLVED


class TestOptionAvailability:
    def test_availability_considers_each_value_in_isolation(self):
        availability = option_availability(DEFINITIONS, VARIANTS)
        assert availability == {
            "Color": {"Red": True, "Blue": False},
            "Size": {"S": True, "M": False},
        }

    def test_value_available_through_another_attribute_combination(self):
        """Size=M shows as available under Color=Red once any in-stock M exists, even Blue/M."""
        variants = VARIANTS + [
            {"attributeCombination": {"Color": "Blue", "Size": "M"}, "stockQuantity": 2, "isActive": True},
        ]
        result = resolve(DEFINITIONS, variants, {"Color": "Red"})
        assert result.option_availability["Size"]["M"] is True

        # The full combination still reveals the real state
        completed = resolve(DEFINITIONS, variants, select_attribute({"Color": "Red"}, "Size", "M"))
        assert completed.state == VariantSelectionState.UNAVAILABLE

    def test_inactive_variants_do_not_count(self):
        variants = [{"attributeCombination": {"Color": "Blue", "Size": "S"}, "stockQuantity": 4, "isActive": False}]
        assert not is_option_available(variants, "Color", "Blue")


class TestSelectionMutation:
    def test_select_upserts(self):
        selection = select_attribute({"Color": "Red"}, "Color", "Blue")
        assert selection == {"Color": "Blue"}
        assert select_attribute(selection, "Size", "S") == {"Color": "Blue", "Size": "S"}

    def test_clearing_removes_key(self):
        assert select_attribute({"Color": "Red", "Size": "S"}, "Size", None) == {"Color": "Red"}
        assert select_attribute({"Color": "Red"}, "Color", "") == {}

    def test_does_not_mutate_input(self):
        selection = {"Color": "Red"}
        select_attribute(selection, "Size", "M")
        assert selection == {"Color": "Red"}

    def test_changing_a_complete_selection_returns_to_partial(self):
        selection = {"Color": "Red", "Size": "S"}
        assert resolve(DEFINITIONS, VARIANTS, selection).state == VariantSelectionState.RESOLVED
        selection = select_attribute(selection, "Size", None)
        assert resolve(DEFINITIONS, VARIANTS, selection).state == VariantSelectionState.PARTIAL


def test_effective_price_falls_back_to_base():
    variant = ProductVariant(attribute_combination={"Color": "Red"})
    assert effective_price(variant, 19.99) == 19.99
    assert effective_price(variant, None) is None
