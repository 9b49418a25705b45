"""
Product Variant Schemas

A product's variant configuration is stored as two JSON documents on the
product row: `attribute_definitions` (name -> ordered allowed values) and
`variants` (one document per attribute combination).
"""
from typing import Dict, List, Optional

from pydantic import Field, field_validator

from storefront.schemas.common import CamelModel


class ProductVariant(CamelModel):
    id: Optional[str] = None
    attribute_combination: Dict[str, str] = Field(default_factory=dict)
    sku: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    stock_quantity: int = Field(default=0, ge=0)
    is_active: bool = True

    @property
    def is_available(self) -> bool:
        return self.is_active and self.stock_quantity > 0


class VariantConfig(CamelModel):
    """Admin write payload: replaces definitions and variants together."""
    has_variants: bool = True
    attribute_definitions: Dict[str, List[str]] = Field(default_factory=dict)
    variants: List[ProductVariant] = Field(default_factory=list)


class VariantConfigResponse(VariantConfig):
    product_id: int
    base_price: float


class VariantGenerateRequest(CamelModel):
    attribute_definitions: Dict[str, List[str]]


class VariantResolveRequest(CamelModel):
    selection: Dict[str, Optional[str]] = Field(default_factory=dict)

    @field_validator("selection")
    @classmethod
    def drop_cleared(cls, v):
        """Cleared attributes (null or blank) are not part of the selection."""
        return {name: value for name, value in v.items() if value is not None and value.strip()}


class VariantResolveResponse(CamelModel):
    state: str
    is_complete: bool
    variant: Optional[ProductVariant] = None
    effective_price: Optional[float] = None
    stock_quantity: Optional[int] = None
    option_availability: Dict[str, Dict[str, bool]] = Field(default_factory=dict)
