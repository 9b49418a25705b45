"""
Product Page Layout Schemas
"""
from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field, StrictBool, StrictInt

from storefront.schemas.common import CamelModel


class PageLayoutSlot(CamelModel):
    """One named region of the product detail page."""
    model_config = ConfigDict(str_strip_whitespace=True)

    section_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    is_visible: StrictBool
    order: StrictInt


class PublicPageLayoutSlot(CamelModel):
    """What the storefront sees: identity and label only."""
    section_id: str
    name: str


class ProductPageLayoutResponse(CamelModel):
    sections: List[PublicPageLayoutSlot]


class ProductPageLayoutConfigResponse(CamelModel):
    """Full admin view of the singleton configuration."""
    sections: List[PageLayoutSlot]
    updated_at: Optional[str] = None


class ProductPageLayoutUpdateRequest(CamelModel):
    # Slots are validated by the service so direct callers get the same errors
    sections: List[Dict[str, Any]]
