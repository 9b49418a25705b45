"""
Homepage Section Schemas

Section content is a tagged union keyed by the section `type`:

    hero / banner / promotionalBlock     -> BlockContent
    productCarousel / featuredProducts   -> ItemListContent (Product items)
    categoryList                         -> ItemListContent (Category items)
    customHtml                           -> CustomHtmlContent

`validate_section_content` is the single entry point used by the store on
every write; the renderer reads stored documents loosely and never relies on
this validation having happened.
"""
from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from storefront.core.exceptions import InvalidSectionTypeError, ValidationError
from storefront.core.utils import parse_record_id
from storefront.models.homepage_section import SECTION_TYPES
from storefront.schemas.common import CamelModel


ITEM_TYPE_PRODUCT = "Product"
ITEM_TYPE_CATEGORY = "Category"
ITEM_TYPE_CUSTOM_LINK = "CustomLink"

BLOCK_TYPES = ("hero", "banner", "promotionalBlock")
PRODUCT_LIST_TYPES = ("productCarousel", "featuredProducts")
CATEGORY_LIST_TYPES = ("categoryList",)
ITEM_LIST_TYPES = PRODUCT_LIST_TYPES + CATEGORY_LIST_TYPES


# =============================================================================
# CONTENT MODEL
# =============================================================================

class ContentModel(CamelModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


class SectionItem(ContentModel):
    """One entry of a carousel or list; display fields override the entity's."""
    item_id: Optional[str] = None
    item_type: Optional[Literal["Product", "Category", "CustomLink"]] = None
    image_url: Optional[str] = None
    title: Optional[str] = None
    subtitle: Optional[str] = None
    link: Optional[str] = None

    @field_validator("item_id", mode="before")
    @classmethod
    def coerce_item_id(cls, v):
        if isinstance(v, bool):
            raise ValueError("itemId must be an id, not a boolean")
        if isinstance(v, int):
            return str(v)
        return v


class BlockContent(ContentModel):
    title: Optional[str] = None
    subtitle: Optional[str] = None
    text: Optional[str] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    button_text: Optional[str] = None
    button_link: Optional[str] = None


class ItemListContent(ContentModel):
    title: Optional[str] = None
    subtitle: Optional[str] = None
    items: List[SectionItem] = Field(default_factory=list)


class CustomHtmlContent(CamelModel):
    # Raw markup is stored verbatim, whitespace included
    model_config = ConfigDict(extra="ignore")
    html_content: Optional[str] = None


CONTENT_MODEL_BY_TYPE: Dict[str, Type[BaseModel]] = {
    **{t: BlockContent for t in BLOCK_TYPES},
    **{t: ItemListContent for t in ITEM_LIST_TYPES},
    "customHtml": CustomHtmlContent,
}


def entity_item_type(section_type: str) -> Optional[str]:
    """The entity kind referenced by list items of this section type."""
    if section_type in PRODUCT_LIST_TYPES:
        return ITEM_TYPE_PRODUCT
    if section_type in CATEGORY_LIST_TYPES:
        return ITEM_TYPE_CATEGORY
    return None


def validate_section_type(section_type: Any) -> str:
    if section_type not in SECTION_TYPES:
        raise InvalidSectionTypeError(section_type, list(SECTION_TYPES))
    return section_type


def validate_section_content(section_type: str, content: Any) -> Dict[str, Any]:
    """
    Validate a raw content document against the shape of `section_type`.

    Returns the normalized document (camelCase keys, unset fields dropped).
    Raises ValidationError for a non-object payload, wrongly typed fields or
    a malformed item reference.
    """
    validate_section_type(section_type)
    if content is None:
        content = {}
    if not isinstance(content, dict):
        raise ValidationError("Section content must be an object", field="content")

    model = CONTENT_MODEL_BY_TYPE[section_type]
    try:
        parsed = model.model_validate(content)
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ValidationError(
            f"Invalid content for {section_type} section: {location}: {first['msg']}",
            field=f"content.{location}" if location else "content",
        )

    if isinstance(parsed, ItemListContent):
        _validate_items(section_type, parsed.items)

    return parsed.model_dump(by_alias=True, exclude_none=True)


def _validate_items(section_type: str, items: List[SectionItem]) -> None:
    expected = entity_item_type(section_type)
    for index, item in enumerate(items):
        field = f"content.items.{index}"
        if item.item_type is None:
            item.item_type = expected
        if item.item_type == ITEM_TYPE_CUSTOM_LINK:
            if not item.title or not item.link:
                raise ValidationError("CustomLink items require a title and a link", field=field)
            continue
        if item.item_type != expected:
            raise ValidationError(
                f"{section_type} items must reference a {expected}, got {item.item_type}",
                field=f"{field}.itemType",
            )
        if parse_record_id(item.item_id) is None:
            raise ValidationError(
                f"Malformed {expected} reference: {item.item_id!r}",
                field=f"{field}.itemId",
            )


# =============================================================================
# STORE REQUESTS / RESPONSES
# =============================================================================

class HomepageSectionCreate(CamelModel):
    name: str
    type: str
    content: Optional[Dict[str, Any]] = None
    is_visible: bool = True
    order: int = 0


class HomepageSectionUpdate(CamelModel):
    """Partial patch; only fields present in the request are applied."""
    name: Optional[str] = None
    type: Optional[str] = None
    content: Optional[Dict[str, Any]] = None
    is_visible: Optional[bool] = None
    order: Optional[int] = None


class HomepageSectionVisibilityUpdate(CamelModel):
    is_visible: bool


class HomepageSectionResponse(CamelModel):
    id: int
    name: str
    type: str
    order: int
    is_visible: bool
    content: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BulkReorderResponse(CamelModel):
    """
    Outcome of a best-effort reorder.

    Entries that were malformed or referenced a missing section are listed in
    `skipped`; everything in `applied` was persisted.
    """
    applied: List[int] = Field(default_factory=list)
    skipped: List[Any] = Field(default_factory=list)
    message: str = "Homepage sections order updated."


# =============================================================================
# RENDER MODEL
# =============================================================================

class RenderedButton(CamelModel):
    text: str
    link: str


class RenderedItem(CamelModel):
    key: str
    item_type: Optional[str] = None
    item_id: Optional[str] = None
    title: Optional[str] = None
    subtitle: Optional[str] = None
    image_url: str
    link: str
    price: Optional[float] = None


class BlockSectionRender(CamelModel):
    kind: Literal["block"] = "block"
    id: Optional[int] = None
    type: str
    title: Optional[str] = None
    subtitle: Optional[str] = None
    text: Optional[str] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    button: Optional[RenderedButton] = None


class ItemListSectionRender(CamelModel):
    kind: Literal["itemList"] = "itemList"
    id: Optional[int] = None
    type: str
    title: Optional[str] = None
    subtitle: Optional[str] = None
    items: List[RenderedItem] = Field(default_factory=list)
    empty_message: Optional[str] = None


class HtmlSectionRender(CamelModel):
    kind: Literal["html"] = "html"
    id: Optional[int] = None
    type: str
    html_content: Optional[str] = None
    empty_message: Optional[str] = None


class UnsupportedSectionRender(CamelModel):
    kind: Literal["unsupported"] = "unsupported"
    id: Optional[int] = None
    type: Optional[str] = None
    message: str


RenderModel = Annotated[
    Union[BlockSectionRender, ItemListSectionRender, HtmlSectionRender, UnsupportedSectionRender],
    Field(discriminator="kind"),
]


class HomepageRenderResponse(CamelModel):
    sections: List[RenderModel]
