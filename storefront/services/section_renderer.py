"""
Section Renderer

Pure transform from a stored homepage section to its render model. Dispatch
is on the section `type`; content is read loosely so that a section with
missing or malformed fields still renders, and a section whose type is not
known renders as an explicit placeholder instead of failing the page.

List items may reference their entity either as a populated dict (see
catalog_population) or as a bare id. Display fields resolve as:

    image:  item.imageUrl > first entity image > placeholder
    link:   item.link > /products/<slug|id> or /categories/<slug|id> > "#"
    title:  item.title > entity name
"""
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from storefront.core.config import settings
from storefront.schemas.homepage import (
    BLOCK_TYPES,
    ITEM_TYPE_CATEGORY,
    ITEM_TYPE_CUSTOM_LINK,
    ITEM_TYPE_PRODUCT,
    BlockSectionRender,
    HtmlSectionRender,
    ItemListSectionRender,
    RenderedButton,
    RenderedItem,
    UnsupportedSectionRender,
    entity_item_type,
)

logger = logging.getLogger(__name__)

NULL_LINK = "#"
EMPTY_PRODUCTS_MESSAGE = "No products to display in this section."
EMPTY_CATEGORIES_MESSAGE = "No categories to display."
EMPTY_HTML_MESSAGE = "No HTML content provided for this section."

ENTITY_PATHS = {
    ITEM_TYPE_PRODUCT: "/products",
    ITEM_TYPE_CATEGORY: "/categories",
}


def _get(section: Any, name: str) -> Any:
    if isinstance(section, dict):
        return section.get(name)
    return getattr(section, name, None)


def _text(value: Any) -> Optional[str]:
    """Non-empty string or None; anything else in a stored document is ignored."""
    if isinstance(value, str) and value.strip():
        return value
    return None


def _record_id(value: Any) -> Optional[str]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, str)) and str(value).strip():
        return str(value).strip()
    return None


def _placeholder(entity_kind: Optional[str]) -> str:
    if entity_kind == ITEM_TYPE_CATEGORY:
        return settings.CATEGORY_PLACEHOLDER_IMAGE
    return settings.PRODUCT_PLACEHOLDER_IMAGE


def _entity_image(entity: Dict[str, Any], entity_kind: str) -> Optional[str]:
    if entity_kind == ITEM_TYPE_CATEGORY:
        return _text(entity.get("image_url"))
    images = entity.get("images")
    if isinstance(images, list) and images:
        first = images[0]
        if isinstance(first, dict):
            return _text(first.get("url"))
        return _text(first)
    return None


def _entity_link(entity: Dict[str, Any], entity_kind: str) -> Optional[str]:
    base = ENTITY_PATHS.get(entity_kind)
    if base is None:
        return None
    ref = _text(entity.get("slug")) or _record_id(entity.get("id"))
    if ref is None:
        return None
    return f"{base}/{ref}"


def _entity_price(entity: Dict[str, Any]) -> Optional[float]:
    price = entity.get("price")
    if isinstance(price, bool) or price is None:
        return None
    try:
        return float(price)
    except (TypeError, ValueError):
        return None


def render_item(item: Dict[str, Any], index: int, entity_kind: str) -> RenderedItem:
    """Resolve one list item against its (possibly unpopulated) entity reference."""
    item_type = _text(item.get("itemType")) or entity_kind
    reference = None if item_type == ITEM_TYPE_CUSTOM_LINK else item.get("itemId")

    entity = reference if isinstance(reference, dict) else {}
    entity_id = _record_id(entity.get("id")) if entity else _record_id(reference)

    if entity:
        image = _text(item.get("imageUrl")) or _entity_image(entity, entity_kind)
        link = _text(item.get("link")) or _entity_link(entity, entity_kind)
        title = _text(item.get("title")) or _text(entity.get("name"))
        price = _entity_price(entity) if entity_kind == ITEM_TYPE_PRODUCT else None
    else:
        # Bare or missing reference: nothing to read from the entity
        image = _text(item.get("imageUrl"))
        link = _text(item.get("link"))
        title = _text(item.get("title"))
        price = None

    return RenderedItem(
        key=entity_id if entity_id is not None else f"item-{index}",
        item_type=item_type,
        item_id=entity_id,
        title=title,
        subtitle=_text(item.get("subtitle")),
        image_url=image or _placeholder(entity_kind),
        link=link or NULL_LINK,
        price=price,
    )


def render_items(items: Any, entity_kind: str) -> List[RenderedItem]:
    if not isinstance(items, list):
        return []

    rendered = []
    seen_keys = set()
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            logger.debug(f"Skipping non-object list item at index {index}")
            continue
        rendered_item = render_item(item, index, entity_kind)
        # The same entity may appear twice; keys must stay unique per list
        if rendered_item.key in seen_keys:
            rendered_item.key = f"{rendered_item.key}-{index}"
        seen_keys.add(rendered_item.key)
        rendered.append(rendered_item)
    return rendered


# =============================================================================
# RENDERERS BY TYPE
# =============================================================================

def _render_block(section_id: Optional[int], section_type: str, content: Dict[str, Any]) -> BlockSectionRender:
    button_text = _text(content.get("buttonText"))
    button_link = _text(content.get("buttonLink"))
    button = RenderedButton(text=button_text, link=button_link) if button_text and button_link else None

    return BlockSectionRender(
        id=section_id,
        type=section_type,
        title=_text(content.get("title")),
        subtitle=_text(content.get("subtitle")),
        text=_text(content.get("text")),
        image_url=_text(content.get("imageUrl")),
        video_url=_text(content.get("videoUrl")),
        button=button,
    )


def _render_item_list(section_id: Optional[int], section_type: str, content: Dict[str, Any]) -> ItemListSectionRender:
    entity_kind = entity_item_type(section_type)
    items = render_items(content.get("items"), entity_kind)

    empty_message = None
    if not items:
        empty_message = EMPTY_CATEGORIES_MESSAGE if entity_kind == ITEM_TYPE_CATEGORY else EMPTY_PRODUCTS_MESSAGE

    return ItemListSectionRender(
        id=section_id,
        type=section_type,
        title=_text(content.get("title")),
        subtitle=_text(content.get("subtitle")),
        items=items,
        empty_message=empty_message,
    )


def _render_custom_html(section_id: Optional[int], section_type: str, content: Dict[str, Any]) -> HtmlSectionRender:
    html = content.get("htmlContent")
    if not isinstance(html, str) or not html.strip():
        return HtmlSectionRender(id=section_id, type=section_type, empty_message=EMPTY_HTML_MESSAGE)
    return HtmlSectionRender(id=section_id, type=section_type, html_content=html)


SECTION_RENDERERS: Dict[str, Callable[[Optional[int], str, Dict[str, Any]], Any]] = {
    **{t: _render_block for t in BLOCK_TYPES},
    "productCarousel": _render_item_list,
    "featuredProducts": _render_item_list,
    "categoryList": _render_item_list,
    "customHtml": _render_custom_html,
}


def render_section(section: Any):
    """
    Render one section (ORM row or dict). Never raises for bad content.

    Unknown types produce an UnsupportedSectionRender and a warning.
    """
    section_type = _get(section, "type")
    section_id = _get(section, "id")
    if isinstance(section_id, bool) or not isinstance(section_id, int):
        section_id = None

    renderer = SECTION_RENDERERS.get(section_type) if isinstance(section_type, str) else None
    if renderer is None:
        logger.warning(f"Unsupported homepage section type {section_type!r} (section {section_id})")
        return UnsupportedSectionRender(
            id=section_id,
            type=section_type if isinstance(section_type, str) else None,
            message=f"Unsupported section type: {section_type}",
        )

    content = _get(section, "content")
    if not isinstance(content, dict):
        content = {}
    return renderer(section_id, section_type, content)


def render_sections(sections: Iterable[Any]) -> list:
    """Render a page of sections in the given order."""
    return [render_section(section) for section in sections]
