"""
Catalog population for homepage sections

The renderer accepts list items whose `itemId` is either a bare id or a
populated entity dict. This module performs the population step for the
storefront read path: all referenced products and categories are loaded in
two queries and substituted into a copy of each section's content.

Only active products and published categories are substituted; anything
else stays a bare reference and renders with placeholders.
"""
import copy
import logging
from typing import Any, Dict, Iterable, List, Set

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.utils import parse_record_id
from storefront.models.category import Category
from storefront.models.product import Product
from storefront.schemas.homepage import (
    ITEM_LIST_TYPES,
    ITEM_TYPE_CATEGORY,
    ITEM_TYPE_PRODUCT,
    entity_item_type,
)

logger = logging.getLogger(__name__)


def product_entity(product: Product) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "slug": product.slug,
        "price": float(product.price) if product.price is not None else None,
        "images": list(product.images or []),
    }


def category_entity(category: Category) -> Dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "slug": category.slug,
        "image_url": category.image_url,
    }


def section_document(section: Any) -> Dict[str, Any]:
    """Detached dict copy of a section row, safe to mutate."""
    content = section.content if isinstance(section.content, dict) else {}
    return {
        "id": section.id,
        "name": section.name,
        "type": section.type,
        "order": section.order,
        "content": copy.deepcopy(content),
    }


def _list_items(document: Dict[str, Any]) -> List[Dict[str, Any]]:
    if document["type"] not in ITEM_LIST_TYPES:
        return []
    items = document["content"].get("items")
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


def _item_reference(item: Dict[str, Any], section_type: str):
    """(entity kind, id) for an entity item, or (None, None)."""
    kind = item.get("itemType") or entity_item_type(section_type)
    if kind not in (ITEM_TYPE_PRODUCT, ITEM_TYPE_CATEGORY):
        return None, None
    return kind, parse_record_id(item.get("itemId"))


async def populate_sections(db: AsyncSession, sections: Iterable[Any]) -> List[Dict[str, Any]]:
    """Return section documents with entity references replaced by populated dicts."""
    documents = [section_document(section) for section in sections]

    product_ids: Set[int] = set()
    category_ids: Set[int] = set()
    for document in documents:
        for item in _list_items(document):
            kind, record_id = _item_reference(item, document["type"])
            if record_id is None:
                continue
            if kind == ITEM_TYPE_PRODUCT:
                product_ids.add(record_id)
            else:
                category_ids.add(record_id)

    products = {}
    if product_ids:
        result = await db.execute(
            select(Product).where(Product.id.in_(sorted(product_ids)), Product.is_active == True)  # noqa: E712
        )
        products = {p.id: product_entity(p) for p in result.scalars().all()}

    categories = {}
    if category_ids:
        result = await db.execute(
            select(Category).where(Category.id.in_(sorted(category_ids)), Category.is_published == True)  # noqa: E712
        )
        categories = {c.id: category_entity(c) for c in result.scalars().all()}

    unresolved = 0
    for document in documents:
        for item in _list_items(document):
            kind, record_id = _item_reference(item, document["type"])
            if record_id is None:
                continue
            lookup = products if kind == ITEM_TYPE_PRODUCT else categories
            entity = lookup.get(record_id)
            if entity is None:
                unresolved += 1
                continue
            item["itemId"] = dict(entity)

    if unresolved:
        logger.info(f"{unresolved} homepage item reference(s) could not be resolved")
    return documents
