"""
Product Page Layout Service

The product detail page is assembled from named slots (images, title & price,
description, ...). Their order and visibility is one singleton JSON document
stored in site_settings under PRODUCT_PAGE_LAYOUT_KEY.

The first read with no document creates the built-in default with
INSERT ... ON CONFLICT DO NOTHING on the unique key and then re-reads, so
concurrent first reads converge on a single row.
"""
import json
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import ValidationError
from storefront.core.redis_client import (
    PRODUCT_LAYOUT_KEY,
    get_cached,
    invalidate_product_layout_cache,
    set_cached,
)
from storefront.core.utils import utcnow
from storefront.models.site_settings import SiteSettings
from storefront.schemas.product_layout import PageLayoutSlot, PublicPageLayoutSlot

logger = logging.getLogger(__name__)

PRODUCT_PAGE_LAYOUT_KEY = "product_page_layout"

DEFAULT_PRODUCT_PAGE_LAYOUT = [
    {"sectionId": "images", "name": "Product Images", "isVisible": True, "order": 0},
    {"sectionId": "titlePrice", "name": "Title & Price", "isVisible": True, "order": 1},
    {"sectionId": "description", "name": "Product Description", "isVisible": True, "order": 2},
    {"sectionId": "attributes", "name": "Custom Attributes", "isVisible": True, "order": 3},
    {"sectionId": "actions", "name": "Add to Cart Actions", "isVisible": True, "order": 4},
    {"sectionId": "reviews", "name": "Customer Reviews", "isVisible": True, "order": 5},
    {"sectionId": "relatedProducts", "name": "Related Products", "isVisible": True, "order": 6},
]


def default_slots() -> List[PageLayoutSlot]:
    return [PageLayoutSlot.model_validate(slot) for slot in DEFAULT_PRODUCT_PAGE_LAYOUT]


def sort_slots(slots: List[PageLayoutSlot]) -> List[PageLayoutSlot]:
    return sorted(slots, key=lambda slot: slot.order)


def serialize_slots(slots: List[PageLayoutSlot]) -> str:
    return json.dumps({"sections": [slot.model_dump(by_alias=True) for slot in slots]})


def validate_slots(raw_slots: Any) -> List[PageLayoutSlot]:
    """
    Validate an admin layout write.

    Each slot needs a non-empty sectionId and name, a boolean isVisible and
    an integer order; sectionIds must be unique.
    """
    if not isinstance(raw_slots, list):
        raise ValidationError("Layout sections must be a list", field="sections")

    slots = []
    seen = set()
    for index, raw in enumerate(raw_slots):
        try:
            slot = PageLayoutSlot.model_validate(raw)
        except PydanticValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            raise ValidationError(
                f"Invalid layout section at index {index}: {location}: {first['msg']}",
                field=f"sections.{index}",
            )
        if slot.section_id in seen:
            raise ValidationError(
                f"Duplicate layout section id: {slot.section_id}",
                field=f"sections.{index}.sectionId",
            )
        seen.add(slot.section_id)
        slots.append(slot)
    return slots


class ProductLayoutService:
    """Reads and writes the product page layout singleton."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_setting(self) -> Optional[SiteSettings]:
        result = await self.db.execute(
            select(SiteSettings).where(SiteSettings.key == PRODUCT_PAGE_LAYOUT_KEY)
        )
        return result.scalar_one_or_none()

    async def _insert_if_absent(self, value: str, updated_by: Optional[str] = None) -> None:
        values = dict(
            key=PRODUCT_PAGE_LAYOUT_KEY,
            value=value,
            value_type="json",
            category="layout",
            description="Product detail page section layout",
            updated_by=updated_by,
        )
        dialect = self.db.get_bind().dialect.name

        if dialect in ("postgresql", "sqlite"):
            dialect_insert = pg_insert if dialect == "postgresql" else sqlite_insert
            stmt = dialect_insert(SiteSettings).values(**values).on_conflict_do_nothing(
                index_elements=["key"]
            )
            await self.db.execute(stmt)
            await self.db.commit()
            return

        # Other backends: rely on the unique key and treat a conflict as "already there"
        try:
            await self.db.execute(insert(SiteSettings).values(**values))
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.debug(f"{PRODUCT_PAGE_LAYOUT_KEY} was created concurrently")

    @staticmethod
    def _parse_slots(setting: SiteSettings) -> List[PageLayoutSlot]:
        """Stored slots, or [] when the document is empty or unreadable."""
        try:
            data = json.loads(setting.value or "{}")
            return [PageLayoutSlot.model_validate(slot) for slot in data.get("sections") or []]
        except (ValueError, TypeError, AttributeError, PydanticValidationError) as e:
            logger.error(f"Failed to parse product page layout, restoring defaults: {e}")
            return []

    async def _ensure_layout(self) -> tuple:
        """(setting row, stored slots), creating or restoring the default when needed."""
        setting = await self._get_setting()

        if setting is None:
            await self._insert_if_absent(serialize_slots(default_slots()))
            setting = await self._get_setting()
            logger.info("Created default product page layout")

        slots = self._parse_slots(setting)
        if not slots:
            slots = default_slots()
            setting.value = serialize_slots(slots)
            setting.updated_at = utcnow()
            await self.db.commit()
            await self.db.refresh(setting)

        return setting, slots

    async def get_config(self) -> Dict[str, Any]:
        """Admin view: every slot with order and visibility, sorted by order."""
        setting, slots = await self._ensure_layout()
        return {
            "sections": sort_slots(slots),
            "updated_at": setting.updated_at.isoformat() if setting.updated_at else None,
        }

    async def get_layout(self) -> List[PublicPageLayoutSlot]:
        """Storefront view: visible slots only, sorted by order, as {sectionId, name}."""
        cached = await get_cached(PRODUCT_LAYOUT_KEY)
        if cached:
            return [PublicPageLayoutSlot.model_validate(slot) for slot in cached]

        _, slots = await self._ensure_layout()
        layout = [
            PublicPageLayoutSlot(section_id=slot.section_id, name=slot.name)
            for slot in sort_slots(slots)
            if slot.is_visible
        ]
        await set_cached(PRODUCT_LAYOUT_KEY, [slot.model_dump(by_alias=True) for slot in layout])
        return layout

    async def update_config(self, raw_slots: Any, updated_by: Optional[str] = None) -> Dict[str, Any]:
        """
        Replace the layout. Incoming slots are merged over the default slot
        set, so default slots not mentioned in the request are kept.
        """
        incoming = validate_slots(raw_slots)

        merged = {slot.section_id: slot for slot in default_slots()}
        for slot in incoming:
            merged[slot.section_id] = slot
        slots = sort_slots(list(merged.values()))
        value = serialize_slots(slots)

        setting = await self._get_setting()
        if setting is None:
            await self._insert_if_absent(value, updated_by=updated_by)
            setting = await self._get_setting()

        setting.value = value
        setting.updated_by = updated_by
        setting.updated_at = utcnow()
        await self.db.commit()
        await self.db.refresh(setting)
        await invalidate_product_layout_cache()

        logger.info(f"Product page layout updated by {updated_by or 'system'}")
        return {
            "sections": slots,
            "updated_at": setting.updated_at.isoformat() if setting.updated_at else None,
        }
