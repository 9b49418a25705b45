"""
Homepage Service
Business logic for the homepage section store and the storefront read path.
"""
import logging
from typing import Any, Dict, List, Union

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import NotFoundError, ValidationError
from storefront.core.redis_client import (
    HOMEPAGE_RENDER_KEY,
    get_cached,
    invalidate_homepage_cache,
    set_cached,
)
from storefront.core.utils import parse_record_id
from storefront.models.homepage_section import HomepageSection
from storefront.schemas.homepage import (
    BulkReorderResponse,
    HomepageRenderResponse,
    HomepageSectionCreate,
    HomepageSectionUpdate,
    validate_section_content,
    validate_section_type,
)
from storefront.services.catalog_population import populate_sections
from storefront.services.section_renderer import render_sections

logger = logging.getLogger(__name__)


def _as_dict(data: Union[BaseModel, Dict[str, Any]], exclude_unset: bool = False) -> Dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_unset=exclude_unset)
    return dict(data)


def _validate_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Section name is required", field="name")
    return name.strip()


def _validate_order(order: Any) -> int:
    if isinstance(order, bool) or not isinstance(order, int):
        raise ValidationError("Section order must be an integer", field="order")
    return order


def _validate_visibility(is_visible: Any) -> bool:
    if not isinstance(is_visible, bool):
        raise ValidationError("Section visibility must be a boolean", field="isVisible")
    return is_visible


class HomepageSectionService:
    """
    Ordered, visibility-aware store of homepage sections.

    Sections are returned ascending by `order`; equal orders keep insertion
    order (primary key). Every write invalidates the cached storefront render.
    """

    @staticmethod
    async def list_sections(db: AsyncSession, visible_only: bool = False) -> List[HomepageSection]:
        query = select(HomepageSection)
        if visible_only:
            query = query.where(HomepageSection.is_visible == True)  # noqa: E712
        query = query.order_by(HomepageSection.order.asc(), HomepageSection.id.asc())
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def get_section(db: AsyncSession, section_id: Any) -> HomepageSection:
        record_id = parse_record_id(section_id)
        section = await db.get(HomepageSection, record_id) if record_id is not None else None
        if section is None:
            raise NotFoundError("HomepageSection", section_id)
        return section

    @staticmethod
    async def create_section(
        db: AsyncSession,
        data: Union[HomepageSectionCreate, Dict[str, Any]],
    ) -> HomepageSection:
        """Validate and persist a new section; `order` defaults to 0 and `isVisible` to True."""
        fields = _as_dict(data)
        name = _validate_name(fields.get("name"))
        section_type = validate_section_type(fields.get("type"))
        content = validate_section_content(section_type, fields.get("content"))
        is_visible = fields.get("is_visible")
        order = fields.get("order")

        section = HomepageSection(
            name=name,
            type=section_type,
            content=content,
            is_visible=True if is_visible is None else _validate_visibility(is_visible),
            order=0 if order is None else _validate_order(order),
        )
        db.add(section)
        await db.commit()
        await db.refresh(section)
        await invalidate_homepage_cache()

        logger.info(f"Created homepage section {section.id} ({section.type}) '{section.name}'")
        return section

    @staticmethod
    async def update_section(
        db: AsyncSession,
        section_id: Any,
        patch: Union[HomepageSectionUpdate, Dict[str, Any]],
    ) -> HomepageSection:
        """
        Apply a partial patch. Only keys present in `patch` change.

        Changing `type` re-validates the (new or existing) content against the
        new type. All fields are validated before any is applied.
        """
        section = await HomepageSectionService.get_section(db, section_id)
        fields = _as_dict(patch, exclude_unset=True)

        changes: Dict[str, Any] = {}
        if "name" in fields:
            changes["name"] = _validate_name(fields["name"])
        if "type" in fields:
            changes["type"] = validate_section_type(fields["type"])
        if "is_visible" in fields:
            changes["is_visible"] = _validate_visibility(fields["is_visible"])
        if "order" in fields:
            changes["order"] = _validate_order(fields["order"])
        if "content" in fields or "type" in fields:
            section_type = changes.get("type", section.type)
            raw_content = fields["content"] if "content" in fields else section.content
            changes["content"] = validate_section_content(section_type, raw_content)

        for key, value in changes.items():
            setattr(section, key, value)

        await db.commit()
        await db.refresh(section)
        await invalidate_homepage_cache()
        return section

    @staticmethod
    async def set_visibility(db: AsyncSession, section_id: Any, is_visible: bool) -> HomepageSection:
        return await HomepageSectionService.update_section(db, section_id, {"is_visible": is_visible})

    @staticmethod
    async def delete_section(db: AsyncSession, section_id: Any) -> None:
        section = await HomepageSectionService.get_section(db, section_id)
        await db.delete(section)
        await db.commit()
        await invalidate_homepage_cache()
        logger.info(f"Deleted homepage section {section_id}")

    @staticmethod
    async def bulk_reorder(db: AsyncSession, entries: List[Any]) -> BulkReorderResponse:
        """
        Best-effort reorder from a list of {id, order} entries.

        Malformed entries (non-integer id or order) and ids that do not exist
        are skipped and reported, never raised; the remaining entries are
        applied. Applying the same payload twice yields the same order.
        """
        orders: Dict[int, int] = {}
        skipped: List[Any] = []

        for entry in entries or []:
            if not isinstance(entry, dict):
                skipped.append(entry)
                continue
            record_id = parse_record_id(entry.get("id", entry.get("_id")))
            order = entry.get("order")
            if record_id is None or isinstance(order, bool) or not isinstance(order, int):
                skipped.append(entry)
                continue
            orders[record_id] = order

        applied: List[int] = []
        if orders:
            result = await db.execute(select(HomepageSection).where(HomepageSection.id.in_(list(orders))))
            found = {section.id: section for section in result.scalars().all()}
            for record_id, order in orders.items():
                section = found.get(record_id)
                if section is None:
                    skipped.append({"id": record_id, "order": order})
                    continue
                section.order = order
                applied.append(record_id)
            await db.commit()
            await invalidate_homepage_cache()

        if skipped:
            logger.warning(f"Homepage reorder skipped {len(skipped)} entr{'y' if len(skipped) == 1 else 'ies'}: {skipped}")

        message = "Homepage sections order updated."
        if skipped:
            message = f"Homepage sections order partially updated; {len(skipped)} entries skipped."
        return BulkReorderResponse(applied=applied, skipped=skipped, message=message)

    @staticmethod
    async def get_storefront_sections(db: AsyncSession) -> Dict[str, Any]:
        """Rendered visible sections in order, served from cache when available."""
        cached = await get_cached(HOMEPAGE_RENDER_KEY)
        if cached:
            return cached

        sections = await HomepageSectionService.list_sections(db, visible_only=True)
        documents = await populate_sections(db, sections)
        response = HomepageRenderResponse(sections=render_sections(documents))

        payload = response.model_dump(mode="json", by_alias=True)
        await set_cached(HOMEPAGE_RENDER_KEY, payload)
        return payload
