"""
Homepage API Routes
"""
from typing import Any, List

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.deps import Principal, get_current_admin, get_db
from storefront.schemas.homepage import (
    BulkReorderResponse,
    HomepageRenderResponse,
    HomepageSectionCreate,
    HomepageSectionResponse,
    HomepageSectionUpdate,
    HomepageSectionVisibilityUpdate,
)
from storefront.services.homepage_service import HomepageSectionService

router = APIRouter()


@router.get("/homepage/sections", response_model=HomepageRenderResponse)
async def get_homepage_sections(
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    Rendered visible sections in display order.
    Public endpoint.
    """
    return await HomepageSectionService.get_storefront_sections(db)


@router.get("/admin/homepage/sections", response_model=List[HomepageSectionResponse])
async def list_homepage_sections(
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(get_current_admin)
) -> Any:
    """All sections, visible or not, in display order."""
    return await HomepageSectionService.list_sections(db)


@router.post(
    "/admin/homepage/sections",
    response_model=HomepageSectionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_homepage_section(
    data: HomepageSectionCreate,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(get_current_admin)
) -> Any:
    return await HomepageSectionService.create_section(db, data)


# Registered before /{section_id} so "order" is not taken for an id
@router.put("/admin/homepage/sections/order", response_model=BulkReorderResponse)
async def reorder_homepage_sections(
    entries: List[Any] = Body(...),
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(get_current_admin)
) -> Any:
    """
    Best-effort bulk reorder. Body is a list of {id, order}.
    Malformed or unknown entries are skipped and listed in the response.
    """
    return await HomepageSectionService.bulk_reorder(db, entries)


@router.get("/admin/homepage/sections/{section_id}", response_model=HomepageSectionResponse)
async def get_homepage_section(
    section_id: str,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(get_current_admin)
) -> Any:
    return await HomepageSectionService.get_section(db, section_id)


@router.patch("/admin/homepage/sections/{section_id}", response_model=HomepageSectionResponse)
async def update_homepage_section(
    section_id: str,
    patch: HomepageSectionUpdate,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(get_current_admin)
) -> Any:
    return await HomepageSectionService.update_section(db, section_id, patch)


@router.put("/admin/homepage/sections/{section_id}/visibility", response_model=HomepageSectionResponse)
async def set_homepage_section_visibility(
    section_id: str,
    data: HomepageSectionVisibilityUpdate,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(get_current_admin)
) -> Any:
    return await HomepageSectionService.set_visibility(db, section_id, data.is_visible)


@router.delete("/admin/homepage/sections/{section_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_homepage_section(
    section_id: str,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(get_current_admin)
) -> None:
    await HomepageSectionService.delete_section(db, section_id)
