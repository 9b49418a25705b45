"""
Product Page Layout API Routes
"""
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.deps import Principal, get_current_admin, get_db
from storefront.schemas.product_layout import (
    ProductPageLayoutConfigResponse,
    ProductPageLayoutResponse,
    ProductPageLayoutUpdateRequest,
)
from storefront.services.product_layout_service import ProductLayoutService

router = APIRouter()


@router.get("/product-page-layout", response_model=ProductPageLayoutResponse)
async def get_product_page_layout(
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    Visible product page slots in display order.
    Public endpoint; creates the default layout on first use.
    """
    sections = await ProductLayoutService(db).get_layout()
    return ProductPageLayoutResponse(sections=sections)


@router.get("/admin/product-page-layout", response_model=ProductPageLayoutConfigResponse)
async def get_product_page_layout_config(
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(get_current_admin)
) -> Any:
    return await ProductLayoutService(db).get_config()


@router.put("/admin/product-page-layout", response_model=ProductPageLayoutConfigResponse)
async def update_product_page_layout(
    update_data: ProductPageLayoutUpdateRequest,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(get_current_admin)
) -> Any:
    return await ProductLayoutService(db).update_config(update_data.sections, updated_by=admin.subject)
