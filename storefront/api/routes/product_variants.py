"""
Product Variant API Routes
"""
from typing import Any, List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.deps import Principal, get_current_admin, get_db
from storefront.schemas.variant import (
    ProductVariant,
    VariantConfig,
    VariantConfigResponse,
    VariantGenerateRequest,
    VariantResolveRequest,
    VariantResolveResponse,
)
from storefront.services.product_variant_service import ProductVariantService

router = APIRouter()


@router.get("/products/{product_id}/variants", response_model=VariantConfigResponse)
async def get_product_variants(
    product_id: str,
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await ProductVariantService.get_variant_config(db, product_id)


@router.post("/products/{product_id}/variants/resolve", response_model=VariantResolveResponse)
async def resolve_product_variant(
    product_id: str,
    request: VariantResolveRequest,
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    Resolve an attribute selection to a variant.
    Called on every selection change; "no match" is a normal response.
    """
    resolution = await ProductVariantService.resolve_selection(db, product_id, request.selection)
    return VariantResolveResponse(
        state=resolution.state.value,
        is_complete=resolution.is_complete,
        variant=resolution.variant,
        effective_price=resolution.effective_price,
        stock_quantity=resolution.stock_quantity,
        option_availability=resolution.option_availability,
    )


@router.put("/admin/products/{product_id}/variants", response_model=VariantConfigResponse)
async def update_product_variants(
    product_id: str,
    config: VariantConfig,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(get_current_admin)
) -> Any:
    return await ProductVariantService.update_variant_config(db, product_id, config)


@router.post("/admin/products/{product_id}/variants/generate", response_model=List[ProductVariant])
async def generate_product_variants(
    product_id: str,
    request: VariantGenerateRequest,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(get_current_admin)
) -> Any:
    """Preview every attribute combination; existing variants are carried over unchanged."""
    return await ProductVariantService.generate_variants(db, product_id, request.attribute_definitions)
