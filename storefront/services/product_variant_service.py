"""
Product Variant Service

Loads a product's variant documents and runs the resolver or the matrix
helpers over them. Resolution is read-only; only `update_variant_config`
writes.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import NotFoundError, ValidationError
from storefront.core.utils import parse_record_id
from storefront.models.product import Product
from storefront.schemas.variant import ProductVariant, VariantConfig, VariantConfigResponse
from storefront.services.variant_matrix import (
    generate_variant_matrix,
    normalize_attribute_definitions,
    validate_variant_config,
)
from storefront.services.variant_resolver import VariantResolution, coerce_variants, resolve

logger = logging.getLogger(__name__)


def _config_response(product: Product) -> VariantConfigResponse:
    return VariantConfigResponse(
        product_id=product.id,
        base_price=float(product.price),
        has_variants=bool(product.has_variants),
        attribute_definitions=product.attribute_definitions or {},
        variants=coerce_variants(product.variants or []),
    )


class ProductVariantService:

    @staticmethod
    async def get_product(db: AsyncSession, product_id: Any) -> Product:
        record_id = parse_record_id(product_id)
        product = await db.get(Product, record_id) if record_id is not None else None
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    @staticmethod
    async def get_variant_config(db: AsyncSession, product_id: Any) -> VariantConfigResponse:
        product = await ProductVariantService.get_product(db, product_id)
        return _config_response(product)

    @staticmethod
    async def resolve_selection(
        db: AsyncSession,
        product_id: Any,
        selection: Mapping[str, Optional[str]],
    ) -> VariantResolution:
        product = await ProductVariantService.get_product(db, product_id)
        definitions = product.attribute_definitions if product.has_variants else {}
        return resolve(
            definitions or {},
            product.variants or [],
            selection,
            base_price=float(product.price),
        )

    @staticmethod
    async def generate_variants(
        db: AsyncSession,
        product_id: Any,
        attribute_definitions: Dict[str, List[str]],
    ) -> List[ProductVariant]:
        """Preview the full variant matrix, keeping the product's existing variants."""
        product = await ProductVariantService.get_product(db, product_id)
        return generate_variant_matrix(attribute_definitions, product.variants or [])

    @staticmethod
    async def update_variant_config(
        db: AsyncSession,
        product_id: Any,
        config: VariantConfig,
    ) -> VariantConfigResponse:
        """Replace a product's attribute definitions and variants after validation."""
        product = await ProductVariantService.get_product(db, product_id)
        definitions = normalize_attribute_definitions(config.attribute_definitions)

        if config.has_variants and not definitions:
            raise ValidationError(
                "A product with variants needs at least one attribute with values",
                field="attributeDefinitions",
            )

        variants = validate_variant_config(definitions, config.variants) if config.has_variants else []

        product.has_variants = config.has_variants
        product.attribute_definitions = definitions if config.has_variants else {}
        product.variants = [v.model_dump(by_alias=True, exclude_none=True) for v in variants]
        await db.commit()
        await db.refresh(product)

        logger.info(f"Product {product.id} variant configuration saved ({len(variants)} variants)")
        return _config_response(product)
