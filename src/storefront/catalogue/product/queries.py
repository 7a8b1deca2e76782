"""Read-side queries over the product catalogue."""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product, ProductStatus


@dataclass(frozen=True)
class LowStockFilter:
    """Recognised filters for the low-stock report.

    `max_stock` narrows the candidate set in the database before each
    product's own `low_stock_alert` threshold is applied.
    """

    category_id: str | None = None
    max_stock: int | None = None


def low_stock_products(filters: LowStockFilter | None = None) -> list[Product]:
    """Active products at or below their alert threshold, lowest stock first."""
    filters = filters or LowStockFilter()

    criteria = {"status": ProductStatus.ACTIVE.value}
    if filters.category_id:
        criteria["category_id"] = filters.category_id
    if filters.max_stock is not None:
        criteria["stock__lte"] = filters.max_stock

    candidates = current_domain.repository_for(Product)._dao.query.filter(**criteria).all().items

    # The threshold is per product; the query DSL cannot compare two columns
    return sorted((p for p in candidates if p.is_low_on_stock), key=lambda p: p.stock)
