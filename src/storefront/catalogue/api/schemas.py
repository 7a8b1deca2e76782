"""Pydantic request/response schemas for the Catalogue API."""

from datetime import datetime

from pydantic import Field

from storefront.utils.schemas import CamelModel


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class CreateProductRequest(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    slug: str = Field(min_length=1, max_length=200)
    description: str | None = None
    category_id: str | None = None
    price: float = Field(ge=0)
    compare_price: float | None = None
    stock: int = Field(default=0, ge=0)
    low_stock_alert: int = Field(default=5, ge=0)
    is_featured: bool = False

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Ear defenders",
                    "slug": "ear-defenders",
                    "price": 24.9,
                    "stock": 40,
                    "lowStockAlert": 5,
                }
            ]
        }
    }


class RestockRequest(CamelModel):
    quantity: int = Field(ge=1)


class CreateCategoryRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    slug: str = Field(min_length=1, max_length=100)
    image: str | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class ProductIdResponse(CamelModel):
    product_id: str


class CategoryIdResponse(CamelModel):
    category_id: str


class ProductResponse(CamelModel):
    id: str
    name: str
    slug: str
    description: str | None = None
    category_id: str | None = None
    price: float
    compare_price: float | None = None
    stock: int
    low_stock_alert: int
    is_featured: bool
    is_active: bool
    updated_at: datetime | None = None

    @classmethod
    def from_product(cls, product) -> "ProductResponse":
        return cls(
            id=str(product.id),
            name=product.name,
            slug=product.slug,
            description=product.description,
            category_id=str(product.category_id) if product.category_id else None,
            price=product.price,
            compare_price=product.compare_price,
            stock=product.stock,
            low_stock_alert=product.low_stock_alert,
            is_featured=bool(product.is_featured),
            is_active=product.is_active,
            updated_at=product.updated_at,
        )
