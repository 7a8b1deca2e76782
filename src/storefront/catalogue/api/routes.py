"""FastAPI endpoints for the Catalogue."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.catalogue.api.schemas import (
    CategoryIdResponse,
    CreateCategoryRequest,
    CreateProductRequest,
    ProductIdResponse,
    ProductResponse,
    RestockRequest,
)
from storefront.catalogue.category.category import CreateCategory
from storefront.catalogue.product.management import (
    ActivateProduct,
    CreateProduct,
    DeactivateProduct,
    RestockProduct,
)
from storefront.catalogue.product.product import Product
from storefront.catalogue.product.queries import LowStockFilter, low_stock_products
from storefront.identity.api.auth import require_admin
from storefront.utils.concurrency import process_with_retry

product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])


def _product_response(product_id: str) -> ProductResponse:
    return ProductResponse.from_product(current_domain.repository_for(Product).get(product_id))


# --- Product endpoints ---


@product_router.get("/low-stock", response_model=list[ProductResponse], dependencies=[Depends(require_admin)])
async def list_low_stock(
    category_id: str | None = Query(default=None, alias="categoryId"),
    max_stock: int | None = Query(default=None, alias="maxStock", ge=0),
) -> list[ProductResponse]:
    products = low_stock_products(LowStockFilter(category_id=category_id, max_stock=max_stock))
    return [ProductResponse.from_product(p) for p in products]


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return _product_response(product_id)


@product_router.post(
    "", status_code=201, response_model=ProductIdResponse, dependencies=[Depends(require_admin)]
)
async def create_product(body: CreateProductRequest) -> ProductIdResponse:
    command = CreateProduct(
        name=body.name,
        slug=body.slug,
        description=body.description,
        category_id=body.category_id,
        price=body.price,
        compare_price=body.compare_price,
        stock=body.stock,
        low_stock_alert=body.low_stock_alert,
        is_featured=body.is_featured,
    )
    product_id = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=product_id)


@product_router.put("/{product_id}/stock", response_model=ProductResponse, dependencies=[Depends(require_admin)])
async def restock_product(product_id: str, body: RestockRequest) -> ProductResponse:
    process_with_retry(RestockProduct(product_id=product_id, quantity=body.quantity))
    return _product_response(product_id)


@product_router.put(
    "/{product_id}/deactivate", response_model=ProductResponse, dependencies=[Depends(require_admin)]
)
async def deactivate_product(product_id: str) -> ProductResponse:
    current_domain.process(DeactivateProduct(product_id=product_id), asynchronous=False)
    return _product_response(product_id)


@product_router.put("/{product_id}/activate", response_model=ProductResponse, dependencies=[Depends(require_admin)])
async def activate_product(product_id: str) -> ProductResponse:
    current_domain.process(ActivateProduct(product_id=product_id), asynchronous=False)
    return _product_response(product_id)


# --- Category endpoints ---


@category_router.post(
    "", status_code=201, response_model=CategoryIdResponse, dependencies=[Depends(require_admin)]
)
async def create_category(body: CreateCategoryRequest) -> CategoryIdResponse:
    command = CreateCategory(name=body.name, slug=body.slug, image=body.image)
    category_id = current_domain.process(command, asynchronous=False)
    return CategoryIdResponse(category_id=category_id)
