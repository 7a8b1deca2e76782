"""Product administration commands."""

from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.domain import storefront


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    slug: String(required=True, max_length=200)
    description: Text()
    category_id: Identifier()
    price: Float(required=True, min_value=0.0)
    compare_price: Float()
    stock: Integer(default=0, min_value=0)
    low_stock_alert: Integer(default=5, min_value=0)
    is_featured: Boolean(default=False)


@storefront.command(part_of="Product")
class RestockProduct:
    product_id: Identifier(required=True)
    quantity: Integer(required=True)


@storefront.command(part_of="Product")
class DeactivateProduct:
    product_id: Identifier(required=True)


@storefront.command(part_of="Product")
class ActivateProduct:
    product_id: Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            name=command.name,
            slug=command.slug,
            price=command.price,
            stock=command.stock or 0,
            low_stock_alert=command.low_stock_alert if command.low_stock_alert is not None else 5,
            category_id=command.category_id,
            description=command.description,
            compare_price=command.compare_price,
            is_featured=bool(command.is_featured),
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(RestockProduct)
    def restock_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.replenish(command.quantity)
        repo.add(product)

    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.deactivate()
        repo.add(product)

    @handle(ActivateProduct)
    def activate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.activate()
        repo.add(product)
