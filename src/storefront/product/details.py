"""Product detail and pricing updates: commands and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.product import Product


@storefront.command(part_of="Product")
class UpdateProductDetails:
    product_id: Identifier(required=True)
    name: String(max_length=255)
    slug: String(max_length=255)
    description: Text()
    category_id: Identifier()
    sku: String(max_length=100)
    status: String(max_length=20)
    featured: Boolean()
    image: String(max_length=500)


@storefront.command(part_of="Product")
class UpdateProductPricing:
    product_id: Identifier(required=True)
    price: Float(required=True, min_value=0.0)
    compare_price: Float(min_value=0.0)
    cost_price: Float(min_value=0.0)


@storefront.command_handler(part_of=Product)
class ProductDetailsHandler:
    @handle(UpdateProductDetails)
    def update_details(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        if command.slug and command.slug != product.slug:
            existing = repo.find_by_slug(command.slug)
            if existing is not None and str(existing.id) != str(product.id):
                raise ValidationError({"slug": [f"A product with slug '{command.slug}' already exists"]})

        product.update_details(
            name=command.name,
            slug=command.slug,
            description=command.description,
            category_id=command.category_id,
            sku=command.sku,
            status=command.status,
            featured=command.featured,
            image=command.image,
        )
        repo.add(product)

    @handle(UpdateProductPricing)
    def update_pricing(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_pricing(
            price=command.price,
            compare_price=command.compare_price,
            cost_price=command.cost_price,
        )
        repo.add(product)
