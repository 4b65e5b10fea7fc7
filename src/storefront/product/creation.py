"""Product creation: command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.product.product import Product
from storefront.utils.slug import slugify


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    price: Float(required=True, min_value=0.0)
    slug: String(max_length=255)
    category_id: Identifier()
    description: Text()
    sku: String(max_length=100)
    compare_price: Float(min_value=0.0)
    cost_price: Float(min_value=0.0)
    quantity: Integer(default=0, min_value=0)
    track_quantity: Boolean(default=True)
    status: String(max_length=20)
    featured: Boolean(default=False)
    image: String(max_length=500)


@storefront.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        repo = current_domain.repository_for(Product)

        slug = command.slug or slugify(command.name)
        if repo.find_by_slug(slug) is not None:
            raise ValidationError({"slug": [f"A product with slug '{slug}' already exists"]})

        product = Product.create(
            name=command.name,
            price=command.price,
            slug=slug,
            category_id=command.category_id,
            description=command.description,
            sku=command.sku,
            compare_price=command.compare_price,
            cost_price=command.cost_price,
            quantity=command.quantity,
            track_quantity=command.track_quantity,
            status=command.status,
            featured=command.featured,
            image=command.image,
        )
        repo.add(product)

        logger.info("product_created", product_id=str(product.id), slug=slug)
        return str(product.id)
