"""Category management: commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.category.category import Category
from storefront.category.hierarchy import ancestor_ids, assert_can_reparent
from storefront.domain import logger, storefront
from storefront.utils.slug import slugify


@storefront.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=100)
    slug: String(max_length=120)
    description: Text()
    parent_id: Identifier()
    sort_order: Integer(default=0)
    image: String(max_length=500)


@storefront.command(part_of="Category")
class UpdateCategory:
    category_id: Identifier(required=True)
    name: String(max_length=100)
    slug: String(max_length=120)
    description: Text()
    sort_order: Integer()
    image: String(max_length=500)


@storefront.command(part_of="Category")
class MoveCategory:
    category_id: Identifier(required=True)
    new_parent_id: Identifier()


@storefront.command(part_of="Category")
class DeactivateCategory:
    category_id: Identifier(required=True)


def _parent_lookup(repo):
    def parent_of(category_id):
        try:
            return repo.get(category_id).parent_id
        except ObjectNotFoundError:
            return None

    return parent_of


def category_ancestors(category_id) -> list[str]:
    """Ids of every category above ``category_id``, nearest first."""
    return ancestor_ids(category_id, _parent_lookup(current_domain.repository_for(Category)))


def _ensure_unique_slug(repo, slug, category_id=None):
    existing = repo.find_by_slug(slug)
    if existing is not None and str(existing.id) != str(category_id):
        raise ValidationError({"slug": [f"A category with slug '{slug}' already exists"]})


@storefront.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        repo = current_domain.repository_for(Category)

        if command.parent_id:
            repo.get(command.parent_id)

        slug = command.slug or slugify(command.name)
        _ensure_unique_slug(repo, slug)

        category = Category.create(
            name=command.name,
            slug=slug,
            description=command.description,
            parent_id=command.parent_id,
            sort_order=command.sort_order,
            image=command.image,
        )
        repo.add(category)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        if command.slug:
            _ensure_unique_slug(repo, command.slug, category.id)

        category.update_details(
            name=command.name,
            slug=command.slug,
            description=command.description,
            sort_order=command.sort_order,
            image=command.image,
        )
        repo.add(category)

    @handle(MoveCategory)
    def move_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        if command.new_parent_id:
            repo.get(command.new_parent_id)
        assert_can_reparent(category.id, command.new_parent_id, _parent_lookup(repo))

        category.move_to(command.new_parent_id)
        repo.add(category)

        logger.info(
            "category_moved",
            category_id=str(category.id),
            new_parent_id=command.new_parent_id,
        )

    @handle(DeactivateCategory)
    def deactivate_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)
        category.deactivate()
        repo.add(category)
