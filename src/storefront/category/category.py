"""Category aggregate root for product categorization."""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.utils.slug import is_valid_slug, slugify


class CategoryStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@storefront.aggregate
class Category:
    """A node in the category tree.

    The tree may be arbitrarily deep. ``parent_id`` is the only link; cycle
    checks happen when a parent is assigned (see ``category.hierarchy``).
    """

    name: String(required=True, max_length=100)
    slug: String(required=True, max_length=120)
    description: Text()
    parent_id: Identifier()
    status: String(choices=CategoryStatus, default=CategoryStatus.ACTIVE.value)
    sort_order: Integer(default=0)
    image: String(max_length=500)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def cannot_be_its_own_parent(self):
        if self.parent_id and str(self.parent_id) == str(self.id):
            raise ValidationError({"parent_id": ["A category cannot be its own parent"]})

    @invariant.post
    def slug_must_be_url_safe(self):
        if not is_valid_slug(self.slug):
            raise ValidationError(
                {"slug": ["Slug must contain only lowercase alphanumeric characters separated by single hyphens"]}
            )

    @classmethod
    def create(cls, name, slug=None, description=None, parent_id=None, sort_order=0, image=None):
        from storefront.category.events import CategoryCreated

        now = datetime.now(UTC)
        category = cls(
            name=name,
            slug=slug or slugify(name),
            description=description,
            parent_id=parent_id,
            sort_order=sort_order or 0,
            image=image,
            created_at=now,
            updated_at=now,
        )
        category.raise_(
            CategoryCreated(
                category_id=category.id,
                name=category.name,
                slug=category.slug,
                parent_id=parent_id,
            )
        )
        return category

    @property
    def is_active(self):
        return self.status == CategoryStatus.ACTIVE.value

    def update_details(self, name=None, slug=None, description=None, sort_order=None, image=None):
        from storefront.category.events import CategoryDetailsUpdated

        if name is not None:
            self.name = name
        if slug is not None:
            self.slug = slug
        if description is not None:
            self.description = description
        if sort_order is not None:
            self.sort_order = sort_order
        if image is not None:
            self.image = image
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CategoryDetailsUpdated(
                category_id=self.id,
                name=self.name,
                slug=self.slug,
                sort_order=self.sort_order,
            )
        )

    def move_to(self, new_parent_id):
        """Re-parent this category. Callers must run the ancestor check first."""
        from storefront.category.events import CategoryMoved

        previous_parent_id = self.parent_id
        self.parent_id = new_parent_id
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CategoryMoved(
                category_id=self.id,
                previous_parent_id=previous_parent_id,
                new_parent_id=new_parent_id,
            )
        )

    def deactivate(self):
        from storefront.category.events import CategoryDeactivated

        if not self.is_active:
            raise ValidationError({"status": ["Category is already inactive"]})

        now = datetime.now(UTC)
        self.status = CategoryStatus.INACTIVE.value
        self.updated_at = now

        self.raise_(
            CategoryDeactivated(
                category_id=self.id,
                deactivated_at=now,
            )
        )
