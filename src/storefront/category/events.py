"""Domain events for the Category aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Category")
class CategoryCreated:
    """A new category was added to the catalogue tree."""

    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    parent_id: Identifier()


@storefront.event(part_of="Category")
class CategoryDetailsUpdated:
    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    sort_order: Integer()


@storefront.event(part_of="Category")
class CategoryMoved:
    """A category was re-parented (or made a root when ``new_parent_id`` is empty)."""

    __version__ = 1

    category_id: Identifier(required=True)
    previous_parent_id: Identifier()
    new_parent_id: Identifier()


@storefront.event(part_of="Category")
class CategoryDeactivated:
    __version__ = 1

    category_id: Identifier(required=True)
    deactivated_at: DateTime(required=True)
