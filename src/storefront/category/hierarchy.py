"""Ancestor walks over the category tree.

The tree is stored as parent pointers only. Walks take a ``parent_of``
lookup so they work the same over a repository or a plain dict, and they stop
when they revisit a node so that corrupted (already cyclic) data cannot loop
forever.
"""

from protean.exceptions import ValidationError


def ancestor_ids(category_id, parent_of) -> list[str]:
    """Return the ids above ``category_id``, nearest parent first.

    Args:
        category_id: Where the walk starts (not included in the result).
        parent_of: Callable returning the parent id of a category id, or None at a root.
    """
    ancestors = []
    seen = {str(category_id)}
    current = parent_of(str(category_id))
    while current:
        current = str(current)
        if current in seen:
            break
        ancestors.append(current)
        seen.add(current)
        current = parent_of(current)
    return ancestors


def would_create_cycle(category_id, new_parent_id, parent_of) -> bool:
    """True when making ``new_parent_id`` the parent of ``category_id`` closes a loop."""
    if not new_parent_id:
        return False
    if str(new_parent_id) == str(category_id):
        return True

    seen = set()
    current = str(new_parent_id)
    while current:
        if current == str(category_id):
            return True
        if current in seen:
            # Pre-existing loop that does not pass through category_id
            return False
        seen.add(current)
        parent = parent_of(current)
        current = str(parent) if parent else None
    return False


def assert_can_reparent(category_id, new_parent_id, parent_of) -> None:
    if would_create_cycle(category_id, new_parent_id, parent_of):
        raise ValidationError({"parent_id": ["A category cannot be moved under itself or one of its descendants"]})
