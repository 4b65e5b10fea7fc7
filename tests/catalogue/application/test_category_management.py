"""Application tests for category management handlers."""

import pytest
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain
from storefront.category.category import Category
from storefront.category.management import (
    CreateCategory,
    DeactivateCategory,
    MoveCategory,
    UpdateCategory,
    category_ancestors,
)


def _create_category(**overrides):
    defaults = {"name": "Apparel"}
    defaults.update(overrides)
    return current_domain.process(CreateCategory(**defaults), asynchronous=False)


def _move(category_id, new_parent_id):
    command = MoveCategory(category_id=category_id, new_parent_id=new_parent_id)
    current_domain.process(command, asynchronous=False)


def _category(category_id):
    return current_domain.repository_for(Category).get(category_id)


class TestCreateCategory:
    def test_root_category(self):
        category_id = _create_category()

        category = _category(category_id)
        assert category.slug == "apparel"
        assert category.parent_id is None

    def test_child_category(self):
        parent_id = _create_category()
        child_id = _create_category(name="Men", parent_id=parent_id)

        assert _category(child_id).parent_id == parent_id

    def test_unknown_parent(self):
        with pytest.raises(ObjectNotFoundError):
            _create_category(name="Orphan", parent_id="missing")

    def test_duplicate_slug(self):
        _create_category()
        with pytest.raises(ValidationError) as exc:
            _create_category()
        assert "already exists" in str(exc.value)

    def test_find_by_slug(self):
        category_id = _create_category(name="Home & Living")

        repo = current_domain.repository_for(Category)

        assert str(repo.find_by_slug("home-living").id) == category_id
        assert repo.find_by_slug("garden") is None


class TestUpdateCategory:
    def test_update_details(self):
        category_id = _create_category()

        current_domain.process(
            UpdateCategory(category_id=category_id, name="Clothing", sort_order=3),
            asynchronous=False,
        )

        category = _category(category_id)
        assert category.name == "Clothing"
        assert category.sort_order == 3

    def test_slug_taken_by_another_category(self):
        _create_category(name="Books")
        category_id = _create_category()

        with pytest.raises(ValidationError):
            current_domain.process(UpdateCategory(category_id=category_id, slug="books"), asynchronous=False)

    def test_keeping_own_slug(self):
        category_id = _create_category()

        current_domain.process(UpdateCategory(category_id=category_id, slug="apparel"), asynchronous=False)

        assert _category(category_id).slug == "apparel"


class TestMoveCategory:
    def _tree(self):
        apparel = _create_category(name="Apparel")
        men = _create_category(name="Men", parent_id=apparel)
        shirts = _create_category(name="Shirts", parent_id=men)
        books = _create_category(name="Books")
        return apparel, men, shirts, books

    def test_ancestors(self):
        apparel, men, shirts, _ = self._tree()
        assert category_ancestors(shirts) == [men, apparel]

    def test_move_to_other_branch(self):
        apparel, men, shirts, books = self._tree()

        _move(shirts, books)

        assert category_ancestors(shirts) == [books]

    def test_move_to_root(self):
        _, men, shirts, _ = self._tree()

        _move(shirts, None)

        assert _category(shirts).parent_id is None

    def test_move_under_descendant_rejected(self):
        apparel, men, shirts, _ = self._tree()

        with pytest.raises(ValidationError) as exc:
            _move(apparel, shirts)

        assert "cannot be moved under itself or one of its descendants" in str(exc.value)
        assert _category(apparel).parent_id is None

    def test_move_under_itself_rejected(self):
        apparel, *_ = self._tree()
        with pytest.raises(ValidationError):
            _move(apparel, apparel)

    def test_move_under_unknown_parent(self):
        apparel, *_ = self._tree()
        with pytest.raises(ObjectNotFoundError):
            _move(apparel, "missing")


class TestDeactivateCategory:
    def test_deactivate(self):
        category_id = _create_category()

        current_domain.process(DeactivateCategory(category_id=category_id), asynchronous=False)

        assert _category(category_id).is_active is False
