"""Application tests for review submission, moderation and product ratings."""

import json

import pytest
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain
from storefront.cart.items import AddToCart
from storefront.order.checkout import PlaceOrder
from storefront.product.creation import CreateProduct
from storefront.review.moderation import ApproveReview, RejectReview
from storefront.review.rating import rating_summaries, rating_summary
from storefront.review.review import Review
from storefront.review.submission import EditReview, SubmitReview

ADDRESS = {
    "name": "Tahmina Akter",
    "phone": "01600000000",
    "address": "Zindabazar",
    "city": "Sylhet",
    "country": "Bangladesh",
}


@pytest.fixture()
def product_id():
    return current_domain.process(CreateProduct(name="Muslin Scarf", price=900.0, quantity=10), asynchronous=False)


def _submit(product_id, customer_id="cust-001", rating=5, comment="Lovely drape.", order_id=None):
    command = SubmitReview(
        product_id=product_id,
        customer_id=customer_id,
        rating=rating,
        comment=comment,
        order_id=order_id,
    )
    return current_domain.process(command, asynchronous=False)


def _approve(review_id):
    current_domain.process(ApproveReview(review_id=review_id), asynchronous=False)


def _review(review_id):
    return current_domain.repository_for(Review).get(review_id)


def _place_order(product_id, customer_id):
    current_domain.process(AddToCart(customer_id=customer_id, product_id=product_id, quantity=1), asynchronous=False)
    command = PlaceOrder(customer_id=customer_id, shipping_address=json.dumps(ADDRESS), payment_method="cod")
    return current_domain.process(command, asynchronous=False)


class TestSubmitReview:
    def test_persists_pending_review(self, product_id):
        review_id = _submit(product_id)

        review = _review(review_id)
        assert review.status == "pending"
        assert str(review.product_id) == product_id

    def test_one_review_per_customer_per_product(self, product_id):
        _submit(product_id)

        with pytest.raises(ValidationError) as exc:
            _submit(product_id, rating=1)

        assert "already reviewed" in str(exc.value)

    def test_other_customers_can_review(self, product_id):
        _submit(product_id)
        assert _submit(product_id, customer_id="cust-002")

    def test_unknown_product(self):
        with pytest.raises(ObjectNotFoundError):
            _submit("missing-product")

    def test_order_must_contain_the_product(self, product_id):
        order_id = _place_order(product_id, "cust-001")

        review_id = _submit(product_id, order_id=order_id)

        assert str(_review(review_id).order_id) == order_id

    def test_order_of_another_customer_rejected(self, product_id):
        order_id = _place_order(product_id, "cust-002")

        with pytest.raises(ValidationError) as exc:
            _submit(product_id, customer_id="cust-001", order_id=order_id)

        assert "order_id" in exc.value.messages


class TestEditReview:
    def test_author_edits_and_review_goes_back_to_pending(self, product_id):
        review_id = _submit(product_id)
        _approve(review_id)

        command = EditReview(review_id=review_id, customer_id="cust-001", rating=3, comment="Thinner than expected.")
        current_domain.process(command, asynchronous=False)

        review = _review(review_id)
        assert review.rating == 3
        assert review.status == "pending"

    def test_only_the_author_edits(self, product_id):
        review_id = _submit(product_id)

        command = EditReview(review_id=review_id, customer_id="cust-999", rating=1, comment="Not mine to change.")
        with pytest.raises(ValidationError):
            current_domain.process(command, asynchronous=False)


class TestModeration:
    def test_reject_with_reason(self, product_id):
        review_id = _submit(product_id)

        current_domain.process(RejectReview(review_id=review_id, reason="Spam link"), asynchronous=False)

        review = _review(review_id)
        assert review.status == "rejected"
        assert review.moderation_notes == "Spam link"

    def test_unknown_review(self):
        with pytest.raises(ObjectNotFoundError):
            _approve("missing-review")


class TestRatingSummary:
    def test_no_reviews(self, product_id):
        summary = rating_summary(product_id)

        assert summary.average_rating == 0.0
        assert summary.review_count == 0
        assert summary.breakdown == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}

    def test_only_approved_reviews_count(self, product_id):
        _approve(_submit(product_id, customer_id="cust-001", rating=5))
        _approve(_submit(product_id, customer_id="cust-002", rating=4))
        _approve(_submit(product_id, customer_id="cust-003", rating=4))
        _submit(product_id, customer_id="cust-004", rating=1)
        rejected = _submit(product_id, customer_id="cust-005", rating=1)
        current_domain.process(RejectReview(review_id=rejected), asynchronous=False)

        summary = rating_summary(product_id)

        assert summary.review_count == 3
        assert summary.average_rating == 4.3
        assert summary.breakdown[4] == 2
        assert summary.breakdown[1] == 0

    def test_several_products_at_once(self, product_id):
        other_id = current_domain.process(CreateProduct(name="Silk Tie", price=400.0), asynchronous=False)
        _approve(_submit(other_id, rating=2))

        summaries = rating_summaries([product_id, other_id])

        assert summaries[product_id].review_count == 0
        assert summaries[other_id].average_rating == 2.0
