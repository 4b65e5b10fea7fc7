"""Order aggregate: the record of a checkout and everything that happens to it after.

State machine (strict, forward only):
    pending → processing → shipped → delivered
    pending | processing | shipped → cancelled

Every status change and admin note is appended to the order's history in the
same change that updates ``order_status``. History entries are never edited
or removed.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from storefront.domain import storefront
from storefront.order.events import (
    OrderNoteAdded,
    OrderPlaced,
    OrderStatusChanged,
    PaymentConfirmed,
    PaymentFailed,
    PaymentInitiated,
    PaymentReceivedAfterCancellation,
    PaymentStatusChanged,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(Enum):
    COD = "cod"
    ONLINE = "online"


class HistoryKind(Enum):
    STATUS_CHANGE = "status_change"
    NOTE = "note"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

_VALID_PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.FAILED: {PaymentStatus.PENDING, PaymentStatus.PAID},
    PaymentStatus.PAID: {PaymentStatus.REFUNDED},
    PaymentStatus.REFUNDED: set(),
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class Address:
    """Shipping or billing address captured at checkout. Never changes afterwards."""

    name = String(required=True, max_length=255)
    phone = String(required=True, max_length=30)
    address = String(required=True, max_length=500)
    city = String(required=True, max_length=100)
    postal_code = String(max_length=20)
    country = String(required=True, max_length=100)


@storefront.value_object(part_of="Order")
class OrderPricing:
    """Amounts locked at checkout; later catalogue or coupon changes do not touch them."""

    subtotal = Float(default=0.0)
    tax = Float(default=0.0)
    shipping_cost = Float(default=0.0)
    discount = Float(default=0.0)
    total = Float(default=0.0)
    currency = String(max_length=3, default="BDT")


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """Snapshot of a purchased line: name and price as they were at checkout."""

    product_id = Identifier(required=True)
    attribute_id = Identifier()
    product_name = String(required=True, max_length=255)
    attribute_label = String(max_length=255)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    total = Float(required=True, min_value=0.0)


@storefront.entity(part_of="Order")
class OrderHistoryEntry:
    sequence = Integer(required=True, min_value=1)
    kind = String(required=True, choices=HistoryKind)
    status = String(max_length=20)
    note = Text()
    user_id = Identifier()
    recorded_at = DateTime(required=True)

    def as_dict(self):
        entry = {
            "sequence": self.sequence,
            "kind": self.kind,
            "recorded_at": self.recorded_at.isoformat() if self.recorded_at else None,
            "user_id": str(self.user_id) if self.user_id else None,
        }
        if self.kind == HistoryKind.STATUS_CHANGE.value:
            entry["status"] = self.status
        else:
            entry["note"] = self.note
        return entry


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=20)
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    history = HasMany(OrderHistoryEntry)
    shipping_address = ValueObject(Address, required=True)
    billing_address = ValueObject(Address)
    pricing = ValueObject(OrderPricing)
    coupon_code = String(max_length=50)
    payment_method = String(required=True, choices=PaymentMethod)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    order_status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    transaction_id = String(max_length=255)
    payment_session_id = String(max_length=255)
    payment_failure_reason = String(max_length=500)
    refund_due = Boolean(default=False)
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_number,
        customer_id,
        items_data,
        pricing,
        shipping_address,
        payment_method,
        billing_address=None,
        coupon_code=None,
        notes=None,
    ):
        """Build a new pending order.

        Args:
            items_data: List of dicts with product_id, attribute_id, product_name,
                attribute_label, price, quantity and total.
            pricing: ``OrderPricing`` value object.
            shipping_address: ``Address`` value object.
        """
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = datetime.now(UTC)
        order = cls(
            order_number=order_number,
            customer_id=customer_id,
            shipping_address=shipping_address,
            billing_address=billing_address or shipping_address,
            pricing=pricing,
            coupon_code=coupon_code,
            payment_method=payment_method,
            payment_status=PaymentStatus.PENDING.value,
            order_status=OrderStatus.PENDING.value,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        for item in items_data:
            order.add_items(OrderItem(**item))
        order._append_history(HistoryKind.STATUS_CHANGE, status=OrderStatus.PENDING.value, recorded_at=now)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                customer_id=str(customer_id),
                items=json.dumps(items_data),
                subtotal=pricing.subtotal,
                tax=pricing.tax,
                shipping_cost=pricing.shipping_cost,
                discount=pricing.discount,
                total=pricing.total,
                currency=pricing.currency,
                payment_method=payment_method,
                coupon_code=coupon_code,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------
    @property
    def status_history(self):
        """History entries in the order they were recorded."""
        return sorted(self.history, key=lambda entry: entry.sequence)

    def _append_history(self, kind, status=None, note=None, user_id=None, recorded_at=None):
        next_sequence = max((entry.sequence for entry in self.history), default=0) + 1
        self.add_history(
            OrderHistoryEntry(
                sequence=next_sequence,
                kind=kind.value,
                status=status,
                note=note,
                user_id=user_id,
                recorded_at=recorded_at or datetime.now(UTC),
            )
        )

    # -------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------
    @property
    def is_cancelled(self):
        return self.order_status == OrderStatus.CANCELLED.value

    def can_transition_to(self, target_status):
        return OrderStatus(target_status) in _VALID_TRANSITIONS[OrderStatus(self.order_status)]

    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.order_status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def update_status(self, new_status, user_id=None):
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status '{new_status}'"]}) from None
        self._assert_can_transition(target)
        self._change_status(target, user_id)

    def _change_status(self, target, user_id=None):
        now = datetime.now(UTC)
        previous = self.order_status
        self.order_status = target.value
        self.updated_at = now
        self._append_history(HistoryKind.STATUS_CHANGE, status=target.value, user_id=user_id, recorded_at=now)

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous,
                new_status=target.value,
                user_id=user_id,
                changed_at=now,
            )
        )

    def add_note(self, note, user_id=None):
        if not note or not note.strip():
            raise ValidationError({"note": ["Note cannot be empty"]})

        now = datetime.now(UTC)
        self.updated_at = now
        self._append_history(HistoryKind.NOTE, note=note, user_id=user_id, recorded_at=now)

        self.raise_(
            OrderNoteAdded(
                order_id=str(self.id),
                note=note,
                user_id=user_id,
                added_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    @property
    def is_paid(self):
        return self.payment_status == PaymentStatus.PAID.value

    @property
    def is_payment_settled(self):
        """Paid or refunded. Gateway callbacks never change a settled payment."""
        return self.payment_status in (PaymentStatus.PAID.value, PaymentStatus.REFUNDED.value)

    def assert_can_take_payment(self):
        if self.payment_method != PaymentMethod.ONLINE.value:
            raise ValidationError({"payment_method": ["Only online orders are paid through the gateway"]})
        if self.is_paid:
            raise ValidationError({"payment_status": ["Order is already paid"]})
        if self.payment_status == PaymentStatus.REFUNDED.value:
            raise ValidationError({"payment_status": ["Order payment was refunded"]})
        if self.is_cancelled:
            raise ValidationError({"status": ["Cannot take payment for a cancelled order"]})

    def record_payment_initiated(self, session_id):
        self.assert_can_take_payment()

        # A new session after a decline puts the payment back to pending
        if self.payment_status == PaymentStatus.FAILED.value:
            self.payment_status = PaymentStatus.PENDING.value
            self.payment_failure_reason = None
        self.payment_session_id = session_id
        self.updated_at = datetime.now(UTC)

        self.raise_(
            PaymentInitiated(
                order_id=str(self.id),
                session_id=session_id,
                amount=self.pricing.total,
                currency=self.pricing.currency,
            )
        )

    def confirm_payment(self, transaction_id):
        """Mark the order paid and start processing it.

        Returns False, changing nothing, when the payment is already paid or
        refunded. A cancelled order keeps its status; the payment is recorded
        and the order is flagged as owing a refund.
        """
        if self.is_payment_settled:
            return False
        if self.is_cancelled:
            self._record_payment_after_cancellation(transaction_id)
            return True

        now = datetime.now(UTC)
        self.payment_status = PaymentStatus.PAID.value
        self.transaction_id = transaction_id
        self.payment_failure_reason = None
        self.updated_at = now

        self.raise_(
            PaymentConfirmed(
                order_id=str(self.id),
                transaction_id=transaction_id,
                amount=self.pricing.total,
                confirmed_at=now,
            )
        )

        if self.order_status == OrderStatus.PENDING.value:
            self._change_status(OrderStatus.PROCESSING)
        return True

    def _record_payment_after_cancellation(self, transaction_id):
        now = datetime.now(UTC)
        self.payment_status = PaymentStatus.PAID.value
        self.transaction_id = transaction_id
        self.payment_failure_reason = None
        self.refund_due = True
        self.updated_at = now
        self._append_history(
            HistoryKind.NOTE,
            note=f"Payment {transaction_id} received after cancellation; refund due",
            recorded_at=now,
        )

        self.raise_(
            PaymentReceivedAfterCancellation(
                order_id=str(self.id),
                order_number=self.order_number,
                transaction_id=transaction_id,
                amount=self.pricing.total,
                received_at=now,
            )
        )

    def record_payment_failure(self, reason):
        """Mark the payment failed. The order status is left alone so the customer can retry.

        Returns False when the payment is already paid or refunded; a late
        failure never downgrades it.
        """
        if self.is_payment_settled:
            return False

        now = datetime.now(UTC)
        self.payment_status = PaymentStatus.FAILED.value
        self.payment_failure_reason = reason
        self.updated_at = now

        self.raise_(
            PaymentFailed(
                order_id=str(self.id),
                reason=reason,
                failed_at=now,
            )
        )
        return True

    def update_payment_status(self, new_status, user_id=None):
        try:
            target = PaymentStatus(new_status)
        except ValueError:
            raise ValidationError({"payment_status": [f"Unknown payment status '{new_status}'"]}) from None

        current = PaymentStatus(self.payment_status)
        if target not in _VALID_PAYMENT_TRANSITIONS[current]:
            raise ValidationError(
                {"payment_status": [f"Cannot change payment status from {current.value} to {target.value}"]}
            )

        self.payment_status = target.value
        if target == PaymentStatus.REFUNDED:
            self.refund_due = False
        self.updated_at = datetime.now(UTC)

        self.raise_(
            PaymentStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                user_id=user_id,
            )
        )
