"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the domain's validation rules
and match the field names expected by the API's Pydantic request schemas.
"""

import random
import uuid
from datetime import UTC, datetime, timedelta

from faker import Faker

fake = Faker()

SIZES = ["S", "M", "L", "XL"]
COLORS = ["Red", "Blue", "Black", "White", "Green"]


def unique_suffix() -> str:
    return uuid.uuid4().hex[:8]


def customer_id() -> str:
    """Customers are managed elsewhere; any opaque id will do."""
    return f"cust-lt-{unique_suffix()}"


# ---------- Catalogue ----------


def category_data(parent_id: str | None = None) -> dict:
    return {
        "name": f"{fake.word().title()} {unique_suffix()}",
        "description": fake.sentence(),
        "parent_id": parent_id,
        "sort_order": random.randint(0, 20),
    }


def product_data(category_id: str | None = None) -> dict:
    """Product with enough stock for many checkouts."""
    price = round(random.uniform(150, 2500), 2)
    return {
        "name": f"{fake.color_name()} {fake.word().title()} {unique_suffix()}",
        "price": price,
        "compare_price": round(price * random.uniform(1.05, 1.4), 2),
        "category_id": category_id,
        "description": fake.paragraph(nb_sentences=2),
        "quantity": random.randint(500, 5000),
        "featured": random.random() < 0.2,
    }


def attribute_data() -> dict:
    return {
        "size": random.choice(SIZES),
        "color": random.choice(COLORS),
        "additional_price": random.choice([0.0, 25.0, 50.0, 100.0]),
        "quantity": random.randint(100, 1000),
    }


# ---------- Coupons ----------


def coupon_data() -> dict:
    """Coupon valid from yesterday for a month, usable by anyone."""
    now = datetime.now(UTC)
    if random.random() < 0.5:
        terms = {"type": "percentage", "value": random.choice([5, 10, 15, 20]), "max_discount": 300.0}
    else:
        terms = {"type": "fixed", "value": random.choice([50, 100, 150]), "min_order_value": 500.0}
    return {
        "code": f"LT{unique_suffix().upper()}",
        "start_date": (now - timedelta(days=1)).isoformat(),
        "end_date": (now + timedelta(days=30)).isoformat(),
        **terms,
    }


# ---------- Checkout ----------


def shipping_address() -> dict:
    return {
        "name": fake.name()[:255],
        "phone": f"01{random.randint(300000000, 999999999)}",
        "address": fake.street_address()[:500],
        "city": random.choice(["Dhaka", "Chattogram", "Sylhet", "Khulna", "Rajshahi"]),
        "postal_code": str(random.randint(1000, 9999)),
        "country": "Bangladesh",
    }


def place_order_data(customer: str, payment_method: str, coupon_code: str | None = None) -> dict:
    return {
        "customer_id": customer,
        "shipping_address": shipping_address(),
        "payment_method": payment_method,
        "coupon_code": coupon_code,
        "notes": fake.sentence() if random.random() < 0.3 else None,
    }


def payment_callback_data(order_id: str, succeed: bool = True) -> dict:
    if succeed:
        return {"order_id": order_id, "status": "success", "transaction_id": f"txn-{unique_suffix()}"}
    return {"order_id": order_id, "status": "fail", "reason": random.choice(["Card declined", "Insufficient funds"])}
