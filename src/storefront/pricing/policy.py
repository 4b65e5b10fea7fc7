"""Pricing policy sourced from store settings.

Tax is stored as a percentage (``tax_rate = 10`` means 10%), matching how
the admin enters it.
"""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.pricing.totals import ShippingPolicy

TAX_RATE = "tax_rate"
SHIPPING_COST = "shipping_cost"
FREE_SHIPPING_THRESHOLD = "free_shipping_threshold"
CURRENCY_CODE = "currency_code"

# key -> (value, value_type, group)
DEFAULT_SETTINGS = {
    TAX_RATE: ("10", "number", "pricing"),
    SHIPPING_COST: ("60", "number", "pricing"),
    FREE_SHIPPING_THRESHOLD: ("1000", "number", "pricing"),
    CURRENCY_CODE: ("BDT", "text", "general"),
}


@dataclass(frozen=True)
class PricingPolicy:
    tax_rate: float
    shipping: ShippingPolicy
    currency: str

    @property
    def tax_rate_percent(self) -> float:
        return round(self.tax_rate * 100, 4)


def _setting_value(key):
    from storefront.setting.setting import Setting

    try:
        value = current_domain.repository_for(Setting).get(key).typed_value
    except ObjectNotFoundError:
        value = None
    if value is not None:
        return value

    default, value_type, _ = DEFAULT_SETTINGS[key]
    return float(default) if value_type == "number" else default


def current_pricing_policy() -> PricingPolicy:
    """Read the tax, shipping and currency settings, falling back to defaults."""
    return PricingPolicy(
        tax_rate=float(_setting_value(TAX_RATE)) / 100,
        shipping=ShippingPolicy(
            flat_rate=float(_setting_value(SHIPPING_COST)),
            free_threshold=float(_setting_value(FREE_SHIPPING_THRESHOLD)),
        ),
        currency=str(_setting_value(CURRENCY_CODE)),
    )
