"""Human-readable order numbers: ``ORD-<year>-<6-digit sequence>``.

One sequence aggregate per calendar year. Taking a number and saving the
order happen in the same unit of work, so a failed checkout does not burn a
number.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront

ORDER_NUMBER_PREFIX = "ORD"


def format_order_number(year, value):
    return f"{ORDER_NUMBER_PREFIX}-{year}-{value:06d}"


@storefront.aggregate
class OrderNumberSequence:
    year = String(identifier=True, max_length=4)
    last_value = Integer(default=0, min_value=0)

    def next_number(self):
        self.last_value = (self.last_value or 0) + 1
        return format_order_number(self.year, self.last_value)


def sequence_for(year=None) -> OrderNumberSequence:
    """Load this year's sequence, or start a new one. The caller persists it."""
    year = str(year or datetime.now(UTC).year)
    try:
        return current_domain.repository_for(OrderNumberSequence).get(year)
    except ObjectNotFoundError:
        return OrderNumberSequence(year=year, last_value=0)
