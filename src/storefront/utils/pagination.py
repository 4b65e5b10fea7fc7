"""Page slicing for list endpoints."""

import math
from dataclasses import dataclass


@dataclass
class Page:
    items: list
    total: int
    page: int
    per_page: int

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))


def paginate(items, page=1, per_page=12) -> Page:
    """Slice ``items`` to the 1-indexed ``page``. Pages past the end are empty."""
    page = max(page, 1)
    start = (page - 1) * per_page
    return Page(items=items[start : start + per_page], total=len(items), page=page, per_page=per_page)
