import re

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")
SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def slugify(text: str) -> str:
    """Lower-case, hyphen-separated slug: ``"Summer T-Shirt!"`` -> ``"summer-t-shirt"``."""
    return _NON_ALPHANUMERIC.sub("-", (text or "").lower()).strip("-")


def is_valid_slug(slug: str) -> bool:
    return bool(SLUG_PATTERN.match(slug or ""))
