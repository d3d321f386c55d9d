import re

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def slugify(text):
    """
    Derive a URL-safe slug from free text.

    "About Us!" -> "about-us". Applying it twice gives the same result.
    """
    if not text:
        return ""

    slug = _DISALLOWED.sub("", text.lower())
    slug = _WHITESPACE.sub("-", slug.strip())
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def is_valid_slug(slug):
    return bool(slug) and SLUG_PATTERN.match(slug) is not None
