"""Slug generation and uniqueness checks for page URLs (``/p/{slug}``)."""

import re
import unicodedata
from typing import Iterable

from salesdesk.config import MAX_SLUG_LENGTH
from salesdesk.models.page import PageDocument

_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def slugify(text: str) -> str:
    """Derive a URL slug from free text.

    The slug is lowercased, ASCII-only, uses single hyphens as separators and
    is at most ``MAX_SLUG_LENGTH`` characters.  Applying it twice gives the
    same result as applying it once.
    """
    # Normalise unicode, keep only ASCII
    slug = unicodedata.normalize("NFKD", text or "")
    slug = slug.encode("ascii", "ignore").decode("ascii")

    # Lowercase and replace runs of non-alphanumeric chars with a single hyphen
    slug = re.sub(r"[^a-z0-9]+", "-", slug.lower())
    slug = slug.strip("-")

    # Cutting may leave a trailing hyphen behind
    return slug[:MAX_SLUG_LENGTH].strip("-")


def is_valid_slug(slug: str) -> bool:
    """Return True if *slug* is non-empty and already in canonical form."""
    return len(slug) <= MAX_SLUG_LENGTH and bool(_SLUG_PATTERN.match(slug))


def is_taken(page_id: str, candidate: str, pages: Iterable[PageDocument]) -> bool:
    """Return True if a page other than *page_id* already uses *candidate*."""
    return any(page.slug == candidate and page.id != page_id for page in pages)
