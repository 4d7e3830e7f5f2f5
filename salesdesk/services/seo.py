"""Search-readiness score shown beside the SEO settings of a page."""

from typing import Iterable

from salesdesk.models.page import PageDocument
from salesdesk.services.slugs import is_taken

# Recommended lengths, inclusive
META_TITLE_RANGE = (30, 60)
META_DESCRIPTION_RANGE = (120, 160)


def _length_points(text: str, bounds) -> int:
    if not text:
        return 0
    low, high = bounds
    return 30 if low <= len(text) <= high else 10


def seo_score(document: PageDocument, pages: Iterable[PageDocument]) -> int:
    """Score *document* out of 100.

    Meta title and meta description earn 30 points each at a recommended
    length and 10 otherwise; an OG image and a slug no other page uses earn
    20 points each.
    """
    seo = document.seo
    score = _length_points(seo.meta_title, META_TITLE_RANGE)
    score += _length_points(seo.meta_description, META_DESCRIPTION_RANGE)
    if seo.og_image:
        score += 20
    if document.slug and not is_taken(document.id, document.slug, pages):
        score += 20
    return min(100, score)


def seo_rating(score: int) -> str:
    if score >= 80:
        return "excellent"
    if score >= 50:
        return "needs_improvement"
    return "poor"
