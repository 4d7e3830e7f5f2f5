"""Tests for salesdesk.services.slugs."""

import re

import pytest

from salesdesk.models.page import PageDocument, PageType
from salesdesk.services.slugs import is_taken, is_valid_slug, slugify

_SAMPLES = [
    "",
    "   ",
    "How to Manage Ulcer Naturally",
    "--Already-a-slug--",
    "Aloe Vera Gel!!! 50% OFF (today only)",
    "Café Crème & Brûlée",
    "日本語のタイトル",
    "a" * 49 + " b",
    "word " * 30,
    "MiXeD___case---and   spaces",
    "emoji 🚀 launch",
]


class TestSlugify:
    def test_title_becomes_hyphenated_slug(self):
        assert slugify("How to Manage Ulcer Naturally") == "how-to-manage-ulcer-naturally"

    def test_runs_of_symbols_collapse_to_one_hyphen(self):
        assert slugify("Aloe -- Vera!!! Gel") == "aloe-vera-gel"

    def test_leading_and_trailing_separators_are_trimmed(self):
        assert slugify("  ***Detox Challenge***  ") == "detox-challenge"

    def test_accents_are_folded_to_ascii(self):
        assert slugify("Café Crème") == "cafe-creme"

    def test_empty_and_symbol_only_input_gives_empty_slug(self):
        assert slugify("") == ""
        assert slugify("!!! ???") == ""

    def test_length_is_capped_at_fifty(self):
        assert len(slugify("word " * 30)) <= 50

    def test_cap_does_not_leave_trailing_hyphen(self):
        slug = slugify("a" * 49 + " b")
        assert slug == "a" * 49
        assert not slug.endswith("-")

    @pytest.mark.parametrize("text", _SAMPLES)
    def test_idempotent(self, text):
        assert slugify(slugify(text)) == slugify(text)

    @pytest.mark.parametrize("text", _SAMPLES)
    def test_output_shape(self, text):
        slug = slugify(text)
        assert re.fullmatch(r"[a-z0-9-]*", slug)
        assert len(slug) <= 50
        assert not slug.startswith("-")
        assert not slug.endswith("-")


class TestIsValidSlug:
    def test_canonical_slug_is_valid(self):
        assert is_valid_slug("promo-2024")

    @pytest.mark.parametrize("slug", ["", "Promo", "promo--deal", "-promo", "promo-", "promo deal", "a" * 51])
    def test_malformed_slugs_are_rejected(self, slug):
        assert not is_valid_slug(slug)


def _page(page_id: str, slug: str) -> PageDocument:
    return PageDocument(id=page_id, type=PageType.PRODUCT, slug=slug)


class TestIsTaken:
    def test_slug_used_by_another_page_is_taken(self):
        pages = [_page("a", "promo"), _page("b", "other")]
        assert is_taken("b", "promo", pages) is True

    def test_own_slug_is_not_taken(self):
        pages = [_page("a", "promo")]
        assert is_taken("a", "promo", pages) is False

    def test_unused_slug_is_free(self):
        pages = [_page("a", "promo")]
        assert is_taken("b", "fresh", pages) is False

    def test_both_pages_sharing_a_slug_see_it_taken(self):
        pages = [_page("a", "promo"), _page("b", "promo")]
        assert is_taken("a", "promo", pages) is True
        assert is_taken("b", "promo", pages) is True

    def test_empty_collection(self):
        assert is_taken("a", "promo", []) is False
