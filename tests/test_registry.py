"""Tests for salesdesk.services.registry."""

import pytest

from salesdesk.errors import ConfigurationError
from salesdesk.models.page import PageType
from salesdesk.services import registry


class TestGetWorkflow:
    @pytest.mark.parametrize("page_type", list(PageType))
    def test_every_type_has_steps(self, page_type):
        steps = registry.get_workflow(page_type)
        assert steps
        assert all(step.id and step.label for step in steps)

    @pytest.mark.parametrize("page_type", list(PageType))
    def test_order_is_stable(self, page_type):
        first = [step.id for step in registry.get_workflow(page_type)]
        second = [step.id for step in registry.get_workflow(page_type)]
        assert first == second

    @pytest.mark.parametrize("page_type", list(PageType))
    def test_every_workflow_ends_with_publish(self, page_type):
        assert registry.get_workflow(page_type)[-1].id == "PUBLISH"

    def test_accepts_plain_string(self):
        assert registry.get_workflow("bundle") == registry.get_workflow(PageType.BUNDLE)

    def test_problem_workflow_order(self):
        ids = [step.id for step in registry.get_workflow(PageType.PROBLEM)]
        assert ids == [
            "PAGE_BASICS",
            "PROBLEM_EDU",
            "MISTAKES",
            "LIFESTYLE",
            "SOLUTION",
            "PROOF",
            "CTA_SETUP",
            "COMPLIANCE",
            "PUBLISH",
        ]

    @pytest.mark.parametrize("bogus", ["blog", "", "PRODUCT", None, 3])
    def test_unknown_type_raises(self, bogus):
        with pytest.raises(ConfigurationError):
            registry.get_workflow(bogus)

    def test_returned_list_is_a_fresh_copy(self):
        steps = registry.get_workflow(PageType.CAPTURE)
        steps.clear()
        assert registry.get_workflow(PageType.CAPTURE)


class TestPayloads:
    def test_problem_pages_carry_problem_solver(self):
        assert registry.payload_fields(PageType.PROBLEM) == {"problem_solver"}

    def test_checkout_applies_to_product_and_bundle(self):
        assert "checkout" in registry.payload_fields("product")
        assert "checkout" in registry.payload_fields("bundle")
        assert "checkout" not in registry.payload_fields("brand")

    def test_default_payloads_are_independent_copies(self):
        first = registry.default_payloads(PageType.PROBLEM)
        first["problem_solver"]["symptoms"].append("heartburn")
        assert registry.default_payloads(PageType.PROBLEM)["problem_solver"]["symptoms"] == []

    def test_unknown_type_raises(self):
        with pytest.raises(ConfigurationError):
            registry.payload_fields("webinar")


def test_type_labels():
    assert registry.type_label(PageType.BUNDLE) == "Package Bundle"
    assert registry.type_label("recruit") == "Recruitment"
