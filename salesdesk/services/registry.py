"""Per-type authoring workflows, payloads, and labels.

Every lookup is keyed by the closed :class:`PageType` enumeration.  The
tables are checked against the enumeration when the module is imported, so a
page type added without a workflow fails loudly instead of yielding an empty
editor.  Steps the editor shell has not built yet still appear here; showing
a placeholder for them is a rendering concern.
"""

import copy
from typing import Any, Dict, List, Tuple, Union

from salesdesk.errors import ConfigurationError
from salesdesk.models.page import PageType
from salesdesk.models.workflow import WorkflowStep

_Steps = Tuple[Tuple[str, str], ...]

_WORKFLOWS: Dict[PageType, _Steps] = {
    PageType.PRODUCT: (
        ("OVERVIEW", "Overview"),
        ("PRODUCTS", "Product Selection"),
        ("CONTENT", "Page Content"),
        ("TRUST_PROOF", "Trust & Proof"),
        ("CTA_SETUP", "WhatsApp & CTA"),
        ("CHECKOUT", "Checkout"),
        ("DESIGN", "Design"),
        ("PUBLISH", "Publish"),
    ),
    PageType.BUNDLE: (
        ("PKG_BASICS", "Package Basics"),
        ("PKG_PRODUCTS", "Products"),
        ("EDUCATION", "Education"),
        ("TRUST_BUILDER", "Trust Builder"),
        ("PRICING", "Pricing & Offer"),
        ("CHECKOUT", "Checkout"),
        ("CTA_SETUP", "Lead Engine"),
        ("PUBLISH", "Publish"),
    ),
    PageType.PROBLEM: (
        ("PAGE_BASICS", "Basics"),
        ("PROBLEM_EDU", "The Problem"),
        ("MISTAKES", "Common Mistakes"),
        ("LIFESTYLE", "Lifestyle"),
        ("SOLUTION", "Forever Solution"),
        ("PROOF", "Social Trust"),
        ("CTA_SETUP", "Call To Action"),
        ("COMPLIANCE", "Compliance"),
        ("PUBLISH", "Publish"),
    ),
    PageType.CAPTURE: (
        ("OVERVIEW", "Overview"),
        ("LEAD_FORM", "Lead Form"),
        ("CTA_SETUP", "WhatsApp & CTA"),
        ("PUBLISH", "Publish"),
    ),
    PageType.BRAND: (
        ("OVERVIEW", "Overview"),
        ("PROFILE", "Personal Profile"),
        ("PRODUCTS", "Featured Products"),
        ("PROOF", "Social Trust"),
        ("CTA_SETUP", "WhatsApp & CTA"),
        ("PUBLISH", "Publish"),
    ),
    PageType.RECRUIT: (
        ("OVERVIEW", "Overview"),
        ("OPPORTUNITY", "The Opportunity"),
        ("PROOF", "Success Stories"),
        ("CTA_SETUP", "Call To Action"),
        ("COMPLIANCE", "Compliance"),
        ("PUBLISH", "Publish"),
    ),
}

_LABELS: Dict[PageType, str] = {
    PageType.PRODUCT: "Product Sales",
    PageType.BUNDLE: "Package Bundle",
    PageType.PROBLEM: "Problem Solver",
    PageType.CAPTURE: "Lead Capture",
    PageType.BRAND: "Personal Brand",
    PageType.RECRUIT: "Recruitment",
}

_CHECKOUT_DEFAULT = {"method": "whatsapp", "collect_address": False, "instructions": ""}

_PAYLOADS: Dict[PageType, Dict[str, Dict[str, Any]]] = {
    PageType.PRODUCT: {"checkout": _CHECKOUT_DEFAULT},
    PageType.BUNDLE: {"checkout": _CHECKOUT_DEFAULT},
    PageType.PROBLEM: {
        "problem_solver": {
            "problem_description": "",
            "who_it_affects": "",
            "symptoms": [],
            "causes": {"stress": True, "diet": True, "lifestyle": True, "others": ""},
        },
    },
    PageType.CAPTURE: {"lead_capture": {"headline": "", "fields": ["name", "whatsapp"]}},
    PageType.BRAND: {"personal_branding": {"bio": "", "rank": "", "photo_url": ""}},
    PageType.RECRUIT: {"recruitment": {"opportunity": "", "requirements": [], "earnings_disclaimer": ""}},
}

# Every payload field a document can carry, whatever its type
ALL_PAYLOAD_FIELDS = frozenset(field for fields in _PAYLOADS.values() for field in fields)

for _table_name, _table in (("workflow", _WORKFLOWS), ("label", _LABELS), ("payload", _PAYLOADS)):
    _missing = set(PageType) - set(_table)
    if _missing:
        raise ConfigurationError(
            f"No {_table_name} defined for page types: {sorted(t.value for t in _missing)}"
        )


def _resolve(page_type: Union[PageType, str]) -> PageType:
    try:
        return PageType(page_type)
    except ValueError:
        raise ConfigurationError(f"Unknown page type: {page_type!r}") from None


def get_workflow(page_type: Union[PageType, str]) -> List[WorkflowStep]:
    """Return the ordered editing steps for *page_type*.

    Raises:
        ConfigurationError: if *page_type* is not one of the known types.
    """
    steps = _WORKFLOWS[_resolve(page_type)]
    return [WorkflowStep(id=step_id, label=label) for step_id, label in steps]


def type_label(page_type: Union[PageType, str]) -> str:
    return _LABELS[_resolve(page_type)]


def payload_fields(page_type: Union[PageType, str]) -> frozenset:
    """Names of the type-specific payload fields valid for *page_type*."""
    return frozenset(_PAYLOADS[_resolve(page_type)])


def default_payloads(page_type: Union[PageType, str]) -> Dict[str, Dict[str, Any]]:
    """Fresh copies of the payloads seeded into a new page of *page_type*."""
    return copy.deepcopy(_PAYLOADS[_resolve(page_type)])
