import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from salesdesk.config import MAX_SUBTITLE_LENGTH, MAX_TITLE_LENGTH


class PageType(str, Enum):
    PRODUCT = "product"
    BUNDLE = "bundle"
    PROBLEM = "problem"
    CAPTURE = "capture"
    BRAND = "brand"
    RECRUIT = "recruit"


def new_id(prefix: str = "") -> str:
    return f"{prefix}{uuid.uuid4().hex}"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Product(BaseModel):
    id: str = Field(default_factory=lambda: new_id("prod_"))
    name: str = ""
    price: float = Field(default=0, ge=0)
    discount_price: Optional[float] = Field(default=None, ge=0)
    short_description: str = ""
    full_description: str = ""
    benefits: List[str] = Field(default_factory=list)
    usage_steps: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)


class Package(BaseModel):
    """A bundle of products sold together.

    ``total_price`` is derived from the member products by
    :mod:`salesdesk.services.pricing`; values sent by clients are overwritten.
    ``special_price`` is the author's display override and is never derived.
    """

    id: str = Field(default_factory=lambda: new_id("pkg_"))
    title: str = "New Bundle"
    description: str = ""
    product_ids: List[str] = Field(default_factory=list)
    total_price: float = 0
    special_price: Optional[float] = Field(default=None, ge=0)
    is_popular: bool = False

    @field_validator("product_ids")
    @classmethod
    def _unique_ids(cls, value: List[str]) -> List[str]:
        # membership is a set; keep first-seen order for display
        return list(dict.fromkeys(value))


class PricingOption(BaseModel):
    id: str = Field(default_factory=lambda: new_id("opt_"))
    name: str = "New Option"
    price_delta: float = 0
    features: List[str] = Field(default_factory=list)


class CTAButton(BaseModel):
    id: str = Field(default_factory=lambda: new_id("cta_"))
    label: str = "Order Now"
    action_type: Literal["link", "scroll-to-section", "messaging-deeplink"] = "scroll-to-section"
    style: Literal["primary", "outline", "link"] = "primary"
    url: str = "#products"


class Testimonial(BaseModel):
    id: str = Field(default_factory=lambda: new_id("tst_"))
    name: str = ""
    role: str = ""
    photo_url: Optional[str] = None
    quote: str = ""


class SeoSettings(BaseModel):
    meta_title: str = ""
    meta_description: str = ""
    og_image: Optional[str] = None


class PageDocument(BaseModel):
    """One authored sales page.

    Only the store mutates documents; ``is_published`` is changed by the
    publish state machine alone.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    type: PageType
    title: str = Field(default="", max_length=MAX_TITLE_LENGTH)
    subtitle: str = Field(default="", max_length=MAX_SUBTITLE_LENGTH)
    slug: str = ""
    slug_is_custom: bool = False
    currency: str = "USD"

    description: str = ""
    features: List[str] = Field(default_factory=list)
    testimonials: List[Testimonial] = Field(default_factory=list)
    seo: SeoSettings = Field(default_factory=SeoSettings)

    products: List[Product] = Field(default_factory=list)
    packages: List[Package] = Field(default_factory=list)
    base_price: Optional[float] = Field(default=None, ge=0)
    pricing_options: List[PricingOption] = Field(default_factory=list)
    ctas: List[CTAButton] = Field(default_factory=list)

    whatsapp_number: str = ""
    whatsapp_message: str = ""
    contact_email: str = ""
    contact_visible: bool = True
    refund_policy: str = ""
    terms_required: bool = False

    # Type-specific payloads; see registry.payload_fields
    problem_solver: Optional[Dict[str, Any]] = None
    checkout: Optional[Dict[str, Any]] = None
    personal_branding: Optional[Dict[str, Any]] = None
    lead_capture: Optional[Dict[str, Any]] = None
    recruitment: Optional[Dict[str, Any]] = None

    is_published: bool = False
    last_saved_at: datetime = Field(default_factory=utc_now)
    version: int = 1

    @field_validator("currency")
    @classmethod
    def _currency_code(cls, value: str) -> str:
        value = value.strip().upper()
        if len(value) != 3 or not value.isalpha():
            raise ValueError("currency must be a three-letter code such as 'USD'")
        return value
