from typing import Dict, Literal, Optional

from pydantic import BaseModel

from salesdesk.models.currency import ConversionResult


class SlugCheckResponse(BaseModel):
    slug: str
    valid: bool
    available: bool


class ShareLinksResponse(BaseModel):
    public_url: str
    whatsapp: str
    facebook: str
    qr_code: str


class PublishResponse(BaseModel):
    id: str
    state: Literal["draft", "published"]
    slug: str
    public_url: Optional[str] = None


class LocalizedPrices(BaseModel):
    page_id: str
    version: int
    currency: str
    target_currency: str
    stale: bool
    """True when the page changed while the conversion was in flight.

    Stale results carry no converted prices; render the native ones.
    """
    products: Dict[str, ConversionResult] = {}
    packages: Dict[str, ConversionResult] = {}
    base_price: Optional[ConversionResult] = None



class SeoScoreResponse(BaseModel):
    score: int
    rating: Literal["excellent", "needs_improvement", "poor"]
