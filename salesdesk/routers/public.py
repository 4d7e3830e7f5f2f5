"""Visitor-facing resolution of published pages at ``/p/{slug}``."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from salesdesk.dependencies import get_currency_service, get_store
from salesdesk.models.page import PageDocument
from salesdesk.models.response import LocalizedPrices
from salesdesk.services.currency import CurrencyService
from salesdesk.services.localizer import localize_prices
from salesdesk.services.sharing import resolve_ctas
from salesdesk.services.store import PageStore

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(prefix="/p", tags=["public"])


def _published_or_404(store: PageStore, slug: str) -> PageDocument:
    document = store.find_published(slug)
    if document is None:
        raise HTTPException(status_code=404, detail="Page not found.")
    return document


@router.get("/{slug}", response_model=PageDocument, summary="Resolve a published page by slug")
@limiter.limit("60/minute")
async def public_page(request: Request, slug: str, store: PageStore = Depends(get_store)) -> PageDocument:
    """Return the published page for *slug*; drafts are never exposed."""
    return resolve_ctas(_published_or_404(store, slug))


@router.get(
    "/{slug}/prices",
    response_model=LocalizedPrices,
    summary="Visitor-currency estimates for a published page",
)
@limiter.limit("30/minute")
async def public_prices(
    request: Request,
    slug: str,
    currency: Optional[str] = Query(
        default=None,
        min_length=3,
        max_length=3,
        description="Target currency; detected from the visitor address when omitted.",
    ),
    store: PageStore = Depends(get_store),
    currency_service: CurrencyService = Depends(get_currency_service),
) -> LocalizedPrices:
    """Convert every price on the page into the visitor's currency.

    The page renders with its native prices first; this endpoint is the
    background refinement.  The response echoes the page ``version`` and a
    ``stale`` flag so late results can be discarded.
    """
    document = _published_or_404(store, slug)

    if currency is None:
        client_ip = request.client.host if request.client else None
        currency = await currency_service.detect_visitor_currency(client_ip)

    logger.info(
        "Price localisation requested",
        extra={"slug": slug, "source": document.currency, "target": currency},
    )
    return await localize_prices(store, currency_service, document.id, currency)
