"""Visitor-currency estimates for a page's prices.

Conversions are a background refinement over the native prices.  The page
version is captured before the lookups start and compared afterwards; if the
page was edited (or deleted) in the meantime the converted values are
dropped and the result is flagged ``stale``.
"""

import asyncio
import logging

from salesdesk.errors import PageNotFound
from salesdesk.models.response import LocalizedPrices
from salesdesk.services.currency import CurrencyService
from salesdesk.services.pricing import display_price
from salesdesk.services.store import PageStore

logger = logging.getLogger(__name__)


async def localize_prices(
    store: PageStore,
    currency_service: CurrencyService,
    page_id: str,
    target_currency: str,
) -> LocalizedPrices:
    snapshot = store.get(page_id)
    source = snapshot.currency
    target = target_currency.upper()

    keys = []
    jobs = []
    for product in snapshot.products:
        keys.append(("products", product.id))
        jobs.append(currency_service.convert_price(product.price, source, target))
    for package in snapshot.packages:
        keys.append(("packages", package.id))
        jobs.append(currency_service.convert_price(display_price(package), source, target))
    if snapshot.base_price is not None:
        keys.append(("base_price", None))
        jobs.append(currency_service.convert_price(snapshot.base_price, source, target))

    results = await asyncio.gather(*jobs)

    try:
        current_version = store.get(page_id).version
    except PageNotFound:
        current_version = None

    localized = LocalizedPrices(
        page_id=page_id,
        version=snapshot.version,
        currency=source,
        target_currency=target,
        stale=current_version != snapshot.version,
    )
    if localized.stale:
        logger.info(
            "Discarding stale price conversion",
            extra={"page_id": page_id, "version": snapshot.version, "current": current_version},
        )
        return localized

    for (group, key), result in zip(keys, results):
        if group == "base_price":
            localized.base_price = result
        else:
            getattr(localized, group)[key] = result
    return localized
