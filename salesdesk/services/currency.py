"""Visitor currency detection and price conversion.

Both remote lookups are best effort: a failed geolocation resolves to the
configured default currency and a failed rate lookup yields an
``"unavailable"`` :class:`ConversionResult` carrying the original price.
Neither ever raises to the caller of :meth:`CurrencyService.convert_price`
or :meth:`CurrencyService.detect_visitor_currency`.
"""

import ipaddress
import logging
import re
import time
from typing import Callable, Dict, Optional, Tuple

import httpx

from salesdesk.config import Settings, get_settings
from salesdesk.errors import ConversionUnavailable
from salesdesk.models.currency import ConversionResult

logger = logging.getLogger(__name__)

_CURRENCY_CODE = re.compile(r"^[A-Z]{3}$")


class RateCache:
    """Exchange rates keyed by ``(source, target)`` with a per-entry TTL."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: Dict[Tuple[str, str], Tuple[float, float]] = {}

    def get(self, source: str, target: str) -> Optional[float]:
        entry = self._entries.get((source, target))
        if entry is None:
            return None
        rate, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[(source, target)]
            return None
        return rate

    def set(self, source: str, target: str, rate: float) -> None:
        self._entries[(source, target)] = (rate, self._clock() + self._ttl)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def _public_address(client_ip: str) -> Optional[str]:
    """Return *client_ip* without any zone id if it is globally routable, else None."""
    address = client_ip.split("%")[0]
    try:
        return address if ipaddress.ip_address(address).is_global else None
    except ValueError:
        return None


class CurrencyService:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        cache: Optional[RateCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self.cache = cache if cache is not None else RateCache(self.settings.rate_cache_ttl)
        self._transport = transport

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, transport=self._transport)

    async def detect_visitor_currency(self, client_ip: Optional[str] = None) -> str:
        """Return the visitor's local currency code, or the default currency.

        Private, loopback and unparseable addresses skip the lookup since the
        provider could only locate this server.
        """
        default = self.settings.default_currency
        if client_ip is None:
            url = self.settings.geolocation_self_url
        else:
            address = _public_address(client_ip)
            if address is None:
                return default
            url = self.settings.geolocation_url.format(ip=address)

        try:
            async with self._client(self.settings.geolocation_timeout) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Currency detection failed, defaulting to %s: %s", default, exc)
            return default

        code = response.text.strip().upper()
        if not _CURRENCY_CODE.match(code):
            logger.warning("Geolocation returned %r, defaulting to %s", code[:20], default)
            return default
        return code

    async def get_exchange_rate(self, source: str, target: str) -> float:
        """Return the rate converting *source* into *target*.

        A cache miss fetches the provider's whole table for *source* and
        caches every rate in it.

        Raises:
            ConversionUnavailable: if the provider fails or lacks *target*.
        """
        source, target = source.upper(), target.upper()
        if source == target:
            return 1.0

        cached = self.cache.get(source, target)
        if cached is not None:
            return cached

        url = self.settings.exchange_rate_url.format(base=source)
        try:
            async with self._client(self.settings.exchange_rate_timeout) as client:
                response = await client.get(url)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise ConversionUnavailable(f"Rate lookup for {source} failed: {exc}") from exc

        rates = data.get("rates") if isinstance(data, dict) and data.get("result") == "success" else None
        if not isinstance(rates, dict):
            raise ConversionUnavailable(f"Rate provider returned no table for {source}")

        for code, value in rates.items():
            if isinstance(value, (int, float)) and value > 0:
                self.cache.set(source, str(code).upper(), float(value))

        rate = rates.get(target)
        if not isinstance(rate, (int, float)) or rate <= 0:
            raise ConversionUnavailable(f"No {source}->{target} rate available")
        return float(rate)

    async def convert_price(self, amount: float, source: str, target: str) -> ConversionResult:
        """Convert *amount* from *source* into *target*.

        Identical currencies short-circuit without any network call.
        """
        source, target = source.upper(), target.upper()
        if source == target:
            return ConversionResult(
                amount=amount, currency=source, rate=1.0, is_converted=False, status="not_needed"
            )

        try:
            rate = await self.get_exchange_rate(source, target)
        except ConversionUnavailable as exc:
            logger.warning("Showing native price in %s: %s", source, exc)
            return ConversionResult(
                amount=amount, currency=source, rate=None, is_converted=False, status="unavailable"
            )

        return ConversionResult(
            amount=amount * rate, currency=target, rate=rate, is_converted=True, status="converted"
        )
