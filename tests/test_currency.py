"""Tests for salesdesk.services.currency.

Remote providers are replaced with ``httpx.MockTransport`` handlers so every
request the service makes can be counted and inspected.
"""

import asyncio

import httpx
import pytest

from salesdesk.config import Settings
from salesdesk.errors import ConversionUnavailable
from salesdesk.services.currency import CurrencyService, RateCache

_RATES = {"result": "success", "base_code": "USD", "rates": {"USD": 1, "GHS": 12.5, "NGN": 1550.0}}


class _Recorder:
    """MockTransport handler that records requests and replies via *respond*."""

    def __init__(self, respond):
        self.respond = respond
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)


def _service(respond, cache=None, **overrides):
    recorder = _Recorder(respond)
    settings = Settings(_env_file=None, **overrides)
    service = CurrencyService(settings, cache=cache, transport=httpx.MockTransport(recorder))
    return service, recorder


def _fail(request):
    raise AssertionError(f"unexpected request to {request.url}")


class _Clock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestConvertPrice:
    def test_converts_with_provider_rate(self):
        service, recorder = _service(lambda request: httpx.Response(200, json=_RATES))
        result = asyncio.run(service.convert_price(100, "USD", "GHS"))

        assert result.amount == 1250
        assert result.currency == "GHS"
        assert result.rate == 12.5
        assert result.is_converted is True
        assert result.status == "converted"
        assert str(recorder.requests[0].url) == "https://open.er-api.com/v6/latest/USD"

    def test_same_currency_makes_no_request(self):
        service, recorder = _service(_fail)
        result = asyncio.run(service.convert_price(42, "ghs", "GHS"))

        assert result.amount == 42
        assert result.currency == "GHS"
        assert result.is_converted is False
        assert result.status == "not_needed"
        assert recorder.requests == []

    def test_provider_failure_returns_native_price(self):
        service, _ = _service(lambda request: httpx.Response(503))
        result = asyncio.run(service.convert_price(100, "USD", "GHS"))

        assert result.amount == 100
        assert result.currency == "USD"
        assert result.rate is None
        assert result.is_converted is False
        assert result.status == "unavailable"

    def test_missing_target_rate_is_unavailable(self):
        service, _ = _service(lambda request: httpx.Response(200, json=_RATES))
        result = asyncio.run(service.convert_price(100, "USD", "XOF"))
        assert result.status == "unavailable"


class TestGetExchangeRate:
    def test_table_is_cached_for_later_lookups(self):
        service, recorder = _service(lambda request: httpx.Response(200, json=_RATES))

        async def lookups():
            return [
                await service.get_exchange_rate("USD", "GHS"),
                await service.get_exchange_rate("USD", "NGN"),
                await service.get_exchange_rate("usd", "ghs"),
            ]

        assert asyncio.run(lookups()) == [12.5, 1550.0, 12.5]
        assert len(recorder.requests) == 1

    def test_expired_entries_are_refetched(self):
        clock = _Clock()
        cache = RateCache(ttl_seconds=60, clock=clock)
        service, recorder = _service(lambda request: httpx.Response(200, json=_RATES), cache=cache)

        asyncio.run(service.get_exchange_rate("USD", "GHS"))
        clock.now += 59
        asyncio.run(service.get_exchange_rate("USD", "GHS"))
        assert len(recorder.requests) == 1

        clock.now += 1
        asyncio.run(service.get_exchange_rate("USD", "GHS"))
        assert len(recorder.requests) == 2

    def test_error_payload_raises(self):
        service, _ = _service(lambda request: httpx.Response(200, json={"result": "error"}))
        with pytest.raises(ConversionUnavailable):
            asyncio.run(service.get_exchange_rate("USD", "GHS"))

    def test_non_json_body_raises(self):
        service, _ = _service(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(ConversionUnavailable):
            asyncio.run(service.get_exchange_rate("USD", "GHS"))

    def test_failures_are_not_cached(self):
        service, _ = _service(lambda request: httpx.Response(500))
        with pytest.raises(ConversionUnavailable):
            asyncio.run(service.get_exchange_rate("USD", "GHS"))
        assert len(service.cache) == 0


class TestDetectVisitorCurrency:
    def test_public_ip_is_looked_up(self):
        service, recorder = _service(lambda request: httpx.Response(200, text="GHS\n"))
        assert asyncio.run(service.detect_visitor_currency("41.66.200.10")) == "GHS"
        assert str(recorder.requests[0].url) == "https://ipapi.co/41.66.200.10/currency/"

    def test_zone_id_is_dropped_from_the_lookup_url(self):
        service, recorder = _service(lambda request: httpx.Response(200, text="EUR"))
        assert asyncio.run(service.detect_visitor_currency("2a00:1450:4001:81b::200e%eth0")) == "EUR"
        assert str(recorder.requests[0].url) == "https://ipapi.co/2a00:1450:4001:81b::200e/currency/"

    def test_no_ip_asks_about_the_caller(self):
        service, recorder = _service(lambda request: httpx.Response(200, text="ngn"))
        assert asyncio.run(service.detect_visitor_currency()) == "NGN"
        assert str(recorder.requests[0].url) == "https://ipapi.co/currency/"

    @pytest.mark.parametrize("client_ip", ["127.0.0.1", "10.0.0.4", "192.168.1.20", "::1", "testclient"])
    def test_private_addresses_skip_the_lookup(self, client_ip):
        service, recorder = _service(_fail, default_currency="EUR")
        assert asyncio.run(service.detect_visitor_currency(client_ip)) == "EUR"
        assert recorder.requests == []

    def test_timeout_falls_back_to_default(self):
        def timeout(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        service, _ = _service(timeout)
        assert asyncio.run(service.detect_visitor_currency("41.66.200.10")) == "USD"

    def test_error_status_falls_back_to_default(self):
        service, _ = _service(lambda request: httpx.Response(429, text="RateLimited"))
        assert asyncio.run(service.detect_visitor_currency("41.66.200.10")) == "USD"

    @pytest.mark.parametrize("body", ["", "Undefined", "US", "{\"error\": true}"])
    def test_malformed_body_falls_back_to_default(self, body):
        service, _ = _service(lambda request: httpx.Response(200, text=body))
        assert asyncio.run(service.detect_visitor_currency("41.66.200.10")) == "USD"


class TestRateCache:
    def test_get_set_and_clear(self):
        cache = RateCache(ttl_seconds=10, clock=_Clock())
        assert cache.get("USD", "GHS") is None
        cache.set("USD", "GHS", 12.5)
        assert cache.get("USD", "GHS") == 12.5
        assert len(cache) == 1
        cache.clear()
        assert cache.get("USD", "GHS") is None
