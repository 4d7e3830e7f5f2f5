"""FastAPI dependencies resolving the services attached to ``app.state``."""

from fastapi import Request

from salesdesk.config import Settings
from salesdesk.services.currency import CurrencyService
from salesdesk.services.store import PageStore


def get_store(request: Request) -> PageStore:
    return request.app.state.store


def get_currency_service(request: Request) -> CurrencyService:
    return request.app.state.currency_service


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
