from fastapi import APIRouter, Depends, Request

from salesdesk.dependencies import get_currency_service
from salesdesk.models.currency import ConversionResult, ConvertRequest, VisitorCurrencyResponse
from salesdesk.routers.public import limiter
from salesdesk.services.currency import CurrencyService

router = APIRouter(prefix="/currency", tags=["currency"])


@router.get("/visitor", response_model=VisitorCurrencyResponse, summary="Detect the caller's currency")
@limiter.limit("30/minute")
async def visitor_currency(
    request: Request, currency_service: CurrencyService = Depends(get_currency_service)
) -> VisitorCurrencyResponse:
    """Always succeeds; falls back to the default currency when detection fails."""
    client_ip = request.client.host if request.client else None
    return VisitorCurrencyResponse(currency=await currency_service.detect_visitor_currency(client_ip))


@router.post("/convert", response_model=ConversionResult, summary="Convert an amount between currencies")
@limiter.limit("30/minute")
async def convert(
    request: Request,
    body: ConvertRequest,
    currency_service: CurrencyService = Depends(get_currency_service),
) -> ConversionResult:
    return await currency_service.convert_price(body.amount, body.from_currency, body.to_currency)
