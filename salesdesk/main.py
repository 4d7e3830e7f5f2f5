import logging
import logging.config

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from salesdesk.config import get_settings
from salesdesk.errors import ConfigurationError, SalesDeskError
from salesdesk.routers.currency import router as currency_router
from salesdesk.routers.pages import router as pages_router
from salesdesk.routers.public import limiter, router as public_router
from salesdesk.routers.workflows import router as workflows_router
from salesdesk.services.currency import CurrencyService
from salesdesk.services.store import PageStore

settings = get_settings()

logging.config.dictConfig(
    {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
            },
        },
        "root": {"level": settings.log_level, "handlers": ["console"]},
    }
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="SalesDesk – Sales Page Builder API",
    description="Create, edit, price, and publish typed sales pages for network-marketing teams.",
    version="1.0.0",
)

# Services shared by every request
app.state.settings = settings
app.state.store = PageStore(settings=settings)
app.state.currency_service = CurrencyService(settings)

# Rate-limiting state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(SalesDeskError)
async def domain_exception_handler(request: Request, exc: SalesDeskError) -> JSONResponse:
    if isinstance(exc, ConfigurationError):
        logger.error("Configuration error for %s: %s", request.url, exc)
    else:
        logger.info("%s for %s: %s", type(exc).__name__, request.url, exc)
    content = {"detail": str(exc)}
    if getattr(exc, "field", None):
        content["field"] = exc.field
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


app.include_router(pages_router)
app.include_router(workflows_router)
app.include_router(public_router)
app.include_router(currency_router)


@app.get("/", summary="Health check")
async def root() -> dict:
    return {"message": "Hello from SalesDesk"}
