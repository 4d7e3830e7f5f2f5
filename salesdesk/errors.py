"""Domain exceptions raised by the page-builder services.

Structural errors propagate to the caller and are translated to HTTP
responses by the handlers registered in :mod:`salesdesk.main`.
:class:`ConversionUnavailable` never leaves the currency service.
"""


class SalesDeskError(Exception):
    """Base class for every error raised by the page-builder core."""

    status_code = 500


class ConfigurationError(SalesDeskError):
    """A page type outside the closed enumeration was requested."""

    status_code = 500


class ValidationError(SalesDeskError):
    """An edit or publish was rejected; the stored document is unchanged."""

    status_code = 422

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class SlugConflict(SalesDeskError):
    """Publishing was blocked because another page already uses the slug."""

    status_code = 409

    def __init__(self, slug: str):
        super().__init__(
            f"The URL '/p/{slug}' is already used by another page. "
            "Choose a different slug and publish again."
        )
        self.slug = slug


class PageNotFound(SalesDeskError):
    status_code = 404

    def __init__(self, page_id: str):
        super().__init__(f"Page '{page_id}' does not exist.")
        self.page_id = page_id


class StaleVersion(SalesDeskError):
    """The caller edited an outdated copy of the document."""

    status_code = 409

    def __init__(self, page_id: str, expected: int, actual: int):
        super().__init__(
            f"Page '{page_id}' is at version {actual}, update was based on version {expected}."
        )
        self.expected = expected
        self.actual = actual


class ConversionUnavailable(SalesDeskError):
    """An exchange-rate lookup failed."""

    status_code = 503
