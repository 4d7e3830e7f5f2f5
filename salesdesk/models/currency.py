from typing import Literal, Optional

from pydantic import BaseModel, Field

ConversionStatus = Literal["converted", "not_needed", "unavailable"]


class ConversionResult(BaseModel):
    amount: float
    currency: str
    rate: Optional[float]
    is_converted: bool
    status: ConversionStatus
    """Outcome of the conversion.

    ``"not_needed"``
        Source and target currency are the same; ``rate`` is 1.

    ``"converted"``
        ``amount`` is expressed in the target currency at ``rate``.

    ``"unavailable"``
        No rate could be obtained. ``amount`` and ``currency`` are the
        original values and ``rate`` is ``None``; display the native price
        without implying an exchange.
    """


class ConvertRequest(BaseModel):
    amount: float = Field(ge=0)
    from_currency: str = Field(min_length=3, max_length=3)
    to_currency: str = Field(min_length=3, max_length=3)


class VisitorCurrencyResponse(BaseModel):
    currency: str
