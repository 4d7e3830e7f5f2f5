from typing import Any, Optional

from pydantic import BaseModel, Field

from salesdesk.models.page import PageType


class CreatePageRequest(BaseModel):
    type: PageType


class FieldUpdateRequest(BaseModel):
    field: str = Field(min_length=1)
    value: Any = None
    expected_version: Optional[int] = Field(
        default=None,
        ge=1,
        description="Reject the update when the stored document has moved past this version.",
    )


class PackageMemberRequest(BaseModel):
    product_id: str = Field(min_length=1)
