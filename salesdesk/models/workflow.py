from typing import List

from pydantic import BaseModel

from salesdesk.models.page import PageType


class WorkflowStep(BaseModel):
    id: str
    label: str


class WorkflowResponse(BaseModel):
    type: PageType
    label: str
    steps: List[WorkflowStep]
