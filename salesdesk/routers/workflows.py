import logging

from fastapi import APIRouter, HTTPException

from salesdesk.errors import ConfigurationError
from salesdesk.models.workflow import WorkflowResponse
from salesdesk.services import registry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["workflows"])


@router.get(
    "/workflows/{page_type}",
    response_model=WorkflowResponse,
    summary="Ordered editing steps for a page type",
)
async def workflow_for_type(page_type: str) -> WorkflowResponse:
    try:
        steps = registry.get_workflow(page_type)
    except ConfigurationError as exc:
        logger.warning("Workflow requested for unknown page type %r", page_type)
        raise HTTPException(status_code=404, detail=str(exc))

    return WorkflowResponse(type=page_type, label=registry.type_label(page_type), steps=steps)
