"""Root / welcome endpoint."""

from fastapi import APIRouter, Depends

from policycheck.core.config import Settings, get_settings
from policycheck.schemas.common import MessageResponse

router = APIRouter(tags=["root"])


@router.get("/", response_model=MessageResponse)
def root(settings: Settings = Depends(get_settings)) -> MessageResponse:
    """Welcome message and API info."""
    return MessageResponse(
        message=f"{settings.app_name} is running. POST /api/check to analyze a seller's policies."
    )
