"""Health and readiness endpoints."""

from fastapi import APIRouter, Depends

from policycheck.api.deps import get_signer
from policycheck.core.config import Settings, get_settings
from policycheck.engine.registry import DEFAULT_REGISTRY
from policycheck.schemas.common import HealthResponse
from policycheck.signing import AssessmentSigner

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health_check(
    settings: Settings = Depends(get_settings),
    signer: AssessmentSigner | None = Depends(get_signer),
) -> HealthResponse:
    """Return service health, environment and which optional layers are available."""
    return HealthResponse(
        status="ok",
        environment=settings.environment,
        registry_version=DEFAULT_REGISTRY.version,
        signing_available=signer is not None,
        generative_available=settings.generative_available,
    )
