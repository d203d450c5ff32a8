"""Route dependencies: generative validator and assessment signer built from settings."""

import logging
from functools import lru_cache

from fastapi import Depends

from policycheck.core.config import Settings, get_settings
from policycheck.engine.chain import GeminiReviewer
from policycheck.engine.hybrid import HybridValidator
from policycheck.signing import AssessmentSigner, SigningKeyError, resolve_signing_key

logger = logging.getLogger(__name__)


@lru_cache
def _gemini_reviewer(api_key: str, model_name: str, timeout: float) -> GeminiReviewer:
    return GeminiReviewer(api_key, model_name, timeout)


def get_validator(settings: Settings = Depends(get_settings)) -> HybridValidator:
    """Validator with the Gemini reviewer when configured, else a disabled one."""
    if not settings.generative_available:
        return HybridValidator(None)
    try:
        reviewer = _gemini_reviewer(settings.gemini_api_key, settings.gemini_model, settings.generative_timeout_seconds)
    except Exception:
        logger.exception("Could not initialise generative reviewer; continuing without it")
        return HybridValidator(None)
    return HybridValidator(reviewer)


def get_signer(settings: Settings = Depends(get_settings)) -> AssessmentSigner | None:
    """Signer for the configured key, or None when no usable key exists."""
    try:
        key = resolve_signing_key(settings.signing_key, settings.environment)
    except SigningKeyError as e:
        logger.error("Signing key is invalid: %s", e)
        return None
    if key is None:
        return None
    return AssessmentSigner(key, issuer=settings.issuer, ttl_seconds=settings.assessment_ttl_seconds)
