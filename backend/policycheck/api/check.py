"""Policy check endpoint: analyse a seller URL or raw policy text."""

import logging
from urllib.parse import urlsplit

from fastapi import APIRouter, Depends, HTTPException

from policycheck.api.deps import get_validator
from policycheck.core.config import Settings, get_settings
from policycheck.engine.hybrid import HybridValidator
from policycheck.engine.models import AnalysisResult
from policycheck.engine.pipeline import run_analysis
from policycheck.engine.registry import DEFAULT_REGISTRY
from policycheck.queries import analysis_cache_key, get_json, set_json
from policycheck.schemas.analysis import AnalysisRequest, CheckResponse
from policycheck.utils.url_utils import get_domain, normalize_url

router = APIRouter(tags=["check"])
logger = logging.getLogger(__name__)


def validate_request(body: AnalysisRequest) -> tuple[str | None, str | None]:
    """Return (seller_url, policy_text) normalized; 400 when neither is usable."""
    text = body.policy_text if body.policy_text and body.policy_text.strip() else None
    url = normalize_url(body.seller_url) if body.seller_url and body.seller_url.strip() else None
    if url is not None:
        parts = urlsplit(url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise HTTPException(status_code=400, detail="seller_url must be an http(s) URL")
    if url is None and text is None:
        raise HTTPException(status_code=400, detail="Either seller_url or policy_text is required")
    return url, text


async def perform_analysis(
    seller_url: str | None,
    policy_text: str | None,
    settings: Settings,
    validator: HybridValidator,
) -> AnalysisResult:
    """
    Run the pipeline. URL-only analyses are cached per registered domain; a cache that is
    down or empty never affects the answer.
    """
    cache_key = None
    if policy_text is None and seller_url is not None:
        cache_key = analysis_cache_key(get_domain(seller_url), DEFAULT_REGISTRY.version)
        try:
            cached = get_json(cache_key, AnalysisResult)
        except Exception as e:
            logger.warning("Cache lookup failed: %s", e)
            cached = None
        if cached is not None:
            logger.info("Cache hit for %s", cache_key)
            return cached

    result = await run_analysis(
        seller_url=seller_url,
        policy_text=policy_text,
        validator=validator,
        fetch_timeout=settings.fetch_timeout_seconds,
        use_browser=settings.fetch_use_browser,
    )

    if cache_key is not None and result.analysis_status != "no_content":
        try:
            set_json(cache_key, result, ttl_seconds=settings.cache_ttl_seconds)
        except Exception as e:
            logger.warning("Cache store failed: %s", e)
    return result


@router.post("/check", response_model=CheckResponse)
async def check_policy(
    body: AnalysisRequest,
    settings: Settings = Depends(get_settings),
    validator: HybridValidator = Depends(get_validator),
) -> CheckResponse:
    """Risk assessment of a seller's policies: score, level, grade, risk factors and positives."""
    seller_url, policy_text = validate_request(body)
    result = await perform_analysis(seller_url, policy_text, settings, validator)
    return CheckResponse.from_result(result, seller_url)
