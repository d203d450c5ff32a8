"""LangChain chain for the generative policy review, using structured output."""

import logging

from langchain_core.tools import StructuredTool
from langchain_google_genai import ChatGoogleGenerativeAI

from policycheck.engine.models import GenerativeReview
from policycheck.engine.pipeline import analyze_text

logger = logging.getLogger(__name__)

MAX_RETRIES = 3


class GeminiReviewer:
    """
    Callable review function backed by Gemini.
    Retries up to MAX_RETRIES times if the model returns no parsed output.
    """

    def __init__(self, api_key: str, model_name: str, timeout: float) -> None:
        if not api_key:
            raise ValueError("GEMINI_API_KEY is not set")
        model = ChatGoogleGenerativeAI(
            model=model_name,
            google_api_key=api_key,
            temperature=0,
            timeout=timeout,
            max_retries=0,
        )
        self._structured = model.with_structured_output(GenerativeReview, include_raw=True)

    def __call__(self, prompt: str) -> GenerativeReview:
        for attempt in range(1, MAX_RETRIES + 1):
            logger.info("Generative review attempt %d/%d", attempt, MAX_RETRIES)
            response = self._structured.invoke(prompt)
            parsed = response.get("parsed") if isinstance(response, dict) else response
            if parsed is not None:
                logger.debug("Review result:\n%s", parsed.model_dump_json(indent=2))
                return parsed
            raw = response.get("raw") if isinstance(response, dict) else None
            logger.warning(
                "Model returned None on attempt %d/%d. Raw response: %s",
                attempt, MAX_RETRIES, raw,
            )
        raise RuntimeError("Model failed to return structured output after %d attempts" % MAX_RETRIES)


def _analyze_policy_text(text: str) -> dict:
    """Deterministic analysis of one policy document, as JSON."""
    return analyze_text(text).model_dump(mode="json")


# LangChain-compatible tool: use with bind_tools([...]) or an agent
analyze_policy_text_tool = StructuredTool.from_function(
    name="analyze_policy_text",
    description=(
        "Analyze a seller's return, shipping, terms-of-service or privacy policy text. "
        "Returns risk_score (0-10), risk_level, buyer_protection_rating (A+ to F), "
        "risk_factors with clause ids from the clause registry, positives and flags."
    ),
    func=_analyze_policy_text,
)
