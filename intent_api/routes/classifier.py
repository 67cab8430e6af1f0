"""
POST /intent-classifier: lead readiness scoring.

Rules-engine scoring with optional CRM push-back, plus an LLM-backed variant.
Either the whole request succeeds or it fails with 400/429/500; nothing is
partially applied.
"""

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, Request
from openai import AsyncOpenAI

from intent_api.config import settings
from intent_api.errors import PayloadError, PayloadTooLarge
from intent_api.schemas.classifier import (
    AIOutput,
    ClassifierResponse,
    ErrorResponse,
    LLMClassifierResponse,
)
from intent_api.services.crm_client import CRMClient, crm_fields_for
from intent_api.services.extraction import FieldExtractor
from intent_api.services.llm_classifier import classify_with_llm
from intent_api.services.profiles import load_profile
from intent_api.services.rate_limiter import SlidingWindowRateLimiter
from intent_api.services.scorer import ReadinessScorer

logger = logging.getLogger(__name__)

_errors = {
    400: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

# ── Dependencies ─────────────────────────────────────────────────────────────

@lru_cache
def get_scorer() -> ReadinessScorer:
    return ReadinessScorer(load_profile(settings.scoring_profile))


def get_extractor(scorer: ReadinessScorer = Depends(get_scorer)) -> FieldExtractor:
    return FieldExtractor.from_config(scorer.profile.extraction)


@lru_cache
def get_rate_limiter() -> SlidingWindowRateLimiter:
    return SlidingWindowRateLimiter(settings.rate_limit_per_minute, window_seconds=60.0)


def get_crm_client() -> CRMClient | None:
    if not settings.crm_enabled:
        return None
    return CRMClient.from_settings()


def get_llm_client() -> AsyncOpenAI | None:
    """None lets the classifier build its own client from settings."""
    return None


def rate_limited(limiter: SlidingWindowRateLimiter = Depends(get_rate_limiter)) -> None:
    limiter.acquire()


router = APIRouter(
    prefix="/intent-classifier",
    tags=["intent-classifier"],
    dependencies=[Depends(rate_limited)],
    responses=_errors,
)


# ── Routes ───────────────────────────────────────────────────────────────────

@router.post("", response_model=ClassifierResponse, response_model_exclude_none=True)
async def classify_intent(
    request: Request,
    scorer: ReadinessScorer = Depends(get_scorer),
    extractor: FieldExtractor = Depends(get_extractor),
    crm: CRMClient | None = Depends(get_crm_client),
):
    """
    Score a lead from a raw webhook payload.

    - Accepts flat bodies or records wrapped under Current/After/Before.
    - 400 names the offending field and lists its accepted values.
    - When CRM push-back is enabled and the payload carries a lead id, the
      result is upserted before responding; a CRM failure fails the request.
    """
    payload = await _read_payload(request)
    lead = extractor.extract(payload)

    result = scorer.score(lead.signals)
    logger.info(
        "Lead scored: intent=%s score=%d bucket=%s profile=%s",
        result.detected_intent, result.readiness_score, result.readiness_bucket, scorer.profile.name,
    )

    if crm is not None and lead.lead_id:
        await crm.upsert(lead.lead_id, crm_fields_for(result, scorer.profile.crm_fields))

    return ClassifierResponse(
        ai_output=AIOutput(
            detected_intent=result.detected_intent,
            readiness_score=result.readiness_score,
            readiness_bucket=result.readiness_bucket,
            reasoning=result.reasoning,
        )
    )


@router.post("/llm", response_model=LLMClassifierResponse)
async def classify_intent_llm(
    request: Request,
    extractor: FieldExtractor = Depends(get_extractor),
    client: AsyncOpenAI | None = Depends(get_llm_client),
):
    """Classify a lead with the language model instead of the rules engine."""
    payload = await _read_payload(request)
    lead = extractor.extract(payload)
    output = await classify_with_llm(lead.signals, client=client)
    return LLMClassifierResponse(ai_output=output)


# ── Helpers ──────────────────────────────────────────────────────────────────

async def _read_payload(request: Request) -> dict:
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > settings.max_payload_bytes:
        raise PayloadTooLarge(
            f"Payload too large. Maximum size is {settings.max_payload_bytes} bytes."
        )

    try:
        payload = await request.json()
    except ValueError as e:
        raise PayloadError("Invalid JSON body.") from e

    if not isinstance(payload, dict):
        raise PayloadError("Payload must be a JSON object.")
    return payload
