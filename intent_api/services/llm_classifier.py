"""
LLM-based intent classification.

Strict schema enforcement: any empty, non-JSON or mismatched reply is a hard
failure of the call. No retries.
"""

import json
import logging
import re
from functools import lru_cache

from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError

from intent_api.config import settings
from intent_api.errors import CollaboratorError
from intent_api.schemas.classifier import LeadSignals, LLMClassification, LLMOutput

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are an intent classifier. Respond with valid JSON only."

USER_PROMPT = """Classify the student intent.

Inputs:
- engagement_readiness: {engagement_readiness}
- enrollment_timeline: {enrollment_timeline}
- student_inquiry: {student_inquiry}
- program_interest: {program_interest}

Return JSON in this exact structure:
{{
  "intent": "schedule | explore | nurture",
  "readiness_score": number between 0 and 1,
  "risk_category": "low | medium | high",
  "propensity_score": integer between 0 and 100,
  "decision_summary": string
}}"""


@lru_cache
def _build_client() -> AsyncOpenAI:
    """Build the shared AsyncOpenAI client, optionally with a custom base URL."""
    kwargs: dict = {
        "api_key": settings.openai_api_key,
        "timeout": settings.openai_timeout_seconds,
        "max_retries": 0,
    }
    if settings.openai_base_url:
        kwargs["base_url"] = settings.openai_base_url
    return AsyncOpenAI(**kwargs)


def build_prompt(signals: LeadSignals) -> str:
    return USER_PROMPT.format(
        engagement_readiness=signals.engagement_readiness or "",
        enrollment_timeline=signals.enrollment_timeline or "",
        student_inquiry=signals.student_inquiry or "",
        program_interest=signals.program_interest or "",
    )


def bucket_for_llm(readiness_score: float, high_threshold: float | None = None) -> str:
    threshold = settings.llm_high_threshold if high_threshold is None else high_threshold
    return "High" if readiness_score >= threshold else "Low"


async def classify_with_llm(signals: LeadSignals, client: AsyncOpenAI | None = None) -> LLMOutput:
    """
    Ask the model for a strict-JSON classification of the raw signals.
    Raises CollaboratorError on transport errors or schema mismatch.
    """
    client = client or _build_client()
    try:
        response = await client.chat.completions.create(
            model=settings.openai_model,
            temperature=0.2,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(signals)},
            ],
        )
    except OpenAIError as e:
        raise CollaboratorError("LLM", str(e)) from e

    content = response.choices[0].message.content if response.choices else None
    if not content:
        raise CollaboratorError("LLM", "empty response")

    try:
        data = json.loads(_strip_markdown_json(content))
        result = LLMClassification.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise CollaboratorError("LLM", f"malformed response: {e}") from e

    logger.info("LLM classified lead: intent=%s readiness=%.2f", result.intent, result.readiness_score)
    return LLMOutput(**result.model_dump(), readiness_bucket=bucket_for_llm(result.readiness_score))


def _strip_markdown_json(text: str) -> str:
    """Remove ```json ... ``` wrapper if present."""
    text = text.strip()
    if text.startswith("```"):
        text = re.sub(r"^```(?:json)?\s*", "", text)
        text = re.sub(r"\s*```$", "", text)
    return text
