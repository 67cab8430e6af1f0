"""
Pydantic schemas for /intent-classifier.

LeadSignals is the flat input the scoring core accepts; payload-shape handling
lives in services/extraction.py.
"""

from typing import Literal

from pydantic import BaseModel, Field


class LeadSignals(BaseModel):
    engagement_readiness: str | None = None
    enrollment_timeline: str | None = None
    student_inquiry: str | None = None
    program_interest: str | None = None


class ScoreBreakdown(BaseModel):
    """Component scores. Additive profiles fill the first three, matrix profiles the next two."""

    engagement_score: int | None = None
    timeline_score: int | None = None
    inquiry_score: int | None = None
    base_score: int | None = None
    adjustment: int | None = None
    combined_score: int
    override_applied: bool = False


class ReadinessResult(BaseModel):
    detected_intent: str
    inquiry_strength: str
    readiness_score: int = Field(..., ge=0, le=100)
    readiness_bucket: str
    reasoning: str | None = None
    breakdown: ScoreBreakdown


class AIOutput(BaseModel):
    detected_intent: str
    readiness_score: int = Field(..., ge=0, le=100)
    readiness_bucket: str
    reasoning: str | None = None


class ClassifierResponse(BaseModel):
    success: Literal[True] = True
    ai_output: AIOutput


class LLMClassification(BaseModel):
    """Strict output schema expected from the language model."""

    intent: str
    readiness_score: float = Field(..., ge=0, le=1)
    risk_category: str
    propensity_score: int = Field(..., ge=0, le=100)
    decision_summary: str


class LLMOutput(LLMClassification):
    readiness_bucket: str


class LLMClassifierResponse(BaseModel):
    success: Literal[True] = True
    ai_output: LLMOutput


class ErrorResponse(BaseModel):
    success: Literal[False] = False
    error: str
