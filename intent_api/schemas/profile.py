"""
Scoring profile schema.

A profile is the whole rule set of the engine: lookup tables, inquiry rules,
override rule, bucket thresholds and reasoning templates. Profiles are plain
JSON; list order is significant wherever first-match semantics apply.
"""

import re
from string import Formatter
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

Strength = Literal["Weak", "Medium", "Strong"]


class LabelWeight(BaseModel):
    label: str
    weight: int


class LabelCategory(BaseModel):
    label: str
    category: str


class MatrixCell(BaseModel):
    readiness: str
    timeline: str
    score: int


class InquiryRule(BaseModel):
    intent: str
    strength: Strength
    patterns: list[str] = Field(..., min_length=1)

    @field_validator("patterns")
    @classmethod
    def _patterns_compile(cls, patterns: list[str]) -> list[str]:
        for pattern in patterns:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"invalid pattern {pattern!r}: {e}") from e
        return patterns


class InquiryConfig(BaseModel):
    min_length: int = 3
    default_intent: str = "General Inquiry"
    default_strength: Strength = "Weak"
    rules: list[InquiryRule]
    strength_scores: dict[Strength, int] = Field(
        default_factory=lambda: {"Weak": 6, "Medium": 12, "Strong": 20}
    )
    intent_adjustments: dict[str, int] = Field(default_factory=dict)


class AdditiveConfig(BaseModel):
    """engagement_score + timeline_score + inquiry strength score."""

    engagement: list[LabelWeight] = Field(..., min_length=1)
    timeline: list[LabelWeight] = Field(..., min_length=1)


class MatrixConfig(BaseModel):
    """base_score[readiness category][timeline category] + intent adjustment."""

    readiness_categories: list[LabelCategory] = Field(..., min_length=1)
    timeline_categories: list[LabelCategory] = Field(..., min_length=1)
    cells: list[MatrixCell] = Field(..., min_length=1)
    default_score: int = 30


class OverrideRule(BaseModel):
    enabled: bool = True
    below: int = 40
    floor: int = Field(70, ge=0, le=100)
    engagement_markers: list[str] = Field(default_factory=lambda: ["ready"])
    timeline_markers: list[str] = Field(default_factory=lambda: ["30"])

    @model_validator(mode="after")
    def _floor_lifts(self) -> "OverrideRule":
        if self.floor < self.below:
            raise ValueError(f"override floor ({self.floor}) must not be below its threshold ({self.below})")
        return self


class BucketThreshold(BaseModel):
    label: str
    min_score: int = Field(..., ge=0, le=100)


# Every field a reasoning template may reference, with a value of the type the
# scorer puts in the trace. Templates are trial-formatted against it at load time.
SAMPLE_TRACE: dict = {
    "engagement_readiness": "ready to apply",
    "enrollment_timeline": "within 30 days",
    "student_inquiry": "i want to apply",
    "program_interest": "MBA",
    "readiness_category": "ready_now",
    "timeline_category": "within_30_days",
    "detected_intent": "Admissions Inquiry",
    "inquiry_strength": "Strong",
    "engagement_score": 40,
    "timeline_score": 40,
    "inquiry_score": 20,
    "base_score": 88,
    "adjustment": 8,
    "combined_score": 96,
    "override_applied": False,
    "override_floor": 70,
    "readiness_score": 96,
    "readiness_bucket": "High",
}

_formatter = Formatter()


def template_fields(template: str) -> list[str]:
    """Top-level field names referenced by a str.format template."""
    names = []
    for _, field_name, _, _ in _formatter.parse(template):
        if field_name:
            names.append(field_name.split(".")[0].split("[")[0])
    return names


class ReasoningTemplate(BaseModel):
    text: str
    when: str | None = None

    @model_validator(mode="after")
    def _check_template(self) -> "ReasoningTemplate":
        unknown = [n for n in template_fields(self.text) if n not in SAMPLE_TRACE]
        if self.when is not None and self.when not in SAMPLE_TRACE:
            unknown.append(self.when)
        if unknown:
            raise ValueError(f"reasoning template {self.text!r} references unknown fields: {', '.join(unknown)}")
        try:
            self.text.format(**SAMPLE_TRACE)
        except (ValueError, KeyError, IndexError, AttributeError, TypeError) as e:
            raise ValueError(f"reasoning template {self.text!r} does not format: {e}") from e
        return self


class ReasoningConfig(BaseModel):
    enabled: bool = False
    templates: list[ReasoningTemplate] = Field(default_factory=list)


class ExtractionConfig(BaseModel):
    """Candidate source keys per canonical field; fields left out keep the adapter defaults."""

    field_candidates: dict[str, list[str]] = Field(default_factory=dict)
    wrapper_keys: list[str] | None = None


class ScoringProfile(BaseModel):
    name: str
    scheme: Literal["additive", "matrix"]
    strict: bool = False
    additive: AdditiveConfig | None = None
    matrix: MatrixConfig | None = None
    inquiry: InquiryConfig
    override: OverrideRule = Field(default_factory=OverrideRule)
    buckets: list[BucketThreshold]
    reasoning: ReasoningConfig = Field(default_factory=ReasoningConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    crm_fields: dict[str, str] = Field(
        default_factory=lambda: {
            "detected_intent": "detected_intent",
            "readiness_score": "readiness_score",
            "readiness_bucket": "readiness_bucket",
        }
    )

    @model_validator(mode="after")
    def _check_consistency(self) -> "ScoringProfile":
        if self.scheme == "additive" and self.additive is None:
            raise ValueError("additive scheme requires an 'additive' section")
        if self.scheme == "matrix" and self.matrix is None:
            raise ValueError("matrix scheme requires a 'matrix' section")

        if not self.buckets:
            raise ValueError("at least one bucket threshold is required")
        mins = [b.min_score for b in self.buckets]
        if mins != sorted(mins, reverse=True) or len(set(mins)) != len(mins):
            raise ValueError("bucket thresholds must be strictly descending by min_score")
        if mins[-1] != 0:
            raise ValueError("the lowest bucket must start at min_score 0")
        return self
