"""
Readiness scoring engine.

normalize -> categorical lookup -> inquiry classification -> combine/clamp ->
business override -> bucket -> optional reasoning. Pure and stateless: one
ReadinessScorer per profile can serve every request.
"""

import logging

from intent_api.errors import LeadValidationError
from intent_api.schemas.classifier import LeadSignals, ReadinessResult, ScoreBreakdown
from intent_api.schemas.profile import ScoringProfile
from intent_api.services.categorical import CategoricalScorer, CategoryMapper, ScoreMatrix
from intent_api.services.combiner import apply_override, bucket_for, clamp
from intent_api.services.inquiry import InquiryClassifier
from intent_api.services.normalizer import normalize
from intent_api.services.reasoning import generate_reasoning

logger = logging.getLogger(__name__)


class ReadinessScorer:
    def __init__(self, profile: ScoringProfile):
        self.profile = profile
        self.inquiry = InquiryClassifier(profile.inquiry)

        if profile.scheme == "additive":
            self.engagement = CategoricalScorer("engagement_readiness", profile.additive.engagement)
            self.timeline = CategoricalScorer("enrollment_timeline", profile.additive.timeline)
        else:
            matrix = profile.matrix
            self.readiness_mapper = CategoryMapper("engagement_readiness", matrix.readiness_categories)
            self.timeline_mapper = CategoryMapper("enrollment_timeline", matrix.timeline_categories)
            self.matrix = ScoreMatrix(matrix.cells, matrix.default_score)

    def accepted_values(self, field: str) -> list[str]:
        if self.profile.scheme == "additive":
            scorer = self.engagement if field == "engagement_readiness" else self.timeline
            return scorer.labels
        mapper = self.readiness_mapper if field == "engagement_readiness" else self.timeline_mapper
        return mapper.labels

    def _require(self, signals: LeadSignals) -> tuple[str, str]:
        engagement = normalize(signals.engagement_readiness)
        timeline = normalize(signals.enrollment_timeline)
        for field, value in (("engagement_readiness", engagement), ("enrollment_timeline", timeline)):
            if not value:
                raise LeadValidationError(field, self.accepted_values(field))
        return engagement, timeline

    def score(self, signals: LeadSignals) -> ReadinessResult:
        engagement, timeline = self._require(signals)
        inquiry = self.inquiry.classify(signals.student_inquiry)

        trace = {
            "engagement_readiness": engagement,
            "enrollment_timeline": timeline,
            "student_inquiry": normalize(signals.student_inquiry),
            "program_interest": (signals.program_interest or "").strip(),
            "detected_intent": inquiry.intent,
            "inquiry_strength": inquiry.strength,
        }

        if self.profile.scheme == "additive":
            breakdown = self._score_additive(engagement, timeline, inquiry.strength)
        else:
            breakdown = self._score_matrix(engagement, timeline, inquiry.intent, trace)

        score = clamp(breakdown.combined_score)
        score, overridden = apply_override(score, engagement, timeline, self.profile.override)
        score = clamp(score)
        breakdown.override_applied = overridden
        bucket = bucket_for(score, self.profile.buckets)

        trace.update(breakdown.model_dump())
        trace.update(readiness_score=score, readiness_bucket=bucket, override_floor=self.profile.override.floor)

        reasoning = None
        if self.profile.reasoning.enabled:
            reasoning = generate_reasoning(trace, self.profile.reasoning.templates) or None

        logger.debug(
            "Scored lead: intent=%s strength=%s combined=%s final=%s bucket=%s override=%s",
            inquiry.intent, inquiry.strength, breakdown.combined_score, score, bucket, overridden,
        )
        return ReadinessResult(
            detected_intent=inquiry.intent,
            inquiry_strength=inquiry.strength,
            readiness_score=score,
            readiness_bucket=bucket,
            reasoning=reasoning,
            breakdown=breakdown,
        )

    def _score_additive(self, engagement: str, timeline: str, strength: str) -> ScoreBreakdown:
        if self.profile.strict:
            engagement_score = self.engagement.score_strict(engagement)
            timeline_score = self.timeline.score_strict(timeline)
        else:
            engagement_score = self.engagement.score(engagement)
            timeline_score = self.timeline.score(timeline)
        inquiry_score = self.inquiry.strength_score(strength)
        return ScoreBreakdown(
            engagement_score=engagement_score,
            timeline_score=timeline_score,
            inquiry_score=inquiry_score,
            combined_score=engagement_score + timeline_score + inquiry_score,
        )

    def _score_matrix(self, engagement: str, timeline: str, intent: str, trace: dict) -> ScoreBreakdown:
        strict = self.profile.strict
        readiness_category = self.readiness_mapper.category(engagement)
        timeline_category = self.timeline_mapper.category(timeline)
        if strict and readiness_category is None:
            raise LeadValidationError(
                "engagement_readiness", self.readiness_mapper.labels, value=engagement
            )
        if strict and timeline_category is None:
            raise LeadValidationError(
                "enrollment_timeline", self.timeline_mapper.labels, value=timeline
            )

        base_score = self.matrix.lookup(readiness_category, timeline_category, strict=strict)
        adjustment = self.inquiry.adjustment(intent)
        trace.update(readiness_category=readiness_category, timeline_category=timeline_category)
        return ScoreBreakdown(
            base_score=base_score,
            adjustment=adjustment,
            combined_score=base_score + adjustment,
        )
