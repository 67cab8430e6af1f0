"""Score combination, business override and bucketing."""

from collections.abc import Sequence

from intent_api.schemas.profile import BucketThreshold, OverrideRule
from intent_api.services.normalizer import normalize

MIN_SCORE = 0
MAX_SCORE = 100


def clamp(score: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, int(score)))


def strong_structured_signal(engagement, timeline, rule: OverrideRule) -> bool:
    engagement = normalize(engagement)
    timeline = normalize(timeline)
    return any(m in engagement for m in rule.engagement_markers if m) or any(
        m in timeline for m in rule.timeline_markers if m
    )


def apply_override(score: int, engagement, timeline, rule: OverrideRule) -> tuple[int, bool]:
    """
    Lift a low combined score to the floor when a structured signal is strong.

    A weak free-text inquiry must not drag a lead who picked "ready to apply"
    or "within 30 days" into the low bucket.
    """
    if not rule.enabled or score >= rule.below:
        return score, False
    if strong_structured_signal(engagement, timeline, rule):
        return rule.floor, True
    return score, False


def bucket_for(score: int, thresholds: Sequence[BucketThreshold]) -> str:
    """Thresholds are descending by min_score; the last one starts at 0."""
    for threshold in thresholds:
        if score >= threshold.min_score:
            return threshold.label
    return thresholds[-1].label
