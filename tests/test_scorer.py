import pytest

from intent_api.errors import LeadValidationError
from intent_api.schemas.classifier import LeadSignals
from intent_api.schemas.profile import ScoringProfile
from intent_api.services.profiles import load_profile
from intent_api.services.scorer import ReadinessScorer


def test_strong_lead_scores_high(scorer):
    result = scorer.score(
        LeadSignals(
            engagement_readiness="Ready to Apply",
            enrollment_timeline="within 30 days",
            student_inquiry="I want to apply for the MBA program",
        )
    )
    b = result.breakdown
    assert (b.engagement_score, b.timeline_score, b.inquiry_score) == (40, 40, 20)
    assert b.combined_score == 100
    assert result.inquiry_strength == "Strong"
    assert result.detected_intent == "Admissions Inquiry"
    assert result.readiness_score == 100
    assert result.readiness_bucket == "High"
    assert result.reasoning is None


def test_exploring_lead_scores_low(scorer):
    result = scorer.score(
        LeadSignals(
            engagement_readiness="just exploring options",
            enrollment_timeline="just researching",
            student_inquiry="",
        )
    )
    b = result.breakdown
    assert (b.engagement_score, b.timeline_score, b.inquiry_score) == (16, 10, 6)
    assert b.override_applied is False
    assert result.readiness_score == 32
    assert result.readiness_bucket == "Low"
    assert result.detected_intent == "General Inquiry"


def test_override_floor_is_exact(scorer):
    # 8 (not sure) + 0 (unrecognized timeline) + 6 (weak) = 14, timeline mentions "30"
    result = scorer.score(
        LeadSignals(engagement_readiness="not sure", enrollment_timeline="30+ days out", student_inquiry="")
    )
    assert result.breakdown.combined_score == 14
    assert result.breakdown.override_applied is True
    assert result.readiness_score == 70
    assert result.readiness_bucket == "High"


def test_unrecognized_label_scores_zero_when_lenient(scorer):
    result = scorer.score(
        LeadSignals(engagement_readiness="banana", enrollment_timeline="next year", student_inquiry="hello there")
    )
    assert result.breakdown.engagement_score == 0
    assert result.readiness_score == 18


def test_unrecognized_label_rejected_when_strict(default_profile):
    strict = ReadinessScorer(default_profile.model_copy(update={"strict": True}))
    with pytest.raises(LeadValidationError) as exc:
        strict.score(LeadSignals(engagement_readiness="banana", enrollment_timeline="next year"))
    assert exc.value.field == "engagement_readiness"


@pytest.mark.parametrize("missing", ["engagement_readiness", "enrollment_timeline"])
def test_missing_required_field(scorer, missing):
    signals = {"engagement_readiness": "ready to apply", "enrollment_timeline": "within 30 days"}
    signals[missing] = "   "
    with pytest.raises(LeadValidationError) as exc:
        scorer.score(LeadSignals(**signals))
    assert exc.value.field == missing
    assert exc.value.accepted == scorer.accepted_values(missing)
    assert missing in exc.value.message


@pytest.mark.parametrize(
    "inquiry",
    ["", "x" * 5000, "APPLY APPLY APPLY fees scholarship campus", "🙂🙂🙂", "\x00\x01 not sure", None],
)
def test_score_always_in_range(scorer, flash_scorer, inquiry):
    for s in (scorer, flash_scorer):
        for engagement in ("ready to apply", "not interested", "zzz"):
            result = s.score(
                LeadSignals(engagement_readiness=engagement, enrollment_timeline="next year", student_inquiry=inquiry)
            )
            assert isinstance(result.readiness_score, int)
            assert 0 <= result.readiness_score <= 100


def test_scores_are_clamped(default_profile):
    data = default_profile.model_dump()
    data["additive"]["engagement"] = [{"label": "ready", "weight": 90}]
    data["additive"]["timeline"] = [{"label": "now", "weight": 90}]
    result = ReadinessScorer(ScoringProfile.model_validate(data)).score(
        LeadSignals(engagement_readiness="ready", enrollment_timeline="now", student_inquiry="apply")
    )
    assert result.breakdown.combined_score == 200
    assert result.readiness_score == 100


def _first_label(categories, category):
    return next(c.label for c in categories if c.category == category)


_FLASH = load_profile("agent_flash")
_DEFAULT = load_profile("default")

MATRIX_CASES = [
    (
        _first_label(_FLASH.matrix.readiness_categories, cell.readiness),
        _first_label(_FLASH.matrix.timeline_categories, cell.timeline),
        cell.score,
    )
    for cell in _FLASH.matrix.cells
]

ADDITIVE_CASES = [
    (e.label, t.label, e.weight, t.weight)
    for e in _DEFAULT.additive.engagement
    for t in _DEFAULT.additive.timeline
]


@pytest.mark.parametrize("engagement, timeline, base_score", MATRIX_CASES)
def test_every_matrix_pair_is_deterministic(flash_scorer, engagement, timeline, base_score):
    signals = LeadSignals(engagement_readiness=engagement, enrollment_timeline=timeline, student_inquiry="fees?")
    first = flash_scorer.score(signals)
    assert first.breakdown.base_score == base_score
    assert flash_scorer.score(signals) == first


@pytest.mark.parametrize("engagement, timeline, engagement_score, timeline_score", ADDITIVE_CASES)
def test_every_additive_pair_is_deterministic(scorer, engagement, timeline, engagement_score, timeline_score):
    signals = LeadSignals(engagement_readiness=engagement, enrollment_timeline=timeline, student_inquiry="fees?")
    first = scorer.score(signals)
    assert (first.breakdown.engagement_score, first.breakdown.timeline_score) == (engagement_score, timeline_score)
    assert scorer.score(signals) == first


# ── Matrix scheme ────────────────────────────────────────────────────────────

def test_matrix_scoring_with_reasoning(flash_scorer):
    result = flash_scorer.score(
        LeadSignals(
            engagement_readiness="Ready to Apply",
            enrollment_timeline="within 30 days",
            student_inquiry="I want to apply for the MBA program",
            program_interest="MBA",
        )
    )
    assert result.breakdown.base_score == 88
    assert result.breakdown.adjustment == 8
    assert result.readiness_score == 96
    assert result.readiness_bucket == "High"
    assert result.reasoning == (
        'The lead describes their readiness as "ready to apply" and plans to enroll "within 30 days". '
        "They are interested in MBA. "
        "These answers map to the ready_now / within_30_days segment, which carries a base score of 88. "
        "Their inquiry reads as Admissions Inquiry (Strong signal), adjusting the score by +8. "
        "Final readiness score is 96, placing the lead in the High bucket."
    )


def test_matrix_override_and_reasoning_without_program(flash_scorer):
    # undecided/within_30_days = 40, Early Research -5 = 35, timeline mentions "30"
    result = flash_scorer.score(
        LeadSignals(
            engagement_readiness="Not sure",
            enrollment_timeline="30 days or so",
            student_inquiry="just exploring options",
        )
    )
    assert result.breakdown.combined_score == 35
    assert result.breakdown.override_applied is True
    assert result.readiness_score == 75
    assert "interested in" not in result.reasoning
    assert "lifted the score to the floor of 75." in result.reasoning


def test_matrix_missing_pair_uses_default(flash_scorer):
    result = flash_scorer.score(LeadSignals(engagement_readiness="not sure", enrollment_timeline="immediately"))
    assert result.breakdown.base_score == 30
    assert result.readiness_score == 30
    assert result.readiness_bucket == "Low"


def test_matrix_strict_mode_rejects_missing_pair(flash_profile):
    strict = ReadinessScorer(flash_profile.model_copy(update={"strict": True}))
    with pytest.raises(LeadValidationError):
        strict.score(LeadSignals(engagement_readiness="not sure", enrollment_timeline="immediately"))
    with pytest.raises(LeadValidationError) as exc:
        strict.score(LeadSignals(engagement_readiness="banana", enrollment_timeline="immediately"))
    assert exc.value.field == "engagement_readiness"
