import pytest

from intent_api.errors import LeadValidationError
from intent_api.schemas.profile import LabelCategory, LabelWeight, MatrixCell
from intent_api.services.categorical import CategoricalScorer, CategoryMapper, ScoreMatrix


@pytest.fixture
def engagement():
    return CategoricalScorer(
        "engagement_readiness",
        [
            LabelWeight(label="not interested", weight=4),
            LabelWeight(label="Ready to Apply", weight=40),
            LabelWeight(label="interested", weight=26),
        ],
    )


def test_exact_and_substring_match(engagement):
    assert engagement.score("ready to apply") == 40
    assert engagement.score("  READY TO APPLY (this intake) ") == 40


def test_first_declared_label_wins(engagement):
    # "not interested" also contains "interested"; declaration order decides
    assert engagement.match("Not Interested") == "not interested"
    assert engagement.score("Not Interested") == 4
    assert engagement.score("interested") == 26


def test_unmatched_and_empty_score_zero(engagement):
    assert engagement.score("maybe later") == 0
    assert engagement.score("") == 0
    assert engagement.score(None) == 0


def test_strict_rejects_unknown_label(engagement):
    with pytest.raises(LeadValidationError) as exc:
        engagement.score_strict("maybe later")
    assert exc.value.field == "engagement_readiness"
    assert "ready to apply" in exc.value.accepted
    assert '"maybe later"' in exc.value.message


def test_duplicate_labels_keep_first_weight():
    scorer = CategoricalScorer("t", [LabelWeight(label="soon", weight=5), LabelWeight(label="soon", weight=50)])
    assert scorer.score("soon") == 5


def test_default_profile_tables(scorer):
    assert scorer.engagement.score("Ready to Apply") == 40
    assert scorer.engagement.score("just exploring options") == 16
    assert scorer.timeline.score("within 30 days") == 40
    assert scorer.timeline.score("just researching") == 10


def test_category_mapper_and_matrix():
    mapper = CategoryMapper(
        "enrollment_timeline",
        [LabelCategory(label="30 days", category="soon"), LabelCategory(label="next year", category="later")],
    )
    matrix = ScoreMatrix([MatrixCell(readiness="hot", timeline="soon", score=88)], default_score=30)

    assert mapper.category("Within 30 days") == "soon"
    assert mapper.category("no idea") is None
    assert matrix.lookup("hot", "soon") == 88
    assert matrix.lookup("hot", "later") == 30
    assert matrix.lookup(None, "soon") == 30


def test_matrix_strict_lookup_fails_on_missing_pair():
    matrix = ScoreMatrix([MatrixCell(readiness="hot", timeline="soon", score=88)], default_score=30)
    with pytest.raises(LeadValidationError) as exc:
        matrix.lookup("hot", "later", strict=True)
    assert exc.value.accepted == ["hot/soon"]
