"""
Categorical lookups over CRM dropdown values.

Matching is "value contains label": CRM dropdowns often carry extra text
("Ready to apply (this intake)"), so equality is too strict. When several
labels could match, the first one in declaration order wins; profiles put
specific labels ahead of their substrings ("not interested" before "interested").
"""

from collections.abc import Iterable, Sequence

from intent_api.errors import LeadValidationError
from intent_api.schemas.profile import LabelCategory, LabelWeight, MatrixCell
from intent_api.services.normalizer import normalize


def first_match(value: str, labels: Iterable[str]) -> int | None:
    """Return the index of the first label contained in the (normalized) value."""
    value = normalize(value)
    if not value:
        return None
    for index, label in enumerate(labels):
        if label and label in value:
            return index
    return None


class CategoricalScorer:
    """Maps a categorical label to an integer weight."""

    def __init__(self, field: str, entries: Sequence[LabelWeight]):
        self.field = field
        self._entries = [(normalize(e.label), e.weight) for e in entries]

    @property
    def labels(self) -> list[str]:
        return [label for label, _ in self._entries]

    def match(self, value) -> str | None:
        index = first_match(value, self.labels)
        return None if index is None else self._entries[index][0]

    def score(self, value) -> int:
        index = first_match(value, self.labels)
        if index is None:
            return 0
        return self._entries[index][1]

    def score_strict(self, value) -> int:
        """Like score(), but unrecognized values are a validation error."""
        if self.match(value) is None:
            raise LeadValidationError(self.field, self.labels, value=normalize(value))
        return self.score(value)


class CategoryMapper:
    """Maps a categorical label to a canonical category name."""

    def __init__(self, field: str, entries: Sequence[LabelCategory]):
        self.field = field
        self._entries = [(normalize(e.label), e.category) for e in entries]

    @property
    def labels(self) -> list[str]:
        return [label for label, _ in self._entries]

    def category(self, value) -> str | None:
        index = first_match(value, self.labels)
        if index is None:
            return None
        return self._entries[index][1]


class ScoreMatrix:
    """Two-dimensional (readiness category x timeline category) base score table."""

    def __init__(self, cells: Sequence[MatrixCell], default_score: int):
        self._cells = {(c.readiness, c.timeline): c.score for c in cells}
        self.default_score = default_score

    def pairs(self) -> list[str]:
        return [f"{r}/{t}" for r, t in self._cells]

    def lookup(self, readiness: str | None, timeline: str | None, strict: bool = False) -> int:
        key = (readiness, timeline)
        if key in self._cells:
            return self._cells[key]
        if strict:
            raise LeadValidationError(
                "engagement_readiness/enrollment_timeline",
                self.pairs(),
                value=f"{readiness}/{timeline}",
            )
        return self.default_score
