"""
Rule-based classification of the free-text student inquiry.

Rules are tested in profile order and the first rule with any matching pattern
wins, so overlapping signals resolve deterministically ("apply" outranks
"scholarship" when admissions rules come first).
"""

import re
from dataclasses import dataclass

from intent_api.schemas.profile import InquiryConfig
from intent_api.services.normalizer import normalize


@dataclass(frozen=True)
class InquiryClassification:
    intent: str
    strength: str
    matched_pattern: str | None = None


class InquiryClassifier:
    def __init__(self, config: InquiryConfig):
        self.config = config
        self._rules = [
            (rule.intent, rule.strength, [re.compile(p, re.IGNORECASE) for p in rule.patterns])
            for rule in config.rules
        ]

    @property
    def default(self) -> InquiryClassification:
        return InquiryClassification(self.config.default_intent, self.config.default_strength)

    def classify(self, text) -> InquiryClassification:
        text = normalize(text)
        if len(text) < self.config.min_length:
            return self.default

        for intent, strength, patterns in self._rules:
            for pattern in patterns:
                if pattern.search(text):
                    return InquiryClassification(intent, strength, pattern.pattern)
        return self.default

    def strength_score(self, strength: str) -> int:
        return self.config.strength_scores.get(strength, 0)

    def adjustment(self, intent: str) -> int:
        return self.config.intent_adjustments.get(intent, 0)
