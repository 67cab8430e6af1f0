"""
Field extraction from inbound webhook payloads.

Upstream senders disagree on field names and nesting: some post a flat body,
CRM automations wrap the record under "Current"/"After"/"Before" (sometimes as
a JSON-encoded string). Each canonical field has an ordered list of candidate
keys; the top level is tried first, then each wrapper in order.
"""

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from intent_api.schemas.classifier import LeadSignals
from intent_api.schemas.profile import ExtractionConfig

DEFAULT_FIELD_CANDIDATES: dict[str, list[str]] = {
    "engagement_readiness": ["engagement_readiness", "Engagement_Readiness", "ready_now", "readiness"],
    "enrollment_timeline": ["enrollment_timeline", "Enrollment_Timeline", "timeline"],
    "student_inquiry": ["student_inquiry", "Student_Inquiry", "free_text", "inquiry", "message"],
    "program_interest": ["program_interest", "Program_Interest", "program"],
    "lead_id": ["lead_id", "LeadId", "ProspectID", "ProspectId", "id"],
}

DEFAULT_WRAPPER_KEYS = ["Current", "After", "Before"]


@dataclass
class ExtractedLead:
    signals: LeadSignals
    lead_id: str | None = None


def _as_mapping(value) -> Mapping | None:
    if isinstance(value, Mapping):
        return value
    if isinstance(value, str) and value.strip().startswith("{"):
        try:
            decoded = json.loads(value)
        except json.JSONDecodeError:
            return None
        return decoded if isinstance(decoded, Mapping) else None
    return None


def _first_value(source: Mapping, keys: Sequence[str]) -> str | None:
    """Extract first matching key value as string."""
    for key in keys:
        val = source.get(key)
        if val is None or isinstance(val, (Mapping, list)):
            continue
        text = val.strip() if isinstance(val, str) else str(val)
        if text:
            return text
    return None


class FieldExtractor:
    def __init__(
        self,
        field_candidates: Mapping[str, Sequence[str]] | None = None,
        wrapper_keys: Sequence[str] | None = None,
    ):
        self.field_candidates = dict(field_candidates or DEFAULT_FIELD_CANDIDATES)
        self.wrapper_keys = list(wrapper_keys if wrapper_keys is not None else DEFAULT_WRAPPER_KEYS)

    @classmethod
    def from_config(cls, config: ExtractionConfig) -> "FieldExtractor":
        """Profile candidates replace the defaults field by field."""
        return cls({**DEFAULT_FIELD_CANDIDATES, **config.field_candidates}, config.wrapper_keys)

    def _sources(self, payload: Mapping) -> list[Mapping]:
        sources = [payload]
        for key in self.wrapper_keys:
            nested = _as_mapping(payload.get(key))
            if nested is not None:
                sources.append(nested)
        return sources

    def get(self, payload: Mapping, field: str) -> str | None:
        keys = self.field_candidates.get(field, [field])
        for source in self._sources(payload):
            value = _first_value(source, keys)
            if value is not None:
                return value
        return None

    def extract(self, payload: Mapping) -> ExtractedLead:
        signals = LeadSignals(
            engagement_readiness=self.get(payload, "engagement_readiness"),
            enrollment_timeline=self.get(payload, "enrollment_timeline"),
            student_inquiry=self.get(payload, "student_inquiry"),
            program_interest=self.get(payload, "program_interest"),
        )
        return ExtractedLead(signals=signals, lead_id=self.get(payload, "lead_id"))
