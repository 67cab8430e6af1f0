"""
Template-based reasoning text.

Each template is a str.format sentence filled from the scoring trace. A sentence
is dropped when a field it references is missing or empty, or when its `when`
flag is false, so absent optional inputs (program_interest) just shorten the text.
Templates are checked against the trace fields when the profile loads.
"""

from collections.abc import Mapping, Sequence

from intent_api.schemas.profile import ReasoningTemplate, template_fields


def _present(value) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def generate_reasoning(trace: Mapping, templates: Sequence[ReasoningTemplate]) -> str:
    sentences = []
    for template in templates:
        if template.when is not None and not trace.get(template.when):
            continue
        if not all(_present(trace.get(name)) for name in template_fields(template.text)):
            continue
        sentences.append(template.text.format(**trace))
    return " ".join(sentences)
