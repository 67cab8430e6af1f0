"""Input normalization shared by every categorical lookup and text match."""

import re

_WHITESPACE = re.compile(r"\s+")


def normalize(value) -> str:
    """Trim, lowercase and collapse internal whitespace. None becomes ""."""
    if value is None:
        return ""
    if not isinstance(value, str):
        value = str(value)
    return _WHITESPACE.sub(" ", value).strip().lower()
