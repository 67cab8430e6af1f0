"""
Scoring profile loading.

Bundled profiles live next to this package in intent_api/profiles/*.json;
SCORING_PROFILE may also point at any JSON file on disk.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import ValidationError

from intent_api.errors import ProfileError
from intent_api.schemas.profile import ScoringProfile

PROFILE_DIR = Path(__file__).resolve().parent.parent / "profiles"


def bundled_profiles() -> list[str]:
    return sorted(p.stem for p in PROFILE_DIR.glob("*.json"))


def _resolve(name_or_path: str) -> Path:
    bundled = PROFILE_DIR / f"{name_or_path}.json"
    if bundled.is_file():
        return bundled
    path = Path(name_or_path).expanduser()
    if path.is_file():
        return path
    raise ProfileError(
        f"Unknown scoring profile {name_or_path!r}. "
        f"Bundled profiles: {', '.join(bundled_profiles())}"
    )


@lru_cache
def load_profile(name_or_path: str) -> ScoringProfile:
    """Load and validate a profile. Fails loudly on any schema mismatch."""
    path = _resolve(name_or_path)
    try:
        return ScoringProfile.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as e:
        raise ProfileError(f"Invalid scoring profile {path.name}: {e}") from e
