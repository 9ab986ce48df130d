"""Runtime configuration resolved from the environment."""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_MODEL = "gemini-3-flash-preview"
MAX_SUGGESTIONS = 20

API_KEY_VARIABLES = ("GEMINI_API_KEY", "API_KEY")
MODEL_VARIABLE = "RHYME_LAB_MODEL"
LEXICON_VARIABLE = "RHYME_LAB_LEXICON"


class ConfigurationError(RuntimeError):
    """Raised when required settings are missing."""


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    lexicon_path: Optional[Path] = None
    max_suggestions: int = MAX_SUGGESTIONS
    offline: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        api_key = next((env[name] for name in API_KEY_VARIABLES if env.get(name)), None)
        lexicon = env.get(LEXICON_VARIABLE)
        return cls(
            api_key=api_key,
            model=env.get(MODEL_VARIABLE) or DEFAULT_MODEL,
            lexicon_path=Path(lexicon).expanduser() if lexicon else None,
        )

    def override(self, **values) -> "Settings":
        """Return a copy with every non-``None`` value applied."""

        changes = {name: value for name, value in values.items() if value is not None}
        if isinstance(changes.get("lexicon_path"), str):
            changes["lexicon_path"] = Path(changes["lexicon_path"]).expanduser()
        return replace(self, **changes)

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError(
                "No API key configured. Set GEMINI_API_KEY or pass --api-key (or use --offline)."
            )
        return self.api_key
