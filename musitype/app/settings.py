from __future__ import annotations
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List
import json
import logging

from musitype.app.errors import SettingsError
from musitype.app.validation import SymbolNormalizer

log = logging.getLogger(__name__)

SETTINGS_FILE = Path("settings.json")


@dataclass
class Settings:
    # quote variants folded into the canonical apostrophe before comparing
    apostrophe_variants: List[str] = field(
        default_factory=lambda: ["‘", "’", "`"]
    )
    canonical_apostrophe: str = "'"
    terminal_symbols: str = ".!?"
    autoplay_chars_per_second: float = 5.0
    wpm_floor_minutes: float = 0.01
    min_custom_text_length: int = 10
    theme: str = "Musitype"

    def normalizer(self) -> SymbolNormalizer:
        return SymbolNormalizer(self.apostrophe_variants, self.canonical_apostrophe)


def _check(name: str, value: Any) -> Any:
    if name == "apostrophe_variants":
        if not isinstance(value, list) or not all(
            isinstance(v, str) and len(v) == 1 for v in value
        ):
            raise SettingsError(f"{name} must be a list of single characters")
        return list(value)
    if name == "canonical_apostrophe":
        if not isinstance(value, str) or len(value) != 1:
            raise SettingsError(f"{name} must be a single character")
        return value
    if name in ("terminal_symbols", "theme"):
        if not isinstance(value, str):
            raise SettingsError(f"{name} must be a string")
        return value
    if name in ("autoplay_chars_per_second", "wpm_floor_minutes"):
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise SettingsError(f"{name} must be a positive number")
        return float(value)
    if name == "min_custom_text_length":
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise SettingsError(f"{name} must be a non-negative integer")
        return value
    return value


def settings_from_dict(d: Dict[str, Any]) -> Settings:
    known = {f.name for f in fields(Settings)}
    values = {}
    for key, value in d.items():
        if key not in known:
            log.warning("Ignoring unknown setting %r", key)
            continue
        values[key] = _check(key, value)
    return Settings(**values)


def load_settings(path: Path = SETTINGS_FILE) -> Settings:
    """Read settings.json over the defaults. A missing file yields the defaults."""
    path = Path(path)
    if not path.exists():
        return Settings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise SettingsError(f"Cannot read {path}: {e}") from e
    if not isinstance(data, dict):
        raise SettingsError(f"{path} must contain a JSON object")
    settings = settings_from_dict(data)
    log.info("Loaded settings from %s", path)
    return settings
