from __future__ import annotations
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Any, List
import json
import logging

log = logging.getLogger(__name__)


@dataclass
class Theme:
    name: str
    background: str
    primary: str
    secondary: str
    accent: str
    # per-slot colors
    pending: str = "#4b5563"
    active: str = "#d1d5db"
    correct: str = "#a78bfa"
    error: str = "#ef4444"


# -------- Built-in themes --------
THEMES: List[Theme] = [
    Theme(
        name="Musitype",
        background="#0b0b12",
        primary="#e5e7eb",
        secondary="#6b7280",
        accent="#8b5cf6",
        pending="#3f3f52",
        active="#d1d5db",
        correct="#a78bfa",
        error="#f43f5e",
    ),
    Theme(
        name="Monkeytype Dark",
        background="#0f1115",
        primary="#e5e7eb",
        secondary="#6b7280",
        accent="#eab308",
        pending="#4b5563",
        active="#e5e7eb",
        correct="#22c55e",
        error="#ef4444",
    ),
    Theme(
        name="Nord",
        background="#2e3440",
        primary="#eceff4",
        secondary="#88c0d0",
        accent="#bf616a",
        pending="#4c566a",
        active="#eceff4",
        correct="#a3be8c",
        error="#bf616a",
    ),
]

DEFAULT_THEME_INDEX = 0
_CUSTOM_FILE = Path("themes.json")
_REQUIRED = {"name", "background", "primary", "secondary", "accent"}


def theme_from_dict(d: Dict[str, Any]) -> Theme:
    missing = _REQUIRED - set(d.keys())
    if missing:
        raise ValueError(f"Missing theme keys: {', '.join(sorted(missing))}")
    known = {f.name for f in fields(Theme)}
    return Theme(**{k: str(v) for k, v in d.items() if k in known})


def theme_index(name: str) -> int:
    for i, t in enumerate(THEMES):
        if t.name == name:
            return i
    return DEFAULT_THEME_INDEX


def load_custom_themes(path: Path = _CUSTOM_FILE) -> int:
    """Append themes from themes.json (if present). Returns how many were added."""
    path = Path(path)
    if not path.exists():
        return 0
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        log.warning("Failed to read %s: %s", path, e)
        return 0
    if not isinstance(data, list):
        log.warning("%s must hold a list of themes", path)
        return 0
    added = 0
    for item in data:
        try:
            THEMES.append(theme_from_dict(item))
            added += 1
        except (ValueError, TypeError, AttributeError) as e:
            log.warning("Skipping custom theme: %s", e)
    return added
