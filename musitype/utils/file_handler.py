from pathlib import Path
from typing import Union
import logging

from musitype.app.errors import TextSourceError

log = logging.getLogger(__name__)

SAMPLE_LYRICS = [
    "Today is gonna be the day that they're gonna throw it back to you",
    "By now you should've somehow realized what you gotta do",
    "I don't believe that anybody feels the way I do about you now",
    "And all the roads we have to walk are winding",
    "And all the lights that lead us there are blinding",
    "There are many things that I would like to say to you but I don't know how",
]

WELCOME_TEXT = (
    "Welcome to Musitype. Press Play, then type along with the music. "
    "Correct keystrokes glow, mistakes turn red."
)


def sample_lyrics() -> str:
    return " ".join(SAMPLE_LYRICS)


def normalize_text(text: str) -> str:
    return (text or "").replace("\r\n", "\n").replace("\r", "\n").strip()


def load_text_file(path: Union[str, Path]) -> str:
    """Read a UTF-8 text file as practice text."""
    p = Path(path)
    try:
        data = p.read_text(encoding="utf-8", errors="ignore")
    except OSError as e:
        log.warning("Failed to load text %s: %s", p, e)
        raise TextSourceError(f"Cannot read {p}: {e}") from e
    return normalize_text(data)
