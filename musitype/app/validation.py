from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from PySide6.QtCore import Qt

from musitype.app.errors import TextSourceError


class KeyKind(Enum):
    IGNORE = "ignore"
    ERASE = "erase"
    CANDIDATE = "candidate"


@dataclass(frozen=True)
class KeyAction:
    kind: KeyKind
    symbol: str = ""


IGNORE = KeyAction(KeyKind.IGNORE)
ERASE = KeyAction(KeyKind.ERASE)


def candidate(symbol: str) -> KeyAction:
    return KeyAction(KeyKind.CANDIDATE, symbol)


def _code(k) -> int:
    # PySide6 hands out enum members or plain ints depending on version
    return int(getattr(k, "value", k))


_IGNORED_KEYS = frozenset(
    _code(k)
    for k in (
        Qt.Key_Shift, Qt.Key_Control, Qt.Key_Alt, Qt.Key_AltGr, Qt.Key_Meta,
        Qt.Key_Super_L, Qt.Key_Super_R, Qt.Key_Hyper_L, Qt.Key_Hyper_R,
        Qt.Key_CapsLock, Qt.Key_NumLock, Qt.Key_ScrollLock,
        Qt.Key_Tab, Qt.Key_Backtab, Qt.Key_Escape,
        Qt.Key_Up, Qt.Key_Down, Qt.Key_Left, Qt.Key_Right,
        Qt.Key_Home, Qt.Key_End, Qt.Key_PageUp, Qt.Key_PageDown,
        Qt.Key_Insert, Qt.Key_Delete, Qt.Key_Pause, Qt.Key_Print,
        Qt.Key_SysReq, Qt.Key_Menu, Qt.Key_unknown,
    )
)
_F_FIRST = _code(Qt.Key_F1)
_F_LAST = _code(Qt.Key_F35)

_BLOCKING_MODIFIERS = (
    Qt.KeyboardModifier.ControlModifier
    | Qt.KeyboardModifier.AltModifier
    | Qt.KeyboardModifier.MetaModifier
)


def classify_key(key, text: str = "", modifiers=Qt.KeyboardModifier.NoModifier) -> KeyAction:
    """
    Map one key press to IGNORE, ERASE or CANDIDATE(symbol).
    Unknown or multi-character keys are ignored, never an error.
    """
    if modifiers & _BLOCKING_MODIFIERS:
        return IGNORE
    code = _code(key)
    if code in _IGNORED_KEYS or _F_FIRST <= code <= _F_LAST:
        return IGNORE
    if code == _code(Qt.Key_Backspace):
        return ERASE
    if code == _code(Qt.Key_Space):
        return candidate(" ")
    if code in (_code(Qt.Key_Return), _code(Qt.Key_Enter)):
        return candidate("\n")
    if text and len(text) == 1 and text >= " " and text != "\x7f":
        return candidate(text)
    return IGNORE


def classify_event(ev) -> KeyAction:
    return classify_key(ev.key(), ev.text(), ev.modifiers())


def needs_suppression(action: KeyAction) -> bool:
    """Every classified key is consumed so the host never scrolls or edits on it."""
    return action.kind is not KeyKind.IGNORE


class SymbolNormalizer:
    """Folds visually-equivalent quote variants into one canonical apostrophe."""

    def __init__(self, variants: Iterable[str] = ("‘", "’", "`"), canonical: str = "'"):
        self.canonical = canonical
        self._table = str.maketrans({v: canonical for v in variants})

    def __call__(self, symbol: str) -> str:
        return symbol.translate(self._table)

    def equal(self, pressed: str, expected: str) -> bool:
        return self(pressed) == self(expected)


def validate_custom_text(text: str, min_length: int = 10) -> str:
    cleaned = (text or "").strip().replace("\r\n", "\n").replace("\r", "\n")
    if len(cleaned) < min_length:
        raise TextSourceError("Please enter more text for typing practice")
    return cleaned
