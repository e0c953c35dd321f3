from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Tuple
import logging
import time

from musitype.app.calculation import DEFAULT_FLOOR_MINUTES, Metrics, compute_metrics
from musitype.app.validation import KeyAction, KeyKind, SymbolNormalizer
from musitype.services.boundary import SENTENCE_TERMINALS, BoundaryNotifier

log = logging.getLogger(__name__)


class SlotStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass(frozen=True)
class CharacterSlot:
    symbol: str
    status: SlotStatus = SlotStatus.PENDING


@dataclass
class TypingStats:
    correct: int = 0
    incorrect: int = 0

    @property
    def total(self) -> int:
        return self.correct + self.incorrect


@dataclass(frozen=True)
class StepResult:
    index: int                    # slot that changed
    correct: bool
    metrics: Metrics
    scroll_index: Optional[int] = None
    finished: bool = False


@dataclass(frozen=True)
class Snapshot:
    slots: Tuple[CharacterSlot, ...]
    cursor: int
    correct: int
    incorrect: int


class TypingEngine:
    """
    Per-character matching state machine for one practice text.

    Slots before the cursor are CORRECT/INCORRECT, the slot at the cursor is
    ACTIVE and everything after it is PENDING. cursor == length means finished.
    """

    def __init__(
        self,
        text: str = "",
        normalizer: Optional[SymbolNormalizer] = None,
        terminals: str = SENTENCE_TERMINALS,
        floor_minutes: float = DEFAULT_FLOOR_MINUTES,
        clock: Callable[[], float] = time.monotonic,
        playing: bool = False,
    ):
        self.normalizer = normalizer or SymbolNormalizer()
        self.boundary = BoundaryNotifier(terminals)
        self.floor_minutes = floor_minutes
        self.clock = clock
        self.playing = playing
        self.generation = 0
        self.initialize(text)

    # ---------- session ----------
    def initialize(self, text: str) -> None:
        """Rebuild the session from text; nothing carries over from the previous one."""
        self.text = text or ""
        self._slots: List[CharacterSlot] = [CharacterSlot(ch) for ch in self.text]
        if self._slots:
            self._slots[0] = CharacterSlot(self._slots[0].symbol, SlotStatus.ACTIVE)
        self.cursor = 0
        self.started_at: Optional[float] = None
        self.stats = TypingStats()
        self.boundary.reset()
        self.generation += 1
        log.info("Session %d initialized with %d characters", self.generation, len(self._slots))

    def set_playing(self, playing: bool) -> None:
        self.playing = bool(playing)

    @property
    def slots(self) -> Tuple[CharacterSlot, ...]:
        return tuple(self._slots)

    @property
    def length(self) -> int:
        return len(self._slots)

    @property
    def finished(self) -> bool:
        return self.cursor >= len(self._slots)

    def expected_symbol(self) -> Optional[str]:
        if self.finished:
            return None
        return self._slots[self.cursor].symbol

    def elapsed_seconds(self) -> Optional[float]:
        if self.started_at is None:
            return None
        return max(0.0, self.clock() - self.started_at)

    def metrics(self) -> Metrics:
        return compute_metrics(
            self.stats.correct, self.stats.incorrect,
            self.elapsed_seconds(), self.floor_minutes,
        )

    def snapshot(self) -> Snapshot:
        return Snapshot(self.slots, self.cursor, self.stats.correct, self.stats.incorrect)

    # ---------- evaluation ----------
    def handle(self, action: KeyAction) -> Optional[StepResult]:
        """Dispatch a classified key; nothing happens once finished or while paused."""
        if self.finished or not self.playing:
            return None
        if action.kind is KeyKind.ERASE:
            return self.apply_erase()
        if action.kind is KeyKind.CANDIDATE:
            return self.apply_candidate(action.symbol)
        return None

    def apply_candidate(self, symbol: str) -> Optional[StepResult]:
        if self.finished or not self.playing:
            return None
        if self.started_at is None:
            self.started_at = self.clock()

        i = self.cursor
        expected = self._slots[i].symbol
        ok = self.normalizer.equal(symbol, expected)
        if ok:
            self._slots[i] = replace(self._slots[i], status=SlotStatus.CORRECT)
            self.stats.correct += 1
        else:
            self._slots[i] = replace(self._slots[i], status=SlotStatus.INCORRECT)
            self.stats.incorrect += 1

        if i + 1 < len(self._slots):
            self._slots[i + 1] = replace(self._slots[i + 1], status=SlotStatus.ACTIVE)
        self.cursor = i + 1

        log.debug("slot %d: typed %r expected %r -> %s", i, symbol, expected, ok)
        return StepResult(
            index=i,
            correct=ok,
            metrics=self.metrics(),
            scroll_index=self.boundary.check(self.text, i),
            finished=self.finished,
        )

    def apply_erase(self) -> Optional[StepResult]:
        if self.cursor <= 0:
            return None
        i = self.cursor
        if i < len(self._slots) and self._slots[i].status is SlotStatus.ACTIVE:
            self._slots[i] = replace(self._slots[i], status=SlotStatus.PENDING)

        prev = self._slots[i - 1]
        if prev.status is SlotStatus.CORRECT:
            self.stats.correct = max(self.stats.correct - 1, 0)
        elif prev.status is SlotStatus.INCORRECT:
            self.stats.incorrect = max(self.stats.incorrect - 1, 0)
        self._slots[i - 1] = replace(prev, status=SlotStatus.ACTIVE)
        self.cursor = i - 1

        return StepResult(
            index=i - 1,
            correct=prev.status is SlotStatus.CORRECT,
            metrics=self.metrics(),
        )
