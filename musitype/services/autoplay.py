from typing import Optional
import logging

from musitype.services.typing_engine import StepResult, TypingEngine

log = logging.getLogger(__name__)


class AutoPlaySimulator:
    """
    Types the expected symbol at a fixed cadence through the same
    apply_candidate path as manual typing, so every step counts as correct.
    """

    def __init__(self, engine: TypingEngine, chars_per_second: float = 5.0):
        if chars_per_second <= 0:
            raise ValueError("chars_per_second must be positive")
        self.engine = engine
        self.chars_per_second = float(chars_per_second)
        self.enabled = False
        self._generation = None

    @property
    def interval_ms(self) -> int:
        return max(1, int(round(1000.0 / self.chars_per_second)))

    def enable(self) -> bool:
        """Turn on for the current session. Refused when there is nothing to type."""
        if self.engine.finished or not self.engine.playing:
            return False
        self.enabled = True
        self._generation = self.engine.generation
        log.info("Auto-play enabled at %.1f chars/s", self.chars_per_second)
        return True

    def disable(self) -> None:
        if self.enabled:
            log.info("Auto-play disabled at cursor %d", self.engine.cursor)
        self.enabled = False
        self._generation = None

    def tick(self) -> Optional[StepResult]:
        if not self.enabled:
            return None
        e = self.engine
        if e.generation != self._generation or e.finished or not e.playing:
            self.disable()
            return None
        result = e.apply_candidate(e.expected_symbol())
        if e.finished:
            self.disable()
        return result
