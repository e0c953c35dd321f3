from dataclasses import dataclass
from typing import List, Optional
import math

CHARS_PER_WORD = 5.0
DEFAULT_FLOOR_MINUTES = 0.01


@dataclass(frozen=True)
class Metrics:
    words_per_minute: int = 0
    accuracy_percent: int = 100


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def compute_wpm(correct: int, elapsed_seconds: Optional[float],
                floor_minutes: float = DEFAULT_FLOOR_MINUTES) -> int:
    """
    WPM = (correct chars / 5) / elapsed minutes.
    Elapsed time is clamped to floor_minutes so the first keystroke can't blow up.
    None (timer not started yet) yields 0.
    """
    if elapsed_seconds is None:
        return 0
    minutes = max(elapsed_seconds / 60.0, floor_minutes)
    return round_half_up((correct / CHARS_PER_WORD) / minutes)


def compute_accuracy(correct: int, incorrect: int) -> int:
    total = correct + incorrect
    if total <= 0:
        return 100
    return max(0, min(100, round_half_up(100.0 * correct / total)))


def compute_metrics(correct: int, incorrect: int, elapsed_seconds: Optional[float],
                    floor_minutes: float = DEFAULT_FLOOR_MINUTES) -> Metrics:
    return Metrics(
        words_per_minute=compute_wpm(correct, elapsed_seconds, floor_minutes),
        accuracy_percent=compute_accuracy(correct, incorrect),
    )


def smooth(values: List[float], factor: float = 0.25) -> List[float]:
    out, last = [], None
    for v in values:
        last = v if last is None else last + factor * (v - last)
        out.append(last)
    return out
