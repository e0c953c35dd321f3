from typing import Optional, Sequence

SENTENCE_TERMINALS = ".!?"
_BREAKS = (" ", "\n")


def is_sentence_terminal(symbols: Sequence[str], index: int,
                         terminals: str = SENTENCE_TERMINALS) -> bool:
    """
    A terminal symbol followed by a space or newline ends a sentence.
    The last index always counts: the end of the text is a pause point too.
    """
    n = len(symbols)
    if index < 0 or index >= n:
        return False
    if index == n - 1:
        return True
    return symbols[index] in terminals and symbols[index + 1] in _BREAKS


class BoundaryNotifier:
    """Gates scroll requests to sentence ends, at most once per index."""

    def __init__(self, terminals: str = SENTENCE_TERMINALS):
        self.terminals = terminals
        self.last_index = -1

    def reset(self):
        self.last_index = -1

    def check(self, symbols: Sequence[str], index: int) -> Optional[int]:
        """Return index when a scroll should fire for the slot just evaluated."""
        if index <= self.last_index:
            return None
        if not is_sentence_terminal(symbols, index, self.terminals):
            return None
        self.last_index = index
        return index
