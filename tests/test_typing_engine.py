"""Tests for the per-character typing engine."""

import pytest

from musitype.app.validation import ERASE, IGNORE, candidate
from musitype.services.typing_engine import SlotStatus, TypingEngine


def type_text(engine, text):
    results = []
    for ch in text:
        results.append(engine.apply_candidate(ch))
    return results


def assert_partition(engine):
    """Slots before the cursor are evaluated, the cursor slot is active, the rest pending."""
    slots = engine.slots
    for i, slot in enumerate(slots):
        if i < engine.cursor:
            assert slot.status in (SlotStatus.CORRECT, SlotStatus.INCORRECT)
        elif i == engine.cursor:
            assert slot.status is SlotStatus.ACTIVE
        else:
            assert slot.status is SlotStatus.PENDING
    assert sum(1 for s in slots if s.status is SlotStatus.ACTIVE) <= 1
    assert engine.stats.correct + engine.stats.incorrect == engine.cursor
    assert engine.stats.correct >= 0 and engine.stats.incorrect >= 0


class TestInitialize:
    """Test session (re)initialization."""

    def test_first_slot_active_rest_pending(self, make_engine):
        engine = make_engine("abc")
        assert [s.symbol for s in engine.slots] == ["a", "b", "c"]
        assert engine.slots[0].status is SlotStatus.ACTIVE
        assert all(s.status is SlotStatus.PENDING for s in engine.slots[1:])
        assert engine.cursor == 0
        assert engine.started_at is None
        assert engine.stats.total == 0

    def test_empty_text_is_finished_immediately(self, make_engine):
        """Scenario C: an empty text is a valid, already finished session."""
        engine = make_engine("")
        assert engine.length == 0
        assert engine.cursor == 0
        assert engine.finished
        assert engine.apply_candidate("a") is None
        assert engine.apply_erase() is None
        assert engine.handle(candidate("a")) is None
        assert engine.started_at is None

    def test_reinitialize_discards_progress(self, make_engine):
        engine = make_engine("hello")
        type_text(engine, "hex")
        engine.initialize("hello")
        assert engine.cursor == 0
        assert engine.stats.correct == 0 and engine.stats.incorrect == 0
        assert engine.started_at is None
        assert engine.slots == TypingEngine("hello").slots

    def test_reset_is_same_regardless_of_history(self, make_engine):
        fresh = make_engine("go. run").snapshot()
        engine = make_engine("something else entirely")
        type_text(engine, "somx")
        engine.apply_erase()
        engine.initialize("go. run")
        assert engine.snapshot() == fresh

    def test_generation_increments(self, make_engine):
        engine = make_engine("ab")
        g = engine.generation
        engine.initialize("ab")
        assert engine.generation == g + 1

    def test_none_text_treated_as_empty(self):
        engine = TypingEngine(None)
        assert engine.length == 0


class TestApplyCandidate:
    """Test evaluating typed characters."""

    def test_scenario_correct_then_incorrect(self, make_engine):
        """Scenario A: 'a' then 'x' against "ab"."""
        engine = make_engine("ab")
        engine.apply_candidate("a")
        assert engine.slots[0].status is SlotStatus.CORRECT
        assert engine.cursor == 1
        assert engine.slots[1].status is SlotStatus.ACTIVE

        result = engine.apply_candidate("x")
        assert engine.slots[1].status is SlotStatus.INCORRECT
        assert engine.cursor == 2
        assert engine.finished
        assert result.finished
        assert (engine.stats.correct, engine.stats.incorrect) == (1, 1)
        assert engine.metrics().accuracy_percent == 50

    def test_no_active_slot_when_finished(self, make_engine):
        engine = make_engine("ab")
        type_text(engine, "ab")
        assert all(s.status is not SlotStatus.ACTIVE for s in engine.slots)

    def test_candidate_after_finish_is_noop(self, make_engine):
        engine = make_engine("a")
        engine.apply_candidate("a")
        before = engine.snapshot()
        assert engine.apply_candidate("b") is None
        assert engine.snapshot() == before

    def test_not_playing_is_noop(self, make_engine):
        engine = make_engine("abc", playing=False)
        assert engine.apply_candidate("a") is None
        assert engine.cursor == 0
        assert engine.started_at is None

    def test_timer_starts_on_first_keystroke_only(self, make_engine, clock):
        engine = make_engine("abc")
        start = clock.now
        engine.apply_candidate("a")
        assert engine.started_at == start
        clock.advance(5)
        engine.apply_candidate("b")
        assert engine.started_at == start

    def test_wrong_key_counts_incorrect(self, make_engine):
        engine = make_engine("abc")
        result = engine.apply_candidate("z")
        assert not result.correct
        assert result.index == 0
        assert engine.stats.incorrect == 1

    def test_space_matches_space(self, make_engine):
        engine = make_engine("a b")
        type_text(engine, "a b")
        assert engine.stats.correct == 3

    @pytest.mark.parametrize("typed,expected", [
        ("'", "’"),
        ("’", "'"),
        ("`", "'"),
        ("‘", "’"),
    ])
    def test_apostrophe_variants_are_equal(self, make_engine, typed, expected):
        engine = make_engine(f"don{expected}t")
        type_text(engine, f"don{typed}t")
        assert engine.stats.correct == 5
        assert engine.stats.incorrect == 0

    def test_other_quote_symbols_are_not_folded(self, make_engine):
        engine = make_engine('"')
        engine.apply_candidate("'")
        assert engine.stats.incorrect == 1

    def test_metrics_follow_elapsed_time(self, make_engine, clock):
        engine = make_engine("x" * 10)
        engine.apply_candidate("x")
        clock.advance(60)
        type_text(engine, "x" * 9)
        m = engine.metrics()
        assert m.words_per_minute == 2
        assert m.accuracy_percent == 100


class TestApplyErase:
    """Test backspace handling."""

    def test_scenario_erase_first_character(self, make_engine):
        """Scenario B: 'h' then backspace on "hi"."""
        engine = make_engine("hi")
        engine.apply_candidate("h")
        engine.apply_erase()
        assert engine.cursor == 0
        assert engine.slots[0].status is SlotStatus.ACTIVE
        assert engine.slots[1].status is SlotStatus.PENDING
        assert (engine.stats.correct, engine.stats.incorrect) == (0, 0)

    def test_erase_at_start_is_noop(self, make_engine):
        engine = make_engine("hi")
        before = engine.snapshot()
        assert engine.apply_erase() is None
        assert engine.snapshot() == before

    def test_erase_decrements_incorrect(self, make_engine):
        engine = make_engine("hi")
        engine.apply_candidate("x")
        assert engine.stats.incorrect == 1
        engine.apply_erase()
        assert engine.stats.incorrect == 0

    def test_erase_keeps_timer(self, make_engine, clock):
        engine = make_engine("hi")
        engine.apply_candidate("h")
        started = engine.started_at
        clock.advance(3)
        engine.apply_erase()
        assert engine.started_at == started

    def test_erase_is_inverse_of_candidate(self, make_engine):
        text = "it’s fine."
        for prefix_len in range(len(text)):
            for symbol in ("i", "x", " ", "'", "."):
                engine = make_engine(text)
                type_text(engine, text[:prefix_len])
                before = engine.snapshot()
                engine.apply_candidate(symbol)
                engine.apply_erase()
                assert engine.snapshot() == before

    def test_erase_from_finished_reopens_last_slot(self, make_engine):
        engine = make_engine("ab")
        type_text(engine, "ab")
        engine.apply_erase()
        assert engine.cursor == 1
        assert engine.slots[1].status is SlotStatus.ACTIVE
        assert not engine.finished


class TestHandle:
    """Test dispatch of classified keys."""

    def test_dispatches_candidate_and_erase(self, make_engine):
        engine = make_engine("ab")
        engine.handle(candidate("a"))
        assert engine.cursor == 1
        engine.handle(ERASE)
        assert engine.cursor == 0

    def test_ignore_does_nothing(self, make_engine):
        engine = make_engine("ab")
        assert engine.handle(IGNORE) is None
        assert engine.cursor == 0

    def test_keys_blocked_after_finish(self, make_engine):
        engine = make_engine("a")
        engine.handle(candidate("a"))
        assert engine.handle(ERASE) is None
        assert engine.cursor == 1

    def test_keys_blocked_while_paused(self, make_engine):
        engine = make_engine("ab")
        engine.handle(candidate("a"))
        engine.set_playing(False)
        assert engine.handle(ERASE) is None
        assert engine.handle(candidate("b")) is None
        assert engine.cursor == 1


class TestInvariants:
    """Partition and count invariants over a mixed key sequence."""

    def test_partition_holds_for_every_step(self, make_engine):
        engine = make_engine("Hey. You? ok!")
        keys = [
            candidate("H"), candidate("e"), ERASE, ERASE, ERASE,
            candidate("H"), candidate("x"), candidate("y"), candidate("."),
            ERASE, candidate("."), candidate(" "), candidate("Y"), IGNORE,
            candidate("o"), candidate("u"), candidate("?"), ERASE, ERASE,
        ] + [candidate(ch) for ch in "u? ok!"] + [ERASE, candidate("a")]
        assert_partition(engine)
        for key in keys:
            engine.handle(key)
            assert_partition(engine)
            m = engine.metrics()
            assert 0 <= m.accuracy_percent <= 100


class TestBoundaryNotifications:
    """Scroll requests fire at sentence ends only, once per index."""

    def test_scenario_sentence_end(self, make_engine):
        """Scenario D: "go. run" fires once at the '.' index."""
        engine = make_engine("go. run")
        fired = [r.scroll_index for r in type_text(engine, "go.") if r.scroll_index is not None]
        assert fired == [2]
        engine.apply_candidate(" ")
        engine.apply_erase()
        engine.apply_erase()
        result = engine.apply_candidate(".")
        assert result.scroll_index is None

    def test_replay_never_fires_twice(self, make_engine):
        text = "One. Two! Three? End."
        engine = make_engine(text)
        fired = []
        for ch in text:
            r = engine.apply_candidate(ch)
            if r.scroll_index is not None:
                fired.append(r.scroll_index)
        for _ in range(len(text)):
            engine.apply_erase()
        for ch in text:
            r = engine.apply_candidate(ch)
            if r.scroll_index is not None:
                fired.append(r.scroll_index)
        assert len(fired) == len(set(fired))
        assert fired == [3, 8, 15, len(text) - 1]

    def test_reset_allows_firing_again(self, make_engine):
        engine = make_engine("a. b")
        type_text(engine, "a.")
        engine.initialize("a. b")
        results = type_text(engine, "a.")
        assert results[-1].scroll_index == 1
