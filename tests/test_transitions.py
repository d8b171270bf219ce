import pytest

from transitions import TransitionManager


def test_record_lives_for_overlap_window():
    tm = TransitionManager(800)
    rec = tm.begin_transition(2, 3, now=1000)
    assert rec.from_index == 2 and rec.to_index == 3
    assert tm.active(1799) is rec
    assert tm.active(1800) is None


def test_expired_record_hidden_even_without_update():
    tm = TransitionManager(800)
    tm.begin_transition(0, 1, now=0)
    assert tm.active(5000) is None


def test_update_clears_when_due():
    tm = TransitionManager(800)
    tm.begin_transition(0, 1, now=0)
    assert tm.update(799) is False
    assert tm.update(800) is True
    assert tm.active(0) is None          # really gone, not just hidden


def test_second_transition_supersedes_first_and_its_timer():
    tm = TransitionManager(800)
    tm.begin_transition(0, 1, now=0)
    second = tm.begin_transition(1, 2, now=500)
    assert tm.active(500) is second
    # the first record's clear time must not cut the second one short
    assert tm.update(800) is False
    assert tm.active(1000) is second
    assert tm.active(1300) is None


def test_clear_drops_record():
    tm = TransitionManager(800)
    tm.begin_transition(0, 1, now=0)
    tm.clear()
    assert tm.active(1) is None


def test_progress_through_window():
    tm = TransitionManager(800)
    assert tm.progress(0) == 1.0
    tm.begin_transition(0, 1, now=0)
    assert tm.progress(400) == pytest.approx(0.5)
    assert tm.progress(900) == 1.0
