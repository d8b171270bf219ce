import pytest

from playback_clock import PlaybackClock


def _clock():
    fired = []
    c = PlaybackClock(12000, on_advance=lambda: fired.append(True))
    return c, fired


def test_start_and_stop_are_idempotent():
    c, _ = _clock()
    c.start()
    c.start()
    assert c.running
    c.stop()
    c.stop()
    assert not c.running


def test_tick_is_ignored_until_started():
    c, fired = _clock()
    assert c.tick(100) is False
    assert c.progress == 0.0
    assert fired == []


def test_tick_adds_percentage_of_scene_duration():
    c, _ = _clock()
    c.start()
    c.tick(100)
    assert c.progress == pytest.approx(100 * 100 / 12000)
    c.tick(6000 - 100)
    assert c.progress == pytest.approx(50.0)


def test_progress_is_monotonic_while_running():
    c, _ = _clock()
    c.start()
    seen = []
    for _ in range(119):
        c.tick(100)
        seen.append(c.progress)
    assert seen == sorted(seen)
    assert seen[-1] < 100


def test_advance_fires_exactly_at_scene_duration_and_wraps():
    c, fired = _clock()
    c.start()
    for _ in range(119):
        assert c.tick(100) is False
    assert c.tick(100) is True
    assert fired == [True]
    assert c.progress == 0.0


def test_overshoot_resets_instead_of_overflowing():
    c, fired = _clock()
    c.start()
    c.tick(11950)
    assert c.tick(500) is True
    assert c.progress == 0.0
    assert len(fired) == 1


def test_suspend_holds_progress_and_resume_continues():
    c, _ = _clock()
    c.start()
    c.tick(3000)
    c.suspend()
    c.tick(3000)
    assert c.progress == pytest.approx(25.0)
    assert c.running                       # suspension is not a pause
    c.resume()
    c.tick(3000)
    assert c.progress == pytest.approx(50.0)


def test_reset_progress():
    c, _ = _clock()
    c.start()
    c.tick(4000)
    c.reset_progress()
    assert c.progress == 0.0


def test_rejects_non_positive_duration():
    with pytest.raises(ValueError):
        PlaybackClock(0)
