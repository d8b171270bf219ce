import pygame
import pytest
from pygame.locals import KEYDOWN, K_1, K_7, K_LEFT, K_RIGHT, K_SPACE, K_f, K_n, K_q, K_r, MOUSEMOTION, QUIT

from events import EventManager, dispatch


@pytest.fixture(autouse=True)
def _clean_queue():
    EventManager.clear()
    yield
    EventManager.clear()


def _key(k):
    return pygame.event.Event(KEYDOWN, key=k, mod=0)


@pytest.mark.parametrize("key,expected", [
    (K_SPACE, {"type": "toggle_play"}),
    (K_RIGHT, {"type": "next"}),
    (K_LEFT, {"type": "prev"}),
    (K_n, {"type": "toggle_narration"}),
    (K_f, {"type": "toggle_fullscreen"}),
    (K_r, {"type": "reset"}),
    (K_q, {"type": "quit"}),
    (K_1, {"type": "jump", "to": 0}),
    (K_7, {"type": "jump", "to": 6}),
])
def test_keys_translate_to_actions(key, expected):
    EventManager.handle(_key(key))
    assert EventManager.poll() == expected
    assert EventManager.poll() is None


def test_window_close_is_quit():
    EventManager.handle(pygame.event.Event(QUIT))
    assert EventManager.poll() == {"type": "quit"}


def test_hover_over_chart_emits_edges_only():
    rect = pygame.Rect(100, 100, 200, 100)
    for pos in [(10, 10), (150, 150), (160, 160), (400, 400), (410, 410)]:
        EventManager.handle(pygame.event.Event(MOUSEMOTION, pos=pos), rect)
    assert EventManager.poll() == {"type": "suspend_start"}
    assert EventManager.poll() == {"type": "suspend_end"}
    assert EventManager.poll() is None


def test_no_chart_means_no_suspension():
    EventManager.handle(pygame.event.Event(MOUSEMOTION, pos=(5, 5)), None)
    assert EventManager.poll() is None


def test_dispatch_routes_to_orchestrator(orch):
    assert dispatch(orch, {"type": "jump", "to": 3}) is True
    assert orch.current_index == 3
    dispatch(orch, {"type": "toggle_play"})
    assert orch.is_playing
    dispatch(orch, {"type": "suspend_start"})
    assert orch.is_suspended
    dispatch(orch, {"type": "suspend_end"})
    assert not orch.is_suspended
    dispatch(orch, {"type": "reset"})
    assert orch.current_index == 0
    assert dispatch(orch, {"type": "quit"}) is False


def test_dispatch_drops_bad_jump(orch):
    dispatch(orch, {"type": "jump", "to": 42})
    dispatch(orch, {"type": "jump", "to": "x"})
    assert orch.current_index == 0


@pytest.mark.parametrize("to", [3.7, True, "3", None])
def test_dispatch_rejects_non_integer_jump_targets(orch, to):
    assert dispatch(orch, {"type": "jump", "to": to}) is True
    assert orch.current_index == 0
    assert orch.snapshot().transition is None


def test_dispatch_ignores_unknown_action(orch):
    assert dispatch(orch, {"type": "explode"}) is True
