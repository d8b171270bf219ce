"""Shared pytest fixtures: project root on sys.path plus fakes for the
narration service, audio output, display and clock."""
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from narration import NarrationController  # noqa: E402
from orchestrator import PlaybackOrchestrator  # noqa: E402
from scene_catalog import Scene, SceneCatalog  # noqa: E402
from tts_client import AudioPayload  # noqa: E402


class FakeClock:
    def __init__(self, t: float = 0.0) -> None:
        self.t = t

    def __call__(self) -> float:
        return self.t

    def advance(self, ms: float) -> float:
        self.t += ms
        return self.t


class FakeVoice:
    def __init__(self, buf, rate) -> None:
        self.buf = buf
        self.rate = rate
        self.active = True
        self.stop_calls = 0

    def stop(self) -> None:
        self.stop_calls += 1
        self.active = False


class FakeOutput:
    def __init__(self, fail_acquire: bool = False) -> None:
        self.fail_acquire = fail_acquire
        self.acquired = 0
        self.released = 0
        self.voices: list[FakeVoice] = []

    def acquire(self) -> None:
        if self.fail_acquire:
            raise RuntimeError("no output device")
        self.acquired += 1

    def play(self, buf, rate=None) -> FakeVoice:
        v = FakeVoice(buf, rate)
        self.voices.append(v)
        return v

    def release(self) -> None:
        self.released += 1

    def playing(self) -> list[FakeVoice]:
        return [v for v in self.voices if v.active]


class FakeSynth:
    """Records requested captions; fails for any text listed in `fail_on`."""

    def __init__(self, fail_on=()) -> None:
        self.calls: list[str] = []
        self.fail_on = set(fail_on)
        self.fail_all = False

    def __call__(self, text: str) -> AudioPayload:
        self.calls.append(text)
        if self.fail_all or text in self.fail_on:
            raise RuntimeError("quota exceeded")
        return AudioPayload(24000, 1, b"\x00\x40" * 240)


class DeferredRunner:
    """Holds narration jobs until the test decides they complete."""

    def __init__(self) -> None:
        self.jobs: list = []

    def __call__(self, job) -> None:
        self.jobs.append(job)

    def run_all(self) -> None:
        jobs, self.jobs = self.jobs, []
        for job in jobs:
            job()


class FakeDisplay:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[str] = []

    def request_fullscreen(self) -> None:
        self.calls.append("request")
        if self.fail:
            raise RuntimeError("fullscreen denied")

    def exit_fullscreen(self) -> None:
        self.calls.append("exit")
        if self.fail:
            raise RuntimeError("fullscreen denied")


def make_catalog(n: int = 7) -> SceneCatalog:
    return SceneCatalog(
        Scene(f"s{i}", f"Scene {i}", f"caption {i}", {"kind": "stats"})
        for i in range(n)
    )


def run_now(job) -> None:
    job()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def output():
    return FakeOutput()


@pytest.fixture
def synth():
    return FakeSynth()


@pytest.fixture
def display():
    return FakeDisplay()


@pytest.fixture
def catalog():
    return make_catalog(7)


@pytest.fixture
def orch(catalog, synth, output, display, clock):
    narration = NarrationController(synth, output, runner=run_now)
    return PlaybackOrchestrator(catalog, narration, display=display, clock=clock)
