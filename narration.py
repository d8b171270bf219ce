# narration.py
"""
Narration controller – one synthesized voice-over at a time, tied to the
active scene.

Synthesis and decoding run off the main loop (a daemon thread per request by
default).  Workers never touch controller state: they push completions onto a
FIFO that the owner drains with `pump()` on its own timeline.  Every session
carries a cancellation token; completions for a cancelled or superseded
session are dropped, however late they arrive.
"""
from __future__ import annotations

import enum
import itertools
import logging
import queue
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import numpy as np

import config

log = logging.getLogger(__name__)

Synthesizer = Callable[[str], Any]       # text -> AudioPayload
Runner      = Callable[[Callable[[], None]], None]


class NarrationFailure(RuntimeError):
    """Synthesis, decode or playback of a caption failed."""


class NarrationStatus(str, enum.Enum):
    IDLE       = "idle"
    REQUESTING = "requesting"
    PLAYING    = "playing"
    CANCELLED  = "cancelled"
    FAILED     = "failed"


_LIVE = (NarrationStatus.REQUESTING, NarrationStatus.PLAYING)
_ids  = itertools.count(1)


@dataclass
class NarrationSession:
    scene_index: int
    caption: str
    status: NarrationStatus = NarrationStatus.REQUESTING
    handle: Any = None
    error: Optional[BaseException] = None
    id: int = field(default_factory=lambda: next(_ids))
    token: threading.Event = field(default_factory=threading.Event, repr=False)

    @property
    def live(self) -> bool:
        return self.status in _LIVE

    @property
    def cancelled(self) -> bool:
        return self.token.is_set()

    def cancel(self) -> None:
        self.token.set()
        if self.handle is not None:
            _stop_quietly(self.handle)
            self.handle = None
        if self.live:
            self.status = NarrationStatus.CANCELLED


def _stop_quietly(handle) -> None:
    try:
        handle.stop()
    except Exception as exc:     # already stopped / never started
        log.debug("ignoring stop() failure on %r: %s", handle, exc)


def decode_pcm16(raw: bytes, channels: int = config.NARRATION_CHANNELS) -> np.ndarray:
    """
    Interleaved little-endian int16 → float32 array of shape (frames, channels)
    scaled to [-1, 1].  A trailing partial sample or frame is dropped.
    """
    if channels < 1:
        raise ValueError("channels must be >= 1")
    usable = len(raw) - (len(raw) % (2 * channels))
    pcm = np.frombuffer(raw[:usable], dtype="<i2")
    return (pcm.astype(np.float32) / 32768.0).reshape(-1, channels)


def _thread_runner(job: Callable[[], None]) -> None:
    threading.Thread(target=job, name="narration", daemon=True).start()


class NarrationController:
    def __init__(self,
                 synthesize: Synthesizer,
                 output,
                 runner: Runner = _thread_runner,
                 sample_rate: int = config.NARRATION_SAMPLE_RATE,
                 channels: int = config.NARRATION_CHANNELS,
                 on_failed: Optional[Callable[[NarrationSession], None]] = None):
        self.synthesize = synthesize
        self.output = output
        self.runner = runner
        self.sample_rate = sample_rate
        self.channels = channels
        self.on_failed = on_failed

        self.session: Optional[NarrationSession] = None
        self._done: "queue.Queue[tuple]" = queue.Queue()

    # ── state ─────────────────────────────────────────────────────────────
    @property
    def status(self) -> NarrationStatus:
        return self.session.status if self.session else NarrationStatus.IDLE

    @property
    def busy(self) -> bool:
        return self.session is not None and self.session.live

    # ── commands ──────────────────────────────────────────────────────────
    def narrate(self, scene_index: int, caption: str) -> NarrationSession:
        self.cancel()                     # strictly before the new request

        sess = NarrationSession(scene_index, caption)
        self.session = sess
        log.info("narration requested for scene %d (session %d)",
                 scene_index, sess.id)
        self.runner(lambda: self._fetch(sess))
        return sess

    def cancel(self) -> None:
        sess = self.session
        if sess is None:
            return
        if sess.live:
            log.debug("cancelling narration session %d (%s)",
                      sess.id, sess.status.value)
        sess.cancel()
        self.session = None

    def close(self) -> None:
        self.cancel()
        self.output.release()

    # ── worker side ───────────────────────────────────────────────────────
    def _fetch(self, sess: NarrationSession) -> None:
        try:
            payload = self.synthesize(sess.caption)
            rate  = getattr(payload, "sample_rate", None) or self.sample_rate
            chans = getattr(payload, "channel_count", None) or self.channels
            buf   = decode_pcm16(payload.raw_samples, chans)
            if not len(buf):
                raise NarrationFailure("empty audio payload")
        except Exception as exc:
            if not sess.cancelled:
                self._done.put((sess, None, 0, exc))
            return
        if not sess.cancelled:
            self._done.put((sess, buf, rate, None))

    # ── owner side ────────────────────────────────────────────────────────
    def pump(self) -> None:
        """Apply finished requests; retire sessions whose audio ran out."""
        while True:
            try:
                sess, buf, rate, exc = self._done.get_nowait()
            except queue.Empty:
                break
            if sess is not self.session or sess.cancelled:
                log.debug("dropping stale completion for session %d", sess.id)
                continue
            if exc is not None:
                self._fail(sess, exc)
                continue
            try:
                sess.handle = self.output.play(buf, rate)
            except Exception as play_exc:
                self._fail(sess, play_exc)
                continue
            sess.status = NarrationStatus.PLAYING
            log.info("narration playing for scene %d (%.1f s)",
                     sess.scene_index, len(buf) / float(rate))

        sess = self.session
        if (sess is not None and sess.status is NarrationStatus.PLAYING
                and not sess.handle.active):
            log.debug("narration session %d finished", sess.id)
            self.session = None

    def _fail(self, sess: NarrationSession, exc: BaseException) -> None:
        log.warning("narration failed for scene %d: %s", sess.scene_index, exc)
        sess.status = NarrationStatus.FAILED
        sess.error = exc
        if self.on_failed:
            self.on_failed(sess)
