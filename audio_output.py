# audio_output.py
"""
sounddevice-backed output for narration buffers.

Public API
----------
acquire()            → open the default output device (first use only)
play(samples)        → Voice handle, non-blocking
release()            → stop everything, drop the device
Voice.stop()         → best-effort, safe to call repeatedly
Voice.active         → True while samples are still being played
"""
from __future__ import annotations

import logging

import numpy as np
import sounddevice as sd

import config

log = logging.getLogger(__name__)


class Voice:
    """Handle for one buffer handed to the output device."""

    def __init__(self, output: "AudioOutput", frames: int, sample_rate: int):
        self._output = output
        self.frames = frames
        self.sample_rate = sample_rate
        self.stopped = False

    @property
    def duration(self) -> float:
        return self.frames / float(self.sample_rate) if self.sample_rate else 0.0

    @property
    def active(self) -> bool:
        if self.stopped or self._output.current is not self:
            return False
        try:
            return sd.get_stream().active
        except RuntimeError:          # no stream has ever been started
            return False

    def stop(self) -> None:
        if self.stopped:
            return
        self.stopped = True
        if self._output.current is self:
            self._output.current = None
            try:
                sd.stop()
            except sd.PortAudioError as exc:
                log.debug("stop on finished stream ignored: %s", exc)


class AudioOutput:
    def __init__(self, sample_rate: int = config.NARRATION_SAMPLE_RATE,
                 channels: int = config.NARRATION_CHANNELS):
        self.sample_rate = sample_rate
        self.channels = channels
        self.acquired = False
        self.current: Voice | None = None

    def acquire(self) -> None:
        if self.acquired:
            return
        sd.check_output_settings(samplerate=self.sample_rate,
                                 channels=self.channels,
                                 dtype="float32")
        log.info("audio output ready: %s @ %d Hz",
                 sd.query_devices(kind="output")["name"], self.sample_rate)
        self.acquired = True

    def play(self, samples: np.ndarray, sample_rate: int | None = None) -> Voice:
        self.acquire()
        rate = sample_rate or self.sample_rate
        if self.current is not None:
            self.current.stop()
        voice = Voice(self, len(samples), rate)
        self.current = voice
        sd.play(samples, samplerate=rate)
        return voice

    def release(self) -> None:
        if self.current is not None:
            self.current.stop()
        if self.acquired:
            sd.stop()
            self.acquired = False
