"""Client for the Gemini text-to-speech model used for scene narration."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from google import genai
from google.genai import types

import config

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AudioPayload:
    sample_rate: int
    channel_count: int
    raw_samples: bytes          # interleaved little-endian int16


def _api_key() -> str:
    key = (os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or "").strip()
    if not key:
        raise RuntimeError("GEMINI_API_KEY or GOOGLE_API_KEY must be set")
    return key


class GeminiTTSClient:
    """
    Callable synthesis service: `client(text) -> AudioPayload`.

    The genai client is created on first use so a missing key only fails the
    narration request that needed it.
    """

    def __init__(self,
                 model: str = config.TTS_MODEL,
                 voice: str = config.TTS_VOICE,
                 sample_rate: int = config.NARRATION_SAMPLE_RATE,
                 channels: int = config.NARRATION_CHANNELS,
                 client: Optional[genai.Client] = None) -> None:
        self.model = model
        self.voice = voice
        self.sample_rate = sample_rate
        self.channels = channels
        self._client = client

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(api_key=_api_key())
        return self._client

    def synthesize(self, text: str) -> AudioPayload:
        if not text or not text.strip():
            raise ValueError("cannot synthesize empty text")

        response = self.client.models.generate_content(
            model=self.model,
            contents=text,
            config=types.GenerateContentConfig(
                response_modalities=["AUDIO"],
                speech_config=types.SpeechConfig(
                    voice_config=types.VoiceConfig(
                        prebuilt_voice_config=types.PrebuiltVoiceConfig(
                            voice_name=self.voice,
                        ),
                    ),
                ),
            ),
        )

        data = _inline_audio(response)
        if not data:
            raise RuntimeError("TTS response carried no audio data")
        log.debug("synthesized %d bytes for %d chars", len(data), len(text))
        return AudioPayload(self.sample_rate, self.channels, data)

    __call__ = synthesize


def _inline_audio(response) -> bytes:
    for cand in response.candidates or []:
        content = cand.content
        if content is None:
            continue
        for part in content.parts or []:
            if part.inline_data is not None and part.inline_data.data:
                return part.inline_data.data
    return b""
