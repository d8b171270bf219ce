from types import SimpleNamespace

import pytest

import insights
from training_summary import summarize
from tts_client import AudioPayload, GeminiTTSClient


def _response(data):
    part = SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type="audio/pcm"))
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


class FakeModels:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.exc:
            raise self.exc
        return self.response


def _client(**kw):
    return SimpleNamespace(models=FakeModels(**kw))


def test_synthesize_returns_pcm_payload():
    fake = _client(response=_response(b"\x01\x00\x02\x00"))
    tts = GeminiTTSClient(client=fake)
    payload = tts("Hello briefing")
    assert payload == AudioPayload(24000, 1, b"\x01\x00\x02\x00")
    call = fake.models.calls[0]
    assert call["model"] == "gemini-2.5-flash-preview-tts"
    assert call["contents"] == "Hello briefing"
    assert call["config"].response_modalities == ["AUDIO"]
    voice = call["config"].speech_config.voice_config.prebuilt_voice_config
    assert voice.voice_name == "Kore"


def test_response_without_audio_is_an_error():
    tts = GeminiTTSClient(client=_client(response=SimpleNamespace(candidates=[])))
    with pytest.raises(RuntimeError):
        tts.synthesize("hi")


def test_empty_text_is_rejected():
    with pytest.raises(ValueError):
        GeminiTTSClient(client=_client()).synthesize("   ")


def test_missing_api_key_fails_on_first_use(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    tts = GeminiTTSClient()
    with pytest.raises(RuntimeError):
        tts.synthesize("hi")


def test_service_errors_propagate():
    tts = GeminiTTSClient(client=_client(exc=ConnectionError("network down")))
    with pytest.raises(ConnectionError):
        tts.synthesize("hi")


class TestInsights:
    def test_prompt_embeds_summary(self):
        prompt = insights.build_prompt(summarize([], {"oofF1": 0.84}))
        assert '"oof_f1": 0.84' in prompt
        assert "3 bullet points" in prompt

    def test_returns_model_text(self):
        fake = _client(response=SimpleNamespace(text="- stable\n- fold 3 best\n- 0.84 F1"))
        out = insights.generate_insights(summarize([]), client=fake)
        assert out.startswith("- stable")
        assert fake.models.calls[0]["model"] == "gemini-2.5-flash"

    def test_failure_returns_fallback(self):
        fake = _client(exc=RuntimeError("quota"))
        assert insights.generate_insights(summarize([]), client=fake) == insights.FALLBACK

    def test_missing_key_returns_fallback(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        assert insights.generate_insights(summarize([])) == insights.FALLBACK
