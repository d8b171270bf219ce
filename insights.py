"""Short presentation insights about a training run, written by Gemini."""
from __future__ import annotations

import json
import logging

from google import genai

import config
from training_summary import TrainingSummary
from tts_client import _api_key

log = logging.getLogger(__name__)

FALLBACK = "Could not generate insights. Please check API key."

_PROMPT = (
    "Analyze these training results for a RoBERTa Disaster Tweet classifier.\n"
    "Data: {data}.\n"
    "Provide 3 bullet points of high-level insights for a presentation slide.\n"
    "Focus on stability, best fold, and overall performance. "
    "Keep it brief and professional."
)


def build_prompt(summary: TrainingSummary) -> str:
    return _PROMPT.format(data=json.dumps(summary.as_dict()))


def generate_insights(summary: TrainingSummary, client=None,
                      model: str = config.INSIGHTS_MODEL) -> str:
    """Return the model's bullet points, or FALLBACK on any failure."""
    try:
        client = client or genai.Client(api_key=_api_key())
        response = client.models.generate_content(
            model=model,
            contents=build_prompt(summary),
        )
        text = (response.text or "").strip()
    except Exception as exc:
        log.warning("insight generation failed: %s", exc)
        return FALLBACK
    return text or FALLBACK
