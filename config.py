# config.py
"""
Configuration settings for the training-results presenter.
"""
import os

FPS = 30

# ── Basic Application Settings ──────────────────────────────────────────────

# Metric records exported by the training run (JSON list or JSON-lines)
METRICS_PATH = os.getenv("PRESENTER_METRICS", "metrics.json")

# Runtime log, also served by the web remote at /log
LOG_PATH = "runtime.log"
LOG_LEVEL = os.getenv("PRESENTER_LOG_LEVEL", "INFO")

# Display settings
FULLSCREEN = False
WINDOWED_SIZE = (1280, 720)

# HTTP remote
WEB_PORT = 8080
DIAG_REFRESH_INTERVAL = 1.0

# ── Playback timing ────────────────────────────────────────────────────────

SCENE_DURATION_MS     = 12000  # one scene per 12 s of autoplay
TICK_MS               = 100    # clock cadence
TRANSITION_OVERLAP_MS = 800    # exiting + entering scene both drawn

# ── Narration ──────────────────────────────────────────────────────────────

NARRATION_SAMPLE_RATE = 24000  # PCM16 returned by the TTS model
NARRATION_CHANNELS    = 1

TTS_MODEL      = "gemini-2.5-flash-preview-tts"
TTS_VOICE      = "Kore"
INSIGHTS_MODEL = "gemini-2.5-flash"

# ── Overlay ────────────────────────────────────────────────────────────────

SHOW_OVERLAYS = True
CAPTION_WRAP  = 70    # characters per caption line
