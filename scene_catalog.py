"""
scene_catalog.py

The ordered set of scenes one presentation walks through.  Built once from
the training summary and never modified afterwards; insertion order is
presentation order.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, Tuple

from training_summary import TrainingSummary


class InvalidSceneIndex(IndexError):
    """A caller asked for a scene outside [0, N)."""


@dataclass(frozen=True)
class Scene:
    id: str
    title: str
    caption: str
    content_ref: Any = field(default=None, compare=False)

    @property
    def interactive(self) -> bool:
        """True when hovering the scene's chart should suspend autoplay."""
        ref = self.content_ref
        return isinstance(ref, dict) and bool(ref.get("interactive"))


class SceneCatalog:
    def __init__(self, scenes: Iterable[Scene]):
        self._scenes: Tuple[Scene, ...] = tuple(scenes)
        if not self._scenes:
            raise ValueError("a presentation needs at least one scene")
        ids = [s.id for s in self._scenes]
        if len(set(ids)) != len(ids):
            raise ValueError(f"duplicate scene ids: {ids}")

    def __len__(self) -> int:
        return len(self._scenes)

    def __iter__(self) -> Iterator[Scene]:
        return iter(self._scenes)

    def __getitem__(self, index: int) -> Scene:
        self.check(index)
        return self._scenes[index]

    def check(self, index) -> int:
        if isinstance(index, bool) or not isinstance(index, int) \
                or not 0 <= index < len(self._scenes):
            raise InvalidSceneIndex(
                f"scene index {index!r} outside [0, {len(self._scenes)})")
        return index

    def index_of(self, scene_id: str) -> int:
        for i, s in enumerate(self._scenes):
            if s.id == scene_id:
                return i
        raise KeyError(scene_id)

    # ── navigation (wraps at both ends) ─────────────────────────────────────
    def next(self, cur: int) -> int:
        return (cur + 1) % len(self._scenes)

    def prev(self, cur: int) -> int:
        return (cur - 1) % len(self._scenes)

    @property
    def titles(self) -> list[str]:
        return [s.title for s in self._scenes]


# ── default briefing ────────────────────────────────────────────────────────
def build_catalog(summary: TrainingSummary) -> SceneCatalog:
    """The seven-scene results briefing, charts fed from *summary*."""
    epoch_series: Dict[str, list] = {
        "x":        list(range(1, len(summary.epochs) + 1)),
        "val_f1":   [r.val_f1 or 0.0 for r in summary.epochs],
        "val_loss": [r.val_loss or 0.0 for r in summary.epochs],
        "labels":   [f"{r.fold}-{r.epoch}" for r in summary.epochs],
    }
    folds = [(f.label, f.f1) for f in summary.folds]
    oof = f"{summary.oof_f1:.4f}" if summary.oof_f1 is not None else "N/A"

    return SceneCatalog([
        Scene(
            "intro", "MISSION BRIEFING",
            "In the modern age, social media is the first alert system. Our goal "
            "is to filter the noise and detect genuine emergencies instantly.",
            {"kind": "headline",
             "lines": ["PROJECT", "DISASTER TWEET",
                       "Objective: classify social media streams for "
                       "real-time crisis monitoring."]},
        ),
        Scene(
            "data", "INTEL: THE DATASET",
            "We are working with the Kaggle NLP dataset. It contains over 10,000 "
            "tweets, hand-labeled to indicate whether they are about a real "
            "disaster or not.",
            {"kind": "stats",
             "items": [("Training Data", "7,613"), ("Disaster", "43%"),
                       ("Normal", "57%")]},
        ),
        Scene(
            "preprocessing", "PRE-PROCESSING",
            "Before the model can 'read', we must translate text into numbers. "
            "We use the RoBERTa tokenizer to break sentences into sub-word "
            "tokens and map them to their vocabulary IDs.",
            {"kind": "tokens",
             "tokens": ["<s>", "Forest", "fire", "near", "La", "Ronge", "</s>"]},
        ),
        Scene(
            "architecture", "THE ARCHITECTURE",
            "We employ Transfer Learning. Instead of teaching a model English "
            "from scratch, we use RoBERTa, which already understands syntax and "
            "nuance, and fine-tune it to detect disasters.",
            {"kind": "stats",
             "items": [("Backbone", "roberta-base"), ("Head", "Linear 2-way"),
                       ("Pretraining", "160GB text")]},
        ),
        Scene(
            "training", "TRAINING OPERATIONS",
            "The training curves show a healthy convergence. Interactive chart: "
            "drag the slider at the bottom to zoom into specific epochs. "
            "Hovering pauses the briefing.",
            {"kind": "line", "interactive": True, "series": epoch_series},
        ),
        Scene(
            "validation", "CROSS-VALIDATION",
            "We didn't just train once. We used Stratified 5-Fold Cross "
            "Validation to ensure our model performs consistently across "
            "different subsets of data. Green line indicates average performance.",
            {"kind": "bars", "interactive": True,
             "bars": folds, "reference": summary.average_f1,
             "items": [("Out-of-fold F1", oof),
                       ("Average F1", f"{summary.average_f1:.4f}")]},
        ),
        Scene(
            "deployment", "SYSTEM READY",
            "The system is now fully operational. It effectively disambiguates "
            "critical information from noise, providing a reliable tool for "
            "emergency responders.",
            {"kind": "stats",
             "items": [("Model Status", "DEPLOYED"), ("Pipeline Latency", "~12ms"),
                       ("Global Coverage", "ACTIVE")]},
        ),
    ])
