"""
training_summary.py

Loads the metric records written during cross-validated training and derives
the handful of series the presentation needs: per-epoch validation curves,
best score per fold, and the fold-average F1.

Accepted input
--------------
* a JSON list of records, or
* a JSON object {"stats": {...}, "metrics": [...]}, or
* JSON-lines, one record per line.

Keys may be camelCase (valF1) or snake_case (val_f1).
"""
from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

log = logging.getLogger(__name__)

FOLDS = (1, 2, 3, 4, 5)

_CAMEL_RE = re.compile(r"(?<=[a-z0-9])([A-Z])")


def _snake(key: str) -> str:
    return _CAMEL_RE.sub(r"_\1", key).lower()


# ── Data structures ─────────────────────────────────────────────────────────
@dataclass(frozen=True)
class MetricRecord:
    type: str                      # "step" | "epoch_end"
    fold: int
    epoch: int = 0
    step: int = 0
    train_loss: Optional[float] = None
    val_loss: Optional[float] = None
    val_f1: Optional[float] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "MetricRecord":
        d = {_snake(k): v for k, v in raw.items()}

        def _f(name):
            v = d.get(name)
            return float(v) if v is not None else None

        return cls(
            type=str(d.get("type", "step")),
            fold=int(d.get("fold", 0)),
            epoch=int(d.get("epoch", 0) or 0),
            step=int(d.get("step", 0) or 0),
            train_loss=_f("train_loss"),
            val_loss=_f("val_loss"),
            val_f1=_f("val_f1"),
        )


@dataclass(frozen=True)
class FoldPerformance:
    fold: int
    f1: float
    loss: float

    @property
    def label(self) -> str:
        return f"Fold {self.fold}"


@dataclass(frozen=True)
class TrainingSummary:
    epochs: List[MetricRecord] = field(default_factory=list)
    folds: List[FoldPerformance] = field(default_factory=list)
    average_f1: float = 0.0
    oof_f1: Optional[float] = None
    duration: Optional[str] = None
    record_count: int = 0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "global": {"oof_f1": self.oof_f1, "duration": self.duration},
            "folds": [{"fold": f.fold, "f1": f.f1, "loss": f.loss}
                      for f in self.folds],
            "average_f1": self.average_f1,
        }


# ── Aggregation ─────────────────────────────────────────────────────────────
def fold_performance(records: Iterable[MetricRecord],
                     folds: Iterable[int] = FOLDS) -> List[FoldPerformance]:
    """Best-F1 record per fold; folds without a validated record score 0."""
    best: Dict[int, MetricRecord] = {}
    for r in records:
        if r.val_f1 is None:
            continue
        cur = best.get(r.fold)
        if cur is None or (r.val_f1 or 0.0) > (cur.val_f1 or 0.0):
            best[r.fold] = r

    out = []
    for n in folds:
        r = best.get(n)
        out.append(FoldPerformance(
            fold=n,
            f1=(r.val_f1 or 0.0) if r else 0.0,
            loss=(r.val_loss or 0.0) if r else 0.0,
        ))
    return out


def summarize(records: List[MetricRecord],
              stats: Optional[Dict[str, Any]] = None) -> TrainingSummary:
    stats = {_snake(k): v for k, v in (stats or {}).items()}
    epochs = [r for r in records if r.type == "epoch_end"]
    folds  = fold_performance(records)
    avg    = sum(f.f1 for f in folds) / (len(folds) or 1)
    oof    = stats.get("oof_f1")
    return TrainingSummary(
        epochs=epochs,
        folds=folds,
        average_f1=avg,
        oof_f1=float(oof) if oof is not None else None,
        duration=stats.get("duration"),
        record_count=len(records),
    )


# ── Loading ─────────────────────────────────────────────────────────────────
def _parse(text: str):
    text = text.strip()
    if not text:
        return [], {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        rows = [json.loads(ln) for ln in text.splitlines() if ln.strip()]
        return rows, {}
    if isinstance(data, dict):
        return data.get("metrics", []), data.get("stats", {})
    return data, {}


def load_summary(path: str) -> TrainingSummary:
    """
    Read *path* and summarize it.  A missing file yields an empty summary so
    the presentation can still run with placeholder charts.
    """
    if not os.path.isfile(path):
        log.warning("metrics file %s not found – presenting without data", path)
        return summarize([])

    with open(path, "r", encoding="utf-8") as f:
        rows, stats = _parse(f.read())

    records = [MetricRecord.from_dict(r) for r in rows]
    log.info("loaded %d metric records from %s", len(records), path)
    return summarize(records, stats)
