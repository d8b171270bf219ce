import json

import pytest

from training_summary import MetricRecord, fold_performance, load_summary, summarize


def test_record_accepts_camel_case_keys():
    r = MetricRecord.from_dict({"type": "epoch_end", "fold": 2, "epoch": 3,
                                "valF1": 0.81, "valLoss": 0.42, "trainLoss": 0.3})
    assert r.val_f1 == 0.81
    assert r.val_loss == 0.42
    assert r.train_loss == 0.3


def test_fold_performance_picks_best_f1_and_fills_missing_folds():
    records = [
        MetricRecord("epoch_end", 1, 1, val_f1=0.80, val_loss=0.50),
        MetricRecord("epoch_end", 1, 2, val_f1=0.83, val_loss=0.45),
        MetricRecord("step", 1, 2, train_loss=0.2),
        MetricRecord("epoch_end", 3, 1, val_f1=0.79, val_loss=0.55),
    ]
    perf = fold_performance(records)
    assert [p.fold for p in perf] == [1, 2, 3, 4, 5]
    assert (perf[0].f1, perf[0].loss) == (0.83, 0.45)
    assert (perf[1].f1, perf[1].loss) == (0.0, 0.0)
    assert perf[2].f1 == 0.79


def test_average_is_over_all_five_folds():
    records = [MetricRecord("epoch_end", n, 1, val_f1=0.8) for n in (1, 2, 3, 4, 5)]
    assert summarize(records).average_f1 == pytest.approx(0.8)
    assert summarize(records[:1]).average_f1 == pytest.approx(0.16)


def test_summary_keeps_only_epoch_end_points():
    records = [MetricRecord("step", 1, 1), MetricRecord("epoch_end", 1, 1, val_f1=0.7)]
    s = summarize(records, {"oofF1": "0.84", "duration": "1h 02m"})
    assert len(s.epochs) == 1
    assert s.oof_f1 == pytest.approx(0.84)
    assert s.duration == "1h 02m"
    assert s.as_dict()["global"]["oof_f1"] == pytest.approx(0.84)


def test_load_json_object(tmp_path):
    p = tmp_path / "metrics.json"
    p.write_text(json.dumps({
        "stats": {"oofF1": 0.84},
        "metrics": [{"type": "epoch_end", "fold": 1, "epoch": 1, "valF1": 0.8}],
    }))
    s = load_summary(str(p))
    assert s.record_count == 1
    assert s.oof_f1 == pytest.approx(0.84)


def test_load_json_lines(tmp_path):
    p = tmp_path / "metrics.jsonl"
    p.write_text("\n".join(json.dumps(
        {"type": "epoch_end", "fold": f, "epoch": 1, "val_f1": 0.8}) for f in (1, 2)) + "\n")
    assert load_summary(str(p)).record_count == 2


def test_missing_file_gives_empty_summary(tmp_path):
    s = load_summary(str(tmp_path / "nope.json"))
    assert s.record_count == 0
    assert s.average_f1 == 0.0
