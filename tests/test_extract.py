from __future__ import annotations

import pytest

from evalboard.report.extract import (
    DEFAULT_DATASET,
    category_from_file,
    extract_records,
    normalize_dataset_name,
)
from evalboard.report.schema import ReportDocument, as_float


def _report(dataset_results: dict, model: str = "m1", ts: str = "t0") -> dict:
    return {
        "timestamp": ts,
        "config": {"model": {"name": model}},
        "dataset_results": dataset_results,
    }


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("datasets/mmlu/", "mmlu"),
        ("datasets//tmmlu/sub/", "tmmlu/sub"),
        ("custom/path", "custom/path"),
        ("datasets/", "datasets/"),
        ("", DEFAULT_DATASET),
    ],
)
def test_normalize_dataset_name(path: str, expected: str) -> None:
    assert normalize_dataset_name(path) == expected


def test_category_is_basename_before_first_dot() -> None:
    assert category_from_file("datasets/mmlu/high_school.v2.jsonl") == "high_school"
    assert category_from_file("plain") == "plain"


def test_extract_records_fields() -> None:
    ex = extract_records(
        _report(
            {
                "datasets/mmlu/": {
                    "average_accuracy": 0.9,
                    "results": [
                        {"file": "datasets/mmlu/law.jsonl", "accuracy_mean": 0.8},
                        {"file": "datasets/mmlu/math.jsonl", "accuracy_mean": "0.6"},
                    ],
                }
            }
        )
    )
    assert ex.source_label == "m1 @ t0"
    assert [(r.dataset, r.category, r.file, r.accuracy_mean) for r in ex.records] == [
        ("mmlu", "law", "law.jsonl", 0.8),
        ("mmlu", "math", "math.jsonl", 0.6),
    ]
    assert all(r.source_label == "m1 @ t0" for r in ex.records)
    assert ex.dataset_averages == {"mmlu": 0.9}


def test_missing_average_is_computed_from_entries() -> None:
    ex = extract_records(
        _report(
            {
                "datasets/mmlu/": {
                    "results": [
                        {"file": "a.json", "accuracy_mean": 0.8},
                        {"file": "b.json", "accuracy_mean": 0.6},
                    ]
                }
            }
        )
    )
    assert ex.dataset_averages["mmlu"] == pytest.approx(0.7)


def test_malformed_entries_are_dropped() -> None:
    ex = extract_records(
        _report(
            {
                "datasets/a/": {
                    "results": [
                        "junk",
                        None,
                        {"file": "x.json"},
                        {"accuracy_mean": 0.4},
                        {"file": "y.json", "accuracy_mean": "n/a"},
                        {"file": "z.json", "accuracy_mean": 0.2},
                    ]
                },
                "datasets/b/": "not an object",
            }
        )
    )
    assert [r.category for r in ex.records] == ["z"]
    # the entry without a file still counts towards the computed average
    assert ex.dataset_averages == {"a": pytest.approx(0.3)}


def test_dataset_without_entries_or_average_is_dropped() -> None:
    ex = extract_records(
        _report({"datasets/empty/": {"results": []}, "datasets/avg_only/": {"average_accuracy": 0.4}})
    )
    assert ex.records == ()
    assert ex.is_empty
    assert ex.dataset_averages == {"avg_only": 0.4}


def test_extract_is_pure() -> None:
    raw = _report({"datasets/x/": {"results": [{"file": "c.json", "accuracy_mean": 0.5}]}})
    doc = ReportDocument.from_json_dict(raw)
    assert extract_records(doc) == extract_records(doc)
    assert extract_records(raw) == extract_records(raw)


@pytest.mark.parametrize("bad", ["NaN", "Infinity", "-inf", float("nan"), float("inf"), 10**400])
def test_non_finite_accuracy_is_dropped(bad) -> None:
    ex = extract_records(
        _report(
            {
                "datasets/d/": {
                    "average_accuracy": bad,
                    "results": [
                        {"file": "a.json", "accuracy_mean": bad},
                        {"file": "b.json", "accuracy_mean": 0.5},
                    ],
                }
            }
        )
    )
    assert [r.category for r in ex.records] == ["b"]
    assert ex.dataset_averages == {"d": 0.5}


def test_as_float() -> None:
    assert as_float(" 0.25 ") == 0.25
    assert as_float(1) == 1.0
    assert as_float(True) is None
    assert as_float([0.1]) is None
    assert as_float("NaN") is None
