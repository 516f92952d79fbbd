from __future__ import annotations

import json
from pathlib import Path

import pytest


def make_report(
    model: str,
    ts: str,
    results: dict[str, dict[str, float]],
    *,
    averages: dict[str, float] | None = None,
) -> dict:
    """results: {dataset_path: {category: accuracy}}"""
    averages = averages or {}
    out: dict = {}
    for ds_path, cats in results.items():
        payload: dict = {
            "results": [
                {"file": f"{ds_path.rstrip('/')}/{cat}.jsonl", "accuracy_mean": acc}
                for cat, acc in cats.items()
            ]
        }
        if ds_path in averages:
            payload["average_accuracy"] = averages[ds_path]
        out[ds_path] = payload
    return {"timestamp": ts, "config": {"model": {"name": model}}, "dataset_results": out}


def write_report(path: Path, doc: dict) -> Path:
    path.write_text(json.dumps(doc, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    cfg = tmp_path / "config.json"
    monkeypatch.setenv("EVALBOARD_CONFIG", str(cfg))
    for key in ("PAGE_SIZE", "SORT_MODE", "NORMALIZE", "LOG_LEVEL", "OUT_DIR"):
        monkeypatch.delenv(f"EVALBOARD_{key}", raising=False)
    return cfg
