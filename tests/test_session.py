from __future__ import annotations

import json
from pathlib import Path

import pytest

from evalboard import BatchError, Session
from evalboard.errors import RenderError

from conftest import make_report, write_report


def _texts(*docs: dict) -> list[tuple[str, str]]:
    return [(f"r{i}.json", json.dumps(d)) for i, d in enumerate(docs)]


def test_two_models_share_dataset_end_to_end() -> None:
    s = Session()
    summary = s.load_files(
        _texts(
            make_report("m1", "t1", {"datasets/mmlu/": {"law": 0.8, "math": 0.6}}),
            make_report("m2", "t2", {"datasets/mmlu/": {"law": 0.7, "math": 0.9}}),
        )
    )
    assert summary.files_loaded == 2
    assert summary.record_count == 4
    assert summary.source_labels == ("m1 @ t1", "m2 @ t2")
    assert s.list_datasets() == ["mmlu"]

    pages = s.render("mmlu", normalize=True, page_size=10, sort_mode="name")
    assert len(pages) == 1
    page = pages[0]

    assert page.categories == ("law", "math")
    assert len(page.chart.bars) == 4
    assert len(page.chart.legend.entries) == 2
    lines = page.csv.splitlines()
    assert lines[0] == "category,m1 @ t1,m2 @ t2"
    assert lines[1:] == ["law,80.0,70.0", "math,60.0,90.0"]
    assert page.csv_filename == "mmlu_1_2.csv"
    assert page.title == "categories 1-2 / 2"


def test_render_paginates_and_sorts() -> None:
    s = Session()
    cats = {f"c{i}": i / 10 for i in range(7)}
    s.load_files(_texts(make_report("m", "t", {"datasets/d/": cats})))

    pages = s.render("d", page_size=3, sort_mode="desc")
    assert [(p.range_start, p.range_end) for p in pages] == [(1, 3), (4, 6), (7, 7)]
    assert pages[0].categories == ("c6", "c5", "c4")
    assert pages[-1].csv.splitlines() == ["category,m @ t", "c0,0.0000"]


def test_render_unknown_dataset_returns_no_pages() -> None:
    s = Session()
    s.load_files(_texts(make_report("m", "t", {"datasets/d/": {"c": 0.5}})))
    assert s.render("nope") == []


def test_render_rejects_bad_page_size() -> None:
    s = Session()
    with pytest.raises(RenderError):
        s.render("d", page_size=0)


def test_render_is_repeatable() -> None:
    s = Session()
    s.load_files(_texts(make_report("m", "t", {"datasets/d/": {"a": 0.5, "b": 0.25}})))
    assert s.render("d", normalize=True) == s.render("d", normalize=True)


def test_new_batch_replaces_corpus_and_failed_batch_keeps_it() -> None:
    s = Session()
    s.load_files(_texts(make_report("m", "t", {"datasets/old/": {"c": 0.5}})))
    s.load_files(_texts(make_report("m", "t", {"datasets/new/": {"c": 0.5}})))
    assert s.list_datasets() == ["new"]

    with pytest.raises(BatchError):
        s.load_files([("bad.json", "garbage")])
    assert s.list_datasets() == ["new"]


def test_dataset_average_lookup() -> None:
    s = Session()
    s.load_files(_texts(make_report("m", "t", {"datasets/d/": {"a": 0.8, "b": 0.6}})))
    assert s.dataset_average("m @ t", "d") == pytest.approx(0.7)
    assert s.dataset_average("m @ t", "missing") is None


def test_load_paths_reports_failures(tmp_path: Path) -> None:
    good = write_report(tmp_path / "good.json", make_report("m", "t", {"datasets/d/": {"a": 0.5}}))
    bad = tmp_path / "bad.jsonl"
    bad.write_text("not json\n", encoding="utf-8")
    ignored = tmp_path / "notes.txt"
    ignored.write_text("hello", encoding="utf-8")

    summary = Session().load_paths([good, bad, ignored])
    assert summary.files_loaded == 1
    assert [(f.name, f.kind) for f in summary.failures] == [("bad.jsonl", "parse")]
    assert summary.message == "loaded 1 file(s), 1 record(s)"


@pytest.mark.parametrize("bad", ["NaN", "Infinity"])
def test_render_raw_survives_non_finite_accuracy(bad: str) -> None:
    doc = {
        "timestamp": "t",
        "config": {"model": {"name": "m"}},
        "dataset_results": {
            "datasets/d/": {
                "results": [
                    {"file": "a.json", "accuracy_mean": bad},
                    {"file": "b.json", "accuracy_mean": 0.5},
                ]
            }
        },
    }
    s = Session()
    s.load_files([("r.json", json.dumps(doc))])

    pages = s.render("d", normalize=False)
    assert pages[0].categories == ("b",)
    assert pages[0].chart.y_max == pytest.approx(0.5)
