from __future__ import annotations

from evalboard.corpus.store import CorpusStore
from evalboard.report.extract import extract_records

from conftest import make_report


def _ex(model: str, results: dict, **kw):
    return extract_records(make_report(model, "t", results, **kw))


def test_merge_appends_in_arrival_order() -> None:
    store = CorpusStore()
    store.merge([_ex("a", {"datasets/x/": {"c1": 0.1}}), _ex("b", {"datasets/x/": {"c2": 0.2}})])
    assert [(r.source_label, r.category) for r in store.records] == [
        ("a @ t", "c1"),
        ("b @ t", "c2"),
    ]


def test_list_datasets_sorted_and_distinct() -> None:
    store = CorpusStore()
    store.merge(
        [
            _ex("a", {"datasets/zeta/": {"c": 0.1}, "datasets/alpha/": {"c": 0.1}}),
            _ex("b", {"datasets/alpha/": {"c": 0.3}}),
        ]
    )
    assert store.list_datasets() == ["alpha", "zeta"]
    assert len(store.records_for("alpha")) == 2


def test_metadata_last_write_wins_per_label() -> None:
    store = CorpusStore()
    store.merge(
        [
            _ex("a", {"datasets/x/": {"c": 0.1}}, averages={"datasets/x/": 0.1}),
            _ex("a", {"datasets/x/": {"c": 0.9}}, averages={"datasets/x/": 0.9}),
        ]
    )
    assert store.metadata["a @ t"]["x"] == 0.9
    # records are never deduplicated
    assert len(store) == 2


def test_replace_clears_previous_state() -> None:
    store = CorpusStore()
    store.merge([_ex("a", {"datasets/x/": {"c": 0.1}})])
    store.replace([_ex("b", {"datasets/y/": {"c": 0.2}})])
    assert store.list_datasets() == ["y"]
    assert list(store.metadata) == ["b @ t"]

    store.reset()
    assert len(store) == 0
    assert store.list_datasets() == []
