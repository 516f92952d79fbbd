from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from evalboard.corpus.loader import filter_report_paths, load_batch, read_report_files
from evalboard.corpus.store import CorpusStore
from evalboard.errors import BatchError, FileFailure, RenderError
from evalboard.view.aggregate import SortMode, aggregate
from evalboard.view.export import TableLayout, build_table, csv_filename, page_to_csv
from evalboard.view.layout import ChartLayout, compute_chart_layout
from evalboard.view.paginate import paginate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadSummary:
    files_loaded: int
    record_count: int
    source_labels: tuple[str, ...] = ()
    datasets: tuple[str, ...] = ()
    failures: tuple[FileFailure, ...] = field(default_factory=tuple)

    @property
    def message(self) -> str:
        return f"loaded {self.files_loaded} file(s), {self.record_count} record(s)"


@dataclass(frozen=True)
class PageLayout:
    dataset: str
    range_start: int
    range_end: int
    total_categories: int
    categories: tuple[str, ...]
    chart: ChartLayout
    table: TableLayout
    csv: str

    @property
    def title(self) -> str:
        return f"categories {self.range_start}-{self.range_end} / {self.total_categories}"

    @property
    def csv_filename(self) -> str:
        return csv_filename(self.dataset, self.range_start, self.range_end)


class Session:
    """
    Entry point for a front end: load report files, list datasets, and
    render one dataset into page layouts.

    Each successful load replaces the previous corpus; a failed batch leaves
    it untouched. render() only reads the held corpus and can be repeated
    freely.
    """

    def __init__(self, store: CorpusStore | None = None) -> None:
        self.store = store if store is not None else CorpusStore()

    def load_files(
        self,
        raw_texts: Iterable[tuple[str, str]],
        *,
        prior_failures: Sequence[FileFailure] = (),
    ) -> LoadSummary:
        result = load_batch(raw_texts, prior_failures=prior_failures)
        self.store.replace(result.extractions)

        summary = LoadSummary(
            files_loaded=len(result.extractions),
            record_count=len(self.store),
            source_labels=tuple(dict.fromkeys(e.source_label for e in result.extractions)),
            datasets=tuple(self.store.list_datasets()),
            failures=result.failures,
        )
        logger.info("%s (%d failed)", summary.message, len(summary.failures))
        return summary

    def load_paths(self, paths: Sequence[str | Path]) -> LoadSummary:
        texts, failures = read_report_files(filter_report_paths(paths))
        if not texts:
            raise BatchError("no report file could be read", failures)
        return self.load_files(texts, prior_failures=failures)

    def list_datasets(self) -> list[str]:
        return self.store.list_datasets()

    def dataset_average(self, source_label: str, dataset: str) -> float | None:
        return self.store.metadata.get(source_label, {}).get(dataset)

    def render(
        self,
        dataset: str,
        *,
        normalize: bool = False,
        page_size: int = 10,
        sort_mode: SortMode | str | None = SortMode.NAME,
    ) -> list[PageLayout]:
        if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size <= 0:
            raise RenderError(f"page_size must be a positive integer, got {page_size!r}")

        records = self.store.records_for(dataset)
        if not records:
            return []

        agg = aggregate(records, normalize=normalize, sort_mode=sort_mode)
        pages: list[PageLayout] = []
        for page in paginate(agg.categories, agg.data, page_size):
            pages.append(
                PageLayout(
                    dataset=dataset,
                    range_start=page.range_start,
                    range_end=page.range_end,
                    total_categories=page.total_categories,
                    categories=page.categories,
                    chart=compute_chart_layout(page.data, page.categories, normalize=normalize),
                    table=build_table(page.data, page.categories, normalize=normalize),
                    csv=page_to_csv(page.data, page.categories, normalize=normalize),
                )
            )
        logger.debug("rendered %s: %d page(s)", dataset, len(pages))
        return pages
