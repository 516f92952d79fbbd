from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from evalboard.report.extract import Extraction
from evalboard.report.schema import Record


class CorpusStore:
    """
    All records and per-source dataset averages of the current upload batch.

    Records keep arrival order across files. Averages are keyed by source
    label; merging a second extraction with the same label replaces the
    earlier averages.
    """

    def __init__(self) -> None:
        self._records: list[Record] = []
        self._metadata: dict[str, dict[str, float]] = {}

    def reset(self) -> None:
        self._records = []
        self._metadata = {}

    def merge(self, batch: Iterable[Extraction]) -> None:
        for ex in batch:
            self._records.extend(ex.records)
            self._metadata[ex.source_label] = dict(ex.dataset_averages)

    def replace(self, batch: Iterable[Extraction]) -> None:
        self.reset()
        self.merge(batch)

    @property
    def records(self) -> tuple[Record, ...]:
        return tuple(self._records)

    @property
    def metadata(self) -> Mapping[str, Mapping[str, float]]:
        return MappingProxyType({k: MappingProxyType(v) for k, v in self._metadata.items()})

    def list_datasets(self) -> list[str]:
        return sorted({r.dataset for r in self._records})

    def records_for(self, dataset: str) -> list[Record]:
        return [r for r in self._records if r.dataset == dataset]

    def __len__(self) -> int:
        return len(self._records)
