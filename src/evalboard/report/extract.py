from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from evalboard.report.schema import DatasetResult, Record, ReportDocument

DATASET_PREFIX = "datasets/"
DEFAULT_DATASET = "default_dataset"


@dataclass(frozen=True)
class Extraction:
    source_label: str
    records: tuple[Record, ...] = ()
    dataset_averages: dict[str, float] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.records


def normalize_dataset_name(ds_path: str) -> str:
    """
    "datasets/mmlu/" -> "mmlu". Paths without the prefix are kept verbatim;
    an empty result falls back to the raw path, then to DEFAULT_DATASET.
    """
    name = ds_path
    if ds_path.startswith(DATASET_PREFIX):
        name = ds_path[len(DATASET_PREFIX) :].strip("/")
    return name or ds_path or DEFAULT_DATASET


def file_name(path: str) -> str:
    return path.rsplit("/", 1)[-1]


def category_from_file(path: str) -> str:
    # text before the first "." of the file name
    return file_name(path).split(".", 1)[0]


def _mean(xs: tuple[float, ...]) -> float:
    return sum(xs) / len(xs)


def _dataset_average(ds: DatasetResult) -> float | None:
    if ds.average_accuracy is not None:
        return ds.average_accuracy
    if ds.accuracy_values:
        return _mean(ds.accuracy_values)
    return None


def extract_records(doc: ReportDocument | Mapping[str, Any]) -> Extraction:
    """Flatten one report into records plus per-dataset average accuracy.

    Pure: the same document always yields an equal Extraction.
    """
    if not isinstance(doc, ReportDocument):
        doc = ReportDocument.from_json_dict(doc)

    label = doc.source_label
    records: list[Record] = []
    averages: dict[str, float] = {}

    for ds in doc.datasets:
        name = normalize_dataset_name(ds.path)
        for entry in ds.results:
            records.append(
                Record(
                    dataset=name,
                    category=category_from_file(entry.file),
                    file=file_name(entry.file),
                    accuracy_mean=entry.accuracy_mean,
                    source_label=label,
                )
            )

        avg = _dataset_average(ds)
        if avg is not None:
            averages[name] = avg

    return Extraction(source_label=label, records=tuple(records), dataset_averages=averages)
