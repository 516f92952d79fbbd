from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

UNKNOWN_MODEL = "<unknown>"
NO_TIMESTAMP = "<no-ts>"

# Top-level keys a report must carry to be accepted at all
REQUIRED_KEYS: tuple[str, ...] = ("timestamp", "config", "dataset_results")


def as_float(value: Any) -> float | None:
    """Best-effort number coercion for untrusted JSON values.

    Finite numbers and numeric strings convert; None, booleans, containers,
    non-numeric strings and NaN / infinity give None.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            out = float(value)
        elif isinstance(value, str):
            out = float(value.strip())
        else:
            return None
    except (ValueError, OverflowError):
        return None
    return out if math.isfinite(out) else None


@dataclass(frozen=True, slots=True)
class ResultEntry:
    file: str
    accuracy_mean: float


@dataclass(frozen=True, slots=True)
class DatasetResult:
    path: str
    average_accuracy: float | None = None
    results: tuple[ResultEntry, ...] = ()
    # every parseable accuracy_mean in the payload, including entries without a file
    accuracy_values: tuple[float, ...] = ()

    @classmethod
    def from_json_dict(cls, path: str, data: Mapping[str, Any]) -> DatasetResult:
        raw_results = data.get("results")
        if not isinstance(raw_results, list):
            raw_results = []

        results: list[ResultEntry] = []
        values: list[float] = []
        for item in raw_results:
            if not isinstance(item, Mapping):
                continue
            acc = as_float(item.get("accuracy_mean"))
            if acc is None:
                continue
            values.append(acc)
            file = item.get("file")
            if not isinstance(file, str):
                continue
            results.append(ResultEntry(file=file, accuracy_mean=acc))

        avg = as_float(data.get("average_accuracy"))

        return cls(
            path=path,
            average_accuracy=avg,
            results=tuple(results),
            accuracy_values=tuple(values),
        )


@dataclass(frozen=True, slots=True)
class ReportDocument:
    timestamp: str
    model_name: str = UNKNOWN_MODEL
    datasets: tuple[DatasetResult, ...] = ()

    @property
    def source_label(self) -> str:
        return f"{self.model_name} @ {self.timestamp}"

    @classmethod
    def from_json_dict(cls, data: Mapping[str, Any]) -> ReportDocument:
        """Map an already-validated JSON object onto the typed report model.

        Malformed dataset payloads and result entries are dropped silently.
        """
        model_name = UNKNOWN_MODEL
        config = data.get("config")
        if isinstance(config, Mapping):
            model = config.get("model")
            if isinstance(model, Mapping) and model.get("name"):
                model_name = str(model["name"])

        ts = data.get("timestamp")
        timestamp = str(ts) if ts not in (None, "") else NO_TIMESTAMP

        raw_datasets = data.get("dataset_results")
        datasets: list[DatasetResult] = []
        if isinstance(raw_datasets, Mapping):
            for ds_path, payload in raw_datasets.items():
                if not isinstance(payload, Mapping):
                    continue
                datasets.append(DatasetResult.from_json_dict(str(ds_path), payload))

        return cls(
            timestamp=timestamp,
            model_name=model_name,
            datasets=tuple(datasets),
        )


@dataclass(frozen=True, slots=True)
class Record:
    dataset: str
    category: str
    file: str
    accuracy_mean: float
    source_label: str
