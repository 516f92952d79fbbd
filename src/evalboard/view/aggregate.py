from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

from pyuca import Collator

from evalboard.report.schema import Record


class SortMode(str, Enum):
    ASC = "asc"
    DESC = "desc"
    NAME = "name"

    @classmethod
    def coerce(cls, value: SortMode | str | None) -> SortMode:
        """Anything that is not "asc" / "desc" sorts by name."""
        if isinstance(value, SortMode):
            return value
        try:
            return cls(str(value).strip().lower()) if value is not None else cls.NAME
        except ValueError:
            return cls.NAME


@dataclass(frozen=True, slots=True)
class DisplayRecord:
    record: Record
    display_value: float

    @property
    def category(self) -> str:
        return self.record.category

    @property
    def source_label(self) -> str:
        return self.record.source_label

    @property
    def file(self) -> str:
        return self.record.file


@dataclass(frozen=True, slots=True)
class CategoryStat:
    category: str
    values: tuple[float, ...]

    @property
    def mean(self) -> float:
        return sum(self.values) / len(self.values)


@dataclass(frozen=True)
class Aggregation:
    categories: tuple[str, ...]  # ordered
    stats: dict[str, CategoryStat]
    data: tuple[DisplayRecord, ...]  # original record order


def display_value(accuracy_mean: float, normalize: bool) -> float:
    return accuracy_mean * (100 if normalize else 1)


def to_display(records: Iterable[Record], normalize: bool) -> list[DisplayRecord]:
    return [DisplayRecord(r, display_value(r.accuracy_mean, normalize)) for r in records]


def group_by_category(data: Iterable[DisplayRecord]) -> dict[str, CategoryStat]:
    # first-seen category order
    groups: dict[str, list[float]] = {}
    for d in data:
        groups.setdefault(d.category, []).append(d.display_value)
    return {c: CategoryStat(c, tuple(vs)) for c, vs in groups.items()}


@lru_cache(maxsize=1)
def _collator() -> Collator:
    # loading the Unicode collation table is slow; build it once
    return Collator()


def _name_key(category: str) -> tuple:
    """Unicode collation key: "a" < "A" < "a_b" < "a1" < "b"."""
    return _collator().sort_key(category)


def sort_categories(stats: Sequence[CategoryStat], mode: SortMode | str | None) -> list[str]:
    """Order categories; sorted() is stable so equal keys keep first-seen order."""
    mode = SortMode.coerce(mode)
    if mode is SortMode.DESC:
        ordered = sorted(stats, key=lambda s: s.mean, reverse=True)
    elif mode is SortMode.ASC:
        ordered = sorted(stats, key=lambda s: s.mean)
    else:
        ordered = sorted(stats, key=lambda s: _name_key(s.category))
    return [s.category for s in ordered]


def aggregate(
    records: Iterable[Record],
    *,
    normalize: bool,
    sort_mode: SortMode | str | None = SortMode.NAME,
) -> Aggregation:
    data = to_display(records, normalize)
    stats = group_by_category(data)
    order = sort_categories(list(stats.values()), sort_mode)
    return Aggregation(categories=tuple(order), stats=stats, data=tuple(data))


def distinct_sources(data: Iterable[DisplayRecord]) -> list[str]:
    """Source labels in order of first appearance."""
    return list(dict.fromkeys(d.source_label for d in data))


def cell_index(data: Iterable[DisplayRecord]) -> dict[tuple[str, str], DisplayRecord]:
    """
    (category, source_label) -> record. With duplicate entries the first
    record wins, so chart, table and CSV always agree on the shown value.
    """
    out: dict[tuple[str, str], DisplayRecord] = {}
    for d in data:
        out.setdefault((d.category, d.source_label), d)
    return out
