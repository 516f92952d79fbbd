from __future__ import annotations

import csv
import io
from collections.abc import Sequence
from dataclasses import dataclass

from evalboard.view.aggregate import DisplayRecord, cell_index, distinct_sources
from evalboard.view.formatting import format_value

CATEGORY_COLUMN = "category"
TABLE_MISSING = "-"


@dataclass(frozen=True)
class TableLayout:
    header: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]


def _cells(
    data: Sequence[DisplayRecord],
    categories: Sequence[str],
    normalize: bool,
    missing: str,
) -> tuple[list[str], list[list[str]]]:
    sources = distinct_sources(data)
    index = cell_index(data)
    header = [CATEGORY_COLUMN, *sources]
    rows: list[list[str]] = []
    for cat in categories:
        row = [cat]
        for src in sources:
            d = index.get((cat, src))
            row.append(format_value(d.display_value, normalize) if d is not None else missing)
        rows.append(row)
    return header, rows


def build_table(
    data: Sequence[DisplayRecord], categories: Sequence[str], *, normalize: bool
) -> TableLayout:
    header, rows = _cells(data, categories, normalize, TABLE_MISSING)
    return TableLayout(header=tuple(header), rows=tuple(tuple(r) for r in rows))


def page_to_csv(
    data: Sequence[DisplayRecord], categories: Sequence[str], *, normalize: bool
) -> str:
    """
    One column per source label (first-seen order) after "category", one row
    per category. Missing cells are empty. Fields holding commas or quotes
    are quoted.
    """
    header, rows = _cells(data, categories, normalize, "")
    buf = io.StringIO()
    w = csv.writer(buf, lineterminator="\n")
    w.writerow(header)
    w.writerows(rows)
    return buf.getvalue()


def csv_filename(dataset: str, start: int, end: int) -> str:
    safe = dataset.replace("/", "_").replace("\\", "_")
    return f"{safe}_{start}_{end}.csv"
