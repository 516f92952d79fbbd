from .aggregate import Aggregation, DisplayRecord, SortMode, aggregate, display_value
from .export import TableLayout, build_table, csv_filename, page_to_csv
from .layout import ChartLayout, compute_chart_layout, y_scale
from .paginate import Page, paginate

__all__ = [
    "Aggregation",
    "ChartLayout",
    "DisplayRecord",
    "Page",
    "SortMode",
    "TableLayout",
    "aggregate",
    "build_table",
    "compute_chart_layout",
    "csv_filename",
    "display_value",
    "page_to_csv",
    "paginate",
    "y_scale",
]
