"""
Chart geometry for one page: axis scale, bars, labels and legend.

Coordinates are abstract units. Everything inside the plot (ticks, bars,
category labels, legend, axis titles) is relative to the plot origin, which
sits at (margin.left, margin.top) of a VIEWBOX_WIDTH x VIEWBOX_HEIGHT canvas;
y grows downwards.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from evalboard.view.aggregate import DisplayRecord, cell_index, distinct_sources
from evalboard.view.formatting import format_value, js_round, to_fixed

VIEWBOX_WIDTH = 900
VIEWBOX_HEIGHT = 560

MARGIN_TOP = 20
MARGIN_RIGHT = 260
MARGIN_LEFT = 60
MARGIN_BOTTOM_BASE = 80

# category labels are drawn rotated at font size 11
APPROX_CHAR_WIDTH = 6.5
LABEL_SPACE_MIN = 40
LABEL_SPACE_MAX = 300
CATEGORY_LABEL_OFFSET = 18
X_TITLE_OFFSET = 40
Y_TITLE_OFFSET = -35

RAW_STEP = 0.05
NORMALIZED_MAX = 100.0
NORMALIZED_STEPS = 10

BAR_FILL = 0.8
BAR_GAP = 0.1  # fraction of bar width between neighbouring bars
CATEGORY_PAD = 0.1  # fraction of category width before the first bar

LEGEND_OFFSET_X = 20
LEGEND_OFFSET_Y = 20
LEGEND_WIDTH = 210
LEGEND_HEADER = 28
LEGEND_ROW = 20
LEGEND_PAD_X = 12
LEGEND_SWATCH = 12
LEGEND_TEXT_GAP = 18
LEGEND_MAX_CHARS = 28
LEGEND_TITLE = "source_label"

PALETTE: tuple[str, ...] = (
    "#8ab6ff",
    "#f6a5c0",
    "#9dd39c",
    "#ffd67f",
    "#cba0ff",
    "#88e1dd",
    "#ffa07f",
    "#b39ddb",
    "#7fd3ff",
    "#ffe6a8",
)


@dataclass(frozen=True, slots=True)
class Margin:
    top: float
    right: float
    bottom: float
    left: float


@dataclass(frozen=True, slots=True)
class Tick:
    value: float
    y: float
    label: str
    gridline: bool


@dataclass(frozen=True, slots=True)
class Bar:
    category: str
    source_label: str
    source_index: int
    x: float
    y: float
    width: float
    height: float
    color: str
    display_value: float
    file: str
    value_text: str

    @property
    def tooltip(self) -> dict[str, str]:
        return {
            "source_label": self.source_label,
            "file": self.file,
            "accuracy_mean": self.value_text,
        }


@dataclass(frozen=True, slots=True)
class CategoryLabel:
    text: str
    x: float
    y: float
    rotation: float = -90.0


@dataclass(frozen=True, slots=True)
class LegendEntry:
    label: str
    display_label: str
    color: str
    x: float  # swatch top-left, legend-relative
    y: float
    size: float = LEGEND_SWATCH


@dataclass(frozen=True, slots=True)
class Legend:
    x: float
    y: float
    width: float
    height: float
    title: str
    entries: tuple[LegendEntry, ...]


@dataclass(frozen=True, slots=True)
class AxisTitle:
    text: str
    x: float
    y: float
    rotation: float = 0.0


@dataclass(frozen=True)
class ChartLayout:
    width: float
    height: float
    margin: Margin
    plot_width: float
    plot_height: float
    label_space: int
    normalize: bool
    y_max: float
    y_steps: int
    ticks: tuple[Tick, ...]
    bars: tuple[Bar, ...]
    categories: tuple[str, ...]
    category_labels: tuple[CategoryLabel, ...]
    sources: tuple[str, ...]
    legend: Legend | None
    x_title: AxisTitle
    y_title: AxisTitle

    def bar(self, category: str, source_label: str) -> Bar | None:
        for b in self.bars:
            if b.category == category and b.source_label == source_label:
                return b
        return None


def label_space(categories: Sequence[str]) -> int:
    longest = max((len(c or "") for c in categories), default=0)
    return min(LABEL_SPACE_MAX, max(LABEL_SPACE_MIN, js_round(longest * APPROX_CHAR_WIDTH)))


def y_scale(values: Sequence[float], normalize: bool) -> tuple[float, int]:
    """(y_max, y_steps): 0-100 in tens, or 0-1 in 0.05 steps rounded up to the data."""
    if normalize:
        return NORMALIZED_MAX, NORMALIZED_STEPS

    top = max((v for v in values if math.isfinite(v)), default=0.0) or 1.0
    # round() guards against 0.55 / 0.05 == 11.000000000000002
    steps = math.ceil(round(top / RAW_STEP, 9))
    y_max = min(1.0, round(steps * RAW_STEP, 10))
    y_steps = max(1, js_round(y_max / RAW_STEP))
    return y_max, y_steps


def _ticks(y_max: float, y_steps: int, plot_height: float, normalize: bool) -> list[Tick]:
    out: list[Tick] = []
    for i in range(y_steps + 1):
        value = y_max / y_steps * i
        out.append(
            Tick(
                value=value,
                y=plot_height - (i / y_steps) * plot_height,
                label=to_fixed(value, 0 if normalize else 2),
                gridline=i > 0,
            )
        )
    return out


def elide(label: str, max_chars: int = LEGEND_MAX_CHARS) -> str:
    return label[:max_chars] + "…" if len(label) > max_chars else label


def _legend(sources: Sequence[str], plot_width: float) -> Legend | None:
    if not sources:
        return None
    entries = tuple(
        LegendEntry(
            label=s,
            display_label=elide(s),
            color=PALETTE[i % len(PALETTE)],
            x=LEGEND_PAD_X,
            y=LEGEND_HEADER + i * LEGEND_ROW - 10,
        )
        for i, s in enumerate(sources)
    )
    return Legend(
        x=plot_width + LEGEND_OFFSET_X,
        y=LEGEND_OFFSET_Y,
        width=LEGEND_WIDTH,
        height=len(sources) * LEGEND_ROW + LEGEND_HEADER,
        title=LEGEND_TITLE,
        entries=entries,
    )


def compute_chart_layout(
    data: Sequence[DisplayRecord],
    categories: Sequence[str],
    *,
    normalize: bool,
) -> ChartLayout:
    """Lay out one page as grouped bars: one group per category, one bar per source."""
    space = label_space(categories)
    margin = Margin(
        top=MARGIN_TOP,
        right=MARGIN_RIGHT,
        bottom=MARGIN_BOTTOM_BASE + space,
        left=MARGIN_LEFT,
    )
    plot_w = VIEWBOX_WIDTH - margin.left - margin.right
    plot_h = VIEWBOX_HEIGHT - margin.top - margin.bottom

    y_max, y_steps = y_scale([d.display_value for d in data], normalize)
    sources = distinct_sources(data)
    cells = cell_index(data)

    bars: list[Bar] = []
    labels: list[CategoryLabel] = []
    if categories:
        cat_w = plot_w / len(categories)
        bar_w = cat_w / max(len(sources), 1) * BAR_FILL
        gap = bar_w * BAR_GAP

        for ci, cat in enumerate(categories):
            cat_x = ci * cat_w
            for si, src in enumerate(sources):
                d = cells.get((cat, src))
                if d is None:
                    continue
                h = d.display_value / (y_max or 1) * plot_h
                bars.append(
                    Bar(
                        category=cat,
                        source_label=src,
                        source_index=si,
                        x=cat_x + si * (bar_w + gap) + cat_w * CATEGORY_PAD,
                        y=plot_h - h,
                        width=bar_w,
                        height=h,
                        color=PALETTE[si % len(PALETTE)],
                        display_value=d.display_value,
                        file=d.file,
                        value_text=format_value(d.display_value, normalize),
                    )
                )
            labels.append(
                CategoryLabel(text=cat, x=cat_x + cat_w / 2, y=plot_h + CATEGORY_LABEL_OFFSET)
            )

    return ChartLayout(
        width=VIEWBOX_WIDTH,
        height=VIEWBOX_HEIGHT,
        margin=margin,
        plot_width=plot_w,
        plot_height=plot_h,
        label_space=space,
        normalize=normalize,
        y_max=y_max,
        y_steps=y_steps,
        ticks=tuple(_ticks(y_max, y_steps, plot_h, normalize)),
        bars=tuple(bars),
        categories=tuple(categories),
        category_labels=tuple(labels),
        sources=tuple(sources),
        legend=_legend(sources, plot_w),
        x_title=AxisTitle("category", x=plot_w / 2, y=plot_h + X_TITLE_OFFSET + space),
        y_title=AxisTitle(
            "accuracy_mean (0-100)" if normalize else "accuracy_mean",
            x=Y_TITLE_OFFSET,
            y=plot_h / 2,
            rotation=-90.0,
        ),
    )
