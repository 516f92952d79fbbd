from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.patches import Rectangle  # noqa: E402

from evalboard.view.layout import ChartLayout  # noqa: E402

AXIS_COLOR = "#4a5160"
GRID_COLOR = "#2a2f3a"
TEXT_COLOR = "#cfd6e6"
MUTED_COLOR = "#9aa3b2"
LEGEND_BG = "#111624"
BACKGROUND = "#0b0f19"


def render_chart_png(chart: ChartLayout, out_path: str | Path, *, dpi: int = 100) -> Path:
    """Draw a ChartLayout to a PNG. Only the layout's own coordinates are used."""
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    fig = plt.figure(figsize=(chart.width / dpi, chart.height / dpi), dpi=dpi)
    fig.patch.set_facecolor(BACKGROUND)
    ax = fig.add_axes((0, 0, 1, 1))
    ax.set_xlim(0, chart.width)
    ax.set_ylim(chart.height, 0)  # y grows downwards, like the layout
    ax.axis("off")

    ox, oy = chart.margin.left, chart.margin.top
    pw, ph = chart.plot_width, chart.plot_height

    ax.add_patch(Rectangle((ox, oy), pw, ph, fill=False, edgecolor=GRID_COLOR, linewidth=1))
    for t in chart.ticks:
        if t.gridline:
            ax.plot([ox, ox + pw], [oy + t.y, oy + t.y], color=GRID_COLOR, linewidth=1)
        ax.text(ox - 10, oy + t.y, t.label, ha="right", va="center", fontsize=8, color=MUTED_COLOR)
    ax.plot([ox, ox + pw], [oy + ph, oy + ph], color=AXIS_COLOR, linewidth=1)
    ax.plot([ox, ox], [oy, oy + ph], color=AXIS_COLOR, linewidth=1)

    for b in chart.bars:
        ax.add_patch(Rectangle((ox + b.x, oy + b.y), b.width, b.height, color=b.color, alpha=0.85))

    for lbl in chart.category_labels:
        ax.text(
            ox + lbl.x,
            oy + lbl.y,
            lbl.text,
            rotation=-lbl.rotation,
            ha="center",
            va="top",
            fontsize=7,
            color=TEXT_COLOR,
        )

    if chart.legend is not None:
        lg = chart.legend
        lx, ly = ox + lg.x, oy + lg.y
        ax.add_patch(
            Rectangle((lx, ly), lg.width, lg.height, facecolor=LEGEND_BG, edgecolor=GRID_COLOR)
        )
        ax.text(lx + 12, ly + 16, lg.title, fontsize=7, color=MUTED_COLOR, va="bottom")
        for e in lg.entries:
            ax.add_patch(Rectangle((lx + e.x, ly + e.y), e.size, e.size, color=e.color))
            ax.text(
                lx + e.x + e.size + 6,
                ly + e.y + e.size,
                e.display_label,
                fontsize=7,
                color=TEXT_COLOR,
                va="bottom",
            )

    ax.text(
        ox + chart.x_title.x, oy + chart.x_title.y, chart.x_title.text,
        ha="center", fontsize=8, color=TEXT_COLOR,
    )
    ax.text(
        ox + chart.y_title.x, oy + chart.y_title.y, chart.y_title.text,
        ha="center", va="center", rotation=-chart.y_title.rotation, fontsize=8, color=TEXT_COLOR,
    )

    fig.savefig(out_path, dpi=dpi, facecolor=fig.get_facecolor())
    plt.close(fig)
    return out_path
