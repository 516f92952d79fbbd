from __future__ import annotations
import argparse
import json
from dataclasses import asdict
from pathlib import Path

from evalboard.config import load_config
from evalboard.errors import EvalboardError
from evalboard.logging_utils import configure_logging
from evalboard.session import LoadSummary, Session
from evalboard.view.aggregate import SortMode


def safe_print(msg: str) -> None:
    # Avoid UnicodeEncodeError on Windows CI/console encodings
    try:
        print(msg)
    except UnicodeEncodeError:
        print(msg.encode("utf-8", errors="replace").decode("utf-8"))


def _print_summary(summary: LoadSummary) -> None:
    safe_print(summary.message)
    for f in summary.failures:
        safe_print(f"Warning: {f}")


def _load(files: list[str]) -> tuple[Session, LoadSummary]:
    session = Session()
    summary = session.load_paths(files)
    return session, summary


def cmd_datasets(args: argparse.Namespace) -> int:
    session, _ = _load(args.files)
    for name in session.list_datasets():
        safe_print(name)
    return 0


def cmd_summary(args: argparse.Namespace) -> int:
    session, summary = _load(args.files)
    _print_summary(summary)
    for label, averages in session.store.metadata.items():
        safe_print("")
        safe_print(f"{label}:")
        if not averages:
            safe_print("  (none)")
        for ds in sorted(averages):
            safe_print(f"  {ds}: {averages[ds]:.4f}")
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    cfg = load_config(
        {
            "page_size": args.page_size,
            "sort_mode": args.sort,
            "normalize": args.normalize,
            "out_dir": args.out,
        }
    )
    session, summary = _load(args.files)
    _print_summary(summary)

    datasets = session.list_datasets()
    dataset = args.dataset or (datasets[0] if datasets else None)
    if dataset is None or dataset not in datasets:
        safe_print(f"Error: unknown dataset {dataset!r}. Available: {', '.join(datasets)}")
        return 2

    pages = session.render(
        dataset,
        normalize=cfg.normalize,
        page_size=cfg.page_size,
        sort_mode=cfg.sort_mode,
    )

    out_dir = Path(cfg.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    index: list[dict] = []
    for page in pages:
        safe_print(page.title)
        csv_path = out_dir / page.csv_filename
        csv_path.write_text(page.csv, encoding="utf-8")
        safe_print(f"Wrote: {csv_path}")
        entry = {
            "range_start": page.range_start,
            "range_end": page.range_end,
            "total_categories": page.total_categories,
            "categories": list(page.categories),
            "csv": csv_path.name,
        }

        if args.png:
            from evalboard.render_matplotlib import render_chart_png

            png_path = csv_path.with_suffix(".png")
            render_chart_png(page.chart, png_path)
            safe_print(f"Wrote: {png_path}")
            entry["png"] = png_path.name

        if args.json:
            entry["chart"] = asdict(page.chart)
        index.append(entry)

    if args.json:
        pages_path = out_dir / "pages.json"
        pages_path.write_text(
            json.dumps(
                {"dataset": dataset, "normalize": cfg.normalize, "pages": index},
                indent=2,
                ensure_ascii=False,
            )
            + "\n",
            encoding="utf-8",
        )
        safe_print(f"Wrote: {pages_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="evalboard",
        description="Compare benchmark evaluation reports per dataset category.",
    )
    parser.add_argument("--version", action="store_true", help="Print version")
    parser.add_argument("--log-level", default=None, help="Logging level (default: WARNING)")

    sub = parser.add_subparsers(dest="command")

    p_ds = sub.add_parser("datasets", help="List datasets found in report files")
    p_ds.add_argument("files", nargs="+", help="Report files (.json / .jsonl)")
    p_ds.set_defaults(func=cmd_datasets)

    p_sum = sub.add_parser("summary", help="Print per-source dataset averages")
    p_sum.add_argument("files", nargs="+", help="Report files (.json / .jsonl)")
    p_sum.set_defaults(func=cmd_summary)

    p_r = sub.add_parser("render", help="Write per-page CSV (and optional PNG) for one dataset")
    p_r.add_argument("files", nargs="+", help="Report files (.json / .jsonl)")
    p_r.add_argument("--dataset", default=None, help="Dataset name (default: first)")
    p_r.add_argument(
        "--normalize",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Show accuracy as 0-100",
    )
    p_r.add_argument("--page-size", type=int, default=None, help="Categories per page")
    p_r.add_argument(
        "--sort",
        choices=[m.value for m in SortMode],
        default=None,
        help="Category order (default: name)",
    )
    p_r.add_argument("--out", default=None, help="Output directory (default: outputs)")
    p_r.add_argument("--png", action="store_true", help="Also draw each page with matplotlib")
    p_r.add_argument("--json", action="store_true", help="Also write pages.json with layouts")
    p_r.set_defaults(func=cmd_render)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        try:
            from importlib.metadata import version

            safe_print(f"evalboard {version('evalboard')}")
        except Exception:
            safe_print("evalboard (unknown version)")
        return 0

    if not getattr(args, "func", None):
        parser.print_help()
        return 0

    try:
        cfg = load_config({"log_level": args.log_level})
        configure_logging(cfg.log_level)
        return args.func(args)
    except EvalboardError as e:
        safe_print(f"Error: {e}")
        return 2
    except OSError as e:
        safe_print(f"Error: {type(e).__name__}: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
