from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from evalboard.errors import BatchError, EmptyFileWarning, FileFailure, ParseError
from evalboard.report.extract import Extraction, extract_records
from evalboard.report.parser import parse_report

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES: tuple[str, ...] = (".json", ".jsonl")


@dataclass(frozen=True)
class FileOutcome:
    name: str
    extraction: Extraction | None = None
    failure: FileFailure | None = None

    @property
    def ok(self) -> bool:
        return self.extraction is not None


@dataclass(frozen=True)
class LoadResult:
    extractions: tuple[Extraction, ...]
    loaded_names: tuple[str, ...] = ()
    failures: tuple[FileFailure, ...] = field(default_factory=tuple)


def filter_report_paths(paths: Iterable[str | Path]) -> list[Path]:
    keep = [Path(p) for p in paths if Path(p).suffix.lower() in SUPPORTED_SUFFIXES]
    if not keep:
        raise BatchError("no .json or .jsonl files given")
    return keep


def _read_text(path: Path) -> str:
    # utf-8-sig also accepts files saved with a BOM
    return path.read_text(encoding="utf-8-sig")


async def read_report_files_async(
    paths: Sequence[str | Path],
) -> tuple[list[tuple[str, str]], list[FileFailure]]:
    """
    Read several files concurrently. Results keep input order; unreadable
    files become "read" failures instead of aborting the batch.

    Use this from code that already runs an event loop.
    """
    paths = [Path(p) for p in paths]
    tasks = [asyncio.to_thread(_read_text, p) for p in paths]
    contents = await asyncio.gather(*tasks, return_exceptions=True)

    texts: list[tuple[str, str]] = []
    failures: list[FileFailure] = []
    for p, content in zip(paths, contents):
        if isinstance(content, BaseException):
            if not isinstance(content, (OSError, UnicodeDecodeError)):
                raise content
            logger.warning("Could not read %s: %s", p, content)
            failures.append(FileFailure(p.name, f"read failed: {content}", kind="read"))
            continue
        texts.append((p.name, content))
    return texts, failures


def read_report_files(
    paths: Sequence[str | Path],
) -> tuple[list[tuple[str, str]], list[FileFailure]]:
    """Blocking wrapper around read_report_files_async()."""
    return asyncio.run(read_report_files_async(paths))


def process_text(name: str, text: str) -> FileOutcome:
    """Parse and extract one file. Pure apart from logging."""
    try:
        doc = parse_report(text)
    except ParseError as e:
        logger.warning("Could not parse %s: %s", name, e)
        return FileOutcome(name, failure=FileFailure(name, str(e), kind="parse"))

    ex = extract_records(doc)
    if ex.is_empty:
        logger.warning("%s", EmptyFileWarning(f"{name}: no usable records"))
        return FileOutcome(name, failure=FileFailure(name, "no usable records", kind="empty"))

    return FileOutcome(name, extraction=ex)


def load_batch(
    raw_texts: Iterable[tuple[str, str]],
    *,
    prior_failures: Sequence[FileFailure] = (),
) -> LoadResult:
    """
    Process every file of one upload batch.

    Failures are collected, not raised, unless no file at all is usable, in
    which case BatchError lists them.
    """
    extractions: list[Extraction] = []
    names: list[str] = []
    failures: list[FileFailure] = list(prior_failures)

    for name, text in raw_texts:
        outcome = process_text(name, text)
        if outcome.extraction is not None:
            extractions.append(outcome.extraction)
            names.append(name)
        elif outcome.failure is not None:
            failures.append(outcome.failure)

    if not extractions:
        raise BatchError("no usable report files found", failures)

    return LoadResult(
        extractions=tuple(extractions),
        loaded_names=tuple(names),
        failures=tuple(failures),
    )
