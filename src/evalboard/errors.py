from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


class EvalboardError(Exception):
    """Base error for report loading / rendering."""


class ParseError(EvalboardError, ValueError):
    """Text is not a usable report document (bad JSON / JSON-Lines or missing fields)."""


class ConfigError(EvalboardError):
    """Configuration file or environment value is invalid."""


class RenderError(EvalboardError):
    """Render arguments are invalid (e.g. non-positive page size)."""


class EmptyFileWarning(UserWarning):
    """A report parsed fine but yielded zero usable records."""


@dataclass(frozen=True, slots=True)
class FileFailure:
    name: str
    reason: str
    kind: str = "parse"  # "read" | "parse" | "empty"

    def __str__(self) -> str:
        return f"{self.name}: {self.reason}"


class BatchError(EvalboardError):
    """Every file in an upload batch failed or yielded nothing usable."""

    def __init__(self, message: str, failures: Sequence[FileFailure] = ()) -> None:
        self.failures: tuple[FileFailure, ...] = tuple(failures)
        if self.failures:
            details = "\n".join(f"  - {f}" for f in self.failures[:20])
            message = f"{message}\n{details}"
        super().__init__(message)
