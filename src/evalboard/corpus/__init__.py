from .loader import (
    SUPPORTED_SUFFIXES,
    LoadResult,
    filter_report_paths,
    load_batch,
    process_text,
    read_report_files,
    read_report_files_async,
)
from .store import CorpusStore

__all__ = [
    "CorpusStore",
    "LoadResult",
    "SUPPORTED_SUFFIXES",
    "filter_report_paths",
    "load_batch",
    "process_text",
    "read_report_files",
    "read_report_files_async",
]
