from .extract import Extraction, extract_records, normalize_dataset_name
from .parser import parse_report, parse_report_text, validate_report
from .schema import DatasetResult, Record, ReportDocument, ResultEntry

__all__ = [
    "parse_report",
    "parse_report_text",
    "validate_report",
    "extract_records",
    "normalize_dataset_name",
    "Extraction",
    "ReportDocument",
    "DatasetResult",
    "ResultEntry",
    "Record",
]
