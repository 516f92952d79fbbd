from evalboard.errors import BatchError, EmptyFileWarning, EvalboardError, ParseError
from evalboard.session import LoadSummary, PageLayout, Session
from evalboard.view.aggregate import SortMode

__all__ = [
    "BatchError",
    "EmptyFileWarning",
    "EvalboardError",
    "LoadSummary",
    "PageLayout",
    "ParseError",
    "Session",
    "SortMode",
]
