from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal


def to_fixed(value: float, digits: int) -> str:
    """Fixed-point text with ties rounded away from zero (JS toFixed style)."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    q = Decimal(value).quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)
    if q == 0:
        q = abs(q)
    return f"{q:.{digits}f}"


def format_value(value: float, normalize: bool) -> str:
    return to_fixed(value, 1 if normalize else 4)


def js_round(x: float) -> int:
    # half-up, unlike round()
    return math.floor(x + 0.5)
