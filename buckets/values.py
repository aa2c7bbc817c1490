from __future__ import annotations

import math
from numbers import Number
from typing import Mapping, Optional

import numpy as np
import pandas as pd


def is_missing(value: object) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # list-likes make pd.isna return arrays
        return False


def as_number(value: object) -> Optional[float]:
    """Coerce a record value to a finite float, or None when it has no numeric meaning."""
    if is_missing(value):
        return None
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            out = float(s)
        except ValueError:
            return None
    elif isinstance(value, Number):
        try:
            out = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError, OverflowError):
            return None
    else:
        return None
    if math.isnan(out) or math.isinf(out):
        return None
    return out


def format_number(value: float) -> str:
    """Shortest round-trip text; exponent form below 1e-6 and from 1e21, e.g. ``1e-7`` or ``1e+21``."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    scientific = np.format_float_scientific(value, trim="-", exp_digits=1)
    exponent = int(scientific.rsplit("e", 1)[1])
    if -7 < exponent < 21:
        return np.format_float_positional(value, trim="-")
    return scientific


def as_text(value: object) -> str:
    if is_missing(value):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_number(value)
    return str(value)


def field_value(record: object, field: str) -> object:
    if isinstance(record, Mapping):
        return record.get(field)
    return None
