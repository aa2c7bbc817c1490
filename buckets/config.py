from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from babel import Locale
from babel.core import UnknownLocaleError

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en_US"
TOTAL_LABEL = "Total"


@dataclass(frozen=True)
class EngineSettings:
    terms_size: int = 10
    histogram_size: int = 50
    date_histogram_size: int = 100
    min_doc_count: int = 1
    locale: str = DEFAULT_LOCALE
    total_label: str = TOTAL_LABEL


def _as_size(value: object, default: int) -> int:
    try:
        out = int(value)  # type: ignore[arg-type]
    except Exception:
        return default
    return max(1, out)


def validate_locale(locale_code: Optional[str]) -> str:
    if not locale_code:
        return DEFAULT_LOCALE
    try:
        Locale.parse(str(locale_code).replace("-", "_"))
        return str(locale_code).replace("-", "_")
    except (UnknownLocaleError, ValueError, TypeError):
        logger.warning("unknown locale %r, using %s", locale_code, DEFAULT_LOCALE)
        return DEFAULT_LOCALE


def normalize_settings(raw: Optional[dict]) -> EngineSettings:
    raw = raw or {}
    defaults = EngineSettings()
    total_label = raw.get("total_label")
    return EngineSettings(
        terms_size=_as_size(raw.get("terms_size", defaults.terms_size), defaults.terms_size),
        histogram_size=_as_size(raw.get("histogram_size", defaults.histogram_size), defaults.histogram_size),
        date_histogram_size=_as_size(
            raw.get("date_histogram_size", defaults.date_histogram_size), defaults.date_histogram_size
        ),
        min_doc_count=_as_size(raw.get("min_doc_count", defaults.min_doc_count), defaults.min_doc_count),
        locale=validate_locale(raw.get("locale")),
        total_label=str(total_label) if total_label else defaults.total_label,
    )
