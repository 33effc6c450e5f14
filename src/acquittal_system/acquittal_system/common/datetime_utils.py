from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

import pandas as pd


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), datetime.min.time())


def coerce_date(value: Any) -> Optional[date]:
    """Best-effort conversion of a spreadsheet/JSON cell into a date.

    Accepts date/datetime, pandas Timestamp, Excel serial numbers and common
    string formats. Anything unparseable becomes None.
    """

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, pd.Timestamp):
        return None if pd.isna(value) else value.date()
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if pd.isna(value) or value <= 0:
            return None
        # Excel serial day number (1900 date system)
        return (pd.Timestamp("1899-12-30") + pd.Timedelta(days=float(value))).date()

    text = str(value).strip()
    if not text:
        return None
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%d/%m/%Y", "%d-%m-%Y"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def isoformat_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)
