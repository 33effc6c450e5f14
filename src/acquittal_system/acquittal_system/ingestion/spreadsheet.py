from __future__ import annotations

import io
import logging
import zipfile
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def _frame_to_rows(df: pd.DataFrame) -> list[dict[str, Any]]:
    if df.empty:
        return []
    # Blank lines in the sheet are not records.
    df = df.dropna(how="all")
    df = df.astype(object).where(pd.notna(df), None)
    df.columns = [str(c) for c in df.columns]
    return df.to_dict(orient="records")


def read_first_sheet(content: bytes, filename: str) -> list[dict[str, Any]]:
    """Read the first sheet of an uploaded workbook (or a CSV file).

    Returns one dict per data row keyed by the header text exactly as it
    appears in the sheet. Cell values are left untyped; the mapper decides
    how to coerce them.
    """

    suffix = Path(filename or "").suffix.lower()
    buf = io.BytesIO(content or b"")
    try:
        if suffix == ".csv":
            df = pd.read_csv(buf, dtype=object, keep_default_na=True)
        else:
            df = pd.read_excel(buf, sheet_name=0, dtype=object, engine="openpyxl")
    except pd.errors.EmptyDataError:
        return []
    except (ValueError, OSError, KeyError, zipfile.BadZipFile, InvalidFileException) as e:
        logger.warning("Unreadable spreadsheet %s: %s", filename, e)
        raise ValidationError("Unable to read spreadsheet", details=[{"field": "file", "message": str(e)}]) from e

    return _frame_to_rows(df)
