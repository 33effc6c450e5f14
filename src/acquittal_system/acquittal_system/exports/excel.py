from __future__ import annotations

import io
from typing import Mapping, Sequence

import pandas as pd

from ..records.forms import FormSchema

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def build_workbook(tables: Sequence[tuple[FormSchema, Sequence[Mapping]]]) -> bytes:
    """One sheet per form, named by its label, with every stored column.

    The header row is written even when a table has no rows.
    """

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        for schema, rows in tables:
            df = pd.DataFrame(list(rows), columns=schema.export_columns)
            df.to_excel(writer, index=False, sheet_name=schema.label)
    output.seek(0)
    return output.getvalue()
