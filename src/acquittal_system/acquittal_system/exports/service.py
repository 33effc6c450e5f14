from __future__ import annotations

import logging

from ..core.constants import REPORT_TITLE
from ..records.forms import FORMS
from ..records.repository import RecordRepository
from .excel import build_workbook
from .pdf import build_report

logger = logging.getLogger(__name__)


class ExportService:
    """Render every stored record as a workbook or a PDF report."""

    def __init__(self, records: RecordRepository, *, title: str = REPORT_TITLE):
        self._records = records
        self._title = title

    def _tables(self):
        return [(schema, list(self._records.list_rows(ft))) for ft, schema in FORMS.items()]

    def export_spreadsheet(self) -> bytes:
        tables = self._tables()
        data = build_workbook(tables)
        logger.info("Excel export built (%s rows)", sum(len(rows) for _, rows in tables))
        return data

    def export_pdf(self) -> bytes:
        tables = self._tables()
        data = build_report(self._title, tables)
        logger.info("PDF export built (%s rows)", sum(len(rows) for _, rows in tables))
        return data
