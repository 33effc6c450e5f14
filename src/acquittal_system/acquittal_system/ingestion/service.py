from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError as SchemaError

from ..common.validators import is_blank, schema_error_details
from ..core.constants import MANUAL_ENTRY_SOURCE
from ..core.enums import FormType
from ..core.exceptions import MissingFields, ValidationError
from ..records.forms import FORMS, schema_for
from ..records.repository import RecordRepository
from ..records.schemas import MANUAL_ENTRY_SCHEMAS
from .mapper import MappingStats, map_row
from .spreadsheet import read_first_sheet

logger = logging.getLogger(__name__)


class IngestionService:
    """Use cases: spreadsheet upload and manual entry of acquittal records."""

    def __init__(self, records: RecordRepository):
        self._records = records

    def ingest(self, form_type: FormType, content: bytes, filename: str) -> int:
        """Map every row of the first sheet and store them; returns rows written.

        All rows of one upload are written in one transaction: a failure
        part-way leaves none of them behind.
        """

        schema = schema_for(form_type)
        rows = read_first_sheet(content, filename)
        if not rows:
            logger.info("Upload %s (%s) had no data rows", filename, schema.form_type.value)
            return 0

        stats = MappingStats()
        records = [map_row(schema, row, file_name=filename, stats=stats) for row in rows]
        if stats.coerced_cells:
            logger.warning(
                "Upload %s (%s): %s non-numeric cell(s) stored as 0",
                filename,
                schema.form_type.value,
                stats.coerced_cells,
            )

        written = self._records.insert_many(schema.form_type, records)
        logger.info("Upload %s (%s): %s record(s) stored", filename, schema.form_type.value, written)
        return written

    def ingest_manual(self, form_type: FormType, fields: Mapping[str, Any]):
        schema = schema_for(form_type)
        if not isinstance(fields, Mapping):
            raise ValidationError("Request body must be a JSON object")

        missing = [name for name in schema.required_manual if is_blank(fields.get(name))]
        if missing:
            raise MissingFields(missing)

        try:
            entry = MANUAL_ENTRY_SCHEMAS[schema.form_type].model_validate(dict(fields))
        except SchemaError as e:
            raise ValidationError("Validation failed", details=schema_error_details(e)) from e

        record = schema.record_cls(**entry.model_dump(), file_name=MANUAL_ENTRY_SOURCE)
        self._records.insert_many(schema.form_type, [record])
        logger.info("Manual %s record saved for facility %s", schema.form_type.value, record.facility_name)
        return record

    def list_all(self) -> dict[str, list[dict]]:
        return {
            form_type.dataset: list(self._records.list_rows(form_type, newest_first=True))
            for form_type in FORMS
        }
