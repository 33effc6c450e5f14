from __future__ import annotations

from typing import Any, Protocol, Sequence

from ..core.enums import FormType


class RecordRepository(Protocol):
    """Persistence for the three acquittal record tables."""

    def insert_many(self, form_type: FormType, records: Sequence[Any]) -> int:
        """Insert records of one form in a single transaction; returns rows written."""

        raise NotImplementedError

    def list_rows(self, form_type: FormType, *, newest_first: bool = False) -> Sequence[dict]:
        """All rows of one table as dicts (all columns, amounts as float)."""

        raise NotImplementedError
