from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import FormType


@dataclass(frozen=True)
class TableTotals:
    record_count: int
    total_amount: float


class ReportingRepository(Protocol):
    """Read-only aggregations over the record tables.

    Implementations return 0 (never None) for empty aggregates.
    """

    def totals(self, form_type: FormType, *, since: Optional[datetime] = None) -> TableTotals:
        raise NotImplementedError

    def count_distinct(self, form_type: FormType, column: str) -> int:
        raise NotImplementedError

    def uploads_since(self, since: datetime) -> int:
        """Rows uploaded at or after `since`, summed over all three tables."""

        raise NotImplementedError

    def monthly_amounts(self, form_type: FormType, *, since: Optional[datetime] = None, limit: Optional[int] = None) -> Sequence[dict]:
        """[{month: 'YYYY-MM', record_count, total_amount}], oldest month first."""

        raise NotImplementedError

    def top_groups(self, form_type: FormType, column: str, *, limit: int) -> Sequence[dict]:
        """[{label, record_count, total_amount}] ordered by total_amount desc; blank labels skipped."""

        raise NotImplementedError

    def position_stats(self, *, limit: int) -> Sequence[dict]:
        raise NotImplementedError

    def facility_breakdown(self, form_type: FormType) -> Sequence[dict]:
        """[{facility_name, record_count, total_amount, last_updated}]"""

        raise NotImplementedError

    def facility_employee_counts(self) -> dict[str, int]:
        """Distinct employee names per facility across both salary forms."""

        raise NotImplementedError

    def recent_uploads(self, *, limit: int) -> Sequence[dict]:
        """[{dataset, record_id, facility_name, uploaded_at}] newest first, over all tables."""

        raise NotImplementedError

    def employee_rows(self, form_type: FormType) -> Sequence[dict]:
        raise NotImplementedError
