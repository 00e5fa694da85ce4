"""Report pipeline: ledger fold -> derived metrics -> (optional) percentile scoring"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from vendor_metrics.domain import ledger
from vendor_metrics.domain.exceptions import InvalidReportQueryError
from vendor_metrics.domain.metrics import derive_metrics
from vendor_metrics.domain.models import (
    BalancePoint,
    DailyVendorRecord,
    DerivedDailyMetrics,
    ReportQuery,
    RetentionBucket,
    ScoreInputRow,
    VendorRef,
)
from vendor_metrics.domain.scoring import ScoringParameters, score_rows
from vendor_metrics.utils.date_utils import first_day_of_month, previous_month


class LedgerReader(Protocol):
    """Range-query capability of the ledger store"""

    def list_daily_records(
        self, vendor_ids: Sequence[int], start: date, end: date
    ) -> List[DailyVendorRecord]:
        """Records with start <= stat_date <= end"""
        ...

    def get_closing_balances(self, vendor_ids: Sequence[int], year: int, month: int) -> Dict[int, Decimal]:
        ...

    def list_retention(
        self, vendor_ids: Sequence[int], start: date, end: date
    ) -> Dict[Tuple[int, date], Dict[RetentionBucket, float]]:
        ...


def parse_identifier(field: str, value: Optional[str]) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise InvalidReportQueryError(field, f"'{value}' is not a valid identifier")
    if parsed <= 0:
        raise InvalidReportQueryError(field, f"'{value}' is not a valid identifier")
    return parsed


def build_report_query(
    start_date: Optional[date],
    end_date: Optional[date],
    vendor_id: Optional[str] = None,
    brand_id: Optional[str] = None,
    max_days: int = 366,
) -> ReportQuery:
    """
    Validate report parameters before anything touches the ledger.

    Raises:
        InvalidReportQueryError: missing or inverted range, range longer than
            max_days, or filter identifiers that are not positive integers
    """
    if start_date is None:
        raise InvalidReportQueryError("start_date", "is required")
    if end_date is None:
        raise InvalidReportQueryError("end_date", "is required")
    if start_date > end_date:
        raise InvalidReportQueryError("start_date", "must not be after end_date")
    if (end_date - start_date).days + 1 > max_days:
        raise InvalidReportQueryError("end_date", f"range must not exceed {max_days} days")

    return ReportQuery(
        start_date=start_date,
        end_date=end_date,
        vendor_id=parse_identifier("vendor_id", vendor_id),
        brand_id=parse_identifier("brand_id", brand_id),
    )


def _matches(vendor: VendorRef, query: ReportQuery) -> bool:
    if query.vendor_id is not None and vendor.vendor_id != query.vendor_id:
        return False
    if query.brand_id is not None and vendor.brand_id != query.brand_id:
        return False
    return True


def _load_opening_balances(reader: LedgerReader, vendor_ids: List[int], start: date) -> Dict[int, Decimal]:
    year, month = previous_month(start)
    closing = reader.get_closing_balances(vendor_ids, year, month)

    month_start = first_day_of_month(start)
    month_to_date: List[DailyVendorRecord] = []
    if month_start < start:
        month_to_date = reader.list_daily_records(vendor_ids, month_start, start - timedelta(days=1))

    return ledger.opening_balances(closing, month_to_date, vendor_ids)


def _derive(
    reader: LedgerReader,
    vendors: Sequence[VendorRef],
    query: ReportQuery,
) -> List[DerivedDailyMetrics]:
    """Single pass shared by all reports: balances first, then per-row metrics"""
    by_id = {v.vendor_id: v for v in vendors if _matches(v, query)}
    vendor_ids = sorted(by_id)
    if not vendor_ids:
        return []

    openings = _load_opening_balances(reader, vendor_ids, query.start_date)
    records = reader.list_daily_records(vendor_ids, query.start_date, query.end_date)
    balances = ledger.running_balances(records, openings)

    ordered = sorted(records, key=lambda r: (r.vendor_id, r.stat_date))
    return [
        derive_metrics(record, balances[(record.vendor_id, record.stat_date)], by_id.get(record.vendor_id))
        for record in ordered
    ]


def compute_balance_series(
    reader: LedgerReader,
    vendors: Sequence[VendorRef],
    query: ReportQuery,
) -> List[BalancePoint]:
    return [
        BalancePoint(vendor_id=row.vendor_id, stat_date=row.stat_date, running_balance=row.running_balance)
        for row in _derive(reader, vendors, query)
    ]


def compute_metrics_report(
    reader: LedgerReader,
    vendors: Sequence[VendorRef],
    query: ReportQuery,
) -> List[DerivedDailyMetrics]:
    return _derive(reader, vendors, query)


def compute_score_report(
    reader: LedgerReader,
    vendors: Sequence[VendorRef],
    query: ReportQuery,
    parameters: ScoringParameters | None = None,
) -> List[ScoreInputRow]:
    """
    Derived metrics joined with retention percentages, then scored.

    Missing retention buckets count as 0. Scoring waits for the whole
    candidate set since percentiles are taken across every row.
    """
    derived = _derive(reader, vendors, query)
    if not derived:
        return []

    vendor_ids = sorted({row.vendor_id for row in derived})
    retention = reader.list_retention(vendor_ids, query.start_date, query.end_date)

    rows = [
        ScoreInputRow(metrics=row, retention=dict(retention.get((row.vendor_id, row.stat_date), {})))
        for row in derived
    ]
    return score_rows(rows, parameters)
