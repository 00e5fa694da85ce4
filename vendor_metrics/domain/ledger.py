"""Running account balance per vendor, carried day by day"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from vendor_metrics.domain.metrics import total_ad_cost
from vendor_metrics.domain.models import DailyVendorRecord

ZERO = Decimal("0")


def next_balance(previous_balance: Decimal, record: DailyVendorRecord) -> Decimal:
    """balance = previous + top-up - total ad cost (deposits/withdrawals don't move it)"""
    return previous_balance + record.top_up_amount - total_ad_cost(record)


def fold_balances(records: Iterable[DailyVendorRecord], opening_balance: Decimal) -> List[Decimal]:
    """
    Fold one vendor's records (ascending by date) into end-of-day balances.

    Skipped days are not materialized; the balance just carries over the gap.
    """
    balances = []
    balance = opening_balance
    for record in records:
        balance = next_balance(balance, record)
        balances.append(balance)
    return balances


def opening_balance(
    closing_balance: Optional[Decimal],
    month_to_date_records: Iterable[DailyVendorRecord],
) -> Decimal:
    """
    Opening balance for a report start date.

    Starts from the prior month's closing checkpoint (0 if none was stored)
    and folds the same-month records that precede the start date.
    """
    checkpoint = closing_balance if closing_balance is not None else ZERO
    balances = fold_balances(sorted(month_to_date_records, key=lambda r: r.stat_date), checkpoint)
    return balances[-1] if balances else checkpoint


def group_by_vendor(records: Iterable[DailyVendorRecord]) -> Dict[int, List[DailyVendorRecord]]:
    """Group records per vendor, each group sorted ascending by date"""
    grouped: Dict[int, List[DailyVendorRecord]] = defaultdict(list)
    for record in records:
        grouped[record.vendor_id].append(record)
    return {vendor_id: sorted(rows, key=lambda r: r.stat_date) for vendor_id, rows in grouped.items()}


def opening_balances(
    closing_balances: Mapping[int, Decimal],
    month_to_date_records: Iterable[DailyVendorRecord],
    vendor_ids: Iterable[int],
) -> Dict[int, Decimal]:
    """Opening balance of every requested vendor; vendors without history start at 0"""
    grouped = group_by_vendor(month_to_date_records)
    return {
        vendor_id: opening_balance(closing_balances.get(vendor_id), grouped.get(vendor_id, []))
        for vendor_id in vendor_ids
    }


def running_balances(
    records: Iterable[DailyVendorRecord],
    openings: Mapping[int, Decimal],
) -> Dict[Tuple[int, date], Decimal]:
    """Running balance keyed by (vendor_id, stat_date); vendors are folded independently"""
    result: Dict[Tuple[int, date], Decimal] = {}
    for vendor_id, vendor_records in group_by_vendor(records).items():
        balances = fold_balances(vendor_records, openings.get(vendor_id, ZERO))
        for record, balance in zip(vendor_records, balances):
            result[(vendor_id, record.stat_date)] = balance
    return result
