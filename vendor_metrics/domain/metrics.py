"""Derived financial metrics for a single day of vendor activity"""

from decimal import Decimal
from typing import Optional

from vendor_metrics.domain.models import DailyVendorRecord, DerivedDailyMetrics, VendorRef

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def total_ad_cost(record: DailyVendorRecord) -> Decimal:
    """Ad expense plus chargebacks plus commission on the expense"""
    commission = record.ad_expense * (record.ads_commission_rate / HUNDRED)
    return record.ad_expense + record.ads_chargeback + commission


def revenue(record: DailyVendorRecord) -> Decimal:
    return record.deposit - record.withdraw


def derive_metrics(
    record: DailyVendorRecord,
    running_balance: Decimal,
    vendor: Optional[VendorRef] = None,
) -> DerivedDailyMetrics:
    """
    Convert a raw ledger record into revenue, cost and ratio metrics.

    Every ratio with a zero denominator is defined as 0:
    - conversion_rate = FTD / registrations * 100
    - ftd_cost = total_ad_cost / FTD
    - ltv = revenue / FTD
    - roi = revenue / total_ad_cost * 100

    Currency values stay Decimal; roi and conversion_rate are floats.
    """
    rev = revenue(record)
    cost = total_ad_cost(record)
    ftd = record.first_time_deposit_count
    registrations = record.registration_count

    conversion_rate = (ftd / registrations) * 100 if registrations > 0 else 0.0
    ftd_cost = cost / ftd if ftd > 0 else ZERO
    ltv = rev / ftd if ftd > 0 else ZERO
    roi = float(rev / cost * HUNDRED) if cost != 0 else 0.0

    return DerivedDailyMetrics(
        vendor_id=record.vendor_id,
        stat_date=record.stat_date,
        deposit=record.deposit,
        withdraw=record.withdraw,
        ad_expense=record.ad_expense,
        revenue=rev,
        total_ad_cost=cost,
        roi=roi,
        ltv=ltv,
        conversion_rate=float(conversion_rate),
        ftd_cost=ftd_cost,
        ads_views=record.ads_views,
        ads_clicks=record.ads_clicks,
        registration_count=registrations,
        first_time_deposit_count=ftd,
        top_up_amount=record.top_up_amount,
        daily_budget=record.daily_budget,
        running_balance=running_balance,
        vendor=vendor,
    )
