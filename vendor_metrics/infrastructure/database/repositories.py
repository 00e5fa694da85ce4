"""Data access layer for the vendor ledger, directory and permissions"""

import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Set, Tuple

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vendor_metrics.domain.access import AccessScope
from vendor_metrics.domain.exceptions import LedgerReadError
from vendor_metrics.domain.models import DailyVendorRecord, RetentionBucket, VendorRef
from vendor_metrics.infrastructure.database.models import (
    Brand,
    DepositorRetention,
    RolePermission,
    UserRole,
    Vendor,
    VendorMonthlyBalance,
    VendorStat,
)
from vendor_metrics.infrastructure.observability.metrics import ledger_read_failures_counter

logger = logging.getLogger(__name__)


def _decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _to_record(stat: VendorStat) -> DailyVendorRecord:
    return DailyVendorRecord(
        vendor_id=stat.vendor_id,
        stat_date=stat.stat_date,
        deposit=_decimal(stat.deposit),
        withdraw=_decimal(stat.withdraw),
        registration_count=stat.registration or 0,
        first_time_deposit_count=stat.first_time_deposit or 0,
        ad_expense=_decimal(stat.ad_expense),
        ads_commission_rate=_decimal(stat.ads_commission),
        ads_chargeback=_decimal(stat.ads_chargeback),
        ads_views=stat.ads_views or 0,
        ads_clicks=stat.ads_clicks or 0,
        top_up_amount=_decimal(stat.top_up_amount),
        daily_budget=_decimal(stat.daily_budget),
    )


class LedgerRepository:
    """Read-only range queries over daily stats, closing balances and retention"""

    def __init__(self, db: Session):
        self.db = db

    def list_daily_records(self, vendor_ids: Sequence[int], start: date, end: date) -> List[DailyVendorRecord]:
        """Daily records in [start, end], ordered by vendor then date"""
        if not vendor_ids:
            return []
        try:
            stats = (
                self.db.query(VendorStat)
                .filter(VendorStat.vendor_id.in_(vendor_ids))
                .filter(VendorStat.stat_date >= start, VendorStat.stat_date <= end)
                .order_by(VendorStat.vendor_id.asc(), VendorStat.stat_date.asc())
                .all()
            )
        except SQLAlchemyError as e:
            ledger_read_failures_counter.inc()
            raise LedgerReadError(f"Failed to read vendor stats: {e}") from e
        return [_to_record(stat) for stat in stats]

    def get_closing_balances(self, vendor_ids: Sequence[int], year: int, month: int) -> Dict[int, Decimal]:
        """Closing balance per vendor for one month; vendors without a snapshot are omitted"""
        if not vendor_ids:
            return {}
        try:
            rows = (
                self.db.query(VendorMonthlyBalance)
                .filter(VendorMonthlyBalance.vendor_id.in_(vendor_ids))
                .filter(VendorMonthlyBalance.year == year, VendorMonthlyBalance.month == month)
                .all()
            )
        except SQLAlchemyError as e:
            ledger_read_failures_counter.inc()
            raise LedgerReadError(f"Failed to read monthly balances: {e}") from e
        return {row.vendor_id: _decimal(row.closing_balance) for row in rows}

    def list_retention(
        self, vendor_ids: Sequence[int], start: date, end: date
    ) -> Dict[Tuple[int, date], Dict[RetentionBucket, float]]:
        """Retention percentages keyed by (vendor_id, date) then bucket"""
        if not vendor_ids:
            return {}
        try:
            rows = (
                self.db.query(DepositorRetention)
                .filter(DepositorRetention.vendor_id.in_(vendor_ids))
                .filter(DepositorRetention.date_of_return >= start, DepositorRetention.date_of_return <= end)
                .all()
            )
        except SQLAlchemyError as e:
            ledger_read_failures_counter.inc()
            raise LedgerReadError(f"Failed to read depositor retention: {e}") from e

        result: Dict[Tuple[int, date], Dict[RetentionBucket, float]] = {}
        for row in rows:
            try:
                bucket = RetentionBucket(row.day_name)
            except ValueError:
                logger.warning("Ignoring unknown retention bucket", extra={"day_name": row.day_name})
                continue
            result.setdefault((row.vendor_id, row.date_of_return), {})[bucket] = float(row.percentage or 0)
        return result


class VendorDirectoryRepository:
    """Vendors and brands visible under an access scope"""

    def __init__(self, db: Session):
        self.db = db

    def list_vendors(
        self,
        scope: AccessScope,
        vendor_id: Optional[int] = None,
        brand_id: Optional[int] = None,
        active_only: bool = False,
    ) -> List[VendorRef]:
        """Vendors matching the filters, restricted to the caller's own when the scope requires it"""
        query = self.db.query(Vendor, Brand).join(Brand, Vendor.brand_id == Brand.id)
        if vendor_id is not None:
            query = query.filter(Vendor.id == vendor_id)
        if brand_id is not None:
            query = query.filter(Vendor.brand_id == brand_id)
        if scope.owner_id is not None:
            query = query.filter(Vendor.user_id == scope.owner_id)
        if active_only:
            query = query.filter(Vendor.is_active.is_(True))

        try:
            rows = query.order_by(Vendor.name.asc()).all()
        except SQLAlchemyError as e:
            ledger_read_failures_counter.inc()
            raise LedgerReadError(f"Failed to read vendors: {e}") from e

        return [
            VendorRef(vendor_id=vendor.id, vendor_name=vendor.name, brand_id=brand.id, brand_name=brand.name)
            for vendor, brand in rows
        ]

    def list_brands(self, scope: AccessScope) -> List[Brand]:
        """Active brands; a scoped caller only sees brands of their own vendors"""
        query = self.db.query(Brand).filter(Brand.is_active.is_(True))
        if scope.owner_id is not None:
            owned = select(Vendor.brand_id).where(Vendor.user_id == scope.owner_id)
            query = query.filter(Brand.id.in_(owned))

        try:
            return query.order_by(Brand.name.asc()).all()
        except SQLAlchemyError as e:
            ledger_read_failures_counter.inc()
            raise LedgerReadError(f"Failed to read brands: {e}") from e


class PermissionRepository:
    """Permission names granted through a user's roles"""

    def __init__(self, db: Session):
        self.db = db

    def get_permissions(self, user_id: int) -> Set[str]:
        try:
            rows = (
                self.db.query(RolePermission.permission)
                .join(UserRole, UserRole.role_id == RolePermission.role_id)
                .filter(UserRole.user_id == user_id)
                .all()
            )
        except SQLAlchemyError as e:
            ledger_read_failures_counter.inc()
            raise LedgerReadError(f"Failed to read permissions: {e}") from e
        return {permission for (permission,) in rows}
