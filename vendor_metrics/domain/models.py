"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional


class RetentionBucket(str, Enum):
    """Horizon at which depositor return-rate is measured"""

    NFD = "NFD"
    D1 = "D1"
    D3 = "D3"
    D7 = "D7"
    D15 = "D15"
    D30 = "D30"


@dataclass(frozen=True)
class VendorRef:
    """Vendor visible to the caller, with the names used for display"""

    vendor_id: int
    vendor_name: str
    brand_id: int
    brand_name: str


@dataclass(frozen=True)
class DailyVendorRecord:
    """Raw ledger entry for one vendor on one calendar day"""

    vendor_id: int
    stat_date: date
    deposit: Decimal = Decimal("0")
    withdraw: Decimal = Decimal("0")
    registration_count: int = 0
    first_time_deposit_count: int = 0
    ad_expense: Decimal = Decimal("0")
    ads_commission_rate: Decimal = Decimal("0")  # percentage points
    ads_chargeback: Decimal = Decimal("0")
    ads_views: int = 0
    ads_clicks: int = 0
    top_up_amount: Decimal = Decimal("0")
    daily_budget: Decimal = Decimal("0")


@dataclass(frozen=True)
class ReportQuery:
    """Validated report request: inclusive date range plus optional filters"""

    start_date: date
    end_date: date
    vendor_id: Optional[int] = None
    brand_id: Optional[int] = None


@dataclass(frozen=True)
class BalancePoint:
    """Carried account balance of a vendor at the end of a day"""

    vendor_id: int
    stat_date: date
    running_balance: Decimal


@dataclass
class DerivedDailyMetrics:
    """Financial ratios calculated from a single DailyVendorRecord"""

    vendor_id: int
    stat_date: date
    deposit: Decimal
    withdraw: Decimal
    ad_expense: Decimal
    revenue: Decimal
    total_ad_cost: Decimal
    roi: float
    ltv: Decimal
    conversion_rate: float
    ftd_cost: Decimal
    ads_views: int
    ads_clicks: int
    registration_count: int
    first_time_deposit_count: int
    top_up_amount: Decimal
    daily_budget: Decimal
    running_balance: Decimal
    vendor: Optional[VendorRef] = None


@dataclass
class ScoreInputRow:
    """Derived metrics extended with retention percentages and the composite score"""

    metrics: DerivedDailyMetrics
    retention: Dict[RetentionBucket, float] = field(default_factory=dict)
    score: float = 0.0

    def retention_value(self, bucket: RetentionBucket) -> float:
        return self.retention.get(bucket, 0.0)


@dataclass
class VendorScoreSummary:
    """Mean of a vendor's per-day scores over the reporting window"""

    vendor_id: int
    vendor_name: Optional[str]
    brand_name: Optional[str]
    days: int
    average_score: float


@dataclass
class BrandScoreSummary:
    """Mean of every per-day score of a brand's vendors over the reporting window"""

    brand_name: str
    days: int
    average_score: float
