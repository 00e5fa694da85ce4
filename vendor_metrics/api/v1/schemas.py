"""Pydantic schemas for API responses"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel

from vendor_metrics.domain.models import (
    BalancePoint,
    BrandScoreSummary,
    DerivedDailyMetrics,
    RetentionBucket,
    ScoreInputRow,
    VendorRef,
    VendorScoreSummary,
)


class BalancePointSchema(BaseModel):
    """Carried balance of one vendor at the end of one day"""

    vendor_id: int
    vendor_name: Optional[str] = None
    brand_name: Optional[str] = None
    stat_date: date
    running_balance: Decimal

    @classmethod
    def from_domain(cls, point: BalancePoint, vendor: Optional[VendorRef]) -> "BalancePointSchema":
        return cls(
            vendor_id=point.vendor_id,
            vendor_name=vendor.vendor_name if vendor else None,
            brand_name=vendor.brand_name if vendor else None,
            stat_date=point.stat_date,
            running_balance=point.running_balance,
        )


class MetricsRowSchema(BaseModel):
    """Derived metrics of one vendor-day"""

    vendor_id: int
    vendor_name: Optional[str] = None
    brand_name: Optional[str] = None
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
    running_balance: Decimal
    top_up_amount: Decimal
    daily_budget: Decimal

    @staticmethod
    def _fields(row: DerivedDailyMetrics) -> dict:
        return dict(
            vendor_id=row.vendor_id,
            vendor_name=row.vendor.vendor_name if row.vendor else None,
            brand_name=row.vendor.brand_name if row.vendor else None,
            stat_date=row.stat_date,
            deposit=row.deposit,
            withdraw=row.withdraw,
            ad_expense=row.ad_expense,
            revenue=row.revenue,
            total_ad_cost=row.total_ad_cost,
            roi=row.roi,
            ltv=row.ltv,
            conversion_rate=row.conversion_rate,
            ftd_cost=row.ftd_cost,
            ads_views=row.ads_views,
            ads_clicks=row.ads_clicks,
            registration_count=row.registration_count,
            first_time_deposit_count=row.first_time_deposit_count,
            running_balance=row.running_balance,
            top_up_amount=row.top_up_amount,
            daily_budget=row.daily_budget,
        )

    @classmethod
    def from_domain(cls, row: DerivedDailyMetrics) -> "MetricsRowSchema":
        return cls(**cls._fields(row))


class ScoreRowSchema(MetricsRowSchema):
    """Derived metrics plus retention percentages and the composite score"""

    nfd: float
    d1: float
    d3: float
    d7: float
    d15: float
    d30: float
    score: float

    @classmethod
    def from_domain(cls, row: ScoreInputRow) -> "ScoreRowSchema":
        return cls(
            **cls._fields(row.metrics),
            nfd=row.retention_value(RetentionBucket.NFD),
            d1=row.retention_value(RetentionBucket.D1),
            d3=row.retention_value(RetentionBucket.D3),
            d7=row.retention_value(RetentionBucket.D7),
            d15=row.retention_value(RetentionBucket.D15),
            d30=row.retention_value(RetentionBucket.D30),
            score=row.score,
        )


class VendorScoreSummarySchema(BaseModel):
    vendor_id: int
    vendor_name: Optional[str] = None
    brand_name: Optional[str] = None
    days: int
    average_score: float

    @classmethod
    def from_domain(cls, summary: VendorScoreSummary) -> "VendorScoreSummarySchema":
        return cls(
            vendor_id=summary.vendor_id,
            vendor_name=summary.vendor_name,
            brand_name=summary.brand_name,
            days=summary.days,
            average_score=summary.average_score,
        )


class BrandScoreSummarySchema(BaseModel):
    brand_name: str
    days: int
    average_score: float

    @classmethod
    def from_domain(cls, summary: BrandScoreSummary) -> "BrandScoreSummarySchema":
        return cls(brand_name=summary.brand_name, days=summary.days, average_score=summary.average_score)


class BalanceReportResponse(BaseModel):
    """Response for GET /v1/reports/balances"""

    start_date: date
    end_date: date
    rows: List[BalancePointSchema]


class MetricsReportResponse(BaseModel):
    """Response for GET /v1/reports/metrics"""

    start_date: date
    end_date: date
    rows: List[MetricsRowSchema]


class ScoreReportResponse(BaseModel):
    """Response for GET /v1/reports/scores"""

    start_date: date
    end_date: date
    rows: List[ScoreRowSchema]
    vendors: List[VendorScoreSummarySchema]
    brands: List[BrandScoreSummarySchema]


class OptionSchema(BaseModel):
    """Select option for a filter dropdown"""

    value: str
    label: str


class OptionsResponse(BaseModel):
    options: List[OptionSchema]
