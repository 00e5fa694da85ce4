"""GET /v1/reports/* - balance, metrics and score reports"""

import logging
import time
from datetime import date
from typing import Callable, List, Optional, Sequence, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from vendor_metrics.api.dependencies import (
    get_current_user_id,
    get_ledger,
    get_permission_repository,
    get_request_id,
    get_scoring_parameters,
    get_vendor_directory,
)
from vendor_metrics.api.v1.schemas import (
    BalancePointSchema,
    BalanceReportResponse,
    BrandScoreSummarySchema,
    MetricsReportResponse,
    MetricsRowSchema,
    ScoreReportResponse,
    ScoreRowSchema,
    VendorScoreSummarySchema,
)
from vendor_metrics.config import settings
from vendor_metrics.domain.access import resolve_access_scope
from vendor_metrics.domain.exceptions import AuthorizationError, InvalidReportQueryError, LedgerReadError
from vendor_metrics.domain.models import ReportQuery, VendorRef
from vendor_metrics.domain.reports import (
    build_report_query,
    compute_balance_series,
    compute_metrics_report,
    compute_score_report,
)
from vendor_metrics.domain.scoring import ScoringParameters, summarize_scores
from vendor_metrics.infrastructure.database.repositories import (
    LedgerRepository,
    PermissionRepository,
    VendorDirectoryRepository,
)
from vendor_metrics.infrastructure.observability.logging import log_report
from vendor_metrics.infrastructure.observability.metrics import record_report, record_report_failure

router = APIRouter()

Row = TypeVar("Row")


def run_report(
    report_key: str,
    request: Request,
    user_id: int,
    start_date: Optional[date],
    end_date: Optional[date],
    vendor_id: Optional[str],
    brand_id: Optional[str],
    permissions: PermissionRepository,
    directory: VendorDirectoryRepository,
    compute: Callable[[Sequence[VendorRef], ReportQuery], List[Row]],
) -> tuple[ReportQuery, List[VendorRef], List[Row]]:
    """
    Shared report flow.

    Flow:
    1. Resolve the caller's access scope for the report
    2. Validate the date range and filters
    3. Resolve the visible vendor set
    4. Run the pipeline over the ledger

    Steps 1 and 2 fail before the ledger is read.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        scope = resolve_access_scope(user_id, permissions.get_permissions(user_id), report_key)
        query = build_report_query(start_date, end_date, vendor_id, brand_id, settings.max_report_days)
        vendors = directory.list_vendors(scope, query.vendor_id, query.brand_id)
        rows = compute(vendors, query)

    except AuthorizationError as e:
        record_report_failure(report_key, rejected=True)
        logging.warning(f"Unauthorized report request: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=403, detail="Not authorized to view this report")

    except InvalidReportQueryError as e:
        record_report_failure(report_key, rejected=True)
        logging.warning(f"Invalid report query: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail={"field": e.field, "message": e.message})

    except LedgerReadError as e:
        record_report_failure(report_key, rejected=False)
        logging.error(f"Ledger read error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Failed to load report data")

    except Exception as e:
        record_report_failure(report_key, rejected=False)
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_report(report_key, len(rows))
    log_report(request_id, user_id, report_key, len(rows), duration_ms)

    return query, vendors, rows


@router.get("/reports/balances", response_model=BalanceReportResponse)
def get_balance_report(
    request: Request,
    start_date: Optional[date] = Query(None, description="First day of the range (inclusive)"),
    end_date: Optional[date] = Query(None, description="Last day of the range (inclusive)"),
    vendor_id: Optional[str] = Query(None),
    brand_id: Optional[str] = Query(None),
    user_id: int = Depends(get_current_user_id),
    ledger: LedgerRepository = Depends(get_ledger),
    permissions: PermissionRepository = Depends(get_permission_repository),
    directory: VendorDirectoryRepository = Depends(get_vendor_directory),
):
    """
    Day-by-day carried account balance per vendor.

    Opening balance = prior month closing balance + same-month activity
    before start_date.
    """
    query, vendors, points = run_report(
        settings.balance_report_key, request, user_id, start_date, end_date, vendor_id, brand_id,
        permissions, directory,
        lambda vs, q: compute_balance_series(ledger, vs, q),
    )
    by_id = {v.vendor_id: v for v in vendors}

    return BalanceReportResponse(
        start_date=query.start_date,
        end_date=query.end_date,
        rows=[BalancePointSchema.from_domain(p, by_id.get(p.vendor_id)) for p in points],
    )


@router.get("/reports/metrics", response_model=MetricsReportResponse)
def get_metrics_report(
    request: Request,
    start_date: Optional[date] = Query(None, description="First day of the range (inclusive)"),
    end_date: Optional[date] = Query(None, description="Last day of the range (inclusive)"),
    vendor_id: Optional[str] = Query(None),
    brand_id: Optional[str] = Query(None),
    user_id: int = Depends(get_current_user_id),
    ledger: LedgerRepository = Depends(get_ledger),
    permissions: PermissionRepository = Depends(get_permission_repository),
    directory: VendorDirectoryRepository = Depends(get_vendor_directory),
):
    """Revenue, ad cost, ROI, LTV, conversion, FTD cost and running balance per vendor-day"""
    query, _, rows = run_report(
        settings.metrics_report_key, request, user_id, start_date, end_date, vendor_id, brand_id,
        permissions, directory,
        lambda vs, q: compute_metrics_report(ledger, vs, q),
    )

    return MetricsReportResponse(
        start_date=query.start_date,
        end_date=query.end_date,
        rows=[MetricsRowSchema.from_domain(r) for r in rows],
    )


@router.get("/reports/scores", response_model=ScoreReportResponse)
def get_score_report(
    request: Request,
    start_date: Optional[date] = Query(None, description="First day of the range (inclusive)"),
    end_date: Optional[date] = Query(None, description="Last day of the range (inclusive)"),
    vendor_id: Optional[str] = Query(None),
    brand_id: Optional[str] = Query(None),
    user_id: int = Depends(get_current_user_id),
    ledger: LedgerRepository = Depends(get_ledger),
    permissions: PermissionRepository = Depends(get_permission_repository),
    directory: VendorDirectoryRepository = Depends(get_vendor_directory),
    parameters: ScoringParameters = Depends(get_scoring_parameters),
):
    """
    Composite 0-100 vendor score per vendor-day.

    Also returns per-vendor and per-brand averages of the daily scores over
    the range.
    """
    query, _, rows = run_report(
        settings.score_report_key, request, user_id, start_date, end_date, vendor_id, brand_id,
        permissions, directory,
        lambda vs, q: compute_score_report(ledger, vs, q, parameters),
    )
    vendor_summaries, brand_summaries = summarize_scores(rows)

    return ScoreReportResponse(
        start_date=query.start_date,
        end_date=query.end_date,
        rows=[ScoreRowSchema.from_domain(r) for r in rows],
        vendors=[VendorScoreSummarySchema.from_domain(s) for s in vendor_summaries],
        brands=[BrandScoreSummarySchema.from_domain(s) for s in brand_summaries],
    )
