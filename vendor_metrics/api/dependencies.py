"""Dependency injection for FastAPI endpoints"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from vendor_metrics.config import settings
from vendor_metrics.domain.scoring import ScoringParameters
from vendor_metrics.infrastructure.database.repositories import (
    LedgerRepository,
    PermissionRepository,
    VendorDirectoryRepository,
)
from vendor_metrics.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> int:
    """Caller identity forwarded by the authenticating gateway"""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    try:
        return int(x_user_id)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid X-User-Id header")


def get_ledger(db: Session = Depends(get_db)) -> LedgerRepository:
    return LedgerRepository(db)


def get_vendor_directory(db: Session = Depends(get_db)) -> VendorDirectoryRepository:
    return VendorDirectoryRepository(db)


def get_permission_repository(db: Session = Depends(get_db)) -> PermissionRepository:
    return PermissionRepository(db)


def get_scoring_parameters() -> ScoringParameters:
    """Scoring constants from configuration"""
    return ScoringParameters(
        weights=dict(settings.score_weights),
        percentile_low=settings.percentile_low,
        percentile_high=settings.percentile_high,
        registration_saturation=settings.registration_saturation,
    )
