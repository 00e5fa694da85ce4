"""GET /v1/options/* - brand and vendor filter options for a report"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from vendor_metrics.api.dependencies import (
    get_current_user_id,
    get_permission_repository,
    get_request_id,
    get_vendor_directory,
)
from vendor_metrics.api.v1.schemas import OptionSchema, OptionsResponse
from vendor_metrics.domain.access import AccessScope, resolve_access_scope
from vendor_metrics.domain.exceptions import AuthorizationError, InvalidReportQueryError, LedgerReadError
from vendor_metrics.domain.reports import parse_identifier
from vendor_metrics.infrastructure.database.repositories import PermissionRepository, VendorDirectoryRepository

router = APIRouter()


def _authorize(request: Request, user_id: int, report: str, permissions: PermissionRepository) -> AccessScope:
    try:
        return resolve_access_scope(user_id, permissions.get_permissions(user_id), report)
    except AuthorizationError:
        raise HTTPException(status_code=403, detail="Not authorized to view this report")
    except LedgerReadError as e:
        logging.error(f"Failed to load permissions: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Failed to load permissions")


@router.get("/options/brands", response_model=OptionsResponse)
def get_brand_options(
    request: Request,
    report: str = Query(..., min_length=1, description="Report key the options are for"),
    user_id: int = Depends(get_current_user_id),
    permissions: PermissionRepository = Depends(get_permission_repository),
    directory: VendorDirectoryRepository = Depends(get_vendor_directory),
):
    """Active brands visible to the caller, ordered by name"""
    scope = _authorize(request, user_id, report, permissions)

    try:
        brands = directory.list_brands(scope)
    except LedgerReadError as e:
        logging.error(f"Failed to load brands: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Failed to load brands")

    return OptionsResponse(options=[OptionSchema(value=str(b.id), label=b.name) for b in brands])


@router.get("/options/vendors", response_model=OptionsResponse)
def get_vendor_options(
    request: Request,
    report: str = Query(..., min_length=1, description="Report key the options are for"),
    brand_id: Optional[str] = Query(None),
    user_id: int = Depends(get_current_user_id),
    permissions: PermissionRepository = Depends(get_permission_repository),
    directory: VendorDirectoryRepository = Depends(get_vendor_directory),
):
    """Active vendors visible to the caller, optionally limited to one brand"""
    scope = _authorize(request, user_id, report, permissions)

    try:
        brand = parse_identifier("brand_id", brand_id)
        vendors = directory.list_vendors(scope, brand_id=brand, active_only=True)
    except InvalidReportQueryError as e:
        raise HTTPException(status_code=422, detail={"field": e.field, "message": e.message})
    except LedgerReadError as e:
        logging.error(f"Failed to load vendors: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Failed to load vendors")

    return OptionsResponse(options=[OptionSchema(value=str(v.vendor_id), label=v.vendor_name) for v in vendors])
