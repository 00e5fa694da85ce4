"""Unit tests for report access scopes"""

import pytest

from vendor_metrics.domain.access import resolve_access_scope
from vendor_metrics.domain.exceptions import AuthorizationError


def test_view_all_sees_every_vendor():
    scope = resolve_access_scope(1, {"vendor-score:view:all", "vendor-score:view"}, "vendor-score")

    assert scope.view_all is True
    assert scope.owner_id is None


def test_view_own_restricts_to_owner():
    scope = resolve_access_scope(10, {"vendor-score:view"}, "vendor-score")

    assert scope.view_all is False
    assert scope.owner_id == 10


def test_permission_for_another_report_is_not_enough():
    with pytest.raises(AuthorizationError):
        resolve_access_scope(10, {"roi:view:all"}, "vendor-score")
