"""Report access scope derived from the caller's permission names"""

from dataclasses import dataclass
from typing import AbstractSet

from vendor_metrics.domain.exceptions import AuthorizationError


@dataclass(frozen=True)
class AccessScope:
    """Which vendors a caller may see for one report"""

    user_id: int
    report_key: str
    view_all: bool

    @property
    def owner_id(self) -> int | None:
        """Owner filter for the vendor directory; None means every vendor"""
        return None if self.view_all else self.user_id


def resolve_access_scope(user_id: int, permissions: AbstractSet[str], report_key: str) -> AccessScope:
    """
    "<report>:view:all" sees every vendor, "<report>:view" only the caller's own.

    Raises:
        AuthorizationError: caller holds neither permission
    """
    if f"{report_key}:view:all" in permissions:
        return AccessScope(user_id=user_id, report_key=report_key, view_all=True)
    if f"{report_key}:view" in permissions:
        return AccessScope(user_id=user_id, report_key=report_key, view_all=False)
    raise AuthorizationError(f"User {user_id} may not view report '{report_key}'")
