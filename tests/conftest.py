"""Pytest fixtures for testing"""

import os

# Must be set before vendor_metrics.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

from datetime import date
from decimal import Decimal
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from vendor_metrics.api.main import create_app
from vendor_metrics.domain.models import DailyVendorRecord
from vendor_metrics.infrastructure.database.models import (
    Base,
    Brand,
    DepositorRetention,
    RolePermission,
    UserRole,
    Vendor,
    VendorMonthlyBalance,
    VendorStat,
)
from vendor_metrics.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ADMIN_USER = 1
OWNER_USER = 10
NO_ACCESS_USER = 99


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def make_record() -> Callable[..., DailyVendorRecord]:
    """Factory for ledger records; amounts may be given as str/int and become Decimal"""

    def _make(vendor_id: int = 1, stat_date: date = date(2024, 3, 1), **fields) -> DailyVendorRecord:
        for name in ("deposit", "withdraw", "ad_expense", "ads_commission_rate", "ads_chargeback",
                     "top_up_amount", "daily_budget"):
            if name in fields:
                fields[name] = Decimal(str(fields[name]))
        return DailyVendorRecord(vendor_id=vendor_id, stat_date=stat_date, **fields)

    return _make


@pytest.fixture
def seeded_db(db: Session) -> Session:
    """
    Two brands, three vendors, permissions for an admin and a vendor owner.

    Vendor 1 (owned by user 10) follows the carry-forward scenario:
    February closing balance 500, March 1 top-up 50 / cost 30,
    March 2 top-up 0 / cost 20.
    """
    db.add_all([
        Brand(id=1, name="Alpha", is_active=True),
        Brand(id=2, name="Beta", is_active=True),
    ])
    db.add_all([
        Vendor(id=1, name="Alpha One", brand_id=1, user_id=OWNER_USER, is_active=True),
        Vendor(id=2, name="Alpha Two", brand_id=1, user_id=20, is_active=True),
        Vendor(id=3, name="Beta One", brand_id=2, user_id=20, is_active=False),
    ])

    db.add(VendorMonthlyBalance(vendor_id=1, year=2024, month=2, closing_balance=Decimal("500")))

    db.add_all([
        VendorStat(
            vendor_id=1, stat_date=date(2024, 3, 1), deposit=Decimal("1000"), withdraw=Decimal("200"),
            registration=100, first_time_deposit=20, ad_expense=Decimal("30"), ads_commission=Decimal("0"),
            ads_chargeback=Decimal("0"), ads_views=1000, ads_clicks=50, top_up_amount=Decimal("50"),
            daily_budget=Decimal("40"),
        ),
        VendorStat(
            vendor_id=1, stat_date=date(2024, 3, 2), deposit=Decimal("400"), withdraw=Decimal("100"),
            registration=60, first_time_deposit=6, ad_expense=Decimal("20"), ads_commission=Decimal("0"),
            ads_chargeback=Decimal("0"), ads_views=800, ads_clicks=30, top_up_amount=Decimal("0"),
            daily_budget=Decimal("40"),
        ),
        VendorStat(
            vendor_id=2, stat_date=date(2024, 3, 1), deposit=Decimal("1000"), withdraw=Decimal("200"),
            registration=0, first_time_deposit=0, ad_expense=Decimal("100"), ads_commission=Decimal("10"),
            ads_chargeback=Decimal("10"), ads_views=500, ads_clicks=25, top_up_amount=Decimal("200"),
            daily_budget=Decimal("100"),
        ),
        VendorStat(
            vendor_id=3, stat_date=date(2024, 3, 1), deposit=Decimal("50"), withdraw=Decimal("0"),
            registration=10, first_time_deposit=1, ad_expense=Decimal("5"), ads_commission=Decimal("0"),
            ads_chargeback=Decimal("0"), ads_views=10, ads_clicks=1, top_up_amount=Decimal("0"),
            daily_budget=Decimal("0"),
        ),
    ])

    db.add_all([
        DepositorRetention(vendor_id=1, day_name="NFD", date_of_return=date(2024, 3, 1), percentage=Decimal("40")),
        DepositorRetention(vendor_id=1, day_name="D1", date_of_return=date(2024, 3, 1), percentage=Decimal("25")),
        DepositorRetention(vendor_id=1, day_name="D7", date_of_return=date(2024, 3, 2), percentage=Decimal("12.5")),
    ])

    # Role 1: view everything; role 2: view own vendors only
    for key in ("brand-stats", "roi", "vendor-score"):
        db.add(RolePermission(role_id=1, permission=f"{key}:view:all"))
        db.add(RolePermission(role_id=2, permission=f"{key}:view"))
    db.add_all([
        UserRole(user_id=ADMIN_USER, role_id=1),
        UserRole(user_id=OWNER_USER, role_id=2),
    ])

    db.commit()
    return db
