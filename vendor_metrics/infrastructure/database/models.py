"""SQLAlchemy ORM models for the vendor ledger, directory and permissions"""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Brand(Base):
    """Brand grouping one or more vendors"""

    __tablename__ = "brand"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)
    is_active = Column(Boolean, nullable=False, default=True)

    vendors = relationship("Vendor", back_populates="brand")


class Vendor(Base):
    """Advertising vendor; user_id is the owning account"""

    __tablename__ = "vendor"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    brand_id = Column(Integer, ForeignKey("brand.id"), nullable=False, index=True)
    user_id = Column(Integer, nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True)

    brand = relationship("Brand", back_populates="vendors")


class VendorStat(Base):
    """One day of vendor activity"""

    __tablename__ = "vendor_stat"
    __table_args__ = (UniqueConstraint("vendor_id", "stat_date", name="uq_vendor_stat_day"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    vendor_id = Column(Integer, ForeignKey("vendor.id", ondelete="CASCADE"), nullable=False, index=True)
    stat_date = Column(Date, nullable=False, index=True)
    deposit = Column(Numeric(18, 2), nullable=False, default=0)
    withdraw = Column(Numeric(18, 2), nullable=False, default=0)
    registration = Column(Integer, nullable=False, default=0)
    first_time_deposit = Column(Integer, nullable=False, default=0)
    ad_expense = Column(Numeric(18, 2), nullable=False, default=0)
    ads_commission = Column(Numeric(5, 2), nullable=False, default=0)
    ads_chargeback = Column(Numeric(18, 2), nullable=False, default=0)
    ads_views = Column(Integer, nullable=False, default=0)
    ads_clicks = Column(Integer, nullable=False, default=0)
    daily_budget = Column(Numeric(18, 2), nullable=False, default=0)
    top_up_amount = Column(Numeric(18, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class VendorMonthlyBalance(Base):
    """Month-end closing balance checkpoint"""

    __tablename__ = "vendor_monthly_balance"
    __table_args__ = (UniqueConstraint("vendor_id", "year", "month", name="uq_vendor_month"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    vendor_id = Column(Integer, ForeignKey("vendor.id", ondelete="CASCADE"), nullable=False, index=True)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    closing_balance = Column(Numeric(18, 2), nullable=False)


class DepositorRetention(Base):
    """Deposit return-rate percentage per vendor, day and retention bucket"""

    __tablename__ = "depositor_retention"
    __table_args__ = (
        UniqueConstraint("vendor_id", "day_name", "date_of_return", name="uq_vendor_retention_day"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    vendor_id = Column(Integer, ForeignKey("vendor.id", ondelete="CASCADE"), nullable=False, index=True)
    day_name = Column(Text, nullable=False)  # NFD, D1, D3, D7, D15, D30
    date_of_return = Column(Date, nullable=False, index=True)
    percentage = Column(Numeric(5, 2), nullable=False, default=0)


class UserRole(Base):
    """Role assigned to a user"""

    __tablename__ = "user_role"
    __table_args__ = (UniqueConstraint("user_id", "role_id", name="uq_user_role"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    role_id = Column(Integer, nullable=False, index=True)


class RolePermission(Base):
    """Permission name granted to a role, e.g. vendor-score:view:all"""

    __tablename__ = "role_permission"
    __table_args__ = (UniqueConstraint("role_id", "permission", name="uq_role_permission"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    role_id = Column(Integer, nullable=False, index=True)
    permission = Column(Text, nullable=False)
