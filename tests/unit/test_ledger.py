"""Unit tests for the running balance ledger"""

from datetime import date, timedelta
from decimal import Decimal

from vendor_metrics.domain.ledger import (
    fold_balances,
    opening_balance,
    opening_balances,
    running_balances,
)
from vendor_metrics.domain.metrics import total_ad_cost
from vendor_metrics.utils.date_utils import first_day_of_month, previous_month


def test_carry_forward_from_closing_balance(make_record):
    """Prior month closes at 500; +50-30 then +0-20"""
    day1 = make_record(stat_date=date(2024, 3, 1), top_up_amount="50", ad_expense="30")
    day2 = make_record(stat_date=date(2024, 3, 2), top_up_amount="0", ad_expense="20")

    assert fold_balances([day1, day2], Decimal("500")) == [Decimal("520"), Decimal("500")]


def test_balance_continuity(make_record):
    """balance[i] == balance[i-1] + top_up[i] - total_ad_cost[i]"""
    records = [
        make_record(
            stat_date=date(2024, 5, 1) + timedelta(days=i),
            top_up_amount=str(10 * i),
            ad_expense="7.35",
            ads_commission_rate="12.5",
            ads_chargeback="0.10",
        )
        for i in range(10)
    ]

    balances = fold_balances(records, Decimal("100"))

    for i in range(1, len(records)):
        expected = balances[i - 1] + records[i].top_up_amount - total_ad_cost(records[i])
        assert balances[i] == expected


def test_fold_is_exact_decimal(make_record):
    """Many small cents amounts must not drift"""
    records = [
        make_record(stat_date=date(2024, 1, 1) + timedelta(days=i), top_up_amount="0.10", ad_expense="0.20")
        for i in range(30)
    ]

    balances = fold_balances(records, Decimal("0"))

    assert balances[-1] == Decimal("-3.00")


def test_deposits_do_not_move_balance(make_record):
    record = make_record(deposit="1000", withdraw="900", top_up_amount="5", ad_expense="1")

    assert fold_balances([record], Decimal("0")) == [Decimal("4")]


def test_opening_balance_without_checkpoint_starts_at_zero(make_record):
    assert opening_balance(None, []) == Decimal("0")
    assert opening_balance(None, [make_record(top_up_amount="10")]) == Decimal("10")


def test_opening_balance_folds_month_to_date_in_date_order(make_record):
    later = make_record(stat_date=date(2024, 3, 3), top_up_amount="0", ad_expense="5")
    earlier = make_record(stat_date=date(2024, 3, 1), top_up_amount="20", ad_expense="0")

    assert opening_balance(Decimal("100"), [later, earlier]) == Decimal("115")


def test_checkpoint_equivalence(make_record):
    """Checkpoint + same-month fold equals replaying the vendor's whole history"""
    history = []
    day = date(2024, 1, 5)
    while day < date(2024, 3, 20):
        history.append(
            make_record(
                stat_date=day,
                top_up_amount=str(day.day * 3),
                ad_expense=str(day.day),
                ads_commission_rate="10",
                ads_chargeback="1.25",
            )
        )
        day += timedelta(days=3)

    target = date(2024, 3, 14)
    full_replay = fold_balances([r for r in history if r.stat_date < target], Decimal("0"))[-1]

    # Closing balance of February, as the monthly snapshot would store it
    year, month = previous_month(target)
    end_of_prior = first_day_of_month(target)
    closing = fold_balances([r for r in history if r.stat_date < end_of_prior], Decimal("0"))[-1]
    assert (year, month) == (2024, 2)

    month_to_date = [r for r in history if end_of_prior <= r.stat_date < target]
    assert opening_balance(closing, month_to_date) == full_replay


def test_gap_carries_balance(make_record):
    records = [
        make_record(stat_date=date(2024, 3, 1), top_up_amount="10"),
        make_record(stat_date=date(2024, 3, 10), top_up_amount="5"),
    ]

    balances = running_balances(records, {1: Decimal("0")})

    assert balances == {(1, date(2024, 3, 1)): Decimal("10"), (1, date(2024, 3, 10)): Decimal("15")}


def test_vendors_are_independent_and_order_insensitive(make_record):
    records = [
        make_record(vendor_id=2, stat_date=date(2024, 3, 2), top_up_amount="1"),
        make_record(vendor_id=1, stat_date=date(2024, 3, 2), ad_expense="3"),
        make_record(vendor_id=2, stat_date=date(2024, 3, 1), top_up_amount="2"),
        make_record(vendor_id=1, stat_date=date(2024, 3, 1), top_up_amount="10"),
    ]

    balances = running_balances(records, {1: Decimal("100"), 2: Decimal("-5")})

    assert balances[(1, date(2024, 3, 1))] == Decimal("110")
    assert balances[(1, date(2024, 3, 2))] == Decimal("107")
    assert balances[(2, date(2024, 3, 1))] == Decimal("-3")
    assert balances[(2, date(2024, 3, 2))] == Decimal("-2")


def test_opening_balances_cover_every_requested_vendor(make_record):
    openings = opening_balances(
        {1: Decimal("500")},
        [make_record(vendor_id=2, top_up_amount="7")],
        [1, 2, 3],
    )

    assert openings == {1: Decimal("500"), 2: Decimal("7"), 3: Decimal("0")}


def test_previous_month_wraps_year():
    assert previous_month(date(2024, 1, 15)) == (2023, 12)
    assert previous_month(date(2024, 3, 1)) == (2024, 2)
