"""Tests for the proration of one-time payments over tiers"""

from datetime import datetime, timezone

import pytest

from sponsortally import Tier, current_month_tier, month_difference, prepare_tiers

NOW = datetime(2024, 7, 15, 12, 0, tzinfo=timezone.utc)


def _tiers(*prices: int) -> list[Tier]:
    return prepare_tiers([Tier(monthly_dollars=price, name=f"${price}") for price in prices])


def test_month_difference_ignores_days():
    """Only calendar months count"""
    assert month_difference(datetime(2024, 1, 31), datetime(2024, 2, 1)) == 1
    assert month_difference(datetime(2024, 3, 1), datetime(2024, 3, 31)) == 0
    assert month_difference(datetime(2022, 11, 10), datetime(2024, 2, 10)) == 15


def test_prepare_tiers_drops_free_tiers_and_sorts_descending():
    tiers = prepare_tiers(
        [
            Tier(monthly_dollars=5),
            Tier(monthly_dollars=None),
            Tier(monthly_dollars=100),
            Tier(monthly_dollars=0),
            Tier(monthly_dollars=25),
        ],
    )
    assert [tier.monthly_dollars for tier in tiers] == [100, 25, 5]


def test_payment_used_up_on_expensive_tier():
    """$500 once, 6 months ago: one month at $500, nothing left for $100"""
    sponsor_date = datetime(2024, 1, 15, tzinfo=timezone.utc)
    assert current_month_tier(NOW, sponsor_date, _tiers(500, 100), 500) == -1


def test_single_tier_payment_lapses_after_one_month():
    """$50 once, 2 months ago, with a single $50 tier"""
    sponsor_date = datetime(2024, 5, 15, tzinfo=timezone.utc)
    assert current_month_tier(NOW, sponsor_date, _tiers(50), 50) == -1


def test_payment_still_covers_current_month():
    sponsor_date = datetime(2024, 6, 1, tzinfo=timezone.utc)
    assert current_month_tier(NOW, sponsor_date, _tiers(50), 100) == 50


def test_payment_falls_through_to_cheaper_tier():
    """$130 once, 2 months ago: 1 month at $100, then 3 months at $10"""
    sponsor_date = datetime(2024, 5, 1, tzinfo=timezone.utc)
    assert current_month_tier(NOW, sponsor_date, _tiers(100, 10), 130) == 10


def test_too_expensive_tiers_are_skipped():
    sponsor_date = datetime(2024, 7, 1, tzinfo=timezone.utc)
    assert current_month_tier(NOW, sponsor_date, _tiers(500, 5), 20) == 5


def test_no_tiers():
    assert current_month_tier(NOW, NOW, [], 100) == -1


@pytest.mark.parametrize("amount", [5, 10, 35, 100, 250, 1000])
@pytest.mark.parametrize("months_ago", [0, 1, 3, 12, 48])
def test_result_is_a_tier_price_or_lapsed(amount: int, months_ago: int):
    """Whatever the inputs, the result is one of the tier prices or -1"""
    tiers = _tiers(100, 25, 5)
    year, month = divmod(NOW.month - 1 - months_ago, 12)
    sponsor_date = NOW.replace(year=NOW.year + year, month=month + 1, day=1)
    assert month_difference(sponsor_date, NOW) == months_ago
    result = current_month_tier(NOW, sponsor_date, tiers, amount)
    assert result in {100, 25, 5, -1}
