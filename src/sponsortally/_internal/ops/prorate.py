"""Prorate one-time sponsorships over tiers."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from sponsortally._internal.models import Tier


def month_difference(start: datetime, end: datetime) -> int:
    """Count calendar months between two dates, ignoring days."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def current_month_tier(
    date_now: datetime,
    sponsor_date: datetime,
    tiers: list[Tier],
    monthly_dollars: int,
) -> int:
    """Find the tier a one-time payment still covers today.

    The payment is spent month after month on the most expensive tier it can afford,
    then on cheaper ones with what remains.

    Parameters:
        date_now: The current date.
        sponsor_date: The date of the payment.
        tiers: Tiers with a positive price, sorted by descending price.
        monthly_dollars: The amount paid.

    Returns:
        The price of the tier covering the current month, or `-1` if the payment is used up.
    """
    elapsed = month_difference(sponsor_date, date_now)
    current_months = 0
    for tier in tiers:
        price: int = tier.monthly_dollars  # type: ignore[assignment]
        months_at_tier = monthly_dollars // price
        if months_at_tier == 0:
            continue
        if current_months + months_at_tier > elapsed:
            return price
        monthly_dollars -= months_at_tier * price
        current_months += months_at_tier
    return -1
