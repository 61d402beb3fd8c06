"""Turn raw GraphQL nodes into sponsorship records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sponsortally._internal.models import Account, SponsoringRecord, Sponsorship, parse_datetime
from sponsortally._internal.ops.prorate import current_month_tier

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from sponsortally._internal.models import Tier


def normalize_sponsorship(
    raw: dict[str, Any],
    *,
    date_now: datetime,
    tiers: list[Tier] | None = None,
    prorate_onetime: bool = False,
) -> Sponsorship:
    """Normalize a node of `sponsorshipsAsMaintainer`.

    Inactive sponsorships get a monthly amount of `-1`,
    unless they are one-time payments and proration is enabled,
    in which case the amount is the tier the payment still covers.

    Parameters:
        raw: The GraphQL node. Must have a tier.
        date_now: The current date, used for proration.
        tiers: Tiers with a positive price, sorted by descending price.
        prorate_onetime: Whether to prorate inactive one-time payments.

    Returns:
        A sponsorship.
    """
    tier = raw["tier"]
    monthly_dollars = tier["monthlyPriceInDollars"]
    if not raw["isActive"]:
        if tiers and tier["isOneTime"] and prorate_onetime:
            monthly_dollars = current_month_tier(date_now, parse_datetime(raw["createdAt"]), tiers, monthly_dollars)
        else:
            monthly_dollars = -1
    return Sponsorship(
        sponsor=Account.from_payload(raw["sponsorEntity"]),
        is_one_time=tier["isOneTime"],
        monthly_dollars=monthly_dollars,
        privacy_level=raw["privacyLevel"],
        tier_name=tier["name"],
        created_at=raw["createdAt"],
    )


def normalize_sponsorships(
    nodes: Iterable[dict[str, Any]],
    *,
    date_now: datetime,
    tiers: list[Tier] | None = None,
    prorate_onetime: bool = False,
) -> list[Sponsorship]:
    """Normalize nodes of `sponsorshipsAsMaintainer`, skipping those without a tier."""
    return [
        normalize_sponsorship(raw, date_now=date_now, tiers=tiers, prorate_onetime=prorate_onetime)
        for raw in nodes
        if raw.get("tier")
    ]


def to_sponsoring_record(raw: dict[str, Any]) -> SponsoringRecord:
    """Normalize a node of `sponsorshipsAsSponsor`."""
    tier = raw["tier"]
    return SponsoringRecord(
        sponsorable=Account.from_payload(raw["sponsorable"], name_fallback=True),
        monthly_dollars=tier["monthlyPriceInDollars"],
        monthly_cents=tier["monthlyPriceInCents"],
        tier_name=tier["name"],
        is_one_time=tier["isOneTime"],
        privacy_level=raw["privacyLevel"],
        created_at=raw["createdAt"],
        is_active=raw["isActive"],
        raw=raw,
    )


def to_sponsoring_records(nodes: Iterable[dict[str, Any]]) -> list[SponsoringRecord]:
    """Normalize nodes of `sponsorshipsAsSponsor`, skipping those without a tier or sponsorable."""
    return [to_sponsoring_record(raw) for raw in nodes if raw.get("tier") and raw.get("sponsorable")]
