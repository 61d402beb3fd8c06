"""Fold the sponsorships made by an account into one entry per sponsorable."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from sponsortally._internal.models import SponsoringSummary, Sponsorship, parse_datetime

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from sponsortally._internal.models import SponsoringRecord


def group_by_sponsorable(records: Iterable[SponsoringRecord]) -> dict[str, list[SponsoringRecord]]:
    """Group records by sponsorable login, in order of first appearance."""
    groups: dict[str, list[SponsoringRecord]] = {}
    for record in records:
        groups.setdefault(record.sponsorable.login, []).append(record)
    return groups


def summarize_records(records: list[SponsoringRecord]) -> SponsoringSummary:
    """Summarize the records of a single sponsorable.

    Parameters:
        records: A non-empty list of records.

    Returns:
        The latest record, the earliest creation date,
        whether every sponsorship was a one-time payment, and all raw nodes.
    """
    first, *rest = records
    latest = first
    first_created_at = first.created_at
    is_one_time = first.is_one_time
    raws = [first.raw]
    for record in rest:
        raws.append(record.raw)
        if parse_datetime(record.created_at) > parse_datetime(latest.created_at):
            latest = record
        # ISO 8601 timestamps sort lexically.
        if record.created_at < first_created_at:
            first_created_at = record.created_at
        is_one_time = is_one_time and record.is_one_time
    return SponsoringSummary(latest=latest, first_created_at=first_created_at, is_one_time=is_one_time, raws=raws)


def aggregate_sponsees(
    groups: Mapping[str, list[SponsoringRecord]],
    total_cents: Mapping[str, int],
) -> list[Sponsorship]:
    """Build one sponsorship per sponsorable, ranked by lifetime amount.

    Parameters:
        groups: Records grouped by sponsorable login.
        total_cents: Lifetime amount sponsored to each login, in cents.

    Returns:
        Sponsorships whose monthly amount is the lifetime amount, in dollars.
    """
    sponsorships = []
    for login, records in groups.items():
        summary = summarize_records(records)
        total = total_cents.get(login, 0)
        latest = summary.latest
        sponsorships.append(
            Sponsorship(
                sponsor=replace(latest.sponsorable, social_logins={"github": login}),
                is_one_time=summary.is_one_time,
                monthly_dollars=total / 100,
                privacy_level=latest.privacy_level,
                tier_name=latest.tier_name,
                created_at=summary.first_created_at,
                raw={"records": summary.raws, "totalSponsoredCents": total},
            ),
        )
    return sponsorships
