"""sponsortally package.

Fetch and tally GitHub sponsorships.
"""

from __future__ import annotations

from sponsortally._internal.cli import main
from sponsortally._internal.clients.github import (
    GitHub,
    fetch_github_sponsees,
    fetch_github_sponsoring,
    fetch_github_sponsors,
    fetch_github_total_sponsored_amount,
    fetch_sponsors,
)
from sponsortally._internal.config import Config
from sponsortally._internal.exceptions import (
    ApiError,
    ConfigurationError,
    InsufficientScope,
    MalformedResponse,
    MissingResponse,
    SponsorshipError,
    TransportFailure,
)
from sponsortally._internal.models import (
    Account,
    AccountType,
    Organization,
    SponsoringRecord,
    SponsoringSummary,
    Sponsorship,
    Tier,
    TotalAmountOptions,
    User,
    prepare_tiers,
)
from sponsortally._internal.ops.normalize import normalize_sponsorship, to_sponsoring_record
from sponsortally._internal.ops.prorate import current_month_tier, month_difference
from sponsortally._internal.ops.report import update_numbers_file, update_sponsors_file
from sponsortally._internal.ops.sponsees import aggregate_sponsees, group_by_sponsorable, summarize_records
from sponsortally._internal.queries import (
    make_sponsoring_query,
    make_sponsoring_total_amount_query,
    make_sponsors_query,
)

__all__: list[str] = [
    "Account",
    "AccountType",
    "ApiError",
    "Config",
    "ConfigurationError",
    "GitHub",
    "InsufficientScope",
    "MalformedResponse",
    "MissingResponse",
    "Organization",
    "SponsoringRecord",
    "SponsoringSummary",
    "Sponsorship",
    "SponsorshipError",
    "Tier",
    "TotalAmountOptions",
    "TransportFailure",
    "User",
    "aggregate_sponsees",
    "current_month_tier",
    "fetch_github_sponsees",
    "fetch_github_sponsoring",
    "fetch_github_sponsors",
    "fetch_github_total_sponsored_amount",
    "fetch_sponsors",
    "group_by_sponsorable",
    "main",
    "make_sponsoring_query",
    "make_sponsoring_total_amount_query",
    "make_sponsors_query",
    "month_difference",
    "normalize_sponsorship",
    "prepare_tiers",
    "summarize_records",
    "to_sponsoring_record",
    "update_numbers_file",
    "update_sponsors_file",
]
