"""Sponsorship models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar, Literal

from sponsortally._internal.exceptions import MalformedResponse
from sponsortally._internal.utils import normalize_url

AccountType = Literal["user", "organization"]
"""The kind of account sponsorships are fetched for."""

AccountKind = Literal["User", "Organization"]
PrivacyLevel = Literal["PUBLIC", "PRIVATE"]


def parse_datetime(value: str) -> datetime:
    """Parse an ISO 8601 timestamp as returned by GitHub."""
    # `fromisoformat` only understands the `Z` suffix starting with Python 3.11.
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class Account:
    """A GitHub account, sponsor or sponsorable."""

    type: ClassVar[AccountKind]

    login: str
    name: str | None
    avatar_url: str
    website_url: str | None = None
    social_logins: dict[str, str] | None = field(default=None, compare=False)
    """Logins on other platforms, by platform name."""

    @property
    def link_url(self) -> str:
        """URL of the account's GitHub profile."""
        return f"https://github.com/{self.login}"

    @property
    def org(self) -> bool:
        """Whether the account is an organization."""
        return self.type == "Organization"

    @staticmethod
    def from_payload(payload: dict[str, Any], *, name_fallback: bool = False) -> Account:
        """Build a user or organization from a `__typename`-tagged GraphQL payload."""
        typename = payload.get("__typename")
        try:
            cls = _ACCOUNT_TYPES[typename]  # type: ignore[index]
        except KeyError as error:
            raise MalformedResponse(f"Invalid GitHub response: unknown account type {typename!r}") from error
        name = payload.get("name")
        if name_fallback:
            name = name or payload["login"]
        return cls(
            login=payload["login"],
            name=name,
            avatar_url=payload["avatarUrl"],
            website_url=normalize_url(payload.get("websiteUrl")),
        )

    def as_dict(self) -> dict:
        """Return account as a dictionary."""
        data = {
            "type": self.type,
            "login": self.login,
            "name": self.name,
            "avatarUrl": self.avatar_url,
            "websiteUrl": self.website_url,
            "linkUrl": self.link_url,
        }
        if self.social_logins:
            data["socialLogins"] = self.social_logins
        return data


@dataclass(frozen=True)
class User(Account):
    """A GitHub user."""

    type: ClassVar[AccountKind] = "User"


@dataclass(frozen=True)
class Organization(Account):
    """A GitHub organization."""

    type: ClassVar[AccountKind] = "Organization"


_ACCOUNT_TYPES: dict[str, type[Account]] = {"User": User, "Organization": Organization}


@dataclass(frozen=True)
class Tier:
    """A priced sponsorship tier."""

    monthly_dollars: int | None
    name: str = ""
    is_one_time: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Tier:
        """Build a tier from a configuration table."""
        return cls(
            monthly_dollars=data.get("monthly-dollars", data.get("monthly_dollars")),
            name=data.get("name", ""),
            is_one_time=data.get("is-one-time", data.get("is_one_time", False)),
        )


def prepare_tiers(tiers: list[Tier] | None) -> list[Tier]:
    """Keep tiers with a positive price, most expensive first."""
    return sorted(
        (tier for tier in tiers or () if tier.monthly_dollars and tier.monthly_dollars > 0),
        key=lambda tier: tier.monthly_dollars,  # type: ignore[arg-type,return-value]
        reverse=True,
    )


@dataclass(frozen=True)
class Sponsorship:
    """A sponsorship, normalized for reporting."""

    sponsor: Account
    is_one_time: bool
    monthly_dollars: float
    """Current monthly amount, `-1` when inactive. In sponsees mode, the lifetime amount."""
    privacy_level: PrivacyLevel | None
    tier_name: str
    created_at: str
    raw: dict[str, Any] | None = field(default=None, compare=False, repr=False)

    @property
    def private(self) -> bool:
        """Whether the sponsorship is private."""
        return (self.privacy_level or "").upper() == "PRIVATE"

    @property
    def created(self) -> datetime:
        """Creation date."""
        return parse_datetime(self.created_at)

    def as_dict(self) -> dict:
        """Return sponsorship as a dictionary."""
        return {
            "sponsor": self.sponsor.as_dict(),
            "isOneTime": self.is_one_time,
            "monthlyDollars": self.monthly_dollars,
            "privacyLevel": self.privacy_level,
            "tierName": self.tier_name,
            "createdAt": self.created_at,
        }


@dataclass(frozen=True)
class SponsoringRecord:
    """One sponsorship made by the account (sponsees mode)."""

    sponsorable: Account
    monthly_dollars: int
    monthly_cents: int
    tier_name: str
    is_one_time: bool
    privacy_level: PrivacyLevel | None
    created_at: str
    is_active: bool
    raw: dict[str, Any] = field(compare=False, repr=False)


@dataclass(frozen=True)
class SponsoringSummary:
    """All the sponsorships made to a single sponsorable, folded together."""

    latest: SponsoringRecord
    first_created_at: str
    is_one_time: bool
    raws: list[dict[str, Any]]


@dataclass(frozen=True)
class TotalAmountOptions:
    """Filters for the lifetime sponsored amount."""

    since: str | None = None
    until: str | None = None
    sponsorable_logins: list[str] = field(default_factory=list)
