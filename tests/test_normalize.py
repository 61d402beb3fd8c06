"""Tests for the normalization of raw sponsorship nodes"""

from datetime import datetime, timezone

import pytest

from sponsortally import (
    MalformedResponse,
    Organization,
    Tier,
    User,
    normalize_sponsorship,
    prepare_tiers,
    to_sponsoring_record,
)
from sponsortally._internal.ops.normalize import normalize_sponsorships, to_sponsoring_records
from tests.conftest import make_node

NOW = datetime(2024, 7, 15, tzinfo=timezone.utc)
TIERS = prepare_tiers([Tier(monthly_dollars=5), Tier(monthly_dollars=50)])


def test_active_sponsorship():
    raw = make_node("octocat", dollars=25, created_at="2023-03-01T08:00:00Z", privacy="PRIVATE")
    raw["sponsorEntity"]["websiteUrl"] = "octocat.dev"
    sponsorship = normalize_sponsorship(raw, date_now=NOW)

    assert isinstance(sponsorship.sponsor, User)
    assert sponsorship.sponsor.type == "User"
    assert sponsorship.sponsor.login == "octocat"
    assert sponsorship.sponsor.link_url == "https://github.com/octocat"
    assert sponsorship.sponsor.website_url == "https://octocat.dev"
    assert sponsorship.monthly_dollars == 25
    assert sponsorship.tier_name == "$25 a month"
    assert sponsorship.created_at == "2023-03-01T08:00:00Z"
    assert sponsorship.private
    assert not sponsorship.is_one_time


def test_organization_sponsor():
    sponsorship = normalize_sponsorship(make_node("github", typename="Organization"), date_now=NOW)
    assert isinstance(sponsorship.sponsor, Organization)
    assert sponsorship.sponsor.org


def test_unknown_account_type():
    with pytest.raises(MalformedResponse):
        normalize_sponsorship(make_node("ghost", typename="Bot"), date_now=NOW)


def test_inactive_recurring_sponsorship_has_no_amount():
    raw = make_node("octocat", dollars=50, active=False)
    assert normalize_sponsorship(raw, date_now=NOW, tiers=TIERS, prorate_onetime=True).monthly_dollars == -1


def test_inactive_one_time_payment_without_proration():
    raw = make_node("octocat", dollars=50, one_time=True, active=False, created_at="2024-07-01T00:00:00Z")
    assert normalize_sponsorship(raw, date_now=NOW, tiers=TIERS).monthly_dollars == -1


def test_inactive_one_time_payment_without_tiers():
    raw = make_node("octocat", dollars=50, one_time=True, active=False, created_at="2024-07-01T00:00:00Z")
    assert normalize_sponsorship(raw, date_now=NOW, tiers=[], prorate_onetime=True).monthly_dollars == -1


def test_inactive_one_time_payment_is_prorated():
    """$60 once, 1 month ago: 1 month at $50, then 2 months at $5"""
    raw = make_node("octocat", dollars=60, one_time=True, active=False, created_at="2024-06-20T00:00:00Z")
    sponsorship = normalize_sponsorship(raw, date_now=NOW, tiers=TIERS, prorate_onetime=True)
    assert sponsorship.monthly_dollars == 5
    assert sponsorship.is_one_time


def test_active_one_time_payment_is_not_prorated():
    raw = make_node("octocat", dollars=60, one_time=True, created_at="2020-01-01T00:00:00Z")
    assert normalize_sponsorship(raw, date_now=NOW, tiers=TIERS, prorate_onetime=True).monthly_dollars == 60


def test_nodes_without_tier_are_dropped():
    nodes = [make_node("a"), make_node("b"), make_node("c")]
    nodes[1]["tier"] = None
    sponsorships = normalize_sponsorships(nodes, date_now=NOW)
    assert [sponsorship.sponsor.login for sponsorship in sponsorships] == ["a", "c"]


def test_normalization_is_idempotent():
    raw = make_node("octocat", dollars=60, one_time=True, active=False, created_at="2024-06-20T00:00:00Z")
    first = normalize_sponsorship(raw, date_now=NOW, tiers=TIERS, prorate_onetime=True)
    second = normalize_sponsorship(raw, date_now=NOW, tiers=TIERS, prorate_onetime=True)
    assert first == second
    assert to_sponsoring_record(make_node("x", entity_key="sponsorable")) == to_sponsoring_record(
        make_node("x", entity_key="sponsorable"),
    )


def test_sponsoring_record():
    raw = make_node("squidfunk", dollars=15, entity_key="sponsorable", active=False)
    raw["sponsorable"]["name"] = None
    record = to_sponsoring_record(raw)
    assert record.sponsorable.login == "squidfunk"
    assert record.sponsorable.name == "squidfunk"
    assert record.monthly_dollars == 15
    assert record.monthly_cents == 1500
    assert not record.is_active
    assert record.raw is raw


def test_sponsoring_nodes_without_tier_or_sponsorable_are_dropped():
    nodes = [make_node(login, entity_key="sponsorable") for login in ("a", "b", "c", "d")]
    nodes[1]["tier"] = None
    del nodes[2]["sponsorable"]
    records = to_sponsoring_records(nodes)
    assert [record.sponsorable.login for record in records] == ["a", "d"]
