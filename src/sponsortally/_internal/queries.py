"""GraphQL queries for the GitHub Sponsors API."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from sponsortally._internal.defaults import PAGE_SIZE

if TYPE_CHECKING:
    from sponsortally._internal.models import AccountType, TotalAmountOptions

GRAPHQL_SPONSORSHIPS = """{
  %(type)s(login: "%(login)s") {
    %(connection)s(activeOnly: %(active_only)s, first: %(first)d%(after)s) {
      totalCount
      pageInfo {
        endCursor
        hasNextPage
      }
      nodes {
        createdAt
        privacyLevel
        isActive
        tier {
          name
          isOneTime
          monthlyPriceInCents
          monthlyPriceInDollars
        }
        %(entity)s {
          __typename
          ...on Organization {
            login
            name
            avatarUrl
            websiteUrl
          }
          ...on User {
            login
            name
            avatarUrl
            websiteUrl
          }
        }
      }
    }
  }
}"""

GRAPHQL_TOTAL_AMOUNT = """{
  %(type)s(login: "%(login)s") {
    totalSponsorshipAmountAsSponsorInCents%(parameters)s
  }
}"""


def _sponsorships_query(
    connection: str,
    entity: str,
    login: str,
    account_type: AccountType,
    active_only: bool,  # noqa: FBT001
    cursor: str | None,
) -> str:
    return GRAPHQL_SPONSORSHIPS % {
        "type": account_type,
        "login": login,
        "connection": connection,
        "active_only": "true" if active_only else "false",
        "first": PAGE_SIZE,
        "after": f' after: "{cursor}"' if cursor else "",
        "entity": entity,
    }


def make_sponsors_query(
    login: str,
    account_type: AccountType,
    active_only: bool = True,  # noqa: FBT001,FBT002
    cursor: str | None = None,
) -> str:
    """Build the query listing sponsorships received by an account."""
    return _sponsorships_query("sponsorshipsAsMaintainer", "sponsorEntity", login, account_type, active_only, cursor)


def make_sponsoring_query(
    login: str,
    account_type: AccountType,
    active_only: bool = True,  # noqa: FBT001,FBT002
    cursor: str | None = None,
) -> str:
    """Build the query listing sponsorships made by an account."""
    return _sponsorships_query("sponsorshipsAsSponsor", "sponsorable", login, account_type, active_only, cursor)


def make_sponsoring_total_amount_query(
    login: str,
    account_type: AccountType,
    options: TotalAmountOptions | None = None,
) -> str:
    """Build the query for the lifetime amount an account sponsored, in cents."""
    args = []
    if options is not None:
        if options.since:
            args.append(f"since: {json.dumps(options.since)}")
        if options.until:
            args.append(f"until: {json.dumps(options.until)}")
        if options.sponsorable_logins:
            logins = ", ".join(json.dumps(sponsorable) for sponsorable in options.sponsorable_logins)
            args.append(f"sponsorableLogins: [{logins}]")
    parameters = f"({', '.join(args)})" if args else ""
    return GRAPHQL_TOTAL_AMOUNT % {"type": account_type, "login": login, "parameters": parameters}
