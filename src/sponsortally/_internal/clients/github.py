"""GitHub Sponsors client."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import httpx

from sponsortally._internal.defaults import GITHUB_GRAPHQL_API
from sponsortally._internal.exceptions import (
    ApiError,
    ConfigurationError,
    InsufficientScope,
    MalformedResponse,
    MissingResponse,
    TransportFailure,
)
from sponsortally._internal.logger import logger
from sponsortally._internal.models import TotalAmountOptions, prepare_tiers
from sponsortally._internal.ops.normalize import normalize_sponsorships, to_sponsoring_records
from sponsortally._internal.ops.sponsees import aggregate_sponsees, group_by_sponsorable
from sponsortally._internal.queries import (
    make_sponsoring_query,
    make_sponsoring_total_amount_query,
    make_sponsors_query,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from sponsortally._internal.config import Config
    from sponsortally._internal.models import AccountType, SponsoringRecord, Sponsorship, Tier

    QueryBuilder = Callable[[str, AccountType, bool, "str | None"], str]


def check_params(token: str, login: str, account_type: str) -> None:
    """Validate parameters before sending any request.

    Raises:
        ConfigurationError: When the token or login is missing, or the account type is invalid.
    """
    if not token:
        raise ConfigurationError("GitHub token is required")
    if not login:
        raise ConfigurationError("GitHub login is required")
    if account_type not in ("user", "organization"):
        raise ConfigurationError("GitHub type must be either `user` or `organization`")


class GitHub:
    """GitHub client."""

    def __init__(
        self,
        token: str,
        *,
        endpoint: str = GITHUB_GRAPHQL_API,
        max_concurrency: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize GitHub client.

        Parameters:
            token: A GitHub token. Recommended scopes: `read:user` and `read:org`.
            endpoint: The GraphQL endpoint.
            max_concurrency: Maximum number of concurrent requests when fetching totals. Unlimited by default.
            transport: A custom HTTPX transport, mostly useful in tests.
        """
        self.token = token
        self.endpoint = endpoint
        self.max_concurrency = max_concurrency
        self.http_client = httpx.AsyncClient(
            headers={
                "Authorization": f"bearer {token}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            transport=transport,
        )

    async def __aenter__(self) -> GitHub:
        await self.http_client.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None = None,
        exc_value: BaseException | None = None,
        traceback: TracebackType | None = None,
    ) -> None:
        await self.http_client.__aexit__(exc_type, exc_value, traceback)

    async def execute(self, query: str) -> dict[str, Any]:
        """Send a GraphQL query and return the response body.

        Raises:
            TransportFailure: When the request fails or the server answers with an HTTP error.
            MissingResponse: When the server answers without a body.
            InsufficientScope: When the token lacks the required scopes.
            ApiError: When the response contains errors.
        """
        try:
            response = await self.http_client.post(self.endpoint, json={"query": query})
            response.raise_for_status()
        except httpx.HTTPError as error:
            raise TransportFailure(f"Request to {self.endpoint} failed: {error}") from error

        try:
            data = response.json() if response.content else None
        except ValueError as error:
            raise TransportFailure(f"Invalid JSON response from {self.endpoint}") from error
        if not data:
            raise MissingResponse(f"Got no response on requesting {self.endpoint}")
        errors = data.get("errors")
        if errors and errors[0].get("type") == "INSUFFICIENT_SCOPES":
            raise InsufficientScope("Token is missing the `read:user` and/or `read:org` scopes")
        if errors:
            raise ApiError(errors)
        return data

    async def paginate(
        self,
        login: str,
        account_type: AccountType,
        connection: str,
        build_query: QueryBuilder,
        *,
        active_only: bool = True,
    ) -> list[dict[str, Any]]:
        """Fetch all the nodes of a sponsorships connection, following cursors.

        Parameters:
            login: The account login.
            account_type: The account type.
            connection: The connection name, `sponsorshipsAsMaintainer` or `sponsorshipsAsSponsor`.
            build_query: Function building the query for a given cursor.
            active_only: Whether to fetch only active sponsorships.

        Raises:
            MalformedResponse: When the connection is missing from the response.

        Returns:
            The nodes of every page, in order.
        """
        nodes: list[dict[str, Any]] = []
        cursor = None
        while True:
            data = await self.execute(build_query(login, account_type, active_only, cursor))
            page = ((data.get("data") or {}).get(account_type) or {}).get(connection)
            if not page:
                raise MalformedResponse(f"Invalid GitHub response: `{connection}` is missing")
            nodes.extend(page.get("nodes") or ())
            logger.debug(f"Fetched {len(nodes)} {connection} nodes for @{login}")

            page_info = page.get("pageInfo") or {}
            cursor = page_info.get("endCursor") if page_info.get("hasNextPage") else None
            if not cursor:
                break
        return nodes

    async def get_sponsors(
        self,
        login: str,
        account_type: AccountType = "user",
        *,
        tiers: list[Tier] | None = None,
        include_past_sponsors: bool = False,
        prorate_onetime: bool = False,
        date_now: datetime | None = None,
    ) -> list[Sponsorship]:
        """Get the sponsorships an account receives.

        Parameters:
            login: The sponsored account.
            account_type: The account type.
            tiers: Tiers used to prorate one-time payments.
            include_past_sponsors: Whether to include inactive sponsorships.
            prorate_onetime: Whether to prorate inactive one-time payments over tiers.
            date_now: The current date. Defaults to now.

        Returns:
            Sponsorships.
        """
        check_params(self.token, login, account_type)
        nodes = await self.paginate(
            login,
            account_type,
            "sponsorshipsAsMaintainer",
            make_sponsors_query,
            active_only=not include_past_sponsors,
        )
        sponsorships = normalize_sponsorships(
            nodes,
            date_now=date_now or datetime.now(timezone.utc),
            tiers=prepare_tiers(tiers),
            prorate_onetime=prorate_onetime,
        )
        logger.info(f"Found {len(sponsorships)} sponsorships for @{login}")
        return sponsorships

    async def get_sponsoring(
        self,
        login: str,
        account_type: AccountType = "user",
        *,
        active_only: bool = True,
    ) -> list[SponsoringRecord]:
        """Get the sponsorships an account makes, one record per sponsorship."""
        check_params(self.token, login, account_type)
        nodes = await self.paginate(
            login,
            account_type,
            "sponsorshipsAsSponsor",
            make_sponsoring_query,
            active_only=active_only,
        )
        return to_sponsoring_records(nodes)

    async def get_total_sponsored_amount(
        self,
        login: str,
        account_type: AccountType = "user",
        options: TotalAmountOptions | None = None,
    ) -> int:
        """Get the amount an account sponsored, in cents.

        Raises:
            MalformedResponse: When the amount is missing from the response.
        """
        check_params(self.token, login, account_type)
        data = await self.execute(make_sponsoring_total_amount_query(login, account_type, options))
        total = ((data.get("data") or {}).get(account_type) or {}).get("totalSponsorshipAmountAsSponsorInCents")
        if not isinstance(total, int) or isinstance(total, bool):
            raise MalformedResponse("Invalid GitHub response: `totalSponsorshipAmountAsSponsorInCents` is missing")
        return total

    async def get_total_cents_by_sponsorable(
        self,
        login: str,
        account_type: AccountType,
        sponsorable_logins: list[str],
    ) -> dict[str, int]:
        """Get the amount an account sponsored to each given sponsorable, concurrently."""
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None

        async def _total(sponsorable: str) -> tuple[str, int]:
            options = TotalAmountOptions(sponsorable_logins=[sponsorable])
            if semaphore is None:
                return sponsorable, await self.get_total_sponsored_amount(login, account_type, options)
            async with semaphore:
                return sponsorable, await self.get_total_sponsored_amount(login, account_type, options)

        tasks = [asyncio.ensure_future(_total(sponsorable)) for sponsorable in sponsorable_logins]
        try:
            totals = await asyncio.gather(*tasks)
        except BaseException:
            # Don't leave requests running on a client about to be closed.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        for sponsorable, total in totals:
            logger.debug(f"@{login} sponsored @{sponsorable} for {total} cents in total")
        return dict(totals)

    async def get_sponsees(self, login: str, account_type: AccountType = "user") -> list[Sponsorship]:
        """Get the accounts an account sponsors, ranked by lifetime amount.

        The whole history is fetched, active or not,
        and folded into one sponsorship per sponsored account.
        """
        records = await self.get_sponsoring(login, account_type, active_only=False)
        groups = group_by_sponsorable(records)
        totals = await self.get_total_cents_by_sponsorable(login, account_type, list(groups))
        sponsees = aggregate_sponsees(groups, totals)
        logger.info(f"Found {len(sponsees)} accounts sponsored by @{login}")
        return sponsees


async def fetch_github_sponsors(
    token: str,
    login: str,
    account_type: AccountType = "user",
    *,
    tiers: list[Tier] | None = None,
    include_past_sponsors: bool = False,
    prorate_onetime: bool = False,
    endpoint: str = GITHUB_GRAPHQL_API,
) -> list[Sponsorship]:
    """Fetch the sponsorships an account receives."""
    check_params(token, login, account_type)
    async with GitHub(token, endpoint=endpoint) as github:
        return await github.get_sponsors(
            login,
            account_type,
            tiers=tiers,
            include_past_sponsors=include_past_sponsors,
            prorate_onetime=prorate_onetime,
        )


async def fetch_github_sponsoring(
    token: str,
    login: str,
    account_type: AccountType = "user",
    *,
    active_only: bool = True,
    endpoint: str = GITHUB_GRAPHQL_API,
) -> list[SponsoringRecord]:
    """Fetch the sponsorships an account makes."""
    check_params(token, login, account_type)
    async with GitHub(token, endpoint=endpoint) as github:
        return await github.get_sponsoring(login, account_type, active_only=active_only)


async def fetch_github_sponsees(
    token: str,
    login: str,
    account_type: AccountType = "user",
    *,
    max_concurrency: int | None = None,
    endpoint: str = GITHUB_GRAPHQL_API,
) -> list[Sponsorship]:
    """Fetch the accounts an account sponsors, one sponsorship each."""
    check_params(token, login, account_type)
    async with GitHub(token, endpoint=endpoint, max_concurrency=max_concurrency) as github:
        return await github.get_sponsees(login, account_type)


async def fetch_github_total_sponsored_amount(
    token: str,
    login: str,
    account_type: AccountType = "user",
    options: TotalAmountOptions | None = None,
    *,
    endpoint: str = GITHUB_GRAPHQL_API,
) -> int:
    """Fetch the amount an account sponsored, in cents."""
    check_params(token, login, account_type)
    async with GitHub(token, endpoint=endpoint) as github:
        return await github.get_total_sponsored_amount(login, account_type, options)


async def fetch_sponsors(config: Config, *, token: str | None = None) -> list[Sponsorship]:
    """Fetch sponsorships according to configuration.

    In `sponsees` mode, fetch the accounts the configured account sponsors,
    otherwise the accounts sponsoring it.

    Parameters:
        config: The configuration.
        token: A GitHub token, taking precedence over `github.token-command`.
    """
    mode = config.sponsors_mode or "sponsors"
    if mode not in ("sponsors", "sponsees"):
        raise ConfigurationError("Mode must be either `sponsors` or `sponsees`")
    token = token or config.github_token or ""
    login = config.github_login or ""
    account_type = config.github_type or "user"
    endpoint = config.github_endpoint or GITHUB_GRAPHQL_API
    if mode == "sponsees":
        return await fetch_github_sponsees(
            token,  # type: ignore[arg-type]
            login,  # type: ignore[arg-type]
            account_type,  # type: ignore[arg-type]
            max_concurrency=config.github_max_concurrency or None,  # type: ignore[arg-type]
            endpoint=endpoint,  # type: ignore[arg-type]
        )
    return await fetch_github_sponsors(
        token,  # type: ignore[arg-type]
        login,  # type: ignore[arg-type]
        account_type,  # type: ignore[arg-type]
        tiers=config.sponsors_tiers or None,  # type: ignore[arg-type]
        include_past_sponsors=bool(config.sponsors_include_past_sponsors),
        prorate_onetime=bool(config.sponsors_prorate_onetime),
        endpoint=endpoint,  # type: ignore[arg-type]
    )
