"""Pytest fixtures for testing"""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from sponsortally import GitHub


def make_account(login: str, typename: str = "User", **extra: Any) -> dict[str, Any]:
    """GraphQL payload of an account"""
    return {
        "__typename": typename,
        "login": login,
        "name": extra.get("name", login.title()),
        "avatarUrl": f"https://avatars.example.com/{login}",
        "websiteUrl": extra.get("websiteUrl"),
    }


def make_node(
    login: str,
    *,
    dollars: int = 10,
    one_time: bool = False,
    active: bool = True,
    created_at: str = "2024-01-15T10:00:00Z",
    privacy: str = "PUBLIC",
    entity_key: str = "sponsorEntity",
    typename: str = "User",
    tier_name: str | None = None,
) -> dict[str, Any]:
    """Raw sponsorship node as returned by GitHub"""
    return {
        "createdAt": created_at,
        "privacyLevel": privacy,
        "isActive": active,
        "tier": {
            "name": tier_name or f"${dollars} a month",
            "isOneTime": one_time,
            "monthlyPriceInCents": dollars * 100,
            "monthlyPriceInDollars": dollars,
        },
        entity_key: make_account(login, typename),
    }


def make_page(
    account_type: str,
    connection: str,
    nodes: list[dict[str, Any]],
    end_cursor: str | None = None,
) -> dict[str, Any]:
    """GraphQL response body for one page of sponsorships"""
    return {
        "data": {
            account_type: {
                connection: {
                    "totalCount": len(nodes),
                    "pageInfo": {"endCursor": end_cursor, "hasNextPage": end_cursor is not None},
                    "nodes": nodes,
                },
            },
        },
    }


def query_of(request: httpx.Request) -> str:
    """Extract the GraphQL query from a request"""
    return json.loads(request.content)["query"]


@pytest.fixture
def requests() -> list[httpx.Request]:
    """Requests received by the mock transport"""
    return []


@pytest.fixture
def github_factory(requests: list[httpx.Request]) -> Callable[..., GitHub]:
    """Build a GitHub client answering requests with the given handler"""

    def factory(handler: Callable[[httpx.Request], httpx.Response], **kwargs: Any) -> GitHub:
        def recording_handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        kwargs.setdefault("token", "secret")
        return GitHub(transport=httpx.MockTransport(recording_handler), **kwargs)

    return factory
