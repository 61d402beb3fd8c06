"""Exceptions raised while fetching sponsorships."""

from __future__ import annotations

import json
from typing import Any


class SponsorshipError(Exception):
    """Base exception for sponsorship fetching errors."""


class ConfigurationError(SponsorshipError):
    """Missing or invalid token, login or account type."""


class TransportFailure(SponsorshipError):
    """The GraphQL endpoint could not be reached or answered with an HTTP error."""


class MissingResponse(TransportFailure):
    """The GraphQL endpoint answered without a body."""


class InsufficientScope(SponsorshipError):
    """The token is missing the required read scopes."""


class ApiError(SponsorshipError):
    """The GraphQL API returned errors."""

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        self.errors = errors
        super().__init__(f"GitHub API error:\n{json.dumps(errors, indent=2)}")


class MalformedResponse(SponsorshipError):
    """An expected field is absent from an otherwise successful response."""
