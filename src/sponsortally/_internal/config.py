from __future__ import annotations

import subprocess
import sys
from dataclasses import dataclass, fields
from dataclasses import field as dataclass_field
from typing import TYPE_CHECKING, Any, overload

from sponsortally._internal.defaults import DEFAULT_CONF_PATH
from sponsortally._internal.models import Tier

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

# YORE: EOL 3.10: Replace block with line 2.
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


class Unset:
    """A sentinel value for unset configuration options."""

    def __init__(self, key: str, transform: str | None = None) -> None:
        self.key = key
        self.name = key.replace("-", "_").replace(".", "_")
        self.transform = transform

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"<Unset({self.name!r})>"

    def __str__(self) -> str:
        # The string representation is used in the CLI, to show the default values.
        return f"`{self.key}` config-value"


def config_field(key: str, transform: str | None = None) -> Unset:
    """Get a dataclass field with a TOML key."""
    return dataclass_field(default=Unset(key, transform=transform))


@dataclass(kw_only=True)
class Config:
    """Configuration for sponsortally."""

    # GitHub fields.
    github_token_command: str | Unset = config_field("github.token-command")
    github_login: str | Unset = config_field("github.login")
    github_type: str | Unset = config_field("github.type")
    github_endpoint: str | Unset = config_field("github.endpoint")
    github_max_concurrency: int | Unset = config_field("github.max-concurrency")

    # Sponsors fields.
    sponsors_mode: str | Unset = config_field("sponsors.mode")
    sponsors_tiers: list[Tier] | Unset = config_field("sponsors.tiers", transform="_parse_tiers")
    sponsors_include_past_sponsors: bool | Unset = config_field("sponsors.include-past-sponsors")
    sponsors_prorate_onetime: bool | Unset = config_field("sponsors.prorate-onetime")

    # Report fields.
    report_sponsors_file: str | Unset = config_field("report.sponsors-file")
    report_numbers_file: str | Unset = config_field("report.numbers-file")
    report_exclude_private: bool | Unset = config_field("report.exclude-private")

    @property
    def github_token(self) -> str | Unset:
        """Get the GitHub token."""
        if isinstance(self.github_token_command, Unset):
            return self.github_token_command
        return subprocess.getoutput(self.github_token_command)  # noqa: S605

    @overload
    @staticmethod
    def _parse_tiers(tiers: Unset) -> Unset: ...

    @overload
    @staticmethod
    def _parse_tiers(tiers: list[dict[str, Any]]) -> list[Tier]: ...

    @staticmethod
    def _parse_tiers(tiers: list[dict[str, Any]] | Unset) -> list[Tier] | Unset:
        if isinstance(tiers, Unset):
            return tiers
        return [Tier.from_dict(tier) for tier in tiers]

    @classmethod
    def _get(cls, data: dict, *keys: str, default: Unset, transform: Callable[[Any], Any] | None = None) -> Any:
        """Get a value from a nested dictionary."""
        for key in keys:
            if key not in data:
                return default
            data = data[key]
        if transform:
            return transform(data)
        return data

    @classmethod
    def from_file(cls, path: str | Path) -> Config:
        """Load configuration from a file."""
        with open(path, "rb") as file:
            data = tomllib.load(file)
        return cls(
            **{
                field.name: cls._get(
                    data,
                    *field.default.key.split("."),  # type: ignore[union-attr]
                    default=field.default,  # type: ignore[arg-type]
                    transform=getattr(cls, field.default.transform or "", None),  # type: ignore[union-attr]
                )
                for field in fields(cls)
            },
        )

    @classmethod
    def from_default_location(cls) -> Config:
        """Load configuration from the default location."""
        if DEFAULT_CONF_PATH.exists():
            return cls.from_file(DEFAULT_CONF_PATH)
        return cls()
