"""Module that contains the command line application."""

# Why does this file exist, and why not put this in `__main__`?
#
# You might be tempted to import things from `__main__` later,
# but that will cause problems: the code will get executed twice:
#
# - When you run `python -m sponsortally` python will execute
#   `__main__.py` as a script. That means there won't be any
#   `sponsortally.__main__` in `sys.modules`.
# - When you import `__main__` it will get executed again (as a module) because
#   there's no `sponsortally.__main__` in `sys.modules`.

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass, field, replace
from functools import wraps
from inspect import cleandoc
from pathlib import Path
from typing import Annotated as An
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Literal

import cappa
from rich.console import Console
from rich.table import Table
from typing_extensions import Doc

from sponsortally._internal import debug
from sponsortally._internal.clients.github import fetch_github_total_sponsored_amount, fetch_sponsors
from sponsortally._internal.config import Config
from sponsortally._internal.defaults import GITHUB_GRAPHQL_API
from sponsortally._internal.exceptions import SponsorshipError
from sponsortally._internal.logger import configure_logging, logger
from sponsortally._internal.models import TotalAmountOptions
from sponsortally._internal.ops.report import update_numbers_file, update_sponsors_file

if TYPE_CHECKING:
    from sponsortally._internal.models import Sponsorship

_GROUP_GLOBAL = (15, "Global options")
_GROUP_SUBCOMMANDS = (100, "Subcommands")


def from_config(attr_name: str) -> Any:
    config = CommandMain._load_config()
    return getattr(config, attr_name)


@dataclass(frozen=True)
class FromConfig(cappa.ValueFrom):
    conf_name: str

    def __init__(self, attr_name: str, conf_name: str) -> None:
        super().__init__(from_config, attr_name=attr_name)
        object.__setattr__(self, "conf_name", conf_name)

    def __str__(self) -> str:
        return f"configuration value `{self.conf_name}`"


def print_sponsorships(sponsorships: list[Sponsorship], *, title: str, lifetime: bool = False) -> None:
    """Print sponsorships in a table."""
    table = Table(title=title)
    table.add_column("Account", style="underline", no_wrap=True)
    table.add_column("Type", no_wrap=True)
    table.add_column("Tier")
    table.add_column("Total" if lifetime else "Monthly", justify="right", no_wrap=True)
    table.add_column("Since", no_wrap=True)
    table.add_column("Private", justify="center", no_wrap=True)

    for sponsorship in sorted(sponsorships, key=lambda sponsorship: sponsorship.monthly_dollars, reverse=True):
        sponsor = sponsorship.sponsor
        amount = "-" if sponsorship.monthly_dollars < 0 else f"${sponsorship.monthly_dollars:g}"
        if sponsorship.is_one_time:
            amount += " (one-time)"
        table.add_row(
            f"[link={sponsor.link_url}]{sponsor.login}[/link]",
            sponsor.type,
            sponsorship.tier_name,
            amount,
            sponsorship.created.date().isoformat(),
            "🔒" if sponsorship.private else "",
        )

    Console().print(table)


@dataclass(kw_only=True)
class _GitHubAccountOptions:
    github_token: An[
        str,
        cappa.Arg(
            short=False,
            long=True,
            default=cappa.Env("GITHUB_TOKEN") | FromConfig("github_token", "github.token-command"),
        ),
        Doc("""A GitHub token. Recommended scopes: `read:user` and `read:org`."""),
    ]
    login: An[
        str,
        cappa.Arg(short="-l", long=True, default=FromConfig("github_login", "github.login")),
        Doc("""The GitHub account to fetch sponsorships for."""),
    ]
    account_type: An[
        str,
        cappa.Arg(short="-t", long="--type", default=FromConfig("github_type", "github.type")),
        Doc("""The account type, `user` or `organization`. Defaults to `user`."""),
    ]

    @property
    def endpoint(self) -> str:
        return from_config("github_endpoint") or GITHUB_GRAPHQL_API

    @property
    def type(self) -> Literal["user", "organization"]:
        return self.account_type or "user"  # type: ignore[return-value]


# ============================================================================ #
# List                                                                         #
# ============================================================================ #
@cappa.command(
    name="list",
    help="List sponsorships.",
    description=cleandoc(
        """
        Fetch sponsorships from GitHub Sponsors and print them.

        In `sponsors` mode, list the accounts sponsoring the given account,
        with their current monthly amount.
        In `sponsees` mode, list the accounts the given account sponsors,
        with the amount sponsored to each of them over time.

        *Example*

        ```bash
        sponsortally list -l pawamoy -m sponsors --include-past-sponsors --prorate-onetime
        ```
        """,
    ),
)
@dataclass(kw_only=True)
class CommandList(_GitHubAccountOptions):
    """Command to list sponsorships."""

    mode: An[
        str,
        cappa.Arg(short="-m", long=True, default=FromConfig("sponsors_mode", "sponsors.mode")),
        Doc("""Either `sponsors` (incoming) or `sponsees` (outgoing). Defaults to `sponsors`."""),
    ]
    include_past_sponsors: An[
        bool,
        cappa.Arg(short=False, long=True),
        Doc("""Include inactive sponsorships. Also enabled by `sponsors.include-past-sponsors`."""),
    ] = False
    prorate_onetime: An[
        bool,
        cappa.Arg(short=False, long=True),
        Doc("""Prorate past one-time payments over tiers. Also enabled by `sponsors.prorate-onetime`."""),
    ] = False
    public: An[
        bool,
        cappa.Arg(short=False, long=True),
        Doc("""Only show and write public sponsorships."""),
    ] = False
    sponsors_file: An[
        str,
        cappa.Arg(short="-o", long=True, default=FromConfig("report_sponsors_file", "report.sponsors-file")),
        Doc("""Write sponsorships as JSON to this file."""),
    ]
    numbers_file: An[
        str,
        cappa.Arg(short="-n", long=True, default=FromConfig("report_numbers_file", "report.numbers-file")),
        Doc("""Write sponsorship numbers as JSON to this file."""),
    ]

    def __call__(self) -> int:
        mode = self.mode or "sponsors"
        config = replace(
            CommandMain._load_config(),
            github_login=self.login,
            github_type=self.type,
            github_endpoint=self.endpoint,
            sponsors_mode=mode,
            sponsors_include_past_sponsors=self.include_past_sponsors
            or bool(from_config("sponsors_include_past_sponsors")),
            sponsors_prorate_onetime=self.prorate_onetime or bool(from_config("sponsors_prorate_onetime")),
        )
        try:
            sponsorships = asyncio.run(fetch_sponsors(config, token=self.github_token))
        except SponsorshipError as error:
            logger.error(str(error))
            return 1

        exclude_private = self.public or bool(from_config("report_exclude_private"))
        if self.public:
            sponsorships = [sponsorship for sponsorship in sponsorships if not sponsorship.private]
        if self.sponsors_file:
            update_sponsors_file(sponsorships, Path(self.sponsors_file), exclude_private=exclude_private)
        if self.numbers_file:
            update_numbers_file(sponsorships, Path(self.numbers_file))
        title = f"Accounts sponsored by @{self.login}" if mode == "sponsees" else f"Sponsors of @{self.login}"
        print_sponsorships(sponsorships, title=title, lifetime=mode == "sponsees")
        return 0


# ============================================================================ #
# Total                                                                        #
# ============================================================================ #
@cappa.command(
    name="total",
    help="Show the lifetime amount sponsored.",
    description=cleandoc(
        """
        Print the amount the given account sponsored over time, in dollars.

        *Example*

        ```bash
        sponsortally total -l pawamoy --since 2024-01-01T00:00:00Z -s mkdocstrings -s squidfunk
        ```
        """,
    ),
)
@dataclass(kw_only=True)
class CommandTotal(_GitHubAccountOptions):
    """Command to show the lifetime amount sponsored."""

    since: An[
        str | None,
        cappa.Arg(short=False, long=True),
        Doc("""Only count sponsorships made since this date (ISO 8601)."""),
    ] = None
    until: An[
        str | None,
        cappa.Arg(short=False, long=True),
        Doc("""Only count sponsorships made until this date (ISO 8601)."""),
    ] = None
    sponsorables: An[
        list[str],
        cappa.Arg(short="-s", long="--sponsorable", action=cappa.ArgAction.append),
        Doc("""Only count sponsorships to these accounts."""),
    ] = field(default_factory=list)

    def __call__(self) -> int:
        options = TotalAmountOptions(since=self.since, until=self.until, sponsorable_logins=self.sponsorables)
        try:
            total = asyncio.run(
                fetch_github_total_sponsored_amount(
                    self.github_token,
                    self.login,
                    self.type,
                    options,
                    endpoint=self.endpoint,
                ),
            )
        except SponsorshipError as error:
            logger.error(str(error))
            return 1
        print(f"${total / 100:.2f}")
        return 0


# ============================================================================ #
# Main                                                                         #
# ============================================================================ #
@cappa.command(
    name="sponsortally",
    help="Fetch and tally GitHub sponsorships.",
    description=cleandoc(
        """
        This tool fetches the sponsorships of a GitHub account,
        either received (sponsors) or made (sponsees),
        and normalizes them for reports.

        See the documentation / help text of the different subcommands available.

        *Example*

        ```bash
        sponsortally --debug-info
        ```
        """,
    ),
)
@dataclass(kw_only=True)
class CommandMain:
    """Command to fetch and tally GitHub sponsorships."""

    _CONFIG: ClassVar[Config | None] = None

    @staticmethod
    def _load_config(file: Path | None = None) -> Config:
        if CommandMain._CONFIG is None:
            CommandMain._CONFIG = Config.from_file(file) if file else Config.from_default_location()
        return CommandMain._CONFIG

    subcommand: An[
        CommandList | CommandTotal,
        cappa.Subcommand(group=_GROUP_SUBCOMMANDS),
        Doc("The selected subcommand."),
    ]

    @staticmethod
    def _print_and_exit(func: Callable[[], str | None], code: int = 0) -> Callable[[], None]:
        @wraps(func)
        def _inner() -> None:
            raise cappa.Exit(func() or "", code=code)

        return _inner

    @staticmethod
    def _configure_logging(command: CommandMain) -> None:
        configure_logging(command.log_level, command.log_path)

    version: An[
        bool,
        cappa.Arg(
            short="-V",
            long=True,
            action=_print_and_exit(debug.get_version),
            num_args=0,
        ),
        Doc("Print the program version and exit."),
    ] = False

    debug_info: An[
        bool,
        cappa.Arg(long=True, action=_print_and_exit(debug.print_debug_info), num_args=0),
        Doc("Print debug information."),
    ] = False

    config: An[
        Config,
        cappa.Arg(
            short="-c",
            long=True,
            parse=_load_config,
            group=_GROUP_GLOBAL,
            propagate=True,
        ),
        Doc("Path to the configuration file."),
    ] = field(default_factory=Config.from_default_location)

    log_level: An[
        Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"],
        cappa.Arg(short="-L", long=True, parse=str.upper, group=_GROUP_GLOBAL, propagate=True),
        Doc("Log level to use when logging messages."),
    ] = "INFO"

    log_path: An[
        str | None,
        cappa.Arg(short="-P", long=True, group=_GROUP_GLOBAL, propagate=True),
        Doc("Write log messages to this file path."),
    ] = None


def main(
    args: An[list[str] | None, Doc("Arguments passed from the command line.")] = None,
) -> An[int, Doc("An exit code.")]:
    """Run the main program.

    This function is executed when you type `sponsortally` or `python -m sponsortally`.
    """
    output = cappa.Output(error_format="[bold]sponsortally[/]: [bold red]error[/]: {message}")
    completion_option: cappa.Arg = cappa.Arg(
        long=True,
        action=cappa.ArgAction.completion,
        choices=["complete", "generate"],
        group=_GROUP_GLOBAL,
        help="Print shell-specific completion source.",
    )
    help_option: cappa.Arg = cappa.Arg(
        short="-h",
        long=True,
        action=cappa.ArgAction.help,
        group=_GROUP_GLOBAL,
        help="Print the program help and exit.",
    )
    help_formatter = cappa.HelpFormatter(default_format="Default: `{default}`.")

    try:
        return cappa.invoke(
            CommandMain,
            argv=args,
            output=output,
            help=help_option,
            completion=completion_option,
            help_formatter=help_formatter,
            deps=[CommandMain._configure_logging],
        )
    except cappa.Exit as exit:
        return int(exit.code or 0)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
