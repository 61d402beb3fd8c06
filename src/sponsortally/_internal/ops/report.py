"""Report files consumed by renderers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

from sponsortally._internal.logger import logger

if TYPE_CHECKING:
    from sponsortally._internal.models import Sponsorship


def update_numbers_file(sponsorships: list[Sponsorship], filepath: Path = Path("numbers.json")) -> None:
    """Update the file storing sponsorship numbers."""
    active = [sponsorship for sponsorship in sponsorships if sponsorship.monthly_dollars > 0]
    with filepath.open("w") as f:
        json.dump(
            {
                "total": sum(sponsorship.monthly_dollars for sponsorship in active),
                "count": len(active),
            },
            f,
            indent=2,
        )
    logger.debug(f"Wrote sponsorship numbers to {filepath}")


def update_sponsors_file(
    sponsorships: list[Sponsorship],
    filepath: Path = Path("sponsors.json"),
    *,
    exclude_private: bool = True,
) -> None:
    """Update the file storing sponsorships info."""
    with filepath.open("w") as f:
        json.dump(
            [
                sponsorship.as_dict()
                for sponsorship in sponsorships
                if not sponsorship.private or not exclude_private
            ],
            f,
            indent=2,
        )
    logger.debug(f"Wrote sponsorships to {filepath}")
