"""Tests for the logging configuration"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sponsortally._internal.logger import configure_logging, logger

if TYPE_CHECKING:
    from pathlib import Path


def test_dependencies_info_messages_are_demoted(tmp_path: Path):
    log_file = tmp_path / "sponsortally.log"
    configure_logging("INFO", log_file)
    logging.getLogger("httpx").info("HTTP Request: POST https://api.github.com/graphql")
    logging.getLogger("sponsortally.cli").info("Found 3 sponsorships")
    logging.getLogger("httpx").warning("Retrying")
    logger.remove()

    lines = log_file.read_text().splitlines()
    assert len(lines) == 2
    assert "| sponsortally - Found 3 sponsorships" in lines[0]
    assert "| httpx - Retrying" in lines[1]
