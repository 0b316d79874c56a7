"""loguru setup: a Rich console sink on stderr, plus an optional log file."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from loguru import logger
from rich.console import Console
from rich.text import Text


def setup_logging(
    level: str = "WARNING",
    *,
    console: Optional[Console] = None,
    log_file: Optional[Path] = None,
) -> None:
    """Replace loguru's default sink. Safe to call more than once."""
    console = console or Console(stderr=True)

    # Clear existing sinks so repeated invocations don't double-log
    logger.remove()

    def console_sink(message) -> None:
        record = message.record
        console.print(
            Text.assemble((f"{record['level'].name.lower()}: ", "dim"), record["message"]),
            highlight=False,
        )

    logger.add(console_sink, level=level, format="{message}", catch=True)

    if log_file is not None:
        logger.add(
            log_file,
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}",
            rotation="5 MB",
            retention="7 days",
            catch=True,
        )
        logger.debug("Logging to {path}", path=log_file)
