from __future__ import annotations

import logging
from typing import Optional

import click

LOGGER_NAME = "cargo_bom"

_LEVEL_COLORS = {
    logging.DEBUG: "blue",
    logging.INFO: "cyan",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "red",
}


class ClickEchoHandler(logging.Handler):
    """Route log records to stderr through ``click.echo``."""

    def __init__(self, color: Optional[bool] = None) -> None:
        super().__init__()
        self.color = color

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            level = record.levelname.lower()
            prefix = click.style(f"{level}:", fg=_LEVEL_COLORS.get(record.levelno), bold=True)
            click.echo(f"{prefix} {message}", err=True, color=self.color)
        except Exception:  # pragma: no cover - mirrors logging.StreamHandler
            self.handleError(record)


def level_for(verbose: int, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(verbose: int = 0, quiet: bool = False, color: Optional[bool] = None) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, ClickEchoHandler):
            logger.removeHandler(handler)

    handler = ClickEchoHandler(color=color)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level_for(verbose, quiet))
    return logger
