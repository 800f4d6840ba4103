from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_PACKAGE_LOGGER = "furigana_plus"


def build_log_handler(console: Console | None = None) -> RichHandler:
    """Return a stderr rich handler without timestamps or paths."""
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    return handler


def configure_logging(debug: bool = False, console: Console | None = None) -> logging.Logger:
    """Attach a single rich handler to the package logger."""
    logger = logging.getLogger(_PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    logger.addHandler(build_log_handler(console))
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    return logger
