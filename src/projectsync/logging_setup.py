"""Route library logging through Rich on stderr."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "projectsync-rich"


def configure_logging(verbose: bool = False) -> None:
    """Install a single Rich handler on the ``projectsync`` logger.

    WARNING and above by default; DEBUG with *verbose*. Safe to call more
    than once.
    """
    logger = logging.getLogger("projectsync")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    for handler in logger.handlers:
        if handler.get_name() == _HANDLER_NAME:
            handler.setLevel(logger.level)
            return
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=True,
        markup=False,
    )
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(logger.level)
    logger.addHandler(handler)
