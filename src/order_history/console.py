"""Console logging for interactive runs.

Modules log through the standard ``logging`` module with one extra level,
``SUCCESS``, sitting between INFO and WARNING.  Colour and the short
``[INFO]``/``[WARN]``/``[OK]``/``[ERR]`` tags are applied only by the
console handler's formatter, so no module ever touches terminal state.
"""

from __future__ import annotations

import logging

import click

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

_TAGS = {
    logging.DEBUG: ("[DBG] ", "bright_black"),
    logging.INFO: ("[INFO]", "white"),
    SUCCESS: ("[OK]  ", "green"),
    logging.WARNING: ("[WARN]", "yellow"),
    logging.ERROR: ("[ERR] ", "red"),
    logging.CRITICAL: ("[ERR] ", "red"),
}


class ConsoleFormatter(logging.Formatter):
    """Prefix each record with a level tag and colour it by level."""

    def __init__(self, color: bool = True) -> None:
        super().__init__("%(message)s")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        tag, fg = _TAGS.get(record.levelno, (f"[{record.levelname}]", None))
        line = f"{tag} {message}"
        if self.color and fg is not None:
            return click.style(line, fg=fg)
        return line


class ClickHandler(logging.Handler):
    """Write formatted records through ``click.echo``.

    ``click.echo`` strips ANSI styling when the stream is not a terminal.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=record.levelno >= logging.WARNING)
        except Exception:
            self.handleError(record)


def success(logger: logging.Logger, msg: str, *args: object) -> None:
    """Log *msg* at the SUCCESS level."""
    logger.log(SUCCESS, msg, *args)


def configure_logging(verbose: bool, debug: bool, color: bool = True) -> None:
    """Set up console logging based on verbosity flags."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = ClickHandler()
    handler.setFormatter(ConsoleFormatter(color=color))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)
