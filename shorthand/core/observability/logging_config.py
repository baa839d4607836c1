"""
Logging configuration for the CLI and the RPC server.

main.py calls ``setup_logging`` once per process; every module logs through
``logging.getLogger(__name__)``.

Level precedence: --debug / --verbose / --quiet, then GH_SHORTHAND_LOG_LEVEL,
then WARNING.

The console sink is stderr because stdout of ``complete`` belongs to the
launcher. The launcher throws stderr away, so GH_SHORTHAND_LOG_FILE (with
its own GH_SHORTHAND_LOG_FILE_LEVEL) is where completion runs are debugged.
"""

from __future__ import annotations

import logging
import sys

# ── Formats ─────────────────────────────────────────────────────

_BARE = ("%(message)s", None)
_STAMPED = ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S")
_DETAILED = ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s", "%Y-%m-%d %H:%M:%S")

# one werkzeug line per request means one per keystroke
_CHATTY = ("werkzeug", "urllib3")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
    server: bool = False,
) -> None:
    """Install the root handlers for this process.

    Args:
        level: Console level name.
        log_file: Also log to this file.
        log_file_level: Level for the file; the console level when unset.
        quiet_third_party: Hold request loggers at WARNING below DEBUG.
        server: Timestamp console lines even at WARNING.
    """
    console_level = level_number(level)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    root.addHandler(_handler(logging.StreamHandler(sys.stderr), console_level, _console_format(console_level, server)))
    lowest = console_level

    if log_file:
        file_level = level_number(log_file_level) if log_file_level else console_level
        root.addHandler(_handler(logging.FileHandler(log_file, encoding="utf-8"), file_level, _DETAILED))
        lowest = min(lowest, file_level)

    root.setLevel(lowest)

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _CHATTY:
            logging.getLogger(name).setLevel(logging.WARNING)

    # a closed launcher pipe must not turn logging into tracebacks
    logging.raiseExceptions = False


def level_number(name: str | None) -> int:
    """Numeric level for ``name``; unknown or empty names mean WARNING."""
    if not name:
        return logging.WARNING
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else logging.WARNING


def _console_format(level: int, server: bool) -> tuple[str, str | None]:
    if level <= logging.DEBUG:
        return _DETAILED
    if server or level <= logging.INFO:
        return _STAMPED
    return _BARE


def _handler(handler: logging.Handler, level: int, fmt: tuple[str, str | None]) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt[0], datefmt=fmt[1]))
    return handler
