"""Best-effort failure reporting to the `rawsql` logger."""

from __future__ import annotations

import logging
import traceback
from typing import Any

LOG = logging.getLogger("rawsql")


def dump_error(err: Any, logger: logging.Logger | None = None) -> None:
    """Log an exception's message and stack trace; never raises.

    Args:
        err: Exception to report. Anything else logs a fixed notice.
        logger: Logger to write to. Defaults to the `rawsql` logger.
    """

    log = logger or LOG
    try:
        if not isinstance(err, BaseException):
            log.error("dump_error :: argument is not an exception")
            return

        message = str(err)
        if message:
            log.error("Message: %s", message)
        if err.__traceback__ is not None:
            stack = "".join(
                traceback.format_exception(type(err), err, err.__traceback__)
            )
            log.error("Stacktrace:\n====================\n%s", stack.rstrip())
    except Exception:  # noqa: BLE001
        pass
