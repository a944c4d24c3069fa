"""
Diagnostics for the ZText parser and evaluator.

Library operations report failures through `ErrorCode` values and result
models, so nothing here is needed for control flow. The log only explains
what happened:
- `LOG` traces debug detail: parse failures with their line report, missing
  commands, circular variable references and depth cut-offs. It is silenced
  by `ZTEXT_BEQUIET=true`.
- `WARN` reports problems raised by host code, such as a command handler
  that threw while rendering. Warnings are never silenced, since the failing
  command renders as "" and the output alone does not show it.

Both write through one loguru logger bound to `app="ZTEXT"`, so a host can
filter or redirect library output with `logger.add(..., filter=...)`.

Example:
    from ztext.lib.log import LOG, WARN
    LOG("Command 'title' not found")
    WARN("Command 'title' failed: boom")
"""

from loguru import logger
from typing import Any
import sys

app_logger = logger.bind(app="ZTEXT")

logger_format = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> │ "
    "<level>{level: <7}</level> │ "
    "<yellow>{name: >24}</yellow>::"
    "<cyan>{function: <18}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

app_logger.remove()
app_logger.add(sys.stderr, format=logger_format)


def LOG(*args: Any, **kwargs: Any) -> None:
    """
    Debug trace of parser and evaluator decisions, unless `beQuiet` is set.

    :param args: Message and format arguments, as for loguru.
    :param kwargs: Format keyword arguments, as for loguru.
    """
    from ztext.config.settings import appsettings  # read at call time

    if not appsettings.beQuiet:
        app_logger.opt(depth=1).debug(*args, **kwargs)


def WARN(*args: Any, **kwargs: Any) -> None:
    """
    Warning about a failure in host-supplied code. Not affected by `beQuiet`.

    :param args: Message and format arguments, as for loguru.
    :param kwargs: Format keyword arguments, as for loguru.
    """
    app_logger.opt(depth=1).warning(*args, **kwargs)
