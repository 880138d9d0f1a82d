"""
Verbosity-gated logging for tagpress

The compile and serve pipelines connect their ProgramState once through
state_connectToLogger(); after that, LOG() calls anywhere below (scanner,
registries, compiler, request middleware) print only when the state's
verbosity reaches the requested level. Nothing is printed when no state is
connected, which keeps library use and tests quiet.

WARN() bypasses the verbosity gate for conditions an operator must see
even at the default level: an unreadable route file, a failing watcher.

The state lives in a ContextVar. Background threads (the file watcher)
must be started inside contextvars.copy_context().run to inherit it.
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# ProgramState of the running pipeline, or None outside one
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

# One stderr sink; the gate lives in LOG(), not in loguru levels
logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <7}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """Make `state.verbosity` the gate for every LOG() in this context"""
    _program_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Emit `message` when the connected verbosity is at least `level`

    Levels used across tagpress: 1 for progress and request lines, 2 for
    per-template and per-route detail, 3 for include recursion and
    workspace internals. The CLIs start at 1 and each -v adds one.

    Example:
        LOG("Registered /greet -> hello.html [GET]", level=2)
    """
    state = _program_state.get()

    if state and hasattr(state, 'verbosity') and state.verbosity >= level:
        logger.opt(depth=1).debug(message, **kwargs)


def WARN(message: str, **kwargs: Any) -> None:
    """
    Log a warning regardless of verbosity.

    Used for degraded-but-running conditions such as an unreadable route
    configuration.
    """
    logger.opt(depth=1).warning(message, **kwargs)
