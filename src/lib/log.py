"""
Verbosity-gated logging for the CLI stages and the transform engine.

LOG() checks the verbosity of whichever ProgramState is connected to the
current context. The engine calls LOG() as well, but nothing is printed
unless a state is connected, so library use of IndentDedentStream stays
silent.

Verbosity levels and the loguru level each one logs at:
    1  INFO   stage progress (env_check, source_transform, results_report)
    2  DEBUG  resolved paths, stream open/close, end-of-input flushes
    3  TRACE  every indent, dedent and escape region

Usage:
    from indentdedent.lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)
    LOG(f"Transforming {state.inputSourceFile.name}...", level=1)
"""

from loguru import logger
from typing import Any, Dict, Optional
from contextvars import ContextVar
import sys

_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

_LEVEL_NAMES: Dict[int, str] = {1: "INFO", 2: "DEBUG", 3: "TRACE"}

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <16}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="TRACE")


def state_connectToLogger(state: Any) -> None:
    """
    Make state.verbosity govern LOG() calls in the current context.

    Passing None disconnects, which silences LOG() again.
    """
    _program_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if the connected state's verbosity is at least level.

    Args:
        message: Log message to display
        level: Minimum verbosity required; levels above 3 log as TRACE
        **kwargs: Passed through to loguru for message formatting

    Example:
        LOG("Wrote 120 characters", level=2)
        LOG("Dedent at line 7: popped 2 (depth 0)", level=3)
    """
    state = _program_state.get()
    verbosity = getattr(state, 'verbosity', 0) if state is not None else 0

    if verbosity >= level:
        # depth=1 reports the caller's function and line
        logger.opt(depth=1).log(_LEVEL_NAMES.get(level, "TRACE"), message, **kwargs)
