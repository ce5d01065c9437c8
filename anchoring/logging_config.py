"""
Logging configuration for the anchoring package

Includes IndentLogger for tree-style output of strategy attempts. The
indentation state lives in a context variable, so concurrent anchoring
tasks each render their own tree.
"""

import io
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar

_TREE_CHARS = {
    "pipe": "│",
    "branch": "├──",
    "leaf": "└──",
}

# Open block levels, innermost last; True while the level is still active
_indent_state: ContextVar[tuple[bool, ...]] = ContextVar(
    "anchoring_indent", default=()
)


class TaskIndent:
    """Indentation state of the current task for hierarchical logging"""

    @staticmethod
    def increase() -> None:
        """Open a new indentation level"""
        _indent_state.set((*_indent_state.get(), True))

    @staticmethod
    def close_current() -> None:
        """Mark the current level as finished so it renders as a leaf"""
        state = _indent_state.get()
        if state:
            _indent_state.set((*state[:-1], False))

    @staticmethod
    def decrease() -> None:
        """Drop the innermost indentation level"""
        state = _indent_state.get()
        if state:
            _indent_state.set(state[:-1])

    @staticmethod
    def reset() -> None:
        """Reset indentation state (useful for tests)"""
        _indent_state.set(())

    @staticmethod
    def get_indent() -> str:
        """Get current indentation string with tree characters"""
        state = _indent_state.get()
        if not state:
            return ""

        parts = []
        for active in state[:-1]:
            parts.append(f"{_TREE_CHARS['pipe']}   " if active else "    ")
        parts.append(_TREE_CHARS["branch"] if state[-1] else _TREE_CHARS["leaf"])
        return "".join(parts)


class IndentLogger:
    """Logger wrapper that prefixes messages with the task's indentation"""

    def __init__(self, base_logger: logging.Logger) -> None:
        self._logger = base_logger

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._logger.debug(f"{self.indent}{msg}", *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._logger.info(f"{self.indent}{msg}", *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._logger.warning(f"{self.indent}{msg}", *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        self._logger.error(f"{self.indent}{msg}", *args, **kwargs)

    @property
    def indent(self) -> str:
        """Get current indentation string"""
        return TaskIndent.get_indent()

    @contextmanager
    def indent_block(self, initial_message: str | None = None):
        """
        Context manager for handling indentation blocks

        Args:
            initial_message: Optional message to log at block start
        """
        if initial_message:
            self.debug(initial_message)
        TaskIndent.increase()
        try:
            yield
        finally:
            TaskIndent.decrease()

    def last(self, msg: str, *args, **kwargs) -> None:
        """Log the final debug line of the current block as a leaf"""
        TaskIndent.close_current()
        self.debug(msg, *args, **kwargs)


def setup_logging(level=logging.INFO):
    """
    Configure logging for the anchoring package

    Args:
        level: Logging level (default: INFO)

    Returns:
        IndentLogger: Configured logger with indentation support
    """
    base_logger = logging.getLogger("anchoring")
    base_logger.setLevel(level)

    # Remove existing handlers
    base_logger.handlers = []

    # UTF-8 console handler (tree characters break on cp1252 consoles)
    stream = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")
    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(levelname)8s %(message)s"))

    base_logger.addHandler(handler)

    return IndentLogger(base_logger)


# Default logger with indentation support
logger = IndentLogger(logging.getLogger("anchoring"))
