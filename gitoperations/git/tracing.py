"""Command tracing for gitoperations.

When tracing is enabled every command line is rendered as one space-joined
line and handed to a sink before the process starts. The sink follows the
printf-style calling convention of ``logging.Logger.info``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from gitoperations.config import DEFAULT_TRACE_PREFIX, Settings, get_settings
from gitoperations.errors import ConfigurationError
from gitoperations.utils.logging import get_logger

TraceSink = Callable[..., None]

logger = get_logger("git.tracing")
trace_logger = get_logger("trace")


def _default_sink(fmt: str, *args: object) -> None:
    trace_logger.info(fmt, *args)


@dataclass
class TraceConfig:
    """Trace toggle, line prefix and output sink.

    Read before every command dispatch, so changes apply to subsequent
    commands only.
    """

    enabled: bool = False
    prefix: str = DEFAULT_TRACE_PREFIX
    sink: TraceSink = field(default=_default_sink)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TraceConfig":
        return cls(enabled=settings.trace.enabled, prefix=settings.trace.prefix)

    def trace(self, command: Sequence[str]) -> None:
        """Send a command line to the sink if tracing is enabled."""
        if not self.enabled:
            return
        self.sink(self.prefix + "%s", " ".join(command))


_trace_config: Optional[TraceConfig] = None


def get_trace_config() -> TraceConfig:
    """Get the process-wide trace configuration, creating it from settings.

    Invalid settings leave tracing at its defaults instead of failing the
    git command being dispatched.
    """
    global _trace_config
    if _trace_config is None:
        try:
            _trace_config = TraceConfig.from_settings(get_settings())
        except ConfigurationError as e:
            logger.warning("Ignoring trace settings: %s", e.message)
            _trace_config = TraceConfig()
    return _trace_config


def reset_trace_config() -> None:
    """Discard the process-wide trace configuration (useful for testing)."""
    global _trace_config
    _trace_config = None


def set_trace(enabled: bool) -> None:
    """Enable or disable tracing on the process-wide configuration."""
    get_trace_config().enabled = enabled


def get_trace() -> bool:
    """Return whether process-wide tracing is enabled."""
    return get_trace_config().enabled


def maybe_trace(command: Sequence[str], trace: Optional[TraceConfig] = None) -> None:
    """Trace a command using the given config or the process-wide one."""
    (trace or get_trace_config()).trace(command)
