"""
AirScope Structured Logger
===========================

Provides :class:`ScopeLogger`, a thin structured-logging facade over the
stdlib :mod:`logging` package.  All AirScope loggers live under the
``airscope`` hierarchy; handlers are attached once, to the hierarchy
root, by :func:`configure_logging`:

- a Rich console handler on stderr (colour-coded levels, tracebacks);
- an optional rotating file handler writing plain text or JSON lines.

Each record carries the ``tool_name`` of the emitting component and,
inside an :meth:`ScopeLogger.operation` block, the ``operation`` name.

References:
    - Python logging HOWTO. https://docs.python.org/3/howto/logging.html
    - Rich library. https://github.com/Textualize/rich
"""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

ROOT_LOGGER_NAME = "airscope"

_LOG_THEME = Theme(
    {
        "log.level.debug": "dim cyan",
        "log.level.info": "bold bright_blue",
        "log.level.warning": "bold yellow",
        "log.level.error": "bold red",
        "log.level.critical": "bold white on red",
    }
)


class _JSONFormatter(logging.Formatter):
    """Emit each log record as a single-line JSON object.

    Output fields::

        {"timestamp": "...", "level": "INFO", "logger": "airscope.engine",
         "message": "...", "tool_name": "engine", "operation": "snapshot",
         "extra": {...}, "exc_info": "..."}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for attr in ("tool_name", "operation"):
            val = getattr(record, attr, None)
            if val is not None:
                entry[attr] = val

        extra = getattr(record, "scope_extra", None)
        if extra is not None:
            entry["extra"] = extra

        if record.exc_info and record.exc_info[1] is not None:
            entry["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


def configure_logging(
    *,
    log_level: str = "INFO",
    log_file: str | Path | None = None,
    json_logs: bool = False,
    console_output: bool = True,
    max_bytes: int = 10_485_760,
    backup_count: int = 5,
) -> logging.Logger:
    """Attach handlers to the ``airscope`` logger hierarchy.

    Safe to call repeatedly; previous handlers are replaced.

    Args:
        log_level:      Minimum severity name.
        log_file:       Rotating log-file path, or ``None``/empty to skip.
        json_logs:      Emit JSON lines in the file handler.
        console_output: Attach the Rich stderr handler.
        max_bytes:      File size before rotation.
        backup_count:   Number of rotated files to keep.

    Returns:
        The configured root ``airscope`` logger.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.propagate = False

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    if console_output:
        console = Console(theme=_LOG_THEME, stderr=True)
        root.addHandler(
            RichHandler(
                console=console,
                level=level,
                show_path=False,
                show_time=True,
                rich_tracebacks=True,
                markup=False,
            )
        )

    if log_file:
        file_path = Path(log_file)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            filename=str(file_path),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        fh.setLevel(level)
        if json_logs:
            fh.setFormatter(_JSONFormatter())
        else:
            fh.setFormatter(
                logging.Formatter(
                    fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                    datefmt="%Y-%m-%dT%H:%M:%S%z",
                )
            )
        root.addHandler(fh)

    if not root.handlers:
        root.addHandler(logging.NullHandler())

    return root


class ScopeLogger:
    """Context-aware logger bound to one AirScope component.

    Usage::

        log = ScopeLogger("airscope.collectors.resolver")
        log.info("Resolving %s", bssid)
        with log.operation("nearby_scan"):
            log.debug("Staggered %d lookups", count)
        with log.timed("snapshot build"):
            ...

    Keyword arguments other than the stdlib ones (``exc_info``,
    ``stack_info``, ``stacklevel``) are collected into the record's
    ``extra`` block for the JSON formatter.
    """

    _STANDARD_KEYS = frozenset({"exc_info", "stack_info", "stacklevel"})

    def __init__(self, name: str) -> None:
        if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
            name = f"{ROOT_LOGGER_NAME}.{name}"
        self._logger = logging.getLogger(name)
        self._tool_name = name.rsplit(".", 1)[-1]
        self._operation: str | None = None

    class _OperationContext:
        """Temporarily binds an operation name to the parent logger."""

        def __init__(self, parent: ScopeLogger, operation: str) -> None:
            self._parent = parent
            self._operation = operation
            self._prev: str | None = None

        def __enter__(self) -> ScopeLogger:
            self._prev = self._parent._operation
            self._parent._operation = self._operation
            return self._parent

        def __exit__(self, *exc: Any) -> None:
            self._parent._operation = self._prev

    def operation(self, name: str) -> _OperationContext:
        """Return a context manager that sets the *operation* field."""
        return self._OperationContext(self, name)

    class _TimingContext:
        """Logs start at DEBUG and elapsed time at INFO."""

        def __init__(self, parent: ScopeLogger, label: str) -> None:
            self._parent = parent
            self._label = label
            self._start = 0.0

        def __enter__(self) -> ScopeLogger._TimingContext:
            self._start = time.perf_counter()
            self._parent.debug("Started: %s", self._label)
            return self

        def __exit__(self, *exc: Any) -> None:
            self._parent.info(
                "Completed: %s (%.3f sec)", self._label, self.elapsed
            )

        @property
        def elapsed(self) -> float:
            return time.perf_counter() - self._start

    def timed(self, label: str) -> _TimingContext:
        """Context manager that logs start / finish and elapsed time."""
        return self._TimingContext(self, label)

    def _enrich(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        extra = kwargs.pop("extra", None) or {}
        scope_extra = {
            key: kwargs.pop(key)
            for key in list(kwargs)
            if key not in self._STANDARD_KEYS
        }
        extra["tool_name"] = self._tool_name
        extra["operation"] = self._operation
        if scope_extra:
            extra["scope_extra"] = scope_extra
        kwargs["extra"] = extra
        return kwargs

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.debug(msg, *args, **self._enrich(kwargs))

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.info(msg, *args, **self._enrich(kwargs))

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.warning(msg, *args, **self._enrich(kwargs))

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.error(msg, *args, **self._enrich(kwargs))

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("exc_info", True)
        self._logger.error(msg, *args, **self._enrich(kwargs))

    @property
    def tool_name(self) -> str:
        """Last dotted component of the logger name."""
        return self._tool_name

    @property
    def underlying(self) -> logging.Logger:
        """Direct access to the stdlib :class:`logging.Logger`."""
        return self._logger
