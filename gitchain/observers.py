"""Debug sinks that report chain steps."""

import logging
import sys
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

LOGGER_NAME = "gitchain"


def configure_logging(level: int = logging.DEBUG, console: Optional[Console] = None) -> logging.Logger:
    """Attach a rich console handler to the ``gitchain`` logger once.

    Args:
        level: Minimum level the logger lets through
        console: Optional Rich console to render to (defaults to stderr)

    Returns:
        logging.Logger: The configured ``gitchain`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(
            console=console or Console(stderr=True),
            markup=True,
            show_path=True,
            rich_tracebacks=True,
        )
        logger.addHandler(handler)
    if logger.level == logging.NOTSET or logger.level > level:
        logger.setLevel(level)
    return logger


class DebugSink(ABC):
    """Abstract base class for the receivers of chain debug records."""

    @abstractmethod
    def emit(
        self,
        level: int,
        message: str,
        output: bytes = b"",
        error: Optional[BaseException] = None,
        stacklevel: int = 1,
    ) -> None:
        """Emit one record.

        Args:
            level: A ``logging`` level
            message: Short status word, ``done`` or ``wrong``
            output: Captured process output, may be empty
            error: The chain's error, if any
            stacklevel: Which frame to attribute the record to; 1 is the
                caller of ``emit``
        """
        pass


class RichDebugSink(DebugSink):
    """Sink that logs through ``logging`` and renders with Rich colors."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self._configured = False

    def emit(
        self,
        level: int,
        message: str,
        output: bytes = b"",
        error: Optional[BaseException] = None,
        stacklevel: int = 1,
    ) -> None:
        if not self._configured and self.logger.name == LOGGER_NAME:
            configure_logging()
            self._configured = True

        color = "red" if error is not None or level >= logging.ERROR else "green"
        parts = [message]
        if error is not None:
            parts.append(f"[red]{escape(str(error))}[/red]")
        if output:
            text = escape(output.decode("utf-8", errors="replace"))
            parts.append(f"message:\n[{color}]{text}[/{color}]\n")
        self.logger.log(
            level,
            " ".join(parts),
            extra={"markup": True},
            stacklevel=stacklevel + 1,
        )


class FileDebugSink(DebugSink):
    """Sink that appends plain-text records to a file."""

    def __init__(self, log_file: str):
        self.log_file = Path(log_file)
        # Ensure the parent directory exists
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

    def emit(
        self,
        level: int,
        message: str,
        output: bytes = b"",
        error: Optional[BaseException] = None,
        stacklevel: int = 1,
    ) -> None:
        frame = sys._getframe(stacklevel)
        location = f"{Path(frame.f_code.co_filename).name}:{frame.f_lineno}"
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        line = f"{timestamp} - {logging.getLevelName(level)} - {location} - {message}"
        if error is not None:
            line += f" {error}"
        with self.log_file.open("a") as f:
            f.write(line + "\n")
            if output:
                f.write(output.decode("utf-8", errors="replace").rstrip("\n") + "\n")
