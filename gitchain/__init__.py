"""Fluent, error-propagating command chains over the git CLI."""

from importlib import metadata

from .core import Chain, get_debug_mode, set_debug_mode
from .exceptions import (
    ChainAbortError,
    ChainError,
    NonZeroExitError,
    NoStagedChangesError,
    UnsafePatternError,
)
from .observers import DebugSink, FileDebugSink, RichDebugSink, configure_logging
from .runner import CommandRunner

try:  # pragma: no cover - best effort metadata lookup
    __version__ = metadata.version("gitchain")
except metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

new = Chain.new
new_with_runner = Chain.new_with_runner

__all__ = [
    "__version__",
    "Chain",
    "new",
    "new_with_runner",
    "set_debug_mode",
    "get_debug_mode",
    "CommandRunner",
    "DebugSink",
    "RichDebugSink",
    "FileDebugSink",
    "configure_logging",
    "ChainError",
    "ChainAbortError",
    "NonZeroExitError",
    "NoStagedChangesError",
    "UnsafePatternError",
]
