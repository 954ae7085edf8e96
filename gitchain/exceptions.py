"""Exception hierarchy for gitchain.

Spawn failures surface as GitPython's ``GitCommandNotFound``; unexpected exit
codes as :class:`NonZeroExitError`, which extends GitPython's
``GitCommandError`` so callers can catch either.
"""
from typing import List, Optional, Sequence, Union

from git.exc import GitCommandError


class ChainError(Exception):
    """Base error for all gitchain-specific exceptions."""


class NonZeroExitError(GitCommandError):
    """Raised when a child process exits with a code nobody expected.

    Attributes:
        output (bytes): Combined stdout and stderr of the failed process
    """

    def __init__(
        self,
        command: Union[List[str], Sequence[str], str],
        status: int,
        output: bytes = b"",
        stderr: Optional[str] = None,
        stdout: Optional[str] = None,
    ):
        super().__init__(command, status, stderr, stdout)
        self.output = output


class ChainAbortError(ChainError):
    """Raised by the mandatory-success terminals (``must_done``, ``nice``, ``zero``)."""

    def __init__(self, message: str, error: Optional[BaseException] = None, output: bytes = b""):
        text = message
        if error is not None:
            text = f"{text}: {error}"
        if output:
            text = f"{text}\nmessage:\n{output.decode('utf-8', errors='replace')}"
        super().__init__(text)
        self.error = error
        self.output = output


class NoStagedChangesError(ChainError):
    """Raised into a chain when a staged-changes check finds nothing staged."""

    def __init__(self, message: str = "NON-STAGED-CHANGES"):
        super().__init__(message)


class UnsafePatternError(ChainError, ValueError):
    """Raised when a pattern argument carries shell metacharacters."""

    def __init__(self, pattern: str):
        super().__init__(f"unsafe pattern {pattern!r}: must not contain ', ` or $")
        self.pattern = pattern
