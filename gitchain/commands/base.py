"""Base class for the git command mixins.

Every mixin in this package is mixed into :class:`gitchain.core.Chain`. Chain
steps call ``self._do`` directly so that debug records point one frame above
the step, at user code. Query helpers bypass the chain and talk to a fresh
runner config, so an expected-exit allowlist never leaks into later steps.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional

from ..exceptions import UnsafePatternError
from ..runner import CommandRunner

if TYPE_CHECKING:
    from ..core import Chain

UNSAFE_PATTERN_CHARS = ("'", "`", "$")


class GitCommands(ABC):
    """Abstract base class for the command mixins.

    Concrete chains provide the runner, the private step and the means to
    derive a new chain state; the mixins only bind method names to argv.
    """

    @property
    @abstractmethod
    def runner(self) -> CommandRunner:
        """The runner configured for this chain."""
        pass

    @abstractmethod
    def reason(self) -> Optional[BaseException]:
        pass

    @abstractmethod
    def _do(self, program: str, *args: str) -> "Chain":
        pass

    @abstractmethod
    def _derive(self, output: bytes, error: Optional[BaseException]) -> "Chain":
        pass

    @abstractmethod
    def _report(self, stacklevel: int = 1) -> None:
        pass

    def _query_runner(self) -> CommandRunner:
        return self.runner.new_config()

    def _git_text(self, *args: str) -> str:
        output = self._query_runner().exec("git", *args)
        return output.decode("utf-8", errors="replace").strip()

    def _git_lines(self, *args: str) -> List[str]:
        output = self._query_runner().exec("git", *args)
        return _split_lines(output)

    def _git_flag(self, code: int, label: str, *args: str) -> bool:
        """Run a git command whose exit code answers a yes/no question.

        Returns:
            bool: True when git exited with ``code``, False when it exited 0
        """
        runner = self._query_runner().with_expect_exit(code, label)
        _, exit_code = runner.exec_take("git", *args)
        return exit_code == code


def _split_lines(output: bytes) -> List[str]:
    text = output.decode("utf-8", errors="replace")
    return [line.strip() for line in text.splitlines() if line.strip()]


def check_pattern(pattern: str) -> str:
    """Reject patterns carrying shell metacharacters.

    Raises:
        UnsafePatternError: ``pattern`` contains ``'``, a backtick or ``$``
    """
    if any(char in pattern for char in UNSAFE_PATTERN_CHARS):
        raise UnsafePatternError(pattern)
    return pattern
