"""Child-process runner used by every chain step."""

import logging
import os
import shlex
from typing import Dict, List, Optional, Tuple

from git.cmd import Git
from git.exc import GitCommandNotFound

from .exceptions import NonZeroExitError

logger = logging.getLogger(__name__)


class CommandRunner:
    """Runs programs in a working path and captures their combined output.

    The runner is configured fluently; every ``with_*`` method mutates the
    runner in place and returns it.

    Attributes:
        path (Optional[str]): Working directory for child processes
        debug (bool): Log every command line before it runs
        shell_type (Optional[str]): Shell executable used to wrap commands
        shell_flag (str): Flag passed to the shell before the script
        timeout (Optional[float]): Seconds before a child is killed
        expected_exits (Dict[int, str]): Non-zero exit codes reported as codes
    """

    def __init__(self, path: Optional[str] = None, debug: bool = False):
        self.path = str(path) if path is not None else None
        self.debug = debug
        self.shell_type: Optional[str] = None
        self.shell_flag = "-c"
        self.timeout: Optional[float] = None
        self.expected_exits: Dict[int, str] = {}

    def with_path(self, path) -> "CommandRunner":
        self.path = str(path)
        return self

    def with_debug_mode(self, debug: bool) -> "CommandRunner":
        self.debug = debug
        return self

    def with_shell_type(self, shell_type: str) -> "CommandRunner":
        self.shell_type = shell_type
        return self

    def with_shell_flag(self, shell_flag: str) -> "CommandRunner":
        self.shell_flag = shell_flag
        return self

    def with_timeout(self, seconds: Optional[float]) -> "CommandRunner":
        self.timeout = seconds
        return self

    def with_expect_exit(self, code: int, label: str) -> "CommandRunner":
        """Report ``code`` from :meth:`exec_take` instead of raising.

        Args:
            code: The non-zero exit code to accept
            label: Human-readable meaning of the code, used in debug logs
        """
        self.expected_exits[code] = label
        return self

    def new_config(self) -> "CommandRunner":
        """Return a copy of this runner with an empty expected-exit allowlist."""
        runner = CommandRunner(self.path, self.debug)
        runner.shell_type = self.shell_type
        runner.shell_flag = self.shell_flag
        runner.timeout = self.timeout
        return runner

    def _command(self, program: str, args: Tuple[str, ...]) -> List[str]:
        if not self.shell_type:
            return [program, *args]
        script = shlex.join([program, *args]) if args else program
        return [self.shell_type, self.shell_flag, script]

    def _run(self, program: str, args: Tuple[str, ...]) -> Tuple[List[str], bytes, int, str, str]:
        command = self._command(program, args)
        if self.path is not None and not os.path.isdir(self.path):
            raise GitCommandNotFound(command, f"working path does not exist: {self.path}")
        if self.debug:
            logger.debug("exec: %s (cwd=%s)", shlex.join(command), self.path)

        try:
            status, stdout, stderr = Git(self.path).execute(
                command,
                with_extended_output=True,
                with_exceptions=False,
                stdout_as_string=False,
                strip_newline_in_stdout=False,
                kill_after_timeout=self.timeout,
            )
        except OSError as err:
            # GitPython only converts FileNotFoundError
            raise GitCommandNotFound(command, err) from err
        output = stdout
        if stderr:
            # stderr comes back decoded with surrogateescape and one newline stripped
            output += stderr.encode("utf-8", "surrogateescape") + b"\n"
        return command, output, status, stdout.decode("utf-8", errors="replace"), stderr

    def exec(self, program: str, *args: str) -> bytes:
        """Run ``program`` to completion and return its combined output.

        The output is stdout followed by stderr. Non-empty stderr always ends
        with exactly one newline, whether or not the process wrote one.

        Raises:
            NonZeroExitError: The process exited with a non-zero code
            GitCommandNotFound: The process could not be started
        """
        command, output, status, stdout, stderr = self._run(program, args)
        if status != 0:
            raise NonZeroExitError(command, status, output, stderr, stdout)
        return output

    def exec_take(self, program: str, *args: str) -> Tuple[bytes, int]:
        """Run ``program`` and return ``(output, exit_code)``.

        Exit codes registered through :meth:`with_expect_exit` are returned
        instead of raised.

        Raises:
            NonZeroExitError: The process exited with an unexpected code
            GitCommandNotFound: The process could not be started
        """
        command, output, status, stdout, stderr = self._run(program, args)
        if status == 0:
            return output, status
        if status in self.expected_exits:
            if self.debug:
                logger.debug("exit %d accepted (%s)", status, self.expected_exits[status])
            return output, status
        raise NonZeroExitError(command, status, output, stderr, stdout)
