"""Chain engine: the value carried through a fluent git expression."""
import logging
from typing import Callable, Optional, Tuple

from git.exc import CommandError

from .commands import BranchCommands, PathQueries, RemoteCommands, StagingCommands, TagCommands
from .exceptions import ChainAbortError
from .observers import DebugSink, RichDebugSink
from .runner import CommandRunner

# Read once, when a chain is constructed.
_debug_mode_default = False

DEFAULT_SINK: DebugSink = RichDebugSink()


def set_debug_mode(enable: bool) -> None:
    """Set the debug flag that newly constructed chains start with."""
    global _debug_mode_default
    _debug_mode_default = enable


def get_debug_mode() -> bool:
    return _debug_mode_default


class Chain(StagingCommands, BranchCommands, RemoteCommands, TagCommands, PathQueries):
    """State carried across chained git steps.

    A chain holds the runner, the output of the most recent step and the first
    error raised by any step. Once the error is set the chain is *poisoned*:
    every further step returns the chain unchanged without running anything,
    so the output that caused the failure stays available for diagnosis.

    Steps never mutate the receiver; they return either the same chain or a
    new one sharing the same runner. ``with_debug``, ``with_debug_mode`` and
    ``update_runner`` are the exceptions and change configuration in place.

    Attributes:
        runner (CommandRunner): Runner shared by every chain derived from this one
        debug (bool): Whether each step emits a record to the sink
        sink (DebugSink): Receiver of debug records
    """

    def __init__(
        self,
        runner: CommandRunner,
        output: bytes = b"",
        error: Optional[BaseException] = None,
        debug: bool = False,
        sink: Optional[DebugSink] = None,
    ):
        self._runner = runner
        self._output = output
        self._error = error
        self._debug = debug
        self.sink = sink or DEFAULT_SINK

    @classmethod
    def new(cls, path, sink: Optional[DebugSink] = None) -> "Chain":
        """Create a success-state chain with a fresh runner at ``path``."""
        debug = _debug_mode_default
        runner = CommandRunner(path).with_debug_mode(debug)
        return cls(runner, debug=debug, sink=sink)

    @classmethod
    def new_with_runner(cls, path, runner: CommandRunner, sink: Optional[DebugSink] = None) -> "Chain":
        """Create a success-state chain from a runner template.

        The template is copied, so later changes to it do not reach the chain.
        """
        debug = _debug_mode_default
        return cls(runner.new_config().with_path(path).with_debug_mode(debug), debug=debug, sink=sink)

    @property
    def runner(self) -> CommandRunner:
        return self._runner

    @property
    def debug(self) -> bool:
        return self._debug

    def __repr__(self) -> str:
        state = "poisoned" if self._error is not None else "ok"
        return f"<Chain {state} path={self._runner.path!r} output={len(self._output)}B>"

    def _derive(self, output: bytes, error: Optional[BaseException]) -> "Chain":
        return type(self)(self._runner, output, error, self._debug, self.sink)

    def _do(self, program: str, *args: str) -> "Chain":
        # Public steps must call this directly: the report below is attributed
        # three frames up, to whoever called the step.
        if self._error is not None:
            return self
        try:
            output = self._runner.exec(program, *args)
        except CommandError as exc:
            chain = self._derive(getattr(exc, "output", b""), exc)
        else:
            chain = self._derive(output, None)
        chain._report(stacklevel=3)
        return chain

    def _report(self, stacklevel: int = 1, force: bool = False) -> None:
        if not (self._debug or force):
            return
        if self._error is not None:
            self.sink.emit(logging.ERROR, "wrong", self._output, self._error, stacklevel=stacklevel + 1)
        else:
            self.sink.emit(logging.DEBUG, "done", self._output, None, stacklevel=stacklevel + 1)

    def when(self, predicate: Callable[["Chain"], bool], branch: Callable[["Chain"], "Chain"]) -> "Chain":
        """Run ``branch`` when the chain is healthy and ``predicate`` holds.

        Args:
            predicate: Total test on the chain; must not raise
            branch: Steps to continue with

        Returns:
            Chain: ``branch(self)``, or ``self`` unchanged
        """
        if self._error is None and predicate(self):
            return branch(self)
        return self

    def when_then(self, predicate: Callable[["Chain"], bool], branch: Callable[["Chain"], "Chain"]) -> "Chain":
        """Like :meth:`when`, for predicates that may fail.

        A predicate that raises poisons the chain with its exception, clears
        the output and skips ``branch``. Query helpers such as
        ``has_staging_changes`` plug in directly.
        """
        if self._error is not None:
            return self
        try:
            matched = predicate(self)
        except Exception as exc:
            chain = self._derive(b"", exc)
            chain._report(stacklevel=2)
            return chain
        if matched:
            return branch(self)
        return self

    def result(self) -> Tuple[bytes, Optional[BaseException]]:
        return self._output, self._error

    def output(self) -> bytes:
        return self._output

    def reason(self) -> Optional[BaseException]:
        return self._error

    def must_done(self) -> "Chain":
        """Return the chain if healthy.

        Raises:
            ChainAbortError: The chain is poisoned; the message carries the
                error and any captured output
        """
        if self._error is not None:
            raise ChainAbortError("wrong", self._error, self._output) from self._error
        return self

    def must(self) -> "Chain":
        return self.must_done()

    def done(self) -> "Chain":
        return self.must_done()

    def nice(self) -> bytes:
        """Return the output of a healthy chain, requiring it to be non-empty."""
        output = self.must_done().output()
        if not output:
            raise ChainAbortError("expected output, got none")
        return output

    def zero(self) -> None:
        """Require a healthy chain whose last step printed nothing."""
        output = self.must_done().output()
        if output:
            raise ChainAbortError("expected no output", output=output)

    def none(self) -> None:
        self.zero()

    def show_debug_message(self) -> "Chain":
        """Emit the current state to the sink, whatever the debug flag says."""
        self._report(stacklevel=2, force=True)
        return self

    def update_runner(self, update: Callable[[CommandRunner], object]) -> "Chain":
        """Apply ``update`` to the runner in place, for the steps that follow.

        Example:
            ``chain.update_runner(lambda r: r.with_shell_type("bash").with_shell_flag("-c"))``
        """
        update(self._runner)
        return self

    def with_debug(self) -> "Chain":
        return self.with_debug_mode(True)

    def with_debug_mode(self, debug: bool) -> "Chain":
        self._debug = debug
        self._runner.with_debug_mode(debug)
        return self
