"""Working tree, staging and commit commands."""

from typing import List

from git.diff import decode_path
from git.exc import CommandError

from ..exceptions import NoStagedChangesError
from .base import GitCommands


class StagingCommands(GitCommands):
    """Commands that inspect or change the working tree and the index."""

    def init(self):
        """Initialize a new repository in the chain's path."""
        return self._do("git", "init")

    def status(self):
        return self._do("git", "status")

    def add(self):
        """Stage every change under the chain's path."""
        return self._do("git", "add", ".")

    def commit(self, message: str):
        """Commit the staged changes.

        Args:
            message: The commit message

        Note:
            Fails, and poisons the chain, when nothing is staged.
        """
        return self._do("git", "commit", "-m", message)

    def reset(self):
        """Unstage changes but keep them in the working tree."""
        return self._do("git", "reset")

    def reset_hard(self):
        """Discard staged and unstaged changes. Destructive."""
        return self._do("git", "reset", "--hard")

    def check_staged_changes(self):
        """Chain step that poisons the chain when nothing is staged.

        Returns:
            Chain: ``self`` when already poisoned, a success chain when staged
            changes exist, otherwise a chain poisoned with
            :class:`NoStagedChangesError`
        """
        if self.reason() is not None:
            return self
        runner = self._query_runner().with_expect_exit(1, "has staged changes")
        try:
            output, exit_code = runner.exec_take("git", "diff", "--cached", "--quiet")
        except CommandError as exc:
            chain = self._derive(getattr(exc, "output", b""), exc)
        else:
            if exit_code == 1:
                chain = self._derive(output, None)
            else:
                chain = self._derive(b"", NoStagedChangesError())
        chain._report(stacklevel=2)
        return chain

    def has_staging_changes(self) -> bool:
        """Whether the index differs from HEAD.

        Raises:
            NonZeroExitError: git exited with anything other than 0 or 1
        """
        return self._git_flag(1, "has staging changes", "diff-index", "--cached", "--quiet", "HEAD")

    def has_unstaged_changes(self) -> bool:
        """Whether the working tree differs from the index."""
        return self._git_flag(1, "has unstaged changes", "diff", "--quiet")

    def has_changes(self) -> bool:
        """Whether the working tree or the index differ from HEAD."""
        return self._git_flag(1, "has changes", "diff", "--quiet", "HEAD")

    def get_porcelain_status(self) -> str:
        output = self._query_runner().exec("git", "status", "--porcelain")
        return output.decode("utf-8", errors="replace")

    def get_file_list(self) -> List[str]:
        return self._git_lines("ls-files")

    def get_untracked_files(self) -> List[str]:
        return self._git_lines("ls-files", "--others", "--exclude-standard")

    def get_modified_files(self) -> List[str]:
        return self._git_lines("diff", "--name-only", "HEAD")

    def get_ignored_files(self) -> List[str]:
        """List ignored paths under the chain's path.

        Paths are relative to the chain's path. An ignored directory is
        reported once, with a trailing slash. Paths git quotes (spaces,
        control or non-ASCII characters) are unquoted.
        """
        output = self._query_runner().exec("git", "status", "--ignored", "-s", "--", ".")
        paths = []
        for line in output.splitlines():
            if line.startswith(b"!! "):
                path = decode_path(line[3:], has_ab_prefix=False)
                paths.append(path.decode("utf-8", errors="surrogateescape"))
        return paths
