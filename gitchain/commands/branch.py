"""Branch, merge and history commands."""

from typing import List

from .base import GitCommands


class BranchCommands(GitCommands):
    """Commands for switching and merging branches, and history queries."""

    def checkout(self, name: str):
        """Switch to an existing branch or commit."""
        return self._do("git", "checkout", name)

    def checkout_new_branch(self, name: str):
        """Create ``name`` from HEAD and switch to it."""
        return self._do("git", "checkout", "-b", name)

    def merge(self, branch: str):
        return self._do("git", "merge", branch)

    def merge_abort(self):
        return self._do("git", "merge", "--abort")

    def get_current_branch(self) -> str:
        """Name of the checked-out branch, or ``""`` on a detached HEAD.

        Works on an unborn branch too, before the first commit.
        """
        return self._git_text("branch", "--show-current")

    def branch_exists(self, name: str) -> bool:
        return not self._git_flag(1, "branch absent", "show-ref", "--verify", "--quiet", f"refs/heads/{name}")

    def remote_branch_exists(self, name: str) -> bool:
        """Whether a remote-tracking branch such as ``origin/main`` exists."""
        return not self._git_flag(1, "remote branch absent", "show-ref", "--verify", "--quiet", f"refs/remotes/{name}")

    def list_branches(self) -> List[str]:
        return self._git_lines("branch", "--format=%(refname:short)")

    def list_remote_branches(self) -> List[str]:
        return self._git_lines("branch", "-r", "--format=%(refname:short)")

    def get_commit_count(self) -> int:
        """Number of commits reachable from HEAD."""
        return int(self._git_text("rev-list", "--count", "HEAD") or 0)

    def get_log_one_line(self, n: int) -> List[str]:
        """The last ``n`` commits, one ``<hash> <subject>`` line each."""
        return self._git_lines("log", "--oneline", f"-n{n}")

    def get_current_commit_hash(self) -> str:
        return self._git_text("rev-parse", "HEAD")

    def get_commit_hash(self, ref: str) -> str:
        """Resolve a branch, tag or other ref to its commit hash.

        Annotated tags are peeled to the commit they point at.
        """
        return self._git_text("rev-parse", "--verify", f"{ref}^{{commit}}")

    def get_commit_message(self, ref: str) -> str:
        return self._git_text("log", "-1", "--pretty=format:%B", ref)

    def get_branch_tracking_branch(self, branch: str) -> str:
        """Upstream of ``branch``, e.g. ``origin/main``.

        Raises:
            NonZeroExitError: ``branch`` has no upstream configured
        """
        return self._git_text("rev-parse", "--abbrev-ref", f"{branch}@{{upstream}}")
