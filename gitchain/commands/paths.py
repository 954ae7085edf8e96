"""Repository layout queries built on ``git rev-parse``."""

from .base import GitCommands


class PathQueries(GitCommands):
    def get_top_path(self) -> str:
        """Absolute path of the working tree root."""
        return self._git_text("rev-parse", "--show-toplevel")

    def get_git_dir_abs_path(self) -> str:
        """Absolute path of the ``.git`` directory."""
        return self._git_text("rev-parse", "--absolute-git-dir")

    def get_sub_path(self) -> str:
        """Path from the working tree root down to the chain's path.

        Empty at the root.
        """
        return self._git_text("rev-parse", "--show-prefix").rstrip("/")

    def get_sub_path_to_root(self) -> str:
        """Relative path from the chain's path up to the root, e.g. ``../..``."""
        return self._git_text("rev-parse", "--show-cdup").rstrip("/")

    def is_inside_work_tree(self) -> bool:
        runner = self._query_runner().with_expect_exit(128, "not a git repository")
        output, exit_code = runner.exec_take("git", "rev-parse", "--is-inside-work-tree")
        if exit_code == 128:
            return False
        return output.decode("utf-8", errors="replace").strip() == "true"
