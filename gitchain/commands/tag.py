"""Tag commands and tag queries."""

from typing import List, Tuple

from ..models import TagRef
from .base import GitCommands, _split_lines, check_pattern


class TagCommands(GitCommands):
    """Commands for creating, publishing and finding tags.

    "Latest" for the pattern helpers means highest by version-aware refname
    ordering (``v1.10.0`` sorts after ``v1.9.0``), not most recently created.
    """

    def tag_list(self):
        return self._do("git", "tag", "--list")

    def tag(self, name: str):
        """Create a lightweight tag at HEAD."""
        return self._do("git", "tag", name)

    def push_tags(self):
        return self._do("git", "push", "--tags")

    def push_tag(self, name: str):
        return self._do("git", "push", "origin", name)

    def get_latest_tag(self) -> Tuple[str, bool]:
        """Nearest tag reachable from HEAD.

        Returns:
            Tuple[str, bool]: The tag name and whether one exists; git's
            "no names found" exit (128) is reported as ``("", False)``
        """
        runner = self._query_runner().with_expect_exit(128, "no tags")
        output, exit_code = runner.exec_take("git", "describe", "--tags", "--abbrev=0")
        if exit_code == 128:
            return "", False
        return output.decode("utf-8", errors="replace").strip(), True

    def latest_tag(self) -> str:
        """Nearest tag reachable from HEAD.

        Raises:
            NonZeroExitError: The repository has no tags
        """
        return self._git_text("describe", "--tags", "--abbrev=0")

    def latest_tag_has_prefix(self, prefix: str) -> str:
        """Highest tag starting with ``prefix``, or ``""`` when none match.

        Raises:
            UnsafePatternError: ``prefix`` contains ``'``, a backtick or ``$``
        """
        check_pattern(prefix)
        return self._highest_tag(f"refs/tags/{prefix}*")

    def latest_tag_matching(self, pattern: str) -> str:
        """Highest tag matching the glob ``pattern``, or ``""`` when none match.

        Raises:
            UnsafePatternError: ``pattern`` contains ``'``, a backtick or ``$``
        """
        check_pattern(pattern)
        return self._highest_tag(f"refs/tags/{pattern}")

    def _highest_tag(self, ref_pattern: str) -> str:
        return self._git_text(
            "for-each-ref",
            "--sort=-version:refname",
            "--count=1",
            "--format=%(refname:short)",
            ref_pattern,
        )

    def tag_exists(self, name: str) -> bool:
        return not self._git_flag(1, "tag absent", "show-ref", "--verify", "--quiet", f"refs/tags/{name}")

    def get_sorted_tags(self) -> List[TagRef]:
        """Every tag, oldest first by creation date."""
        output = self._query_runner().exec(
            "git",
            "for-each-ref",
            "--sort=creatordate",
            "--format=%(refname:short) %(creatordate:iso-strict)",
            "refs/tags",
        )
        tags = []
        for line in _split_lines(output):
            name, _, created = line.partition(" ")
            tags.append(TagRef(name=name, created=created))
        return tags
