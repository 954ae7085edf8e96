"""Remote management, fetch, pull and push commands."""

from .base import GitCommands


class RemoteCommands(GitCommands):
    """Commands that talk to, or configure, remote repositories."""

    def pull(self):
        """Fetch and merge the upstream of the current branch."""
        return self._do("git", "pull")

    def pull_from(self, remote: str, branch: str):
        return self._do("git", "pull", remote, branch)

    def push(self):
        return self._do("git", "push")

    def push_to(self, remote: str, branch: str):
        return self._do("git", "push", remote, branch)

    def push_set_upstream_origin_branch(self, branch: str):
        """Publish ``branch`` to origin and set it as the upstream."""
        return self._do("git", "push", "--set-upstream", "origin", branch)

    def remote(self):
        """List remotes with their URLs (``git remote -v``)."""
        return self._do("git", "remote", "-v")

    def remote_add(self, name: str, url: str):
        return self._do("git", "remote", "add", name, url)

    def remote_remove(self, name: str):
        return self._do("git", "remote", "remove", name)

    def remote_set(self, name: str, url: str):
        """Change the URL of an existing remote."""
        return self._do("git", "remote", "set-url", name, url)

    def fetch(self, remote: str):
        return self._do("git", "fetch", remote)

    def fetch_all(self):
        return self._do("git", "fetch", "--all")

    def get_remote_url(self, name: str) -> str:
        return self._git_text("remote", "get-url", name)
