"""Git command surface of a chain.

Each mixin binds method names to fixed git argument vectors. Two shapes exist:

1. Chain steps (``status``, ``add``, ``commit`` ...) return a new chain and take
   part in short-circuit propagation by construction
2. Query helpers (``has_staging_changes``, ``latest_tag`` ...) return plain
   values and raise on failure; they never touch the chain state

Example:
    ```python
    from gitchain import new

    chain = new("/path/to/repo")
    chain.add().when_then(
        lambda c: c.has_staging_changes(),
        lambda c: c.commit("update").push(),
    ).must_done()
    ```
"""

from .base import GitCommands, check_pattern
from .branch import BranchCommands
from .commit import StagingCommands
from .paths import PathQueries
from .remote import RemoteCommands
from .tag import TagCommands

__all__ = [
    "GitCommands",
    "BranchCommands",
    "StagingCommands",
    "PathQueries",
    "RemoteCommands",
    "TagCommands",
    "check_pattern",
]
