from __future__ import annotations

from .snapshot import RepositorySnapshot


def validate(snapshot: RepositorySnapshot) -> bool:
    """True when the tree has a frontend, a backend and a database directory."""
    return not snapshot.missing_roles()
