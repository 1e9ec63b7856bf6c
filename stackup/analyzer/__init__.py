from __future__ import annotations

from pathlib import Path

from .fetcher import clone_repository
from .heuristics import resolve_profile
from .profile import BackendTech, DatabaseTech, FrontendTech, StackProfile, Technology
from .snapshot import RepositorySnapshot
from .validate import validate


def analyze_repo(app_root: str | Path) -> StackProfile:
    """
    Scan app_root and return its StackProfile.
    Only reads files; never executes repository code.
    """
    return resolve_profile(RepositorySnapshot.scan(app_root))


__all__ = [
    "analyze_repo",
    "clone_repository",
    "resolve_profile",
    "validate",
    "RepositorySnapshot",
    "StackProfile",
    "Technology",
    "FrontendTech",
    "BackendTech",
    "DatabaseTech",
]
