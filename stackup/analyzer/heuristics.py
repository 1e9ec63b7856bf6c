from __future__ import annotations

import logging

from .detect_backend import detect_backend
from .detect_database import detect_database
from .detect_frontend import detect_frontend
from .profile import StackProfile
from .snapshot import RepositorySnapshot

logger = logging.getLogger(__name__)


def resolve_profile(snapshot: RepositorySnapshot) -> StackProfile:
    """Run the three detectors; unknown axes are left as unknown."""
    profile = StackProfile(
        frontend=detect_frontend(snapshot),
        backend=detect_backend(snapshot),
        database=detect_database(snapshot),
    )
    logger.info(
        f"Detected stack: frontend={profile.frontend.name} "
        f"backend={profile.backend.name} database={profile.database.name}"
    )
    return profile
