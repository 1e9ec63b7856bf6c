"""
Manifest synthesis: map a complete StackProfile to its build artifacts.
"""

from typing import List, Mapping, Optional
import logging

from ..analyzer.profile import StackProfile
from ..analyzer.snapshot import BACKEND, DATABASE, FRONTEND
from ..errors import SynthesisUnsupported
from . import backend, database, frontend
from .base import BuildArtifact, resolve_layout
from .compose import compose_manifest
from .ignore import dockerignore
from .proxy import proxy_config

logger = logging.getLogger(__name__)


def is_supported(profile: StackProfile) -> bool:
    """True when a template exists for every axis of the profile."""
    return (
        profile.is_complete
        and frontend.supports(profile.frontend.name)
        and backend.supports(profile.backend.name)
        and database.supports(profile.database.name)
    )


def ensure_supported(profile: StackProfile) -> None:
    """
    Raises:
        SynthesisUnsupported: If any axis is unknown or has no template
    """
    unknown = profile.unknown_axes()
    if unknown:
        raise SynthesisUnsupported(f"Cannot synthesize manifests with unknown {', '.join(unknown)}")
    if not is_supported(profile):
        raise SynthesisUnsupported(
            f"No template for {profile.frontend.name}/{profile.backend.name}/{profile.database.name}"
        )


def synthesize(profile: StackProfile, backend_port: int,
               layout: Optional[Mapping[str, Optional[str]]] = None) -> List[BuildArtifact]:
    """
    Generate every artifact needed to build and run the stack.

    Args:
        profile: Complete StackProfile
        backend_port: Resolved backend port
        layout: Role -> directory name; canonical names when omitted

    Returns:
        Artifacts in write order (component Dockerfiles first)

    Raises:
        SynthesisUnsupported: If any axis is unknown or has no template
    """
    ensure_supported(profile)

    dirs = resolve_layout(layout)
    artifacts = [
        frontend.frontend_dockerfile(profile.frontend.name, dirs[FRONTEND]),
        backend.backend_dockerfile(profile.backend, backend_port, dirs[BACKEND]),
        database.database_dockerfile(profile.database.name, dirs[DATABASE]),
        compose_manifest(profile, backend_port, dirs),
        proxy_config(backend_port),
        dockerignore(),
    ]
    artifacts.extend(dockerignore(dirs[role]) for role in (FRONTEND, BACKEND, DATABASE))
    logger.info(f"Synthesized {len(artifacts)} artifacts")
    return artifacts
