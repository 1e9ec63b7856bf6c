"""
Manifest recipes: Dockerfiles, compose manifest, proxy config and readiness checks.
"""

from .base import BuildArtifact, write_artifacts
from .ports import resolve_backend_port
from .readiness import poll_readiness, ReadinessResult
from .registry import ensure_supported, synthesize, is_supported

__all__ = [
    "BuildArtifact",
    "write_artifacts",
    "resolve_backend_port",
    "poll_readiness",
    "ReadinessResult",
    "synthesize",
    "is_supported",
    "ensure_supported",
]
