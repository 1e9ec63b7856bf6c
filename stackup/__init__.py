"""
Stackup - detect a repository's web stack and bring it up with Docker Compose.

This package validates a cloned repository, infers its frontend, backend and
database technologies, generates container manifests for them and drives a
build-and-run cycle until the stack answers its readiness probe.
"""

__version__ = "0.1.0"
__author__ = "Stackup"
