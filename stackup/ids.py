"""
Deployment and checkout naming.

A deployment is identified by its start time plus a short random suffix, so
two requests for the same repository in the same second still get distinct
checkouts: ``<repo>-<YYYYMMDD>-<hhmmss>-<xxxx>``.
"""

import re
import secrets
from datetime import datetime
from typing import Optional


def new_deployment_id(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"{now:%Y%m%d-%H%M%S}-{secrets.token_hex(2)}"


def repo_name_from_reference(reference: str) -> str:
    """Derive a filesystem-safe name from a repository URL or path."""
    name = reference.rstrip("/").split("/")[-1]
    if name.endswith(".git"):
        name = name[:-4]
    name = re.sub(r"[^A-Za-z0-9._-]", "-", name).strip(".-")
    return name or "repo"


def checkout_dir_name(reference: str, deployment_id: str) -> str:
    return f"{repo_name_from_reference(reference)}-{deployment_id}"
