from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path

from ..errors import CloneFailure

logger = logging.getLogger(__name__)

IGNORE_DIRS = {
    ".git",
    "node_modules",
    ".venv",
    "venv",
    "__pycache__",
    ".mypy_cache",
    ".next",
    ".DS_Store",
}

MAX_FILES = 50_000
MAX_TOTAL_BYTES = 200 * 1024 * 1024  # 200 MB

NOT_FOUND_SIGNATURES = (
    "repository not found",
    "not found",
    "does not exist",
    "could not read username",
    "could not read from remote repository",
)


def _safe_copy_tree(src: Path, dst: Path) -> None:
    dst.mkdir(parents=True, exist_ok=True)
    total_files = 0
    total_bytes = 0

    for root, dirs, files in os.walk(src):
        # prune
        dirs[:] = [d for d in dirs if d not in IGNORE_DIRS]

        rel = Path(root).relative_to(src)
        (dst / rel).mkdir(parents=True, exist_ok=True)

        for f in files:
            if f in IGNORE_DIRS:
                continue
            sp = Path(root) / f
            try:
                size = sp.stat().st_size
            except OSError:
                continue

            total_files += 1
            total_bytes += size
            if total_files > MAX_FILES or total_bytes > MAX_TOTAL_BYTES:
                raise CloneFailure(f"Source tree at {src} exceeds copy limits")

            shutil.copy2(sp, dst / rel / f)


def is_remote(reference: str) -> bool:
    return reference.startswith(("http://", "https://", "git@", "ssh://"))


def clone_repository(reference: str, dest: str | Path) -> Path:
    """
    Materialize a repository at dest and return its path.
    - git URL: shallow clone.
    - local directory: copy the tree, skipping VCS and dependency folders.

    Raises:
        CloneFailure: kind "not_found" when the repository does not exist,
            "other" for any other clone error
    """
    dest = Path(dest)

    if is_remote(reference):
        logger.info(f"Cloning {reference} into {dest}...")
        try:
            subprocess.run(
                ["git", "clone", "--depth", "1", reference, str(dest)],
                check=True, stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                env={**os.environ, "GIT_TERMINAL_PROMPT": "0"},
            )
        except FileNotFoundError:
            raise CloneFailure("git is not installed")
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode(errors="ignore")
            kind = CloneFailure.NOT_FOUND if any(
                sig in stderr.lower() for sig in NOT_FOUND_SIGNATURES
            ) else CloneFailure.OTHER
            raise CloneFailure(f"git clone failed: {stderr.strip()}", kind=kind)
        return dest.resolve()

    src_path = Path(reference).expanduser().resolve()
    if not src_path.is_dir():
        raise CloneFailure(f"Repository not found: {reference}", kind=CloneFailure.NOT_FOUND)
    logger.info(f"Copying {src_path} into {dest}...")
    try:
        _safe_copy_tree(src_path, dest)
    except OSError as e:
        raise CloneFailure(f"Copy failed: {e}")
    return dest.resolve()
