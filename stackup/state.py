"""
Per-request workspace management.

Each deployment gets its own checkout directory under the Stackup home. The
orchestrator owns that directory for the lifetime of one request and discards
it on any failure before the stack is confirmed running.
"""

import logging
import shutil
from pathlib import Path

from .ids import checkout_dir_name

logger = logging.getLogger(__name__)


def get_checkout_path(home: Path, reference: str, deployment_id: str) -> Path:
    """
    Get the checkout directory for a deployment. The directory is not created;
    the clone operation creates it.
    """
    home = Path(home)
    home.mkdir(parents=True, exist_ok=True)
    return home / checkout_dir_name(reference, deployment_id)


def discard_checkout(path: Path) -> bool:
    """
    Delete a checkout and everything generated inside it.

    Returns:
        bool: True if the tree is gone afterwards
    """
    path = Path(path)
    if not path.exists():
        return True
    try:
        shutil.rmtree(path)
    except OSError as e:
        logger.error(f"Failed to delete checkout {path}: {e}")
        return False
    logger.info(f"Checkout at {path} has been deleted")
    return True
