"""
Backend port resolution.

Order: explicit PORT in the backend .env, then the technology default, then a
bind/listen pattern in the technology's entry files.
"""

import logging
import re
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..analyzer.detect_backend import node_entry_files, python_entry_files
from ..analyzer.profile import BackendTech, Technology
from ..analyzer.snapshot import BACKEND, RepositorySnapshot
from ..analyzer.walk import read_text
from ..errors import PortUnresolved

logger = logging.getLogger(__name__)


ENV_PORT_PATTERN = re.compile(r"^\s*(?:export\s+)?(\w*?)_?PORT\s*=\s*[\"']?(\d+)", re.MULTILINE | re.IGNORECASE)

# PORT variables with these prefixes belong to another service
FOREIGN_PORT_PREFIXES = {"DB", "DATABASE", "MYSQL", "POSTGRES", "PG", "MONGO", "MONGODB", "REDIS"}

DEFAULT_PORTS: Dict[str, int] = {
    BackendTech.NODEJS.value: 5000,
}

SOURCE_PORT_PATTERNS: Dict[str, re.Pattern] = {
    BackendTech.NODEJS.value: re.compile(r"listen\s*\(\s*(\d+)"),
    BackendTech.PYTHON_FLASK.value: re.compile(r"\.run\((?:[^()]|\([^()]*\))*?\bport\s*=\s*(\d+)"),
}

ENTRY_FILES: Dict[str, Callable[[Path], List[str]]] = {
    BackendTech.NODEJS.value: node_entry_files,
    BackendTech.PYTHON_FLASK.value: python_entry_files,
}


def _valid(port: int) -> bool:
    return 0 < port < 65536


def port_from_env(backend_dir: Path) -> Optional[int]:
    env_file = backend_dir / ".env"
    if not env_file.is_file():
        return None
    for m in ENV_PORT_PATTERN.finditer(read_text(env_file)):
        prefix, value = m.group(1).upper(), int(m.group(2))
        if FOREIGN_PORT_PREFIXES.intersection(prefix.split("_")):
            continue
        if _valid(value):
            return value
    return None


def port_from_source(backend_dir: Path, backend: Technology) -> Optional[int]:
    pattern = SOURCE_PORT_PATTERNS.get(backend.name)
    list_entries = ENTRY_FILES.get(backend.name)
    if pattern is None or list_entries is None:
        return None

    candidates = list_entries(backend_dir)
    entry = backend.details.get("entry")
    if entry and entry not in candidates:
        candidates.append(entry)

    for name in candidates:
        path = backend_dir / name
        if not path.is_file():
            continue
        m = pattern.search(read_text(path))
        if m and _valid(int(m.group(1))):
            return int(m.group(1))
    return None


def resolve_backend_port(snapshot: RepositorySnapshot, backend: Technology) -> int:
    """
    Resolve the port the backend listens on.

    Raises:
        PortUnresolved: If no source yields a port
    """
    backend_dir = snapshot.role_dir(BACKEND)

    port = port_from_env(backend_dir)
    if port is not None:
        logger.info(f"Backend port {port} from {BACKEND}/.env")
        return port

    if backend.name in DEFAULT_PORTS:
        port = DEFAULT_PORTS[backend.name]
        logger.info(f"Backend port {port} is the {backend.name} default")
        return port

    port = port_from_source(backend_dir, backend)
    if port is not None:
        logger.info(f"Backend port {port} found in {backend.name} entry file")
        return port

    raise PortUnresolved(f"No port found for {backend.name} backend")
