from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Tuple

from .manifests import load_package_manifest, load_requirements
from .profile import BackendTech, Technology
from .rules import DetectionRule, detect_with
from .snapshot import BACKEND, RepositorySnapshot
from .walk import first_existing, list_files, read_text


NODE_ENTRY_CANDIDATES = ["server.js", "index.js", "app.js"]

FLASK_MARKER = "flask"


def node_entry_files(backend_dir: Path) -> List[str]:
    """package.json "main" if declared, otherwise the conventional entry files."""
    pkg = load_package_manifest(backend_dir)
    if pkg is not None and pkg.main:
        return [pkg.main]
    return list(NODE_ENTRY_CANDIDATES)


def python_entry_files(backend_dir: Path) -> List[str]:
    """manage.py if present, else the first module with a __main__ guard."""
    if (backend_dir / "manage.py").is_file():
        return ["manage.py"]
    for name in list_files(backend_dir):
        if name.endswith(".py") and "__main__" in read_text(backend_dir / name):
            return [name]
    return []


def _node_details(snapshot: RepositorySnapshot) -> Dict[str, str]:
    backend_dir = snapshot.role_dir(BACKEND)
    candidates = node_entry_files(backend_dir)
    entry = first_existing(backend_dir, candidates) or candidates[0]
    return {"entry": entry}


def _flask_details(snapshot: RepositorySnapshot) -> Dict[str, str]:
    entries = python_entry_files(snapshot.role_dir(BACKEND))
    return {"entry": entries[0] if entries else "app.py"}


def _has_package_json(snapshot: RepositorySnapshot) -> bool:
    return (snapshot.role_dir(BACKEND) / "package.json").is_file()


def _requirements_mention_flask(snapshot: RepositorySnapshot) -> bool:
    reqs = load_requirements(snapshot.role_dir(BACKEND))
    return reqs is not None and reqs.mentions(FLASK_MARKER)


BACKEND_RULES: Tuple[DetectionRule, ...] = (
    DetectionRule(_has_package_json, BackendTech.NODEJS.value,
                  "package.json in backend directory", _node_details),
    DetectionRule(_requirements_mention_flask, BackendTech.PYTHON_FLASK.value,
                  "requirements.txt mentions flask", _flask_details),
)


def detect_backend(snapshot: RepositorySnapshot) -> Technology:
    return detect_with(BACKEND_RULES, snapshot, BACKEND)
