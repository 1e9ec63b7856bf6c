import json
from pathlib import Path

import pytest

from stackup.config import Settings


def write_tree(root: Path, files: dict) -> Path:
    """Create files under root; dict values are written as JSON, bytes verbatim."""
    root.mkdir(parents=True, exist_ok=True)
    for rel, content in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            p.write_bytes(content)
        elif isinstance(content, dict):
            p.write_text(json.dumps(content))
        else:
            p.write_text(content)
    return root


# react + vite frontend, express backend on postgres, no port override
FULL_STACK = {
    "frontend/package.json": {"name": "web", "dependencies": {"react": "^18.2.0", "react-dom": "^18.2.0"}},
    "frontend/vite.config.js": "export default {}\n",
    "backend/package.json": {"name": "api", "main": "server.js", "dependencies": {"express": "^4.18.2", "pg": "^8.11.0"}},
    "backend/server.js": "const app = require('express')();\napp.listen(4000);\n",
    "database/.gitkeep": "",
}


@pytest.fixture
def make_repo(tmp_path):
    def _make(files, name="repo"):
        return write_tree(tmp_path / name, files)
    return _make


@pytest.fixture
def settings(tmp_path):
    return Settings(
        home=tmp_path / "home",
        readiness_url="http://localhost:8080/",
        readiness_attempts=3,
        readiness_interval=0,
        readiness_timeout=1,
    )
