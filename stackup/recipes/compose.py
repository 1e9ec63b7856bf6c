"""
Aggregate docker-compose manifest for the frontend, backend and db services.
"""

from typing import Any, Dict, Mapping

import yaml

from ..analyzer.profile import StackProfile
from ..analyzer.snapshot import BACKEND, DATABASE, FRONTEND
from .base import BuildArtifact
from .database import ENGINES
from .proxy import PROXY_CONFIG_PATH

COMPOSE_FILE = "docker-compose.yml"
NETWORK = "app-network"
PROXY_PORT = 80

FRONTEND_SERVICE = "frontend"
BACKEND_SERVICE = "backend"
DATABASE_SERVICE = "db"


def _build(directory: str) -> Dict[str, str]:
    return {"context": f"./{directory}", "dockerfile": "Dockerfile"}


def compose_services(profile: StackProfile, backend_port: int, layout: Mapping[str, str]) -> Dict[str, Any]:
    """The compose document as a plain dict, in declaration order."""
    engine = ENGINES[profile.database.name]

    db_service: Dict[str, Any] = {
        "build": _build(layout[DATABASE]),
        "restart": "always",
    }
    if engine.environment:
        db_service["environment"] = dict(engine.environment)
    db_service["ports"] = [f"{engine.port}:{engine.port}"]
    if engine.healthcheck:
        db_service["healthcheck"] = {
            "test": list(engine.healthcheck),
            "interval": "5s",
            "timeout": "5s",
            "retries": 20,
            "start_period": "10s",
        }
    db_service["networks"] = [NETWORK]

    if engine.healthcheck:
        backend_depends: Any = {DATABASE_SERVICE: {"condition": "service_healthy"}}
    else:
        backend_depends = [DATABASE_SERVICE]

    return {
        "services": {
            FRONTEND_SERVICE: {
                "build": _build(layout[FRONTEND]),
                "ports": [f"{PROXY_PORT}:80"],
                "volumes": [f"./{PROXY_CONFIG_PATH}:/etc/nginx/conf.d/default.conf:ro"],
                "depends_on": [BACKEND_SERVICE],
                "networks": [NETWORK],
            },
            BACKEND_SERVICE: {
                "build": _build(layout[BACKEND]),
                "environment": {
                    "PORT": str(backend_port),
                    "DATABASE_URL": engine.url,
                },
                "ports": [f"{backend_port}:{backend_port}"],
                "depends_on": backend_depends,
                "networks": [NETWORK],
            },
            DATABASE_SERVICE: db_service,
        },
        "networks": {NETWORK: {"driver": "bridge"}},
    }


def compose_manifest(profile: StackProfile, backend_port: int, layout: Mapping[str, str]) -> BuildArtifact:
    document = compose_services(profile, backend_port, layout)
    content = yaml.safe_dump(document, sort_keys=False, default_flow_style=False)
    return BuildArtifact(COMPOSE_FILE, content)
