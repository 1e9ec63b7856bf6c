"""
Database recipe: engine image, exposed port, and the compose-level settings
(environment, health probe, connection URL) for each server engine.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..analyzer.profile import DatabaseTech
from .base import BuildArtifact, render


DATABASE_DOCKERFILE = """# Database ({{TECH}})
FROM {{IMAGE}}
EXPOSE {{PORT}}
"""


@dataclass(frozen=True)
class EngineTemplate:
    image: str
    port: int
    url: str
    environment: Dict[str, str] = field(default_factory=dict)
    healthcheck: Optional[List[str]] = None


ENGINES: Dict[str, EngineTemplate] = {
    DatabaseTech.MYSQL.value: EngineTemplate(
        image="mysql:8.0",
        port=3306,
        url="mysql://root:root@db:3306/app_db",
        environment={"MYSQL_ROOT_PASSWORD": "root", "MYSQL_DATABASE": "app_db"},
        healthcheck=["CMD", "mysqladmin", "ping", "-h", "localhost", "-uroot", "-proot"],
    ),
    DatabaseTech.POSTGRES.value: EngineTemplate(
        image="postgres:16-alpine",
        port=5432,
        url="postgres://user:password@db:5432/app_db",
        environment={"POSTGRES_USER": "user", "POSTGRES_PASSWORD": "password", "POSTGRES_DB": "app_db"},
        healthcheck=["CMD-SHELL", "pg_isready -U user -d app_db"],
    ),
    DatabaseTech.MONGODB.value: EngineTemplate(
        image="mongo:7",
        port=27017,
        url="mongodb://db:27017/app_db",
        environment={"MONGO_INITDB_DATABASE": "app_db"},
        healthcheck=["CMD", "mongosh", "--quiet", "--eval", "db.adminCommand('ping')"],
    ),
    DatabaseTech.REDIS.value: EngineTemplate(
        image="redis:7-alpine",
        port=6379,
        url="redis://db:6379/0",
        healthcheck=["CMD", "redis-cli", "ping"],
    ),
}


def supports(database: str) -> bool:
    # sqlite is embedded in the backend process; there is no server to run
    return database in ENGINES


def database_dockerfile(database: str, directory: str) -> BuildArtifact:
    engine = ENGINES[database]
    content = render(DATABASE_DOCKERFILE, {"TECH": database, "IMAGE": engine.image, "PORT": engine.port})
    return BuildArtifact(f"{directory}/Dockerfile", content)
