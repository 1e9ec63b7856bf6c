"""
Database detection in three precedence tiers.

1. client libraries declared in the backend dependency manifest
2. connection settings in backend/.env, then database/.env
   (then engine keywords in backend config modules)
3. embedded database files in the database directory

The first tier that yields a match wins; later tiers are never consulted.
"""

from __future__ import annotations

import re
from typing import Callable, Sequence, Tuple

from .manifests import load_package_manifest, load_requirements
from .profile import DatabaseTech, Technology
from .rules import DetectionRule, first_match
from .snapshot import BACKEND, DATABASE, RepositorySnapshot
from .walk import list_files, read_text


# Engine order inside a tier: mysql, postgres, mongodb, redis, sqlite
NODE_CLIENTS: Tuple[Tuple[str, DatabaseTech], ...] = (
    ("mysql", DatabaseTech.MYSQL),
    ("mysql2", DatabaseTech.MYSQL),
    ("pg", DatabaseTech.POSTGRES),
    ("mongodb", DatabaseTech.MONGODB),
    ("mongoose", DatabaseTech.MONGODB),
    ("redis", DatabaseTech.REDIS),
    ("sqlite3", DatabaseTech.SQLITE),
)

PYTHON_CLIENTS: Tuple[Tuple[str, DatabaseTech], ...] = (
    ("mysql-connector-python", DatabaseTech.MYSQL),
    ("pymysql", DatabaseTech.MYSQL),
    ("psycopg2", DatabaseTech.POSTGRES),
    ("psycopg2-binary", DatabaseTech.POSTGRES),
    ("pymongo", DatabaseTech.MONGODB),
    ("redis", DatabaseTech.REDIS),
)

ENV_PATTERNS: Tuple[Tuple[str, DatabaseTech], ...] = (
    (r"DB_CONNECTION\s*=\s*mysql", DatabaseTech.MYSQL),
    (r"DATABASE_URL\s*=\s*[\"']?mysql://", DatabaseTech.MYSQL),
    (r"DB_CONNECTION\s*=\s*pgsql", DatabaseTech.POSTGRES),
    (r"DATABASE_URL\s*=\s*[\"']?postgres(ql)?://", DatabaseTech.POSTGRES),
    (r"MONGO_URI\s*=\s*[\"']?mongodb", DatabaseTech.MONGODB),
    (r"REDIS_URL\s*=\s*[\"']?redis", DatabaseTech.REDIS),
    (r"DB_CONNECTION\s*=\s*sqlite", DatabaseTech.SQLITE),
)

CONFIG_FILES = ["config.js", "database.js"]

CONFIG_KEYWORDS: Tuple[Tuple[str, DatabaseTech], ...] = (
    (r"mysql", DatabaseTech.MYSQL),
    (r"postgres|pg:", DatabaseTech.POSTGRES),
    (r"mongodb|mongo:", DatabaseTech.MONGODB),
    (r"redis", DatabaseTech.REDIS),
    (r"sqlite", DatabaseTech.SQLITE),
)

SQLITE_SUFFIXES = (".sqlite", ".sqlite3", ".db")


def _node_client(dependency: str) -> Callable[[RepositorySnapshot], bool]:
    def predicate(snapshot: RepositorySnapshot) -> bool:
        pkg = load_package_manifest(snapshot.role_dir(BACKEND))
        return pkg is not None and pkg.has_dependency(dependency)
    return predicate


def _python_client(requirement: str) -> Callable[[RepositorySnapshot], bool]:
    def predicate(snapshot: RepositorySnapshot) -> bool:
        reqs = load_requirements(snapshot.role_dir(BACKEND))
        return reqs is not None and reqs.has_requirement(requirement)
    return predicate


def _env_match(role: str, pattern: str) -> Callable[[RepositorySnapshot], bool]:
    regex = re.compile(pattern, re.IGNORECASE)

    def predicate(snapshot: RepositorySnapshot) -> bool:
        env_file = snapshot.role_dir(role) / ".env"
        return env_file.is_file() and bool(regex.search(read_text(env_file)))
    return predicate


def _config_match(filename: str, pattern: str) -> Callable[[RepositorySnapshot], bool]:
    regex = re.compile(pattern, re.IGNORECASE)

    def predicate(snapshot: RepositorySnapshot) -> bool:
        path = snapshot.role_dir(BACKEND) / filename
        return path.is_file() and bool(regex.search(read_text(path)))
    return predicate


def _has_sqlite_file(snapshot: RepositorySnapshot) -> bool:
    return any(name.lower().endswith(SQLITE_SUFFIXES) for name in list_files(snapshot.role_dir(DATABASE)))


def _manifest_rules() -> Tuple[DetectionRule, ...]:
    # Grouped by engine so the engine order holds across both ecosystems
    rules = []
    for engine in DatabaseTech:
        for dependency, tech in NODE_CLIENTS:
            if tech is engine:
                rules.append(DetectionRule(_node_client(dependency), tech.value,
                                           f"backend package.json declares {dependency}"))
        for requirement, tech in PYTHON_CLIENTS:
            if tech is engine:
                rules.append(DetectionRule(_python_client(requirement), tech.value,
                                           f"backend requirements.txt declares {requirement}"))
    return tuple(rules)


DATABASE_MANIFEST_RULES: Tuple[DetectionRule, ...] = _manifest_rules()

DATABASE_ENV_RULES: Tuple[DetectionRule, ...] = tuple(
    DetectionRule(_env_match(role, pattern), tech.value, f"{role}/.env matches {pattern}")
    for role in (BACKEND, DATABASE)
    for pattern, tech in ENV_PATTERNS
) + tuple(
    DetectionRule(_config_match(filename, pattern), tech.value, f"backend/{filename} mentions {tech.value}")
    for filename in CONFIG_FILES
    for pattern, tech in CONFIG_KEYWORDS
)

DATABASE_FILE_RULES: Tuple[DetectionRule, ...] = (
    DetectionRule(_has_sqlite_file, DatabaseTech.SQLITE.value, "sqlite database file in database directory"),
)

DATABASE_TIERS: Tuple[Sequence[DetectionRule], ...] = (
    DATABASE_MANIFEST_RULES,
    DATABASE_ENV_RULES,
    DATABASE_FILE_RULES,
)


def detect_database(snapshot: RepositorySnapshot) -> Technology:
    for tier in DATABASE_TIERS:
        tech = first_match(tier, snapshot, DATABASE)
        if tech is not None:
            return tech
    return Technology.unknown(DATABASE)
