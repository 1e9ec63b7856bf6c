from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple


FRONTEND = "frontend"
BACKEND = "backend"
DATABASE = "database"

ROLES: Tuple[str, ...] = (FRONTEND, BACKEND, DATABASE)

# Accepted top-level directory names per role, in priority order
ROLE_SYNONYMS: Dict[str, Tuple[str, ...]] = {
    FRONTEND: ("frontend", "client"),
    BACKEND: ("backend", "server"),
    DATABASE: ("database", "db"),
}


@dataclass(frozen=True)
class RepositorySnapshot:
    """Read-only view of a checkout: its root and which role directories exist."""

    root: Path
    roles: Dict[str, Optional[str]] = field(default_factory=dict)

    @classmethod
    def scan(cls, root: str | Path) -> "RepositorySnapshot":
        root_path = Path(root).resolve()
        roles: Dict[str, Optional[str]] = {}
        for role in ROLES:
            roles[role] = next(
                (name for name in ROLE_SYNONYMS[role] if (root_path / name).is_dir()),
                None,
            )
        return cls(root=root_path, roles=roles)

    def has_role(self, role: str) -> bool:
        return self.roles.get(role) is not None

    def role_name(self, role: str) -> str:
        return self.roles.get(role) or role

    def role_dir(self, role: str) -> Path:
        return self.root / self.role_name(role)

    def missing_roles(self) -> Tuple[str, ...]:
        return tuple(role for role in ROLES if not self.has_role(role))
