from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from .snapshot import BACKEND, DATABASE, FRONTEND, ROLES


UNKNOWN = "unknown"


class FrontendTech(str, Enum):
    REACT = "react"
    REACT_VITE = "react-vite"
    VUE = "vue"
    ANGULAR = "angular"
    UNKNOWN = UNKNOWN


class BackendTech(str, Enum):
    NODEJS = "nodejs"
    PYTHON_FLASK = "python-flask"
    UNKNOWN = UNKNOWN


class DatabaseTech(str, Enum):
    MYSQL = "mysql"
    POSTGRES = "postgres"
    MONGODB = "mongodb"
    REDIS = "redis"
    SQLITE = "sqlite"
    UNKNOWN = UNKNOWN


AXIS_ENUMS = {
    FRONTEND: FrontendTech,
    BACKEND: BackendTech,
    DATABASE: DatabaseTech,
}


@dataclass(frozen=True)
class Technology:
    """One detected technology and the evidence that produced it."""

    axis: str
    name: str
    evidence: Optional[str] = None
    # Compared but not hashed: the read-only mapping is unhashable
    details: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        if self.axis not in AXIS_ENUMS:
            raise ValueError(f"Unknown axis: {self.axis}")
        # Raises ValueError for names outside the axis enumeration
        AXIS_ENUMS[self.axis](self.name)
        object.__setattr__(self, "details", MappingProxyType(dict(self.details)))

    @classmethod
    def unknown(cls, axis: str) -> "Technology":
        return cls(axis=axis, name=UNKNOWN)

    @property
    def is_unknown(self) -> bool:
        return self.name == UNKNOWN

    def as_dict(self) -> Dict[str, object]:
        return {"name": self.name, "evidence": self.evidence, "details": dict(self.details)}


@dataclass(frozen=True)
class StackProfile:
    frontend: Technology
    backend: Technology
    database: Technology

    def axis(self, axis: str) -> Technology:
        return getattr(self, axis)

    def unknown_axes(self) -> List[str]:
        return [axis for axis in ROLES if self.axis(axis).is_unknown]

    @property
    def is_complete(self) -> bool:
        return not self.unknown_axes()

    def as_dict(self) -> Dict[str, Dict[str, object]]:
        return {axis: self.axis(axis).as_dict() for axis in ROLES}
