"""
Ordered detection rules.

Each detector is a tuple of DetectionRule evaluated strictly in order; the
first predicate that holds decides the technology. More specific rules must
come before more general ones.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence

from .profile import Technology
from .snapshot import RepositorySnapshot

logger = logging.getLogger(__name__)


Predicate = Callable[[RepositorySnapshot], bool]
DetailsFn = Callable[[RepositorySnapshot], Dict[str, str]]


@dataclass(frozen=True)
class DetectionRule:
    predicate: Predicate
    result: str
    evidence: str
    details: Optional[DetailsFn] = None

    def apply(self, snapshot: RepositorySnapshot, axis: str) -> Optional[Technology]:
        if not self.predicate(snapshot):
            return None
        details = self.details(snapshot) if self.details else {}
        return Technology(axis=axis, name=self.result, evidence=self.evidence, details=details)


def first_match(rules: Sequence[DetectionRule], snapshot: RepositorySnapshot, axis: str) -> Optional[Technology]:
    """Return the technology of the first matching rule, or None."""
    for rule in rules:
        tech = rule.apply(snapshot, axis)
        if tech is not None:
            logger.debug(f"{axis}: {tech.name} ({rule.evidence})")
            return tech
    return None


def detect_with(rules: Sequence[DetectionRule], snapshot: RepositorySnapshot, axis: str) -> Technology:
    """Like first_match, but falls back to the unknown technology."""
    return first_match(rules, snapshot, axis) or Technology.unknown(axis)
