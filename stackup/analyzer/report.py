from __future__ import annotations

from typing import List

from .profile import StackProfile
from .snapshot import ROLES, RepositorySnapshot


def format_report(snapshot: RepositorySnapshot, profile: StackProfile) -> str:
    """Human-readable summary of a detection run."""
    lines: List[str] = []
    lines.append(f"Repository: {snapshot.root}")
    lines.append("")
    lines.append("Directories:")
    for role in ROLES:
        lines.append(f"- {role}: {snapshot.roles.get(role) or 'missing'}")
    lines.append("")
    lines.append("Stack:")
    for role in ROLES:
        tech = profile.axis(role)
        lines.append(f"- {role}: {tech.name}")
        if tech.evidence:
            lines.append(f"    evidence: {tech.evidence}")
        for key, value in tech.details.items():
            lines.append(f"    {key}: {value}")
    unknown = profile.unknown_axes()
    if unknown:
        lines.append("")
        lines.append(f"Unresolved: {', '.join(unknown)}")
    return "\n".join(lines)
