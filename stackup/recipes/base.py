"""
Artifact model and template helpers shared by all recipes.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional
import logging

from ..analyzer.snapshot import ROLES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildArtifact:
    """A generated file, relative to the checkout root."""
    relative_path: str
    content: str


def render(template: str, values: Mapping[str, object]) -> str:
    """Replace {{KEY}} placeholders; every placeholder must be supplied."""
    out = template
    for key, value in values.items():
        out = out.replace("{{" + key + "}}", str(value))
    if "{{" in out:
        raise ValueError(f"Unrendered placeholder in template: {out[out.index('{{'):][:40]}")
    return out


def resolve_layout(layout: Optional[Mapping[str, Optional[str]]] = None) -> Dict[str, str]:
    """Role -> directory name, defaulting each role to its canonical name."""
    layout = layout or {}
    return {role: layout.get(role) or role for role in ROLES}


def write_artifacts(root: Path, artifacts) -> None:
    """Write artifacts under root, creating parent directories as needed."""
    root = Path(root)
    for artifact in artifacts:
        target = root / artifact.relative_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(artifact.content, encoding="utf-8")
        logger.debug(f"Wrote {artifact.relative_path}")
