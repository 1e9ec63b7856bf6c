"""
Typed views of the dependency manifests the detectors read.

Absent fields load as explicit empty values and absent or unparseable files
load as None, so detectors never probe raw dictionaries.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .walk import normalize_text, read_text


def _str_map(value) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(k): str(v) for k, v in value.items()}


@dataclass(frozen=True)
class PackageManifest:
    """Fields of package.json the pipeline relies on."""

    name: Optional[str] = None
    main: Optional[str] = None
    dependencies: Dict[str, str] = field(default_factory=dict)
    dev_dependencies: Dict[str, str] = field(default_factory=dict)
    scripts: Dict[str, str] = field(default_factory=dict)

    def has_dependency(self, name: str) -> bool:
        # Runtime dependencies only; devDependencies do not select a stack
        return name in self.dependencies

    @classmethod
    def from_dict(cls, data: dict) -> "PackageManifest":
        name = data.get("name")
        main = data.get("main")
        return cls(
            name=name if isinstance(name, str) else None,
            main=main if isinstance(main, str) and main.strip() else None,
            dependencies=_str_map(data.get("dependencies")),
            dev_dependencies=_str_map(data.get("devDependencies")),
            scripts=_str_map(data.get("scripts")),
        )


def load_package_manifest(directory: str | Path) -> Optional[PackageManifest]:
    pj = Path(directory) / "package.json"
    if not pj.is_file():
        return None
    try:
        data = json.loads(read_text(pj) or "{}")
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    return PackageManifest.from_dict(data)


_REQ_NAME = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")


@dataclass(frozen=True)
class RequirementsManifest:
    """A requirements.txt, decoded and normalized."""

    text: str = ""
    names: List[str] = field(default_factory=list)

    def mentions(self, token: str) -> bool:
        return token.lower() in self.text

    def has_requirement(self, name: str) -> bool:
        return name.lower() in self.names

    @classmethod
    def parse(cls, raw: str) -> "RequirementsManifest":
        text = normalize_text(raw)
        names: List[str] = []
        for line in text.splitlines():
            line = line.strip()
            if not line or line.startswith(("#", "-")):
                continue
            m = _REQ_NAME.match(line)
            if m:
                names.append(m.group(1).replace("_", "-"))
        return cls(text=text, names=names)


def load_requirements(directory: str | Path) -> Optional[RequirementsManifest]:
    req = Path(directory) / "requirements.txt"
    if not req.is_file():
        return None
    return RequirementsManifest.parse(read_text(req))
