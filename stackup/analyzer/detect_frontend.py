from __future__ import annotations

from typing import Tuple

from .manifests import load_package_manifest
from .profile import FrontendTech, Technology
from .rules import DetectionRule, detect_with
from .snapshot import FRONTEND, RepositorySnapshot
from .walk import first_existing


VITE_CONFIGS = ["vite.config.js", "vite.config.ts", "vite.config.mjs", "vite.config.cjs"]


def _declares(dependency: str):
    def predicate(snapshot: RepositorySnapshot) -> bool:
        pkg = load_package_manifest(snapshot.role_dir(FRONTEND))
        return pkg is not None and pkg.has_dependency(dependency)
    return predicate


def _has_vite_config(snapshot: RepositorySnapshot) -> bool:
    return first_existing(snapshot.role_dir(FRONTEND), VITE_CONFIGS) is not None


def _react_with_vite(snapshot: RepositorySnapshot) -> bool:
    return _declares("react")(snapshot) and _has_vite_config(snapshot)


def _has_angular_json(snapshot: RepositorySnapshot) -> bool:
    return (snapshot.role_dir(FRONTEND) / "angular.json").is_file()


# react-vite must precede react
FRONTEND_RULES: Tuple[DetectionRule, ...] = (
    DetectionRule(_react_with_vite, FrontendTech.REACT_VITE.value,
                  "package.json declares react and a vite config is present"),
    DetectionRule(_declares("react"), FrontendTech.REACT.value, "package.json declares react"),
    DetectionRule(_declares("vue"), FrontendTech.VUE.value, "package.json declares vue"),
    DetectionRule(_has_angular_json, FrontendTech.ANGULAR.value, "angular.json present"),
)


def detect_frontend(snapshot: RepositorySnapshot) -> Technology:
    return detect_with(FRONTEND_RULES, snapshot, FRONTEND)
