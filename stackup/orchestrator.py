"""
Deployment orchestrator: clone, validate, detect, synthesize, build, and wait
for readiness.

Any failure before the build has succeeded deletes the checkout. A readiness
timeout leaves the checkout and the running stack in place unless
``Settings.teardown_on_timeout`` is set.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .analyzer.fetcher import clone_repository
from .analyzer.heuristics import resolve_profile
from .analyzer.profile import StackProfile
from .analyzer.snapshot import RepositorySnapshot
from .analyzer.validate import validate
from .builder import BuildOutcome, build_and_start, tear_down
from .config import Settings, load_settings
from .errors import DeploymentError, ReadinessTimeout, StructureInvalid, TechnologyUnknown
from .ids import new_deployment_id
from .obs.classify import build_error_from_output
from .recipes.base import write_artifacts
from .recipes.ports import resolve_backend_port
from .recipes.readiness import ReadinessResult, poll_readiness
from .recipes.registry import ensure_supported, synthesize
from .state import discard_checkout, get_checkout_path

logger = logging.getLogger(__name__)


class DeploymentState(Enum):
    """Orchestrator states."""
    IDLE = "idle"
    CLONING = "cloning"
    VALIDATING = "validating"
    DETECTING = "detecting"
    SYNTHESIZING = "synthesizing"
    BUILDING = "building"
    AWAITING_READINESS = "awaiting_readiness"
    READY = "ready"
    FAILED = "failed"


TRANSITIONS: Dict[DeploymentState, List[DeploymentState]] = {
    DeploymentState.IDLE: [DeploymentState.CLONING],
    DeploymentState.CLONING: [DeploymentState.VALIDATING, DeploymentState.FAILED],
    DeploymentState.VALIDATING: [DeploymentState.DETECTING, DeploymentState.FAILED],
    DeploymentState.DETECTING: [DeploymentState.SYNTHESIZING, DeploymentState.FAILED],
    DeploymentState.SYNTHESIZING: [DeploymentState.BUILDING, DeploymentState.FAILED],
    DeploymentState.BUILDING: [DeploymentState.AWAITING_READINESS, DeploymentState.FAILED],
    DeploymentState.AWAITING_READINESS: [DeploymentState.READY, DeploymentState.FAILED],
    DeploymentState.READY: [],
    DeploymentState.FAILED: [],
}


@dataclass
class DeploymentResult:
    """Terminal value of one orchestrator run."""
    state: DeploymentState
    error: Optional[DeploymentError] = None
    deployment_id: Optional[str] = None
    checkout_path: Optional[Path] = None  # None once the checkout is discarded
    profile: Optional[StackProfile] = None
    history: List[DeploymentState] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state is DeploymentState.READY

    @property
    def message(self) -> str:
        if self.error is not None:
            return self.error.message
        if self.ok:
            return "Stack is up and ready"
        return self.state.value

    def to_dict(self) -> Dict[str, object]:
        return {
            "deployment_id": self.deployment_id,
            "state": self.state.value,
            "success": self.ok,
            "message": self.message,
            "error": self.error.to_dict() if self.error else None,
            "checkout_path": str(self.checkout_path) if self.checkout_path else None,
            "stack": {axis: tech["name"] for axis, tech in self.profile.as_dict().items()} if self.profile else None,
        }


Cloner = Callable[[str, Path], Path]
Runner = Callable[[Path, List[str]], BuildOutcome]
Poller = Callable[..., ReadinessResult]


class Orchestrator:
    """Runs one repository through the deployment state machine."""

    def __init__(self, settings: Optional[Settings] = None,
                 clone: Cloner = clone_repository,
                 build: Runner = build_and_start,
                 teardown: Runner = tear_down,
                 readiness: Poller = poll_readiness):
        self.settings = settings or load_settings()
        self.clone = clone
        self.build = build
        self.teardown = teardown
        self.readiness = readiness
        self.state = DeploymentState.IDLE
        self.history: List[DeploymentState] = [self.state]

    def _transition(self, new_state: DeploymentState) -> None:
        if new_state not in TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal transition {self.state.value} -> {new_state.value}")
        logger.info(f"{self.state.value} -> {new_state.value}")
        self.state = new_state
        self.history.append(new_state)

    def _result(self, **kwargs) -> DeploymentResult:
        return DeploymentResult(state=self.state, history=list(self.history), **kwargs)

    def run(self, reference: str) -> DeploymentResult:
        """
        Deploy the repository at reference.

        Args:
            reference: Git URL or local directory

        Returns:
            DeploymentResult in state READY or FAILED
        """
        if self.state is not DeploymentState.IDLE:
            raise RuntimeError("Orchestrator instances run a single deployment")

        settings = self.settings
        deployment_id = new_deployment_id()
        checkout = get_checkout_path(settings.home, reference, deployment_id)
        profile: Optional[StackProfile] = None

        try:
            self._transition(DeploymentState.CLONING)
            root = self.clone(reference, checkout)

            self._transition(DeploymentState.VALIDATING)
            snapshot = RepositorySnapshot.scan(root)
            if not validate(snapshot):
                missing = ", ".join(snapshot.missing_roles())
                raise StructureInvalid(f"Not a full-stack app: missing {missing} directory")

            self._transition(DeploymentState.DETECTING)
            profile = resolve_profile(snapshot)
            unknown = profile.unknown_axes()
            if unknown:
                raise TechnologyUnknown(unknown[0])

            self._transition(DeploymentState.SYNTHESIZING)
            ensure_supported(profile)
            port = resolve_backend_port(snapshot, profile.backend)
            artifacts = synthesize(profile, port, snapshot.roles)

            self._transition(DeploymentState.BUILDING)
            write_artifacts(root, artifacts)
            outcome = self.build(root, settings.compose_argv)
            if not outcome.ok:
                raise build_error_from_output(outcome.output)

        except DeploymentError as e:
            logger.error(f"Deployment {deployment_id} failed during {self.state.value}: {e.message}")
            discard_checkout(checkout)
            self._transition(DeploymentState.FAILED)
            return self._result(error=e, deployment_id=deployment_id, profile=profile)
        except Exception:
            discard_checkout(checkout)
            self._transition(DeploymentState.FAILED)
            raise

        self._transition(DeploymentState.AWAITING_READINESS)
        readiness = self.readiness(
            settings.readiness_url,
            max_attempts=settings.readiness_attempts,
            retry_delay=settings.readiness_interval,
            timeout=settings.readiness_timeout,
        )

        if readiness.success:
            self._transition(DeploymentState.READY)
            return self._result(deployment_id=deployment_id, checkout_path=root, profile=profile)

        error = ReadinessTimeout(
            f"Stack did not become ready at {settings.readiness_url}: {readiness.message}",
            attempts=readiness.attempts,
        )
        checkout_path: Optional[Path] = root
        if settings.teardown_on_timeout:
            logger.warning(f"Tearing down unready stack for {deployment_id}")
            down = self.teardown(root, settings.compose_argv)
            if not down.ok:
                # The manifest is needed to stop the stack by hand
                logger.error(f"Teardown failed; keeping {root}")
            elif discard_checkout(checkout):
                checkout_path = None
        else:
            logger.warning(f"Stack for {deployment_id} left running at {root}; clean it up manually")

        self._transition(DeploymentState.FAILED)
        return self._result(error=error, deployment_id=deployment_id, checkout_path=checkout_path, profile=profile)


def run(repository_reference: str, settings: Optional[Settings] = None) -> DeploymentResult:
    """Single entry point: deploy a repository and return its terminal result."""
    return Orchestrator(settings=settings).run(repository_reference)
