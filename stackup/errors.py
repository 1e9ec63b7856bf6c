"""
Deployment error taxonomy.

Every failure the pipeline can report is a DeploymentError subclass with a
stable ``code`` used by the API and CLI layers.
"""

from typing import Optional


class DeploymentError(Exception):
    """Base class for all pipeline failures."""

    code = "deployment_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class CloneFailure(DeploymentError):
    """The repository could not be cloned."""

    code = "clone_failure"

    NOT_FOUND = "not_found"
    OTHER = "other"

    def __init__(self, message: str, kind: str = OTHER):
        super().__init__(message)
        self.kind = kind

    def to_dict(self) -> dict:
        return {**super().to_dict(), "kind": self.kind}


class StructureInvalid(DeploymentError):
    """The tree lacks a frontend, backend or database directory."""

    code = "structure_invalid"


class TechnologyUnknown(DeploymentError):
    """A detector could not classify one axis of the stack."""

    code = "technology_unknown"

    def __init__(self, axis: str, message: Optional[str] = None):
        super().__init__(message or f"Could not detect {axis} technology")
        self.axis = axis

    def to_dict(self) -> dict:
        return {**super().to_dict(), "axis": self.axis}


class SynthesisUnsupported(DeploymentError):
    """No manifest template exists for the detected stack."""

    code = "synthesis_unsupported"


class PortUnresolved(DeploymentError):
    """No backend port could be found in config, defaults or source."""

    code = "port_unresolved"


class BuildError(DeploymentError):
    """The external build-and-start command failed."""

    code = "build_error"

    PORT_CONFLICT = "port_conflict"
    RUNTIME_UNAVAILABLE = "runtime_unavailable"
    OTHER = "other"

    def __init__(self, message: str, kind: str = OTHER, output: str = ""):
        super().__init__(message)
        self.kind = kind
        self.output = output

    def to_dict(self) -> dict:
        # Only the tail of the build log is useful to a caller
        tail = "\n".join(self.output.splitlines()[-40:])
        return {**super().to_dict(), "kind": self.kind, "output": tail}


class ReadinessTimeout(DeploymentError):
    """The stack was started but never answered the readiness probe."""

    code = "readiness_timeout"

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts

    def to_dict(self) -> dict:
        return {**super().to_dict(), "attempts": self.attempts}
