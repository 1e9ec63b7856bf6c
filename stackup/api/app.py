"""FastAPI application exposing the deployment pipeline over HTTP."""

import logging
import threading
from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
import uvicorn

from .. import __version__
from ..config import Settings, load_settings
from ..errors import (
    BuildError, CloneFailure, PortUnresolved, ReadinessTimeout,
    StructureInvalid, SynthesisUnsupported, TechnologyUnknown,
)
from ..orchestrator import DeploymentResult, Orchestrator

logger = logging.getLogger(__name__)

GITHUB_PREFIX = "https://github.com/"

# Generated manifests publish fixed host ports, so deployments run one at a time
_deploy_lock = threading.Lock()


class CloneRequest(BaseModel):
    repourl: Optional[str] = None


class CloneResponse(BaseModel):
    success: bool
    message: str
    deployment_id: Optional[str] = None
    frontend: Optional[str] = None
    backend: Optional[str] = None
    database: Optional[str] = None
    error: Optional[Dict[str, Any]] = None


def status_code_for(result: DeploymentResult) -> int:
    """Translate a terminal DeploymentResult into an HTTP status code."""
    error = result.error
    if result.ok:
        return 200
    if isinstance(error, CloneFailure):
        return 404 if error.kind == CloneFailure.NOT_FOUND else 502
    if isinstance(error, (StructureInvalid, TechnologyUnknown, SynthesisUnsupported, PortUnresolved)):
        return 400
    if isinstance(error, BuildError) and error.kind == BuildError.PORT_CONFLICT:
        return 409
    if isinstance(error, ReadinessTimeout):
        return 504
    return 500


def sanitize_repo_url(url: str, settings: Settings) -> str:
    """
    Check that url is an accepted repository reference.

    Raises:
        ValueError: If the URL is not a GitHub HTTPS URL (unless any source is allowed)
    """
    url = url.strip()
    if settings.allow_any_source:
        return url
    if not url.startswith(GITHUB_PREFIX) or len(url) <= len(GITHUB_PREFIX):
        raise ValueError("Invalid repository URL")
    return url


def _response(status_code: int, body: CloneResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump())


def create_app(settings: Optional[Settings] = None, orchestrator_factory=None) -> FastAPI:
    """
    Build the API app.

    Args:
        settings: Settings to use; read from the environment when omitted
        orchestrator_factory: Callable(settings) -> Orchestrator, for tests
    """
    settings = settings or load_settings()
    make_orchestrator = orchestrator_factory or (lambda s: Orchestrator(settings=s))

    app = FastAPI(
        title="Stackup API",
        description="Detect a repository's web stack and run it with Docker Compose",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def root():
        """Health check endpoint."""
        return {"message": "Stackup API is running", "version": __version__}

    # Sync handler: FastAPI runs it in the threadpool, so a long build does
    # not block other requests
    @app.post("/api/clone", response_model=CloneResponse)
    def clone_endpoint(request: CloneRequest):
        """Clone a repository, build its stack and wait until it is serving."""
        if not request.repourl:
            return _response(400, CloneResponse(success=False, message="Repository URL is required."))
        try:
            url = sanitize_repo_url(request.repourl, settings)
        except ValueError as e:
            return _response(400, CloneResponse(success=False, message=str(e)))

        with _deploy_lock:
            result = make_orchestrator(settings).run(url)

        stack = {}
        if result.profile:
            stack = {
                "frontend": result.profile.frontend.name,
                "backend": result.profile.backend.name,
                "database": result.profile.database.name,
            }
        body = CloneResponse(
            success=result.ok,
            message="Full-stack app deployed successfully!" if result.ok else result.message,
            deployment_id=result.deployment_id,
            error=result.error.to_dict() if result.error else None,
            **stack,
        )
        return _response(status_code_for(result), body)

    return app


if __name__ == "__main__":
    import os
    port = int(os.getenv("PORT", 5000))
    uvicorn.run(create_app(), host="0.0.0.0", port=port)
