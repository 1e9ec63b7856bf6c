"""Main CLI entrypoint for stackup."""

import json
import logging
import sys
from typing import Dict, Any

import click

from ..analyzer.heuristics import resolve_profile
from ..analyzer.report import format_report
from ..analyzer.snapshot import RepositorySnapshot
from ..analyzer.validate import validate
from ..config import load_settings
from ..errors import DeploymentError
from ..orchestrator import Orchestrator
from ..recipes.base import write_artifacts
from ..recipes.ports import resolve_backend_port
from ..recipes.registry import ensure_supported, synthesize


@click.group()
@click.option('--json', 'output_json', is_flag=True, help='Output machine-readable JSON')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def main(ctx, output_json, verbose):
    """Stackup - detect a repository's web stack and run it with Docker Compose."""
    ctx.ensure_object(dict)
    ctx.obj['json'] = output_json
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[stackup] %(levelname)s %(name)s: %(message)s",
    )


def _json_output(data: Dict[str, Any]) -> None:
    """Output data as JSON."""
    click.echo(json.dumps(data, indent=None))


def _human_output(message: str) -> None:
    """Output human-readable message."""
    if not click.get_current_context().obj.get('json', False):
        click.echo(message)


def _fail(message: str, code: int = 1) -> None:
    if click.get_current_context().obj.get('json', False):
        _json_output({'error': message})
    else:
        click.echo(f"Error: {message}", err=True)
    sys.exit(code)


@main.command()
@click.argument('repo')
@click.pass_context
def deploy(ctx, repo):
    """Clone REPO (URL or local path), generate manifests, and bring the stack up."""
    try:
        settings = load_settings()
    except ValueError as e:
        _fail(str(e), code=2)

    result = Orchestrator(settings=settings).run(repo)

    if ctx.obj['json']:
        _json_output(result.to_dict())
    else:
        _human_output(f"Deployment: {result.deployment_id}")
        _human_output(f"State: {click.style(result.state.value, fg='green' if result.ok else 'red')}")
        if result.profile:
            p = result.profile
            _human_output(f"Stack: {p.frontend.name} / {p.backend.name} / {p.database.name}")
        if result.checkout_path:
            _human_output(f"Checkout: {result.checkout_path}")
        _human_output(result.message)

    sys.exit(0 if result.ok else 1)


@main.command()
@click.argument('path', type=click.Path(exists=True, file_okay=False))
@click.pass_context
def detect(ctx, path):
    """Validate the layout of PATH and detect its stack."""
    snapshot = RepositorySnapshot.scan(path)
    valid = validate(snapshot)
    profile = resolve_profile(snapshot)

    if ctx.obj['json']:
        _json_output({'valid': valid, 'roles': snapshot.roles, 'stack': profile.as_dict()})
    else:
        _human_output(format_report(snapshot, profile))
        if not valid:
            _human_output("\nNot a full-stack layout (frontend, backend and database directories required)")

    sys.exit(0 if valid and profile.is_complete else 1)


@main.command(name='synthesize')
@click.argument('path', type=click.Path(exists=True, file_okay=False))
@click.option('--write', is_flag=True, help='Write the artifacts into PATH instead of printing them')
@click.pass_context
def synthesize_cmd(ctx, path, write):
    """Generate the Dockerfiles, compose manifest and proxy config for PATH."""
    snapshot = RepositorySnapshot.scan(path)
    if not validate(snapshot):
        _fail(f"Not a full-stack app: missing {', '.join(snapshot.missing_roles())} directory")

    profile = resolve_profile(snapshot)
    try:
        ensure_supported(profile)
        port = resolve_backend_port(snapshot, profile.backend)
        artifacts = synthesize(profile, port, snapshot.roles)
    except DeploymentError as e:
        _fail(e.message)

    if write:
        write_artifacts(snapshot.root, artifacts)

    if ctx.obj['json']:
        _json_output({
            'written': write,
            'artifacts': [{'path': a.relative_path, 'content': a.content} for a in artifacts],
        })
    elif write:
        for a in artifacts:
            _human_output(f"wrote {a.relative_path}")
    else:
        for a in artifacts:
            _human_output(f"==> {a.relative_path} <==")
            _human_output(a.content)


if __name__ == '__main__':
    main()
