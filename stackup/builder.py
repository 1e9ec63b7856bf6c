"""
docker compose wrapper for the build-and-start step.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List

from .recipes.compose import COMPOSE_FILE

logger = logging.getLogger(__name__)


@dataclass
class BuildOutcome:
    """Exit status and combined stdout/stderr of one compose invocation."""
    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_compose(root: Path, compose_argv: List[str], args: List[str]) -> BuildOutcome:
    """
    Run a compose command against the generated manifest in root.

    Args:
        root: Checkout root holding docker-compose.yml
        compose_argv: Compose executable, e.g. ["docker", "compose"]
        args: Subcommand and flags

    Returns:
        BuildOutcome; a missing executable is reported as exit status 127
    """
    command = list(compose_argv) + ["-f", COMPOSE_FILE] + list(args)
    logger.info(f"Running {' '.join(command)} in {root}")

    try:
        process = subprocess.Popen(
            command,
            cwd=root,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1,
        )
    except FileNotFoundError:
        return BuildOutcome(127, f"Container runtime not found: {command[0]}")

    output_lines = []
    for line in process.stdout:
        line = line.rstrip()
        output_lines.append(line)
        logger.debug(line)

    process.wait()
    output = "\n".join(output_lines)

    if process.returncode != 0:
        # Keep the log readable; the full output travels with the error
        error_lines = output_lines[-40:] if len(output_lines) > 40 else output_lines
        logger.error(f"{' '.join(command)} exited with {process.returncode}:\n" + "\n".join(error_lines))
    return BuildOutcome(process.returncode, output)


def build_and_start(root: Path, compose_argv: List[str]) -> BuildOutcome:
    return run_compose(root, compose_argv, ["up", "--build", "-d"])


def tear_down(root: Path, compose_argv: List[str]) -> BuildOutcome:
    return run_compose(root, compose_argv, ["down", "--remove-orphans"])
