"""
Tests for the deployment state machine. The clone step copies a local tree;
build, teardown and readiness are replaced with fakes.
"""

import re
from unittest.mock import Mock, patch

import pytest
import requests

from stackup.builder import BuildOutcome
from stackup.errors import (
    BuildError, CloneFailure, PortUnresolved, ReadinessTimeout,
    StructureInvalid, SynthesisUnsupported, TechnologyUnknown,
)
from stackup.orchestrator import TRANSITIONS, DeploymentState, Orchestrator
from stackup.recipes.readiness import ReadinessResult

from conftest import FULL_STACK

S = DeploymentState

HAPPY_PATH = [
    S.IDLE, S.CLONING, S.VALIDATING, S.DETECTING,
    S.SYNTHESIZING, S.BUILDING, S.AWAITING_READINESS, S.READY,
]


def ready(*args, **kwargs):
    return ReadinessResult(True, 1, "Ready after 1 attempt(s)")


def never_ready(*args, **kwargs):
    return ReadinessResult(False, 3, "Not ready after 3 attempts: Request failed")


def build_ok(root, argv):
    return BuildOutcome(0, "done")


def checkouts(settings):
    return list(settings.home.iterdir()) if settings.home.exists() else []


def orchestrator(settings, build=build_ok, readiness=ready, teardown=None):
    return Orchestrator(
        settings=settings,
        build=build,
        teardown=teardown or Mock(return_value=BuildOutcome(0, "")),
        readiness=readiness,
    )


class TestHappyPath:

    def test_ready_keeps_checkout_with_artifacts(self, make_repo, settings):
        repo = make_repo(FULL_STACK)
        build = Mock(side_effect=build_ok)
        result = orchestrator(settings, build=build).run(str(repo))

        assert result.ok
        assert result.state is S.READY
        assert result.error is None
        assert result.history == HAPPY_PATH
        assert result.checkout_path is not None
        assert result.checkout_path.parent == settings.home.resolve()
        assert re.fullmatch(r"repo-\d{8}-\d{6}-[0-9a-f]{4}", result.checkout_path.name)
        for rel in ("frontend/Dockerfile", "backend/Dockerfile", "database/Dockerfile",
                    "docker-compose.yml", "nginx.conf", ".dockerignore"):
            assert (result.checkout_path / rel).is_file()
        build.assert_called_once_with(result.checkout_path, ["docker", "compose"])

    def test_readiness_uses_settings(self, make_repo, settings):
        repo = make_repo(FULL_STACK)
        readiness = Mock(side_effect=ready)
        orchestrator(settings, readiness=readiness).run(str(repo))
        readiness.assert_called_once_with(
            "http://localhost:8080/", max_attempts=3, retry_delay=0, timeout=1,
        )

    def test_source_tree_is_untouched(self, make_repo, settings):
        repo = make_repo(FULL_STACK)
        orchestrator(settings).run(str(repo))
        assert not (repo / "docker-compose.yml").exists()

    def test_single_run_per_instance(self, make_repo, settings):
        repo = make_repo(FULL_STACK)
        orch = orchestrator(settings)
        orch.run(str(repo))
        with pytest.raises(RuntimeError):
            orch.run(str(repo))

    def test_to_dict(self, make_repo, settings):
        result = orchestrator(settings).run(str(make_repo(FULL_STACK)))
        payload = result.to_dict()
        assert payload["state"] == "ready"
        assert payload["success"] is True
        assert payload["stack"] == {"frontend": "react-vite", "backend": "nodejs", "database": "postgres"}


class TestFailuresBeforeBuild:

    def _run(self, settings, reference, **kwargs):
        result = orchestrator(settings, **kwargs).run(reference)
        assert result.state is S.FAILED
        assert result.checkout_path is None
        assert checkouts(settings) == []
        return result

    def test_missing_repository(self, settings, tmp_path):
        build = Mock()
        result = self._run(settings, str(tmp_path / "nope"), build=build)
        assert isinstance(result.error, CloneFailure)
        assert result.error.kind == CloneFailure.NOT_FOUND
        assert result.history == [S.IDLE, S.CLONING, S.FAILED]
        build.assert_not_called()

    def test_structure_invalid_deletes_checkout(self, make_repo, settings):
        repo = make_repo({"frontend/package.json": {"dependencies": {"react": "1"}}, "backend/app.js": ""})
        result = self._run(settings, str(repo))
        assert isinstance(result.error, StructureInvalid)
        assert "database" in result.message
        assert result.history == [S.IDLE, S.CLONING, S.VALIDATING, S.FAILED]

    def test_technology_unknown(self, make_repo, settings):
        files = dict(FULL_STACK)
        files["backend/package.json"] = {"name": "api", "main": "server.js", "dependencies": {"express": "4"}}
        result = self._run(settings, str(make_repo(files)))
        assert isinstance(result.error, TechnologyUnknown)
        assert result.error.axis == "database"
        assert result.history[-2] is S.DETECTING
        assert result.profile is not None

    def test_sqlite_is_unsupported(self, make_repo, settings):
        files = dict(FULL_STACK)
        files["backend/package.json"] = {"name": "api", "main": "server.js", "dependencies": {"sqlite3": "5"}}
        result = self._run(settings, str(make_repo(files)))
        assert isinstance(result.error, SynthesisUnsupported)
        assert result.history[-2] is S.SYNTHESIZING

    def test_unsupported_stack_reported_before_port(self, make_repo, settings):
        files = {
            "frontend/package.json": {"dependencies": {"vue": "3"}},
            "backend/requirements.txt": "flask\n",
            "backend/app.py": "if __name__ == '__main__':\n    app.run()\n",
            "database/app.sqlite": b"SQLite format 3\x00",
        }
        result = self._run(settings, str(make_repo(files)))
        assert isinstance(result.error, SynthesisUnsupported)
        assert result.profile.database.name == "sqlite"

    def test_port_unresolved(self, make_repo, settings):
        files = {
            "frontend/package.json": {"dependencies": {"vue": "3"}},
            "backend/requirements.txt": "flask\nredis\n",
            "backend/app.py": "if __name__ == '__main__':\n    app.run()\n",
            "database/.gitkeep": "",
        }
        result = self._run(settings, str(make_repo(files)))
        assert isinstance(result.error, PortUnresolved)


class TestBuildFailures:

    def test_port_conflict_deletes_checkout(self, make_repo, settings):
        def build(root, argv):
            return BuildOutcome(1, "Bind for 0.0.0.0:80 failed: port is already allocated")

        result = orchestrator(settings, build=build).run(str(make_repo(FULL_STACK)))

        assert isinstance(result.error, BuildError)
        assert result.error.kind == BuildError.PORT_CONFLICT
        assert result.history[-2:] == [S.BUILDING, S.FAILED]
        assert result.checkout_path is None
        assert checkouts(settings) == []

    def test_runtime_missing(self, make_repo, settings):
        def build(root, argv):
            return BuildOutcome(127, "Container runtime not found: docker")

        result = orchestrator(settings, build=build).run(str(make_repo(FULL_STACK)))
        assert result.error.kind == BuildError.RUNTIME_UNAVAILABLE

    def test_unexpected_exception_propagates_after_cleanup(self, make_repo, settings):
        def build(root, argv):
            raise KeyError("boom")

        orch = orchestrator(settings, build=build)
        with pytest.raises(KeyError):
            orch.run(str(make_repo(FULL_STACK)))
        assert orch.state is S.FAILED
        assert checkouts(settings) == []


class TestReadinessTimeout:

    def test_timeout_keeps_checkout(self, make_repo, settings):
        teardown = Mock()
        result = orchestrator(settings, readiness=never_ready, teardown=teardown).run(str(make_repo(FULL_STACK)))

        assert isinstance(result.error, ReadinessTimeout)
        assert result.error.attempts == 3
        assert result.history == HAPPY_PATH[:-1] + [S.FAILED]
        assert result.checkout_path is not None and result.checkout_path.is_dir()
        teardown.assert_not_called()

    def test_teardown_on_timeout(self, make_repo, settings):
        settings.teardown_on_timeout = True
        teardown = Mock(return_value=BuildOutcome(0, ""))
        result = orchestrator(settings, readiness=never_ready, teardown=teardown).run(str(make_repo(FULL_STACK)))

        teardown.assert_called_once()
        assert result.checkout_path is None
        assert checkouts(settings) == []

    def test_failed_teardown_keeps_checkout(self, make_repo, settings):
        settings.teardown_on_timeout = True
        teardown = Mock(return_value=BuildOutcome(1, "Cannot connect to the Docker daemon"))
        result = orchestrator(settings, readiness=never_ready, teardown=teardown).run(str(make_repo(FULL_STACK)))

        assert result.checkout_path is not None and result.checkout_path.is_dir()


def test_transition_table():
    assert TRANSITIONS[S.READY] == []
    assert TRANSITIONS[S.FAILED] == []
    for state in HAPPY_PATH[1:-1]:
        assert S.FAILED in TRANSITIONS[state]
    for current, nxt in zip(HAPPY_PATH, HAPPY_PATH[1:]):
        assert nxt in TRANSITIONS[current]


def test_illegal_transition(settings):
    orch = orchestrator(settings)
    with pytest.raises(RuntimeError):
        orch._transition(S.READY)


class TestReadinessPolling:
    """Real poller, patched HTTP client."""

    @patch("stackup.recipes.readiness.time.sleep")
    @patch("stackup.recipes.readiness.requests.get")
    def test_ready_on_last_attempt(self, mock_get, mock_sleep, make_repo, settings):
        ok = Mock(status_code=200)
        mock_get.side_effect = [requests.exceptions.ConnectionError("refused")] * 2 + [ok]
        result = Orchestrator(settings=settings, build=build_ok).run(str(make_repo(FULL_STACK)))

        assert result.state is S.READY
        assert mock_get.call_count == 3

    @patch("stackup.recipes.readiness.time.sleep")
    @patch("stackup.recipes.readiness.requests.get")
    def test_no_attempts_past_the_bound(self, mock_get, mock_sleep, make_repo, settings):
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")
        result = Orchestrator(settings=settings, build=build_ok).run(str(make_repo(FULL_STACK)))

        assert result.state is S.FAILED
        assert isinstance(result.error, ReadinessTimeout)
        assert result.error.attempts == 3
        assert mock_get.call_count == settings.readiness_attempts
