"""
Tests for the click CLI.
"""

import json

from click.testing import CliRunner

from stackup.cli.main import main

from conftest import FULL_STACK


def last_json(output):
    # log records may share the captured stream; the payload is the last line
    return json.loads(output.strip().splitlines()[-1])


class TestDetect:

    def test_detect_json(self, make_repo):
        repo = make_repo(FULL_STACK)
        result = CliRunner().invoke(main, ["--json", "detect", str(repo)])

        assert result.exit_code == 0
        data = last_json(result.output)
        assert data["valid"] is True
        assert data["roles"] == {"frontend": "frontend", "backend": "backend", "database": "database"}
        assert data["stack"]["frontend"]["name"] == "react-vite"
        assert data["stack"]["backend"]["details"] == {"entry": "server.js"}
        assert data["stack"]["database"]["name"] == "postgres"

    def test_detect_human(self, make_repo):
        repo = make_repo(FULL_STACK)
        result = CliRunner().invoke(main, ["detect", str(repo)])
        assert result.exit_code == 0
        assert "react-vite" in result.output

    def test_detect_invalid_layout(self, make_repo):
        repo = make_repo({"frontend/index.html": "<html></html>"})
        result = CliRunner().invoke(main, ["--json", "detect", str(repo)])
        assert result.exit_code == 1
        data = last_json(result.output)
        assert data["valid"] is False
        assert data["stack"]["backend"]["name"] == "unknown"

    def test_missing_path(self, tmp_path):
        result = CliRunner().invoke(main, ["detect", str(tmp_path / "nope")])
        assert result.exit_code == 2


class TestSynthesize:

    def test_print_does_not_write(self, make_repo):
        repo = make_repo(FULL_STACK)
        result = CliRunner().invoke(main, ["--json", "synthesize", str(repo)])

        assert result.exit_code == 0
        data = last_json(result.output)
        assert data["written"] is False
        paths = [a["path"] for a in data["artifacts"]]
        assert paths[0] == "frontend/Dockerfile"
        assert "docker-compose.yml" in paths
        assert not (repo / "docker-compose.yml").exists()

    def test_write(self, make_repo):
        repo = make_repo(FULL_STACK)
        result = CliRunner().invoke(main, ["synthesize", "--write", str(repo)])

        assert result.exit_code == 0
        assert "wrote docker-compose.yml" in result.output
        assert (repo / "docker-compose.yml").is_file()
        assert "EXPOSE 5000" in (repo / "backend" / "Dockerfile").read_text()

    def test_unsupported_stack(self, make_repo):
        files = dict(FULL_STACK)
        files["backend/package.json"] = {"name": "api", "dependencies": {"express": "4"}}
        repo = make_repo(files)
        result = CliRunner().invoke(main, ["--json", "synthesize", str(repo)])

        assert result.exit_code == 1
        assert "unknown database" in last_json(result.output)["error"]
        assert not (repo / "docker-compose.yml").exists()


    def test_unknown_backend_is_unsupported_not_unresolved(self, make_repo):
        repo = make_repo({
            "frontend/package.json": {"dependencies": {"react": "18"}},
            "backend/main.go": "package main\n",
            "database/.env": "REDIS_URL=redis://db:6379\n",
        })
        result = CliRunner().invoke(main, ["--json", "synthesize", str(repo)])

        assert result.exit_code == 1
        error = last_json(result.output)["error"]
        assert "unknown backend" in error
        assert "port" not in error.lower()


class TestDeploy:

    def test_deploy_rejects_bad_settings(self, monkeypatch):
        monkeypatch.setenv("STACKUP_READINESS_ATTEMPTS", "lots")
        result = CliRunner().invoke(main, ["deploy", "https://github.com/acme/shop"])
        assert result.exit_code == 2
        assert "STACKUP_READINESS_ATTEMPTS" in result.output
