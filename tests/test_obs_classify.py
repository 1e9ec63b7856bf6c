"""
Tests for build failure classification.
"""

import pytest

from stackup.errors import BuildError
from stackup.obs import FailureClassifier, FailureRule, build_error_from_output, classify_build_output


class TestFailureClassifier:
    """Test build output classification."""

    @pytest.mark.parametrize("output", [
        "Error response from daemon: driver failed programming external connectivity: "
        "Bind for 0.0.0.0:80 failed: port is already allocated",
        "Error starting userland proxy: listen tcp4 0.0.0.0:5432: bind: address already in use",
        "Error: listen EADDRINUSE: address already in use :::5000",
    ])
    def test_port_conflict(self, output):
        assert classify_build_output(output) == BuildError.PORT_CONFLICT

    @pytest.mark.parametrize("output", [
        "Cannot connect to the Docker daemon at unix:///var/run/docker.sock. Is the docker daemon running?",
        "Container runtime not found: docker",
        "docker: 'compose' is not a docker command.",
    ])
    def test_runtime_unavailable(self, output):
        assert classify_build_output(output) == BuildError.RUNTIME_UNAVAILABLE

    def test_unmatched_output_is_other(self):
        output = "npm ERR! code ELIFECYCLE\nfailed to solve: process \"/bin/sh -c npm run build\" did not complete"
        assert classify_build_output(output) == BuildError.OTHER

    def test_error_carries_output_and_hint(self):
        output = "step 1/9\n" * 50 + "Bind for 0.0.0.0:80 failed: port is already allocated"
        error = build_error_from_output(output)

        assert isinstance(error, BuildError)
        assert error.kind == BuildError.PORT_CONFLICT
        assert "already in use" in error.message
        assert error.output == output

        payload = error.to_dict()
        assert payload["code"] == "build_error"
        assert len(payload["output"].splitlines()) == 40
        assert payload["output"].endswith("port is already allocated")

    def test_generic_error(self):
        error = build_error_from_output("exit status 1")
        assert error.kind == BuildError.OTHER
        assert error.message == "Build failed"

    def test_custom_rule_is_evaluated_last(self):
        classifier = FailureClassifier()
        classifier.add_custom_rule(FailureRule(
            id="disk_full",
            kind=BuildError.OTHER,
            regexes=[r"no space left on device"],
            message="Docker ran out of disk",
            hint="Prune unused images",
        ))

        rule = classifier.classify_message("write /var/lib/docker: no space left on device")
        assert rule is not None and rule.id == "disk_full"
        # built-in rules still win on their own signatures
        assert classifier.classify_message("port is already allocated").id == "address_in_use"
