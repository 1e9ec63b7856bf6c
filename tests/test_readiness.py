"""
Tests for readiness polling.
"""

from unittest.mock import Mock, patch

import requests

from stackup.recipes.readiness import poll_readiness, probe


def response(status_code):
    r = Mock()
    r.status_code = status_code
    return r


class TestProbe:

    @patch("stackup.recipes.readiness.requests.get")
    def test_ok_and_redirect_are_ready(self, mock_get):
        mock_get.return_value = response(200)
        assert probe("http://localhost/") is None
        mock_get.return_value = response(302)
        assert probe("http://localhost/") is None

    @patch("stackup.recipes.readiness.requests.get")
    def test_server_error_is_not_ready(self, mock_get):
        mock_get.return_value = response(502)
        assert "502" in probe("http://localhost/")

    @patch("stackup.recipes.readiness.requests.get")
    def test_connection_error_is_not_ready(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")
        assert "refused" in probe("http://localhost/")


class TestPollReadiness:

    @patch("stackup.recipes.readiness.time.sleep")
    @patch("stackup.recipes.readiness.requests.get")
    def test_ready_on_third_attempt(self, mock_get, mock_sleep):
        mock_get.side_effect = [
            requests.exceptions.ConnectionError("refused"),
            response(502),
            response(200),
        ]
        result = poll_readiness("http://localhost/", max_attempts=5, retry_delay=2, timeout=1)

        assert result.success
        assert result.attempts == 3
        assert mock_get.call_count == 3
        assert mock_sleep.call_count == 2
        mock_sleep.assert_called_with(2)
        mock_get.assert_called_with("http://localhost/", timeout=1)

    @patch("stackup.recipes.readiness.time.sleep")
    @patch("stackup.recipes.readiness.requests.get")
    def test_gives_up_after_max_attempts(self, mock_get, mock_sleep):
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")
        result = poll_readiness("http://localhost/", max_attempts=4, retry_delay=1)

        assert not result.success
        assert result.attempts == 4
        assert mock_get.call_count == 4
        # no sleep after the final attempt
        assert mock_sleep.call_count == 3
        assert "refused" in result.message

    @patch("stackup.recipes.readiness.time.sleep")
    @patch("stackup.recipes.readiness.requests.get")
    def test_first_attempt_success_never_sleeps(self, mock_get, mock_sleep):
        mock_get.return_value = response(200)
        result = poll_readiness("http://localhost/")
        assert result.success and result.attempts == 1
        mock_sleep.assert_not_called()
