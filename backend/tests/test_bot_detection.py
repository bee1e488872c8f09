"""Tests for bot verification on mutations."""

from unittest.mock import MagicMock, patch

import httpx
import pytest
from starlette.requests import Request

from prodfind.core.bot_detection import BotDetector


def make_request(user_agent: str | None = "Mozilla/5.0 (X11; Linux x86_64)") -> Request:
    headers = []
    if user_agent is not None:
        headers.append((b"user-agent", user_agent.encode()))
    return Request(
        {
            "type": "http",
            "method": "POST",
            "path": "/v1/products/",
            "headers": headers,
            "client": ("203.0.113.7", 5000),
        }
    )


@pytest.fixture
def detector():
    return BotDetector(max_mutations_per_minute=5)


class TestUserAgent:
    def test_browser_allowed(self, detector):
        assert detector.is_bot(make_request(), "user:1") is False

    def test_missing_user_agent(self, detector):
        assert detector.is_bot(make_request(None), "user:1") is True

    @pytest.mark.parametrize(
        "user_agent",
        [
            "Googlebot/2.1 (+http://www.google.com/bot.html)",
            "curl/8.4.0",
            "python-requests/2.31.0",
            "Mozilla/5.0 HeadlessChrome/120.0",
            "Scrapy/2.11",
        ],
    )
    def test_automation_flagged(self, detector, user_agent):
        assert detector.is_bot(make_request(user_agent), "user:1") is True


class TestBurst:
    def test_burst_flagged(self):
        detector = BotDetector(max_mutations_per_minute=2)
        assert detector.is_bot(make_request(), "ip:1") is False
        assert detector.is_bot(make_request(), "ip:1") is False
        assert detector.is_bot(make_request(), "ip:1") is True

    def test_reset(self):
        detector = BotDetector(max_mutations_per_minute=1)
        detector.is_bot(make_request(), "ip:1")
        detector.reset()
        assert detector.is_bot(make_request(), "ip:1") is False


class TestRemoteVerification:
    def _mock_client(self, response=None, error=None):
        client = MagicMock()
        client.__enter__.return_value = client
        if error is not None:
            client.post.side_effect = error
        else:
            client.post.return_value = response
        return client

    def test_remote_says_bot(self):
        detector = BotDetector(5, verify_url="https://verify.example.com/check")
        response = MagicMock()
        response.json.return_value = {"isBot": True}
        client = self._mock_client(response)
        with patch("prodfind.core.bot_detection.httpx.Client", return_value=client):
            assert detector.is_bot(make_request(), "user:1") is True
        _, kwargs = client.post.call_args
        assert kwargs["json"]["ip"] == "203.0.113.7"

    def test_remote_says_human(self):
        detector = BotDetector(5, verify_url="https://verify.example.com/check")
        response = MagicMock()
        response.json.return_value = {"isBot": False}
        with patch(
            "prodfind.core.bot_detection.httpx.Client", return_value=self._mock_client(response)
        ):
            assert detector.is_bot(make_request(), "user:1") is False

    def test_remote_failure_fails_open(self, caplog):
        detector = BotDetector(5, verify_url="https://verify.example.com/check")
        client = self._mock_client(error=httpx.ConnectError("connection refused"))
        with patch("prodfind.core.bot_detection.httpx.Client", return_value=client):
            assert detector.is_bot(make_request(), "user:1") is False
        assert "Bot verification request failed" in caplog.text

    @pytest.mark.parametrize("payload", [[{"isBot": True}], "bot", 1, None])
    def test_remote_non_object_payload_fails_open(self, caplog, payload):
        detector = BotDetector(5, verify_url="https://verify.example.com/check")
        response = MagicMock()
        response.json.return_value = payload
        with patch(
            "prodfind.core.bot_detection.httpx.Client", return_value=self._mock_client(response)
        ):
            assert detector.is_bot(make_request(), "user:1") is False
        assert "unexpected payload" in caplog.text

    def test_remote_not_called_without_url(self, detector):
        with patch("prodfind.core.bot_detection.httpx.Client") as client_cls:
            detector.is_bot(make_request(), "user:1")
        client_cls.assert_not_called()


class TestRejectBotsDependency:
    def test_disabled_lets_automation_through(self, monkeypatch):
        from fastapi.testclient import TestClient

        from prodfind.core.config import settings
        from prodfind.core.database import get_db
        from prodfind.main import app
        from tests.conftest import auth_headers, create_user

        monkeypatch.setattr(settings, "BOT_DETECTION_ENABLED", False)
        db = next(get_db())
        try:
            headers = {**auth_headers(db, create_user(db, "Ada")), "User-Agent": "curl/8.4.0"}
        finally:
            db.close()
        response = TestClient(app).post(
            "/v1/products/", json={"name": "Widget", "price": "Free"}, headers=headers
        )
        assert response.status_code == 201
