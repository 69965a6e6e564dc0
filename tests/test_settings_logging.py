import logging

from jobmatcher.mcp.exceptions import AuthenticationMissingError
from jobmatcher.mcp.secret import Secrets
from jobmatcher.settings import _Settings
from jobmatcher.utils.logging import PIIMask, mask

import pytest


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("BACKEND_URL", "https://backend.example.com/")
    monkeypatch.setenv("RATE_LIMIT_PER_MINUTE", "5")
    monkeypatch.setenv("REQUEST_TIMEOUT_MS", "not-a-number")
    monkeypatch.setenv("TRANSPORT", "HTTP")
    monkeypatch.delenv("API_AUTH_TOKEN", raising=False)

    s = _Settings()
    assert s.backend_full_url == "https://backend.example.com/server/match-resume-upload"
    assert s.rate_limit_per_minute == 5
    assert s.request_timeout_s == 30.0
    assert s.rate_limit_window_s == 60.0
    assert s.transport == "http"
    assert s.api_auth_token is None


def test_token_from_environment(monkeypatch):
    monkeypatch.setenv("API_AUTH_TOKEN", "  Bearer abc  ")
    assert Secrets.get_token() == "Bearer abc"
    assert Secrets.get_token({"API_AUTH_TOKEN": "Bearer x"}) == "Bearer x"
    with pytest.raises(AuthenticationMissingError):
        Secrets.get_token({})


def test_token_from_binding():
    class Env:
        API_AUTH_TOKEN = "Bearer attr"

    assert Secrets.from_binding(Env()) == "Bearer attr"
    assert Secrets.from_binding({"API_AUTH_TOKEN": "Bearer map"}) == "Bearer map"
    with pytest.raises(AuthenticationMissingError):
        Secrets.from_binding(None)


def test_mask_hides_tokens_and_emails():
    assert mask("Authorization: Bearer sk_live_123") == "Authorization: Bearer ***"
    assert mask("API_AUTH_TOKEN=abc123") == "API_AUTH_TOKEN=***"
    assert mask("contact jane.doe@example.com") == "contact jane.doe@***"


def test_pii_filter_masks_args():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "token %s", ("Bearer secret",), None)
    assert PIIMask().filter(record) is True
    assert record.getMessage() == "token Bearer ***"
