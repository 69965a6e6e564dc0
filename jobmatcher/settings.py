# SPDX-License-Identifier: Apache-2.0
# jobmatcher/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv
load_dotenv()  # load .env early

DEFAULT_BACKEND_URL = "https://job-board-aggregator.onrender.com"
DEFAULT_BACKEND_ENDPOINT = "/server/match-resume-upload"

TRUTHY = {"1", "true", "yes", "on", "y", "t"}


def _env_str(name: str, default: str) -> str:
    v = os.getenv(name)
    return v.strip() if v and v.strip() else default


def _env_int(name: str, default: int) -> int:
    try:
        return int((os.getenv(name, "") or str(default)).strip())
    except Exception:
        return default


def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in TRUTHY


def _env_secret(name: str) -> Optional[str]:
    v = (os.getenv(name) or "").strip()
    return v or None


@dataclass
class _Settings:
    # Backend
    backend_url: str = field(default_factory=lambda: _env_str("BACKEND_URL", DEFAULT_BACKEND_URL))
    backend_endpoint: str = field(
        default_factory=lambda: _env_str("BACKEND_ENDPOINT", DEFAULT_BACKEND_ENDPOINT)
    )
    api_auth_token: Optional[str] = field(default_factory=lambda: _env_secret("API_AUTH_TOKEN"))
    request_timeout_ms: int = field(default_factory=lambda: _env_int("REQUEST_TIMEOUT_MS", 30000))

    # Rate limiting
    rate_limit_per_minute: int = field(default_factory=lambda: _env_int("RATE_LIMIT_PER_MINUTE", 10))
    rate_limit_window_ms: int = field(default_factory=lambda: _env_int("RATE_LIMIT_WINDOW_MS", 60000))
    cleanup_interval_s: int = field(default_factory=lambda: _env_int("CLEANUP_INTERVAL_S", 300))

    # Resume bounds
    min_resume_length: int = field(default_factory=lambda: _env_int("MIN_RESUME_LENGTH", 500))
    max_resume_length: int = field(default_factory=lambda: _env_int("MAX_RESUME_LENGTH", 15000))

    # Transport
    transport: str = field(default_factory=lambda: _env_str("TRANSPORT", "stdio").lower())
    host: str = field(default_factory=lambda: _env_str("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _env_int("PORT", 3000))
    sse_keepalive_s: int = field(default_factory=lambda: _env_int("SSE_KEEPALIVE_S", 30))

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    log_json: bool = field(default_factory=lambda: _env_bool("LOG_JSON", False))

    @property
    def backend_full_url(self) -> str:
        return f"{self.backend_url.rstrip('/')}{self.backend_endpoint}"

    @property
    def request_timeout_s(self) -> float:
        return self.request_timeout_ms / 1000.0

    @property
    def rate_limit_window_s(self) -> float:
        return self.rate_limit_window_ms / 1000.0


SETTINGS = _Settings()
