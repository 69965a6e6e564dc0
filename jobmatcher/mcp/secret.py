# SPDX-License-Identifier: Apache-2.0
# Env-only secret accessors for the job matcher server

from __future__ import annotations

import os
from typing import Any, Callable, Mapping, Optional

from .exceptions import AuthenticationMissingError

TOKEN_ENV = "API_AUTH_TOKEN"

SecretProvider = Callable[[], str]


class Secrets:
    """Env-only token accessor. No keyring, no prompts, no logging."""

    @staticmethod
    def get_token(environ: Optional[Mapping[str, str]] = None) -> str:
        """
        Returns the backend Authorization header value (e.g. 'Bearer ...').
        Raises AuthenticationMissingError if missing.
        """
        env = os.environ if environ is None else environ
        raw = (env.get(TOKEN_ENV) or "").strip()
        if not raw:
            raise AuthenticationMissingError(
                f"{TOKEN_ENV} environment variable is required. "
                "Please set it in your .env file or environment."
            )
        return raw

    @staticmethod
    def from_binding(env: Any) -> str:
        """
        Read the token from an edge-worker env binding (attribute or mapping access).
        Only valid during request handling.
        """
        raw = None
        if env is not None:
            raw = getattr(env, TOKEN_ENV, None)
            if raw is None and isinstance(env, Mapping):
                raw = env.get(TOKEN_ENV)
        raw = (raw or "").strip() if isinstance(raw, str) else ""
        if not raw:
            raise AuthenticationMissingError(
                f"{TOKEN_ENV} binding is required. "
                f"Please set it using: wrangler secret put {TOKEN_ENV}"
            )
        return raw


def static_provider(token: str) -> SecretProvider:
    """Provider for a token already checked at startup."""
    return lambda: token
