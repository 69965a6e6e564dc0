# SPDX-License-Identifier: Apache-2.0
# jobmatcher/matching/backend.py
"""
Client for the job matching backend: one multipart POST per tool call.

No retries: a failed attempt propagates immediately.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from ..mcp.exceptions import BackendError, BackendTransportError
from .validator import ToolRequest

logger = logging.getLogger(__name__)

RESUME_FILENAME = "resume.txt"
DEFAULT_PAGE = 1
DEFAULT_SORT = "similarity"


def _base_headers() -> Dict[str, str]:
    return {
        "Accept": "application/json",
        "User-Agent": "jobmatcher-mcp/1.0",
    }


def build_form_fields(request: ToolRequest) -> Dict[str, str]:
    """Text fields of the multipart body. The backend wants every field present, even blank."""
    return {
        "user_experience": request.user_experience or "",
        "keywords": request.keywords or "",
        "location": request.location or "",
        "start_date": request.start_date or "",
        "end_date": request.end_date or "",
        "page": str(request.page or DEFAULT_PAGE),
        "sort_by": request.sort_by or DEFAULT_SORT,
    }


def _error_payload(resp: requests.Response) -> Dict[str, Any]:
    text = resp.text
    try:
        data = resp.json()
    except ValueError:
        return {"detail": text}
    return data if isinstance(data, dict) else {"detail": data}


class BackendClient:
    def __init__(
        self,
        base_url: str,
        endpoint: str,
        timeout_s: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = f"{base_url.rstrip('/')}{endpoint}"
        self.timeout_s = timeout_s
        self._session = session

    @classmethod
    def from_settings(cls, settings: Any) -> "BackendClient":
        return cls(settings.backend_url, settings.backend_endpoint, settings.request_timeout_s)

    def _get(self) -> requests.Session:
        if self._session is None:
            s = requests.Session()
            s.headers.update(_base_headers())
            self._session = s
        return self._session

    def call(self, request: ToolRequest, secret: str) -> Dict[str, Any]:
        """
        POST the resume + filters and return the decoded JSON body.

        Raises:
            BackendError: non-2xx answer (status + parsed body, or {"detail": raw text})
            BackendTransportError: timeout, connection failure or non-JSON success body
        """
        files = {
            "file": (RESUME_FILENAME, request.resume_text.encode("utf-8"), "text/plain"),
        }
        headers = {**_base_headers(), "Authorization": secret}

        logger.info(
            "Backend call: POST %s (resume=%d chars, page=%s, sort_by=%s)",
            self.url, len(request.resume_text), request.page or DEFAULT_PAGE,
            request.sort_by or DEFAULT_SORT,
        )
        try:
            resp = self._get().post(
                self.url,
                files=files,
                data=build_form_fields(request),
                headers=headers,
                timeout=self.timeout_s,
            )
        except requests.Timeout as e:
            raise BackendTransportError(f"Backend request timed out after {self.timeout_s:g}s") from e
        except requests.RequestException as e:
            raise BackendTransportError(f"Backend request failed: {e}") from e

        if not 200 <= resp.status_code < 300:
            logger.warning("Backend answered %s", resp.status_code)
            raise BackendError(resp.status_code, _error_payload(resp))

        try:
            return resp.json()
        except ValueError as e:
            raise BackendTransportError("Backend returned a non-JSON response") from e
