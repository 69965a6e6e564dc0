# SPDX-License-Identifier: Apache-2.0
"""
Per-session sliding-window rate limiter.

Each session keeps the raw timestamps of its allowed requests; every check
drops timestamps older than the window and compares the remainder against
the limit. State lives in memory only: it is lost on restart and is not
shared between processes.

cleanup() is housekeeping and is never scheduled from here; the HTTP
front-end runs it from a background task.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List


@dataclass
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_time: float          # epoch seconds
    request_count: int
    limit: int


@dataclass
class _SessionRecord:
    requests: List[float] = field(default_factory=list)


class RateLimiter:
    """Thread-safe: one lock guards the session map."""

    def __init__(
        self,
        requests_per_window: int = 10,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.limit = requests_per_window
        self.window_seconds = window_seconds
        self._clock = clock
        self._sessions: Dict[str, _SessionRecord] = {}
        self._lock = threading.Lock()

    # ---------------------------
    # Internals (lock held)
    # ---------------------------
    def _record(self, session_id: str) -> _SessionRecord:
        rec = self._sessions.get(session_id)
        if rec is None:
            rec = _SessionRecord()
            self._sessions[session_id] = rec
        return rec

    def _pruned(self, requests: List[float], now: float) -> List[float]:
        cutoff = now - self.window_seconds
        return [ts for ts in requests if ts > cutoff]

    def _result(self, allowed: bool, requests: List[float], now: float) -> RateLimitResult:
        reset_time = (requests[0] + self.window_seconds) if requests else now
        return RateLimitResult(
            allowed=allowed,
            remaining=max(0, self.limit - len(requests)),
            reset_time=reset_time,
            request_count=len(requests),
            limit=self.limit,
        )

    # ---------------------------
    # Public API
    # ---------------------------
    def check_limit(self, session_id: str) -> RateLimitResult:
        """Count this request if the session is under its limit."""
        with self._lock:
            now = self._clock()
            rec = self._record(session_id)
            rec.requests = self._pruned(rec.requests, now)

            if len(rec.requests) >= self.limit:
                return self._result(False, rec.requests, now)

            rec.requests.append(now)
            return self._result(True, rec.requests, now)

    def would_allow(self, session_id: str) -> RateLimitResult:
        """Same answer as check_limit() without recording anything."""
        with self._lock:
            now = self._clock()
            rec = self._sessions.get(session_id)
            requests = self._pruned(rec.requests, now) if rec else []
            return self._result(len(requests) < self.limit, requests, now)

    def get_status(self, session_id: str) -> Dict[str, Any]:
        with self._lock:
            now = self._clock()
            rec = self._record(session_id)
            rec.requests = self._pruned(rec.requests, now)
            res = self._result(len(rec.requests) < self.limit, rec.requests, now)
        return {
            "request_count": res.request_count,
            "remaining": res.remaining,
            "reset_time": res.reset_time,
            "limit": self.limit,
            "window_seconds": self.window_seconds,
        }

    def reset_user(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def reset_all(self) -> None:
        with self._lock:
            self._sessions.clear()

    def cleanup(self) -> int:
        """Drop sessions with no requests left in the window. Returns how many were removed."""
        with self._lock:
            now = self._clock()
            stale = []
            for session_id, rec in self._sessions.items():
                rec.requests = self._pruned(rec.requests, now)
                if not rec.requests:
                    stale.append(session_id)
            for session_id in stale:
                del self._sessions[session_id]
            return len(stale)

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            now = self._clock()
            stats = {
                "total_users": len(self._sessions),
                "active_users": 0,
                "total_requests": 0,
                "users_at_limit": 0,
                "configuration": {
                    "requests_per_window": self.limit,
                    "window_seconds": self.window_seconds,
                },
            }
            for rec in self._sessions.values():
                rec.requests = self._pruned(rec.requests, now)
                if rec.requests:
                    stats["active_users"] += 1
                    stats["total_requests"] += len(rec.requests)
                    if len(rec.requests) >= self.limit:
                        stats["users_at_limit"] += 1
            return stats

    def time_until_reset(self, session_id: str) -> float:
        """Seconds until the next request would be allowed; 0 if allowed now."""
        status = self.would_allow(session_id)
        if status.allowed:
            return 0.0
        return max(0.0, status.reset_time - self._clock())

    def time_until_reset_formatted(self, session_id: str) -> str:
        remaining = self.time_until_reset(session_id)
        if remaining == 0:
            return "Available now"
        seconds = math.ceil(remaining)
        if seconds < 60:
            return f"{seconds} second{'' if seconds == 1 else 's'}"
        minutes = math.ceil(seconds / 60)
        return f"{minutes} minute{'' if minutes == 1 else 's'}"

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
