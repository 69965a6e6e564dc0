# SPDX-License-Identifier: Apache-2.0
# jobmatcher/security.py
"""
Deployment sanity checks behind `jobmatcher check-config`.

Each check returns a SecurityCheck; none of them raise or print.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

HARDCODED_BEARER_RE = re.compile(r"Bearer\s+[A-Za-z0-9_]{10,}")
PLACEHOLDER_RE = re.compile(r"your[_-]?token|<token>|changeme|x{6,}", re.IGNORECASE)


@dataclass
class SecurityCheck:
    name: str
    ok: bool
    message: str
    fix: Optional[str] = None
    blocking: bool = True


def check_token(token: Optional[str]) -> SecurityCheck:
    name = "API token configuration"
    if not token:
        return SecurityCheck(
            name, False, "API_AUTH_TOKEN environment variable is not set",
            "Add API_AUTH_TOKEN=Bearer your_token_here to your .env file",
        )
    if not token.startswith("Bearer "):
        return SecurityCheck(
            name, False, 'API_AUTH_TOKEN should start with "Bearer "',
            "Ensure your token format is: Bearer your_token_here",
        )
    return SecurityCheck(name, True, "API_AUTH_TOKEN is properly configured")


def check_gitignore(root: Path) -> SecurityCheck:
    name = ".gitignore configuration"
    path = root / ".gitignore"
    if not path.is_file():
        return SecurityCheck(
            name, False, "Could not read .gitignore file",
            "Create a .gitignore file that includes .env", blocking=False,
        )
    if ".env" in path.read_text(encoding="utf-8"):
        return SecurityCheck(name, True, ".env file is properly ignored in .gitignore")
    return SecurityCheck(name, False, ".env file is not in .gitignore", 'Add ".env" to your .gitignore file')


def _has_real_token(text: str) -> bool:
    return any(not PLACEHOLDER_RE.search(m.group(0)) for m in HARDCODED_BEARER_RE.finditer(text))


def check_sources(package_dir: Path) -> SecurityCheck:
    name = "Hardcoded secrets in source code"
    offenders = [
        str(p.relative_to(package_dir))
        for p in sorted(package_dir.rglob("*.py"))
        if _has_real_token(p.read_text(encoding="utf-8", errors="ignore"))
    ]
    if offenders:
        return SecurityCheck(
            name, False, f"Found potential hardcoded secrets in: {', '.join(offenders)}",
            "Remove any hardcoded tokens and use environment variables",
        )
    return SecurityCheck(name, True, "No hardcoded secrets found in source code")


def check_env_example(root: Path, token: Optional[str]) -> SecurityCheck:
    name = "Environment file configuration"
    path = root / ".env.example"
    if not path.is_file():
        return SecurityCheck(name, False, "Could not read .env.example file", blocking=False)
    text = path.read_text(encoding="utf-8")
    real_token = token.split(" ", 1)[-1] if token else ""
    leaked = bool(real_token) and real_token in text
    for line in text.splitlines():
        if line.startswith("API_AUTH_TOKEN=") and HARDCODED_BEARER_RE.search(line) and not PLACEHOLDER_RE.search(line):
            leaked = True
    if leaked:
        return SecurityCheck(
            name, False, ".env.example contains actual tokens (should use placeholders)",
            "Replace the token in .env.example with a placeholder",
        )
    return SecurityCheck(name, True, ".env.example properly uses placeholders")


def run_security_checks(root: Path, package_dir: Path, token: Optional[str]) -> List[SecurityCheck]:
    return [
        check_token(token),
        check_gitignore(root),
        check_sources(package_dir),
        check_env_example(root, token),
    ]


def has_blocking_issues(checks: List[SecurityCheck]) -> bool:
    return any(not c.ok and c.blocking for c in checks)
