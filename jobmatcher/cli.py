# jobmatcher/cli.py
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from jobmatcher.settings import SETTINGS
from jobmatcher.security import has_blocking_issues, run_security_checks

app = typer.Typer(add_completion=False, help="Job Matcher MCP server")

# -----------------------
# Rich Theme (blue + green)
# -----------------------
JOBMATCHER_THEME = Theme({
    "info": "blue",
    "success": "green",
    "warning": "yellow",
    "error": "bold red",
    "table.title": "bold blue",
    "table.header": "green",
})
console = Console(theme=JOBMATCHER_THEME)

PACKAGE_DIR = Path(__file__).resolve().parent


@app.command()
def serve(
    transport: Optional[str] = typer.Option(None, help="stdio or http (defaults to TRANSPORT)"),
    port: Optional[int] = typer.Option(None, help="HTTP port (defaults to PORT)"),
) -> None:
    """Start the MCP server."""
    from jobmatcher.mcp.cli_main import main as run_server

    run_server(transport=transport, port=port)


@app.command("check-config")
def check_config(
    root: Path = typer.Option(Path("."), help="Project root holding .gitignore and .env.example"),
) -> None:
    """Validate the deployment configuration (token, .gitignore, sources, .env.example)."""
    console.print("🔒 [bold]Job Matcher MCP Server - Security Configuration Validator[/bold]\n")

    checks = run_security_checks(root, PACKAGE_DIR, SETTINGS.api_auth_token)
    for i, check in enumerate(checks, start=1):
        console.print(f"{i}. Checking {check.name}...")
        if check.ok:
            console.print(f"   [success]✅ {check.message}[/success]")
        else:
            style = "error" if check.blocking else "warning"
            mark = "❌" if check.blocking else "⚠️ "
            console.print(f"   [{style}]{mark} {check.message}[/{style}]")
            if check.fix:
                console.print(f"   💡 Fix: {check.fix}")

    console.print("\n" + "=" * 60)
    if has_blocking_issues(checks):
        console.print("[error]❌ SECURITY ISSUES FOUND - Please fix the issues above before deployment[/error]")
        raise typer.Exit(code=1)
    console.print("[success]✅ ALL SECURITY CHECKS PASSED - Server is properly configured[/success]")


def client_config() -> Dict[str, Any]:
    """MCP client config for the stdio server. Never embeds the token."""
    env_vars: Dict[str, str] = {"LOG_LEVEL": SETTINGS.log_level}
    if SETTINGS.backend_url:
        env_vars["BACKEND_URL"] = SETTINGS.backend_url
    return {
        "mcpServers": {
            "job-matcher": {
                "command": os.environ.get("PYTHON", sys.executable or "python"),
                "args": ["-m", "jobmatcher.mcp"],
                "env": env_vars,
                "disabled": False,
            }
        }
    }


@app.command("print-config")
def print_config() -> None:
    """Print a Claude Desktop configuration snippet."""
    console.print("\n📋 Add this to Claude Desktop (Settings → Developer → Edit Config):\n")
    console.print_json(json.dumps(client_config()))
    console.print(
        "\n⚠️  Set API_AUTH_TOKEN in your OS environment or .env, e.g.:\n"
        "   export API_AUTH_TOKEN='Bearer YOUR_TOKEN'\n"
        "   # (Do NOT paste your token into the Claude config file.)\n",
        style="warning",
    )


@app.command()
def limits() -> None:
    """Show the effective validation and rate-limit settings."""
    table = Table(title="Job Matcher Limits", title_style="table.title", header_style="table.header")
    table.add_column("Setting", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Requests per window", str(SETTINGS.rate_limit_per_minute))
    table.add_row("Window", f"{SETTINGS.rate_limit_window_s:g}s")
    table.add_row("Resume length", f"{SETTINGS.min_resume_length:,} - {SETTINGS.max_resume_length:,} chars")
    table.add_row("Backend timeout", f"{SETTINGS.request_timeout_s:g}s")
    table.add_row("Backend", SETTINGS.backend_full_url)
    table.add_row("Transport", SETTINGS.transport)
    console.print(table)


if __name__ == "__main__":
    app()
