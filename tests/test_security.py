from typer.testing import CliRunner

from jobmatcher import cli
from jobmatcher.security import (
    check_env_example, check_gitignore, check_sources, check_token, has_blocking_issues, run_security_checks,
)

runner = CliRunner()


def _write_project(root, gitignore=".env\n", example="API_AUTH_TOKEN=Bearer your_token_here\n"):
    (root / ".gitignore").write_text(gitignore, encoding="utf-8")
    (root / ".env.example").write_text(example, encoding="utf-8")
    pkg = root / "pkg"
    pkg.mkdir()
    (pkg / "app.py").write_text("import os\nTOKEN = os.environ['API_AUTH_TOKEN']\n", encoding="utf-8")
    return pkg


def test_token_checks():
    assert not check_token(None).ok
    assert not check_token("abc123").ok
    assert check_token("Bearer abc123").ok


def test_gitignore_check(tmp_path):
    missing = check_gitignore(tmp_path)
    assert not missing.ok and not missing.blocking

    (tmp_path / ".gitignore").write_text("__pycache__/\n", encoding="utf-8")
    assert not check_gitignore(tmp_path).ok

    (tmp_path / ".gitignore").write_text(".env\n", encoding="utf-8")
    assert check_gitignore(tmp_path).ok


def test_hardcoded_token_in_sources(tmp_path):
    pkg = _write_project(tmp_path)
    assert check_sources(pkg).ok

    (pkg / "leak.py").write_text('HEADERS = {"Authorization": "Bearer abcdefghijklmnop"}\n', encoding="utf-8")
    result = check_sources(pkg)
    assert not result.ok
    assert "leak.py" in result.message


def test_env_example_must_use_placeholders(tmp_path):
    _write_project(tmp_path)
    assert check_env_example(tmp_path, "Bearer real_token_value_123").ok

    (tmp_path / ".env.example").write_text("API_AUTH_TOKEN=Bearer real_token_value_123\n", encoding="utf-8")
    assert not check_env_example(tmp_path, "Bearer real_token_value_123").ok


def test_run_security_checks(tmp_path):
    pkg = _write_project(tmp_path)
    assert not has_blocking_issues(run_security_checks(tmp_path, pkg, "Bearer abc123"))
    assert has_blocking_issues(run_security_checks(tmp_path, pkg, None))


def test_check_config_command(tmp_path, monkeypatch):
    pkg = _write_project(tmp_path)
    monkeypatch.setattr(cli, "PACKAGE_DIR", pkg)

    monkeypatch.setattr(cli.SETTINGS, "api_auth_token", "Bearer abc123")
    ok = runner.invoke(cli.app, ["check-config", "--root", str(tmp_path)])
    assert ok.exit_code == 0
    assert "ALL SECURITY CHECKS PASSED" in ok.output

    monkeypatch.setattr(cli.SETTINGS, "api_auth_token", None)
    bad = runner.invoke(cli.app, ["check-config", "--root", str(tmp_path)])
    assert bad.exit_code == 1


def test_print_config_never_includes_token(monkeypatch):
    monkeypatch.setattr(cli.SETTINGS, "api_auth_token", "Bearer supersecret")
    config = cli.client_config()
    server = config["mcpServers"]["job-matcher"]
    assert server["args"] == ["-m", "jobmatcher.mcp"]
    assert "API_AUTH_TOKEN" not in server["env"]
    assert "supersecret" not in str(config)


def test_limits_command():
    result = runner.invoke(cli.app, ["limits"])
    assert result.exit_code == 0
    assert "Requests per window" in result.output
