import pytest

from jobmatcher.mcp import cli_main, server


def test_missing_token_exits_with_1(monkeypatch):
    monkeypatch.delenv("API_AUTH_TOKEN", raising=False)
    monkeypatch.setattr(cli_main, "configure_logging", lambda **kw: None)
    with pytest.raises(SystemExit) as exc:
        cli_main.main(transport="stdio")
    assert exc.value.code == 1


def test_unknown_transport_exits_with_1(monkeypatch):
    monkeypatch.setenv("API_AUTH_TOKEN", "Bearer abc123")
    monkeypatch.setattr(cli_main, "configure_logging", lambda **kw: None)
    with pytest.raises(SystemExit) as exc:
        cli_main.main(transport="carrier-pigeon")
    assert exc.value.code == 1


def test_stdio_uses_startup_token(monkeypatch):
    monkeypatch.setenv("API_AUTH_TOKEN", "Bearer startup")
    monkeypatch.setattr(cli_main, "configure_logging", lambda **kw: None)
    monkeypatch.setattr(cli_main.signal, "signal", lambda *a: None)
    seen = {}

    class FakeServer:
        def run(self, transport):
            seen["transport"] = transport

    def fake_create(secret_provider=None):
        seen["token"] = secret_provider()
        return FakeServer()

    monkeypatch.setattr(server, "create_mcp_server", fake_create)
    cli_main.main(transport="stdio")
    assert seen == {"token": "Bearer startup", "transport": "stdio"}


def test_keyboard_interrupt_exits_cleanly(monkeypatch):
    monkeypatch.setenv("API_AUTH_TOKEN", "Bearer abc123")
    monkeypatch.setattr(cli_main, "configure_logging", lambda **kw: None)
    monkeypatch.setattr(cli_main.signal, "signal", lambda *a: None)

    def interrupted(**kwargs):
        raise KeyboardInterrupt

    monkeypatch.setattr(server, "create_mcp_server", interrupted)
    with pytest.raises(SystemExit) as exc:
        cli_main.main(transport="stdio")
    assert exc.value.code == 0
