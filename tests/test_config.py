import pytest

from gum.config import load_settings, parse_addr, parse_redirect
from gum.errors import ConfigurationError
from gum.main import build_server
from gum.runner import build_parser, main, resolve_settings


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for key in (
        "PORT",
        "GUM_HOST",
        "GUM_PORT",
        "GUM_REDIRECTS",
        "GUM_STATIC_ROOTS",
        "GUM_JEKYLL_ROOT",
        "GUM_DOCUMENT_EXTENSIONS",
        "GUM_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


def test_defaults(clean_env):
    s = load_settings()
    assert (s.host, s.port) == ("localhost", 8080)
    assert s.redirects == []
    assert s.document_extensions == [".html"]


def test_env_values(clean_env, tmp_path):
    clean_env.setenv("GUM_PORT", "9000")
    clean_env.setenv("PORT", "9100")
    clean_env.setenv("GUM_REDIRECTS", "w=/wiki/, +=https://example.com/?a=b")
    clean_env.setenv("GUM_STATIC_ROOTS", str(tmp_path))
    clean_env.setenv("GUM_LOG_LEVEL", "debug")
    s = load_settings()
    assert s.port == 9100
    assert [(r.prefix, r.destination) for r in s.redirects] == [
        ("w", "/wiki/"),
        ("+", "https://example.com/?a=b"),
    ]
    assert s.static_roots == [str(tmp_path)]
    assert s.log_level == "DEBUG"


def test_dotenv_does_not_override(clean_env, tmp_path):
    (tmp_path / ".env").write_text("GUM_HOST=0.0.0.0\nGUM_PORT=7000\n# comment\n")
    clean_env.setenv("GUM_HOST", "")
    clean_env.setenv("GUM_PORT", "7100")
    s = load_settings()
    assert s.host == "0.0.0.0"
    assert s.port == 7100


def test_invalid_values(clean_env):
    clean_env.setenv("GUM_PORT", "not-a-port")
    with pytest.raises(ConfigurationError):
        load_settings()
    with pytest.raises(ConfigurationError):
        parse_redirect("no-equals")
    with pytest.raises(ConfigurationError):
        parse_addr("8080")


def test_cli_flags_override_env(clean_env, tmp_path):
    args = build_parser().parse_args(
        ["--addr", ":9999", "--redirect", "x=http://example/", "--static", str(tmp_path)]
    )
    s = resolve_settings(args, load_settings())
    assert (s.host, s.port) == ("localhost", 9999)
    assert s.redirects[0].prefix == "x"
    server = build_server(s)
    try:
        assert len(server._handlers) == 2
    finally:
        server.close()


def test_missing_static_root_is_fatal(clean_env, tmp_path, monkeypatch):
    import gum.runner

    monkeypatch.setattr(gum.runner.uvicorn, "run", lambda *a, **kw: pytest.fail("server started"))
    assert main(["--static", str(tmp_path / "missing")]) == 2


def test_version(clean_env, capsys):
    assert main(["--version"]) == 0
    assert "gum" in capsys.readouterr().out
