from __future__ import annotations

from pathlib import Path

import pytest

from sgsst_connector.config import DEFAULT_BASE_URL, DEFAULT_ENDPOINT, ConnectorSettings, load_settings


@pytest.fixture()
def isolated(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("SGSST_SECRETS_PATH", "SGSST_BASE_URL", "SGSST_STORE_DIR", "SGSST_USER"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("sgsst_connector.config._discover_project_root", lambda: None)
    return tmp_path


def test_load_settings_defaults(isolated):
    settings = load_settings()

    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.default_endpoint == DEFAULT_ENDPOINT
    assert settings.max_attempts == 1
    assert settings.schema_mode == "dynamic"
    assert settings.source_path is None


def test_load_settings_strict_without_file(isolated):
    with pytest.raises(FileNotFoundError):
        load_settings(strict=True)


def test_load_settings_reads_secrets_file(isolated):
    secrets_dir = isolated / ".secrets"
    secrets_dir.mkdir()
    (secrets_dir / "secret.toml").write_text(
        '[sgsst]\nbase_url = "https://staging.sgsst.co/api/"\ntimeout = 12\nmax_attempts = 3\n'
        'schema_mode = "static"\nstore_dir = "store"\nuser = "ana"\n',
        encoding="utf-8",
    )

    settings = load_settings()

    assert settings.base_url == "https://staging.sgsst.co/api"
    assert settings.timeout == 12.0
    assert settings.max_attempts == 3
    assert settings.schema_mode == "static"
    assert settings.store_dir == Path("store")
    assert settings.user == "ana"
    assert settings.source_path == secrets_dir / "secret.toml"


def test_environment_overrides_file(isolated, monkeypatch):
    path = isolated / "custom.toml"
    path.write_text('[sgsst]\nbase_url = "https://file.test/api"\nuser = "file-user"\n', encoding="utf-8")
    monkeypatch.setenv("SGSST_SECRETS_PATH", str(path))
    monkeypatch.setenv("SGSST_BASE_URL", "https://env.test/api")
    monkeypatch.setenv("SGSST_USER", "env-user")

    settings = load_settings()

    assert settings.base_url == "https://env.test/api"
    assert settings.user == "env-user"
    assert settings.source_path == path


@pytest.mark.parametrize("kwargs", [{"schema_mode": "guess"}, {"max_attempts": 0}])
def test_settings_validation(kwargs):
    with pytest.raises(ValueError):
        ConnectorSettings(**kwargs)
