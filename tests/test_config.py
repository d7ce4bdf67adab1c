from __future__ import annotations

import pytest

from sharepoint_sync_adapter.config import DEFAULT_TIMEOUT, SharePointSettings, load_settings


def test_load_settings_from_explicit_path(settings_file):
    bundle = load_settings(path=settings_file)

    assert bundle.source_path == settings_file
    assert bundle.sharepoint.site_url == "https://contoso.sharepoint.com/sites/field"
    assert bundle.sharepoint.access_token == "token"
    assert bundle.sharepoint.timeout == 12.0
    assert bundle.list_settings.title == "Jobs"
    assert bundle.list_settings.guid == "123"


def test_load_settings_honours_environment_override(monkeypatch, settings_file):
    monkeypatch.setenv("SHAREPOINT_SYNC_SECRETS_PATH", str(settings_file))

    bundle = load_settings(strict=True)

    assert bundle.source_path == settings_file


def test_load_settings_discovers_secrets_directory(monkeypatch, tmp_path):
    secrets_dir = tmp_path / ".secrets"
    secrets_dir.mkdir()
    (secrets_dir / "secrets.toml").write_text('[sharepoint]\nsite_url = "https://example.com"\ntimeout = -1\n', encoding="utf-8")
    monkeypatch.delenv("SHAREPOINT_SYNC_SECRETS_PATH", raising=False)
    monkeypatch.chdir(tmp_path)

    bundle = load_settings()

    assert bundle.source_path == secrets_dir / "secrets.toml"
    assert bundle.sharepoint.site_url == "https://example.com"
    assert bundle.sharepoint.timeout == DEFAULT_TIMEOUT
    assert bundle.list_settings.guid is None


def test_load_settings_missing_explicit_path_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(path=tmp_path / "absent.toml")


def test_sharepoint_settings_as_options_skips_empty_values():
    settings = SharePointSettings(site_url="https://example.com", username="evan", password=None)

    assert settings.as_options() == {"timeout": DEFAULT_TIMEOUT, "site_url": "https://example.com", "username": "evan"}
