"""
Settings helpers for the SharePoint sync adapter.

Settings are loaded from ``.secrets/secret.toml`` by default. The lookup order is:

1. Explicit ``SHAREPOINT_SYNC_SECRETS_PATH`` environment variable.
2. Project-relative ``.secrets/secret.toml`` (both from CWD and the package root).
3. Project-relative ``.secrets/secrets.toml``.
4. Fallback to ``.secrets/secrets.example.toml`` for scaffolding values.

A settings file looks like::

    [sharepoint]
    site_url = "https://contoso.sharepoint.com/sites/field"
    access_token = "..."

    [list]
    title = "Jobs"
    guid = "6f1c1f3e-0000-0000-0000-000000000000"

Call :func:`load_settings` to retrieve a :class:`SettingsBundle` instance.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

DEFAULT_TIMEOUT = 30.0
_ENV_SECRETS_PATH = "SHAREPOINT_SYNC_SECRETS_PATH"


@dataclass(slots=True)
class SharePointSettings:
    """Site location and credentials for the SharePoint REST API."""

    site_url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    access_token: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT

    def as_options(self) -> Dict[str, Any]:
        """Return the settings as the options mapping accepted by the store client."""

        options: Dict[str, Any] = {"timeout": self.timeout}
        for key in ("site_url", "username", "password", "access_token"):
            value = getattr(self, key)
            if value:
                options[key] = value
        return options


@dataclass(slots=True)
class ListSettings:
    """Identity of the SharePoint list the adapter is bound to."""

    title: Optional[str] = None
    guid: Optional[str] = None


@dataclass(slots=True)
class SettingsBundle:
    """Lightweight container for parsed settings values."""

    source_path: Optional[Path]
    data: Dict[str, Dict[str, object]]
    sharepoint: SharePointSettings = field(default_factory=SharePointSettings)
    list_settings: ListSettings = field(default_factory=ListSettings)


def _discover_project_root() -> Optional[Path]:
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / "pyproject.toml").is_file():
            return parent
    return None


def _candidate_paths() -> Iterable[Path]:
    env_override = os.getenv(_ENV_SECRETS_PATH)
    if env_override:
        yield Path(env_override).expanduser()

    def secrets_paths(base: Path) -> Iterable[Path]:
        secrets_dir = base / ".secrets"
        for filename in ("secret.toml", "secrets.toml"):
            yield secrets_dir / filename
        yield secrets_dir / "secrets.example.toml"

    search_roots = [Path.cwd()]
    package_root = _discover_project_root()
    if package_root and package_root not in search_roots:
        search_roots.append(package_root)

    seen: set[Path] = set()
    for base in search_roots:
        for candidate in secrets_paths(base):
            if candidate not in seen:
                seen.add(candidate)
                yield candidate


def _load_toml(path: Path) -> Dict[str, Dict[str, object]]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _section(raw: Dict[str, Dict[str, object]], name: str) -> Dict[str, object]:
    section = raw.get(name, {}) if isinstance(raw, dict) else {}
    return section if isinstance(section, dict) else {}


def _extract_str(section: Dict[str, object], key: str) -> Optional[str]:
    value = section.get(key)
    return str(value) if isinstance(value, str) and value else None


def _extract_sharepoint_settings(raw: Dict[str, Dict[str, object]]) -> SharePointSettings:
    section = _section(raw, "sharepoint")
    timeout = section.get("timeout")
    return SharePointSettings(
        site_url=_extract_str(section, "site_url"),
        username=_extract_str(section, "username"),
        password=_extract_str(section, "password"),
        access_token=_extract_str(section, "access_token"),
        timeout=float(timeout) if isinstance(timeout, (int, float)) and timeout > 0 else DEFAULT_TIMEOUT,
    )


def _extract_list_settings(raw: Dict[str, Dict[str, object]]) -> ListSettings:
    section = _section(raw, "list")
    return ListSettings(title=_extract_str(section, "title"), guid=_extract_str(section, "guid"))


def load_settings(strict: bool = False, *, path: Optional[Path] = None) -> SettingsBundle:
    """
    Attempt to load settings from the configured locations.

    Parameters
    ----------
    strict:
        When ``True`` the function raises ``FileNotFoundError`` if no settings file is
        discovered. Defaults to ``False`` for ease of use in development environments.
    path:
        Explicit settings file. Takes precedence over every discovered location.
    """

    candidates = [path] if path is not None else _candidate_paths()
    for candidate in candidates:
        if candidate.is_file():
            data = _load_toml(candidate)
            return SettingsBundle(
                source_path=candidate,
                data=data,
                sharepoint=_extract_sharepoint_settings(data),
                list_settings=_extract_list_settings(data),
            )

    if strict or path is not None:
        raise FileNotFoundError(f"No settings file found. Configure {_ENV_SECRETS_PATH} or .secrets/secret.toml.")

    return SettingsBundle(source_path=None, data={})
