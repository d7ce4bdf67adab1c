"""
Helpers for building list adapters in CLI contexts.
"""

from __future__ import annotations

from typing import Optional

from ..adapters import ConfigurationError, ListAdapterConfig, SharePointListAdapter
from ..config import SettingsBundle


def build_adapter(
    settings: SettingsBundle,
    *,
    list_id: Optional[str] = None,
    list_title: Optional[str] = None,
) -> SharePointListAdapter:
    """
    Construct an adapter from loaded settings.

    Command-line overrides win over the ``[list]`` section of the settings file.
    """

    if not settings.sharepoint.site_url:
        raise ConfigurationError("No SharePoint site configured. Set sharepoint.site_url in the settings file.")

    config = ListAdapterConfig(
        store_options=settings.sharepoint.as_options(),
        list_title=list_title or settings.list_settings.title or "",
        list_id=list_id or settings.list_settings.guid or "",
    )
    return SharePointListAdapter(config)
