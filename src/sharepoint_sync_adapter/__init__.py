"""
SharePoint list adapter for create/read/update/delete/list sync integrations.

:class:`SharePointListAdapter` is the main developer-facing surface; build one
with :func:`create_adapter` from ``{"sharepoint": {...}, "title": ..., "guid": ...}``
options or directly from a :class:`ListAdapterConfig`.
"""

from .adapters import (
    AdapterError,
    AuthenticationError,
    ConfigurationError,
    CreateResult,
    ItemRequest,
    ListAdapterConfig,
    OperationError,
    PreDeleteReadError,
    SharePointClient,
    SharePointListAdapter,
    create_adapter,
)

__all__ = [
    "AdapterError",
    "AuthenticationError",
    "ConfigurationError",
    "CreateResult",
    "ItemRequest",
    "ListAdapterConfig",
    "OperationError",
    "PreDeleteReadError",
    "SharePointClient",
    "SharePointListAdapter",
    "create_adapter",
]
