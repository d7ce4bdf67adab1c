"""
Adapter interfaces for remote list stores.

The list adapter translates generic sync requests into store client calls, the
login gate guarantees an authenticated session before any store call, and
concrete HTTP store clients live in :mod:`.api`.
"""

from .api import APIError, SharePointClient
from .base import (
    AdapterError,
    AuthenticationError,
    ConfigurationError,
    ListStoreClient,
    OperationError,
    PreDeleteReadError,
    VerificationResult,
    WrappedError,
)
from .gate import LoginGate, ensure_login
from .list_adapter import CreateResult, ItemRequest, ListAdapterConfig, SharePointListAdapter, create_adapter

__all__ = [
    "APIError",
    "AdapterError",
    "AuthenticationError",
    "ConfigurationError",
    "CreateResult",
    "ItemRequest",
    "ListAdapterConfig",
    "ListStoreClient",
    "LoginGate",
    "OperationError",
    "PreDeleteReadError",
    "SharePointClient",
    "SharePointListAdapter",
    "VerificationResult",
    "WrappedError",
    "create_adapter",
    "ensure_login",
]
