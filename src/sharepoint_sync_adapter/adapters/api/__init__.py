"""
HTTP store clients for remote list stores.

* :class:`BaseAPIClient` wraps low-level asynchronous HTTPX calls.
* :class:`SharePointClient` implements
  :class:`~sharepoint_sync_adapter.adapters.base.ListStoreClient` on top of the
  SharePoint REST API.
"""

from .base import APIError, BaseAPIClient
from .sharepoint import SharePointClient

__all__ = [
    "APIError",
    "BaseAPIClient",
    "SharePointClient",
]
