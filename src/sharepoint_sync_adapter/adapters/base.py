"""
Base protocols and error types for list store adapters.

Adapters are intentionally narrow in scope: they translate a generic sync
caller's create/read/update/delete/list requests into calls on a store client
and reshape the results. Transport concerns (HTTP, credentials, timeouts) live
in the store client so adapters can be exercised against any implementation
of :class:`ListStoreClient`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Mapping, MutableMapping, Optional, Protocol


class AdapterError(RuntimeError):
    """Raised when an adapter encounters a non-recoverable error."""


class ConfigurationError(AdapterError, ValueError):
    """Raised when an adapter is constructed with structurally invalid options."""


class WrappedError(AdapterError):
    """
    Error carrying a contextual message plus the original failure.

    The string form is ``"<context>: <cause>"`` so callers can match on either
    part. The original exception is also chained as ``__cause__`` by the code
    raising the error.
    """

    def __init__(self, context: str, cause: BaseException, *, list_id: str, item_id: Any = None) -> None:
        self.context = context
        self.cause = cause
        self.list_id = list_id
        self.item_id = item_id
        super().__init__(f"{context}: {cause}")


class AuthenticationError(WrappedError):
    """Raised when logging in to the remote store fails."""

    operation = "login"


class OperationError(WrappedError):
    """Raised when a store call fails after authentication succeeded."""

    def __init__(self, operation: str, context: str, cause: BaseException, *, list_id: str, item_id: Any = None) -> None:
        self.operation = operation
        super().__init__(context, cause, list_id=list_id, item_id=item_id)


class PreDeleteReadError(OperationError):
    """Raised when the read preceding a delete fails; the delete is never attempted."""


@dataclass(slots=True)
class VerificationResult:
    """
    Structured response returned by adapter verification routines.

    Attributes
    ----------
    success:
        Indicates whether the verification succeeded.
    message:
        Human-readable summary.
    details:
        Optional structured metadata such as the list identifier or item count.
    """

    success: bool
    message: str
    details: Optional[Mapping[str, object]] = None


class ListStoreClient(Protocol):
    """
    Capabilities a remote list store client must provide.

    Records returned by ``create_item`` carry an ``itemId`` field, and
    ``read_list`` returns a mapping with an ``Items`` sequence whose records
    each carry ``itemId``.
    """

    async def login(self) -> None:
        """Establish an authenticated session."""

    async def create_item(self, list_id: str, data: Mapping[str, Any]) -> Mapping[str, Any]:
        """Create an item and return the stored record."""

    async def read_item(self, list_id: str, item_id: Hashable) -> Mapping[str, Any]:
        """Return a single item record."""

    async def update_item(self, list_id: str, data: MutableMapping[str, Any]) -> Mapping[str, Any]:
        """Update the item identified by ``data["itemId"]``."""

    async def delete_item(self, list_id: str, item_id: Hashable) -> None:
        """Remove an item. Returns no body."""

    async def read_list(self, list_id: str) -> Mapping[str, Any]:
        """Return the whole list as ``{"Items": [...]}``."""
