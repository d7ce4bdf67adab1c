"""
Lazy login gate shared by the operations of a list adapter.

Every store call must happen inside an authenticated session. The gate logs in
on first use and remembers the outcome for the lifetime of the adapter that
owns it. There is no expiry handling: once a login succeeds the gate never
checks again, and a server-side session timeout surfaces as an ordinary
operation error.
"""

from __future__ import annotations

import functools
import logging
from logging import LoggerAdapter
from typing import Any, Awaitable, Callable, TypeVar

from ..core.logging import log_progress
from .base import AuthenticationError, ListStoreClient

T = TypeVar("T")


class LoginGate:
    """
    Session state for one adapter instance.

    Concurrent operations issued before the first login completes each start
    their own login; calls are neither queued nor coalesced.
    """

    def __init__(self, client: ListStoreClient, list_id: str, logger: LoggerAdapter) -> None:
        self.client = client
        self.list_id = list_id
        self.logger = logger
        self.authenticated = False

    async def ensure(self) -> None:
        """Log in unless a previous login on this gate already succeeded."""

        if self.authenticated:
            return
        log_progress(self.logger, "SharePoint login", phase="login", status="started", level=logging.DEBUG)
        try:
            await self.client.login()
        except Exception as exc:
            log_progress(
                self.logger,
                "SharePoint login failed",
                phase="login",
                status="failed",
                level=logging.WARNING,
                extra={"error": str(exc)},
            )
            raise AuthenticationError(
                f"failed to perform sharepoint login for list {self.list_id}",
                exc,
                list_id=self.list_id,
            ) from exc
        self.authenticated = True
        log_progress(self.logger, "SharePoint login", phase="login", status="succeeded")


def ensure_login(operation: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """
    Wrap an adapter coroutine method so it only runs after a successful login.

    The wrapped method keeps its signature. The owning adapter exposes its
    :class:`LoginGate` as ``gate``; a failed login raises
    :class:`~sharepoint_sync_adapter.adapters.base.AuthenticationError` and the
    operation body never runs.
    """

    @functools.wraps(operation)
    async def _ensure_login(adapter: Any, *args: Any, **kwargs: Any) -> T:
        await adapter.gate.ensure()
        return await operation(adapter, *args, **kwargs)

    return _ensure_login


__all__ = ["LoginGate", "ensure_login"]
