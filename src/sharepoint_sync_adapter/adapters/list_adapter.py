"""
Sync adapter exposing create/read/update/delete/list over a SharePoint list.

Callers speak a generic sync dialect: requests carry ``data``, ``id`` or
``query`` and results are plain records, except for ``create`` which returns
``{"uid", "data"}`` and ``list`` which returns records keyed by item id. The
adapter translates these into :class:`ListStoreClient` calls, logs in lazily
through its :class:`LoginGate`, and wraps store failures in
:class:`OperationError` instances carrying the list and item identifiers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Hashable, Mapping, MutableMapping, Optional, Union

from ..core.logging import get_logger, log_progress
from .api.sharepoint import ITEM_ID_FIELD, SharePointClient
from .base import AdapterError, ConfigurationError, ListStoreClient, OperationError, PreDeleteReadError, VerificationResult
from .gate import LoginGate, ensure_login

ClientFactory = Callable[[Mapping[str, Any]], ListStoreClient]


@dataclass(frozen=True, slots=True)
class ListAdapterConfig:
    """
    Construction-time options of a :class:`SharePointListAdapter`.

    Attributes
    ----------
    store_options:
        Options handed unchanged to the store client factory.
    list_title:
        Display title of the SharePoint list.
    list_id:
        Unique identifier (GUID) of the list; used on every store call.
    """

    store_options: Mapping[str, Any]
    list_title: str
    list_id: str

    def __post_init__(self) -> None:
        if not isinstance(self.store_options, Mapping):
            raise ConfigurationError("store_options must be a mapping of sharepoint client options")
        if not isinstance(self.list_title, str) or not self.list_title.strip():
            raise ConfigurationError("list_title must be a sharepoint list Title")
        if not isinstance(self.list_id, str) or not self.list_id.strip():
            raise ConfigurationError("list_id must be a sharepoint list Id")
        object.__setattr__(self, "store_options", MappingProxyType(dict(self.store_options)))

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "ListAdapterConfig":
        """Parse the ``{"sharepoint": ..., "title": ..., "guid": ...}`` shape used by sync integrations."""

        if not isinstance(options, Mapping):
            raise ConfigurationError("options must be a mapping")
        return cls(
            store_options=options.get("sharepoint"),  # type: ignore[arg-type]
            list_title=options.get("title"),  # type: ignore[arg-type]
            list_id=options.get("guid"),  # type: ignore[arg-type]
        )


@dataclass(slots=True)
class ItemRequest:
    """Request envelope accepted by every adapter operation."""

    id: Optional[Hashable] = None
    data: Optional[MutableMapping[str, Any]] = None
    query: Optional[Mapping[str, Any]] = None


@dataclass(slots=True)
class CreateResult:
    """Outcome of :meth:`SharePointListAdapter.create` in sync format."""

    uid: Any
    data: Mapping[str, Any] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {"uid": self.uid, "data": self.data}


Request = Union[ItemRequest, Mapping[str, Any]]


def _request_field(request: Optional[Request], name: str) -> Any:
    if request is None:
        return None
    if isinstance(request, Mapping):
        return request.get(name)
    return getattr(request, name, None)


class SharePointListAdapter:
    """
    CRUD+L facade over one SharePoint list.

    Each public coroutine is gated by :func:`ensure_login`; all five share the
    adapter's single :class:`LoginGate`, so separate adapter instances log in
    independently. Successful calls return a value and failed calls raise a
    subclass of :class:`~sharepoint_sync_adapter.adapters.base.AdapterError`.
    """

    def __init__(
        self,
        config: ListAdapterConfig,
        *,
        client: Optional[ListStoreClient] = None,
        client_factory: ClientFactory = SharePointClient.from_options,
    ) -> None:
        if not isinstance(config, ListAdapterConfig):
            raise ConfigurationError("config must be a ListAdapterConfig")
        self.config = config
        self.client: ListStoreClient = client if client is not None else client_factory(config.store_options)
        self.logger = get_logger(
            f"{self.__class__.__module__}.{self.__class__.__name__}",
            extra={"list_id": config.list_id},
        )
        self.gate = LoginGate(self.client, config.list_id, self.logger)

    @property
    def list_id(self) -> str:
        return self.config.list_id

    @property
    def authenticated(self) -> bool:
        return self.gate.authenticated

    # ------------------------------------------------------------------ operations

    @ensure_login
    async def create(self, request: Request) -> CreateResult:
        """Create an item from ``request.data``; ``uid`` is the new item's ``itemId``."""

        try:
            response = await self.client.create_item(self.list_id, _request_field(request, "data"))
        except Exception as exc:
            raise self._wrap("create", f"sharepoint create error for list {self.list_id}", exc) from exc
        if not isinstance(response, Mapping):
            cause = TypeError(f"store returned {type(response).__name__} instead of a record")
            raise self._wrap("create", f"sharepoint create error for list {self.list_id}", cause)
        return CreateResult(uid=response.get(ITEM_ID_FIELD), data=response)

    @ensure_login
    async def read(self, request: Request) -> Mapping[str, Any]:
        item_id = _request_field(request, "id")
        try:
            return await self.client.read_item(self.list_id, item_id)
        except Exception as exc:
            raise self._wrap("read", f"sharepoint read error for list {self.list_id} for item id {item_id}", exc, item_id=item_id) from exc

    @ensure_login
    async def update(self, request: Request) -> Mapping[str, Any]:
        """
        Update an item. The store expects the identifier inside the record, so
        ``request.data`` gets ``itemId`` set to ``request.id`` before the call.
        """

        item_id = _request_field(request, "id")
        data = _request_field(request, "data")
        if data is None:
            data = {}
        data[ITEM_ID_FIELD] = item_id
        try:
            return await self.client.update_item(self.list_id, data)
        except Exception as exc:
            raise self._wrap("update", f"sharepoint update error for list {self.list_id} for item id {item_id}", exc, item_id=item_id) from exc

    @ensure_login
    async def delete(self, request: Request) -> Mapping[str, Any]:
        """
        Delete an item and return its content as read immediately beforehand.

        SharePoint answers deletes without a body, so the record is fetched
        first. Another writer may change the item between the two calls.
        """

        item_id = _request_field(request, "id")
        try:
            snapshot = await self.read(ItemRequest(id=item_id))
        except AdapterError as exc:
            raise self._wrap("delete", "delete failed to perform pre-delete read", exc, item_id=item_id, error_cls=PreDeleteReadError) from exc
        try:
            await self.client.delete_item(self.list_id, item_id)
        except Exception as exc:
            raise self._wrap("delete", f"sharepoint delete error for {item_id} on list {self.list_id}", exc, item_id=item_id) from exc
        return snapshot

    @ensure_login
    async def list(self, request: Optional[Request] = None) -> Dict[Hashable, Mapping[str, Any]]:
        """
        Return every item of the list keyed by ``itemId``.

        ``request.query`` is accepted for sync compatibility but not applied.
        Records without an ``itemId`` are filed under ``None``; when ids repeat
        the last record wins.
        """

        try:
            response = await self.client.read_list(self.list_id)
        except Exception as exc:
            raise self._wrap("list", f"sharepoint list error for list {self.list_id}", exc) from exc
        try:
            items = response["Items"]
            return {item.get(ITEM_ID_FIELD): item for item in items}
        except (KeyError, TypeError, AttributeError) as exc:
            raise self._wrap("list", f"sharepoint list error for list {self.list_id}", exc) from exc

    # ------------------------------------------------------------------ lifecycle

    async def verify(self) -> VerificationResult:
        """Log in and read the list, reporting the outcome instead of raising."""

        try:
            items = await self.list()
        except AdapterError as exc:
            return VerificationResult(
                success=False,
                message=f"SharePoint list verification failed: {exc}",
                details={"list_id": self.list_id, "authenticated": self.authenticated},
            )
        return VerificationResult(
            success=True,
            message=f"SharePoint list '{self.config.list_title}' reachable.",
            details={"list_id": self.list_id, "item_count": len(items)},
        )

    async def aclose(self) -> None:
        """Release the store client's resources when it has any. Session state is kept."""

        close = getattr(self.client, "aclose", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "SharePointListAdapter":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # ------------------------------------------------------------------ internals

    def _wrap(
        self,
        operation: str,
        context: str,
        exc: BaseException,
        *,
        item_id: Any = None,
        error_cls: type[OperationError] = OperationError,
    ) -> OperationError:
        log_progress(
            self.logger,
            f"SharePoint {operation} failed",
            status="failed",
            level=logging.WARNING,
            extra={"operation": operation, "item_id": item_id, "error": str(exc)},
        )
        return error_cls(operation, context, exc, list_id=self.list_id, item_id=item_id)


def create_adapter(
    options: Mapping[str, Any],
    *,
    client: Optional[ListStoreClient] = None,
    client_factory: ClientFactory = SharePointClient.from_options,
) -> SharePointListAdapter:
    """
    Build an adapter from ``{"sharepoint": {...}, "title": ..., "guid": ...}``.

    Configuration is validated before the store client is built, so invalid
    options fail without any network activity.
    """

    config = ListAdapterConfig.from_options(options)
    return SharePointListAdapter(config, client=client, client_factory=client_factory)


__all__ = [
    "CreateResult",
    "ItemRequest",
    "ListAdapterConfig",
    "SharePointListAdapter",
    "create_adapter",
]
