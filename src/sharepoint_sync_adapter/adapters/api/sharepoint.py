"""
SharePoint REST API client implementing the list store protocol.

Reference: https://learn.microsoft.com/en-us/sharepoint/dev/sp-add-ins/working-with-lists-and-list-items-with-rest

Requests use the JSON "nometadata" OData flavour so item payloads can be sent
without ``__metadata`` type hints. Every record handed back to callers carries
an ``itemId`` field copied from SharePoint's ``Id``.
"""

from __future__ import annotations

from typing import Any, Dict, Hashable, Mapping, MutableMapping, Optional

import httpx

from ..base import ConfigurationError
from .base import DEFAULT_TIMEOUT, APIError, BaseAPIClient

ODATA_JSON = "application/json;odata=nometadata"
ITEM_ID_FIELD = "itemId"
_SHAREPOINT_ID_FIELDS = ("Id", "ID")


class SharePointClient(BaseAPIClient):
    """
    Minimal SharePoint list client.

    Authentication is either a bearer ``access_token`` (SharePoint Online app
    tokens) or ``username``/``password`` sent as HTTP basic credentials. Write
    requests additionally need a form digest, fetched by :meth:`login`.
    """

    def __init__(
        self,
        *,
        site_url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        access_token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        default_headers: Optional[MutableMapping[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        headers: MutableMapping[str, str] = {"Accept": ODATA_JSON, "Content-Type": ODATA_JSON}
        if default_headers:
            headers.update(default_headers)
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        auth = (username, password) if username and password else None
        super().__init__(
            base_url=site_url.rstrip("/"),
            timeout=timeout,
            default_headers=headers,
            auth=auth,
            transport=transport,
        )
        self.form_digest: Optional[str] = None

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "SharePointClient":
        """Build a client from the opaque ``sharepoint`` options of an adapter configuration."""

        site_url = options.get("site_url")
        if not isinstance(site_url, str) or not site_url:
            raise ConfigurationError("sharepoint options must include a 'site_url' string")
        timeout = options.get("timeout", DEFAULT_TIMEOUT)
        return cls(
            site_url=site_url,
            username=options.get("username"),
            password=options.get("password"),
            access_token=options.get("access_token"),
            timeout=float(timeout),
        )

    # ------------------------------------------------------------------ store protocol

    async def login(self) -> None:
        """Fetch a form digest, proving the credentials are accepted."""

        payload = await self._post_json("/_api/contextinfo")
        digest = payload.get("FormDigestValue") if isinstance(payload, dict) else None
        if not isinstance(digest, str) or not digest:
            raise APIError("SharePoint contextinfo response did not include a FormDigestValue.")
        self.form_digest = digest

    async def create_item(self, list_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        payload = await self._post_json(
            self._items_path(list_id),
            json_body=self._fields(data),
            headers=self._write_headers(),
        )
        return self._normalise_item(payload)

    async def read_item(self, list_id: str, item_id: Hashable) -> Dict[str, Any]:
        payload = await self._get_json(self._item_path(list_id, item_id))
        return self._normalise_item(payload)

    async def update_item(self, list_id: str, data: MutableMapping[str, Any]) -> Dict[str, Any]:
        """MERGE the fields of ``data`` into the item ``data["itemId"]`` and return the stored record."""

        item_id = data.get(ITEM_ID_FIELD)
        if item_id is None:
            raise APIError("SharePoint update requires an 'itemId' field in the payload.")
        await self._post_json(
            self._item_path(list_id, item_id),
            json_body=self._fields(data),
            headers=self._write_headers({"X-HTTP-Method": "MERGE", "IF-MATCH": "*"}),
        )
        return await self.read_item(list_id, item_id)

    async def delete_item(self, list_id: str, item_id: Hashable) -> None:
        await self._post_json(
            self._item_path(list_id, item_id),
            headers=self._write_headers({"X-HTTP-Method": "DELETE", "IF-MATCH": "*"}),
        )

    async def read_list(self, list_id: str) -> Dict[str, Any]:
        payload = await self._get_json(self._items_path(list_id))
        values = payload.get("value") if isinstance(payload, dict) else None
        if not isinstance(values, list):
            raise APIError(f"Unexpected payload from SharePoint list {list_id}.")
        return {"Items": [self._normalise_item(entry) for entry in values]}

    # ------------------------------------------------------------------ internals

    @staticmethod
    def _list_path(list_id: str) -> str:
        return f"/_api/web/lists(guid'{list_id}')"

    def _items_path(self, list_id: str) -> str:
        return f"{self._list_path(list_id)}/items"

    def _item_path(self, list_id: str, item_id: Hashable) -> str:
        return f"{self._items_path(list_id)}({item_id})"

    def _write_headers(self, extra: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if self.form_digest:
            headers["X-RequestDigest"] = self.form_digest
        if extra:
            headers.update(extra)
        return headers

    @staticmethod
    def _fields(data: Mapping[str, Any]) -> Dict[str, Any]:
        # SharePoint rejects writes to its read-only identifier columns.
        return {key: value for key, value in data.items() if key != ITEM_ID_FIELD and key not in _SHAREPOINT_ID_FIELDS}

    @staticmethod
    def _normalise_item(payload: Any) -> Dict[str, Any]:
        if not isinstance(payload, dict):
            raise APIError("Unexpected item payload from SharePoint.")
        record = {key: value for key, value in payload.items() if not key.startswith("odata.") and key != "__metadata"}
        for key in _SHAREPOINT_ID_FIELDS:
            if key in record:
                record[ITEM_ID_FIELD] = record[key]
                break
        return record


__all__ = ["SharePointClient", "ODATA_JSON"]
