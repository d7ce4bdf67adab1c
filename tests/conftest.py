from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from typer.testing import CliRunner

from sharepoint_sync_adapter.adapters import ListAdapterConfig, SharePointListAdapter

LIST_ID = "123"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def store_client() -> AsyncMock:
    client = AsyncMock()
    client.login.return_value = None
    return client


@pytest.fixture()
def adapter(store_client: AsyncMock) -> SharePointListAdapter:
    config = ListAdapterConfig(store_options={}, list_title="Jobs", list_id=LIST_ID)
    return SharePointListAdapter(config, client=store_client)


@pytest.fixture()
def settings_file(tmp_path: Path) -> Path:
    path = tmp_path / "secret.toml"
    path.write_text(
        "\n".join(
            [
                "[sharepoint]",
                'site_url = "https://contoso.sharepoint.com/sites/field"',
                'access_token = "token"',
                "timeout = 12",
                "",
                "[list]",
                'title = "Jobs"',
                f'guid = "{LIST_ID}"',
            ]
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def cli_runner() -> CliRunner:
    return CliRunner()
