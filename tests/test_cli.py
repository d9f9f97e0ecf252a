"""
CLI credential import and status table
"""

import json

import pytest

from cli.main import set_credentials_from_file, show_status

from tests.helpers import CREDENTIALS_KEY


@pytest.mark.asyncio
async def test_set_credentials_from_file_normalizes_aliases(make_manager, tmp_path):
    path = tmp_path / "creds.json"
    path.write_text(json.dumps({"refreshToken": "r", "clientId": "c", "clientSecret": "s"}))
    manager = make_manager()

    assert await set_credentials_from_file(manager, str(path)) is True

    stored = await manager.store.get(CREDENTIALS_KEY)
    assert stored["refresh_token"] == "r"
    assert stored["client_id"] == "c"
    assert stored["client_secret"] == "s"


@pytest.mark.asyncio
async def test_set_credentials_from_file_rejects_incomplete_record(make_manager, tmp_path):
    path = tmp_path / "creds.json"
    path.write_text(json.dumps({"refresh_token": "r"}))
    manager = make_manager()

    assert await set_credentials_from_file(manager, str(path)) is False
    assert await manager.store.get(CREDENTIALS_KEY) is None


@pytest.mark.asyncio
async def test_set_credentials_from_unreadable_file(make_manager, tmp_path):
    manager = make_manager()

    assert await set_credentials_from_file(manager, str(tmp_path / "absent.json")) is False

    (tmp_path / "list.json").write_text("[]")
    assert await set_credentials_from_file(manager, str(tmp_path / "list.json")) is False


@pytest.mark.asyncio
async def test_show_status_prints_table(make_manager, base_credentials, capsys):
    manager = make_manager(base_credentials)

    await show_status(manager)

    out = capsys.readouterr().out
    assert "Has Credentials" in out
    assert "memory" in out
