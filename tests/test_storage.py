"""
Credential store backends
"""

import json
import os
import platform

import pytest

from utils import FileCredentialStore, MemoryCredentialStore


@pytest.mark.asyncio
async def test_memory_store_returns_copies():
    store = MemoryCredentialStore({"k": {"refresh_token": "r"}})

    record = await store.get("k")
    record["refresh_token"] = "mutated"

    assert (await store.get("k"))["refresh_token"] == "r"
    assert await store.get("missing") is None


@pytest.mark.asyncio
async def test_file_store_round_trip_keeps_other_keys(tmp_path):
    path = tmp_path / "nested" / "credentials.json"
    store = FileCredentialStore(str(path))

    await store.put("a", {"refresh_token": "ra"})
    await store.put("b", {"refresh_token": "rb", "profile_arn": "arn"})

    assert await store.get("a") == {"refresh_token": "ra"}
    assert await store.get("b") == {"refresh_token": "rb", "profile_arn": "arn"}
    assert json.loads(path.read_text()).keys() == {"a", "b"}
    assert not path.with_suffix(".json.tmp").exists()


@pytest.mark.skipif(platform.system() == "Windows", reason="POSIX permissions")
@pytest.mark.asyncio
async def test_file_store_is_owner_only(tmp_path):
    path = tmp_path / "secure" / "credentials.json"
    store = FileCredentialStore(str(path))

    await store.put("k", {"refresh_token": "r"})

    assert os.stat(path).st_mode & 0o777 == 0o600
    assert os.stat(path.parent).st_mode & 0o777 == 0o700


@pytest.mark.asyncio
async def test_file_store_tolerates_missing_and_corrupt_files(tmp_path):
    path = tmp_path / "credentials.json"
    store = FileCredentialStore(str(path))

    assert await store.get("k") is None

    path.write_text("{broken")
    assert await store.get("k") is None

    path.write_text("[1, 2]")
    assert await store.get("k") is None


def test_describe():
    assert MemoryCredentialStore().describe() == "memory"
    assert FileCredentialStore("/tmp/x/creds.json").describe() == "/tmp/x/creds.json"
