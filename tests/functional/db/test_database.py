# tests/functional/db/test_database.py
from unittest.mock import AsyncMock, MagicMock

import pytest

from tracker.db import database

pytestmark = pytest.mark.asyncio

def fake_db(collections):
    db = MagicMock()
    db.client.admin.command = AsyncMock(return_value={"ok": 1})
    db.list_collection_names = AsyncMock(return_value=collections)
    return db

async def test_health_without_connection_is_error(mocker):
    mocker.patch("tracker.db.database.get_database", return_value=None)
    health = await database.check_database_health()
    assert health["status"] == "ERROR"
    assert health["connected"] is False

async def test_health_warns_on_missing_collections(mocker):
    mocker.patch("tracker.db.database.get_database", return_value=fake_db(["assignments"]))
    health = await database.check_database_health()
    assert health["status"] == "WARNING"
    assert health["connected"] is True
    assert health["missing_collections"] == ["work_date_ranges"]

async def test_health_ping_failure_is_error(mocker):
    db = fake_db([])
    db.client.admin.command = AsyncMock(side_effect=RuntimeError("no primary"))
    mocker.patch("tracker.db.database.get_database", return_value=db)
    health = await database.check_database_health()
    assert (health["status"], health["error"]) == ("ERROR", "no primary")
