"""
Unit tests for the SQL checkpoint store
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from sqlalchemy.exc import OperationalError
from core.exceptions import CheckpointError
from ingestion.checkpoint import SQLCheckpointStore
from models.checkpoint import SyncCheckpoint


def _session(row=None):
    result = MagicMock()
    result.scalar_one_or_none.return_value = row

    session = AsyncMock()
    session.execute = AsyncMock(return_value=result)
    session.add = MagicMock()
    return session


class TestSQLCheckpointStore:

    @pytest.mark.asyncio
    async def test_get_missing_checkpoint(self):
        store = SQLCheckpointStore(_session())

        assert await store.get("fio-sync", "CZ001") is None

    @pytest.mark.asyncio
    async def test_get_existing_checkpoint(self):
        row = SyncCheckpoint(namespace="fio-sync", account_number="CZ001", last_transaction_id=7)
        store = SQLCheckpointStore(_session(row))

        assert await store.get("fio-sync", "CZ001") == 7

    @pytest.mark.asyncio
    async def test_set_creates_row(self):
        session = _session()
        store = SQLCheckpointStore(session)

        await store.set("fio-sync", "CZ001", 3)

        session.add.assert_called_once()
        added = session.add.call_args[0][0]
        assert isinstance(added, SyncCheckpoint)
        assert (added.namespace, added.account_number, added.last_transaction_id) == ("fio-sync", "CZ001", 3)
        session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_set_overwrites_without_comparison(self):
        row = SyncCheckpoint(namespace="fio-sync", account_number="CZ001", last_transaction_id=9)
        session = _session(row)
        store = SQLCheckpointStore(session)

        await store.set("fio-sync", "CZ001", 0)

        assert row.last_transaction_id == 0
        session.add.assert_not_called()
        session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_database_failure_on_write(self):
        session = _session()
        session.commit.side_effect = OperationalError("UPDATE", {}, Exception("connection lost"))
        store = SQLCheckpointStore(session)

        with pytest.raises(CheckpointError) as exc_info:
            await store.set("fio-sync", "CZ001", 1)

        session.rollback.assert_awaited_once()
        assert exc_info.value.context["operation"] == "write"

    @pytest.mark.asyncio
    async def test_database_failure_on_read(self):
        session = _session()
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("connection lost"))

        with pytest.raises(CheckpointError):
            await SQLCheckpointStore(session).get("fio-sync", "CZ001")
