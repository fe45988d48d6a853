"""Tests for concurrent find/count execution and store error propagation."""

import asyncio
import logging
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from his_commons.config.settings import get_settings
from his_commons.core.exceptions import QueryTimeoutError
from his_commons.features.pagination import PaginationRequest, QueryOptions
from his_commons.models import BaseEntity
from his_commons.repositories import BaseRepository


class Encounter(BaseEntity):
    reason: Optional[str] = None


class FakeCursor:
    def __init__(self, to_list):
        self.to_list = to_list


@pytest.fixture
def mock_collection():
    """Mock collection exposing the driver boundary."""
    collection = MagicMock()
    collection.find = MagicMock(return_value=FakeCursor(AsyncMock(return_value=[])))
    collection.count_documents = AsyncMock(return_value=0)
    collection.find_one = AsyncMock(return_value=None)
    return collection


@pytest.fixture
def repository(mock_collection):
    return BaseRepository(mock_collection, Encounter, searchable_fields=["reason"])


def use_to_list(collection, to_list):
    collection.find.return_value = FakeCursor(to_list)


class TestFindAllConcurrency:
    """Test that find and count run together and fail together."""

    @pytest.mark.asyncio
    async def test_find_and_count_overlap(self, repository, mock_collection):
        find_started = asyncio.Event()
        count_started = asyncio.Event()

        async def to_list(length):
            find_started.set()
            await asyncio.wait_for(count_started.wait(), 1)
            return [{"_id": "e1", "reason": "checkup"}]

        async def count_documents(filter):
            count_started.set()
            await asyncio.wait_for(find_started.wait(), 1)
            return 1

        use_to_list(mock_collection, to_list)
        mock_collection.count_documents.side_effect = count_documents

        response = await repository.find_all(PaginationRequest())

        assert response.total == 1
        assert response.data[0].id == "e1"
        assert response.data[0].reason == "checkup"

    @pytest.mark.asyncio
    async def test_find_and_count_share_the_filter(self, repository, mock_collection):
        await repository.find_all(PaginationRequest(page=2, page_size=10, search="flu", sort="reason:desc"))

        query = mock_collection.count_documents.call_args.args[0]
        assert query == {"active": True, "reason": {"$regex": "flu", "$options": "i"}}
        mock_collection.find.assert_called_once_with(
            query,
            sort=[("reason", -1), ("createdAt", -1), ("_id", 1)],
            skip=10,
            limit=10,
        )

    @pytest.mark.asyncio
    async def test_find_failure_cancels_count(self, repository, mock_collection):
        error = ServerSelectionTimeoutError("no servers available")
        count_cancelled = asyncio.Event()

        async def to_list(length):
            await asyncio.sleep(0)
            raise error

        async def count_documents(filter):
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                count_cancelled.set()
                raise

        use_to_list(mock_collection, to_list)
        mock_collection.count_documents.side_effect = count_documents

        with pytest.raises(ServerSelectionTimeoutError) as exc_info:
            await repository.find_all(PaginationRequest())

        assert exc_info.value is error
        assert count_cancelled.is_set()

    @pytest.mark.asyncio
    async def test_count_failure_cancels_find(self, repository, mock_collection):
        error = RuntimeError("count failed")
        find_cancelled = asyncio.Event()

        async def to_list(length):
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                find_cancelled.set()
                raise

        use_to_list(mock_collection, to_list)
        mock_collection.count_documents.side_effect = error

        with pytest.raises(RuntimeError) as exc_info:
            await repository.find_all(PaginationRequest())

        assert exc_info.value is error
        assert find_cancelled.is_set()

    @pytest.mark.asyncio
    async def test_caller_cancellation_cancels_both(self, repository, mock_collection):
        cancelled = []

        def slow(name):
            async def wait(*args, **kwargs):
                try:
                    await asyncio.sleep(10)
                except asyncio.CancelledError:
                    cancelled.append(name)
                    raise
            return wait

        use_to_list(mock_collection, slow("find"))
        mock_collection.count_documents.side_effect = slow("count")

        task = asyncio.create_task(repository.find_all(PaginationRequest()))
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert sorted(cancelled) == ["count", "find"]

    @pytest.mark.asyncio
    async def test_timeout_raises_query_timeout(self, repository, mock_collection):
        async def slow(*args, **kwargs):
            await asyncio.sleep(10)

        use_to_list(mock_collection, slow)
        mock_collection.count_documents.side_effect = slow

        with pytest.raises(QueryTimeoutError) as exc_info:
            await repository.find_all(PaginationRequest(), QueryOptions(timeout=0.05))

        assert exc_info.value.timeout_seconds == 0.05
        assert exc_info.value.operation == "Encounter.find_all"

    @pytest.mark.asyncio
    async def test_timeout_from_settings(self, repository, mock_collection, monkeypatch):
        async def slow(*args, **kwargs):
            await asyncio.sleep(10)

        use_to_list(mock_collection, slow)
        mock_collection.count_documents.side_effect = slow
        monkeypatch.setenv("HIS_QUERY_TIMEOUT_SECONDS", "0.05")
        get_settings.cache_clear()

        try:
            with pytest.raises(QueryTimeoutError):
                await repository.find_all(PaginationRequest())
        finally:
            get_settings.cache_clear()

    @pytest.mark.asyncio
    async def test_fast_query_within_timeout(self, repository, mock_collection):
        mock_collection.count_documents.return_value = 0

        response = await repository.find_all(PaginationRequest(), QueryOptions(timeout=5))

        assert response.total == 0
        assert response.data == []


class TestStoreErrorPropagation:

    @pytest.mark.asyncio
    async def test_find_by_id_reraises_driver_error(self, repository, mock_collection, caplog):
        error = ServerSelectionTimeoutError("no servers available")
        mock_collection.find_one.side_effect = error

        with caplog.at_level(logging.ERROR):
            with pytest.raises(ServerSelectionTimeoutError) as exc_info:
                await repository.find_by_id("e1")

        assert exc_info.value is error
        assert "Error finding Encounter by id e1" in caplog.text

    def test_collection_is_required(self):
        with pytest.raises(ValueError):
            BaseRepository(None, Encounter)
