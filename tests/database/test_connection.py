"""Tests for the document store connection manager."""

from typing import ClassVar, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from his_commons.config import HisCommonsSettings
from his_commons.database import MongoConnectionManager
from his_commons.models import BaseEntity


class Ward(BaseEntity):
    collection_name: ClassVar[Optional[str]] = "wards"


class Untracked(BaseEntity):
    pass


@pytest.fixture
def settings():
    return HisCommonsSettings(_env_file=None, mongodb_database="his_test")


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.admin.command = AsyncMock(return_value={"ok": 1})
    return client


class TestMongoConnectionManager:

    @pytest.mark.asyncio
    async def test_client_is_created_lazily(self, settings):
        manager = MongoConnectionManager(settings)

        assert manager._client is None
        client = manager.client
        assert manager.client is client

        await manager.close()
        assert manager._client is None

    def test_get_collection(self, settings, mock_client):
        manager = MongoConnectionManager(settings, client=mock_client)

        manager.get_collection("patients")

        mock_client.__getitem__.assert_called_with("his_test")
        mock_client.__getitem__.return_value.__getitem__.assert_called_with("patients")

    def test_get_collection_requires_name(self, settings, mock_client):
        with pytest.raises(ValueError):
            MongoConnectionManager(settings, client=mock_client).get_collection("")

    def test_get_collection_for_entity(self, settings, mock_client):
        manager = MongoConnectionManager(settings, client=mock_client)

        manager.get_collection_for(Ward)

        mock_client.__getitem__.return_value.__getitem__.assert_called_with("wards")

    def test_get_collection_for_entity_without_collection(self, settings, mock_client):
        with pytest.raises(ValueError):
            MongoConnectionManager(settings, client=mock_client).get_collection_for(Untracked)

    @pytest.mark.asyncio
    async def test_ping(self, settings, mock_client):
        manager = MongoConnectionManager(settings, client=mock_client)

        assert await manager.ping() is True
        mock_client.admin.command.assert_awaited_once_with("ping")

    @pytest.mark.asyncio
    async def test_ping_failure(self, settings, mock_client):
        mock_client.admin.command.side_effect = RuntimeError("unreachable")
        manager = MongoConnectionManager(settings, client=mock_client)

        assert await manager.ping() is False

    @pytest.mark.asyncio
    async def test_close(self, settings, mock_client):
        manager = MongoConnectionManager(settings, client=mock_client)

        await manager.close()

        mock_client.close.assert_called_once()
        assert manager._client is None
