from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from modules.core.database import ReadyState
from modules.core.exceptions import DatabaseNotReady
from modules.core.permissions import DatabaseConnectionGuard

pytestmark = pytest.mark.unit


def _request(method: str) -> MagicMock:
    request = MagicMock()
    request.method = method
    request.path = "/api/v1/products/"
    return request


class TestDatabaseConnectionGuard:
    def test_allows_when_connected(self, connection):
        assert DatabaseConnectionGuard().has_permission(_request("GET"), MagicMock())

    @pytest.mark.parametrize("method", ["GET", "POST", "PUT", "PATCH", "DELETE"])
    def test_rejects_every_method_when_disconnected(self, connection, method):
        connection.ready_state = ReadyState.DISCONNECTED

        with pytest.raises(DatabaseNotReady) as exc_info:
            DatabaseConnectionGuard().has_permission(_request(method), MagicMock())

        assert exc_info.value.ready_state == 0

    def test_read_only_mode_skips_writes(self, connection, settings):
        settings.PRODUCTS_GUARD_WRITES = False
        connection.ready_state = ReadyState.CONNECTING

        assert DatabaseConnectionGuard().has_permission(_request("POST"), MagicMock())
        with pytest.raises(DatabaseNotReady):
            DatabaseConnectionGuard().has_permission(_request("GET"), MagicMock())
