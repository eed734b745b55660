from __future__ import annotations

from typing import Any, Dict, Optional

import pytest
from rest_framework.test import APIClient

from modules.core import database
from modules.core.database import ReadyState


class FakeConnection:
    """Stand-in for ``MongoConnection`` with a settable readiness state."""

    def __init__(self, ready_state: ReadyState = ReadyState.CONNECTED) -> None:
        self.ready_state = ready_state
        self.ping_error: Optional[Exception] = None

    def ping(self) -> Dict[str, Any]:
        if self.ping_error is not None:
            raise self.ping_error
        return {"ok": 1.0}


@pytest.fixture()
def connection(monkeypatch):
    """Replace the process-wide Mongo connection with a connected fake."""
    fake = FakeConnection()
    monkeypatch.setattr(database, "_connection", fake)
    return fake


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid
