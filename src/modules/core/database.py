"""MongoDB connection management for the document store.

Provides:
- ``ReadyState``: connectivity states reported to clients (``readyState``).
- ``MongoConnection``: owns the process-wide ``MongoClient`` and tracks its
  readiness through a pymongo topology listener.
- ``get_connection()``: lazily built singleton configured from settings.
- ``translate_driver_errors()``: converts pymongo errors into storage
  exceptions so the API layer never depends on the driver.

Readiness is derived from topology events rather than from a ping on every
request: ``CONNECTING`` until a writable server is discovered, ``CONNECTED``
while one is known, ``DISCONNECTED`` once it is lost (the driver keeps
monitoring and flips back to ``CONNECTED`` on recovery).
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from decimal import Decimal
from enum import IntEnum
from typing import Any, Callable, Dict, Iterator, Optional

import pymongo
import structlog
from bson.codec_options import CodecOptions, TypeCodec, TypeRegistry
from bson.decimal128 import Decimal128
from django.conf import settings
from pymongo import MongoClient, monitoring
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, PyMongoError

from modules.core.exceptions import StorageError, StorageUnavailable

logger = structlog.get_logger(__name__)


class ReadyState(IntEnum):
    DISCONNECTED = 0
    CONNECTED = 1
    CONNECTING = 2
    DISCONNECTING = 3


# ---------------------------------------------------------------------------
# BSON codecs
# ---------------------------------------------------------------------------


class DecimalCodec(TypeCodec):
    """Stores ``Decimal`` values as BSON Decimal128 and reads them back."""

    python_type = Decimal
    bson_type = Decimal128

    def transform_python(self, value: Decimal) -> Decimal128:
        return Decimal128(value)

    def transform_bson(self, value: Decimal128) -> Decimal:
        return value.to_decimal()


CODEC_OPTIONS = CodecOptions(tz_aware=True, type_registry=TypeRegistry([DecimalCodec()]))


# ---------------------------------------------------------------------------
# Connection
# ---------------------------------------------------------------------------


class _TopologyStateListener(monitoring.TopologyListener):
    """Feeds topology changes back into the owning ``MongoConnection``."""

    def __init__(self, connection: MongoConnection) -> None:
        self._connection = connection

    def opened(self, event: monitoring.TopologyOpenedEvent) -> None:
        pass

    def description_changed(self, event: monitoring.TopologyDescriptionChangedEvent) -> None:
        self._connection._on_topology_change(event.new_description.has_writable_server())

    def closed(self, event: monitoring.TopologyClosedEvent) -> None:
        pass


class MongoConnection:
    """Process-wide MongoDB client plus its readiness state.

    ``client_factory`` defaults to ``MongoClient``; it exists so the state
    machine can be exercised without a running server.
    """

    def __init__(
        self,
        uri: str,
        database_name: str,
        server_selection_timeout_ms: int = 5000,
        client_factory: Callable[..., MongoClient] = MongoClient,
    ) -> None:
        self._uri = uri
        self._database_name = database_name
        self._server_selection_timeout_ms = server_selection_timeout_ms
        self._client_factory = client_factory
        self._client: Optional[MongoClient] = None
        self._state = ReadyState.DISCONNECTED
        self._lock = threading.Lock()

    @property
    def ready_state(self) -> ReadyState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is ReadyState.CONNECTED

    def connect(self) -> None:
        """Create the client; returns immediately, discovery runs in the background."""
        with self._lock:
            if self._client is not None:
                return
            self._state = ReadyState.CONNECTING
            self._client = self._client_factory(
                self._uri,
                serverSelectionTimeoutMS=self._server_selection_timeout_ms,
                event_listeners=[_TopologyStateListener(self)],
                tz_aware=True,
            )
        logger.info("mongodb.connecting", database=self._database_name)

    def close(self) -> None:
        with self._lock:
            client = self._client
            if client is None:
                return
            self._state = ReadyState.DISCONNECTING
            self._client = None
        client.close()
        self._state = ReadyState.DISCONNECTED
        logger.info("mongodb.disconnected", database=self._database_name)

    def _on_topology_change(self, writable: bool) -> None:
        if self._state is ReadyState.DISCONNECTING:
            return
        previous = self._state
        if writable:
            self._state = ReadyState.CONNECTED
        elif previous is ReadyState.CONNECTED:
            self._state = ReadyState.DISCONNECTED
        if self._state is not previous:
            logger.info(
                "mongodb.state_changed",
                previous=previous.name.lower(),
                current=self._state.name.lower(),
            )

    @property
    def database(self) -> Database:
        if self._client is None:
            self.connect()
        return self._client.get_database(self._database_name, codec_options=CODEC_OPTIONS)

    def collection(self, name: str) -> Collection:
        return self.database.get_collection(name)

    def ping(self) -> Dict[str, Any]:
        with pymongo.timeout(self._server_selection_timeout_ms / 1000):
            return self.database.command("ping")


_connection: Optional[MongoConnection] = None
_connection_lock = threading.Lock()


def get_connection() -> MongoConnection:
    """Return the process-wide connection, building it from settings on first use."""
    global _connection
    if _connection is None:
        with _connection_lock:
            if _connection is None:
                _connection = MongoConnection(
                    uri=settings.MONGODB_URI,
                    database_name=settings.MONGODB_DATABASE,
                    server_selection_timeout_ms=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
                )
    return _connection


def close_connection() -> None:
    """Close and forget the process-wide connection (registered at WSGI startup)."""
    global _connection
    with _connection_lock:
        connection, _connection = _connection, None
    if connection is not None:
        connection.close()


# ---------------------------------------------------------------------------
# Error translation
# ---------------------------------------------------------------------------


@contextmanager
def translate_driver_errors(operation: str, **context: Any) -> Iterator[None]:
    """Re-raise pymongo failures as ``StorageUnavailable`` / ``StorageError``.

    ``ConnectionFailure`` covers server selection timeouts, network errors
    and network timeouts. The raw driver message is logged here and carried
    on the exception, never rendered to clients.
    """
    try:
        yield
    except ConnectionFailure as exc:
        logger.error("storage.unavailable", operation=operation, error=str(exc), **context)
        raise StorageUnavailable(str(exc)) from exc
    except PyMongoError as exc:
        logger.error("storage.error", operation=operation, error=str(exc), **context)
        raise StorageError(str(exc)) from exc
