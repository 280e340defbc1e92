"""
MongoDB connection lifecycle.

ConnectionManager opens one motor client per persistence instance, proves the
server is reachable with a ping before handing out the database, and closes
the client on shutdown.
"""

import logging
import time

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import ConfigurationError as MongoConfigurationError
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from ..config import PersistenceConfig
from ..constants import APP_NAME, DEFAULT_MAX_IDLE_TIME_MS
from ..exceptions import InitializationError
from ..observability import get_logger as get_contextual_logger
from ..observability import record_operation

logger = logging.getLogger(__name__)
contextual_logger = get_contextual_logger(__name__)

_CONNECT_FAILURES = (ConnectionFailure, ServerSelectionTimeoutError, MongoConfigurationError)


class ConnectionManager:
    def __init__(self, config: PersistenceConfig) -> None:
        self.config = config
        self._client: AsyncIOMotorClient | None = None
        self._db: AsyncIOMotorDatabase | None = None

    def _open_client(self) -> AsyncIOMotorClient:
        # Order status keys are UUIDs, stored with the standard binary subtype.
        # Status dates are read back as aware UTC datetimes.
        return AsyncIOMotorClient(
            self.config.mongo_uri,
            appname=APP_NAME,
            serverSelectionTimeoutMS=self.config.server_selection_timeout_ms,
            maxPoolSize=self.config.max_pool_size,
            minPoolSize=self.config.min_pool_size,
            maxIdleTimeMS=DEFAULT_MAX_IDLE_TIME_MS,
            retryWrites=True,
            retryReads=True,
            uuidRepresentation="standard",
            tz_aware=True,
        )

    async def initialize(self) -> None:
        """
        Open the client and ping the server.

        Raises:
            InitializationError: If the server cannot be reached or the URI is
                rejected by the driver
        """
        if self.initialized:
            logger.warning("Connection to %s already open", self.config.db_name)
            return

        started = time.perf_counter()
        contextual_logger.info(
            "Connecting to MongoDB",
            extra={
                "db_name": self.config.db_name,
                "pool_size": f"{self.config.min_pool_size}-{self.config.max_pool_size}",
            },
        )

        client = None
        try:
            client = self._open_client()
            await client.admin.command("ping")
        except _CONNECT_FAILURES as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            record_operation("connection.initialize", elapsed_ms, success=False)
            contextual_logger.critical(
                "Could not connect to MongoDB",
                extra={"error_type": type(e).__name__, "elapsed_ms": round(elapsed_ms, 2)},
                exc_info=True,
            )
            if client is not None:
                client.close()
            raise InitializationError(
                f"Failed to connect to MongoDB: {e}",
                mongo_uri=self.config.mongo_uri,
                db_name=self.config.db_name,
                context={"error_type": type(e).__name__},
            ) from e

        self._client = client
        self._db = client[self.config.db_name]

        elapsed_ms = (time.perf_counter() - started) * 1000
        record_operation("connection.initialize", elapsed_ms, success=True)
        contextual_logger.info(
            "Connected to MongoDB",
            extra={"db_name": self.config.db_name, "elapsed_ms": round(elapsed_ms, 2)},
        )

    async def shutdown(self) -> None:
        """Close the client; a no-op when nothing is open."""
        if self._client is None:
            return
        self._client.close()
        self._client = None
        self._db = None
        contextual_logger.info("MongoDB connection closed", extra={"db_name": self.config.db_name})

    def _require_open(self) -> None:
        if not self.initialized:
            raise RuntimeError("ConnectionManager not initialized. Call initialize() first.")

    @property
    def mongo_client(self) -> AsyncIOMotorClient:
        self._require_open()
        return self._client

    @property
    def mongo_db(self) -> AsyncIOMotorDatabase:
        self._require_open()
        return self._db

    @property
    def initialized(self) -> bool:
        return self._client is not None
