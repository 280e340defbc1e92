"""
Persistence Engine

Brings the persistence layer up and down:
- MongoDB connection
- Secondary indexes declared by the mapped records
- Menu item repository
- Order status region and repository

Usage:
    async with NoodlePersistence(PersistenceConfig()) as persistence:
        item = await persistence.menu_items.save(standard_menu_item())
        popularity = await persistence.menu_items.analyse_ingredients_by_popularity()
"""

import logging
from typing import Any

from ..config import PersistenceConfig
from ..constants import ORDER_STATUS_REGION, REGION_BACKEND_MONGO
from ..domain import MenuItem, OrderStatus
from ..exceptions import IndexManagementError
from ..mapping import ensure_indexes
from ..observability import (
    HealthChecker,
    check_mongodb_health,
    check_persistence_health,
    get_metrics_collector,
)
from ..observability import get_logger as get_contextual_logger
from ..regions import LocalRegion, MongoRegion, Region
from ..repositories import MenuItemRepository, OrderStatusRepository
from .connection import ConnectionManager

logger = logging.getLogger(__name__)
contextual_logger = get_contextual_logger(__name__)


class NoodlePersistence:
    """
    Entry point of the persistence layer.
    """

    def __init__(self, config: PersistenceConfig | None = None) -> None:
        """
        Args:
            config: Configuration; read from the environment when omitted
        """
        self.config = config or PersistenceConfig()
        self.config.validate()

        self._connection_manager = ConnectionManager(self.config)
        self._menu_items: MenuItemRepository | None = None
        self._order_status_region: Region[OrderStatus] | None = None
        self._order_statuses: OrderStatusRepository | None = None

    async def initialize(self) -> None:
        """
        Validate the record mappings, connect, create declared indexes and
        build the repositories.

        Raises:
            MappingError: If a record mapping is inconsistent with its type
            InitializationError: If MongoDB cannot be reached
            IndexManagementError: If a declared index cannot be created
        """
        if self.initialized:
            logger.warning("NoodlePersistence already initialized. Skipping re-initialization.")
            return

        for record_type in (MenuItem, OrderStatus):
            record_type.__mapping__.validate(record_type)

        await self._connection_manager.initialize()
        db = self._connection_manager.mongo_db

        menu_collection = db[MenuItem.__mapping__.collection]
        try:
            created = await ensure_indexes(menu_collection, MenuItem.__mapping__)
        except IndexManagementError:
            await self._connection_manager.shutdown()
            raise
        self._menu_items = MenuItemRepository(
            menu_collection, analysis_strategy=self.config.analysis_strategy
        )

        if self.config.order_status_region == REGION_BACKEND_MONGO:
            self._order_status_region = MongoRegion(db[ORDER_STATUS_REGION], OrderStatus)
        else:
            self._order_status_region = LocalRegion(ORDER_STATUS_REGION, OrderStatus)
        self._order_statuses = OrderStatusRepository(self._order_status_region)

        contextual_logger.info(
            "Persistence layer initialized",
            extra={
                "db_name": self.config.db_name,
                "indexes_created": created,
                "order_status_region": self.config.order_status_region,
                "analysis_strategy": self.config.analysis_strategy,
            },
        )

    @property
    def initialized(self) -> bool:
        return self._connection_manager.initialized

    def _require_initialized(self) -> None:
        if not self.initialized:
            raise RuntimeError("NoodlePersistence not initialized. Call initialize() first.")

    @property
    def menu_items(self) -> MenuItemRepository:
        self._require_initialized()
        return self._menu_items

    @property
    def order_statuses(self) -> OrderStatusRepository:
        self._require_initialized()
        return self._order_statuses

    @property
    def order_status_region(self) -> Region[OrderStatus]:
        self._require_initialized()
        return self._order_status_region

    async def get_health_status(self) -> dict[str, Any]:
        health_checker = HealthChecker()
        health_checker.register_check(lambda: check_persistence_health(self))
        health_checker.register_check(
            lambda: check_mongodb_health(
                self._connection_manager.mongo_client if self.initialized else None
            )
        )
        return await health_checker.check_all()

    def get_metrics(self) -> dict[str, Any]:
        return get_metrics_collector().get_summary()

    async def shutdown(self) -> None:
        """
        Close the connection and drop the repositories. Idempotent.
        """
        self._menu_items = None
        self._order_statuses = None
        self._order_status_region = None
        await self._connection_manager.shutdown()

    async def __aenter__(self) -> "NoodlePersistence":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.shutdown()
