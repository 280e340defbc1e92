"""
Configuration management for noodle_persistence.

Every setting can be passed directly or picked up from the environment, so
the same code runs in tests (explicit values) and in deployments (env vars).
"""

import os

from .constants import (
    DEFAULT_ANALYSIS_STRATEGY,
    DEFAULT_MAX_POOL_SIZE,
    DEFAULT_MIN_POOL_SIZE,
    DEFAULT_REGION_BACKEND,
    DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
    MIN_SERVER_SELECTION_TIMEOUT_MS,
    SUPPORTED_ANALYSIS_STRATEGIES,
    SUPPORTED_REGION_BACKENDS,
)
from .exceptions import ConfigurationError


class PersistenceConfig:
    """
    Persistence layer configuration.

    Example:
        # Using environment variables
        config = PersistenceConfig()

        # Or using direct parameters
        config = PersistenceConfig(
            mongo_uri="mongodb://localhost:27017",
            db_name="noodles",
        )
        config.validate()
    """

    def __init__(
        self,
        mongo_uri: str | None = None,
        db_name: str | None = None,
        max_pool_size: int | None = None,
        min_pool_size: int | None = None,
        server_selection_timeout_ms: int | None = None,
        analysis_strategy: str | None = None,
        order_status_region: str | None = None,
    ):
        """
        Initialize configuration.

        Args:
            mongo_uri: MongoDB connection URI (defaults to MONGO_URI env var)
            db_name: Database name (defaults to DB_NAME env var)
            max_pool_size: Maximum connection pool size (defaults to 50 or MONGO_MAX_POOL_SIZE)
            min_pool_size: Minimum connection pool size (defaults to 10 or MONGO_MIN_POOL_SIZE)
            server_selection_timeout_ms: Server selection timeout in ms (defaults to 5000)
            analysis_strategy: How ingredient popularity is computed, "mapreduce"
                or "aggregate" (defaults to INGREDIENT_ANALYSIS_STRATEGY or "mapreduce")
            order_status_region: Backend of the order status region, "local" or
                "mongo" (defaults to ORDER_STATUS_REGION or "mongo")
        """
        self.mongo_uri = mongo_uri or os.getenv("MONGO_URI", "")
        self.db_name = db_name or os.getenv("DB_NAME", "")
        self.max_pool_size = max_pool_size or int(
            os.getenv("MONGO_MAX_POOL_SIZE", str(DEFAULT_MAX_POOL_SIZE))
        )
        self.min_pool_size = min_pool_size or int(
            os.getenv("MONGO_MIN_POOL_SIZE", str(DEFAULT_MIN_POOL_SIZE))
        )
        self.server_selection_timeout_ms = server_selection_timeout_ms or int(
            os.getenv(
                "MONGO_SERVER_SELECTION_TIMEOUT_MS", str(DEFAULT_SERVER_SELECTION_TIMEOUT_MS)
            )
        )
        self.analysis_strategy = (
            analysis_strategy
            or os.getenv("INGREDIENT_ANALYSIS_STRATEGY", DEFAULT_ANALYSIS_STRATEGY)
        ).lower()
        self.order_status_region = (
            order_status_region or os.getenv("ORDER_STATUS_REGION", DEFAULT_REGION_BACKEND)
        ).lower()

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If required configuration is missing or invalid
        """
        if not self.mongo_uri:
            raise ConfigurationError(
                "mongo_uri is required (set MONGO_URI environment variable or pass directly)",
                config_key="mongo_uri",
            )

        if not self.db_name:
            raise ConfigurationError(
                "db_name is required (set DB_NAME environment variable or pass directly)",
                config_key="db_name",
            )

        if self.max_pool_size < 1:
            raise ConfigurationError(
                f"max_pool_size must be >= 1, got {self.max_pool_size}",
                config_key="max_pool_size",
                config_value=self.max_pool_size,
            )

        if self.min_pool_size < 1:
            raise ConfigurationError(
                f"min_pool_size must be >= 1, got {self.min_pool_size}",
                config_key="min_pool_size",
                config_value=self.min_pool_size,
            )

        if self.min_pool_size > self.max_pool_size:
            raise ConfigurationError(
                f"min_pool_size ({self.min_pool_size}) cannot be greater than "
                f"max_pool_size ({self.max_pool_size})",
                config_key="min_pool_size",
                config_value=self.min_pool_size,
            )

        if self.server_selection_timeout_ms < MIN_SERVER_SELECTION_TIMEOUT_MS:
            raise ConfigurationError(
                f"server_selection_timeout_ms must be >= {MIN_SERVER_SELECTION_TIMEOUT_MS}, "
                f"got {self.server_selection_timeout_ms}",
                config_key="server_selection_timeout_ms",
                config_value=self.server_selection_timeout_ms,
            )

        if self.analysis_strategy not in SUPPORTED_ANALYSIS_STRATEGIES:
            raise ConfigurationError(
                f"analysis_strategy must be one of {SUPPORTED_ANALYSIS_STRATEGIES}, "
                f"got '{self.analysis_strategy}'",
                config_key="analysis_strategy",
                config_value=self.analysis_strategy,
            )

        if self.order_status_region not in SUPPORTED_REGION_BACKENDS:
            raise ConfigurationError(
                f"order_status_region must be one of {SUPPORTED_REGION_BACKENDS}, "
                f"got '{self.order_status_region}'",
                config_key="order_status_region",
                config_value=self.order_status_region,
            )
