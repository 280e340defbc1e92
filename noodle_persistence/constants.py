"""
Constants for noodle_persistence.

This module contains shared constants used across the codebase to avoid
magic numbers and improve maintainability.
"""

from typing import Final

# ============================================================================
# DATABASE CONSTANTS
# ============================================================================

# Connection pool defaults
DEFAULT_MAX_POOL_SIZE: Final[int] = 50
"""Default maximum MongoDB connection pool size."""

DEFAULT_MIN_POOL_SIZE: Final[int] = 10
"""Default minimum MongoDB connection pool size."""

DEFAULT_SERVER_SELECTION_TIMEOUT_MS: Final[int] = 5000
"""Default server selection timeout in milliseconds."""

MIN_SERVER_SELECTION_TIMEOUT_MS: Final[int] = 1000
"""Smallest server selection timeout accepted by the configuration."""

DEFAULT_MAX_IDLE_TIME_MS: Final[int] = 45000
"""Default maximum idle time before closing connections (milliseconds)."""

APP_NAME: Final[str] = "noodle-persistence"
"""Application name reported to MongoDB in the connection handshake."""

# ============================================================================
# COLLECTIONS AND REGIONS
# ============================================================================

MENU_COLLECTION: Final[str] = "menu"
"""Collection holding menu items."""

ORDER_STATUS_REGION: Final[str] = "YummyNoodleOrder"
"""Region holding order status updates."""

# ============================================================================
# INGREDIENT ANALYSIS
# ============================================================================

ANALYSIS_STRATEGY_MAPREDUCE: Final[str] = "mapreduce"
ANALYSIS_STRATEGY_AGGREGATE: Final[str] = "aggregate"
SUPPORTED_ANALYSIS_STRATEGIES: Final[tuple[str, ...]] = (
    ANALYSIS_STRATEGY_MAPREDUCE,
    ANALYSIS_STRATEGY_AGGREGATE,
)
DEFAULT_ANALYSIS_STRATEGY: Final[str] = ANALYSIS_STRATEGY_MAPREDUCE

INGREDIENTS_MAP_SCRIPT: Final[str] = "ingredients_map.js"
INGREDIENTS_REDUCE_SCRIPT: Final[str] = "ingredients_reduce.js"

# ============================================================================
# REGION BACKENDS
# ============================================================================

REGION_BACKEND_LOCAL: Final[str] = "local"
REGION_BACKEND_MONGO: Final[str] = "mongo"
SUPPORTED_REGION_BACKENDS: Final[tuple[str, ...]] = (
    REGION_BACKEND_LOCAL,
    REGION_BACKEND_MONGO,
)
DEFAULT_REGION_BACKEND: Final[str] = REGION_BACKEND_MONGO

# ============================================================================
# ORDER STATUS VALUES
# ============================================================================

STATUS_ORDER_RECEIVED: Final[str] = "Order Received"
STATUS_STARTED_COOKING: Final[str] = "Started Cooking"
STATUS_FINISHED_COOKING: Final[str] = "Finished Cooking"
STATUS_OUT_FOR_DELIVERY: Final[str] = "Out for Delivery"
STATUS_DELIVERED: Final[str] = "Delivered"
