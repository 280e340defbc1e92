"""
Unit tests for PersistenceConfig.

Tests environment fallbacks and validation.
"""

import pytest

from noodle_persistence.config import PersistenceConfig
from noodle_persistence.constants import (
    DEFAULT_ANALYSIS_STRATEGY,
    DEFAULT_MAX_POOL_SIZE,
    DEFAULT_REGION_BACKEND,
)
from noodle_persistence.exceptions import ConfigurationError

ENV_VARS = (
    "MONGO_URI",
    "DB_NAME",
    "MONGO_MAX_POOL_SIZE",
    "MONGO_MIN_POOL_SIZE",
    "MONGO_SERVER_SELECTION_TIMEOUT_MS",
    "INGREDIENT_ANALYSIS_STRATEGY",
    "ORDER_STATUS_REGION",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.mark.unit
class TestPersistenceConfig:
    """Test configuration loading."""

    def test_defaults(self):
        config = PersistenceConfig(mongo_uri="mongodb://localhost:27017", db_name="noodles")
        assert config.max_pool_size == DEFAULT_MAX_POOL_SIZE
        assert config.analysis_strategy == DEFAULT_ANALYSIS_STRATEGY
        assert config.order_status_region == DEFAULT_REGION_BACKEND
        config.validate()

    def test_reads_environment(self, monkeypatch):
        """Test that unset parameters fall back to environment variables."""
        monkeypatch.setenv("MONGO_URI", "mongodb://db:27017")
        monkeypatch.setenv("DB_NAME", "noodles")
        monkeypatch.setenv("MONGO_MAX_POOL_SIZE", "20")
        monkeypatch.setenv("INGREDIENT_ANALYSIS_STRATEGY", "AGGREGATE")
        monkeypatch.setenv("ORDER_STATUS_REGION", "local")

        config = PersistenceConfig()

        assert config.mongo_uri == "mongodb://db:27017"
        assert config.db_name == "noodles"
        assert config.max_pool_size == 20
        assert config.analysis_strategy == "aggregate"
        assert config.order_status_region == "local"

    def test_parameters_override_environment(self, monkeypatch):
        monkeypatch.setenv("DB_NAME", "from_env")
        config = PersistenceConfig(mongo_uri="mongodb://localhost", db_name="explicit")
        assert config.db_name == "explicit"


@pytest.mark.unit
class TestPersistenceConfigValidation:
    """Test validate() failures."""

    @pytest.mark.parametrize(
        "overrides, config_key",
        [
            ({"mongo_uri": ""}, "mongo_uri"),
            ({"db_name": ""}, "db_name"),
            ({"max_pool_size": 5, "min_pool_size": 10}, "min_pool_size"),
            ({"server_selection_timeout_ms": 10}, "server_selection_timeout_ms"),
            ({"analysis_strategy": "spark"}, "analysis_strategy"),
            ({"order_status_region": "gemfire"}, "order_status_region"),
        ],
    )
    def test_invalid_configuration(self, overrides, config_key):
        params = {"mongo_uri": "mongodb://localhost:27017", "db_name": "noodles"}
        params.update(overrides)
        config = PersistenceConfig(**params)

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()

        assert exc_info.value.config_key == config_key
