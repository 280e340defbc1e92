"""
Tests for the menu and health CLI commands.
"""

import json
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from noodle_persistence.cli.main import cli

MOTOR_CLIENT = "noodle_persistence.core.connection.AsyncIOMotorClient"
CONNECTION_ARGS = ["--mongo-uri", "mongodb://localhost:27017", "--db-name", "test_db"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("MONGO_URI", "DB_NAME", "INGREDIENT_ANALYSIS_STRATEGY", "ORDER_STATUS_REGION"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def menu_file(tmp_path, sample_menu_seed):
    path = tmp_path / "menu.json"
    path.write_text(json.dumps(sample_menu_seed), encoding="utf-8")
    return path


class TestValidateMenuCommand:
    """Test the validate-menu command."""

    def test_valid_menu(self, menu_file):
        runner = CliRunner()

        result = runner.invoke(cli, ["validate-menu", str(menu_file)])

        assert result.exit_code == 0
        assert "is valid (2 items)" in result.output

    def test_invalid_menu_verbose(self, tmp_path):
        path = tmp_path / "menu.json"
        path.write_text(json.dumps([{"name": "Ramen", "cost": -1}]), encoding="utf-8")
        runner = CliRunner()

        result = runner.invoke(cli, ["validate-menu", str(path), "--verbose"])

        assert result.exit_code == 1
        assert "is invalid" in result.output
        assert "0/cost" in result.output

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "menu.json"
        path.write_text("[{", encoding="utf-8")
        runner = CliRunner()

        result = runner.invoke(cli, ["validate-menu", str(path)])

        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_missing_file(self, tmp_path):
        runner = CliRunner()

        result = runner.invoke(cli, ["validate-menu", str(tmp_path / "absent.json")])

        assert result.exit_code == 2


class TestSeedCommand:
    def test_seed_empty_menu(self, menu_file, mock_mongo_client):
        runner = CliRunner()

        with patch(MOTOR_CLIENT, return_value=mock_mongo_client):
            result = runner.invoke(cli, ["seed", str(menu_file), *CONNECTION_ARGS])

        assert result.exit_code == 0, result.output
        assert "Seeded 2 menu items." in result.output
        mock_mongo_client.collections["menu"].insert_many.assert_called_once()

    def test_seed_populated_menu(self, menu_file, mock_mongo_client):
        mock_mongo_client["test_db"]["menu"].count_documents = AsyncMock(return_value=4)
        runner = CliRunner()

        with patch(MOTOR_CLIENT, return_value=mock_mongo_client):
            result = runner.invoke(cli, ["seed", str(menu_file), *CONNECTION_ARGS])

        assert result.exit_code == 0
        assert "nothing seeded" in result.output

    def test_seed_requires_connection_settings(self, menu_file):
        runner = CliRunner()

        result = runner.invoke(cli, ["seed", str(menu_file)])

        assert result.exit_code == 1
        assert "mongo_uri is required" in result.output


class TestPopularityCommand:
    def test_most_used_first(self, mock_mongo_client):
        mock_mongo_client["test_db"]["menu"].database.command = AsyncMock(
            return_value={
                "results": [
                    {"_id": "Egg", "value": 1.0},
                    {"_id": "Peanuts", "value": 2.0},
                    {"_id": "Cashews", "value": 1.0},
                ],
                "ok": 1,
            }
        )
        runner = CliRunner()

        with patch(MOTOR_CLIENT, return_value=mock_mongo_client):
            result = runner.invoke(cli, ["popularity", *CONNECTION_ARGS])

        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == ["Peanuts: 2", "Cashews: 1", "Egg: 1"]

    def test_empty_menu(self, mock_mongo_client):
        runner = CliRunner()

        with patch(MOTOR_CLIENT, return_value=mock_mongo_client):
            result = runner.invoke(cli, ["popularity", *CONNECTION_ARGS])

        assert result.exit_code == 0
        assert "No menu items." in result.output


class TestHealthCommand:
    def test_healthy(self, mock_mongo_client):
        runner = CliRunner()

        with patch(MOTOR_CLIENT, return_value=mock_mongo_client):
            result = runner.invoke(cli, ["health", *CONNECTION_ARGS])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["status"] == "healthy"

    def test_unreachable_database(self, mock_mongo_client):
        from pymongo.errors import ServerSelectionTimeoutError

        mock_mongo_client.admin.command = AsyncMock(
            side_effect=ServerSelectionTimeoutError("no servers")
        )
        runner = CliRunner()

        with patch(MOTOR_CLIENT, return_value=mock_mongo_client):
            result = runner.invoke(cli, ["health", *CONNECTION_ARGS])

        assert result.exit_code == 1
        assert "Failed to connect to MongoDB" in result.output
