"""Tests for database connection management."""
import json
import pytest
from unittest.mock import patch, MagicMock

from mindcare.shared.database import connection as connection_module
from mindcare.shared.database.connection import (
    ConnectionManager,
    DatabaseConfig,
    get_connection_manager,
)


class TestDatabaseConfig:
    def test_defaults(self):
        config = DatabaseConfig(host="db.internal")

        assert config.port == 5432
        assert config.database == "mindcare"
        assert config.min_connections == 1
        assert config.max_connections == 10
        assert config.ssl_mode == "prefer"

    def test_min_above_max_rejected(self):
        with pytest.raises(ValueError):
            DatabaseConfig(host="localhost", min_connections=5, max_connections=2)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("DB_HOST", "pg.example")
        monkeypatch.setenv("DB_PORT", "6543")
        monkeypatch.setenv("DB_NAME", "wellness")
        monkeypatch.setenv("DB_USER", "svc")
        monkeypatch.setenv("DB_PASSWORD", "secret")
        monkeypatch.setenv("DB_MAX_CONN", "4")

        config = DatabaseConfig.from_env()

        assert config.host == "pg.example"
        assert config.port == 6543
        assert config.database == "wellness"
        assert config.username == "svc"
        assert config.password == "secret"
        assert config.max_connections == 4

    @patch("boto3.client")
    def test_from_secrets_manager(self, mock_client):
        mock_client.return_value.get_secret_value.return_value = {
            "SecretString": json.dumps({
                "host": "rds.example",
                "port": 5433,
                "dbname": "mindcare_prod",
                "username": "app",
                "password": "pw",
            })
        }

        config = DatabaseConfig.from_secrets_manager("arn:secret", region="eu-west-1")

        mock_client.assert_called_once_with("secretsmanager", region_name="eu-west-1")
        assert config.host == "rds.example"
        assert config.port == 5433
        assert config.database == "mindcare_prod"
        assert config.username == "app"

    @patch("boto3.client")
    def test_from_secrets_manager_failure_propagates(self, mock_client):
        mock_client.return_value.get_secret_value.side_effect = RuntimeError("denied")

        with pytest.raises(RuntimeError):
            DatabaseConfig.from_secrets_manager("arn:secret")


class TestConnectionManager:
    @pytest.fixture
    def manager(self):
        return ConnectionManager(DatabaseConfig(host="localhost"))

    def test_not_initialized_until_first_use(self, manager):
        assert manager.is_initialized is False

    @patch("psycopg2.pool.ThreadedConnectionPool")
    def test_initialize_creates_pool_once(self, mock_pool, manager):
        manager.initialize()
        manager.initialize()

        mock_pool.assert_called_once()
        kwargs = mock_pool.call_args.kwargs
        assert kwargs["host"] == "localhost"
        assert kwargs["maxconn"] == 10
        assert manager.is_initialized is True

    @patch("psycopg2.pool.ThreadedConnectionPool")
    def test_initialize_failure_propagates(self, mock_pool, manager):
        mock_pool.side_effect = Exception("connection refused")

        with pytest.raises(Exception, match="connection refused"):
            manager.initialize()
        assert manager.is_initialized is False

    def test_get_connection_returns_connection_to_pool(self, manager):
        conn = MagicMock()
        manager._pool = MagicMock()
        manager._pool.getconn.return_value = conn

        with manager.get_connection() as borrowed:
            assert borrowed is conn

        manager._pool.putconn.assert_called_once_with(conn)
        conn.rollback.assert_not_called()

    def test_get_connection_rolls_back_on_error(self, manager):
        conn = MagicMock()
        manager._pool = MagicMock()
        manager._pool.getconn.return_value = conn

        with pytest.raises(ValueError):
            with manager.get_connection():
                raise ValueError("boom")

        conn.rollback.assert_called_once()
        manager._pool.putconn.assert_called_once_with(conn)

    def test_health_check_healthy(self, manager):
        manager._pool = MagicMock()

        status = manager.health_check()

        assert status["healthy"] is True
        assert status["database"] == "mindcare"

    def test_health_check_unhealthy(self, manager):
        manager._pool = MagicMock()
        manager._pool.getconn.side_effect = Exception("pool exhausted")

        status = manager.health_check()

        assert status["healthy"] is False
        assert "pool exhausted" in status["error"]

    def test_close(self, manager):
        pool = MagicMock()
        manager._pool = pool

        manager.close()

        pool.closeall.assert_called_once()
        assert manager.is_initialized is False


class TestGetConnectionManager:
    @pytest.fixture(autouse=True)
    def reset_global(self, monkeypatch):
        monkeypatch.setattr(connection_module, "_connection_manager", None)

    def test_returns_singleton(self, monkeypatch):
        monkeypatch.delenv("DB_SECRET_ARN", raising=False)

        first = get_connection_manager()
        second = get_connection_manager()

        assert first is second

    def test_uses_secrets_manager_when_arn_set(self, monkeypatch):
        monkeypatch.setenv("DB_SECRET_ARN", "arn:secret")
        secret_config = DatabaseConfig(host="rds.example")

        with patch.object(DatabaseConfig, "from_secrets_manager", return_value=secret_config) as mock_load:
            manager = get_connection_manager()

        mock_load.assert_called_once()
        assert manager.config.host == "rds.example"
