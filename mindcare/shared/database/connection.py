"""PostgreSQL connection pooling for MindCare services.

Manages connections with:
- A threaded pool shared by every repository in the process
- Health checks for readiness probes
- Credentials from environment or AWS Secrets Manager
"""
import json
import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection configuration."""
    host: str
    port: int = 5432
    database: str = "mindcare"
    username: str = ""
    password: str = ""
    min_connections: int = 1
    max_connections: int = 10
    connect_timeout: int = 10
    ssl_mode: str = "prefer"

    def __post_init__(self):
        if self.min_connections > self.max_connections:
            raise ValueError(
                f"min_connections ({self.min_connections}) exceeds "
                f"max_connections ({self.max_connections})"
            )

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        """Create config from environment variables.

        Environment variables:
            DB_HOST: Database host (default localhost)
            DB_PORT: Database port (default 5432)
            DB_NAME: Database name (default mindcare)
            DB_USER / DB_PASSWORD: Credentials
            DB_MIN_CONN / DB_MAX_CONN: Pool bounds (default 1 / 10)
            DB_SSL_MODE: SSL mode (default prefer)
        """
        return cls(
            host=os.getenv("DB_HOST", "localhost"),
            port=int(os.getenv("DB_PORT", "5432")),
            database=os.getenv("DB_NAME", "mindcare"),
            username=os.getenv("DB_USER", ""),
            password=os.getenv("DB_PASSWORD", ""),
            min_connections=int(os.getenv("DB_MIN_CONN", "1")),
            max_connections=int(os.getenv("DB_MAX_CONN", "10")),
            ssl_mode=os.getenv("DB_SSL_MODE", "prefer"),
        )

    @classmethod
    def from_secrets_manager(cls, secret_arn: str, region: str = "us-east-1") -> "DatabaseConfig":
        """Load credentials from an AWS Secrets Manager secret.

        The secret is expected to hold host, port, dbname, username and
        password keys; missing host/port/dbname fall back to the environment.
        """
        try:
            import boto3

            client = boto3.client("secretsmanager", region_name=region)
            response = client.get_secret_value(SecretId=secret_arn)
            secret = json.loads(response["SecretString"])
        except Exception as e:
            logger.error(
                "SECRETS_MANAGER_LOAD_FAILED",
                extra={"error": str(e), "secret_arn": secret_arn}
            )
            raise

        return cls(
            host=secret.get("host", os.getenv("DB_HOST", "localhost")),
            port=int(secret.get("port", os.getenv("DB_PORT", "5432"))),
            database=secret.get("dbname", os.getenv("DB_NAME", "mindcare")),
            username=secret.get("username", ""),
            password=secret.get("password", ""),
        )


class ConnectionManager:
    """Hands out pooled psycopg2 connections.

    The pool is created on first use so services can import their
    handlers without a reachable database.
    """

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self._pool = None

        logger.info(
            "CONNECTION_MANAGER_CREATED",
            extra={
                "host": config.host,
                "database": config.database,
                "max_connections": config.max_connections,
            }
        )

    @property
    def is_initialized(self) -> bool:
        return self._pool is not None

    def initialize(self) -> None:
        """Create the connection pool. Safe to call more than once."""
        if self._pool is not None:
            return

        from psycopg2 import pool

        try:
            self._pool = pool.ThreadedConnectionPool(
                minconn=self.config.min_connections,
                maxconn=self.config.max_connections,
                host=self.config.host,
                port=self.config.port,
                database=self.config.database,
                user=self.config.username,
                password=self.config.password,
                connect_timeout=self.config.connect_timeout,
                sslmode=self.config.ssl_mode,
            )
        except Exception as e:
            logger.error(
                "CONNECTION_POOL_INIT_FAILED",
                extra={"error": str(e), "host": self.config.host}
            )
            raise

        logger.info(
            "CONNECTION_POOL_INITIALIZED",
            extra={"host": self.config.host, "database": self.config.database}
        )

    @contextmanager
    def get_connection(self):
        """Borrow a connection from the pool.

        Usage:
            with manager.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT 1")

        The transaction is rolled back if the block raises.
        """
        self.initialize()

        conn = self._pool.getconn()
        try:
            yield conn
        except Exception:
            conn.rollback()
            raise
        finally:
            self._pool.putconn(conn)

    def health_check(self) -> Dict[str, Any]:
        """Check database connectivity for /ready probes."""
        try:
            with self.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT 1")
                    cur.fetchone()
        except Exception as e:
            logger.error(
                "DATABASE_HEALTH_CHECK_FAILED",
                extra={"error": str(e)}
            )
            return {"status": "error", "healthy": False, "error": str(e)}

        return {
            "status": "connected",
            "healthy": True,
            "host": self.config.host,
            "database": self.config.database,
        }

    def close(self) -> None:
        """Close every pooled connection. Call during shutdown."""
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
            logger.info("CONNECTION_POOL_CLOSED")


# Process-wide manager shared by the service handlers
_connection_manager: Optional[ConnectionManager] = None


def get_connection_manager() -> ConnectionManager:
    """Get or create the process-wide connection manager.

    Credentials come from Secrets Manager when DB_SECRET_ARN is set,
    otherwise from DB_* environment variables.
    """
    global _connection_manager

    if _connection_manager is None:
        secret_arn = os.getenv("DB_SECRET_ARN")
        if secret_arn:
            config = DatabaseConfig.from_secrets_manager(
                secret_arn, region=os.getenv("AWS_REGION", "us-east-1")
            )
        else:
            config = DatabaseConfig.from_env()
        _connection_manager = ConnectionManager(config)

    return _connection_manager
