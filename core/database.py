"""
Supabase connection manager for SML Cars Backend.
Handles client initialization and collaborator health checks.
"""

from typing import Optional
from supabase import create_client, Client
from core.config import get_database_config, get_settings
from core.logging import LoggerMixin
from core.exceptions import DatabaseException


class DatabaseManager(LoggerMixin):
    """Owns the Supabase client shared by the document and object stores."""

    _instance: Optional['DatabaseManager'] = None
    _client: Optional[Client] = None

    def __new__(cls) -> 'DatabaseManager':
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not hasattr(self, '_initialized'):
            self._initialized = True
            self._client = None

    @property
    def client(self) -> Client:
        """Get the Supabase client instance."""
        if self._client is None:
            self._initialize_client()
        return self._client

    def _initialize_client(self) -> None:
        try:
            config = get_database_config()

            if not config.get("url") or not config.get("service_role_key"):
                raise DatabaseException(
                    "Missing required database configuration",
                    operation="client_initialization"
                )

            self._client = create_client(
                config["url"],
                config["service_role_key"]
            )

            self.logger.info("Database client initialized successfully")

        except Exception as e:
            self.logger.error(f"Failed to initialize database client: {e}")
            if isinstance(e, DatabaseException):
                raise
            raise DatabaseException("Failed to initialize database client", operation="client_initialization") from e

    def test_connection(self) -> bool:
        """
        Test the document store connection.

        Returns:
            True if connection is successful, False otherwise
        """
        try:
            settings = get_settings()
            self.client.table(settings.cars_table).select("id").limit(1).execute()
            self.logger.info("Database connection test successful")
            return True

        except Exception as e:
            self.logger.error(f"Database connection test failed: {e}")
            return False

    def health_check(self) -> dict:
        """
        Perform a health check on the document store.

        Returns:
            ``{"ok", "docs", "client_initialized"}``, with ``error`` when unreachable
        """
        try:
            settings = get_settings()
            result = (
                self.client.table(settings.cars_table)
                .select("id", count="exact")
                .limit(1)
                .execute()
            )
            docs = result.count if result.count is not None else len(result.data or [])

            return {
                "ok": True,
                "docs": docs,
                "client_initialized": self._client is not None
            }

        except Exception as e:
            self.logger.error(f"Database health check failed: {e}")
            return {
                "ok": False,
                "client_initialized": self._client is not None,
                "error": str(e)
            }

    def close(self) -> None:
        """Drop the client; Supabase clients need no explicit closing."""
        if self._client:
            self._client = None
            self.logger.info("Database connection closed")


# Global database manager instance
db_manager = DatabaseManager()
