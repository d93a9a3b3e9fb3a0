"""
Base service class for SML Cars Backend services.
"""

from abc import ABC
from typing import Optional
from supabase import Client
from core.config import get_settings
from core.database import db_manager
from core.logging import LoggerMixin


class BaseService(LoggerMixin, ABC):
    """Base service giving access to settings and the shared Supabase client."""

    def __init__(self):
        self.settings = get_settings()
        self._db_client: Optional[Client] = None

    @property
    def db(self) -> Client:
        """Get the Supabase client."""
        if self._db_client is None:
            self._db_client = db_manager.client
        return self._db_client
