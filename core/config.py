"""
Core configuration module for SML Cars Backend.
Handles environment variables, Supabase settings, and application configuration.
"""

import os
import logging
import tempfile
from typing import Dict, Any, Optional
from functools import lru_cache
from enum import Enum
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Environment(str, Enum):
    """Application environment enum."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings:
    """Application settings with validation."""

    def __init__(self):
        # Application settings
        self.app_name: str = "SML Cars Backend"
        self.app_version: str = "1.0.0"
        self.environment: Environment = Environment(
            os.getenv("ENVIRONMENT", "development").lower()
        )
        self.debug: bool = os.getenv("DEBUG", "false").lower() == "true"

        # Server settings
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = int(os.getenv("PORT", "5001"))
        self.reload: bool = self.environment == Environment.DEVELOPMENT

        # Supabase settings
        self.supabase_url: Optional[str] = os.getenv("SUPABASE_URL")
        self.supabase_service_role_key: Optional[str] = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

        # Document store settings
        self.cars_table: str = os.getenv("CARS_TABLE", "cars")
        self.cars_page_size: int = int(os.getenv("CARS_PAGE_SIZE", "100"))

        # Storage settings
        self.storage_bucket: str = os.getenv("STORAGE_BUCKET", "car-images")
        self.storage_folder: str = os.getenv("STORAGE_FOLDER", "cars")
        self.max_file_size: int = int(os.getenv("MAX_FILE_SIZE", str(8 * 1024 * 1024)))  # 8MB
        self.max_upload_files: int = int(os.getenv("MAX_UPLOAD_FILES", "10"))
        self.upload_tmp_dir: str = os.getenv(
            "UPLOAD_TMP_DIR",
            os.path.join(tempfile.gettempdir(), "sml-cars-uploads")
        )

        # Auth settings
        self.jwt_secret: Optional[str] = os.getenv("JWT_SECRET")
        self.jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
        self.jwt_expires_hours: int = int(os.getenv("JWT_EXPIRES_HOURS", "24"))
        self.admin_username: str = os.getenv("ADMIN_USERNAME", "admin")
        self.admin_password: Optional[str] = os.getenv("ADMIN_PASSWORD")

        # Security settings
        self.cors_origins: list = os.getenv("CORS_ORIGINS", "*").split(",")
        self.cors_allow_credentials: bool = os.getenv("CORS_ALLOW_CREDENTIALS", "false").lower() == "true"

        # Logging settings
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.log_format: str = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
        self.log_file: Optional[str] = os.getenv("LOG_FILE")
        self.log_max_bytes: int = int(os.getenv("LOG_MAX_BYTES", str(10 * 1024 * 1024)))
        self.log_backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "5"))

        # Validate log level
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.log_level not in valid_levels:
            self.log_level = "INFO"


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


def validate_required_settings(settings: Settings) -> None:
    """Validate that all required settings are present."""
    required_fields = [
        ("supabase_url", "SUPABASE_URL"),
        ("supabase_service_role_key", "SUPABASE_SERVICE_ROLE_KEY"),
        ("jwt_secret", "JWT_SECRET"),
        ("admin_password", "ADMIN_PASSWORD")
    ]

    missing_fields = []
    for field_name, env_var in required_fields:
        if not getattr(settings, field_name):
            missing_fields.append(env_var)

    if missing_fields:
        error_msg = f"Missing required environment variables: {', '.join(missing_fields)}"
        if settings.environment == Environment.PRODUCTION:
            raise ValueError(error_msg)
        else:
            logging.warning(error_msg)


def get_database_config() -> Dict[str, Any]:
    """Get Supabase configuration dictionary."""
    settings = get_settings()
    validate_required_settings(settings)

    return {
        "url": settings.supabase_url,
        "service_role_key": settings.supabase_service_role_key
    }
