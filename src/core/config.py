"""
Core configuration for the Mess Import API.
Manages environment variables and AWS service settings.
"""
import logging
import os
from typing import List
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # AWS Configuration
    aws_region: str = os.getenv("AWS_REGION", "us-east-1")
    upload_records_table_name: str = os.getenv("UPLOAD_RECORDS_TABLE_NAME", "UploadRecords")
    categories_table_name: str = os.getenv("CATEGORIES_TABLE_NAME", "Categories")
    vendors_table_name: str = os.getenv("VENDORS_TABLE_NAME", "Vendors")
    dishes_table_name: str = os.getenv("DISHES_TABLE_NAME", "Dishes")
    items_table_name: str = os.getenv("ITEMS_TABLE_NAME", "Items")
    recipes_table_name: str = os.getenv("RECIPES_TABLE_NAME", "Recipes")
    students_table_name: str = os.getenv("STUDENTS_TABLE_NAME", "Students")

    # API Configuration
    api_title: str = os.getenv("API_TITLE", "Mess Import API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # File Upload Limits
    max_file_size_mb: int = int(os.getenv("MAX_FILE_SIZE_MB", "10"))
    upload_dir: str = os.getenv("UPLOAD_DIR", "uploads/csv")

    # Stored error log budget; DynamoDB items are limited to 400KB
    error_log_max_bytes: int = int(os.getenv("ERROR_LOG_MAX_BYTES", "300000"))

    # Background import workers
    import_max_workers: int = int(os.getenv("IMPORT_MAX_WORKERS", "4"))

    # Authentication
    jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
    upload_allowed_roles_csv: str = os.getenv("UPLOAD_ALLOWED_ROLES", "ADMIN,FNB_MANAGER")

    @property
    def upload_allowed_roles(self) -> List[str]:
        """Roles allowed to submit and browse CSV uploads."""
        return [role.strip() for role in self.upload_allowed_roles_csv.split(",") if role.strip()]

    @property
    def jwt_secret(self) -> str:
        """Get JWT secret from the environment or Parameter Store."""
        explicit = os.getenv("JWT_SECRET")
        if explicit:
            return explicit
        try:
            from src.core.parameter_store import get_jwt_secret
            return get_jwt_secret(self.environment, self.aws_region)
        except Exception as e:
            # Fallback for local dev or if parameter doesn't exist
            logger.warning("Using fallback JWT secret: %s", e)
            return "dev-secret-change-in-production"

    # Environment
    environment: str = os.getenv("ENVIRONMENT", "dev")

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()
