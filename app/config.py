"""Application configuration"""
from pydantic_settings import BaseSettings
from typing import Literal, Set


class Settings(BaseSettings):
    """Application settings from environment variables"""

    # Target Database
    target_db_type: Literal["mysql", "mariadb", "postgresql", "postgres"] = "mysql"
    target_db_host: str = "localhost"
    target_db_port: int = 3306
    target_db_name: str = "golang"
    target_db_user: str = "root"
    target_db_password: str = ""
    target_db_schema: str = "public"
    target_db_ssl: str = "disable"

    # Connection pool
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10

    # Catalog
    # Comma separated list of tables that are never introspected nor served.
    catalog_exclude_tables: str = ""

    # Listing
    default_limit: int = 5
    default_offset: int = 0

    # Bounds every store round trip made on behalf of a request.
    request_timeout_seconds: float = 30.0

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8082

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False

    def excluded_tables(self) -> Set[str]:
        return {t.strip() for t in self.catalog_exclude_tables.split(",") if t.strip()}


settings = Settings()
