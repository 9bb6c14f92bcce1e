"""
Application configuration settings
"""

from pydantic_settings import BaseSettings
from pydantic import computed_field
from functools import lru_cache
from typing import List, Optional
from urllib.parse import quote_plus


class Settings(BaseSettings):
    # Primary store (individual parameters)
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "home_market"
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_driver: str = "postgresql"
    db_url: Optional[str] = None  # Full URL, wins over the individual parameters

    # Primary store limits
    db_pool_timeout: int = 10
    db_statement_timeout_ms: int = 5000

    # Log store (history_status / notifications); defaults to the primary store
    log_db_url: Optional[str] = None
    log_sink_timeout_seconds: float = 5.0
    log_sink_retries: int = 1

    @computed_field
    @property
    def database_url(self) -> str:
        """Compile database URL from individual parameters"""
        if self.db_url:
            return self.db_url
        encoded_user = quote_plus(self.db_user)
        encoded_password = quote_plus(self.db_password)

        if self.db_host.startswith('/cloudsql/'):
            return f"{self.db_driver}://{encoded_user}:{encoded_password}@/{self.db_name}"
        return f"{self.db_driver}://{encoded_user}:{encoded_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    @computed_field
    @property
    def log_database_url(self) -> str:
        return self.log_db_url or self.database_url

    # Security
    secret_key: str = "change-me"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Application
    app_name: str = "Home Market"
    debug: bool = False

    # CORS - comma-separated
    allowed_origins: str = "http://localhost:3000"

    # Logging Configuration
    log_level: str = "INFO"
    log_format: str = "text"  # "text" or "json"
    log_to_file: bool = False
    log_file_path: str = "logs/home-market.log"
    log_max_size_mb: int = 10
    log_backup_count: int = 5
    log_to_console: bool = True
    log_verbosity: str = "minimal"  # "minimal" or "full" - minimal only logs errors and important calls

    def get_allowed_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.allowed_origins.split(',') if origin.strip()]

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache()
def get_settings():
    return Settings()
