"""Application configuration settings."""

from pathlib import Path
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    server_address: str = "localhost:8080"
    base_url: str = "http://localhost:8080"
    log_level: str = "INFO"

    # Persistence
    file_storage_path: str = "./storage.json"
    database_dsn: str = ""

    # Audit
    audit_file: str = ""
    audit_url: str = ""

    # Application
    app_title: str = "URL Shortener Service"
    app_version: str = "0.1.0"
    app_description: str = "URL shortening service with per-user ownership and batch deletion"

    # URL Shortener
    short_code_length: int = 6

    # Batch deletion
    delete_queue_size: int = 100
    delete_batch_size: int = 50
    delete_flush_interval: float = 0.1

    @property
    def storage_path(self) -> Path:
        """Get file storage path as Path object."""
        return Path(self.file_storage_path)

    @property
    def host(self) -> str:
        host, sep, _ = self.server_address.rpartition(":")
        return host if sep and host else "localhost"

    @property
    def port(self) -> int:
        _, sep, port = self.server_address.rpartition(":")
        return int(port) if sep and port else 8080


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
