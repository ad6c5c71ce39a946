"""
Configuration management for the trip engine.
Points the engine at the remote trips service and the catalog service.
"""
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Remote Service Configuration
    trips_api_base_url: str = "http://localhost:8081/api/v1"
    api_token: Optional[str] = None
    request_timeout_seconds: float = 30.0

    # Catalog cache
    catalog_cache_ttl_seconds: int = 300

    # Server Configuration
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Global settings instance
settings = Settings()


def get_client_config() -> dict:
    """Get HTTP client configuration for the remote services."""
    headers = {"Accept": "application/json"}
    if settings.api_token:
        headers["Authorization"] = f"Bearer {settings.api_token}"

    return {
        "base_url": settings.trips_api_base_url.rstrip("/"),
        "timeout": settings.request_timeout_seconds,
        "headers": headers,
    }
