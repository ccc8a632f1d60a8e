"""
Application configuration using pydantic-settings.
Loads from environment variables with .env file support.
"""

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )
    
    # Hosted backend (the anon key is public and safe to ship to readers)
    supabase_url: str = "https://nveksidxddivsqywsrjb.supabase.co"
    supabase_anon_key: str = "sb_publishable_SUQ2hBY4_Q_0KY78GwNKqg_fmi8KXc8"
    supabase_service_key: str = ""  # gateway proxy mode only, never exposed
    
    # Deployment signals
    site_host: str = "localhost"
    site_path: str = "/"
    static_hosts: List[str] = ["github.io", "github.com"]
    static_path_markers: List[str] = ["/docs/"]
    admin_path_markers: List[str] = ["admin"]
    admin_surface_reads_hosted: bool = False
    
    # Hosted client readiness wait: interval x attempts
    client_wait_interval: float = 0.1
    client_wait_attempts: int = 50
    
    # Local gateway
    gateway_base_url: str = "http://localhost:3000"
    gateway_timeout: Optional[float] = None
    gateway_store: Literal["file", "hosted"] = "file"
    gateway_data_dir: str = "data"
    port: int = 3000

    # Application
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR
    project_name: str = "ZinaSite"
    version: str = "1.0.0"

    @property
    def client_wait_budget(self) -> float:
        """Total seconds spent waiting for the hosted client library."""
        return self.client_wait_interval * self.client_wait_attempts


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
