from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Application
    app_name: str = "Go URLs"
    app_version: str = "1.0.0"

    # HTTP
    cors_origins: List[str] = ["*"]

    # Database
    database_url: str = "sqlite:///./go_urls.db"

    # Go URLs specific
    # Comma-separated list, e.g. "admin,api,create". Required: startup fails without it.
    reserved_words: Optional[str] = None
    seed_on_startup: bool = True
    # Front-end create page, e.g. "https://go.example.com/create". A relative
    # path is served by the /{short_name} catch-all, which answers it with a 404 prompt.
    create_page_url: str = "/create"
    redirect_case_insensitive: bool = False

    # Identity (trusted by convention, not authenticated)
    user_header: str = "X-User-Name"
    current_user_env_var: str = "CURRENT_USER"
    default_user: Optional[str] = None

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
