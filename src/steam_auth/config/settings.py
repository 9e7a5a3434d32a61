"""Configuration Settings for Steam Auth Service

Manages environment variables and application configuration.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import Optional

from steam_auth.core.steam.profile import EnrichmentSelection
from steam_auth.core.steam.validator import STEAM_PROVIDER_URL
from steam_auth.core.strategy import StrategyOptions
from steam_auth.infrastructure.steam.web_api import DEFAULT_BASE_URL


class Settings(BaseSettings):
    """Application settings"""

    # Service info
    service_name: str = "steam-auth-service"
    service_version: str = "1.0.0"
    environment: str = "development"

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Steam OpenID configuration
    steam_return_url: str = "http://localhost:8000/api/v1/auth/steam/return"
    steam_realm: str = "http://localhost:8000/"
    steam_provider_url: str = STEAM_PROVIDER_URL
    steam_stateless: bool = True

    # Steam Web API (profile enrichment)
    steam_api_key: Optional[str] = None
    steam_profile: bool = False
    steam_select_account_level: bool = False
    steam_select_game_hours: bool = False
    steam_api_base_url: str = DEFAULT_BASE_URL
    steam_api_timeout_seconds: float = 10.0

    # Session tokens issued after a successful Steam login
    jwt_secret_key: str = "dev-secret-change-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 24 hours

    # CORS configuration
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Logging
    log_level: str = "INFO"

    def to_strategy_options(self) -> StrategyOptions:
        """Resolve Steam strategy options from settings"""
        return StrategyOptions(
            return_url=self.steam_return_url,
            realm=self.steam_realm,
            api_key=self.steam_api_key,
            profile=self.steam_profile,
            stateless=self.steam_stateless,
            provider_url=self.steam_provider_url,
            select=EnrichmentSelection(
                account_level=self.steam_select_account_level,
                game_hours=self.steam_select_game_hours,
            ),
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance

    Returns:
        Settings instance
    """
    return Settings()
