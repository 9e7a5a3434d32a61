"""Steam strategy factory.

Builds the process-wide Steam strategy from environment configuration.
"""

import logging
from functools import partial
from typing import Optional

from steam_auth.config.settings import get_settings
from steam_auth.core.strategy import SteamStrategy
from steam_auth.domain.models.identity import accept_steam_user
from steam_auth.infrastructure.steam.web_api import SteamWebAPIClient

logger = logging.getLogger(__name__)

# Global strategy instance (initialized on first call)
_strategy_instance: Optional[SteamStrategy] = None


def get_steam_strategy() -> SteamStrategy:
    """Get the configured Steam strategy instance.

    Options are resolved once from settings (STEAM_* environment variables)
    and never change for the lifetime of the process.

    Returns:
        Configured SteamStrategy instance

    Raises:
        ValueError: If the options are invalid (e.g. profile enabled without API key)
    """
    global _strategy_instance

    if _strategy_instance is not None:
        return _strategy_instance

    settings = get_settings()
    options = settings.to_strategy_options()

    _strategy_instance = SteamStrategy(
        options,
        accept_steam_user,
        web_api_factory=partial(
            SteamWebAPIClient,
            base_url=settings.steam_api_base_url,
            timeout=settings.steam_api_timeout_seconds,
        ),
    )

    logger.info(
        f"Steam strategy initialized (profile={options.profile}, "
        f"stateless={options.stateless}, select={options.select.model_dump()})"
    )
    return _strategy_instance


def reset_strategy() -> None:
    """Reset the global strategy instance (for testing)."""
    global _strategy_instance
    _strategy_instance = None
