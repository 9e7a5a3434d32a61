"""Steam OpenID 2.0 authentication strategy.

Delegates login to Steam and optionally enriches the identity with Steam
Web API profile data before handing it to application logic.
"""

from steam_auth.core.outcome import AuthOutcome
from steam_auth.core.steam.profile import EnrichmentSelection, SteamProfile
from steam_auth.core.strategy import SteamStrategy, StrategyOptions

__all__ = [
    "AuthOutcome",
    "EnrichmentSelection",
    "SteamProfile",
    "SteamStrategy",
    "StrategyOptions",
]
