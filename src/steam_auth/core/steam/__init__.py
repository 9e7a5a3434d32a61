"""Steam-specific assertion checks and profile enrichment."""

from .profile import EnrichmentSelection, SteamProfile, extract_avatar_hash, fetch_user_profile
from .validator import STEAM_LOGIN_ENDPOINT, STEAM_PROVIDER_URL, validate_assertion

__all__ = [
    "EnrichmentSelection",
    "SteamProfile",
    "extract_avatar_hash",
    "fetch_user_profile",
    "STEAM_LOGIN_ENDPOINT",
    "STEAM_PROVIDER_URL",
    "validate_assertion",
]
