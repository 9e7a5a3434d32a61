"""Steam profile enrichment.

Turns a validated SteamID64 into a SteamProfile using the Steam Web API.
Public profiles can additionally carry the account level and hours played on
a fixed set of tracked titles. Any failing call fails the whole fetch; a
partially populated profile is never returned.
"""

import asyncio
import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel

from steam_auth.infrastructure.steam.web_api import OwnedGame, PlayerSummary, SteamWebAPIClient

logger = logging.getLogger(__name__)

PROVIDER_NAME = "steam"

# communityvisibilitystate value for a public profile
PUBLIC_VISIBILITY_STATE = 3

# Offset between SteamID64 and the 32-bit account number
STEAM_ID64_BASE = 76561197960265728

# Profile field -> Steam app id
TRACKED_TITLES = {
    "csgo_hours": 730,
    "dota_hours": 570,
    "rust_hours": 252490,
}

ENRICHMENT_FIELDS = ("account_level", *TRACKED_TITLES)

_AVATAR_HASH_PATTERN = re.compile(r"([^/?#]+)\.[^./?#]+(?:\?[^#]*)?(?:#.*)?$")


class EnrichmentSelection(BaseModel):
    """Which optional profile fields to fetch for public profiles"""
    account_level: bool = False
    game_hours: bool = False

    model_config = {"frozen": True}


class SteamProfile(BaseModel):
    """Steam user profile handed to the application's validate callback.

    Attributes:
        provider: Always 'steam'
        steam_id: SteamID64 captured from the claimed identifier
        account_id: 32-bit account number (None if steam_id is below the 64-bit base)
        nickname: Persona name
        profile_url: Community profile URL
        avatar_url: Small avatar URL
        avatar_hash: Avatar file name without directory or extension
        is_profile_public: True when visibility_state is public
        visibility_state: Raw communityvisibilitystate
        created_at: Account creation time (public profiles only)
        last_logoff_at: Last logoff time, if reported
        account_level: Steam level (enrichment)
        csgo_hours, dota_hours, rust_hours: Rounded-up hours played (enrichment)
    """
    provider: str = PROVIDER_NAME
    steam_id: str
    account_id: Optional[int] = None
    nickname: str
    profile_url: str = ""
    avatar_url: str
    avatar_hash: str
    is_profile_public: bool
    visibility_state: int
    created_at: Optional[datetime] = None
    last_logoff_at: Optional[datetime] = None

    account_level: Optional[int] = None
    csgo_hours: Optional[int] = None
    dota_hours: Optional[int] = None
    rust_hours: Optional[int] = None

    model_config = {"frozen": True}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-compatible dict, leaving out unpopulated enrichment fields"""
        data = self.model_dump(mode="json")
        for field in ENRICHMENT_FIELDS:
            if data.get(field) is None:
                data.pop(field, None)
        return data


def extract_avatar_hash(avatar_url: str) -> str:
    """Strip directory and extension from an avatar URL.

    Example:
        https://avatars.steamstatic.com/abcd1234.jpg?size=small -> abcd1234

    Raises:
        ValueError: If the URL does not end in ``<name>.<ext>``
    """
    match = _AVATAR_HASH_PATTERN.search(avatar_url or "")
    if match is None:
        raise ValueError(f"Cannot extract avatar hash from {avatar_url!r}")
    return match.group(1)


def steam_id_to_account_id(steam_id: str) -> Optional[int]:
    """Convert a SteamID64 to its 32-bit account number."""
    account_id = int(steam_id) - STEAM_ID64_BASE
    if account_id <= 0:
        return None
    return account_id


def playtime_hours(games: list[OwnedGame], app_id: int) -> Optional[int]:
    """Hours played on a title, rounded up; None if the title is not owned"""
    for game in games:
        if game.appid == app_id:
            return math.ceil(game.playtime_forever / 60)
    return None


def _timestamp(value: Optional[int]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


def build_profile(steam_id: str, summary: PlayerSummary) -> SteamProfile:
    """Map a player summary onto a SteamProfile without enrichment fields"""
    return SteamProfile(
        steam_id=steam_id,
        account_id=steam_id_to_account_id(steam_id),
        nickname=summary.personaname,
        profile_url=summary.profileurl,
        avatar_url=summary.avatar,
        avatar_hash=extract_avatar_hash(summary.avatar),
        is_profile_public=summary.communityvisibilitystate == PUBLIC_VISIBILITY_STATE,
        visibility_state=summary.communityvisibilitystate,
        created_at=_timestamp(summary.timecreated),
        last_logoff_at=_timestamp(summary.lastlogoff),
    )


async def fetch_user_profile(
    web_api: SteamWebAPIClient,
    steam_id: str,
    select: Optional[EnrichmentSelection] = None,
) -> SteamProfile:
    """Fetch and shape a Steam profile.

    The summary is always fetched. For public profiles the level and owned
    games are then fetched concurrently, as selected.

    Args:
        web_api: Steam Web API client
        steam_id: Validated SteamID64
        select: Enrichment switches (default: none)

    Returns:
        SteamProfile for the user

    Raises:
        SteamAPIError: If any Steam Web API call fails
        ValueError: If the summary carries an unusable avatar URL
    """
    select = select or EnrichmentSelection()

    summary = await web_api.get_user_summary(steam_id)
    profile = build_profile(steam_id, summary)

    if not profile.is_profile_public:
        logger.debug(f"Steam profile {steam_id} is not public, skipping enrichment")
        return profile

    lookups = {}
    if select.account_level:
        lookups["account_level"] = web_api.get_user_level(steam_id)
    if select.game_hours:
        lookups["games"] = web_api.get_user_owned_games(steam_id)

    if not lookups:
        return profile

    results = dict(zip(lookups, await asyncio.gather(*lookups.values())))

    enrichment: Dict[str, Any] = {}
    if "account_level" in results:
        enrichment["account_level"] = results["account_level"]
    if "games" in results:
        for field, app_id in TRACKED_TITLES.items():
            enrichment[field] = playtime_hours(results["games"], app_id)

    return profile.model_copy(update=enrichment)
