"""Steam Web API client.

Thin async wrapper over the three read-only Steam Web API calls the profile
enricher needs. Each call opens its own httpx client, mirroring how the OIDC
provider talks to discovery and token endpoints.

Endpoints:
- ISteamUser/GetPlayerSummaries/v2: display name, avatar, visibility, timestamps
- IPlayerService/GetSteamLevel/v1: account level
- IPlayerService/GetOwnedGames/v1: owned titles with playtime in minutes
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.steampowered.com"


class PlayerSummary(BaseModel):
    """Player summary as returned by GetPlayerSummaries.

    Private profiles omit most optional fields (timecreated, realname, ...),
    so only the identifier, name, avatar and visibility are required.
    """
    steamid: str
    personaname: str
    profileurl: str = ""
    avatar: str
    avatarmedium: Optional[str] = None
    avatarfull: Optional[str] = None
    communityvisibilitystate: int
    profilestate: Optional[int] = None
    lastlogoff: Optional[int] = None
    timecreated: Optional[int] = None
    personastate: Optional[int] = None
    realname: Optional[str] = None
    loccountrycode: Optional[str] = None


class OwnedGame(BaseModel):
    """Single entry from GetOwnedGames"""
    appid: int
    name: Optional[str] = None
    playtime_forever: int = Field(default=0, description="Total playtime in minutes")


class SteamWebAPIClient:
    """Async client for the Steam Web API.

    Example:
        client = SteamWebAPIClient(api_key="XXXX")
        summary = await client.get_user_summary("76561198000000000")
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize Steam Web API client.

        Args:
            api_key: Steam Web API key
            base_url: API root (override for testing or proxies)
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        if not api_key:
            raise ValueError("Steam Web API key is required")

        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def get_user_summary(self, steam_id: str) -> PlayerSummary:
        """Fetch the player summary for a SteamID64.

        Raises:
            SteamAPIError: If the request fails or the player does not exist
        """
        payload = await self._get(
            "/ISteamUser/GetPlayerSummaries/v2/",
            {"steamids": steam_id},
        )

        players = payload.get("response", {}).get("players", [])
        if not players:
            raise SteamAPIError(f"No Steam player found for {steam_id}")

        try:
            return PlayerSummary.model_validate(players[0])
        except ValidationError as e:
            raise SteamAPIError(f"Malformed player summary for {steam_id}: {e}") from e

    async def get_user_level(self, steam_id: str) -> int:
        """Fetch the Steam account level.

        Raises:
            SteamAPIError: If the request fails or no level is returned
        """
        payload = await self._get(
            "/IPlayerService/GetSteamLevel/v1/",
            {"steamid": steam_id},
        )

        level = payload.get("response", {}).get("player_level")
        if not isinstance(level, int):
            raise SteamAPIError(f"No Steam level returned for {steam_id}")
        return level

    async def get_user_owned_games(self, steam_id: str) -> list[OwnedGame]:
        """Fetch the owned games list, including played free titles.

        An account that hides its game details returns an empty response,
        which maps to an empty list.

        Raises:
            SteamAPIError: If the request fails or an entry is malformed
        """
        payload = await self._get(
            "/IPlayerService/GetOwnedGames/v1/",
            {
                "steamid": steam_id,
                "include_appinfo": 1,
                "include_played_free_games": 1,
            },
        )

        games = payload.get("response", {}).get("games", [])
        try:
            return [OwnedGame.model_validate(game) for game in games]
        except ValidationError as e:
            raise SteamAPIError(f"Malformed owned games for {steam_id}: {e}") from e

    async def _get(self, path: str, params: dict[str, Any]) -> dict:
        """Issue an authenticated GET request and return the decoded JSON body."""
        query = {"key": self.api_key, "format": "json", **params}

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(path, params=query)
        except httpx.HTTPError as e:
            logger.error(f"Steam Web API request to {path} failed: {e}")
            raise SteamAPIError(f"Steam Web API request failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"Steam Web API {path} returned {response.status_code}")
            raise SteamAPIError(
                f"Steam Web API returned {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise SteamAPIError(f"Steam Web API returned invalid JSON for {path}") from e

        if not isinstance(payload, dict):
            raise SteamAPIError(f"Unexpected Steam Web API payload for {path}")
        return payload


class SteamAPIError(Exception):
    """Steam Web API call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
