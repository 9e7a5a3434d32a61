"""
Pytest configuration and fixtures for Steam authentication tests.

Provides fixtures for:
- Steam identifiers and OpenID return queries
- Steam Web API payloads (public and private profiles)
- A fake Steam Web API served through httpx.MockTransport
"""

from typing import Callable, Optional

import httpx
import pytest

from steam_auth.config.settings import get_settings
from steam_auth.core.factory import reset_strategy
from steam_auth.core.steam.validator import STEAM_LOGIN_ENDPOINT

STEAM_ID = "76561198000000000"
CLAIMED_ID = f"https://steamcommunity.com/openid/id/{STEAM_ID}"
API_KEY = "test-api-key"


@pytest.fixture(autouse=True)
def reset_globals():
    """Reset cached settings and strategy between tests."""
    get_settings.cache_clear()
    reset_strategy()
    yield
    get_settings.cache_clear()
    reset_strategy()


@pytest.fixture
def steam_id() -> str:
    return STEAM_ID


@pytest.fixture
def claimed_id() -> str:
    return CLAIMED_ID


@pytest.fixture
def return_query() -> dict:
    """Query parameters of a genuine Steam return request."""
    return {
        "openid.ns": "http://specs.openid.net/auth/2.0",
        "openid.mode": "id_res",
        "openid.op_endpoint": STEAM_LOGIN_ENDPOINT,
        "openid.claimed_id": CLAIMED_ID,
        "openid.identity": CLAIMED_ID,
        "openid.return_to": "http://localhost:8000/api/v1/auth/steam/return",
    }


@pytest.fixture
def public_summary() -> dict:
    """GetPlayerSummaries entry for a public profile."""
    return {
        "steamid": STEAM_ID,
        "communityvisibilitystate": 3,
        "profilestate": 1,
        "personaname": "gaben",
        "profileurl": f"https://steamcommunity.com/profiles/{STEAM_ID}/",
        "avatar": "https://avatars.steamstatic.com/abcd1234.jpg",
        "avatarmedium": "https://avatars.steamstatic.com/abcd1234_medium.jpg",
        "avatarfull": "https://avatars.steamstatic.com/abcd1234_full.jpg",
        "lastlogoff": 1700000000,
        "personastate": 1,
        "timecreated": 1262304000,
    }


@pytest.fixture
def private_summary(public_summary) -> dict:
    """GetPlayerSummaries entry for a private profile."""
    summary = dict(public_summary)
    summary["communityvisibilitystate"] = 1
    del summary["timecreated"]
    return summary


@pytest.fixture
def owned_games() -> list[dict]:
    return [
        {"appid": 730, "name": "Counter-Strike 2", "playtime_forever": 125},
        {"appid": 570, "name": "Dota 2", "playtime_forever": 60},
        {"appid": 440, "name": "Team Fortress 2", "playtime_forever": 9000},
    ]


@pytest.fixture
def steam_api_transport(public_summary, owned_games) -> Callable[..., httpx.MockTransport]:
    """Build a MockTransport emulating the Steam Web API.

    Keyword overrides replace the payload for a path; an httpx.Response
    override is returned as-is. Every request is recorded on
    ``transport.requests``.
    """

    def build(
        summary: Optional[dict] = None,
        level: object = 42,
        games: Optional[list] = None,
        responses: Optional[dict] = None,
    ) -> httpx.MockTransport:
        requests: list[httpx.Request] = []
        payloads = {
            "/ISteamUser/GetPlayerSummaries/v2/": {
                "response": {"players": [summary if summary is not None else public_summary]}
            },
            "/IPlayerService/GetSteamLevel/v1/": {"response": {"player_level": level}},
            "/IPlayerService/GetOwnedGames/v1/": {
                "response": {
                    "game_count": len(games if games is not None else owned_games),
                    "games": games if games is not None else owned_games,
                }
            },
        }

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            override = (responses or {}).get(request.url.path)
            if isinstance(override, httpx.Response):
                return override
            if request.url.path not in payloads:
                return httpx.Response(404)
            return httpx.Response(200, json=payloads[request.url.path])

        transport = httpx.MockTransport(handler)
        transport.requests = requests
        return transport

    return build
