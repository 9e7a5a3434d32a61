"""Unit tests for Steam profile enrichment

Steam Web API calls are mocked; no network access.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from steam_auth.core.steam.profile import (
    EnrichmentSelection,
    SteamProfile,
    extract_avatar_hash,
    fetch_user_profile,
    playtime_hours,
    steam_id_to_account_id,
)
from steam_auth.infrastructure.steam.web_api import OwnedGame, PlayerSummary, SteamAPIError

pytestmark = pytest.mark.unit


@pytest.fixture
def web_api(public_summary, owned_games):
    """Steam Web API client mock serving a public profile"""
    client = AsyncMock()
    client.get_user_summary.return_value = PlayerSummary.model_validate(public_summary)
    client.get_user_level.return_value = 42
    client.get_user_owned_games.return_value = [OwnedGame.model_validate(g) for g in owned_games]
    return client


class TestExtractAvatarHash:
    """Test avatar hash extraction"""

    def test_plain_url(self):
        assert extract_avatar_hash("https://example/images/abcd1234.jpg") == "abcd1234"

    def test_url_with_query_string(self):
        assert extract_avatar_hash("https://example/images/abcd1234.jpg?x=1") == "abcd1234"

    def test_url_with_fragment(self):
        assert extract_avatar_hash("https://example/images/abcd1234.jpg#x") == "abcd1234"

    def test_url_with_query_and_fragment(self):
        assert extract_avatar_hash("https://example/images/abcd1234.jpg?x=1#top") == "abcd1234"

    def test_steam_cdn_url(self):
        url = "https://avatars.steamstatic.com/fef49e7fa7e1997310d705b2a6158ff8dc1cdfeb.jpg"
        assert extract_avatar_hash(url) == "fef49e7fa7e1997310d705b2a6158ff8dc1cdfeb"

    @pytest.mark.parametrize("url", ["", "https://example/images/noextension", "https://example/"])
    def test_url_without_file_name_raises(self, url):
        """Bad input: nothing to extract"""
        with pytest.raises(ValueError):
            extract_avatar_hash(url)


class TestHelpers:
    """Test account id and playtime helpers"""

    def test_account_id(self):
        assert steam_id_to_account_id("76561198000000000") == 39734272

    def test_account_id_below_base(self):
        assert steam_id_to_account_id("123") is None

    def test_playtime_rounds_up(self):
        games = [OwnedGame(appid=730, playtime_forever=125)]
        assert playtime_hours(games, 730) == 3

    def test_playtime_exact_hour(self):
        games = [OwnedGame(appid=570, playtime_forever=60)]
        assert playtime_hours(games, 570) == 1

    def test_playtime_zero_minutes(self):
        games = [OwnedGame(appid=570, playtime_forever=0)]
        assert playtime_hours(games, 570) == 0

    def test_playtime_missing_title(self):
        games = [OwnedGame(appid=440, playtime_forever=9000)]
        assert playtime_hours(games, 730) is None


class TestFetchUserProfile:
    """Test profile fetch and enrichment"""

    @pytest.mark.asyncio
    async def test_summary_fields_are_mapped(self, web_api, steam_id):
        """Happy path: summary maps onto SteamProfile"""
        profile = await fetch_user_profile(web_api, steam_id)

        assert profile.provider == "steam"
        assert profile.steam_id == steam_id
        assert profile.account_id == 39734272
        assert profile.nickname == "gaben"
        assert profile.avatar_hash == "abcd1234"
        assert profile.is_profile_public is True
        assert profile.created_at == datetime(2010, 1, 1, tzinfo=timezone.utc)
        assert profile.last_logoff_at == datetime.fromtimestamp(1700000000, tz=timezone.utc)
        web_api.get_user_level.assert_not_called()
        web_api.get_user_owned_games.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_selection_leaves_enrichment_out(self, web_api, steam_id):
        profile = await fetch_user_profile(web_api, steam_id, EnrichmentSelection())

        assert profile.account_level is None
        assert "account_level" not in profile.to_dict()
        assert "csgo_hours" not in profile.to_dict()

    @pytest.mark.asyncio
    async def test_account_level_enrichment(self, web_api, steam_id):
        profile = await fetch_user_profile(
            web_api, steam_id, EnrichmentSelection(account_level=True)
        )

        assert profile.account_level == 42
        assert profile.csgo_hours is None
        web_api.get_user_owned_games.assert_not_called()

    @pytest.mark.asyncio
    async def test_game_hours_enrichment(self, web_api, steam_id):
        """125 minutes of CS:GO rounds up to 3 hours; unowned Rust stays unset"""
        profile = await fetch_user_profile(
            web_api, steam_id, EnrichmentSelection(game_hours=True)
        )

        assert profile.csgo_hours == 3
        assert profile.dota_hours == 1
        assert profile.rust_hours is None
        assert profile.account_level is None
        assert "rust_hours" not in profile.to_dict()
        web_api.get_user_level.assert_not_called()

    @pytest.mark.asyncio
    async def test_full_enrichment(self, web_api, steam_id):
        profile = await fetch_user_profile(
            web_api, steam_id, EnrichmentSelection(account_level=True, game_hours=True)
        )

        assert profile.account_level == 42
        assert profile.csgo_hours == 3
        web_api.get_user_level.assert_awaited_once_with(steam_id)
        web_api.get_user_owned_games.assert_awaited_once_with(steam_id)

    @pytest.mark.asyncio
    async def test_private_profile_skips_enrichment(self, web_api, steam_id, private_summary):
        """Private profiles never carry enrichment fields"""
        web_api.get_user_summary.return_value = PlayerSummary.model_validate(private_summary)

        profile = await fetch_user_profile(
            web_api, steam_id, EnrichmentSelection(account_level=True, game_hours=True)
        )

        assert profile.is_profile_public is False
        assert profile.created_at is None
        data = profile.to_dict()
        for field in ("account_level", "csgo_hours", "dota_hours", "rust_hours"):
            assert field not in data
        web_api.get_user_level.assert_not_called()
        web_api.get_user_owned_games.assert_not_called()

    @pytest.mark.asyncio
    async def test_owned_games_failure_fails_whole_fetch(self, web_api, steam_id):
        """Error case: no partial profile when a lookup fails"""
        web_api.get_user_owned_games.side_effect = SteamAPIError("Steam Web API returned 500")

        with pytest.raises(SteamAPIError):
            await fetch_user_profile(
                web_api, steam_id, EnrichmentSelection(account_level=True, game_hours=True)
            )

    @pytest.mark.asyncio
    async def test_level_failure_fails_whole_fetch(self, web_api, steam_id):
        """Error case: a failed level lookup fails the join even when games succeed"""
        web_api.get_user_level.side_effect = SteamAPIError("Steam Web API returned 500")

        with pytest.raises(SteamAPIError):
            await fetch_user_profile(
                web_api, steam_id, EnrichmentSelection(account_level=True, game_hours=True)
            )

        web_api.get_user_owned_games.assert_awaited_once_with(steam_id)

    @pytest.mark.asyncio
    async def test_summary_failure_propagates(self, web_api, steam_id):
        web_api.get_user_summary.side_effect = SteamAPIError("unreachable")

        with pytest.raises(SteamAPIError):
            await fetch_user_profile(web_api, steam_id)

    @pytest.mark.asyncio
    async def test_malformed_avatar_raises(self, web_api, steam_id, public_summary):
        public_summary["avatar"] = "https://avatars.steamstatic.com/"
        web_api.get_user_summary.return_value = PlayerSummary.model_validate(public_summary)

        with pytest.raises(ValueError):
            await fetch_user_profile(web_api, steam_id)

    @pytest.mark.asyncio
    async def test_repeated_fetch_is_identical(self, web_api, steam_id):
        """Same inputs and a stable API give byte-identical profiles"""
        select = EnrichmentSelection(account_level=True, game_hours=True)

        first = await fetch_user_profile(web_api, steam_id, select)
        second = await fetch_user_profile(web_api, steam_id, select)

        assert first.model_dump_json() == second.model_dump_json()
        assert first == second


class TestSteamProfile:
    """Test SteamProfile model"""

    def test_profile_is_frozen(self):
        profile = SteamProfile(
            steam_id="76561198000000000",
            nickname="gaben",
            avatar_url="https://example/images/abcd1234.jpg",
            avatar_hash="abcd1234",
            is_profile_public=True,
            visibility_state=3,
        )

        with pytest.raises(Exception):
            profile.nickname = "someone else"

    def test_to_dict_is_json_compatible(self):
        profile = SteamProfile(
            steam_id="76561198000000000",
            nickname="gaben",
            avatar_url="https://example/images/abcd1234.jpg",
            avatar_hash="abcd1234",
            is_profile_public=True,
            visibility_state=3,
            created_at=datetime(2010, 1, 1, tzinfo=timezone.utc),
            account_level=10,
        )

        data = profile.to_dict()

        assert data["provider"] == "steam"
        assert isinstance(data["created_at"], str)
        assert data["account_level"] == 10
        assert "dota_hours" not in data
