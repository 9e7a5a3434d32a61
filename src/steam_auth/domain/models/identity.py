"""Application user identity.

The service's own notion of a logged-in user, built from whatever the Steam
strategy hands to the validate callback: a full SteamProfile when profile
fetching is enabled, or the OpenID profile stub otherwise.
"""

from typing import Any, Dict, Mapping, Union

from pydantic import BaseModel, Field

from steam_auth.core.outcome import AuthOutcome
from steam_auth.core.steam.profile import SteamProfile
from steam_auth.core.steam.validator import CLAIMED_ID_PATTERN


class UserIdentity(BaseModel):
    """User identity issued to API clients.

    Attributes:
        user_id: SteamID64
        display_name: Steam persona name, or the SteamID when no profile was fetched
        avatar_url: Small avatar URL (when known)
        provider: Auth provider used ('steam')
        claimed_id: OpenID claimed identifier
        metadata: Profile data (optional)
    """
    user_id: str
    display_name: str
    avatar_url: str = ""
    provider: str = "steam"
    claimed_id: str
    metadata: Dict[str, Any] = Field(default_factory=dict)


def identity_from_profile(identifier: str, profile: Union[SteamProfile, Mapping[str, Any]]) -> UserIdentity:
    """Build a UserIdentity from a SteamProfile or OpenID profile stub"""
    if isinstance(profile, SteamProfile):
        return UserIdentity(
            user_id=profile.steam_id,
            display_name=profile.nickname,
            avatar_url=profile.avatar_url,
            provider=profile.provider,
            claimed_id=identifier,
            metadata=profile.to_dict(),
        )

    steam_id = CLAIMED_ID_PATTERN.fullmatch(identifier).group(1)
    return UserIdentity(
        user_id=steam_id,
        display_name=steam_id,
        provider=profile.get("provider", "steam"),
        claimed_id=identifier,
        metadata=dict(profile),
    )


async def accept_steam_user(
    query: Mapping[str, str],
    identifier: str,
    profile: Union[SteamProfile, Mapping[str, Any]],
) -> AuthOutcome:
    """Default validate callback: every verified Steam user is accepted"""
    return AuthOutcome.success(identity_from_profile(identifier, profile))
