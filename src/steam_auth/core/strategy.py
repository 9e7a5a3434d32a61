"""Steam authentication strategy.

The Steam strategy authenticates users by delegating to Steam using the
OpenID 2.0 protocol.

Applications supply an async ``validate`` callback which receives the return
request's query, the claimed identifier and a profile, and returns an
AuthOutcome: ``AuthOutcome.success(user)`` to log the user in,
``AuthOutcome.reject(message)`` if the user should not be let in, or
``AuthOutcome.failure(error)`` if something went wrong.

Options:
- return_url: URL to which Steam will redirect the user after authentication
- realm: the part of URL-space for which an OpenID request is valid
- api_key: Steam Web API key (required when profile is enabled)
- profile: fetch the Steam profile instead of passing the OpenID stub through
- select: enrichment fields to fetch for public profiles

Example:
    async def validate(query, identifier, profile):
        user = await users.find_by_openid(identifier)
        return AuthOutcome.success(user)

    strategy = SteamStrategy(
        StrategyOptions(
            return_url="http://localhost:8000/api/v1/auth/steam/return",
            realm="http://localhost:8000/",
        ),
        validate,
    )
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, MutableMapping, Optional, Union

from pydantic import BaseModel, Field, model_validator

from steam_auth.core.openid.relying_party import OpenIDRelyingParty
from steam_auth.core.outcome import AuthOutcome
from steam_auth.core.steam.profile import (
    PROVIDER_NAME,
    EnrichmentSelection,
    SteamProfile,
    fetch_user_profile,
)
from steam_auth.core.steam.validator import (
    INVALID_CLAIM_MESSAGE,
    OP_ENDPOINT_PARAM,
    STEAM_PROVIDER_URL,
    validate_assertion,
)
from steam_auth.infrastructure.steam.web_api import SteamWebAPIClient

logger = logging.getLogger(__name__)

ProfileLike = Union[SteamProfile, Dict[str, Any]]
ValidateCallback = Callable[[Mapping[str, str], str, ProfileLike], Awaitable[AuthOutcome]]
WebAPIFactory = Callable[[str], SteamWebAPIClient]


class StrategyOptions(BaseModel):
    """Steam strategy configuration, fixed at construction"""

    return_url: str
    realm: str
    api_key: Optional[str] = None
    profile: bool = False
    stateless: bool = True
    provider_url: str = STEAM_PROVIDER_URL
    select: EnrichmentSelection = Field(default_factory=EnrichmentSelection)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_api_key(self):
        """Profile fetching needs a Steam Web API key"""
        if self.profile and not self.api_key:
            raise ValueError("api_key is required when profile fetching is enabled")
        return self


class SteamStrategy:
    """Steam OpenID strategy.

    Composes an OpenIDRelyingParty with this strategy's verify step instead
    of extending a generic OpenID strategy.
    """

    name = "steam"

    def __init__(
        self,
        options: StrategyOptions,
        validate: ValidateCallback,
        web_api_factory: Optional[WebAPIFactory] = None,
    ):
        """Initialize Steam strategy.

        Args:
            options: Strategy options
            validate: Application callback deciding on the user
            web_api_factory: Builds a Steam Web API client from an API key
        """
        self.options = options
        self.validate = validate
        self._web_api_factory = web_api_factory or SteamWebAPIClient
        self.relying_party = OpenIDRelyingParty(
            provider_url=options.provider_url,
            return_url=options.return_url,
            realm=options.realm,
            verify=self.verify,
            stateless=options.stateless,
            provider_name=PROVIDER_NAME,
        )

    @property
    def stateless(self) -> bool:
        return self.options.stateless

    async def get_login_url(self, session: Optional[MutableMapping[str, Any]] = None) -> str:
        """Build the Steam login redirect URL"""
        url = await self.relying_party.get_login_url(session)
        logger.info("Steam login initiated")
        return url

    async def authenticate(
        self,
        query: Mapping[str, str],
        current_url: str,
        session: Optional[MutableMapping[str, Any]] = None,
    ) -> AuthOutcome:
        """Complete a Steam login from the return request.

        Args:
            query: Query parameters of the return request
            current_url: Full URL of the return request
            session: Per-user session mapping (optional when stateless)

        Returns:
            AuthOutcome (success, failure or rejection)
        """
        outcome = await self.relying_party.authenticate(query, current_url, session)

        if outcome.is_failure:
            logger.error(f"Steam authentication failed: {outcome.error}")
        elif outcome.is_rejected:
            logger.warning(f"Steam authentication rejected: {outcome.message}")
        return outcome

    async def verify(
        self,
        query: Mapping[str, str],
        identifier: str,
        profile: Dict[str, Any],
    ) -> AuthOutcome:
        """Verify a cryptographically valid assertion and hand off to the application.

        Args:
            query: Query parameters of the return request
            identifier: Claimed identifier from the OpenID response
            profile: Profile stub built by the relying party

        Returns:
            Outcome returned by the application's validate callback, a
            rejection for a foreign assertion, or a failure for any error
        """
        try:
            steam_id = validate_assertion(query.get(OP_ENDPOINT_PARAM), identifier)
            if steam_id is None:
                return AuthOutcome.reject(INVALID_CLAIM_MESSAGE)

            if self.options.profile:
                web_api = self._web_api_factory(self.options.api_key)
                profile = await fetch_user_profile(web_api, steam_id, self.options.select)

            outcome = await self.validate(query, identifier, profile)
            if not isinstance(outcome, AuthOutcome):
                raise TypeError(
                    f"validate callback must return AuthOutcome, got {type(outcome).__name__}"
                )
            return outcome

        except Exception as e:
            logger.error(f"Steam verification error: {e}", exc_info=True)
            return AuthOutcome.failure(e)
