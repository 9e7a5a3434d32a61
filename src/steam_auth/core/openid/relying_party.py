"""OpenID 2.0 relying party.

Wraps the python3-openid consumer. The cryptographic handshake (discovery,
association, signature checks, nonce checks) belongs entirely to the library;
this module only drives it and hands successful assertions to an injected
verification callback.

The library is synchronous and performs network I/O, so its calls run in a
worker thread.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, MutableMapping, Optional

from openid.consumer import consumer as openid_consumer
from openid.consumer.discover import DiscoveryFailure
from openid.store.memstore import MemoryStore

from steam_auth.core.outcome import AuthOutcome

logger = logging.getLogger(__name__)

VerifyCallback = Callable[[Mapping[str, str], str, Dict[str, Any]], Awaitable[AuthOutcome]]

CANCELED_MESSAGE = "OpenID authentication was canceled."
SETUP_NEEDED_MESSAGE = "OpenID provider requires user interaction."


class OpenIDRelyingParty:
    """Drives the OpenID 2.0 login flow against a single provider.

    Stateless mode (the default) keeps no association secrets between
    requests: the library verifies each assertion directly with the provider
    (check_authentication). Stateful mode keeps associations in memory.

    Example:
        relying_party = OpenIDRelyingParty(
            provider_url="https://steamcommunity.com/openid",
            return_url="https://example.com/auth/steam/return",
            realm="https://example.com/",
            verify=strategy.verify,
        )
        url = await relying_party.get_login_url()
    """

    def __init__(
        self,
        provider_url: str,
        return_url: str,
        realm: str,
        verify: VerifyCallback,
        stateless: bool = True,
        provider_name: str = "openid",
    ):
        """Initialize relying party.

        Args:
            provider_url: OpenID identifier used for discovery
            return_url: URL the provider redirects back to
            realm: URL space the authentication request is valid for
            verify: Callback invoked with (query, identifier, profile_stub)
            stateless: Skip server-side association storage
            provider_name: Provider tag placed in the profile stub
        """
        self.provider_url = provider_url
        self.return_url = return_url
        self.realm = realm
        self.verify = verify
        self.stateless = stateless
        self.provider_name = provider_name
        self._store = None if stateless else MemoryStore()

    def _consumer(self, session: Optional[MutableMapping[str, Any]]):
        # A Consumer is built per request; the session dict only carries
        # discovery state between begin() and complete().
        return openid_consumer.Consumer(session if session is not None else {}, self._store)

    async def get_login_url(self, session: Optional[MutableMapping[str, Any]] = None) -> str:
        """Discover the provider and build the redirect URL.

        Args:
            session: Per-user session mapping (optional in stateless mode)

        Returns:
            URL to redirect the user to

        Raises:
            OpenIDVerificationError: If provider discovery fails
        """
        consumer = self._consumer(session)

        try:
            auth_request = await asyncio.to_thread(consumer.begin, self.provider_url)
        except DiscoveryFailure as e:
            logger.error(f"OpenID discovery failed for {self.provider_url}: {e}")
            raise OpenIDVerificationError(f"OpenID discovery failed: {e}") from e

        return auth_request.redirectURL(self.realm, self.return_url)

    async def authenticate(
        self,
        query: Mapping[str, str],
        current_url: str,
        session: Optional[MutableMapping[str, Any]] = None,
    ) -> AuthOutcome:
        """Complete an OpenID response and run the verification callback.

        Args:
            query: Query parameters of the return request
            current_url: Full URL of the return request (checked against return_to)
            session: Per-user session mapping (optional in stateless mode)

        Returns:
            AuthOutcome from the verification callback, a rejection for
            canceled/setup-needed responses, or a failure for protocol errors
        """
        consumer = self._consumer(session)

        try:
            response = await asyncio.to_thread(consumer.complete, dict(query), current_url)
        except Exception as e:
            logger.error(f"OpenID assertion verification raised: {e}")
            return AuthOutcome.failure(OpenIDVerificationError(f"Failed to verify assertion: {e}"))

        if response.status == openid_consumer.CANCEL:
            logger.info("OpenID authentication canceled by user")
            return AuthOutcome.reject(CANCELED_MESSAGE)

        if response.status == openid_consumer.SETUP_NEEDED:
            return AuthOutcome.reject(SETUP_NEEDED_MESSAGE)

        if response.status != openid_consumer.SUCCESS:
            reason = getattr(response, "message", None) or "unknown error"
            logger.error(f"OpenID assertion verification failed: {reason}")
            return AuthOutcome.failure(OpenIDVerificationError(f"Failed to verify assertion: {reason}"))

        identifier = response.identity_url
        profile_stub = {"provider": self.provider_name, "claimed_id": identifier}

        return await self.verify(query, identifier, profile_stub)


class OpenIDVerificationError(Exception):
    """OpenID handshake failed."""
    pass
