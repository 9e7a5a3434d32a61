"""Session token manager.

Issues and decodes the HS256 access tokens handed out after a successful
Steam login. Tokens are self-contained; nothing is stored server-side.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone

from jose import jwt, JWTError

from steam_auth.domain.models.identity import UserIdentity

logger = logging.getLogger(__name__)


class SessionTokenManager:
    """Creates and validates JWT access tokens for Steam users.

    Token claims:
    {
        "sub": "76561198000000000",   # SteamID64
        "name": "persona name",
        "provider": "steam",
        "type": "access",
        "iat": 1700000000,
        "exp": 1700086400,
        "jti": "token-uuid"
    }
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 1440,
    ):
        """Initialize token manager.

        Args:
            secret_key: Secret key for JWT signing
            algorithm: JWT signing algorithm (HS256 recommended)
            access_token_expire_minutes: Access token TTL in minutes
        """
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_token_expire = timedelta(minutes=access_token_expire_minutes)

        if secret_key == "dev-secret-change-in-production":
            logger.warning(
                "Using default JWT_SECRET_KEY! "
                "Set JWT_SECRET_KEY environment variable in production!"
            )

    @property
    def expires_in(self) -> int:
        """Access token lifetime in seconds"""
        return int(self.access_token_expire.total_seconds())

    def create_access_token(self, identity: UserIdentity) -> str:
        """Create a signed access token for a user identity."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": identity.user_id,
            "name": identity.display_name,
            "provider": identity.provider,
            "type": "access",
            "iat": now,
            "exp": now + self.access_token_expire,
            "jti": str(uuid.uuid4()),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode_access_token(self, token: str) -> dict:
        """Decode and validate an access token.

        Returns:
            Token claims

        Raises:
            AuthenticationError: If the token is invalid, expired or not an access token
        """
        try:
            claims = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.warning(f"Access token validation failed: {e}")
            raise AuthenticationError(f"Invalid token: {e}") from e

        if claims.get("type") != "access":
            raise AuthenticationError("Invalid token type")
        return claims


class AuthenticationError(Exception):
    """Authentication failed."""
    pass
