"""Steam OpenID assertion validation.

Steam is the only provider this strategy trusts. After the OpenID library has
checked the signature, the assertion must still report Steam's login endpoint
as its origin and carry a Steam community claimed identifier. Responses relayed
through another OpenID provider fail the endpoint check.
"""

import re
from typing import Optional

STEAM_PROVIDER_URL = "https://steamcommunity.com/openid"
STEAM_LOGIN_ENDPOINT = "https://steamcommunity.com/openid/login"

OP_ENDPOINT_PARAM = "openid.op_endpoint"
CLAIMED_ID_PATTERN = re.compile(r"^https?://steamcommunity\.com/openid/id/(\d+)$")
MAX_STEAM_ID = 2 ** 64

INVALID_CLAIM_MESSAGE = "Claimed identity is invalid."


def validate_assertion(op_endpoint: Optional[str], claimed_identifier: str) -> Optional[str]:
    """Check an assertion's origin and claimed identifier.

    Args:
        op_endpoint: Value of the ``openid.op_endpoint`` query parameter (may be None)
        claimed_identifier: Claimed identifier reported by the OpenID library

    Returns:
        The SteamID64 digits when both checks pass, otherwise None
    """
    if op_endpoint != STEAM_LOGIN_ENDPOINT:
        return None

    if not isinstance(claimed_identifier, str):
        return None

    match = CLAIMED_ID_PATTERN.fullmatch(claimed_identifier)
    if match is None:
        return None

    # SteamIDs are positive 64-bit integers
    if not 0 < int(match.group(1)) < MAX_STEAM_ID:
        return None

    return match.group(1)
