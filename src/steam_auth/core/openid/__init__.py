"""OpenID 2.0 relying party built on python3-openid."""

from .relying_party import OpenIDRelyingParty, OpenIDVerificationError

__all__ = [
    "OpenIDRelyingParty",
    "OpenIDVerificationError",
]
