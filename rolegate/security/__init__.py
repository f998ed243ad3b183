"""
Authentication and token revocation for rolegate.

Bearer tokens are issued elsewhere. This package validates them, checks
them against the revocation list and turns them into an ``Identity`` the
access guard can authorize.
"""

from rolegate.security.dependencies import (
    get_app_settings,
    get_bearer_token,
    get_current_identity,
    require_identity,
)
from rolegate.security.identity import Identity
from rolegate.security.revocation import (
    RevokedTokenRepository,
    check_token,
    is_revoked,
    purge_expired,
    revoke_token,
)
from rolegate.security.tokens import decode_bearer_token, token_expiry

__all__ = [
    "Identity",
    "get_current_identity",
    "require_identity",
    "get_bearer_token",
    "get_app_settings",
    "decode_bearer_token",
    "token_expiry",
    "RevokedTokenRepository",
    "is_revoked",
    "check_token",
    "revoke_token",
    "purge_expired",
]
