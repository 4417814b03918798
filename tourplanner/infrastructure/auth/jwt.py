"""Local pre-check of Supabase access tokens.

Claims are read WITHOUT verifying the signature. This is only used to turn
away tokens that cannot possibly be valid (malformed, expired, no subject)
before paying for a round trip; acceptance always needs the auth service.
"""

import time
from typing import Any, Dict, Optional

import jwt

from tourplanner.core.logging import logger


def read_unverified_claims(token: str) -> Optional[Dict[str, Any]]:
    """Decode token claims without signature verification.

    Returns:
        Claims dict, or None if the token is not a decodable JWT
    """
    try:
        return jwt.decode(
            token,
            options={"verify_signature": False, "verify_exp": False, "verify_aud": False},
        )
    except jwt.InvalidTokenError as e:
        logger.debug("jwt_precheck_malformed", error=str(e))
        return None


def may_be_valid(token: str, now: Optional[float] = None) -> bool:
    """False when the token is certainly unusable; True means "ask the server"."""
    claims = read_unverified_claims(token)
    if claims is None or not claims.get("sub"):
        return False

    exp = claims.get("exp")
    if exp is None:
        return True

    try:
        expired = float(exp) <= (time.time() if now is None else now)
    except (TypeError, ValueError):
        return False

    if expired:
        logger.debug("jwt_precheck_expired")
    return not expired
