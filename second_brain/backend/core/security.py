"""
Bearer Token Verification.

Tokens are issued by the identity provider. This service only checks the
signature, expiry, audience and token type, then trusts the "sub" claim as
the author_id every note and task is scoped to.
"""

from datetime import timedelta
from typing import Any

from jose import JWTError, jwt

from second_brain.backend.core.config import get_app_config, get_settings
from second_brain.backend.core.config_schema import JwtSchema
from second_brain.backend.core.exceptions import AuthenticationError
from second_brain.backend.core.logging import get_logger
from second_brain.backend.core.utils import utc_now

logger = get_logger(__name__)

ACCESS_TOKEN_TYPE = "access"


def _jwt() -> tuple[str, JwtSchema]:
    return get_settings().jwt_secret, get_app_config().security.jwt


def create_access_token(claims: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Sign an access token the way the identity provider does.

    Only tests and local tooling call this. `claims` must carry "sub".
    """
    secret, jwt_config = _jwt()
    lifetime = expires_delta or timedelta(minutes=jwt_config.access_token_expire_minutes)
    payload = {
        **claims,
        "exp": utc_now() + lifetime,
        "type": ACCESS_TOKEN_TYPE,
        "aud": jwt_config.audience,
    }
    return jwt.encode(payload, secret, algorithm=jwt_config.algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """
    Return the verified claims of an access token.

    Raises:
        AuthenticationError: Bad signature, expired, wrong audience,
            not an access token, or no subject
    """
    secret, jwt_config = _jwt()
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[jwt_config.algorithm],
            audience=jwt_config.audience,
        )
    except JWTError as e:
        logger.warning("Token rejected", extra={"error": str(e)})
        raise AuthenticationError("Invalid or expired token") from e

    if claims.get("type") != ACCESS_TOKEN_TYPE or not claims.get("sub"):
        logger.warning("Token rejected", extra={"error": "not an access token with a subject"})
        raise AuthenticationError("Invalid or expired token")
    return claims
