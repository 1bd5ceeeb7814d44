"""
Identity token utilities.

WHY: Sign-in itself happens at the identity provider. The provider hands the
front-end a signed bearer token whose "sub" claim is the principal id. This
module only:
1. Verifies the token signature and expiry
2. Extracts the principal id the rest of the system trusts
3. Mints provider-compatible tokens for tests and local tooling
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError

from infraworks.core.config import settings
from infraworks.core.exceptions import (
    TokenExpiredError,
    TokenInvalidError,
)


def create_access_token(
    principal_id: str,
    expires_delta: Optional[timedelta] = None,
    **claims: Any,
) -> str:
    """
    Create a signed identity token for a principal.

    WHY: Tests and local scripts need tokens the API accepts without a
    round-trip to the identity provider.

    Args:
        principal_id: Opaque principal id, stored in the "sub" claim
        expires_delta: Optional custom lifetime (default JWT_EXPIRATION_MINUTES)
        **claims: Extra claims (email, name, ...)

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.JWT_EXPIRATION_MINUTES))

    to_encode: Dict[str, Any] = {
        **claims,
        "sub": principal_id,
        "iat": now,
        "exp": expire,
    }
    if settings.JWT_AUDIENCE:
        to_encode["aud"] = settings.JWT_AUDIENCE

    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> Dict[str, Any]:
    """
    Verify an identity token and return its claims.

    Args:
        token: JWT token string

    Returns:
        Decoded claims

    Raises:
        TokenExpiredError: If the token has expired
        TokenInvalidError: If the token is malformed, has a bad signature,
            or carries no principal id
    """
    options = {"verify_aud": settings.JWT_AUDIENCE is not None}
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            options=options,
        )
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError as e:
        raise TokenInvalidError(reason=str(e))

    if not payload.get("sub"):
        raise TokenInvalidError(message="Token has no principal id")

    return payload
