"""
Access tokens and password hashing
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from joserfc import jwt as jose_jwt
from joserfc.jwk import OctKey
from pwdlib import PasswordHash
from pwdlib.hashers.bcrypt import BcryptHasher
import structlog

from relief_api.core.config import settings
from relief_api.core.token_validator import IssuerAwareTokenValidator, LocalJWTValidationStrategy

logger = structlog.get_logger()

BCRYPT_MAX_BYTES = 72

pwd_context = PasswordHash((BcryptHasher(),))

_signing_key = OctKey.import_key(settings.JWT_SECRET_KEY)

token_validator = IssuerAwareTokenValidator(
    active_issuer=settings.AUTH_ACTIVE_ISSUER,
    trusted_issuers=settings.trusted_issuers,
    local_strategy=LocalJWTValidationStrategy(
        secret_key=settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
        issuer=settings.AUTH_LOCAL_ISSUER,
    ),
)


def create_access_token(
    subject: Any,
    expires_delta: Optional[timedelta] = None,
    additional_claims: Optional[dict] = None,
) -> str:
    """
    Sign an access token for a user id

    Args:
        subject: User id, stored as the string "sub" claim
        expires_delta: Lifetime, defaults to JWT_ACCESS_TOKEN_EXPIRE_MINUTES.
            A negative value yields an already expired token.
        additional_claims: Merged last, so they can override the defaults
    """
    issued_at = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)

    claims = {
        "sub": str(subject),
        "type": "access",
        "iss": settings.AUTH_LOCAL_ISSUER,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + expires_delta).timestamp()),
    }
    claims.update(additional_claims or {})

    return jose_jwt.encode({"alg": settings.JWT_ALGORITHM}, claims, _signing_key)


def verify_token(token: str, token_type: str = "access") -> str:
    """
    Return the subject of a valid token

    Raises:
        InvalidTokenError: Bad signature, expired, wrong type, no subject or
            untrusted issuer
    """
    return token_validator.validate(token, token_type=token_type).subject


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception as e:
        logger.error("Password verification error", error=str(e))
        return False


def get_password_hash(password: str) -> str:
    """bcrypt ignores input past 72 bytes, so longer passwords are cut there"""
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        password = encoded[:BCRYPT_MAX_BYTES].decode("utf-8", errors="ignore")
        logger.warning("Password truncated for bcrypt", max_bytes=BCRYPT_MAX_BYTES)

    return pwd_context.hash(password)
