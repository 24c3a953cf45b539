from datetime import timedelta

import pytest
from joserfc import jwt as jose_jwt
from joserfc.jwk import OctKey

from relief_api.core.config import settings
from relief_api.core.exceptions import InvalidTokenError
from relief_api.core.security import create_access_token, verify_token
from relief_api.core.token_validator import IssuerAwareTokenValidator, LocalJWTValidationStrategy


def local_strategy() -> LocalJWTValidationStrategy:
    return LocalJWTValidationStrategy(
        secret_key=settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
        issuer=settings.AUTH_LOCAL_ISSUER,
    )


def test_verify_token_returns_subject():
    token = create_access_token(subject=42)

    assert verify_token(token, token_type="access") == "42"


def test_expired_token_is_rejected():
    token = create_access_token(subject=42, expires_delta=timedelta(minutes=-5))

    with pytest.raises(InvalidTokenError):
        verify_token(token)


def test_garbage_token_is_rejected():
    with pytest.raises(InvalidTokenError):
        verify_token("not-a-jwt")


def test_token_signed_with_other_key_is_rejected():
    other_key = OctKey.import_key("another-secret-key-that-is-long-enough-for-hs256")
    token = jose_jwt.encode(
        {"alg": settings.JWT_ALGORITHM},
        {"sub": "42", "type": "access", "exp": 4102444800, "iss": settings.AUTH_LOCAL_ISSUER},
        other_key,
    )

    with pytest.raises(InvalidTokenError):
        verify_token(token)


def test_wrong_token_type_is_rejected():
    token = create_access_token(subject=42, additional_claims={"type": "refresh"})

    with pytest.raises(InvalidTokenError):
        verify_token(token, token_type="access")


def test_token_without_subject_is_rejected():
    key = OctKey.import_key(settings.JWT_SECRET_KEY)
    token = jose_jwt.encode(
        {"alg": settings.JWT_ALGORITHM},
        {"type": "access", "exp": 4102444800, "iss": settings.AUTH_LOCAL_ISSUER},
        key,
    )

    with pytest.raises(InvalidTokenError):
        local_strategy().validate(token)


def test_issuer_aware_validator_rejects_untrusted_issuer_claim():
    validator = IssuerAwareTokenValidator(
        active_issuer="local",
        trusted_issuers=["relief-api"],
        local_strategy=local_strategy(),
    )

    token = create_access_token(subject=42, additional_claims={"iss": "malicious-issuer"})

    with pytest.raises(InvalidTokenError) as exc_info:
        validator.validate(token, token_type="access")

    assert "issuer" in str(exc_info.value).lower()


def test_issuer_aware_validator_fails_for_unsupported_active_strategy():
    validator = IssuerAwareTokenValidator(
        active_issuer="keycloak",
        trusted_issuers=["relief-api", "keycloak"],
        local_strategy=local_strategy(),
    )

    token = create_access_token(subject=42)

    with pytest.raises(RuntimeError):
        validator.validate(token, token_type="access")
