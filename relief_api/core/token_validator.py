"""
Bearer token validation

Tokens are checked by the strategy registered for the active issuer. Only the
locally signed HS256 tokens are supported today; an external identity provider
plugs in as another TokenValidationStrategy.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from joserfc import jwt as jose_jwt
from joserfc.errors import JoseError
from joserfc.jwk import OctKey
import structlog

from relief_api.core.exceptions import InvalidTokenError

logger = structlog.get_logger()

LOCAL_STRATEGY = "local"


@dataclass(frozen=True)
class TokenValidationResult:
    """Verified token: the caller's user id plus the raw claims"""

    subject: str
    issuer: str
    claims: dict[str, Any] = field(default_factory=dict)


class TokenValidationStrategy(ABC):
    @abstractmethod
    def validate(self, token: str, token_type: str = "access") -> TokenValidationResult:
        """Return the verified token or raise InvalidTokenError"""
        raise NotImplementedError


class LocalJWTValidationStrategy(TokenValidationStrategy):
    """Tokens signed with the shared secret by create_access_token"""

    def __init__(self, secret_key: str, algorithm: str, issuer: str) -> None:
        self._key = OctKey.import_key(secret_key)
        self._algorithms = [algorithm]
        self._default_issuer = issuer
        # exp is checked against the current time, sub must be present
        self._registry = jose_jwt.JWTClaimsRegistry(
            exp={"essential": True},
            sub={"essential": True},
        )

    def _decode(self, token: str) -> Mapping[str, Any]:
        try:
            claims = jose_jwt.decode(token, self._key, algorithms=self._algorithms).claims
            self._registry.validate(claims)
        except (JoseError, ValueError) as exc:
            logger.warning("JWT verification failed", error=str(exc))
            raise InvalidTokenError(str(exc)) from exc
        return claims

    def validate(self, token: str, token_type: str = "access") -> TokenValidationResult:
        claims = self._decode(token)

        actual_type = claims.get("type")
        if actual_type != token_type:
            logger.warning("Unexpected token type", expected=token_type, actual=actual_type)
            raise InvalidTokenError("Invalid token type")

        subject = claims.get("sub")
        if subject is None or str(subject) == "":
            raise InvalidTokenError("Token missing subject")

        return TokenValidationResult(
            subject=str(subject),
            issuer=claims.get("iss") or self._default_issuer,
            claims=dict(claims),
        )


class IssuerAwareTokenValidator:
    """
    Dispatches to the strategy for the active issuer and rejects tokens whose
    issuer is not in the trusted set. An empty trusted set accepts any issuer.
    """

    def __init__(
        self,
        *,
        active_issuer: str,
        trusted_issuers: list[str],
        local_strategy: TokenValidationStrategy,
        external_strategies: Optional[dict[str, TokenValidationStrategy]] = None,
    ) -> None:
        self._active_issuer = active_issuer
        self._trusted_issuers = frozenset(trusted_issuers)
        self._strategies = {LOCAL_STRATEGY: local_strategy}
        self._strategies.update(external_strategies or {})

    def validate(self, token: str, token_type: str = "access") -> TokenValidationResult:
        try:
            strategy = self._strategies[self._active_issuer]
        except KeyError:
            # Misconfiguration rather than a bad credential
            logger.error("Unsupported active auth issuer", active_issuer=self._active_issuer)
            raise RuntimeError(f"Unsupported authentication issuer strategy: {self._active_issuer}")

        result = strategy.validate(token, token_type=token_type)

        if self._trusted_issuers and result.issuer not in self._trusted_issuers:
            logger.warning("Token issuer is not trusted", issuer=result.issuer)
            raise InvalidTokenError("Untrusted token issuer")

        logger.debug("Token verified", subject=result.subject, issuer=result.issuer)
        return result
