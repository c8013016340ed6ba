"""Bearer token verification and route guards.

Tokens are RS256 JWTs issued by Auth0. Signing keys come from the tenant's
JWKS endpoint through PyJWT's ``PyJWKClient``, which caches them. Refetches
(triggered by an unknown ``kid``) are capped per minute so a stream of
forged tokens cannot hammer the key server.

Routes declare what they need with one of the guards below:

    public          nothing is checked
    authenticated   a valid token is required
    require_admin   a valid token carrying the admin role is required

Guards are FastAPI dependencies, so they are composed in the route
decorator and run before the handler. A failing guard short-circuits the
request.
"""
import logging
from collections.abc import Callable
from typing import Any

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from limits import parse
from limits.storage import MemoryStorage
from limits.strategies import MovingWindowRateLimiter
from pydantic import BaseModel

from app.core.config import Settings, settings
from app.core.exceptions import Unauthenticated, Unauthorized

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class Claims(BaseModel):
    """Verified attributes of the caller."""
    sub: str
    roles: list[str] = []

    def has_role(self, role: str) -> bool:
        return role in self.roles


class RateLimitedJWKClient(jwt.PyJWKClient):
    """PyJWKClient that refuses to fetch the key set too often."""

    def __init__(self, uri: str, requests_per_minute: int, **kwargs):
        super().__init__(uri, **kwargs)
        self.rate_limit = parse(f"{requests_per_minute}/minute")
        self.limiter = MovingWindowRateLimiter(MemoryStorage())

    def fetch_data(self) -> Any:
        if not self.limiter.hit(self.rate_limit, self.uri):
            logger.warning(f"Refusing JWKS fetch from {self.uri}: limit {self.rate_limit} reached")
            raise jwt.PyJWKClientError("JWKS request rate limit exceeded")
        logger.debug(f"Fetching signing keys from {self.uri}")
        return super().fetch_data()


class IdentityVerifier:
    """Validates bearer tokens and extracts claims.

    Args:
        key_resolver: Returns the public key that should have signed the
            given token.
        issuer: Expected ``iss`` claim.
        audience: Expected ``aud`` claim.
        roles_claim: Name of the namespaced claim listing the caller's roles.
    """

    algorithms = ["RS256"]

    def __init__(
        self,
        key_resolver: Callable[[str], Any],
        issuer: str,
        audience: str,
        roles_claim: str,
    ):
        self.key_resolver = key_resolver
        self.issuer = issuer
        self.audience = audience
        self.roles_claim = roles_claim

    @classmethod
    def from_settings(cls, config: Settings) -> "IdentityVerifier":
        client = RateLimitedJWKClient(
            config.jwks_uri,
            requests_per_minute=config.jwks_requests_per_minute,
            cache_keys=True,
            lifespan=config.jwks_cache_seconds,
        )
        return cls(
            key_resolver=lambda token: client.get_signing_key_from_jwt(token).key,
            issuer=config.issuer,
            audience=config.auth0_api_audience,
            roles_claim=config.roles_claim,
        )

    def verify(self, token: str) -> Claims:
        try:
            key = self.key_resolver(token)
            payload = jwt.decode(
                token,
                key,
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self.issuer,
                options={"require": ["exp", "sub"]},
            )
        except jwt.PyJWTError as e:
            logger.debug(f"Token rejected: {e}")
            raise Unauthenticated(f"Invalid token: {e}") from e

        roles = payload.get(self.roles_claim) or []
        if isinstance(roles, str):
            roles = [roles]
        elif not isinstance(roles, list):
            roles = []
        # Entries that are not role names grant nothing
        roles = [role for role in roles if isinstance(role, str)]
        return Claims(sub=payload["sub"], roles=roles)


def get_identity_verifier(request: Request) -> IdentityVerifier:
    """Dependency returning the verifier built at startup."""
    verifier = getattr(request.app.state, "identity_verifier", None)
    if verifier is None:
        verifier = IdentityVerifier.from_settings(settings)
        request.app.state.identity_verifier = verifier
    return verifier


class AuthGuard:
    """Base class for route guards.

    Calling a guard returns the caller's claims, or None when the guard
    does not look at the token.
    """

    def __call__(self) -> Claims | None:
        return None


class Public(AuthGuard):
    """Lets every request through without reading the token."""


class Authenticated(AuthGuard):
    """Requires a verifiable bearer token."""

    def __call__(
        self,
        request: Request,
        credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
        verifier: IdentityVerifier = Depends(get_identity_verifier),
    ) -> Claims:
        if credentials is None:
            raise Unauthenticated()
        claims = verifier.verify(credentials.credentials)
        self.authorize(claims)
        request.state.claims = claims
        return claims

    def authorize(self, claims: Claims) -> None:
        pass


class HasRole(Authenticated):
    """Requires a verifiable token whose claims include ``role``."""

    def __init__(self, role: str):
        self.role = role

    def authorize(self, claims: Claims) -> None:
        if not claims.has_role(self.role):
            logger.info(f"Denied {claims.sub}: missing role '{self.role}'")
            raise Unauthorized(f"Not authorized for {self.role} access")


public = Public()
authenticated = Authenticated()
require_admin = HasRole(settings.admin_role)
