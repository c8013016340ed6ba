"""Tests for token verification and route guards."""

import time
from datetime import UTC, datetime, timedelta

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from app.core.config import Settings
from app.core.exceptions import Unauthenticated, Unauthorized
from app.core.security import (
    Claims,
    HasRole,
    IdentityVerifier,
    RateLimitedJWKClient,
)
from conftest import ADMIN_ID, AUDIENCE, ISSUER, ROLES_CLAIM, USER_ID


class TestIdentityVerifier:
    def test_valid_token_yields_claims(self, verifier: IdentityVerifier, make_token):
        claims = verifier.verify(make_token(USER_ID, roles=["admin", "editor"]))

        assert claims.sub == USER_ID
        assert claims.roles == ["admin", "editor"]

    def test_missing_roles_claim_means_no_roles(self, verifier: IdentityVerifier, make_token):
        claims = verifier.verify(make_token(USER_ID))
        assert claims.roles == []

    def test_single_role_string_is_accepted(self, verifier: IdentityVerifier, make_token):
        claims = verifier.verify(make_token(USER_ID, **{ROLES_CLAIM: "admin"}))
        assert claims.roles == ["admin"]

    @pytest.mark.parametrize(
        "roles_value, expected",
        [
            ([{"name": "admin"}], []),
            (["editor", 7, {"name": "admin"}], ["editor"]),
            ({"admin": True}, []),
            (42, []),
        ],
    )
    def test_malformed_roles_claim_grants_nothing(
        self, verifier: IdentityVerifier, make_token, roles_value, expected
    ):
        claims = verifier.verify(make_token(USER_ID, **{ROLES_CLAIM: roles_value}))

        assert claims.sub == USER_ID
        assert claims.roles == expected

    def test_expired_token_rejected(self, verifier: IdentityVerifier, make_token):
        expired = make_token(USER_ID, exp=datetime.now(UTC) - timedelta(minutes=5))
        with pytest.raises(Unauthenticated):
            verifier.verify(expired)

    def test_wrong_audience_rejected(self, verifier: IdentityVerifier, make_token):
        with pytest.raises(Unauthenticated):
            verifier.verify(make_token(USER_ID, aud="https://someone-else.example/api"))

    def test_wrong_issuer_rejected(self, verifier: IdentityVerifier, make_token):
        with pytest.raises(Unauthenticated):
            verifier.verify(make_token(USER_ID, iss="https://evil.example/"))

    def test_token_signed_by_other_key_rejected(self, verifier: IdentityVerifier):
        other_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": USER_ID, "iss": ISSUER, "aud": AUDIENCE, "exp": now + timedelta(hours=1)},
            other_key,
            algorithm="RS256",
        )
        with pytest.raises(Unauthenticated):
            verifier.verify(token)

    def test_hs256_token_rejected(self, verifier: IdentityVerifier):
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": USER_ID, "iss": ISSUER, "aud": AUDIENCE, "exp": now + timedelta(hours=1)},
            "shared-secret-that-should-not-be-accepted",
            algorithm="HS256",
        )
        with pytest.raises(Unauthenticated):
            verifier.verify(token)

    def test_malformed_token_rejected(self, signing_key):
        def resolver(token):
            # Mirrors PyJWKClient, which parses the header before looking up a key
            jwt.get_unverified_header(token)
            return signing_key.public_key()

        verifier = IdentityVerifier(resolver, ISSUER, AUDIENCE, ROLES_CLAIM)
        with pytest.raises(Unauthenticated):
            verifier.verify("not-a-jwt")

    def test_token_without_subject_rejected(self, verifier: IdentityVerifier, signing_key):
        now = datetime.now(UTC)
        token = jwt.encode(
            {"iss": ISSUER, "aud": AUDIENCE, "exp": now + timedelta(hours=1)},
            signing_key,
            algorithm="RS256",
        )
        with pytest.raises(Unauthenticated):
            verifier.verify(token)

    def test_unauthenticated_carries_bearer_challenge(self, verifier: IdentityVerifier):
        with pytest.raises(Unauthenticated) as exc_info:
            verifier.verify("not-a-jwt")
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    def test_from_settings_uses_tenant_endpoints(self):
        config = Settings(
            auth0_domain="tenant.auth0.example",
            auth0_api_audience=AUDIENCE,
            roles_claim=ROLES_CLAIM,
        )
        verifier = IdentityVerifier.from_settings(config)

        assert verifier.issuer == "https://tenant.auth0.example/"
        assert verifier.audience == AUDIENCE
        assert config.jwks_uri == "https://tenant.auth0.example/.well-known/jwks.json"


class TestRateLimitedJWKClient:
    def test_fetches_capped_per_minute(self, monkeypatch):
        calls = []

        def fake_fetch(self):
            calls.append(self.uri)
            return {"keys": []}

        monkeypatch.setattr(jwt.PyJWKClient, "fetch_data", fake_fetch)
        client = RateLimitedJWKClient(
            "https://tenant.auth0.example/.well-known/jwks.json", requests_per_minute=2
        )

        client.fetch_data()
        client.fetch_data()
        with pytest.raises(jwt.PyJWKClientError):
            client.fetch_data()
        assert len(calls) == 2

    def test_old_fetches_expire_from_window(self, monkeypatch):
        monkeypatch.setattr(jwt.PyJWKClient, "fetch_data", lambda self: {"keys": []})
        client = RateLimitedJWKClient("https://tenant.auth0.example/jwks", requests_per_minute=1)

        clock = [1_700_000_000.0]
        monkeypatch.setattr(time, "time", lambda: clock[0])

        client.fetch_data()
        with pytest.raises(jwt.PyJWKClientError):
            client.fetch_data()

        clock[0] += 61
        assert client.limiter.get_window_stats(client.rate_limit, client.uri).remaining == 1
        assert client.fetch_data() == {"keys": []}


class TestRoleGuard:
    def test_admin_role_passes(self):
        HasRole("admin").authorize(Claims(sub=ADMIN_ID, roles=["admin"]))

    def test_missing_role_raises(self):
        with pytest.raises(Unauthorized) as exc_info:
            HasRole("admin").authorize(Claims(sub=USER_ID, roles=["editor"]))
        assert exc_info.value.message == "Not authorized for admin access"
        assert exc_info.value.status_code == 401
