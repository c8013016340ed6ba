"""Shared test fixtures."""

from datetime import UTC, datetime, timedelta

import httpx
import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from app.commerce.client import OrderGateway, get_order_gateway
from app.core.database import get_session
from app.core.security import IdentityVerifier, get_identity_verifier
from app.main import app
from app.models import Event, Rsvp

ISSUER = "https://rsvp-test.auth0.example/"
AUDIENCE = "https://rsvp.example.com/api"
ROLES_CLAIM = "http://myapp.com/roles"

USER_ID = "auth0|user-1"
OTHER_USER_ID = "auth0|user-2"
ADMIN_ID = "auth0|admin"

ORDERS_PAYLOAD = {"orders": [{"id": "FS-1001"}, {"id": "FS-1002"}], "total": 2}


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Create a new database session for each test."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="signing_key", scope="session")
def signing_key_fixture():
    """RSA key standing in for the identity provider's signing key."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(name="verifier")
def verifier_fixture(signing_key) -> IdentityVerifier:
    """Verifier that trusts the test signing key instead of a JWKS endpoint."""
    return IdentityVerifier(
        key_resolver=lambda token: signing_key.public_key(),
        issuer=ISSUER,
        audience=AUDIENCE,
        roles_claim=ROLES_CLAIM,
    )


@pytest.fixture(name="make_token")
def make_token_fixture(signing_key):
    """Factory for signed access tokens."""

    def make_token(sub: str = USER_ID, roles: list[str] | None = None, **claims) -> str:
        now = datetime.now(UTC)
        payload = {
            "sub": sub,
            "iss": ISSUER,
            "aud": AUDIENCE,
            "iat": now,
            "exp": now + timedelta(hours=1),
        }
        if roles is not None:
            payload[ROLES_CLAIM] = roles
        payload.update(claims)
        return jwt.encode(payload, signing_key, algorithm="RS256")

    return make_token


@pytest.fixture(name="user_headers")
def user_headers_fixture(make_token) -> dict:
    return {"Authorization": f"Bearer {make_token(USER_ID)}"}


@pytest.fixture(name="other_user_headers")
def other_user_headers_fixture(make_token) -> dict:
    return {"Authorization": f"Bearer {make_token(OTHER_USER_ID)}"}


@pytest.fixture(name="admin_headers")
def admin_headers_fixture(make_token) -> dict:
    return {"Authorization": f"Bearer {make_token(ADMIN_ID, roles=['admin'])}"}


@pytest.fixture(name="orders_handler")
def orders_handler_fixture():
    """Request handler for the mocked commerce API. Tests may replace it."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=ORDERS_PAYLOAD)

    return handler


def make_gateway(handler) -> OrderGateway:
    """Gateway whose requests are answered by ``handler`` instead of the network."""
    return OrderGateway(
        base_url="https://api.fastspring.test",
        username="fs-user",
        password="fs-pass",
        user_agent="APPIZY Backend",
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture(name="gateway")
def gateway_fixture(orders_handler) -> OrderGateway:
    return make_gateway(orders_handler)


@pytest.fixture(name="client")
def client_fixture(session: Session, verifier: IdentityVerifier, gateway: OrderGateway):
    """Create a test client wired to the test database, verifier and gateway."""

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_identity_verifier] = lambda: verifier
    app.dependency_overrides[get_order_gateway] = lambda: gateway
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def make_event(session: Session, **fields) -> Event:
    """Insert an event directly, bypassing the store."""
    values = {
        "title": "Launch",
        "location": "HQ",
        "start_datetime": datetime.now(UTC) + timedelta(days=1),
        "end_datetime": datetime.now(UTC) + timedelta(days=1, hours=2),
        "description": "Product launch",
        "view_public": True,
    }
    values.update(fields)
    event = Event(**values)
    session.add(event)
    session.commit()
    session.refresh(event)
    return event


def make_rsvp(session: Session, event: Event, user_id: str = USER_ID, **fields) -> Rsvp:
    values = {"name": "Ada", "attending": True, "guests": 0}
    values.update(fields)
    rsvp = Rsvp(event_id=event.id, user_id=user_id, **values)
    session.add(rsvp)
    session.commit()
    session.refresh(rsvp)
    return rsvp


@pytest.fixture(name="sample_event")
def sample_event_fixture(session: Session) -> Event:
    """An upcoming public event."""
    return make_event(session)


@pytest.fixture(name="past_event")
def past_event_fixture(session: Session) -> Event:
    return make_event(
        session,
        title="Retrospective",
        start_datetime=datetime.now(UTC) - timedelta(days=3),
        end_datetime=datetime.now(UTC) - timedelta(days=3) + timedelta(hours=1),
    )


@pytest.fixture(name="sample_rsvp")
def sample_rsvp_fixture(session: Session, sample_event: Event) -> Rsvp:
    return make_rsvp(session, sample_event)
