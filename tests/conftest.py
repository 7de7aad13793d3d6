import hashlib
import hmac
import json
import time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from order_webhook.config import Settings
from order_webhook.database import Base
from order_webhook.dispatcher import build_dispatcher
from order_webhook.main import create_app
from order_webhook.projector import PaymentSuccessProjector
from order_webhook.service import AckPolicy, WebhookService
from order_webhook.store import OrderStore
from order_webhook.stripe_service import StripeClient

SQLALCHEMY_DATABASE_URL = "sqlite:///./test_temp.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={
                       "check_same_thread": False})
TestingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=engine)

WEBHOOK_SECRET = "whsec_test_secret"


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def sign():
    """Sign a payload the way Stripe does: HMAC-SHA256 over "<t>.<body>"."""
    def _sign(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int = None) -> str:
        timestamp = int(time.time()) if timestamp is None else timestamp
        signed = f"{timestamp}.{payload.decode('utf-8')}".encode("utf-8")
        digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
        return f"t={timestamp},v1={digest}"
    return _sign


@pytest.fixture
def make_event():
    def _make_event(event_type: str, obj: dict, event_id: str = "evt_test") -> bytes:
        envelope = {
            "id": event_id,
            "object": "event",
            "type": event_type,
            "data": {"object": obj},
        }
        return json.dumps(envelope).encode("utf-8")
    return _make_event


@pytest.fixture
def store():
    return OrderStore(TestingSessionLocal)


@pytest.fixture
def stripe_client():
    return StripeClient(webhook_secret=WEBHOOK_SECRET)


@pytest.fixture
def service(store, stripe_client):
    return WebhookService(
        stripe_client,
        build_dispatcher(PaymentSuccessProjector(store)),
        AckPolicy.ACK_ONCE_VERIFIED,
    )


@pytest.fixture
def settings():
    return Settings(
        stripe_webhook_secret=WEBHOOK_SECRET,
        database_url=SQLALCHEMY_DATABASE_URL,
    )


@pytest.fixture
def client(settings, service):
    fastapi_app = create_app(settings=settings, service=service)
    with TestClient(fastapi_app) as c:
        yield c
