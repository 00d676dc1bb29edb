import time
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient

from dealroom.config.settings import TestingConfig
from dealroom.domain.entities.conversation import Conversation
from dealroom.domain.entities.participant import Participant
from dealroom.domain.ports.clock import Clock
from dealroom.domain.value_objects.deal_type import DealType
from dealroom.domain.value_objects.participant_role import ParticipantRole
from dealroom.domain.value_objects.urgency import Urgency
from dealroom.domain.value_objects.user_id import UserId
from dealroom.fastapi_app import create_fastapi_app

SERVICE_AUTH_SECRET = "test-secret"
AUD = "dealroom-tests"
ISS = "dealroom-host"

START = datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)

FINANCE_MANAGER = UserId("user-1")
BORROWER = UserId("borrower-1")
LENDER = UserId("lender-1")


class FakeClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = START):
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float = 60) -> datetime:
        self.current = self.current + timedelta(seconds=seconds)
        return self.current


def build_participants(clock: Clock) -> list[Participant]:
    now = clock.now()
    return [
        Participant.create(
            FINANCE_MANAGER, "Alice Chen", ParticipantRole.FINANCE_MANAGER, now,
            company="Summit Equipment",
        ),
        Participant.create(BORROWER, "Bob Rivera", ParticipantRole.BORROWER, now),
        Participant.create(LENDER, "Lena Park", ParticipantRole.LENDER, now),
    ]


def build_conversation(clock: Clock, **overrides) -> Conversation:
    fields = dict(
        transaction_id="TX-1001",
        title="Excavator fleet financing",
        borrower_name="Acme Construction",
        deal_amount=750_000,
        deal_type=DealType.EQUIPMENT_FINANCING,
        initial_participants=build_participants(clock),
        urgency=Urgency.MEDIUM,
    )
    fields.update(overrides)
    return Conversation.create(clock=clock, **fields)


def service_token(user_id="user-1", name="Alice Chen", secret=SERVICE_AUTH_SECRET):
    now = int(time.time())
    claims = {
        "sub": user_id,
        "iat": now,
        "exp": now + 300,
        "iss": ISS,
        "aud": AUD,
    }
    if name:
        claims["name"] = name
    return jwt.encode(claims, secret, algorithm="HS256")


def auth(user_id="user-1", name="Alice Chen"):
    return {"Authorization": f"Bearer {service_token(user_id, name)}"}


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def conversation(clock):
    return build_conversation(clock)


@pytest.fixture()
def app_config(tmp_path):
    class ApiTestConfig(TestingConfig):
        SERVICE_AUTH_SECRET = "test-secret"
        SERVICE_AUTH_ISSUER = ISS
        SERVICE_AUTH_AUDIENCE = AUD
        UPLOAD_BASE = str(tmp_path / "uploads")
        UPLOAD_PUBLIC_BASE = "/files"
        MAX_CONTENT_LENGTH = 1024
        LENDER_MATCH_LIMIT = 3
        CONVERSATION_LIST_LIMIT = 50

    return ApiTestConfig


@pytest.fixture()
def app(app_config):
    """Create a new FastAPI app (with its own container) for each test."""
    return create_fastapi_app(app_config)


@pytest.fixture()
def client(app):
    """Test client running the app lifespan, so pending replies are cleaned up."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def auth_headers():
    """Authentication headers for the finance manager."""
    return auth()
