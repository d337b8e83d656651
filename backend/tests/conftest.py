import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("AI_PROVIDER", "groq")
os.environ.setdefault("GROQ_API_KEY", "test-key")

from typing import Any, Mapping

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from finsarthi.core.security import create_access_token, get_password_hash
from finsarthi.db.base import Base
from finsarthi.db.session import build_engine, get_db
from finsarthi.gateway.adapter import GatewayAdapter, SpeechUnavailableError
from finsarthi.gateway.factory import get_gateway_adapter
from finsarthi.main import create_app
from finsarthi.models.user import User, UserRole
from finsarthi.wizard.tree import AdviceNode


class FakeGatewayAdapter(GatewayAdapter):
    """Records calls and answers with canned text."""

    def __init__(self):
        self.calls: list[tuple[str, tuple]] = []
        self.speech_available = True

    def coach_reply(
        self, query: str, language: str, history: list[Mapping[str, str]] | None = None
    ) -> str:
        self.calls.append(("coach_reply", (query, language, history)))
        return f"coach says: {query}"

    def generate_advice(
        self, prompt: AdviceNode, form_data: Mapping[str, Any], language: str
    ) -> str:
        self.calls.append(("generate_advice", (prompt.key, dict(form_data), language)))
        return f"Advice for {prompt.key} in {language}"

    def summarize_news(self, article: str, language: str) -> str:
        self.calls.append(("summarize_news", (article, language)))
        return "short summary"

    def explain_term(self, term: str, language: str, literacy_level: str) -> str:
        self.calls.append(("explain_term", (term, language, literacy_level)))
        return f"{term} explained"

    def synthesize_speech(self, text: str) -> str:
        if not self.speech_available:
            raise SpeechUnavailableError("Speech synthesis is not available.")
        return "data:audio/wav;base64,AAAA"


@pytest.fixture()
def engine():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine):
    with Session(engine) as session:
        yield session
        session.rollback()


@pytest.fixture()
def fake_adapter() -> FakeGatewayAdapter:
    return FakeGatewayAdapter()


@pytest.fixture()
def client(engine, fake_adapter: FakeGatewayAdapter):
    testing_session = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    def override_get_db():
        db = testing_session()
        try:
            yield db
        finally:
            db.close()

    app = create_app()
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_gateway_adapter] = lambda: fake_adapter
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session):
    def _make_user(
        *,
        role: UserRole = UserRole.CUSTOMER,
        full_name: str = "Test User",
        email: str | None = None,
        password: str | None = None,
        is_available: bool = False,
        **fields: Any,
    ) -> User:
        user = User(
            role=role,
            full_name=full_name,
            email=email,
            hashed_password=get_password_hash(password) if password else None,
            is_available=is_available,
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def customer(make_user) -> User:
    return make_user(full_name="Amit Kumar", email="amit@example.com", phone="8765432109")


@pytest.fixture()
def coach(make_user) -> User:
    return make_user(
        role=UserRole.COACH,
        full_name="Priya Sharma",
        email="priya@example.com",
        password="coachpass1",
        is_available=True,
    )


@pytest.fixture()
def auth_headers():
    def _auth_headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _auth_headers
