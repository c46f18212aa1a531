import random

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from app.infrastructure.db.session import Base
from app.infrastructure.trivia.trivia_client import TriviaClient
from app.presentation.dependencies import get_db, get_trivia_client

TRIVIA_ITEMS = [
    ("What is 2 + 2?", "4", ["3", "5", "22"]),
    ("Which gas do plants absorb?", "Carbon dioxide", ["Oxygen", "Nitrogen", "Helium"]),
    ("Who wrote &quot;Hamlet&quot;?", "William Shakespeare", ["Homer", "Dante", "Goethe"]),
    ("What is the capital of Italy?", "Rome", ["Milan", "Turin", "Naples"]),
    ("How many legs does a spider have?", "8", ["6", "10", "12"]),
    ("What is H2O?", "Water", ["Salt", "Sugar", "Sand"]),
    ("Which planet is largest?", "Jupiter", ["Earth", "Mars", "Venus"]),
    ("What colour is a ripe banana?", "Yellow", ["Blue", "Purple", "Black"]),
    ("What is the boiling point of water in &deg;C?", "100", ["90", "80", "120"]),
    ("Which animal barks?", "Dog", ["Cat", "Cow", "Horse"]),
    ("What is 10 / 2?", "5", ["2", "8", "20"]),
    ("Which ocean borders Portugal?", "Atlantic", ["Pacific", "Indian", "Arctic"]),
    ("Who painted &#039;Starry Night&#039;?", "Vincent van Gogh", ["Monet", "Dali", "Klimt"]),
    ("What is the square root of 81?", "9", ["7", "8", "11"]),
    ("Which metal is liquid at room temperature?", "Mercury", ["Iron", "Gold", "Lead"]),
]


def opentdb_payload(amount=15):
    return {
        "response_code": 0,
        "results": [
            {
                "category": "General Knowledge",
                "type": "multiple",
                "difficulty": "easy",
                "question": q,
                "correct_answer": correct,
                "incorrect_answers": wrong,
            }
            for q, correct, wrong in TRIVIA_ITEMS[:amount]
        ],
    }


class UpstreamStub:
    """Programmable stand-in for the Open Trivia DB."""

    def __init__(self):
        self.mode = "ok"
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.mode == "down":
            raise httpx.ConnectError("connection refused", request=request)
        if self.mode == "error":
            return httpx.Response(503, request=request)
        if self.mode == "garbage":
            return httpx.Response(200, json=[], request=request)
        if self.mode == "empty":
            return httpx.Response(200, json={"response_code": 1, "results": []}, request=request)
        if request.url.path == "/api_category.php":
            return httpx.Response(
                200,
                json={"trivia_categories": [{"id": 9, "name": "General Knowledge"}]},
                request=request,
            )
        amount = int(request.url.params.get("amount", 15))
        return httpx.Response(200, json=opentdb_payload(min(amount, 15)), request=request)


@pytest.fixture
def upstream():
    return UpstreamStub()


@pytest.fixture
def trivia_client(upstream):
    client = TriviaClient(
        "https://opentdb.test",
        retry_attempts=2,
        retry_wait_seconds=0,
        transport=httpx.MockTransport(upstream),
        rng=random.Random(7),
    )
    yield client
    client.close()


@pytest.fixture
def db_session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def client(db_session_factory, trivia_client):
    def override_get_db():
        db = db_session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_trivia_client] = lambda: trivia_client
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


def register_user(client, name="Ada Lovelace", email="ada@example.com", password="secret123"):
    response = client.post(
        "/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    body = response.json()
    return {"Authorization": f"Bearer {body['token']}"}, body["user"]


@pytest.fixture
def auth_headers(client):
    headers, _ = register_user(client)
    return headers


def build_submission(correct_flags, time_used=600, completed=True):
    """Save payload where question i is answered correctly iff correct_flags[i]."""
    questions = []
    for i, flag in enumerate(correct_flags):
        q, correct, wrong = TRIVIA_ITEMS[i % len(TRIVIA_ITEMS)]
        questions.append(
            {
                "question": q,
                "correct_answer": correct,
                "user_answer": correct if flag else wrong[0],
                "options": [correct] + wrong,
                "category": "General Knowledge",
                "difficulty": "easy",
            }
        )
    return {"questions": questions, "timeUsed": time_used, "completed": completed}
