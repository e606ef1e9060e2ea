import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from inkwell.app import create_app
from inkwell.auth.passwords import hash_password
from inkwell.config import Settings
from inkwell.infra.database import Database
from inkwell.infra.post_repo import PostRepo
from inkwell.infra.user_repo import UserRepo
from inkwell.ratelimit import limiter

SECRET = "test-secret-key"
GOOD_PASSWORD = "Passw0rd!"


@pytest.fixture(autouse=True)
def _fresh_rate_limits():
    """Rate-limit counters live in process memory; start every test from zero."""
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        secret_key=SECRET,
        db_path=tmp_path / "data" / "inkwell.db",
        cookie_secure=False,
    )


@pytest.fixture()
def db(tmp_path: Path) -> Database:
    d = Database(tmp_path / "store.db")
    d.init_schema()
    return d


@pytest.fixture()
def user_repo(db: Database) -> UserRepo:
    return UserRepo(db)


@pytest.fixture()
def post_repo(db: Database) -> PostRepo:
    return PostRepo(db)


@pytest.fixture()
def make_user(user_repo: UserRepo):
    """Insert a user directly (bypasses policy) and return it."""
    def _make(username: str, password: str = GOOD_PASSWORD):
        return user_repo.create(username, hash_password(password)).value

    return _make


@pytest.fixture()
def ticking_clock():
    """Clock advancing one second per call, so creation order is unambiguous."""
    state = {"now": datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)}

    def _clock() -> datetime:
        state["now"] += timedelta(seconds=1)
        return state["now"]

    return _clock


@pytest.fixture()
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def signup(app):
    """Return a fresh client logged in as a newly registered user."""
    def _signup(username: str, password: str = GOOD_PASSWORD) -> TestClient:
        c = TestClient(app)
        r = c.post("/signup", data={"username": username, "password": password}, follow_redirects=False)
        assert r.status_code == 303, r.text
        return c

    return _signup
