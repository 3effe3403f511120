"""Pytest configuration and fixtures."""

import os
import tempfile
from pathlib import Path

# Plain-http test client must be able to send the session cookie back.
os.environ.setdefault("COOKIE_SECURE", "false")
os.environ.setdefault("UPLOAD_DIR", str(Path(tempfile.gettempdir()) / "inventory-test-uploads"))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from src.api.dependencies import get_image_host, get_mailer  # noqa: E402
from src.database import Base, get_db  # noqa: E402
from src.errors import EmailDeliveryError, UploadError  # noqa: E402
from src.main import app  # noqa: E402
from src.services.image_host import HostedImage  # noqa: E402


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


class FakeImageHost:
    """In-memory stand-in for the Cloudinary client."""

    def __init__(self):
        self.uploads = []
        self.fail = False

    async def upload(self, path, folder):
        if self.fail:
            raise UploadError("Image could not be uploaded")
        self.uploads.append((Path(path), folder))
        return HostedImage(
            secure_url=f"https://res.cloudinary.com/demo/image/upload/{Path(path).name}",
            public_id=Path(path).stem,
        )


class FakeMailer:
    """Records outgoing email instead of sending it."""

    def __init__(self):
        self.sent = []
        self.fail = False

    async def send_email(self, subject, html, send_to, sent_from, reply_to=None):
        if self.fail:
            raise EmailDeliveryError("Email not sent, please try again")
        self.sent.append(
            {
                "subject": subject,
                "html": html,
                "send_to": send_to,
                "sent_from": sent_from,
                "reply_to": reply_to,
            }
        )


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/inventory", "/inventory_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        # Create test database if it doesn't exist
        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield
    # Don't drop database - just leave it for next run (each test cleans up after itself)


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def image_host():
    return FakeImageHost()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture(scope="function")
def client(db, image_host, mailer):
    """Create a test client with database and external client overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_host] = lambda: image_host
    app.dependency_overrides[get_mailer] = lambda: mailer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def register(client, name: str, email: str, password: str) -> AuthHeaders:
    """Register a user and return bearer headers, leaving no cookie behind."""
    response = client.post(
        "/api/users",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201
    data = response.json()
    client.cookies.clear()

    return AuthHeaders(
        {"Authorization": f"Bearer {data['token']}"}, user_id=data["id"], email=data["email"]
    )


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return register(client, "Test User", "test@example.com", "testpass123")


@pytest.fixture
def other_auth_headers(client):
    """A second, unrelated user."""
    return register(client, "Other User", "other@example.com", "otherpass123")
