"""
Test configuration and fixtures
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from src.api.app import app, get_geocoder, get_media_pipeline
from src.auth.identity import TokenDecoder, get_token_decoder
from src.config import AuthConfig
from src.db.database import Base, get_db
from src.db.store import ResourceStore
from src.exceptions import GeocodingError, MediaStorageError
from src.geocoding.nominatim import GeocodeResult
from src.media.uploads import MediaUploadPipeline
from src.models.campground import AuthorStamp

# Create in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeGeocoder:
    """Geocoder double that resolves every location unless told otherwise."""

    def __init__(self):
        self.calls = []
        self.results = {}
        self.failures = set()

    async def geocode(self, location_text):
        self.calls.append(location_text)
        if location_text in self.failures:
            raise GeocodingError(location_text, "no results")
        return self.results.get(
            location_text,
            GeocodeResult(lat=37.7459, lng=-119.5936, formatted_address=f"{location_text}, USA"),
        )


class FakeStorage:
    """Media storage double that keeps uploads in memory."""

    def __init__(self):
        self.stored = {}
        self.fail = False

    def store(self, content, name):
        if self.fail:
            raise MediaStorageError("bucket unavailable")
        self.stored[name] = content
        return f"https://media.example.com/{name}"


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database session for each test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(db_session):
    return ResourceStore(db_session)


@pytest.fixture
def geocoder():
    return FakeGeocoder()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def media(storage):
    return MediaUploadPipeline(storage=storage)


@pytest.fixture
def alice():
    return AuthorStamp(user_id="user-alice", display_name="alice")


@pytest.fixture
def bob():
    return AuthorStamp(user_id="user-bob", display_name="bob")


@pytest.fixture
def token_decoder():
    return TokenDecoder(AuthConfig(secret_key="test-secret"))


@pytest.fixture
def auth_headers(token_decoder):
    """Build bearer headers for an AuthorStamp."""

    def build(author):
        token = token_decoder.encode(author.user_id, author.display_name)
        return {"Authorization": f"Bearer {token}"}

    return build


@pytest.fixture
def make_campground(store, alice):
    """Persist a campground directly through the store."""

    def build(name="Cloud's Rest", author=None, **overrides):
        fields = dict(
            name=name,
            price=12.5,
            description="Granite views above the valley",
            image="https://media.example.com/clouds-rest.jpg",
            location="Yosemite Valley, CA, USA",
            lat=37.7459,
            lng=-119.5936,
        )
        fields.update(overrides)
        return store.create_campground(author=author or alice, **fields)

    return build


@pytest.fixture(scope="function")
def client(db_session, geocoder, media, token_decoder):
    """Create a test client with database and collaborator overrides"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_geocoder] = lambda: geocoder
    app.dependency_overrides[get_media_pipeline] = lambda: media
    app.dependency_overrides[get_token_decoder] = lambda: token_decoder
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
