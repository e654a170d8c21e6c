from datetime import datetime, timedelta

import pytest
from flask_jwt_extended import create_access_token

from config import Config
from portfolio_cms import create_app
from portfolio_cms.extensions import db
from portfolio_cms.services.comment_service import CommentService
from portfolio_cms.services.content_service import ContentService
from portfolio_cms.services.events import EventSink
from portfolio_cms.services.media_service import MediaService
from portfolio_cms.services.project_service import ProjectService
from portfolio_cms.services.storage import LocalStorage


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-bytes"
    RATE_LIMIT_ENABLED = True
    RATE_LIMIT_SWEEP_ENABLED = False
    EVENT_SINK = "none"
    LOG_LEVEL = "WARNING"


class FakeClock:
    """Manually advanced clock; every call ticks one second so ordering is stable."""

    def __init__(self, start=datetime(2024, 5, 15, 12, 0, 0)):
        self.now = start

    def set(self, value):
        self.now = value

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)

    def __call__(self):
        value = self.now
        self.now += timedelta(seconds=1)
        return value


class RecordingEventSink(EventSink):
    def __init__(self):
        self.events = []

    def _publish(self, name, context):
        self.events.append((name, context))

    def names(self):
        return [name for name, _ in self.events]


def make_app(tmp_path, **overrides):
    attrs = {"UPLOAD_FOLDER": str(tmp_path / "uploads")}
    attrs.update(overrides)
    return create_app(type("Cfg", (TestingConfig,), attrs))


@pytest.fixture
def app(tmp_path):
    app = make_app(tmp_path)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    token = create_access_token(identity="admin-1")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def events():
    return RecordingEventSink()


@pytest.fixture
def uow(app):
    return app.extensions["uow"]


@pytest.fixture
def content_service(uow, events, clock):
    return ContentService(uow, events, clock=clock)


@pytest.fixture
def comment_service(uow, events, clock):
    return CommentService(uow, events, clock=clock)


@pytest.fixture
def project_service(uow, events):
    return ProjectService(uow, events)


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path / "media"), "/static/uploads")


@pytest.fixture
def media_service(uow, storage, events, clock):
    return MediaService(uow, storage, events, clock=clock)


@pytest.fixture
def article_fields():
    def build(**overrides):
        fields = {
            "title": "Building a Flask API",
            "content": "Blueprints, services and a unit of work.",
            "summary": "Notes on structure",
            "status": "Draft",
            "featured_image_url": None,
            "meta_description": None,
            "meta_keywords": None,
            "tag_names": [],
        }
        fields.update(overrides)
        return fields

    return build


@pytest.fixture
def published_article(content_service, article_fields):
    result = content_service.create(article_fields(status="Published", tag_names=["Flask"]), "admin-1")
    return result.data


@pytest.fixture
def app_factory(tmp_path):
    """Build an extra app with config overrides (caller pushes its own context)."""
    return lambda **overrides: make_app(tmp_path, **overrides)
