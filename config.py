import os
from dotenv import load_dotenv

load_dotenv()


def _database_url():
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        return "sqlite:///" + os.path.join(os.path.abspath(os.path.dirname(__file__)), "portfolio.db")
    # Heroku/Railway style URLs
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg2://", 1)
    return url


def _flag(name, default="1"):
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}
    # create_all on startup; turn off once Flask-Migrate owns the schema
    AUTO_CREATE_TABLES = _flag("AUTO_CREATE_TABLES")

    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", SECRET_KEY)

    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Upload
    BASE_DIR = os.path.abspath(os.path.dirname(__file__))
    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", os.path.join(BASE_DIR, "portfolio_cms/static/uploads"))
    UPLOAD_URL_PREFIX = "/static/uploads"
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # request body cap
    MEDIA_MAX_FILE_SIZE = 10 * 1024 * 1024

    # Pagination
    ARTICLES_PAGE_SIZE = int(os.environ.get("ARTICLES_PAGE_SIZE", 10))
    COMMENTS_PAGE_SIZE = int(os.environ.get("COMMENTS_PAGE_SIZE", 20))
    MEDIA_PAGE_SIZE = int(os.environ.get("MEDIA_PAGE_SIZE", 20))

    # Rate limiting (public API)
    RATE_LIMIT_ENABLED = _flag("RATE_LIMIT_ENABLED")
    RATE_LIMIT_MAX_REQUESTS = int(os.environ.get("RATE_LIMIT_MAX_REQUESTS", 100))
    RATE_LIMIT_WINDOW_SECONDS = int(os.environ.get("RATE_LIMIT_WINDOW_SECONDS", 60))
    RATE_LIMIT_RETRY_AFTER = int(os.environ.get("RATE_LIMIT_RETRY_AFTER", 60))
    RATE_LIMIT_IDLE_SECONDS = int(os.environ.get("RATE_LIMIT_IDLE_SECONDS", 600))
    RATE_LIMIT_SWEEP_SECONDS = int(os.environ.get("RATE_LIMIT_SWEEP_SECONDS", 300))
    RATE_LIMIT_SWEEP_ENABLED = _flag("RATE_LIMIT_SWEEP_ENABLED")

    # 'log', 'socketio' or 'none'
    EVENT_SINK = os.environ.get("EVENT_SINK", "log").strip().lower()

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # only behind https
    SECURITY_HSTS_ENABLED = _flag("SECURITY_HSTS_ENABLED", "0")
