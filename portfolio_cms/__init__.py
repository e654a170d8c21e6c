import logging

from flask import Flask
from sqlalchemy import event
from werkzeug.exceptions import HTTPException

from config import Config
from portfolio_cms.extensions import db, migrate, cors, socketio, jwt

logger = logging.getLogger(__name__)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db.init_app(app)
    migrate.init_app(app, db)
    cors.init_app(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})
    socketio.init_app(app)
    jwt.init_app(app)

    # Models must be imported before create_all / migrations see them
    from portfolio_cms.models import article, comment, media_file, project, tag  # noqa: F401

    with app.app_context():
        if db.engine.dialect.name == "sqlite":
            event.listen(db.engine, "connect", _enable_sqlite_foreign_keys)
        if app.config.get("AUTO_CREATE_TABLES", True):
            db.create_all()

    _init_services(app)
    _register_blueprints(app)
    _register_error_handlers(app)

    from portfolio_cms.utils.security import add_security_headers
    app.after_request(add_security_headers)

    from portfolio_cms import socket_events  # noqa: F401

    @app.route("/health")
    def health():
        from portfolio_cms.utils.response import success
        return success({"status": "ok"}, "Portfolio CMS is running")

    return app


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _init_services(app):
    from portfolio_cms.repositories.unit_of_work import UnitOfWork
    from portfolio_cms.services.comment_service import CommentService
    from portfolio_cms.services.content_service import ContentService
    from portfolio_cms.services.events import build_event_sink
    from portfolio_cms.services.media_service import MediaService
    from portfolio_cms.services.project_service import ProjectService
    from portfolio_cms.services.rate_limiter import RateLimiter
    from portfolio_cms.services.storage import LocalStorage

    cfg = app.config
    uow = UnitOfWork(db.session)
    events = build_event_sink(cfg.get("EVENT_SINK", "log"), socketio)
    storage = LocalStorage(cfg["UPLOAD_FOLDER"], cfg.get("UPLOAD_URL_PREFIX", "/static/uploads"))

    app.extensions["uow"] = uow
    app.extensions["events"] = events
    app.extensions["storage"] = storage
    app.extensions["content_service"] = ContentService(uow, events, page_size=cfg["ARTICLES_PAGE_SIZE"])
    app.extensions["project_service"] = ProjectService(uow, events)
    app.extensions["comment_service"] = CommentService(uow, events, page_size=cfg["COMMENTS_PAGE_SIZE"])
    app.extensions["media_service"] = MediaService(
        uow,
        storage,
        events,
        max_file_size=cfg["MEDIA_MAX_FILE_SIZE"],
        page_size=cfg["MEDIA_PAGE_SIZE"],
    )

    if cfg.get("RATE_LIMIT_ENABLED", True):
        limiter = RateLimiter(
            max_requests=cfg["RATE_LIMIT_MAX_REQUESTS"],
            window_seconds=cfg["RATE_LIMIT_WINDOW_SECONDS"],
            retry_after=cfg["RATE_LIMIT_RETRY_AFTER"],
            idle_seconds=cfg["RATE_LIMIT_IDLE_SECONDS"],
            sweep_seconds=cfg["RATE_LIMIT_SWEEP_SECONDS"],
        )
        if cfg.get("RATE_LIMIT_SWEEP_ENABLED", True):
            limiter.start()
        app.extensions["rate_limiter"] = limiter


def _register_blueprints(app):
    from portfolio_cms.routes.article_routes import article_bp
    from portfolio_cms.routes.comment_routes import comment_bp
    from portfolio_cms.routes.project_routes import project_bp
    from portfolio_cms.web.admin_articles import admin_article_bp
    from portfolio_cms.web.admin_comments import admin_comment_bp
    from portfolio_cms.web.admin_media import admin_media_bp
    from portfolio_cms.web.admin_projects import admin_project_bp

    app.register_blueprint(article_bp)
    app.register_blueprint(comment_bp)
    app.register_blueprint(project_bp)

    app.register_blueprint(admin_article_bp)
    app.register_blueprint(admin_comment_bp)
    app.register_blueprint(admin_media_bp)
    app.register_blueprint(admin_project_bp)


def _register_error_handlers(app):
    from portfolio_cms.services.rate_limiter import RateLimitExceeded
    from portfolio_cms.utils.response import error

    @app.errorhandler(RateLimitExceeded)
    def handle_rate_limit(exc):
        resp, status = error("Too many requests. Please try again later.", 429)
        resp.headers["Retry-After"] = str(exc.retry_after)
        return resp, status

    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        return error(exc.description or exc.name, exc.code)

    @app.errorhandler(Exception)
    def handle_unexpected(exc):
        db.session.rollback()
        logger.exception("Unhandled error")
        return error("An unexpected error occurred", 500, code="INTERNAL_ERROR")
