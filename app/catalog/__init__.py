import logging
import os

from flask import Flask
from dotenv import load_dotenv

from app.catalog.config import load_config
from app.catalog.constants import API_V1_PREFIX, AUTH_PREFIX
from app.catalog.db import init_db, teardown_db_session
from app.catalog.errors import register_error_handlers
from app.catalog.routes import bp as routes_bp
from app.catalog.auth import bp as auth_bp, load_current_user
from app.catalog.rbac import gate_request
from app.catalog.modules.sections.api import bp as sections_bp
from app.catalog.modules.products.api import bp as products_bp
from app.catalog.modules.chat.api import bp as chat_bp


def _configure_logging(app: Flask) -> None:
    level = logging.getLevelName(app.config.get("LOG_LEVEL") or "INFO")
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("app.catalog").setLevel(level)
    app.logger.setLevel(level)


def create_app() -> Flask:
    load_dotenv()
    app = Flask(__name__)
    app.config.from_mapping(load_config())
    _configure_logging(app)

    # Production guardrails (fail fast with clear logs)
    env = (app.config.get("ENV") or "").strip().lower()
    if env in ("prod", "production"):
        if not os.environ.get("DATABASE_URL"):
            raise RuntimeError("DATABASE_URL is required in production.")
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")

    init_db(app)

    def _dispose_engine_on_fork() -> None:
        if hasattr(os, "register_at_fork"):
            def _after_fork_child():
                engine = app.extensions.get("sqlalchemy_engine")
                if engine:
                    engine.dispose()
                    app.logger.info("Disposed DB engine after fork (pid=%s)", os.getpid())

            os.register_at_fork(after_in_child=_after_fork_child)

    _dispose_engine_on_fork()

    app.register_blueprint(routes_bp)
    app.register_blueprint(auth_bp, url_prefix=AUTH_PREFIX)
    app.register_blueprint(sections_bp, url_prefix=API_V1_PREFIX)
    app.register_blueprint(products_bp, url_prefix=API_V1_PREFIX)
    app.register_blueprint(chat_bp, url_prefix="/api")

    # Order matters: identity first, then the gate.
    app.before_request(load_current_user)
    app.before_request(gate_request)
    app.teardown_appcontext(teardown_db_session)

    register_error_handlers(app)

    logging.getLogger(__name__).info("create_app() complete; app ready to serve")

    return app
