import logging
import uuid

from flask import Flask, g
from dotenv import load_dotenv
from sqlalchemy import inspect as sa_inspect

from app.customer_management.config import load_config
from app.customer_management.models import Base  # noqa: F401  (registers module tables before blueprints import them)
from app.customer_management.db import init_db, teardown_db_session
from app.customer_management.errors import register_error_handlers
from app.customer_management.logging_config import setup_logging
from app.customer_management.routes import bp as routes_bp
from app.customer_management.modules.customers.api import bp as customers_bp

REQUIRED_COLUMNS = {
    "customers": ("id", "name", "nic_number", "date_of_birth", "created_at", "updated_at"),
}


def create_app() -> Flask:
    load_dotenv()
    app = Flask(__name__)
    app.config.from_mapping(load_config())
    app.json.sort_keys = False  # type: ignore[attr-defined]

    setup_logging(app.config["LOG_LEVEL"])

    # Production guardrails (fail fast with clear logs)
    env = (app.config.get("ENV") or "").strip().lower()
    if env in ("prod", "production"):
        if not app.config.get("DATABASE_URL") or str(app.config["DATABASE_URL"]).strip() == "":
            raise RuntimeError("DATABASE_URL is required in production.")
        if str(app.config["DATABASE_URL"]).startswith("sqlite"):
            raise RuntimeError("DATABASE_URL must be Postgres in production (not sqlite).")
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")

    init_db(app)

    app.register_blueprint(routes_bp)
    app.register_blueprint(customers_bp, url_prefix="/api")

    @app.before_request
    def _assign_request_id():
        g.request_id = uuid.uuid4().hex

    @app.after_request
    def _echo_request_id(response):
        rid = getattr(g, "request_id", None)
        if rid:
            response.headers["X-Request-ID"] = rid
        return response

    app.teardown_appcontext(teardown_db_session)
    register_error_handlers(app)

    _log_schema_drift(app)

    logging.getLogger(__name__).info("create_app() complete; app ready to serve")
    return app


def _log_schema_drift(app: Flask) -> None:
    """Log missing tables/columns once at startup; run `alembic upgrade head` to fix."""
    missing: list[str] = []
    try:
        insp = sa_inspect(app.extensions["sqlalchemy_engine"])
        for table, columns in REQUIRED_COLUMNS.items():
            if not insp.has_table(table):
                missing.append(f"{table} (table)")
                continue
            cols = {c["name"] for c in insp.get_columns(table)}
            missing.extend(f"{table}.{col}" for col in columns if col not in cols)
    except Exception:
        app.logger.exception("Schema health check failed")
        return

    app.config["SCHEMA_MISSING"] = missing
    if missing:
        app.logger.warning("DB schema out of date; run `alembic upgrade head`. Missing: %s", ", ".join(missing))
