import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    secret_key: str
    env: str
    database_url: str
    log_level: str
    db_auto_create: bool


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def load_settings() -> Settings:
    env = _getenv("ENV", "development")
    # Production must name its database explicitly; create_app() rejects an empty URL there.
    default_db = "" if env.lower() in ("prod", "production") else "sqlite:///customers.db"
    return Settings(
        secret_key=_getenv("SECRET_KEY", "change-me"),
        env=env,
        database_url=_getenv("DATABASE_URL", default_db),
        log_level=_getenv("LOG_LEVEL", "INFO").upper(),
        db_auto_create=_getenv("DB_AUTO_CREATE", "0") == "1",
    )


def load_config() -> dict:
    s = load_settings()
    return {
        "SECRET_KEY": s.secret_key,
        "ENV": s.env,
        "DATABASE_URL": s.database_url,
        "LOG_LEVEL": s.log_level,
        "DB_AUTO_CREATE": s.db_auto_create,
    }
