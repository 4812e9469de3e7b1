"""
Create the schema directly from ORM metadata (development / SQLite).
Production databases should use `python scripts/release.py` (Alembic) instead.

Usage:
  python scripts/init_db.py
"""

import os
import sys
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

# Ensure repo root is on sys.path when running as a script (Windows-friendly).
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.customer_management.models import Base  # noqa: E402
from app.customer_management.modules.customers.repository import CustomerStore  # noqa: E402


@contextmanager
def _engine_scope(database_url: str):
    engine = create_engine(database_url, future=True, pool_pre_ping=True)
    try:
        yield engine
    finally:
        engine.dispose()


def create_schema(*, database_url: str | None = None) -> int:
    """
    Create missing tables (idempotent). Returns the number of customers present afterwards.
    """
    db_url = (database_url or os.environ.get("DATABASE_URL") or "sqlite:///customers.db").strip()

    with _engine_scope(db_url) as engine:
        Base.metadata.create_all(bind=engine)
        sm = sessionmaker(bind=engine, class_=Session, autoflush=False, expire_on_commit=False, future=True)
        with sm() as s:
            return CustomerStore(s).count()


def main() -> None:
    total = create_schema(database_url=None)
    print("Initialized database schema.")
    print(f"Customers present: {total}")


if __name__ == "__main__":
    main()
