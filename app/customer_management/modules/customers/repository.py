"""
Customer Store: persistence for customer records over a SQLAlchemy session.

The store owns id assignment (database autoincrement) and timestamp stamping.
Any SQLAlchemy failure is rolled back and re-raised as StorageError, except a
unique-constraint violation on the NIC number, which becomes Conflict.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from functools import wraps
from typing import Any, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.customer_management.errors import Conflict, StorageError
from app.customer_management.modules.customers.models import ID_MAX, Customer

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _storable_id(customer_id: int) -> bool:
    return 1 <= customer_id <= ID_MAX


def _guarded(fn: F) -> F:
    @wraps(fn)
    def wrapped(self: "CustomerStore", *args: Any, **kwargs: Any):
        try:
            return fn(self, *args, **kwargs)
        except IntegrityError as e:
            self.s.rollback()
            raise Conflict("NIC number already exists") from e
        except SQLAlchemyError as e:
            self.s.rollback()
            raise StorageError(f"{fn.__name__} failed: {e.__class__.__name__}") from e

    return wrapped  # type: ignore[return-value]


class CustomerStore:
    def __init__(self, s: Session):
        self.s = s

    @_guarded
    def find_all(self) -> list[Customer]:
        return list(self.s.scalars(select(Customer).order_by(Customer.id.asc())))

    @_guarded
    def find_by_id(self, customer_id: int) -> Customer | None:
        if not _storable_id(customer_id):
            return None
        return self.s.get(Customer, customer_id)

    @_guarded
    def find_by_nic(self, nic_number: str) -> Customer | None:
        return self.s.scalars(select(Customer).where(Customer.nic_number == nic_number)).one_or_none()

    @_guarded
    def exists_by_nic(self, nic_number: str) -> bool:
        stmt = select(Customer.id).where(Customer.nic_number == nic_number).limit(1)
        return self.s.execute(stmt).first() is not None

    @_guarded
    def exists_by_id(self, customer_id: int) -> bool:
        if not _storable_id(customer_id):
            return False
        stmt = select(Customer.id).where(Customer.id == customer_id).limit(1)
        return self.s.execute(stmt).first() is not None

    @_guarded
    def save(self, customer: Customer) -> Customer:
        """
        Insert (customer.id is None) or update.
        Insert stamps created_at and updated_at with the same instant; update refreshes updated_at only.
        """
        now = _utcnow()
        if customer.id is None:
            customer.created_at = now
            customer.updated_at = now
            self.s.add(customer)
        else:
            customer.updated_at = now
        self.s.flush()
        return customer

    @_guarded
    def delete_by_id(self, customer_id: int) -> None:
        if not _storable_id(customer_id):
            return
        customer = self.s.get(Customer, customer_id)
        if customer is not None:
            self.s.delete(customer)
            self.s.flush()

    @_guarded
    def count(self) -> int:
        return int(self.s.scalar(select(func.count()).select_from(Customer)) or 0)

    @_guarded
    def commit(self) -> None:
        self.s.commit()
