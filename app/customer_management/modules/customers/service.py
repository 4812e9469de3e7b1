"""
Customer Service: request handling logic on top of CustomerStore.

INVARIANT:
- nic_number is unique across all customers. The check here is the fast path
  that yields a clean Conflict; the uq_customers_nic_number constraint is the
  authoritative guard against concurrent writers (CustomerStore maps its
  violation to Conflict as well).

Functions do not commit. Callers end the unit of work with store.commit().
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date

from app.customer_management.errors import Conflict, NotFound, ValidationError
from app.customer_management.modules.customers.models import NAME_MAX_LENGTH, NIC_MAX_LENGTH, Customer
from app.customer_management.modules.customers.repository import CustomerStore

logger = logging.getLogger(__name__)

_ISO_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


@dataclass(frozen=True)
class CustomerInput:
    name: str
    nic_number: str
    date_of_birth: date


def parse_date(s: str | None) -> date | None:
    """Parse YYYY-MM-DD date string."""
    if not s:
        return None
    s = s.strip()
    if not s:
        return None
    if not _ISO_DATE_RE.fullmatch(s):
        raise ValueError(f"Expected YYYY-MM-DD, got {s!r}")
    return date.fromisoformat(s)


def validate_customer_payload(payload: object) -> tuple[CustomerInput | None, list[str]]:
    """Validate a create/update body. Returns (input, errors); input is None when errors is non-empty."""
    if not isinstance(payload, dict):
        return None, ["Request body must be a JSON object."]

    errors = []
    name = payload.get("name")
    nic_number = payload.get("nicNumber")
    raw_dob = payload.get("dateOfBirth")

    if not isinstance(name, str) or not name.strip():
        errors.append("Name is required.")
    elif len(name.strip()) > NAME_MAX_LENGTH:
        errors.append(f"Name must be at most {NAME_MAX_LENGTH} characters.")

    if not isinstance(nic_number, str) or not nic_number.strip():
        errors.append("NIC number is required.")
    elif len(nic_number.strip()) > NIC_MAX_LENGTH:
        errors.append(f"NIC number must be at most {NIC_MAX_LENGTH} characters.")

    dob = None
    if raw_dob is not None and not isinstance(raw_dob, str):
        errors.append("Date of birth must be a YYYY-MM-DD string.")
    else:
        try:
            dob = parse_date(raw_dob)
        except ValueError:
            errors.append("Date of birth must be a valid YYYY-MM-DD date.")
        else:
            if dob is None:
                errors.append("Date of birth is required.")

    if errors:
        return None, errors
    return CustomerInput(name=name.strip(), nic_number=nic_number.strip(), date_of_birth=dob), []


def require_customer_input(payload: object) -> CustomerInput:
    data, errors = validate_customer_payload(payload)
    if data is None:
        raise ValidationError(errors)
    return data


def list_customers(store: CustomerStore) -> list[Customer]:
    return store.find_all()


def count_customers(store: CustomerStore) -> int:
    return store.count()


def get_customer(store: CustomerStore, customer_id: int) -> Customer:
    customer = store.find_by_id(customer_id)
    if customer is None:
        raise NotFound(f"Customer {customer_id} not found")
    return customer


def get_customer_by_nic(store: CustomerStore, nic_number: str) -> Customer:
    customer = store.find_by_nic(nic_number)
    if customer is None:
        raise NotFound(f"Customer with NIC {nic_number!r} not found")
    return customer


def create_customer(store: CustomerStore, data: CustomerInput) -> Customer:
    if store.exists_by_nic(data.nic_number):
        raise Conflict(f"NIC number {data.nic_number!r} already exists")

    customer = store.save(
        Customer(
            name=data.name,
            nic_number=data.nic_number,
            date_of_birth=data.date_of_birth,
        )
    )
    logger.info("Created customer %s", customer.id)
    return customer


def update_customer(store: CustomerStore, customer_id: int, data: CustomerInput) -> Customer:
    customer = get_customer(store, customer_id)

    # Keeping the current NIC is always allowed; only a change can collide.
    if customer.nic_number != data.nic_number and store.exists_by_nic(data.nic_number):
        raise Conflict(f"NIC number {data.nic_number!r} already exists")

    customer.name = data.name
    customer.nic_number = data.nic_number
    customer.date_of_birth = data.date_of_birth
    store.save(customer)
    logger.info("Updated customer %s", customer.id)
    return customer


def delete_customer(store: CustomerStore, customer_id: int) -> None:
    if not store.exists_by_id(customer_id):
        raise NotFound(f"Customer {customer_id} not found")
    store.delete_by_id(customer_id)
    logger.info("Deleted customer %s", customer_id)
