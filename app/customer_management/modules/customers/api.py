from __future__ import annotations

from flask import Blueprint, jsonify, request

from app.customer_management.db import db_session
from app.customer_management.errors import ValidationError
from app.customer_management.modules.customers.repository import CustomerStore
from app.customer_management.modules.customers.service import (
    count_customers,
    create_customer,
    delete_customer,
    get_customer,
    get_customer_by_nic,
    list_customers,
    require_customer_input,
    update_customer,
)

bp = Blueprint("customers", __name__)


def _store() -> CustomerStore:
    return CustomerStore(db_session())


def _json_body() -> object:
    payload = request.get_json(silent=True)
    if payload is None:
        raise ValidationError("Request body must be valid JSON.")
    return payload


# ---------- Read ----------
@bp.get("/customers")
def customers_list():
    customers = list_customers(_store())
    return jsonify([c.to_dict() for c in customers])


@bp.get("/customers/<int:customer_id>")
def customer_detail(customer_id: int):
    return jsonify(get_customer(_store(), customer_id).to_dict())


@bp.get("/customers/nic/<string:nic_number>")
def customer_by_nic(nic_number: str):
    return jsonify(get_customer_by_nic(_store(), nic_number).to_dict())


@bp.get("/customers/count")
def customers_count():
    return jsonify(count_customers(_store()))


# ---------- Write ----------
@bp.post("/customers")
def customers_create():
    data = require_customer_input(_json_body())
    store = _store()
    customer = create_customer(store, data)
    store.commit()
    return jsonify(customer.to_dict()), 201


@bp.put("/customers/<int:customer_id>")
def customers_update(customer_id: int):
    data = require_customer_input(_json_body())
    store = _store()
    customer = update_customer(store, customer_id, data)
    store.commit()
    return jsonify(customer.to_dict())


@bp.delete("/customers/<int:customer_id>")
def customers_delete(customer_id: int):
    store = _store()
    delete_customer(store, customer_id)
    store.commit()
    return "", 204
