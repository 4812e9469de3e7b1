"""
Tests for the customer service rules and payload validation.

Covers:
- NIC uniqueness on create and update (own NIC allowed on update)
- NotFound on reads/update/delete of missing ids
- Field validation (required, lengths, date format, trimming)
"""
from datetime import date

import pytest

from app.customer_management import create_app
from app.customer_management.db import session_scope
from app.customer_management.errors import Conflict, NotFound, ValidationError
from app.customer_management.models import Base
from app.customer_management.modules.customers.repository import CustomerStore
from app.customer_management.modules.customers.service import (
    CustomerInput,
    count_customers,
    create_customer,
    delete_customer,
    get_customer,
    get_customer_by_nic,
    list_customers,
    require_customer_input,
    update_customer,
    validate_customer_payload,
)


@pytest.fixture()
def store(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.delenv("DB_AUTO_CREATE", raising=False)

    app = create_app()
    Base.metadata.create_all(bind=app.extensions["sqlalchemy_engine"])
    with session_scope(app) as s:
        yield CustomerStore(s)


ALICE = CustomerInput(name="Alice", nic_number="NIC001", date_of_birth=date(1990, 1, 1))
BOB = CustomerInput(name="Bob", nic_number="NIC002", date_of_birth=date(1985, 5, 5))


class TestCustomerService:
    def test_create_then_get(self, store):
        created = create_customer(store, ALICE)
        store.commit()

        fetched = get_customer(store, created.id)
        assert fetched.id is not None
        assert (fetched.name, fetched.nic_number, fetched.date_of_birth) == ("Alice", "NIC001", date(1990, 1, 1))
        assert fetched.created_at == fetched.updated_at

    def test_create_duplicate_nic_conflicts(self, store):
        create_customer(store, ALICE)
        store.commit()

        with pytest.raises(Conflict):
            create_customer(store, CustomerInput(name="Bob", nic_number="NIC001", date_of_birth=date(1985, 5, 5)))
        assert count_customers(store) == 1

    def test_update_missing_id_not_found(self, store):
        with pytest.raises(NotFound):
            update_customer(store, 42, ALICE)

    def test_update_to_other_customers_nic_conflicts(self, store):
        alice = create_customer(store, ALICE)
        create_customer(store, BOB)
        store.commit()

        with pytest.raises(Conflict):
            update_customer(store, alice.id, CustomerInput(name="Alice", nic_number="NIC002", date_of_birth=date(1990, 1, 1)))
        assert get_customer(store, alice.id).nic_number == "NIC001"

    def test_update_keeping_own_nic_succeeds(self, store):
        alice = create_customer(store, ALICE)
        store.commit()

        updated = update_customer(
            store, alice.id, CustomerInput(name="Alice B.", nic_number="NIC001", date_of_birth=date(1990, 1, 2))
        )
        store.commit()
        assert updated.id == alice.id
        assert updated.name == "Alice B."
        assert updated.date_of_birth == date(1990, 1, 2)

    def test_update_to_unused_nic_succeeds(self, store):
        alice = create_customer(store, ALICE)
        store.commit()

        update_customer(store, alice.id, CustomerInput(name="Alice", nic_number="NIC999", date_of_birth=date(1990, 1, 1)))
        store.commit()
        assert get_customer_by_nic(store, "NIC999").id == alice.id
        with pytest.raises(NotFound):
            get_customer_by_nic(store, "NIC001")

    def test_delete_then_get_not_found(self, store):
        alice = create_customer(store, ALICE)
        store.commit()

        delete_customer(store, alice.id)
        store.commit()
        with pytest.raises(NotFound):
            get_customer(store, alice.id)

    def test_delete_missing_not_found(self, store):
        with pytest.raises(NotFound):
            delete_customer(store, 7)

    def test_list_and_count(self, store):
        assert list_customers(store) == []
        create_customer(store, ALICE)
        create_customer(store, BOB)
        store.commit()
        assert [c.name for c in list_customers(store)] == ["Alice", "Bob"]
        assert count_customers(store) == 2


class TestValidateCustomerPayload:
    def _payload(self, **overrides):
        payload = {"name": "Alice", "nicNumber": "NIC001", "dateOfBirth": "1990-01-01"}
        payload.update(overrides)
        return payload

    def test_valid_payload(self):
        data, errors = validate_customer_payload(self._payload())
        assert errors == []
        assert data == ALICE

    def test_trims_whitespace(self):
        data, errors = validate_customer_payload(self._payload(name="  Alice  ", nicNumber=" NIC001 "))
        assert errors == []
        assert (data.name, data.nic_number) == ("Alice", "NIC001")

    def test_ignores_server_managed_fields(self):
        data, errors = validate_customer_payload(self._payload(id=99, createdAt="x", updatedAt="y"))
        assert errors == []
        assert data == ALICE

    @pytest.mark.parametrize("name", [None, "", "   ", 5])
    def test_name_required(self, name):
        data, errors = validate_customer_payload(self._payload(name=name))
        assert data is None
        assert errors == ["Name is required."]

    def test_name_length(self):
        assert validate_customer_payload(self._payload(name="x" * 100))[1] == []
        assert validate_customer_payload(self._payload(name="x" * 101))[1] == ["Name must be at most 100 characters."]

    @pytest.mark.parametrize("nic", [None, "", "  "])
    def test_nic_required(self, nic):
        assert validate_customer_payload(self._payload(nicNumber=nic))[1] == ["NIC number is required."]

    def test_nic_length(self):
        assert validate_customer_payload(self._payload(nicNumber="9" * 20))[1] == []
        assert validate_customer_payload(self._payload(nicNumber="9" * 21))[1] == [
            "NIC number must be at most 20 characters."
        ]

    def test_date_of_birth_required(self):
        payload = self._payload()
        del payload["dateOfBirth"]
        assert validate_customer_payload(payload)[1] == ["Date of birth is required."]

    @pytest.mark.parametrize("dob", ["1990-02-30", "not-a-date", "19900101", "1990-W01-1", "1990-1-1", "１９９０-01-01"])
    def test_date_of_birth_invalid(self, dob):
        assert validate_customer_payload(self._payload(dateOfBirth=dob))[1] == [
            "Date of birth must be a valid YYYY-MM-DD date."
        ]

    def test_date_of_birth_wrong_type(self):
        assert validate_customer_payload(self._payload(dateOfBirth=19900101))[1] == [
            "Date of birth must be a YYYY-MM-DD string."
        ]

    def test_collects_all_errors(self):
        _, errors = validate_customer_payload({})
        assert errors == ["Name is required.", "NIC number is required.", "Date of birth is required."]

    def test_non_object_body(self):
        assert validate_customer_payload(["Alice"]) == (None, ["Request body must be a JSON object."])

    def test_require_customer_input_raises(self):
        with pytest.raises(ValidationError) as exc:
            require_customer_input({"name": "Alice"})
        assert "NIC number is required." in exc.value.errors
