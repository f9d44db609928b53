# backend/tests/test_record_service.py
from conftest import answer
from app.models import FormRecord
from app.schemas.record import RecordSubmit
from app.services.lookup_source_service import form_source_id
from app.services.record_service import RecordService


def _customer_lookup(builder, customers, orders):
    return builder.lookup_field(
        builder.section(orders),
        form_source_id(customers.id),
        label="Customer",
        useIdField=True,
        idFieldName="customer_id",
    )


def test_submit_to_missing_form(db_session):
    data = RecordSubmit(record_data={"f1": answer("Name", "x")})

    assert RecordService.submit_record(db_session, "missing", data) is None


def test_submit_rejects_empty_data(db_session, builder):
    form = builder.form(builder.module("Sales"), "Leads")

    for record_data in ({}, {"f1": answer("Name", "")}, {"f1": answer("Tags", [])}):
        result = RecordService.submit_record(db_session, form.id, RecordSubmit(record_data=record_data))
        assert result == {"error": "Record data is empty"}


def test_submit_creates_record(db_session, builder):
    form = builder.form(builder.module("Sales"), "Leads")

    record, updated = RecordService.submit_record(
        db_session, form.id, RecordSubmit(record_data={"f1": answer("Name", "Acme")})
    )
    db_session.commit()

    assert updated is False
    assert record.form_id == form.id
    assert record.submitted_by == "anonymous"


def test_id_field_updates_matching_source_record(db_session, builder):
    module = builder.module("Sales")
    customers = builder.form(module, "Customers")
    orders = builder.form(module, "Orders")
    existing = builder.record(customers, {
        "customer_id": answer("Customer ID", "C-1"),
        "name": answer("Name", "Acme"),
    })
    builder.record(customers, {"customer_id": answer("Customer ID", "C-2")})
    field = _customer_lookup(builder, customers, orders)

    submitted = {field.id: answer("Customer", {"customer_id": "C-1", "name": "Acme Corp"}, "lookup")}
    record, updated = RecordService.submit_record(
        db_session, orders.id, RecordSubmit(record_data=submitted, submitted_by="ops")
    )
    db_session.commit()

    assert updated is True
    assert record.id == existing.id
    assert record.record_data == submitted
    assert record.submitted_by == "ops"
    assert db_session.query(FormRecord).filter(FormRecord.form_id == orders.id).count() == 0


def test_id_field_without_match_inserts(db_session, builder):
    module = builder.module("Sales")
    customers = builder.form(module, "Customers")
    orders = builder.form(module, "Orders")
    builder.record(customers, {"customer_id": answer("Customer ID", "C-1")})
    field = _customer_lookup(builder, customers, orders)

    submitted = {field.id: answer("Customer", {"customer_id": "C-9"}, "lookup")}
    record, updated = RecordService.submit_record(db_session, orders.id, RecordSubmit(record_data=submitted))
    db_session.commit()

    assert updated is False
    assert record.form_id == orders.id


def test_plain_lookup_value_inserts(db_session, builder):
    module = builder.module("Sales")
    customers = builder.form(module, "Customers")
    orders = builder.form(module, "Orders")
    builder.record(customers, {"customer_id": answer("Customer ID", "C-1")})
    field = _customer_lookup(builder, customers, orders)

    submitted = {field.id: answer("Customer", "Acme", "lookup")}
    record, updated = RecordService.submit_record(db_session, orders.id, RecordSubmit(record_data=submitted))

    assert updated is False
