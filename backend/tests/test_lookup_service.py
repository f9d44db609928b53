# backend/tests/test_lookup_service.py
from conftest import answer
from app.models import LookupSource
from app.services.lookup_service import LookupService
from app.services.lookup_source_service import LookupSourceService, form_source_id, module_source_id


IMPLICIT = ["id", "name", "title", "description", "createdAt", "updatedAt"]


def test_static_search_keeps_catalog_order(db_session):
    records = LookupService.get_data(db_session, "lookup_countries", search="United")

    assert [r["name"] for r in records] == ["United States", "United Kingdom"]
    assert [r["record_id"] for r in records] == ["us", "uk"]


def test_static_search_is_truncated_to_limit(db_session):
    records = LookupService.get_data(db_session, "lookup_countries", search="united", limit=1)

    assert [r["name"] for r in records] == ["United States"]


def test_static_offset_and_stored_data(db_session):
    LookupSourceService.seed_static_sources(db_session)
    source = db_session.get(LookupSource, "lookup_priorities")
    source.data = [{"id": "p1", "name": "Urgent"}, {"name": "Someday"}]
    db_session.commit()

    records = LookupService.get_data(db_session, "lookup_priorities", offset=1)

    assert len(records) == 1
    assert records[0]["name"] == "Someday"
    assert records[0]["record_id"]


def test_unknown_sources_are_empty(db_session):
    assert LookupService.get_data(db_session, "lookup_planets") == []
    assert LookupService.get_data(db_session, "form_missing") == []
    assert LookupService.get_data(db_session, "module_missing") == []
    assert LookupService.get_data(db_session, "whatever") == []


def test_form_data_is_normalized_newest_first(db_session, builder):
    form = builder.form(builder.module("Sales"), "Leads")
    first = builder.record(form, {"f1": answer("Name", "Acme Co"), "f2": answer("Employees", "12", "number")})
    second = builder.record(form, {"f1": answer("Name", "Globex"), "f2": answer("Employees", "40", "number")})

    records = LookupService.get_data(db_session, form_source_id(form.id))

    assert [r["record_id"] for r in records] == [second.id, first.id]
    assert records[0]["submitted_at"].startswith("2024-01-01T09:02")
    assert records[0]["f1"] == {
        "field_value": "Globex",
        "field_label": "Name",
        "field_type": "text",
        "field_options": None,
        "field_validation": {},
    }
    assert records[1]["f2"]["field_value"] == 12


def test_form_data_search_and_paging(db_session, builder):
    form = builder.form(builder.module("Sales"), "Leads")
    builder.records(form, [{"f1": answer("Name", name)} for name in ["Acme Co", "Globex", "Initech", "Acme Labs"]])

    found = LookupService.get_data(db_session, form_source_id(form.id), search="ACME")
    assert [r["f1"]["field_value"] for r in found] == ["Acme Labs", "Acme Co"]

    page = LookupService.get_data(db_session, form_source_id(form.id), limit=2, offset=1)
    assert [r["f1"]["field_value"] for r in page] == ["Initech", "Globex"]


def test_module_data_takes_a_tenth_of_limit_per_form(db_session, builder):
    module = builder.module("Operations")
    forms = [builder.form(module, f"Form {i}") for i in range(3)]
    for form in forms:
        builder.records(form, [{"f1": answer("Seq", str(n), "number")} for n in range(100)])

    records = LookupService.get_data(db_session, module_source_id(module.id), limit=30)

    assert len(records) == 9
    assert {r["form_id"] for r in records} == {form.id for form in forms}
    assert all(r["module_id"] == module.id for r in records)
    # newest first within each form
    first_form = [r for r in records if r["form_id"] == forms[0].id]
    assert [r["f1"]["field_value"] for r in first_form] == [99, 98, 97]
    assert first_form[0]["form_name"] == "Form 0"


def test_module_data_below_ten_returns_nothing(db_session, builder):
    module = builder.module("Operations")
    builder.record(builder.form(module, "Only"), {"f1": answer("Name", "x")})

    assert LookupService.get_data(db_session, module_source_id(module.id), limit=9) == []
    assert len(LookupService.get_data(db_session, module_source_id(module.id), limit=10)) == 1


def test_get_fields_static(db_session):
    assert LookupService.get_fields(db_session, "lookup_countries") == ["id", "name", "code", "region"]
    assert LookupService.get_fields(db_session, "lookup_planets") == []


def test_get_fields_form_uses_latest_record(db_session, builder):
    form = builder.form(builder.module("Sales"), "Leads")
    builder.record(form, {"f1": answer("Old Label", "x")})
    builder.record(form, {"f1": answer("Name", "Acme"), "f2": answer("Email", "a@b.c", "email")})

    fields = LookupService.get_fields(db_session, form_source_id(form.id))

    assert fields == ["Name", "Email"] + IMPLICIT


def test_get_fields_form_without_records(db_session, builder):
    form = builder.form(builder.module("Sales"), "Leads")

    assert LookupService.get_fields(db_session, form_source_id(form.id)) == IMPLICIT
    assert LookupService.get_fields(db_session, "form_missing") == []


def test_get_fields_module_unions_forms(db_session, builder):
    module = builder.module("Sales")
    leads = builder.form(module, "Leads")
    deals = builder.form(module, "Deals")
    builder.record(leads, {"f1": answer("Name", "Acme"), "f2": answer("Phone", "1", "tel")})
    builder.record(deals, {"g1": answer("Name", "Big one"), "g2": answer("Amount", "10", "number")})

    fields = LookupService.get_fields(db_session, module_source_id(module.id))

    assert sorted(fields[:3]) == ["Amount", "Name", "Phone"]
    assert fields[3:] == IMPLICIT
    assert LookupService.get_fields(db_session, "module_missing") == []
