# backend/tests/test_lookup_api.py
from conftest import answer
from app.models import LookupFieldRelation
from app.services.lookup_source_service import LookupSourceService, STATIC_SOURCES, form_source_id, module_source_id


API = "/api/v1"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_list_sources(client, db_session, builder):
    LookupSourceService.seed_static_sources(db_session)
    module = builder.module("Sales")
    leads = builder.form(module, "Leads")
    builder.record(leads, {"f1": answer("Name", "Acme")})

    response = client.get(f"{API}/lookup/sources")

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == len(STATIC_SOURCES) + 2
    entry = next(s for s in body["sources"] if s["id"] == form_source_id(leads.id))
    assert entry == {
        "id": form_source_id(leads.id),
        "name": "Leads (Sales)",
        "description": "Records from Leads form in Sales module",
        "type": "form",
        "recordCount": 1,
        "icon": "\U0001f4c4",
    }


def test_reconcile_endpoint(client, builder):
    builder.form(builder.module("Sales"), "Leads")

    response = client.post(f"{API}/lookup/sources/reconcile")

    assert response.status_code == 200
    assert response.json() == {"created": 2, "deactivated": 0, "reactivated": 0}


def test_lookup_data_static_search(client):
    response = client.get(f"{API}/lookup/data", params={"sourceId": "lookup_countries", "search": "United"})

    assert response.status_code == 200
    body = response.json()
    assert body["sourceId"] == "lookup_countries"
    assert body["total"] == 2
    assert [r["name"] for r in body["records"]] == ["United States", "United Kingdom"]


def test_lookup_data_validates_query(client):
    assert client.get(f"{API}/lookup/data").status_code == 422
    assert client.get(f"{API}/lookup/data", params={"sourceId": "lookup_countries", "limit": 0}).status_code == 422
    assert client.get(f"{API}/lookup/data", params={"sourceId": "lookup_countries", "offset": -1}).status_code == 422


def test_lookup_data_unknown_source_is_empty(client):
    response = client.get(f"{API}/lookup/data", params={"sourceId": "form_missing"})

    assert response.status_code == 200
    assert response.json() == {"sourceId": "form_missing", "records": [], "total": 0}


def test_lookup_fields(client, builder):
    module = builder.module("Sales")
    leads = builder.form(module, "Leads")
    builder.record(leads, {"f1": answer("Company", "Acme")})

    response = client.get(f"{API}/lookup/fields", params={"sourceId": module_source_id(module.id)})

    assert response.status_code == 200
    assert response.json()["fields"][0] == "Company"
    assert client.get(f"{API}/lookup/fields", params={"sourceId": "nope"}).json()["fields"] == []


def test_lookup_options(client, builder):
    leads = builder.form(builder.module("Sales"), "Companies")
    builder.record(leads, {"f1": answer("Name", "Acme Co")})

    response = client.post(f"{API}/lookup/options", json={
        "sourceId": form_source_id(leads.id),
        "fieldMapping": {"display": "Name", "value": "id", "store": "Name"},
    })

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 1
    assert body["options"][0]["label"] == "Acme Co"
    assert body["options"][0]["store"] == "Acme Co"
    assert body["options"][0]["isCustom"] is False
    assert body["canCreateCustom"] is False


def test_lookup_options_offers_custom_value(client, builder):
    leads = builder.form(builder.module("Sales"), "Companies")
    builder.record(leads, {"f1": answer("Name", "Acme Co")})

    body = client.post(f"{API}/lookup/options", json={
        "sourceId": form_source_id(leads.id),
        "fieldMapping": {"display": "Name"},
        "search": "Bespoke Corp",
    }).json()

    assert body["options"] == []
    assert body["canCreateCustom"] is True


def test_field_save_path_maintains_relations(client, db_session, builder):
    module = builder.module("Sales")
    companies = builder.form(module, "Companies")
    section = builder.section(builder.form(module, "Orders"))

    response = client.post(f"{API}/fields", json={
        "section_id": section.id,
        "type": "lookup",
        "label": "Customer",
        "lookup": {"sourceId": form_source_id(companies.id), "fieldMapping": {"display": "Name"}},
    })
    assert response.status_code == 201
    field = response.json()
    assert field["source_form"] == companies.id
    assert field["lookup"]["sourceType"] == "form"
    assert db_session.query(LookupFieldRelation).count() == 1

    response = client.put(f"{API}/fields/{field['id']}", json={"type": "text", "lookup": None})
    assert response.status_code == 200
    assert response.json()["lookup"] is None
    assert db_session.query(LookupFieldRelation).count() == 0

    assert client.delete(f"{API}/fields/{field['id']}").status_code == 204
    assert client.delete(f"{API}/fields/{field['id']}").status_code == 404


def test_field_create_errors(client):
    missing_parent = client.post(f"{API}/fields", json={"section_id": "missing", "type": "text", "label": "X"})
    no_parent = client.post(f"{API}/fields", json={"type": "text", "label": "X"})

    assert missing_parent.status_code == 404
    assert no_parent.status_code == 422


def test_submit_record(client, builder):
    form = builder.form(builder.module("Sales"), "Leads")

    created = client.post(f"{API}/forms/{form.id}/records", json={"record_data": {"f1": answer("Name", "Acme")}})
    empty = client.post(f"{API}/forms/{form.id}/records", json={"record_data": {}})
    missing = client.post(f"{API}/forms/missing/records", json={"record_data": {"f1": answer("Name", "Acme")}})

    assert created.status_code == 201
    assert created.json()["updated"] is False
    assert empty.status_code == 400
    assert missing.status_code == 404


def test_submit_record_updates_by_id_field(client, builder):
    module = builder.module("Sales")
    customers = builder.form(module, "Customers")
    orders = builder.form(module, "Orders")
    existing = builder.record(customers, {"customer_id": answer("Customer ID", "C-1")})
    field = builder.lookup_field(
        builder.section(orders),
        form_source_id(customers.id),
        useIdField=True,
        idFieldName="customer_id",
    )

    response = client.post(f"{API}/forms/{orders.id}/records", json={
        "record_data": {field.id: answer("Customer", {"customer_id": "C-1"}, "lookup")},
    })

    assert response.status_code == 200
    assert response.json()["id"] == existing.id
    assert response.json()["updated"] is True


def test_form_lookup_views(client, builder):
    module = builder.module("Sales")
    companies = builder.form(module, "Companies")
    orders = builder.form(module, "Orders")
    section = builder.section(orders)

    response = client.post(f"{API}/fields", json={
        "section_id": section.id,
        "type": "lookup",
        "label": "Customer",
        "lookup": {"sourceId": form_source_id(companies.id)},
    })
    assert response.status_code == 201

    linked = client.get(f"{API}/forms/{companies.id}/linked-records").json()
    assert linked["total"] == 1
    assert linked["linkedForms"][0]["id"] == orders.id
    assert linked["linkedForms"][0]["lookupFieldsCount"] == 1

    sources = client.get(f"{API}/forms/{orders.id}/lookup-sources").json()
    assert sources["total"] == 1
    assert sources["sources"][0]["breadcrumb"] == "Sales > Companies"

    assert client.get(f"{API}/forms/missing/linked-records").status_code == 404
    assert client.get(f"{API}/forms/missing/lookup-sources").status_code == 404


def test_lookup_options_non_searchable_field(client, builder):
    leads = builder.form(builder.module("Sales"), "Companies")
    builder.records(leads, [
        {"f1": answer("Name", "Acme Co")},
        {"f1": answer("Name", "Globex")},
    ])

    body = client.post(f"{API}/lookup/options", json={
        "sourceId": form_source_id(leads.id),
        "fieldMapping": {"display": "Name"},
        "search": "Bespoke Corp",
        "searchable": False,
    }).json()

    assert sorted(option["label"] for option in body["options"]) == ["Acme Co", "Globex"]
    assert body["canCreateCustom"] is False
