# backend/tests/test_lookup_mapping.py
from datetime import datetime

from conftest import answer
from app.services.lookup_mapping import (
    FieldMapping,
    LookupFieldModel,
    LookupOption,
    build_option,
    format_display,
    resolve_field,
)
from app.services.lookup_service import LookupService
from app.services.lookup_source_service import form_source_id


def test_field_mapping_store_defaults_to_display():
    mapping = FieldMapping.from_config({"display": "Company"})

    assert mapping.display == "Company"
    assert mapping.value == "id"
    assert mapping.store == "Company"
    assert mapping.description is None


def test_selecting_stores_display_value_not_id(db_session, builder):
    form = builder.form(builder.module("Sales"), "Companies")
    record = builder.record(form, {"f1": answer("Name", "Acme Co")})
    model = LookupFieldModel({
        "sourceId": form_source_id(form.id),
        "fieldMapping": {"display": "Name", "value": "id", "store": "Name"},
    })

    options = model.load(LookupService.get_data(db_session, model.source_id))

    assert len(options) == 1
    assert options[0].label == "Acme Co"
    assert options[0].value == record.id
    assert model.select(options[0]) == "Acme Co"


def test_store_and_value_can_differ():
    record = {
        "record_id": "r1",
        "f1": {"field_value": "Acme Co", "field_label": "Name", "field_type": "text"},
        "f2": {"field_value": "AC-7", "field_label": "Code", "field_type": "text"},
    }

    option = build_option(record, FieldMapping(display="Name", value="Code", store="Code"))

    assert option.label == "Acme Co"
    assert option.value == "AC-7"
    assert option.store == "AC-7"


def test_resolution_prefers_exact_key_over_label():
    record = {
        "record_id": "r1",
        "name": {"field_value": "by key", "field_label": "Other", "field_type": "text"},
        "f9": {"field_value": "by label", "field_label": "name", "field_type": "text"},
    }

    assert resolve_field(record, "name")["field_value"] == "by key"
    assert resolve_field(record, "NAME")["field_value"] == "by label"
    assert resolve_field(record, "record_id") is None
    assert resolve_field(record, None) is None


def test_static_items_map_by_key():
    item = {"id": "usd", "name": "US Dollar", "code": "USD", "symbol": "$", "record_id": "usd"}

    option = build_option(item, FieldMapping(display="name", value="code", store="code", description="symbol"))

    assert option.label == "US Dollar"
    assert option.value == "USD"
    assert option.store == "USD"
    assert option.description == "$"


def test_missing_display_falls_back_to_item_label():
    record = {"record_id": "r42", "f1": {"field_value": "", "field_label": "Name", "field_type": "text"}}

    option = build_option(record, FieldMapping(display="Name"))

    assert option.label == "Item r42"
    assert option.value == "r42"
    assert option.store == "Item r42"


def test_format_display_by_type():
    assert format_display({"field_value": "2024-03-05", "field_type": "date"}) == datetime(2024, 3, 5).strftime("%x")
    assert format_display({"field_value": 7.0, "field_type": "number"}) == "7"
    assert format_display({"field_value": 7.25, "field_type": "number"}) == "7.25"
    assert format_display({"field_value": "soon", "field_type": "date"}) == "soon"
    assert format_display({"field_value": None, "field_type": "text"}) == ""


def test_custom_value_is_offered_when_nothing_matches():
    model = LookupFieldModel({"sourceId": "lookup_x", "fieldMapping": {"display": "name"}})
    model.load([{"record_id": "1", "name": "Acme Co"}, {"record_id": "2", "name": "Globex"}])

    assert model.can_create_custom("Bespoke Corp")
    assert not model.can_create_custom("acme co")
    assert not model.can_create_custom("   ")

    assert model.create_custom("Bespoke Corp") == "Bespoke Corp"
    assert model.selected[0].is_custom


def test_custom_values_can_be_disabled():
    model = LookupFieldModel({"sourceId": "lookup_x", "allowCustomValues": False})

    assert not model.can_create_custom("Bespoke Corp")


def test_non_searchable_field_ignores_search_text():
    model = LookupFieldModel({"sourceId": "lookup_x", "searchable": False, "fieldMapping": {"display": "name"}})
    model.load([{"record_id": "1", "name": "Acme Co"}, {"record_id": "2", "name": "Globex"}])

    assert not model.can_create_custom("Bespoke Corp")
    assert [option.label for option in model.filter("acme")] == ["Acme Co", "Globex"]


def test_multiple_selection_toggles():
    model = LookupFieldModel({"sourceId": "lookup_x", "multiple": True, "fieldMapping": {"display": "name"}})
    a, b = model.load([{"record_id": "1", "name": "A"}, {"record_id": "2", "name": "B"}])

    model.select(a)
    assert model.select(b) == ["A", "B"]
    assert model.select(a) == ["B"]
    assert model.remove(b) == []


def test_single_selection_replaces():
    model = LookupFieldModel({"sourceId": "lookup_x", "fieldMapping": {"display": "name"}})
    a, b = model.load([{"record_id": "1", "name": "A"}, {"record_id": "2", "name": "B"}])

    model.select(a)
    assert model.select(b) == "B"
    model.clear()
    assert model.value is None


def test_filter_matches_label_store_and_description():
    model = LookupFieldModel()
    model.options = [
        LookupOption(id="1", label="Acme", value="1", store="ACM", description="Anvils"),
        LookupOption(id="2", label="Globex", value="2", store="GLX"),
    ]

    assert [o.id for o in model.filter("anv")] == ["1"]
    assert [o.id for o in model.filter("glx")] == ["2"]
    assert len(model.filter(None)) == 2
