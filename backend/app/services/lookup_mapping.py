"""
Lookup Field Mapping

Consumer-side logic of a lookup field: turns lookup records into
selectable options using the field's {display, value, store, description}
mapping, tracks the selection, and synthesizes custom values typed by the
user when nothing matches.

Selecting an option emits its *store* value; that is what gets written
into the submitting record.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from app.services.lookup_normalize import FieldKind, parse_datetime, stringify


@dataclass
class FieldMapping:
    display: str = "name"
    value: str = "id"
    store: str = "name"
    description: Optional[str] = None

    @classmethod
    def from_config(cls, mapping: Optional[dict]) -> "FieldMapping":
        """Build from a lookup config's fieldMapping; store defaults to display."""
        mapping = mapping or {}
        display = mapping.get("display") or "name"
        return cls(
            display=display,
            value=mapping.get("value") or "id",
            store=mapping.get("store") or display,
            description=mapping.get("description") or None,
        )


@dataclass
class LookupOption:
    id: str
    label: str
    value: Any
    store: Any
    description: Optional[str] = None
    is_custom: bool = False
    data: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "value": self.value,
            "store": self.store,
            "description": self.description,
            "is_custom": self.is_custom,
            "data": self.data,
        }


def _as_entry(key: str, raw: Any) -> dict:
    # Normalized records hold field entries; static items hold bare values
    if isinstance(raw, dict) and "field_value" in raw:
        return raw
    if isinstance(raw, bool):
        kind = FieldKind.CHECKBOX.value
    elif isinstance(raw, (int, float)):
        kind = FieldKind.NUMBER.value
    else:
        kind = FieldKind.TEXT.value
    return {"field_value": raw, "field_label": key, "field_type": kind}


def by_exact_key(record: dict, name: str) -> Optional[dict]:
    if name in record and name != "record_id":
        return _as_entry(name, record[name])
    return None


def by_label_scan(record: dict, name: str) -> Optional[dict]:
    wanted = name.casefold()
    for value in record.values():
        if isinstance(value, dict) and str(value.get("field_label", "")).casefold() == wanted:
            return value
    return None


ResolutionStrategy = Callable[[dict, str], Optional[dict]]

RESOLUTION_STRATEGIES: list[ResolutionStrategy] = [by_exact_key, by_label_scan]


def resolve_field(record: dict, name: Optional[str], strategies: list[ResolutionStrategy] = RESOLUTION_STRATEGIES) -> Optional[dict]:
    """First field entry any strategy finds for a mapped field name, in order."""
    if not name:
        return None
    for strategy in strategies:
        entry = strategy(record, name)
        if entry is not None:
            return entry
    return None


def format_display(entry: dict) -> str:
    """
    Human-readable text for a field entry, by field type:
    datetime -> locale date and time, date -> locale date,
    number -> numeric string, anything else -> raw value.
    """
    value = entry.get("field_value")
    if value is None:
        return ""

    kind = FieldKind.of(entry.get("field_type"))
    if kind == FieldKind.DATETIME:
        parsed = parse_datetime(value)
        return parsed.strftime("%x %X") if parsed else stringify(value)
    if kind == FieldKind.DATE:
        parsed = parse_datetime(value)
        return parsed.strftime("%x") if parsed else stringify(value)
    if kind == FieldKind.NUMBER and isinstance(value, (int, float)) and not isinstance(value, bool):
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)
    return stringify(value)


def _has_value(entry: Optional[dict]) -> bool:
    return entry is not None and entry.get("field_value") not in (None, "")


def build_option(record: dict, mapping: FieldMapping) -> LookupOption:
    """Apply a field mapping to one lookup record."""
    record_id = str(record.get("record_id") or record.get("id") or "")

    display_entry = resolve_field(record, mapping.display)
    label = format_display(display_entry) if _has_value(display_entry) else f"Item {record_id}"

    value_entry = resolve_field(record, mapping.value)
    value = value_entry["field_value"] if _has_value(value_entry) else record_id

    store_entry = resolve_field(record, mapping.store)
    if _has_value(store_entry):
        store = store_entry["field_value"]
    elif _has_value(display_entry):
        store = display_entry["field_value"]
    else:
        store = label

    description = None
    if mapping.description:
        description_entry = resolve_field(record, mapping.description)
        if _has_value(description_entry):
            description = format_display(description_entry)

    return LookupOption(
        id=record_id,
        label=label,
        value=value,
        store=store,
        description=description,
        data=record,
    )


def build_options(records: list[dict], mapping: FieldMapping) -> list[LookupOption]:
    return [build_option(record, mapping) for record in records]


class LookupFieldModel:
    """
    State of one lookup field while a user fills in a form.

    Usage:
        model = LookupFieldModel(field.lookup)
        model.load(LookupService.get_data(db, source_id, search=text))
        model.select(model.options[0])   # -> store value
        if model.can_create_custom(text):
            model.create_custom(text)
    """

    def __init__(self, config: Optional[dict] = None):
        config = config or {}
        self.source_id = config.get("sourceId")
        self.mapping = FieldMapping.from_config(config.get("fieldMapping"))
        self.multiple = bool(config.get("multiple", False))
        self.searchable = config.get("searchable", True) is not False
        self.allow_custom_values = config.get("allowCustomValues", True) is not False
        self.options: list[LookupOption] = []
        self.selected: list[LookupOption] = []

    def load(self, records: list[dict]) -> list[LookupOption]:
        self.options = build_options(records, self.mapping)
        return self.options

    def filter(self, search: Optional[str]) -> list[LookupOption]:
        """
        Options whose label, store value or description contains the search text.
        A non-searchable field always shows every option.
        """
        if not search or not self.searchable:
            return list(self.options)
        needle = search.lower()
        return [
            option for option in self.options
            if needle in option.label.lower()
            or needle in stringify(option.store).lower()
            or (option.description and needle in option.description.lower())
        ]

    def can_create_custom(self, search: Optional[str]) -> bool:
        """
        True when the field is searchable with custom values allowed
        and no option label or store value equals the text.
        """
        text = (search or "").strip()
        if not self.searchable or not self.allow_custom_values or not text:
            return False
        wanted = text.lower()
        return not any(
            option.label.lower() == wanted or stringify(option.store).lower() == wanted
            for option in self.options
        )

    def create_custom(self, text: str) -> Any:
        """Synthesize and select an option for typed-in text."""
        text = text.strip()
        option = LookupOption(id=text, label=text, value=text, store=text, is_custom=True)
        return self.select(option)

    def is_selected(self, option: LookupOption) -> bool:
        return any(s.id == option.id and s.is_custom == option.is_custom for s in self.selected)

    def select(self, option: LookupOption) -> Any:
        """
        Select an option and return the value to persist.
        Multi-select toggles the option and returns every selected store value.
        """
        if self.multiple:
            if self.is_selected(option):
                self.selected = [
                    s for s in self.selected
                    if not (s.id == option.id and s.is_custom == option.is_custom)
                ]
            else:
                self.selected.append(option)
        else:
            self.selected = [option]
        return self.value

    def remove(self, option: LookupOption) -> Any:
        self.selected = [
            s for s in self.selected
            if not (s.id == option.id and s.is_custom == option.is_custom)
        ]
        return self.value

    def clear(self) -> None:
        self.selected = []

    @property
    def value(self) -> Any:
        if self.multiple:
            return [option.store for option in self.selected]
        return self.selected[0].store if self.selected else None
