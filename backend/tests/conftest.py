# backend/tests/conftest.py
import os
import tempfile

# Settings are read at import time; point them at throwaway locations first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOGS_DIR"] = os.path.join(tempfile.gettempdir(), "form-builder-test-logs")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.session import get_db
from app.main import app
from app.models import (
    Base,
    FormModule,
    Form,
    FormSection,
    Subform,
    FormField,
    FormRecord,
)


def answer(label, value, type="text", **extra):
    """One stored answer as the form renderer submits it."""
    return {"label": label, "type": type, "value": value, **extra}


class FormBuilder:
    """Creates modules, forms, sections, fields and records straight through the ORM."""

    def __init__(self, db):
        self.db = db
        self._clock = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)

    def _tick(self):
        self._clock += timedelta(minutes=1)
        return self._clock

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def module(self, name="Customers", **kwargs):
        return self._save(FormModule(name=name, **kwargs))

    def form(self, module, name="Customer", **kwargs):
        return self._save(Form(module_id=module.id, name=name, **kwargs))

    def section(self, form, title="Main", **kwargs):
        return self._save(FormSection(form_id=form.id, title=title, **kwargs))

    def subform(self, section, name="Contacts"):
        return self._save(Subform(section_id=section.id, name=name))

    def field(self, section=None, subform=None, type="text", label="Name", **kwargs):
        if section is not None:
            kwargs["section_id"] = section.id
        if subform is not None:
            kwargs["subform_id"] = subform.id
        return self._save(FormField(type=type, label=label, **kwargs))

    def lookup_field(self, section, source_id, label="Customer", **config):
        lookup = {"sourceId": source_id, **config}
        return self.field(section, type="lookup", label=label, lookup=lookup)

    def record(self, form, record_data):
        return self._save(FormRecord(form_id=form.id, record_data=record_data, submitted_at=self._tick()))

    def records(self, form, rows):
        """Bulk insert; each row gets a later submitted_at than the previous one."""
        created = [
            FormRecord(form_id=form.id, record_data=row, submitted_at=self._tick())
            for row in rows
        ]
        self.db.add_all(created)
        self.db.commit()
        return created


@pytest.fixture
def db_session():
    """A session bound to a fresh in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def builder(db_session):
    return FormBuilder(db_session)


@pytest.fixture
def client(db_session):
    """
    TestClient whose requests share the test's session.
    Startup handlers are not run, so nothing is seeded implicitly.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides = {}
