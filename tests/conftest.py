import logging
from datetime import datetime, timezone
from itertools import count

import pytest
from fastapi.testclient import TestClient

from regimeniq.main import app, get_rules, get_store
from regimeniq.schemas import RegimenItem, Result
from regimeniq.services.interaction_rules import DEFAULT_RULES
from regimeniq.services.regimen_store import InMemoryRegimenStore

_ids = count(1)


def _make_item(name, category="medication", is_active=True, **extra) -> RegimenItem:
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return RegimenItem(
        id=extra.pop("id", f"item-{next(_ids)}"),
        user_id=extra.pop("user_id", "user-1"),
        patient_id=extra.pop("patient_id", "patient-1"),
        name=name,
        category=category,
        is_active=is_active,
        created_at=now,
        updated_at=now,
        **extra,
    )


class FailingStore(InMemoryRegimenStore):
    """Store whose reads fail the way an unreachable backend would."""

    def __init__(self, error="Database unreachable"):
        super().__init__()
        self.error = error

    def list_active_items(self, user_id, patient_id):
        return Result.fail(self.error)


@pytest.fixture
def store():
    return InMemoryRegimenStore()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_rules] = lambda: DEFAULT_RULES
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_item():
    return _make_item


@pytest.fixture
def failing_store():
    return FailingStore()


@pytest.fixture
def restore_root_logging():
    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    yield root_logger
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)
