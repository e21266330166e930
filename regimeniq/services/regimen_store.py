"""
Persistence for regimen items and saved interactions.

`RegimenStore` is the interface the rest of the service depends on. Every
call returns a Result instead of raising, so failures (unknown ids, an
unreachable backend) travel back to the caller as plain error messages.

`InMemoryRegimenStore` is the implementation the app runs with by default.
Lists come back newest first.
"""
import logging
import threading
from datetime import datetime, timezone
from typing import Dict, List, Protocol
from uuid import uuid4

from regimeniq.schemas import (
    DetectedInteraction,
    InteractionUpdate,
    RegimenItem,
    RegimenItemCreate,
    RegimenItemUpdate,
    Result,
    SavedInteraction,
)

logger = logging.getLogger(__name__)

# a PATCH may clear optional fields but never these
_REQUIRED_ITEM_FIELDS = ("name", "category", "is_active")


class RegimenStore(Protocol):
    def list_active_items(self, user_id: str, patient_id: str) -> Result[List[RegimenItem]]:
        ...

    def get_regimen_items(
        self, user_id: str, patient_id: str, active_only: bool = False
    ) -> Result[List[RegimenItem]]:
        ...

    def create_regimen_item(
        self, user_id: str, patient_id: str, data: RegimenItemCreate
    ) -> Result[RegimenItem]:
        ...

    def update_regimen_item(self, item_id: str, updates: RegimenItemUpdate) -> Result[RegimenItem]:
        ...

    def delete_regimen_item(self, item_id: str) -> Result[None]:
        ...

    def create_interaction(
        self, user_id: str, patient_id: str, interaction: DetectedInteraction
    ) -> Result[SavedInteraction]:
        ...

    def get_interactions(self, user_id: str, patient_id: str) -> Result[List[SavedInteraction]]:
        ...

    def update_interaction(
        self, interaction_id: str, updates: InteractionUpdate
    ) -> Result[SavedInteraction]:
        ...

    def delete_interaction(self, interaction_id: str) -> Result[None]:
        ...

    def delete_patient_data(self, user_id: str, patient_id: str) -> Result[None]:
        ...


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid4().hex


class InMemoryRegimenStore:
    """Thread-safe dict-backed store; insertion order doubles as creation order."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: Dict[str, RegimenItem] = {}
        self._interactions: Dict[str, SavedInteraction] = {}

    # ----------------------------------------------------------
    # REGIMEN ITEMS
    # ----------------------------------------------------------
    def list_active_items(self, user_id: str, patient_id: str) -> Result[List[RegimenItem]]:
        return self.get_regimen_items(user_id, patient_id, active_only=True)

    def get_regimen_items(
        self, user_id: str, patient_id: str, active_only: bool = False
    ) -> Result[List[RegimenItem]]:
        with self._lock:
            items = [
                item for item in reversed(list(self._items.values()))
                if item.user_id == user_id
                and item.patient_id == patient_id
                and (item.is_active or not active_only)
            ]
        return Result[List[RegimenItem]].ok(items)

    def create_regimen_item(
        self, user_id: str, patient_id: str, data: RegimenItemCreate
    ) -> Result[RegimenItem]:
        now = _now()
        item = RegimenItem(
            **data.model_dump(),
            id=_new_id(),
            user_id=user_id,
            patient_id=patient_id,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._items[item.id] = item
        logger.info("Created regimen item %s for patient %s", item.id, patient_id)
        return Result[RegimenItem].ok(item)

    def update_regimen_item(self, item_id: str, updates: RegimenItemUpdate) -> Result[RegimenItem]:
        with self._lock:
            existing = self._items.get(item_id)
            if existing is None:
                logger.warning("Update of unknown regimen item %s", item_id)
                return Result[RegimenItem].fail(f"Regimen item {item_id} not found")
            changes = {
                key: value
                for key, value in updates.model_dump(exclude_unset=True).items()
                if value is not None or key not in _REQUIRED_ITEM_FIELDS
            }
            updated = existing.model_copy(update={**changes, "updated_at": _now()})
            self._items[item_id] = updated
        return Result[RegimenItem].ok(updated)

    def delete_regimen_item(self, item_id: str) -> Result[None]:
        with self._lock:
            if self._items.pop(item_id, None) is None:
                logger.warning("Delete of unknown regimen item %s", item_id)
                return Result[None].fail(f"Regimen item {item_id} not found")
        logger.info("Deleted regimen item %s", item_id)
        return Result[None].ok()

    # ----------------------------------------------------------
    # SAVED INTERACTIONS
    # ----------------------------------------------------------
    def create_interaction(
        self, user_id: str, patient_id: str, interaction: DetectedInteraction
    ) -> Result[SavedInteraction]:
        now = _now()
        saved = SavedInteraction(
            id=_new_id(),
            user_id=user_id,
            patient_id=patient_id,
            item_ids=list(interaction.item_ids),
            severity=interaction.severity,
            description=interaction.description,
            sources=list(interaction.sources),
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._interactions[saved.id] = saved
        logger.info("Saved interaction %s for patient %s", saved.id, patient_id)
        return Result[SavedInteraction].ok(saved)

    def get_interactions(self, user_id: str, patient_id: str) -> Result[List[SavedInteraction]]:
        with self._lock:
            saved = [
                interaction for interaction in reversed(list(self._interactions.values()))
                if interaction.user_id == user_id and interaction.patient_id == patient_id
            ]
        return Result[List[SavedInteraction]].ok(saved)

    def update_interaction(
        self, interaction_id: str, updates: InteractionUpdate
    ) -> Result[SavedInteraction]:
        with self._lock:
            existing = self._interactions.get(interaction_id)
            if existing is None:
                logger.warning("Update of unknown interaction %s", interaction_id)
                return Result[SavedInteraction].fail(f"Interaction {interaction_id} not found")
            changes = updates.model_dump(exclude_unset=True, exclude_none=True)
            if "sources" in changes:
                changes["sources"] = list(updates.sources)
            updated = existing.model_copy(update={**changes, "updated_at": _now()})
            self._interactions[interaction_id] = updated
        return Result[SavedInteraction].ok(updated)

    def delete_interaction(self, interaction_id: str) -> Result[None]:
        with self._lock:
            if self._interactions.pop(interaction_id, None) is None:
                logger.warning("Delete of unknown interaction %s", interaction_id)
                return Result[None].fail(f"Interaction {interaction_id} not found")
        return Result[None].ok()

    def delete_patient_data(self, user_id: str, patient_id: str) -> Result[None]:
        with self._lock:
            item_ids = [
                key for key, item in self._items.items()
                if item.user_id == user_id and item.patient_id == patient_id
            ]
            interaction_ids = [
                key for key, interaction in self._interactions.items()
                if interaction.user_id == user_id and interaction.patient_id == patient_id
            ]
            for key in item_ids:
                del self._items[key]
            for key in interaction_ids:
                del self._interactions[key]
        logger.info(
            "Removed %d regimen items and %d interactions for patient %s",
            len(item_ids), len(interaction_ids), patient_id,
        )
        return Result[None].ok()
