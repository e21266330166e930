import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import List, Optional, TypeVar

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Query, Response

from regimeniq.config import get_settings
from regimeniq.logging_config import setup_logging
from regimeniq.schemas import (
    DetectedInteraction,
    InteractionUpdate,
    PatientCheckSummary,
    RegimenItem,
    RegimenItemCreate,
    RegimenItemUpdate,
    Result,
    SavedInteraction,
    SeverityDisplay,
)
from regimeniq.services.interaction_rules import DEFAULT_RULES, RuleTable, load_rules
from regimeniq.services.interactions import (
    check_interactions_for_patient,
    check_interactions_for_patients,
    count_interactions,
    save_interaction,
)
from regimeniq.services.regimen_store import InMemoryRegimenStore, RegimenStore
from regimeniq.services.severity import get_severity_display

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ----------------------------------------------------------
# DEPENDENCIES
# ----------------------------------------------------------
@lru_cache()
def get_store() -> RegimenStore:
    return InMemoryRegimenStore()


@lru_cache()
def get_rules() -> RuleTable:
    """Rule table, loaded once: the configured file if any, else the built-in one."""
    rules_path = get_settings().rules_path
    if rules_path:
        return load_rules(rules_path)
    return DEFAULT_RULES


def _unwrap(result: Result[T], status_code: int = 404) -> Optional[T]:
    if not result.success:
        raise HTTPException(status_code=status_code, detail=result.error)
    return result.data


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level)
    rules = get_rules()
    logger.info(
        "%s starting (%s) with %d interaction rules",
        settings.app_name, settings.environment, len(rules),
    )
    yield


app = FastAPI(
    title="RegimenIQ API",
    description="Patient regimen tracking with pairwise interaction checks",
    version="1.0.0",
    lifespan=lifespan,
)


# ----------------------------------------------------------
# HEALTHCHECK
# ----------------------------------------------------------
@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.get("/severity/{severity}", response_model=SeverityDisplay)
def severity_display(severity: str):
    """Label, styling tokens and guidance for a severity tier."""
    return get_severity_display(severity)


# ----------------------------------------------------------
# REGIMEN ITEMS
# ----------------------------------------------------------
@app.post(
    "/users/{user_id}/patients/{patient_id}/regimen",
    response_model=RegimenItem,
    status_code=201,
)
def create_regimen_item(
    user_id: str,
    patient_id: str,
    payload: RegimenItemCreate,
    store: RegimenStore = Depends(get_store),
):
    return _unwrap(store.create_regimen_item(user_id, patient_id, payload), 400)


@app.get(
    "/users/{user_id}/patients/{patient_id}/regimen",
    response_model=List[RegimenItem],
)
def list_regimen_items(
    user_id: str,
    patient_id: str,
    active_only: bool = False,
    store: RegimenStore = Depends(get_store),
):
    return _unwrap(store.get_regimen_items(user_id, patient_id, active_only))


@app.patch("/regimen/{item_id}", response_model=RegimenItem)
def update_regimen_item(
    item_id: str,
    payload: RegimenItemUpdate,
    store: RegimenStore = Depends(get_store),
):
    return _unwrap(store.update_regimen_item(item_id, payload))


@app.delete("/regimen/{item_id}", status_code=204)
def delete_regimen_item(item_id: str, store: RegimenStore = Depends(get_store)):
    _unwrap(store.delete_regimen_item(item_id))
    return Response(status_code=204)


@app.delete("/users/{user_id}/patients/{patient_id}", status_code=204)
def delete_patient_data(
    user_id: str,
    patient_id: str,
    store: RegimenStore = Depends(get_store),
):
    """Remove everything stored for a patient: regimen items and saved interactions."""
    _unwrap(store.delete_patient_data(user_id, patient_id))
    return Response(status_code=204)


# ----------------------------------------------------------
# INTERACTION CHECKS
# ----------------------------------------------------------
@app.get(
    "/users/{user_id}/patients/{patient_id}/interactions/check",
    response_model=Result[List[DetectedInteraction]],
)
def check_patient_interactions(
    user_id: str,
    patient_id: str,
    store: RegimenStore = Depends(get_store),
    rules: RuleTable = Depends(get_rules),
):
    """
    Check the patient's active regimen for known interactions.

    Always answers with the result envelope; a store failure comes back
    as success=false with the store's error message.
    """
    return check_interactions_for_patient(store, user_id, patient_id, rules)


@app.get("/users/{user_id}/interactions/check", response_model=PatientCheckSummary)
def check_all_interactions(
    user_id: str,
    patient_id: List[str] = Query(default=[]),
    store: RegimenStore = Depends(get_store),
    rules: RuleTable = Depends(get_rules),
):
    results = check_interactions_for_patients(
        store,
        user_id,
        patient_id,
        rules,
        max_workers=get_settings().max_check_workers,
    )
    return PatientCheckSummary(
        total_interactions=count_interactions(results),
        results=results,
    )


# ----------------------------------------------------------
# SAVED INTERACTIONS
# ----------------------------------------------------------
@app.post(
    "/users/{user_id}/patients/{patient_id}/interactions",
    response_model=SavedInteraction,
    status_code=201,
)
def create_saved_interaction(
    user_id: str,
    patient_id: str,
    payload: DetectedInteraction,
    store: RegimenStore = Depends(get_store),
):
    return _unwrap(save_interaction(store, user_id, patient_id, payload), 400)


@app.get(
    "/users/{user_id}/patients/{patient_id}/interactions",
    response_model=List[SavedInteraction],
)
def list_saved_interactions(
    user_id: str,
    patient_id: str,
    store: RegimenStore = Depends(get_store),
):
    return _unwrap(store.get_interactions(user_id, patient_id))


@app.patch("/interactions/{interaction_id}", response_model=SavedInteraction)
def update_saved_interaction(
    interaction_id: str,
    payload: InteractionUpdate,
    store: RegimenStore = Depends(get_store),
):
    """Record a discussion with the care team, or correct the saved details."""
    return _unwrap(store.update_interaction(interaction_id, payload))


@app.delete("/interactions/{interaction_id}", status_code=204)
def delete_saved_interaction(
    interaction_id: str,
    store: RegimenStore = Depends(get_store),
):
    _unwrap(store.delete_interaction(interaction_id))
    return Response(status_code=204)


if __name__ == "__main__":
    uvicorn.run("regimeniq.main:app", host="0.0.0.0", port=8000)
