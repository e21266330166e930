"""
Interaction checking for a patient's regimen.

Glue between the store and the pure matcher in rules_engine: fetch the
patient's active items, then check them pairwise. Store failures are
handed back unchanged and never retried here.

DISCLAIMER: informational only. Interactions should be discussed with
qualified healthcare professionals.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Mapping, Sequence

from regimeniq.schemas import DetectedInteraction, InteractionRule, Result, SavedInteraction
from regimeniq.services.interaction_rules import DEFAULT_RULES
from regimeniq.services.regimen_store import RegimenStore
from regimeniq.services.rules_engine import check_interactions

logger = logging.getLogger(__name__)

CheckResult = Result[List[DetectedInteraction]]


def check_interactions_for_patient(
    store: RegimenStore,
    user_id: str,
    patient_id: str,
    rules: Sequence[InteractionRule] = DEFAULT_RULES,
) -> CheckResult:
    fetched = store.list_active_items(user_id, patient_id)
    if not fetched.success:
        logger.warning(
            "Could not load regimen for patient %s: %s", patient_id, fetched.error
        )
        return CheckResult.fail(fetched.error)

    items = fetched.data or []
    detected = check_interactions(items, rules)
    logger.info(
        "Checked %d active items for patient %s: %d interactions",
        len(items), patient_id, len(detected),
    )
    return CheckResult.ok(detected)


def check_interactions_for_patients(
    store: RegimenStore,
    user_id: str,
    patient_ids: Sequence[str],
    rules: Sequence[InteractionRule] = DEFAULT_RULES,
    max_workers: int = 4,
) -> Dict[str, CheckResult]:
    """
    Run independent checks for several patients, e.g. for a dashboard.

    Results are keyed by patient id in the order the ids were given;
    duplicate ids are checked once.
    """
    unique_ids = list(dict.fromkeys(patient_ids))
    if not unique_ids:
        return {}

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(unique_ids)))) as executor:
        futures = {
            patient_id: executor.submit(
                check_interactions_for_patient, store, user_id, patient_id, rules
            )
            for patient_id in unique_ids
        }
        return {patient_id: future.result() for patient_id, future in futures.items()}


def count_interactions(results: Mapping[str, CheckResult]) -> int:
    """Total interactions across successful checks; failed checks count as zero."""
    return sum(len(result.data or []) for result in results.values() if result.success)


def save_interaction(
    store: RegimenStore,
    user_id: str,
    patient_id: str,
    interaction: DetectedInteraction,
) -> Result[SavedInteraction]:
    """Persist an interaction the user has chosen to keep a record of."""
    return store.create_interaction(user_id, patient_id, interaction)
