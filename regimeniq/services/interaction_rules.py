"""
Known interaction rules.

Each rule pairs two keyword terms. A term is matched as a substring of the
normalised item name, not as a whole word, so "st john" catches
"St. John's Wort". The flip side is that "iron" also catches a product
called "Irontech"; that behaviour is kept as-is until the rule format
grows whole-word or alias matching.

Rules are educational examples only and are evaluated in the order listed.
"""
import json
import logging
from pathlib import Path
from typing import Tuple, Union

from regimeniq.schemas import InteractionRule, InteractionSource

logger = logging.getLogger(__name__)

RuleTable = Tuple[InteractionRule, ...]


DEFAULT_RULES: RuleTable = (
    InteractionRule(
        terms=("warfarin", "vitamin k"),
        severity="high",
        description=(
            "Vitamin K can reduce the effectiveness of warfarin (blood thinner). "
            "Consistent intake is important."
        ),
        sources=(
            InteractionSource(
                title="Warfarin and Vitamin K Interaction",
                url="https://www.drugs.com/drug-interactions/vitamin-k-with-warfarin-2066-0-2318-0.html",
            ),
        ),
    ),
    InteractionRule(
        terms=("warfarin", "vitamin e"),
        severity="moderate",
        description=(
            "High doses of Vitamin E may increase bleeding risk when taken "
            "with warfarin."
        ),
        sources=(
            InteractionSource(
                title="Warfarin Interactions",
                url="https://www.drugs.com/drug-interactions/warfarin.html",
            ),
        ),
    ),
    InteractionRule(
        terms=("calcium", "iron"),
        severity="low",
        description=(
            "Calcium can reduce iron absorption. Take these supplements at "
            "different times of day."
        ),
        sources=(
            InteractionSource(
                title="Calcium-Iron Interaction",
                url="https://ods.od.nih.gov/factsheets/Iron-HealthProfessional/",
            ),
        ),
    ),
    InteractionRule(
        terms=("tamoxifen", "st john"),
        severity="high",
        description=(
            "St. John's Wort significantly reduces Tamoxifen effectiveness by "
            "increasing its metabolism through CYP3A4 enzyme induction. This can "
            "reduce cancer treatment efficacy. Avoid concurrent use or discuss "
            "alternatives with your oncologist."
        ),
        sources=(
            InteractionSource(
                title="Tamoxifen-St. John's Wort Interaction",
                url="https://www.cancer.gov/about-cancer/treatment/drugs",
            ),
        ),
    ),
    InteractionRule(
        terms=("st john's wort", "chemotherapy"),
        severity="high",
        description=(
            "St. John's Wort can interfere with many chemotherapy drugs. "
            "Consult your oncologist."
        ),
        sources=(
            InteractionSource(
                title="St. John's Wort and Cancer Treatment",
                url="https://www.cancer.gov/about-cancer/treatment/cam/patient/st-johns-wort-pdq",
            ),
        ),
    ),
    InteractionRule(
        terms=("grapefruit", "chemotherapy"),
        severity="moderate",
        description="Grapefruit can affect the metabolism of certain chemotherapy drugs.",
        sources=(
            InteractionSource(
                title="Grapefruit Drug Interactions",
                url="https://www.cancer.gov/about-cancer/treatment/cam/patient/grapefruit-pdq",
            ),
        ),
    ),
    InteractionRule(
        terms=("green tea", "chemotherapy"),
        severity="moderate",
        description=(
            "Green tea extract may interact with some chemotherapy medications. "
            "Discuss with your oncologist."
        ),
        sources=(
            InteractionSource(
                title="Green Tea and Cancer Treatment",
                url="https://www.cancer.gov/about-cancer/treatment/cam/patient/green-tea-pdq",
            ),
        ),
    ),
    InteractionRule(
        terms=("turmeric", "blood thinner"),
        severity="moderate",
        description="Turmeric may increase bleeding risk when combined with anticoagulants.",
        sources=(
            InteractionSource(
                title="Turmeric Interactions",
                url="https://www.nccih.nih.gov/health/turmeric",
            ),
        ),
    ),
)


def load_rules(path: Union[str, Path]) -> RuleTable:
    """
    Load a replacement rule table from a JSON file.

    The file holds a list of objects shaped like InteractionRule:
    {"terms": [..., ...], "severity": ..., "description": ..., "sources": [...]}.
    Order in the file is the order rules are evaluated in.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = json.load(fh)
    except OSError as e:
        logger.error("Cannot read interaction rules from %s: %s", path, e)
        raise
    except json.JSONDecodeError as e:
        logger.error("Interaction rules file %s is not valid JSON: %s", path, e)
        raise ValueError(f"Invalid JSON in rules file {path}: {e}") from e

    if not isinstance(raw, list):
        logger.error("Interaction rules file %s does not hold a JSON list", path)
        raise ValueError(
            f"Rules file {path} must contain a JSON list, got {type(raw).__name__}"
        )

    try:
        rules = tuple(InteractionRule(**entry) for entry in raw)
    except (TypeError, ValueError) as e:
        logger.error("Invalid interaction rule in %s: %s", path, e)
        raise ValueError(f"Invalid interaction rule in {path}: {e}") from e

    logger.info("Loaded %d interaction rules from %s", len(rules), path)
    return rules
