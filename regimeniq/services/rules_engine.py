import logging
from typing import List, Optional, Sequence

from regimeniq.schemas import DetectedInteraction, InteractionRule, RegimenItem
from regimeniq.services.interaction_rules import DEFAULT_RULES
from regimeniq.text import normalize_name

logger = logging.getLogger(__name__)


def _names_interact(name1: str, name2: str, rule: InteractionRule) -> bool:
    """both names are normalised; each must supply a different term"""
    first, second = rule.terms
    return (first in name1 and second in name2) or (second in name1 and first in name2)


def match_rule(
    item1: RegimenItem,
    item2: RegimenItem,
    rules: Sequence[InteractionRule] = DEFAULT_RULES,
) -> Optional[InteractionRule]:
    """
    Return the first rule in table order that links the two items, or None.

    Items with a missing name never match, and neither do two items whose
    names are identical once normalised or that share an id.
    """
    name1 = normalize_name(item1.name)
    name2 = normalize_name(item2.name)

    if not name1 or not name2 or name1 == name2:
        return None
    if item1.id == item2.id:
        return None

    for rule in rules:
        if _names_interact(name1, name2, rule):
            return rule
    return None


def check_pair_interaction(
    item1: RegimenItem,
    item2: RegimenItem,
    rules: Sequence[InteractionRule] = DEFAULT_RULES,
) -> Optional[DetectedInteraction]:
    rule = match_rule(item1, item2, rules)
    if rule is None:
        return None

    logger.debug(
        "Interaction %s + %s matched %s (%s)",
        item1.name, item2.name, rule.terms, rule.severity,
    )
    return DetectedInteraction(
        item_ids=[item1.id, item2.id],
        items=[item1, item2],
        severity=rule.severity,
        description=rule.description,
        sources=list(rule.sources),
    )


def check_interactions(
    items: Sequence[RegimenItem],
    rules: Sequence[InteractionRule] = DEFAULT_RULES,
) -> List[DetectedInteraction]:
    """
    Check every unordered pair of items against the rule table.

    Callers pass active items only. Pairs are visited as (0, 1), (0, 2), ...
    (1, 2), ... and matches come back in that order; each pair reports at
    most one interaction, the first matching rule.
    """
    detected: List[DetectedInteraction] = []

    for i in range(len(items)):
        for j in range(i + 1, len(items)):
            interaction = check_pair_interaction(items[i], items[j], rules)
            if interaction:
                detected.append(interaction)

    return detected
