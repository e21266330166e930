import re
from typing import Optional

_WHITESPACE = re.compile(r"\s+")


def normalize_name(name: Optional[str]) -> str:
    """
    Canonical form used when comparing item names against rule terms:
    case-folded, periods dropped, typographic apostrophes straightened
    and whitespace collapsed. "St. John’s  Wort" -> "st john's wort".
    """
    if not name:
        return ""
    text = name.casefold().replace("’", "'").replace(".", "")
    return _WHITESPACE.sub(" ", text).strip()
