from typing import Dict, Optional

from regimeniq.schemas import SeverityDisplay


SEVERITY_DISPLAY: Dict[str, SeverityDisplay] = {
    "high": SeverityDisplay(
        label="High Priority",
        color="text-red-700",
        bg_color="bg-red-50",
        border_color="border-red-200",
        description="Discuss with your healthcare provider immediately",
    ),
    "moderate": SeverityDisplay(
        label="Moderate",
        color="text-yellow-700",
        bg_color="bg-yellow-50",
        border_color="border-yellow-200",
        description="Mention to your healthcare provider at next visit",
    ),
    "low": SeverityDisplay(
        label="Low",
        color="text-blue-700",
        bg_color="bg-blue-50",
        border_color="border-blue-200",
        description="Good to be aware of, discuss if convenient",
    ),
    "unknown": SeverityDisplay(
        label="Unknown",
        color="text-gray-700",
        bg_color="bg-gray-50",
        border_color="border-gray-200",
        description="Insufficient data available",
    ),
}


def get_severity_display(severity: Optional[str]) -> SeverityDisplay:
    """Display record for a severity; anything unrecognised reads as unknown."""
    key = severity.strip().lower() if isinstance(severity, str) else "unknown"
    return SEVERITY_DISPLAY.get(key, SEVERITY_DISPLAY["unknown"])
