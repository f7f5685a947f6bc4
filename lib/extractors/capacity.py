"""Venue capacity extraction.

Looks for numbers sitting next to capacity language ("capacity: 300",
"seats 450", "1,200-person room") and keeps the largest plausible one.
"""

import re
from typing import List, Optional

from lib.extractors.registry import register


MIN_CAPACITY = 50
MAX_CAPACITY = 100000
# Numbers in this range are almost always years
YEAR_RANGE = (2020, 2030)
# 4-digit numbers above this are usually street numbers or zip fragments
MAX_FOUR_DIGIT = 3000

_NUMBER = r"(\d{1,3}(?:,\d{3})+|\d+)"
_QUALIFIER = r"(?:up\s+to\s+|approximately\s+|approx\.?\s+|about\s+|around\s+|over\s+|nearly\s+)?"

CAPACITY_PATTERNS = [
    re.compile(r"\b(?:capacity|occupancy)\s*(?:of|is|:|-)?\s*" + _QUALIFIER + _NUMBER, re.IGNORECASE),
    re.compile(
        r"\b(?:seats|seating\s+for|holds|accommodates|fits|room\s+for)\s+" + _QUALIFIER + _NUMBER,
        re.IGNORECASE,
    ),
    re.compile(r"(?<![\d,.-])" + _NUMBER + r"\s*-?\s*(?:person|people|guest|patron)\s+(?:capacity|venue|room|hall)", re.IGNORECASE),
    re.compile(r"(?<![\d,.-])" + _NUMBER + r"\s+(?:seats|seated|seating|standing|capacity)\b", re.IGNORECASE),
]


def is_plausible_capacity(value: int) -> bool:
    if value < MIN_CAPACITY or value > MAX_CAPACITY:
        return False
    if YEAR_RANGE[0] <= value <= YEAR_RANGE[1]:
        return False
    if 1000 <= value <= 9999 and value > MAX_FOUR_DIGIT:
        return False
    return True


def find_capacities(content: str) -> List[int]:
    """All plausible capacity numbers found in the content."""
    values = []
    for pattern in CAPACITY_PATTERNS:
        for match in pattern.finditer(content or ""):
            value = int(match.group(1).replace(",", ""))
            if is_plausible_capacity(value):
                values.append(value)
    return values


@register("capacity")
def extract_capacity(content: str, url: str = "") -> Optional[int]:
    values = find_capacities(content)
    return max(values) if values else None
