"""
ATS Detection - classify a career page URL by the vendor that hosts it

Patterns are checked in order and the first vendor with a matching pattern
wins, so a URL that mentions two vendors always gets the same answer.
"""

import re
from typing import List, Literal, Tuple

AtsType = Literal[
    "greenhouse",
    "lever",
    "workday",
    "ashby",
    "bamboohr",
    "smartrecruiters",
    "other",
    "unknown",
]

ATS_PATTERNS: List[Tuple[str, List[re.Pattern]]] = [
    ("greenhouse", [re.compile(r"greenhouse\.io", re.I)]),
    ("lever", [re.compile(r"lever\.co", re.I)]),
    ("workday", [re.compile(r"workday\.com", re.I), re.compile(r"myworkdayjobs\.com", re.I)]),
    ("ashby", [re.compile(r"ashbyhq\.com", re.I)]),
    ("bamboohr", [re.compile(r"bamboohr\.com", re.I)]),
    ("smartrecruiters", [re.compile(r"smartrecruiters\.com", re.I)]),
]


def detect_ats(url: str) -> AtsType:
    """Return the ATS tag for a URL, or "unknown" when no vendor matches."""
    for ats_type, patterns in ATS_PATTERNS:
        if any(p.search(url) for p in patterns):
            return ats_type
    return "unknown"


def is_ats(url: str, ats_type: str) -> bool:
    return detect_ats(url) == ats_type


def supported_ats_types() -> List[str]:
    return [ats_type for ats_type, _ in ATS_PATTERNS]
