from __future__ import annotations

import re

THURSDAY_SPELLINGS = frozenset({"THU", "THUR", "THURS", "THURSDAY"})
THURSDAY_CODE = "THUR"
SUBJECT_SEPARATOR = " - "
UNKNOWN_SUBJECT = "N/A"

_SUBJECT_CODE_PATTERN = re.compile(r"^[A-Z0-9_]+$")
_LEADING_CODE_PATTERN = re.compile(r"^\s*([A-Za-z0-9_]+)")


def normalize_day(value: str | None) -> str | None:
    """Canonical day token: THUR for any Thursday spelling, else the first three letters."""
    if not value:
        return value
    upper = str(value).strip().upper()
    if upper in THURSDAY_SPELLINGS:
        return THURSDAY_CODE
    return upper[:3]


def extract_subject_code(description: str | None) -> str:
    """Infer a subject code from text shape such as ``"MATH101 - Algebra"``.

    Not validated against the ``subjects`` table.
    """
    if not description:
        return UNKNOWN_SUBJECT
    text = str(description).strip()
    candidate = text.split(SUBJECT_SEPARATOR)[0].strip().upper()
    if candidate and _SUBJECT_CODE_PATTERN.match(candidate):
        return candidate
    match = _LEADING_CODE_PATTERN.match(text)
    return match.group(1).upper() if match else UNKNOWN_SUBJECT


def normalize_subject_code(code: str | None) -> str:
    return (code or "").strip().upper()


def is_lab_activity(description: str | None) -> bool:
    return "LAB" in (description or "").upper()


def normalize_description(description: str | None) -> str:
    return " ".join((description or "").split()).upper()
