"""Coerce raw patient fields into typed values.

Every function here is total: malformed input maps to None (absent) and
never raises. Absent is distinct from a parsed zero.
"""

import math
import re
from dataclasses import dataclass

BP_PATTERN = re.compile(r"([0-9]{2,3})/([0-9]{2,3})")
WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class NormalizedRecord:
    systolic: int | None
    diastolic: int | None
    temperature: float | None
    age: float | None

    @property
    def has_blood_pressure(self) -> bool:
        return self.systolic is not None and self.diastolic is not None


def normalize_blood_pressure(raw):
    """Parse "SYS/DIA" into an integer pair, or (None, None)."""
    if not isinstance(raw, str) or not raw:
        return None, None
    cleaned = WHITESPACE.sub("", raw.strip()).upper()
    match = BP_PATTERN.fullmatch(cleaned)
    if not match:
        return None, None
    return int(match.group(1)), int(match.group(2))


def _to_number(raw):
    # bool is an int subclass; True is not a reading.
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        # float() accepts "98_6" as digit grouping; a reading never does.
        if not raw or "_" in raw:
            return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def normalize_temperature(raw):
    return _to_number(raw)


def normalize_age(raw):
    return _to_number(raw)


def normalize_record(record) -> NormalizedRecord:
    systolic, diastolic = normalize_blood_pressure(record.get("blood_pressure"))
    return NormalizedRecord(
        systolic=systolic,
        diastolic=diastolic,
        temperature=normalize_temperature(record.get("temperature")),
        age=normalize_age(record.get("age")),
    )
