"""Risk rule tables for blood pressure, temperature and age."""

from dataclasses import dataclass

from .normalize import NormalizedRecord


@dataclass(frozen=True)
class RiskThresholds:
    """Cut-offs used when turning scores into cohorts."""

    high_risk_score: int = 3
    fever_temperature: float = 99.6


@dataclass(frozen=True)
class RiskScore:
    bp_score: int
    temp_score: int
    age_score: int

    @property
    def total(self) -> int:
        return self.bp_score + self.temp_score + self.age_score


def score_blood_pressure(systolic, diastolic):
    """Score a reading against the staged table; first matching row wins.

    A reading can satisfy more than one row (e.g. 150/85 matches both the
    stage 1 diastolic band and the stage 2 systolic band). The rows are
    checked in order, so the earlier row decides.
    """
    if systolic is None or diastolic is None:
        return 0
    if systolic < 120 and diastolic < 80:
        return 0  # Normal
    if 120 <= systolic <= 129 and diastolic < 80:
        return 1  # Elevated
    if 130 <= systolic <= 139 or 80 <= diastolic <= 89:
        return 2  # Stage 1
    if systolic >= 140 or diastolic >= 90:
        return 3  # Stage 2
    return 0


def score_temperature(temperature):
    """Score against the listed bands; readings between bands score 0."""
    if temperature is None:
        return 0
    if temperature <= 99.5:
        return 0
    if 99.6 <= temperature <= 100.9:
        return 1
    if temperature >= 101.0:
        return 2
    return 0


def score_age(age):
    if age is None:
        return 0
    if age > 65:
        return 2
    if 40 <= age <= 65:
        return 1
    return 0


def score_record(normalized: NormalizedRecord) -> RiskScore:
    return RiskScore(
        bp_score=score_blood_pressure(normalized.systolic, normalized.diastolic),
        temp_score=score_temperature(normalized.temperature),
        age_score=score_age(normalized.age),
    )
