"""Cohort classification and aggregation of scored patients."""

import logging
from dataclasses import dataclass, field
from typing import Iterable

from .normalize import NormalizedRecord, normalize_record
from .scoring import RiskScore, RiskThresholds, score_record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Classification:
    high_risk: bool
    fever: bool
    data_quality_issue: bool


@dataclass(frozen=True)
class PatientAssessment:
    patient_id: str | None
    normalized: NormalizedRecord
    score: RiskScore
    classification: Classification


def classify(
    normalized: NormalizedRecord,
    score: RiskScore,
    thresholds: RiskThresholds | None = None,
) -> Classification:
    """Evaluate the three cohort predicates independently.

    Fever is read from the normalized temperature, not from the temperature
    score. Only blood pressure counts toward data quality; a malformed age or
    temperature simply scores zero.
    """
    thresholds = thresholds or RiskThresholds()
    return Classification(
        high_risk=score.total >= thresholds.high_risk_score,
        fever=(
            normalized.temperature is not None
            and normalized.temperature >= thresholds.fever_temperature
        ),
        data_quality_issue=not normalized.has_blood_pressure,
    )


def assess_patient(record: dict, thresholds: RiskThresholds | None = None) -> PatientAssessment:
    normalized = normalize_record(record)
    score = score_record(normalized)
    return PatientAssessment(
        patient_id=record.get("patient_id"),
        normalized=normalized,
        score=score,
        classification=classify(normalized, score, thresholds),
    )


@dataclass
class CohortResult:
    """The three ordered patient-id lists reported for a run."""

    high_risk_patients: list = field(default_factory=list)
    fever_patients: list = field(default_factory=list)
    data_quality_issues: list = field(default_factory=list)
    frozen: bool = field(default=False, repr=False)

    def add(self, patient_id: str, classification: Classification) -> None:
        if self.frozen:
            raise RuntimeError("CohortResult is frozen and cannot be modified")
        if classification.high_risk:
            self.high_risk_patients.append(patient_id)
        if classification.fever:
            self.fever_patients.append(patient_id)
        if classification.data_quality_issue:
            self.data_quality_issues.append(patient_id)

    def freeze(self) -> "CohortResult":
        self.high_risk_patients = tuple(self.high_risk_patients)
        self.fever_patients = tuple(self.fever_patients)
        self.data_quality_issues = tuple(self.data_quality_issues)
        self.frozen = True
        return self

    def counts(self) -> dict[str, int]:
        return {k: len(v) for k, v in self.to_payload().items()}

    def to_payload(self) -> dict[str, list[str]]:
        return {
            "high_risk_patients": list(self.high_risk_patients),
            "fever_patients": list(self.fever_patients),
            "data_quality_issues": list(self.data_quality_issues),
        }


def _usable_id(patient_id) -> bool:
    if isinstance(patient_id, str):
        return bool(patient_id.strip())
    return patient_id is not None


def analyze(
    patients: Iterable[dict],
    thresholds: RiskThresholds | None = None,
) -> CohortResult:
    """Score every record in order and collect the cohorts.

    Ids are reported as strings: a numeric id such as 5 is sent as "5".
    Records that are not objects, or whose id is missing or blank, are
    skipped since they cannot be reported.
    """
    result = CohortResult()
    skipped = 0

    for record in patients:
        if not isinstance(record, dict) or not _usable_id(record.get("patient_id")):
            skipped += 1
            logger.warning(f"Skipping record without a usable patient_id: {record!r}")
            continue

        assessment = assess_patient(record, thresholds)
        logger.debug(
            f"{assessment.patient_id}: bp={assessment.score.bp_score} "
            f"temp={assessment.score.temp_score} age={assessment.score.age_score} "
            f"total={assessment.score.total} {assessment.classification}"
        )
        result.add(str(assessment.patient_id), assessment.classification)

    if skipped:
        logger.warning(f"{skipped} record(s) skipped for missing patient_id")
    return result.freeze()
