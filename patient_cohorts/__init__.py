"""Patient risk scoring and cohort reporting for the assessment API."""

from .cohorts import CohortResult, analyze, assess_patient, classify
from .errors import (
    AssessmentError,
    ConfigurationError,
    PaginationLimitExceeded,
    SchemaFault,
    SubmissionError,
    TransportFault,
)
from .normalize import (
    NormalizedRecord,
    normalize_age,
    normalize_blood_pressure,
    normalize_record,
    normalize_temperature,
)
from .retriever import PatientRetriever, fetch_all_patients
from .scoring import RiskScore, RiskThresholds, score_record

__version__ = "0.2.0"
