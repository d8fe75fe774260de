"""Errors that abort an assessment run before anything is submitted."""


class AssessmentError(Exception):
    """Base class for run-level failures."""


class TransportFault(AssessmentError):
    """The API could not be reached or answered with an error status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class SchemaFault(AssessmentError):
    """A response body did not have a shape we know how to read."""


class PaginationLimitExceeded(AssessmentError):
    """The server kept reporting more pages past the configured bound."""


class ConfigurationError(AssessmentError):
    """A required setting is missing or malformed."""


class SubmissionError(AssessmentError):
    """The cohort POST failed; the server may or may not have stored it."""
