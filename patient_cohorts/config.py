"""Configuration management for the patient cohort assessment."""

import os
from pathlib import Path

from dotenv import load_dotenv

from .errors import ConfigurationError

DEFAULT_BASE_URL = "https://assessment.ksensetech.com/api"


def load_environment(env_path: Path | None = None) -> bool:
    """Load variables from a .env file if one exists.

    Variables already present in the environment win over the file.
    """
    env_path = env_path or Path.cwd() / ".env"
    if env_path.exists():
        return load_dotenv(env_path)
    return False


def _get_int(env, name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


def _get_float(env, name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None


class Config:
    """Application configuration, read once from the environment."""

    def __init__(self, environ=None):
        env = os.environ if environ is None else environ

        # API settings
        self.API_KEY: str = env.get("KSENSE_API_KEY", "").strip()
        self.BASE_URL: str = env.get("KSENSE_BASE_URL", DEFAULT_BASE_URL).rstrip("/")
        self.PATIENTS_PATH: str = env.get("PATIENTS_PATH", "/patients")
        self.SUBMIT_PATH: str = env.get("SUBMIT_PATH", "/submit-assessment")
        self.REQUEST_TIMEOUT: float = _get_float(env, "REQUEST_TIMEOUT", 30.0)

        # Paging settings
        self.PAGE_SIZE: int = _get_int(env, "PAGE_SIZE", 5)
        self.PAGE_DELAY_SECONDS: float = _get_float(env, "PAGE_DELAY_SECONDS", 1.0)
        self.MAX_PAGES: int = _get_int(env, "MAX_PAGES", 100)

        # Retry settings
        self.MAX_RETRIES: int = _get_int(env, "MAX_RETRIES", 4)
        self.RETRY_BACKOFF_SECONDS: float = _get_float(env, "RETRY_BACKOFF_SECONDS", 1.0)

        # Scoring thresholds
        self.HIGH_RISK_SCORE: int = _get_int(env, "HIGH_RISK_SCORE", 3)
        self.FEVER_TEMPERATURE: float = _get_float(env, "FEVER_TEMPERATURE", 99.6)

        if self.PAGE_SIZE < 1:
            raise ConfigurationError("PAGE_SIZE must be at least 1")
        if self.MAX_PAGES < 1:
            raise ConfigurationError("MAX_PAGES must be at least 1")
        if self.MAX_RETRIES < 1:
            raise ConfigurationError("MAX_RETRIES must be at least 1")

    def is_api_key_configured(self) -> bool:
        return bool(self.API_KEY)

    def require_api_key(self) -> str:
        if not self.is_api_key_configured():
            raise ConfigurationError(
                "KSENSE_API_KEY is not set - export it or add it to a .env file"
            )
        return self.API_KEY
