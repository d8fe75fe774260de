"""Fetch patients, score them and submit the three cohorts."""

import argparse
import json
import logging
import sys

from .client import AssessmentClient, RetryPolicy
from .cohorts import CohortResult, analyze
from .config import Config, load_environment
from .errors import AssessmentError, ConfigurationError, SubmissionError
from .retriever import PatientRetriever
from .scoring import RiskThresholds

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_client(config: Config) -> AssessmentClient:
    return AssessmentClient(
        base_url=config.BASE_URL,
        api_key=config.require_api_key(),
        timeout=config.REQUEST_TIMEOUT,
        retry_policy=RetryPolicy(
            max_attempts=config.MAX_RETRIES,
            backoff=config.RETRY_BACKOFF_SECONDS,
        ),
    )


def submit_assessment(client: AssessmentClient, result: CohortResult, path: str = "/submit-assessment") -> dict:
    """POST the cohorts; the response body is returned as-is."""
    try:
        return client.post_json(path, result.to_payload())
    except AssessmentError as e:
        raise SubmissionError(f"Submitting cohorts failed: {e}") from e


def run(config: Config, client: AssessmentClient | None = None, dry_run: bool = False):
    """Run one assessment.

    Returns a ``(result, response)`` pair; ``response`` is None on a dry run.
    Fetch and scoring errors propagate before submission, so a partial
    cohort is never sent. A failed POST raises SubmissionError.
    """
    client = client or build_client(config)
    retriever = PatientRetriever(
        client,
        path=config.PATIENTS_PATH,
        page_size=config.PAGE_SIZE,
        page_delay=config.PAGE_DELAY_SECONDS,
        max_pages=config.MAX_PAGES,
    )
    thresholds = RiskThresholds(
        high_risk_score=config.HIGH_RISK_SCORE,
        fever_temperature=config.FEVER_TEMPERATURE,
    )

    logger.info("Fetching patients...")
    patients = retriever.fetch_all()

    logger.info("Scoring")
    result = analyze(patients, thresholds)
    logger.info(f"Counts: {result.counts()}")

    if dry_run:
        logger.info("[DRY RUN] Skipping submission")
        return result, None

    logger.info("Submitting")
    response = submit_assessment(client, result, config.SUBMIT_PATH)
    return result, response


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Score patient records and submit high-risk, fever and data-quality cohorts"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch and score patients but print the payload instead of submitting",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log per-patient scores",
    )
    parser.add_argument(
        "--base-url",
        type=str,
        default=None,
        help="API root (default: KSENSE_BASE_URL or the public assessment API)",
    )
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    load_environment()

    try:
        config = Config()
        if args.base_url:
            config.BASE_URL = args.base_url.rstrip("/")
        config.require_api_key()
    except ConfigurationError as e:
        logger.error(str(e))
        return 2

    try:
        result, response = run(config, dry_run=args.dry_run)
    except SubmissionError as e:
        logger.error(f"{e} - the server may already have received the payload, check before re-running")
        return 1
    except AssessmentError as e:
        logger.error(f"Assessment aborted, nothing submitted: {e}")
        return 1

    if response is None:
        print(json.dumps(result.to_payload(), indent=2))
    else:
        print("Server response:")
        print(json.dumps(response, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
