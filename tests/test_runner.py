"""Tests for the end-to-end runner and command line entry point."""

import json
from unittest.mock import patch

import pytest

from patient_cohorts.cohorts import analyze
from patient_cohorts.config import Config
from patient_cohorts.errors import SchemaFault, SubmissionError, TransportFault
from patient_cohorts.runner import main, run, submit_assessment

from fakes import FakeClient

PAGES = [
    {
        "data": [
            {"patient_id": "X1", "blood_pressure": "150/95", "temperature": 101.2, "age": 70},
            {"patient_id": "X2", "blood_pressure": "bad", "temperature": 98, "age": 30},
        ],
        "pagination": {"hasNext": True},
    },
    {
        "patients": [
            {"patient_id": "X3", "blood_pressure": "110/70", "temperature": "99.6", "age": "25"},
        ],
        "pagination": {"hasNext": False},
    },
]


@pytest.fixture
def config():
    return Config({"KSENSE_API_KEY": "ak_test", "PAGE_DELAY_SECONDS": "0"})


class TestRun:

    def test_fetches_scores_and_submits(self, config):
        client = FakeClient(PAGES)
        result, response = run(config, client=client)

        assert response == {"success": True}
        assert client.posted == [(
            "/submit-assessment",
            {
                "high_risk_patients": ["X1"],
                "fever_patients": ["X1", "X3"],
                "data_quality_issues": ["X2"],
            },
        )]
        assert result.frozen

    def test_dry_run_does_not_submit(self, config):
        client = FakeClient(PAGES)
        result, response = run(config, client=client, dry_run=True)
        assert response is None
        assert client.posted == []
        assert list(result.fever_patients) == ["X1", "X3"]

    def test_thresholds_come_from_config(self):
        config = Config({
            "KSENSE_API_KEY": "ak_test",
            "PAGE_DELAY_SECONDS": "0",
            "FEVER_TEMPERATURE": "100.4",
        })
        result, _ = run(config, client=FakeClient(PAGES), dry_run=True)
        assert list(result.fever_patients) == ["X1"]

    def test_schema_fault_prevents_submission(self, config):
        client = FakeClient([PAGES[0], {"message": "oops"}])
        with pytest.raises(SchemaFault):
            run(config, client=client)
        assert client.posted == []


class TestSubmitAssessment:

    def test_failed_post_is_a_submission_error(self):
        class RejectingClient(FakeClient):
            def post_json(self, path, body):
                raise TransportFault("POST returned a body that is not JSON", status_code=200)

        result = analyze([{"patient_id": "X2", "blood_pressure": "bad"}])
        with pytest.raises(SubmissionError) as exc_info:
            submit_assessment(RejectingClient([]), result)
        assert isinstance(exc_info.value.__cause__, TransportFault)

    def test_posts_payload(self):
        client = FakeClient([])
        result = analyze([{"patient_id": "X2", "blood_pressure": "bad"}])
        assert submit_assessment(client, result) == {"success": True}
        assert client.posted[0][1]["data_quality_issues"] == ["X2"]


class TestMain:

    @pytest.fixture(autouse=True)
    def no_dotenv(self):
        with patch("patient_cohorts.runner.load_environment"):
            yield

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("KSENSE_API_KEY", raising=False)
        assert main([]) == 2

    def test_dry_run_prints_payload(self, monkeypatch, capsys):
        monkeypatch.setenv("KSENSE_API_KEY", "ak_test")
        result = analyze([{"patient_id": "X1", "blood_pressure": "150/95", "temperature": 101.2}])
        with patch("patient_cohorts.runner.run", return_value=(result, None)) as run_mock:
            assert main(["--dry-run"]) == 0
        assert run_mock.call_args.kwargs["dry_run"] is True
        printed = json.loads(capsys.readouterr().out)
        assert printed["high_risk_patients"] == ["X1"]

    def test_base_url_override(self, monkeypatch):
        monkeypatch.setenv("KSENSE_API_KEY", "ak_test")
        result = analyze([])
        with patch("patient_cohorts.runner.run", return_value=(result, {"ok": 1})) as run_mock:
            assert main(["--base-url", "http://localhost:9000/api/"]) == 0
        assert run_mock.call_args.args[0].BASE_URL == "http://localhost:9000/api"

    def test_failed_submission_is_reported_separately(self, monkeypatch, caplog):
        monkeypatch.setenv("KSENSE_API_KEY", "ak_test")
        error = SubmissionError("Submitting cohorts failed: HTTP 502")
        with patch("patient_cohorts.runner.run", side_effect=error):
            assert main([]) == 1
        assert "may already have received the payload" in caplog.text
        assert "nothing submitted" not in caplog.text

    def test_aborted_run(self, monkeypatch):
        monkeypatch.setenv("KSENSE_API_KEY", "ak_test")
        with patch("patient_cohorts.runner.run", side_effect=TransportFault("HTTP 500", 500)):
            assert main([]) == 1
