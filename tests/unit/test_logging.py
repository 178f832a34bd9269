"""Tests for logging setup and the events the pipeline emits."""

import structlog
from structlog.testing import capture_logs

from defaultanswer.logging import bind_scan_context, clear_scan_context, setup_logging
from defaultanswer.pipeline import PageSnapshot, analyze_snapshot
from tests.fixtures.pages import ACME_HOMEPAGE, with_filler

URL = "https://acme.com"


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_configures_structlog(self) -> None:
        try:
            setup_logging(level="debug", json_logs=True)
            assert structlog.is_configured()
        finally:
            structlog.reset_defaults()


class TestScanContext:
    """Tests for scan context binding."""

    def test_bind_and_clear(self) -> None:
        bind_scan_context(url=URL, run_id="r1")
        try:
            assert structlog.contextvars.get_contextvars() == {"url": URL, "run_id": "r1"}
        finally:
            clear_scan_context()

        assert structlog.contextvars.get_contextvars() == {}


class TestPipelineEvents:
    """The pipeline logs one milestone per snapshot."""

    def test_scored_snapshot(self) -> None:
        with capture_logs() as logs:
            analyze_snapshot(PageSnapshot(url=URL, html=with_filler(ACME_HOMEPAGE)))

        analyzed = [log for log in logs if log["event"] == "snapshot_analyzed"]
        assert len(analyzed) == 1
        assert analyzed[0]["score"] == 67
        assert analyzed[0]["log_level"] == "info"

    def test_thin_snapshot(self) -> None:
        with capture_logs() as logs:
            analyze_snapshot(PageSnapshot(url=URL, html=ACME_HOMEPAGE))

        events = {log["event"]: log for log in logs}
        assert events["snapshot_incomplete"]["quality"] == "thin"
        assert "snapshot_analyzed" not in events

    def test_blocked_fetch_is_a_warning(self) -> None:
        with capture_logs() as logs:
            analyze_snapshot(PageSnapshot(url=URL, status_code=403))

        failed = [log for log in logs if log["event"] == "fetch_failed"]
        assert failed[0]["log_level"] == "warning"
        assert failed[0]["status_code"] == 403
