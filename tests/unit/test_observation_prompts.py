"""Tests for cold-summary prompt construction."""

from defaultanswer.observation.prompts import (
    COLD_SUMMARY_SYSTEM,
    ColdSummaryMode,
    ColdSummarySnapshot,
    build_cold_summary_messages,
)


class TestBuildColdSummaryMessages:
    """Tests for build_cold_summary_messages."""

    def test_url_only(self) -> None:
        messages = build_cold_summary_messages("https://acme.com")

        assert messages.system == COLD_SUMMARY_SYSTEM
        assert messages.user.startswith("You are given ONLY a URL (no page content).")
        assert messages.user.endswith("URL: https://acme.com")
        assert "1) Category/Type:" in messages.user
        assert "6) Why uncertain: <one sentence>" in messages.user

    def test_snapshot(self) -> None:
        snapshot = ColdSummarySnapshot(
            title="Acme Payroll", h1="Payroll for startups", excerpt="Run payroll in minutes."
        )
        messages = build_cold_summary_messages(
            "https://acme.com", ColdSummaryMode.SNAPSHOT, snapshot
        )
        lines = messages.user.splitlines()

        assert "Title: Acme Payroll" in lines
        assert "Meta description: Unknown" in lines
        assert "H1: Payroll for startups" in lines
        assert lines[-1] == "Visible text excerpt: Run payroll in minutes."

    def test_snapshot_without_content(self) -> None:
        messages = build_cold_summary_messages("https://acme.com", ColdSummaryMode.SNAPSHOT)
        assert "Title: Unknown" in messages.user.splitlines()

    def test_to_dict(self) -> None:
        data = build_cold_summary_messages("https://acme.com").to_dict()
        assert set(data) == {"system", "user"}
