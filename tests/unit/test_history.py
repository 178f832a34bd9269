"""Tests for scan records and scan-to-scan diffs."""

from dataclasses import replace

from defaultanswer.pipeline import analyze_html
from defaultanswer.scoring.history import (
    ChipTone,
    ScanRecord,
    build_scan_record,
    compute_scan_delta,
    compute_scan_hash,
    diff_scans,
)
from defaultanswer.scoring.rubric import PRICING_LABEL
from tests.fixtures.pages import ACME_HOMEPAGE, ACME_HOMEPAGE_WITH_PRICING

URL = "https://acme.com"


def _record(html: str) -> ScanRecord:
    return build_scan_record(URL, analyze_html(html, URL))


class TestComputeScanHash:
    """Tests for compute_scan_hash."""

    def test_key_order_does_not_matter(self) -> None:
        assert compute_scan_hash({"a": 1, "b": [1, 2]}) == compute_scan_hash({"b": [1, 2], "a": 1})

    def test_content_matters(self) -> None:
        assert compute_scan_hash({"a": 1}) != compute_scan_hash({"a": 2})

    def test_is_hex_sha256(self) -> None:
        digest = compute_scan_hash({})
        assert len(digest) == 64
        assert int(digest, 16) >= 0


class TestBuildScanRecord:
    """Tests for build_scan_record."""

    def test_fields(self) -> None:
        record = _record(ACME_HOMEPAGE)

        assert record.domain == "acme.com"
        assert record.score == 67
        assert record.readiness == "ok"
        assert record.snapshot_quality == "ok"
        assert record.signals.has_faq is True
        assert record.signals.has_schema is False
        assert record.evidence.title_text == "Acme Payroll"
        assert record.evidence.h1_text == "Payroll for startups"

    def test_breakdown_sorted_by_category_then_label(self) -> None:
        record = _record(ACME_HOMEPAGE)
        keys = [f"{item.category}::{item.label}" for item in record.breakdown]
        assert keys == sorted(keys)

    def test_same_page_same_hash(self) -> None:
        assert _record(ACME_HOMEPAGE).hash == _record(ACME_HOMEPAGE).hash

    def test_dict_round_trip(self) -> None:
        record = _record(ACME_HOMEPAGE)
        assert ScanRecord.from_dict(record.to_dict()) == record


class TestDiffScans:
    """Tests for diff_scans."""

    def test_first_scan(self) -> None:
        diff = diff_scans(None, _record(ACME_HOMEPAGE))

        assert diff.changed is True
        assert diff.score_delta == 0
        assert diff.breakdown_changes == ()

    def test_unchanged(self) -> None:
        diff = diff_scans(_record(ACME_HOMEPAGE), _record(ACME_HOMEPAGE))

        assert diff.changed is False
        assert diff.breakdown_changes == ()
        assert diff.content_changes == ()

    def test_pricing_added(self) -> None:
        diff = diff_scans(_record(ACME_HOMEPAGE), _record(ACME_HOMEPAGE_WITH_PRICING))

        assert diff.changed is True
        assert diff.score_delta == 15
        assert diff.signal_changes.gained == ("has_pricing",)
        assert diff.signal_changes.lost == ()
        assert [(c.label, c.delta) for c in diff.breakdown_changes] == [(PRICING_LABEL, 15)]

    def test_content_changes(self) -> None:
        prev = _record(ACME_HOMEPAGE)
        curr = replace(prev, evidence=replace(prev.evidence, title_text="Acme | Payroll"))

        assert diff_scans(prev, curr).content_changes == ("Title changed",)

    def test_schema_type_changes(self) -> None:
        prev = _record(ACME_HOMEPAGE)
        curr = replace(
            prev,
            signals=replace(prev.signals, has_schema=True, schema_types=("Organization",)),
        )
        diff = diff_scans(prev, curr)

        assert diff.signal_changes.gained == ("has_schema",)
        assert diff.signal_changes.schema_added == ("Organization",)


class TestComputeScanDelta:
    """Tests for compute_scan_delta."""

    def test_pricing_and_score_chips(self) -> None:
        delta = compute_scan_delta(
            _record(ACME_HOMEPAGE_WITH_PRICING), _record(ACME_HOMEPAGE)
        )

        assert [(c.label, c.tone) for c in delta.chips] == [
            ("Pricing now visible", ChipTone.POSITIVE),
            ("Score improved", ChipTone.POSITIVE),
        ]
        assert delta.summary_line == "Since last scan: Score +15"

    def test_regression(self) -> None:
        delta = compute_scan_delta(
            _record(ACME_HOMEPAGE), _record(ACME_HOMEPAGE_WITH_PRICING)
        )

        assert delta.chips[0].label == "Pricing no longer visible"
        assert delta.chips[-1].label == "Score dropped"
        assert delta.summary_line == "Since last scan: Score -15"

    def test_small_change_has_no_score_chip(self) -> None:
        prev = _record(ACME_HOMEPAGE)
        curr = replace(prev, score=prev.score + 4)
        delta = compute_scan_delta(curr, prev)

        assert delta.chips == ()
        assert delta.summary_line == "Since last scan: Score +4"

    def test_at_most_three_chips(self) -> None:
        prev = _record(ACME_HOMEPAGE)
        curr = replace(
            prev,
            score=prev.score - 20,
            signals=replace(prev.signals, has_pricing=True, has_schema=True, has_faq=False),
        )
        delta = compute_scan_delta(curr, prev)

        assert [c.label for c in delta.chips] == [
            "Pricing now visible",
            "Schema added",
            "FAQ removed",
        ]
