"""Tests for reasoning bullets."""

from defaultanswer.extraction.signals import ExtractedSignals, extract_signals
from defaultanswer.scoring.calculator import calculate_score
from defaultanswer.scoring.reasoning import (
    Impact,
    ReasoningBullet,
    count_negative,
    generate_reasoning,
)
from tests.fixtures.pages import BARE_PAGE


def _reasoning(signals: ExtractedSignals) -> list[ReasoningBullet]:
    return generate_reasoning(signals, calculate_score(signals).breakdown)


class TestGenerateReasoning:
    """Tests for generate_reasoning."""

    def test_acme(self, acme_signals: ExtractedSignals) -> None:
        bullets = _reasoning(acme_signals)

        assert [(b.signal, b.impact) for b in bullets] == [
            ("Content Structure", Impact.NEGATIVE),
            ("Commercial Clarity", Impact.NEGATIVE),
            ("Entity Clarity", Impact.POSITIVE),
            ("Answerability", Impact.POSITIVE),
        ]
        assert count_negative(bullets) == 2

    def test_negatives_come_first_and_are_capped(self) -> None:
        signals = extract_signals(BARE_PAGE, "https://acme.com")
        bullets = _reasoning(signals)

        assert len(bullets) == 3
        assert all(b.is_negative for b in bullets)
        assert "no title tag and no H1 heading" in bullets[0].interpretation

    def test_positives_capped_at_two(self, brightside_signals: ExtractedSignals) -> None:
        bullets = _reasoning(brightside_signals)

        assert count_negative(bullets) == 0
        assert [b.signal for b in bullets] == ["Entity Clarity", "Content Structure"]

    def test_single_heading_wording(self, acme_signals: ExtractedSignals) -> None:
        structure = _reasoning(acme_signals)[0]
        assert structure.interpretation.startswith("With only 1 section heading,")

    def test_interpretations_name_the_brand(self, acme_signals: ExtractedSignals) -> None:
        for bullet in _reasoning(acme_signals):
            assert "Acme" in bullet.interpretation or bullet.signal == "Answerability"


class TestReasoningBullet:
    """Tests for ReasoningBullet."""

    def test_from_dict(self) -> None:
        bullet = ReasoningBullet.from_dict(
            {"signal": "Trust Signals", "interpretation": "ok", "impact": "negative"}
        )

        assert bullet.is_negative
        assert bullet.to_dict()["impact"] == "negative"
