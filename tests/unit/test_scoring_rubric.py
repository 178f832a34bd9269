"""Tests for the scoring rubric."""

from dataclasses import replace
from types import MappingProxyType

import pytest

from defaultanswer.exceptions import RubricError
from defaultanswer.scoring.rubric import (
    CATEGORY_BUDGETS,
    DEFAULT_RUBRIC,
    SCORED_CATEGORIES,
    Category,
    CheckSpec,
    get_rubric,
    validate_rubric,
)


class TestDefaultRubric:
    """Tests for the built-in rubric."""

    def test_budgets_total_100(self) -> None:
        assert sum(CATEGORY_BUDGETS[c] for c in SCORED_CATEGORIES) == 100

    def test_checks_fill_each_budget(self) -> None:
        for category in SCORED_CATEGORIES:
            allotted = sum(spec.max_points for spec in DEFAULT_RUBRIC.checks_for(category))
            assert allotted == CATEGORY_BUDGETS[category]

    def test_get_rubric(self) -> None:
        assert get_rubric() is DEFAULT_RUBRIC

    def test_unknown_check(self) -> None:
        with pytest.raises(KeyError):
            DEFAULT_RUBRIC.check("word_count")

    def test_generic_matching_is_case_insensitive(self) -> None:
        assert DEFAULT_RUBRIC.is_generic_heading("  Learn More ")
        assert DEFAULT_RUBRIC.is_generic_h1("WELCOME")
        assert not DEFAULT_RUBRIC.is_generic_h1("Payroll for startups")


class TestValidateRubric:
    """Tests for rubric validation."""

    def test_check_points_must_match_budget(self) -> None:
        checks = tuple(
            replace(spec, max_points=15) if spec.key == "pricing" else spec
            for spec in DEFAULT_RUBRIC.checks
        )
        broken = replace(
            DEFAULT_RUBRIC,
            checks=checks + (CheckSpec("extra", "Extra", Category.COMMERCIAL_CLARITY, 5),),
        )

        with pytest.raises(RubricError) as exc_info:
            validate_rubric(broken)

        assert exc_info.value.details == {"category": "Commercial Clarity"}

    def test_budgets_must_total_100(self) -> None:
        budgets = dict(CATEGORY_BUDGETS)
        budgets[Category.COMMERCIAL_CLARITY] = 20
        checks = tuple(
            replace(spec, max_points=20) if spec.key == "pricing" else spec
            for spec in DEFAULT_RUBRIC.checks
        )
        broken = replace(DEFAULT_RUBRIC, checks=checks, budgets=MappingProxyType(budgets))

        with pytest.raises(RubricError, match="expected 100"):
            validate_rubric(broken)
