"""Scoring package: rubric, calculator, reasoning, readiness and diffs."""

# Lazy imports - use explicit imports when needed:
# from defaultanswer.scoring.calculator import CategoryScorer, ScoreResult, calculate_score
# from defaultanswer.scoring.reasoning import generate_reasoning, ReasoningBullet
# from defaultanswer.scoring.readiness import classify_readiness, ReadinessState
# from defaultanswer.scoring.delta import compute_diff
# from defaultanswer.scoring.history import build_scan_record, diff_scans, compute_scan_delta

__all__ = [
    # Rubric
    "Category",
    "Rubric",
    # Calculator
    "BreakdownItem",
    "CategoryScorer",
    "ScoreResult",
    "calculate_score",
    # Reasoning
    "Impact",
    "ReasoningBullet",
    "generate_reasoning",
    # Readiness
    "AnalysisStatus",
    "ReadinessState",
    "ReadinessClassification",
    "classify_readiness",
    # Diffs
    "CompareDiff",
    "compute_diff",
    "ScanRecord",
    "build_scan_record",
    "diff_scans",
    "compute_scan_delta",
]
