"""Cold-summary observation package."""

# Lazy imports - use explicit imports when needed:
# from defaultanswer.observation.prompts import build_cold_summary_messages, ColdSummaryMode
# from defaultanswer.observation.cold_summary import analyze_cold_summary, ColdSummaryAnalysis
# from defaultanswer.observation.aggregate import aggregate_cold_summary_runs, build_multi_run

__all__ = [
    "ColdSummaryMode",
    "build_cold_summary_messages",
    "ColdSummaryAnalysis",
    "FailureMode",
    "analyze_cold_summary",
    "ColdSummaryRun",
    "aggregate_cold_summary_runs",
    "pick_representative_run",
    "build_multi_run",
]
