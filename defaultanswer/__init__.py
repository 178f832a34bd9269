"""DefaultAnswer: recommendation-readiness scoring for a site's homepage snapshot."""

__version__ = "0.1.0"

# Lazy imports - use explicit imports when needed:
# from defaultanswer.pipeline import analyze_snapshot, run_readiness_check, PageSnapshot

__all__ = [
    "PageSnapshot",
    "AnalysisResult",
    "analyze_html",
    "analyze_snapshot",
    "analyze_site",
    "run_readiness_check",
    "compare_analyses",
]
