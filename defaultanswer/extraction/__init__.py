"""On-page signal extraction package."""

# Lazy imports - use explicit imports when needed:
# from defaultanswer.extraction.signals import SignalExtractor, ExtractedSignals, extract_signals
# from defaultanswer.extraction.cleaner import extract_visible_text
# from defaultanswer.extraction.evidence import clean_evidence_text, sanitize_short
# from defaultanswer.extraction.snapshot import classify_snapshot_quality, SnapshotQuality
# from defaultanswer.extraction.merge import merge_page_signals
# from defaultanswer.extraction.url import extract_domain, normalize_url, is_valid_url

__all__ = [
    # Signals
    "SignalExtractor",
    "ExtractedSignals",
    "Evidence",
    "FaqEvidence",
    "extract_signals",
    "guess_brand",
    # Cleaner
    "extract_visible_text",
    # Evidence
    "clean_evidence_text",
    "sanitize_short",
    # Snapshot quality
    "SnapshotQuality",
    "classify_snapshot_quality",
    # Multi-page
    "merge_page_signals",
    # URL
    "extract_domain",
    "normalize_url",
    "is_valid_url",
]
