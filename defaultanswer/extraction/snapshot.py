"""Snapshot quality gate.

Decides whether a captured snapshot carries enough server-rendered
content to be scored at all. Pages that are thin, or that are an empty
shell waiting on a client-side framework, are reported as incomplete
instead of being scored as if their content were missing.
"""

from enum import StrEnum

import structlog

from defaultanswer.config import get_settings
from defaultanswer.extraction.cleaner import extract_visible_text
from defaultanswer.extraction.patterns import has_js_root_marker

logger = structlog.get_logger(__name__)


class SnapshotQuality(StrEnum):
    """Usability of a captured HTML snapshot."""

    OK = "ok"
    THIN = "thin"
    LIKELY_JS = "likely_js"


def classify_snapshot_quality(html: str, byte_count: int | None = None) -> SnapshotQuality:
    """
    Classify a snapshot as ok, thin, or likely JavaScript-rendered.

    Args:
        html: Raw HTML snapshot
        byte_count: Response size in bytes (defaults to UTF-8 size of html)

    Returns:
        SnapshotQuality
    """
    settings = get_settings()
    html = html or ""
    size = byte_count if byte_count is not None else len(html.encode("utf-8"))

    visible_text = extract_visible_text(html)
    text_length = len(visible_text)

    if text_length < settings.snapshot_empty_body_chars and has_js_root_marker(html):
        quality = SnapshotQuality.LIKELY_JS
    elif size < settings.snapshot_thin_bytes or text_length < settings.snapshot_thin_text_chars:
        quality = SnapshotQuality.THIN
    else:
        quality = SnapshotQuality.OK

    logger.debug(
        "snapshot_quality_classified",
        quality=quality.value,
        bytes=size,
        visible_chars=text_length,
    )
    return quality
