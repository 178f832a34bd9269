"""Rendering of short, display-safe evidence strings.

Extraction finds matches; this module turns them into bounded excerpts
that can be shown to a reader without breaking layout.
"""

import re

# Evidence length bounds
TITLE_MAX_CHARS = 160
HEADING_MAX_CHARS = 160
H2_MAX_CHARS = 120
META_MAX_CHARS = 200
SNIPPET_MAX_CHARS = 200
LINK_TEXT_MAX_CHARS = 60
SCHEMA_SAMPLE_MAX_CHARS = 400

CONTEXT_LEAD_CHARS = 60

CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")
WHITESPACE_RE = re.compile(r"\s+")
ARROW_GLYPHS_RE = re.compile(r"[↗↘↙↖►◄↑↓←→]")
UI_CHROME_RE = re.compile(
    r"light mode|dark mode|auto\s*\(os\)|appearance|site settings", re.IGNORECASE
)


def sanitize_short(text: str | None, max_len: int) -> str:
    """Strip control characters, collapse whitespace and truncate."""
    cleaned = CONTROL_CHARS_RE.sub(" ", text or "")
    cleaned = WHITESPACE_RE.sub(" ", cleaned).strip()
    return cleaned[:max_len]


def _is_noise_line(line: str) -> bool:
    if len(ARROW_GLYPHS_RE.findall(line)) >= 2:
        return True
    if UI_CHROME_RE.search(line):
        return True
    # Menu-like: many short tokens, little information
    tokens = line.split()
    short_tokens = sum(1 for token in tokens if len(token) <= 3)
    return len(tokens) >= 10 and short_tokens >= 5


def clean_evidence_text(text: str | None) -> str:
    """Drop navigation glyph rows, UI chrome toggles and menu-like lines."""
    lines = [line.strip() for line in (text or "").replace("\r", "").split("\n")]
    return "\n".join(line for line in lines if line and not _is_noise_line(line))


def extract_context(text: str, index: int, max_len: int) -> str:
    """Excerpt around a match position, starting a little before it."""
    start = max(0, index - CONTEXT_LEAD_CHARS)
    end = min(len(text), index + max_len)
    return WHITESPACE_RE.sub(" ", text[start:end]).strip()


def uniq_strings(values: list[str]) -> list[str]:
    """Order-preserving de-duplication that skips blanks."""
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        key = (value or "").strip()
        if not key or key in seen:
            continue
        seen.add(key)
        out.append(key)
    return out


def render_link_evidence(href: str, text: str) -> str:
    label = sanitize_short(text, LINK_TEXT_MAX_CHARS)
    return f"link: {href} (“{label}”)" if label else f"link: {href}"
