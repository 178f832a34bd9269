"""URL helpers for page identity."""

import re
from urllib.parse import urlparse

SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
WWW_RE = re.compile(r"^www\.", re.IGNORECASE)


def normalize_url(raw: str) -> str:
    """Trim input and default to https:// when no scheme is present."""
    trimmed = (raw or "").strip()
    if not trimmed:
        return ""
    if SCHEME_RE.match(trimmed):
        return trimmed
    return f"https://{trimmed}"


def is_valid_url(raw: str) -> bool:
    """Lenient validation: non-empty, no whitespace, at least one dot."""
    trimmed = (raw or "").strip()
    if not trimmed:
        return False
    if re.search(r"\s", trimmed):
        return False
    return "." in trimmed


def extract_domain(url: str) -> str:
    """Hostname without a leading www."""
    hostname = None
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        hostname = None

    if hostname:
        return WWW_RE.sub("", hostname)

    stripped = WWW_RE.sub("", SCHEME_RE.sub("", (url or "").strip()))
    return stripped.split("/")[0].lower()


def brand_from_domain(domain: str) -> str:
    label = (domain or "").split(".")[0]
    return label[:1].upper() + label[1:] if label else ""


def url_path(url: str) -> str:
    try:
        return urlparse(url).path or "/"
    except ValueError:
        return "/"
