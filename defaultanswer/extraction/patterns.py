"""Named pattern predicates for on-page signal detection.

Every heuristic the extractor relies on lives here as a compiled pattern
plus a small predicate, so the tier ordering in the extractor reads as a
sequence of named checks rather than inline literals.
"""

import re

# Tier 1: explicit FAQ headings and containers
FAQ_HEADING_RE = re.compile(r"faq|frequently asked|questions|q\s*&\s*a", re.IGNORECASE)
FAQ_SECTION_ID_RE = re.compile(r"^faq$", re.IGNORECASE)

# Tier 2: navigational links to help/support content
INDIRECT_FAQ_HREF_RE = re.compile(
    r"(/docs|/help|/support|/faq|/knowledge|/academy)([\"'#?/]|$)", re.IGNORECASE
)

# Direct answer blocks
HOW_IT_WORKS_RE = re.compile(r"how\s+it\s+works?|process", re.IGNORECASE)
HOW_IT_WORKS_STRICT_RE = re.compile(r"how\s+it\s+works?", re.IGNORECASE)
NUMBERED_STEPS_RE = re.compile(r"\b1\.\s+.{0,200}\b2\.\s+", re.DOTALL)
GENERIC_DEFINITION_RE = re.compile(r"\b(is a|helps|built for)\b", re.IGNORECASE)
BRAND_DEFINITION_VERBS = r"(is\s+a|helps|is\s+an|provides|builds|offers)"

# Structured data
LD_JSON_TYPE_RE = re.compile(r"ld\+json", re.IGNORECASE)
SCHEMA_CONTEXT_RE = re.compile(r"@context", re.IGNORECASE)
SCHEMA_VOCABULARY_RE = re.compile(r"schema\.org", re.IGNORECASE)

# Commercial
PRICING_RE = re.compile(
    r"pricing|plans|price|\$\d|€\d|£\d|/month|/year|per month|per year|free tier|free plan",
    re.IGNORECASE,
)

# Trust
ABOUT_HREF_RE = re.compile(
    r"(about|company|team|mission|our-story|our_story|who-we-are|who_we_are)", re.IGNORECASE
)
ABOUT_TEXT_EXACT_RE = re.compile(
    r"^\s*(about|company|team|mission|our story|who we are)\s*$", re.IGNORECASE
)
ABOUT_TEXT_RE = re.compile(r"(about|company|team|mission|our story|who we are)", re.IGNORECASE)
CONTACT_HREF_RE = re.compile(r"(contact|support|help)", re.IGNORECASE)
CONTACT_TEXT_RE = re.compile(
    r"(contact|support|help|customer support|get in touch)", re.IGNORECASE
)
EMAIL_RE = re.compile(r"\b[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}\b", re.IGNORECASE)
PHONE_CANDIDATE_RE = re.compile(
    r"(\+?\d{1,3}[\s.-]?)?(\(\d{2,4}\)[\s.-]?)?\d{3}[\s.-]?\d{3,4}[\s.-]?\d{0,4}"
)
YEAR_LIKE_RE = re.compile(r"^\s*20\d{2}\s*$")
MIN_PHONE_DIGITS = 10

# Identity
BRAND_SPLIT_RE = re.compile(r"[\s\-–—|:]+")
BRAND_STOPWORDS = frozenset(["the", "a", "an", "home", "welcome"])

# Client-side rendering roots
JS_ROOT_MARKERS = [
    re.compile(r"__next", re.IGNORECASE),
    re.compile(r"id=[\"']root[\"']", re.IGNORECASE),
    re.compile(r"id=[\"']app[\"']", re.IGNORECASE),
    re.compile(r"window\.__NUXT__", re.IGNORECASE),
    re.compile(r"data-reactroot", re.IGNORECASE),
    re.compile(r"<script[^>]+chunk[^>]*\.js", re.IGNORECASE),
    re.compile(r"<script[^>]+bundle[^>]*\.js", re.IGNORECASE),
]

# Fetch failures that mean the page refused us
BLOCKED_REASON_RE = re.compile(
    r"(HTTP\s*403|HTTP\s*429|forbidden|too\s+many\s+requests|fetch failed)", re.IGNORECASE
)


def is_faq_heading(text: str) -> bool:
    return bool(FAQ_HEADING_RE.search(text or ""))


def is_faq_container_class(css_class: str | None) -> bool:
    return bool(css_class) and "faq" in css_class.lower()


def is_indirect_faq_href(href: str) -> bool:
    return bool(INDIRECT_FAQ_HREF_RE.search(href or ""))


def is_how_it_works_heading(text: str) -> bool:
    """Match 'how it works' or 'process' headings (direct answer detection)."""
    return bool(HOW_IT_WORKS_RE.search(text or ""))


def mentions_how_it_works(text: str) -> bool:
    """Strict variant without 'process', used when gating FAQ recommendations."""
    return bool(HOW_IT_WORKS_STRICT_RE.search(text or ""))


def has_numbered_steps(text: str) -> bool:
    return bool(NUMBERED_STEPS_RE.search(text or ""))


def brand_definition_patterns(brand: str) -> tuple[re.Pattern[str], re.Pattern[str]]:
    """Build the brand-anchored definition patterns ("Acme is a", "what is Acme")."""
    escaped = re.escape(brand)
    definition = re.compile(rf"\b{escaped}\b\s+{BRAND_DEFINITION_VERBS}\b", re.IGNORECASE)
    what_is = re.compile(rf"what\s+is\s+{escaped}", re.IGNORECASE)
    return definition, what_is


def is_ld_json_type(script_type: str | None) -> bool:
    return bool(script_type) and bool(LD_JSON_TYPE_RE.search(script_type))


def has_schema_context_window(html: str, window: int) -> bool:
    """Loose structured-data check: "@context" near "schema.org".

    Tolerates minified or inlined markup where the script type is missing.
    """
    match = SCHEMA_CONTEXT_RE.search(html or "")
    if not match:
        return False
    start = max(0, match.start() - window)
    end = min(len(html), match.start() + window)
    return bool(SCHEMA_VOCABULARY_RE.search(html[start:end]))


def find_pricing(text: str) -> re.Match[str] | None:
    return PRICING_RE.search(text or "")


def is_about_link(href: str, text: str) -> bool:
    return bool(ABOUT_HREF_RE.search(href or "")) or bool(ABOUT_TEXT_EXACT_RE.match(text or ""))


def is_about_evidence_link(href: str, text: str) -> bool:
    return bool(ABOUT_HREF_RE.search(href or "")) or bool(ABOUT_TEXT_RE.search(text or ""))


def is_contact_link(href: str, text: str) -> bool:
    return bool(CONTACT_HREF_RE.search(href or "")) or bool(CONTACT_TEXT_RE.search(text or ""))


def contains_email(text: str) -> bool:
    return bool(EMAIL_RE.search(text or ""))


def contains_phone_like(text: str) -> bool:
    """Phone-like run of 10+ digits that is not a bare year."""
    for match in PHONE_CANDIDATE_RE.finditer(text or ""):
        candidate = match.group(0)
        digits = sum(1 for ch in candidate if ch.isdigit())
        if digits < MIN_PHONE_DIGITS:
            continue
        if YEAR_LIKE_RE.match(candidate):
            continue
        return True
    return False


def has_js_root_marker(html: str) -> bool:
    return any(marker.search(html or "") for marker in JS_ROOT_MARKERS)


def looks_blocked(reason: str) -> bool:
    return bool(BLOCKED_REASON_RE.search(reason or ""))
