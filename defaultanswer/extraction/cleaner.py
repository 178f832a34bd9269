"""Visible text extraction from raw HTML."""

import re

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

# Never rendered as readable text
HIDDEN_TAGS = frozenset("script style noscript svg canvas iframe template head".split())

# Children of these stay on the current line
INLINE_TAGS = frozenset(
    (
        "a abbr b bdo big button cite code dfn em i img input kbd label mark q s samp "
        "small span strong sub sup time u var wbr"
    ).split()
)

CSS_BRACES_RE = re.compile(r"[{}]")
CSS_SEPARATORS_RE = re.compile(r"[;:]")
HORIZONTAL_SPACE_RE = re.compile(r"[ \t\u00a0]+")


def _extract_text_from_tag(tag: Tag) -> str:
    """Extract text from a tag, putting block-level children on their own lines."""
    if tag.name in HIDDEN_TAGS:
        return ""

    parts: list[str] = []

    for child in tag.children:
        if isinstance(child, NavigableString):
            if isinstance(child, Comment):
                continue
            text = str(child).strip()
            if text:
                parts.append(text)
        elif isinstance(child, Tag):
            if child.name == "br":
                parts.append("\n")
                continue
            child_text = _extract_text_from_tag(child)
            if child_text:
                if child.name not in INLINE_TAGS:
                    parts.append("\n" + child_text + "\n")
                else:
                    parts.append(child_text)

    return " ".join(parts)


def _is_css_like(line: str) -> bool:
    """Inline CSS or config blobs that leaked into text nodes."""
    return bool(CSS_BRACES_RE.search(line)) or len(CSS_SEPARATORS_RE.findall(line)) >= 3


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def extract_visible_text(html: str | BeautifulSoup) -> str:
    """
    Extract human-visible text from HTML, one block per line.

    Scripts, styles, the document head and other non-rendered containers
    are dropped, as are lines that look like inline CSS.

    Args:
        html: Raw HTML string or an already parsed document (not mutated)

    Returns:
        Newline-joined visible text
    """
    if not html:
        return ""

    soup = parse_html(str(html)) if isinstance(html, BeautifulSoup) else parse_html(html)

    for tag_name in HIDDEN_TAGS:
        for tag in soup.find_all(tag_name):
            tag.decompose()

    root = soup.body or soup
    text = _extract_text_from_tag(root) if isinstance(root, Tag) else root.get_text("\n")

    lines = []
    for raw_line in text.split("\n"):
        line = HORIZONTAL_SPACE_RE.sub(" ", raw_line).strip()
        if not line or _is_css_like(line):
            continue
        lines.append(line)

    return "\n".join(lines)


def collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text or "").strip()
