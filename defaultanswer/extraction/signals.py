"""On-page signal extraction.

Parses a captured HTML snapshot into an immutable ExtractedSignals record.
Each signal is detected with a tiered policy:

1. Explicit structural match (FAQ heading, JSON-LD script)
2. Indirect textual or navigational match (help/docs links, "@context"
   near "schema.org")
3. Absence: flag stays false and no evidence is recorded

Extraction never raises. Anything unexpected is logged and yields an
empty record for the URL.
"""

import json
from dataclasses import dataclass, field
from typing import Any

import structlog
from bs4 import BeautifulSoup

from defaultanswer.config import get_settings
from defaultanswer.extraction import patterns
from defaultanswer.extraction.cleaner import collapse_whitespace, extract_visible_text, parse_html
from defaultanswer.extraction.evidence import (
    H2_MAX_CHARS,
    HEADING_MAX_CHARS,
    META_MAX_CHARS,
    SCHEMA_SAMPLE_MAX_CHARS,
    SNIPPET_MAX_CHARS,
    TITLE_MAX_CHARS,
    clean_evidence_text,
    extract_context,
    render_link_evidence,
    sanitize_short,
    uniq_strings,
)
from defaultanswer.extraction.url import brand_from_domain, extract_domain

logger = structlog.get_logger(__name__)

MAX_EVIDENCE_H2S = 8
MAX_EVIDENCE_SNIPPETS = 3
MAX_SCHEMA_TYPES = 8
DEFINITION_CONTEXT_CHARS = 140
PRICING_CONTEXT_CHARS = 160
HOW_IT_WORKS_SNIPPET = "How it works / process section detected"


@dataclass(frozen=True)
class FaqEvidence:
    """Evidence behind the answerability signals."""

    explicit_faq_detected: bool = False
    indirect_faq_links: tuple[str, ...] = ()
    direct_answer_snippets: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "explicit_faq_detected": self.explicit_faq_detected,
            "indirect_faq_links": list(self.indirect_faq_links),
            "direct_answer_snippets": list(self.direct_answer_snippets),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FaqEvidence":
        return cls(
            explicit_faq_detected=bool(data.get("explicit_faq_detected")),
            indirect_faq_links=tuple(data.get("indirect_faq_links") or ()),
            direct_answer_snippets=tuple(data.get("direct_answer_snippets") or ()),
        )


@dataclass(frozen=True)
class Evidence:
    """Short, display-safe excerpts supporting the extracted flags."""

    title_text: str | None = None
    meta_description: str | None = None
    h1_text: str | None = None
    h2_texts: tuple[str, ...] = ()
    schema_types: tuple[str, ...] = ()
    schema_raw_sample: str | None = None
    contact_evidence: tuple[str, ...] = ()
    about_evidence: tuple[str, ...] = ()
    pricing_evidence: tuple[str, ...] = ()
    faq: FaqEvidence = field(default_factory=FaqEvidence)

    def to_dict(self) -> dict:
        return {
            "title_text": self.title_text,
            "meta_description": self.meta_description,
            "h1_text": self.h1_text,
            "h2_texts": list(self.h2_texts),
            "schema_types": list(self.schema_types),
            "schema_raw_sample": self.schema_raw_sample,
            "contact_evidence": list(self.contact_evidence),
            "about_evidence": list(self.about_evidence),
            "pricing_evidence": list(self.pricing_evidence),
            "faq": self.faq.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Evidence":
        return cls(
            title_text=data.get("title_text"),
            meta_description=data.get("meta_description"),
            h1_text=data.get("h1_text"),
            h2_texts=tuple(data.get("h2_texts") or ()),
            schema_types=tuple(data.get("schema_types") or ()),
            schema_raw_sample=data.get("schema_raw_sample"),
            contact_evidence=tuple(data.get("contact_evidence") or ()),
            about_evidence=tuple(data.get("about_evidence") or ()),
            pricing_evidence=tuple(data.get("pricing_evidence") or ()),
            faq=FaqEvidence.from_dict(data.get("faq") or {}),
        )


@dataclass(frozen=True)
class ExtractedSignals:
    """Everything found on one page snapshot."""

    url: str
    domain: str
    brand_guess: str

    title: str | None = None
    meta_description: str | None = None
    canonical_url: str | None = None
    h1s: tuple[str, ...] = ()
    h2s: tuple[str, ...] = ()
    h3s: tuple[str, ...] = ()

    # Answerability
    has_faq: bool = False
    has_indirect_faq: bool = False
    has_direct_answer_block: bool = False

    # Structured data
    has_structured_data: bool = False
    schema_types: tuple[str, ...] = ()

    # Commercial and trust
    has_pricing: bool = False
    has_about: bool = False
    has_contact_signals: bool = False
    contact_evidence: tuple[str, ...] = ()

    evidence: Evidence = field(default_factory=Evidence)

    @classmethod
    def empty(cls, url: str) -> "ExtractedSignals":
        """Skeleton record used when a page could not be parsed or fetched."""
        domain = extract_domain(url)
        return cls(url=url, domain=domain, brand_guess=brand_from_domain(domain))

    @property
    def has_how_it_works(self) -> bool:
        return any(patterns.mentions_how_it_works(h) for h in (*self.h2s, *self.h3s))

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "domain": self.domain,
            "brand_guess": self.brand_guess,
            "title": self.title,
            "meta_description": self.meta_description,
            "canonical_url": self.canonical_url,
            "h1s": list(self.h1s),
            "h2s": list(self.h2s),
            "h3s": list(self.h3s),
            "has_faq": self.has_faq,
            "has_indirect_faq": self.has_indirect_faq,
            "has_direct_answer_block": self.has_direct_answer_block,
            "has_structured_data": self.has_structured_data,
            "schema_types": list(self.schema_types),
            "has_pricing": self.has_pricing,
            "has_about": self.has_about,
            "has_contact_signals": self.has_contact_signals,
            "contact_evidence": list(self.contact_evidence),
            "evidence": self.evidence.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExtractedSignals":
        return cls(
            url=data["url"],
            domain=data.get("domain") or extract_domain(data["url"]),
            brand_guess=data.get("brand_guess", ""),
            title=data.get("title"),
            meta_description=data.get("meta_description"),
            canonical_url=data.get("canonical_url"),
            h1s=tuple(data.get("h1s") or ()),
            h2s=tuple(data.get("h2s") or ()),
            h3s=tuple(data.get("h3s") or ()),
            has_faq=bool(data.get("has_faq")),
            has_indirect_faq=bool(data.get("has_indirect_faq")),
            has_direct_answer_block=bool(data.get("has_direct_answer_block")),
            has_structured_data=bool(data.get("has_structured_data")),
            schema_types=tuple(data.get("schema_types") or ()),
            has_pricing=bool(data.get("has_pricing")),
            has_about=bool(data.get("has_about")),
            has_contact_signals=bool(data.get("has_contact_signals")),
            contact_evidence=tuple(data.get("contact_evidence") or ()),
            evidence=Evidence.from_dict(data.get("evidence") or {}),
        )


def guess_brand(title: str | None, domain: str) -> str:
    """First meaningful title word, else the capitalized first domain label."""
    if title:
        words = patterns.BRAND_SPLIT_RE.split(title.strip())
        first = words[0].strip() if words else ""
        if len(first) > 1 and first.lower() not in patterns.BRAND_STOPWORDS:
            return first
    return brand_from_domain(domain)


def _collect_schema_types(value: Any, out: list[str]) -> None:
    if not value:
        return
    if isinstance(value, list):
        for item in value:
            _collect_schema_types(item, out)
        return
    if not isinstance(value, dict):
        return

    type_value = value.get("@type")
    if isinstance(type_value, str):
        out.append(type_value)
    elif isinstance(type_value, list):
        out.extend(t for t in type_value if isinstance(t, str))

    graph = value.get("@graph")
    if graph:
        _collect_schema_types(graph, out)


@dataclass
class _DefinitionMatch:
    hit: bool
    snippets: list[str]


class SignalExtractor:
    """Extracts ExtractedSignals from an HTML snapshot."""

    def __init__(
        self,
        direct_answer_window: int | None = None,
        schema_context_window: int | None = None,
        indirect_faq_link_limit: int | None = None,
    ):
        settings = get_settings()
        self.direct_answer_window = direct_answer_window or settings.direct_answer_window_chars
        self.schema_context_window = (
            schema_context_window or settings.schema_context_window_chars
        )
        self.indirect_faq_link_limit = (
            indirect_faq_link_limit or settings.indirect_faq_link_limit
        )

    def extract(self, html: str, url: str) -> ExtractedSignals:
        """
        Extract signals from HTML. Never raises.

        Args:
            html: Raw HTML snapshot
            url: Resolved URL the snapshot was taken from

        Returns:
            ExtractedSignals for the page (empty skeleton on failure)
        """
        try:
            signals = self._extract(html or "", url)
        except Exception as e:
            logger.warning("signal_extraction_failed", url=url, error=str(e))
            return ExtractedSignals.empty(url)

        logger.debug(
            "signals_extracted",
            url=url,
            brand=signals.brand_guess,
            has_faq=signals.has_faq,
            has_indirect_faq=signals.has_indirect_faq,
            has_direct_answer_block=signals.has_direct_answer_block,
            has_structured_data=signals.has_structured_data,
            has_pricing=signals.has_pricing,
        )
        return signals

    def _extract(self, html: str, url: str) -> ExtractedSignals:
        soup = parse_html(html)
        domain = extract_domain(url)

        title = self._extract_title(soup)
        meta_description = self._extract_meta_description(soup)
        canonical_url = self._extract_canonical(soup)
        h1s = self._heading_texts(soup, "h1")
        h2s = self._heading_texts(soup, "h2")
        h3s = self._heading_texts(soup, "h3")
        brand = guess_brand(title, domain)

        visible_text = extract_visible_text(html)
        flat_text = collapse_whitespace(visible_text)
        links = self._links(soup)

        # Answerability: tier 1, then tier 2 only when tier 1 is absent
        has_faq = self._detect_explicit_faq(soup, h2s, h3s)
        indirect_links = [] if has_faq else self._indirect_faq_links(links)
        has_indirect_faq = bool(indirect_links)

        top_window = flat_text[: self.direct_answer_window]
        definition = self._detect_definition(top_window, brand)
        has_how_heading = any(patterns.is_how_it_works_heading(h) for h in (*h2s, *h3s))
        list_item_count = len(soup.find_all("li"))
        has_steps = patterns.has_numbered_steps(top_window)
        has_direct_answer_block = definition.hit or (
            has_how_heading and (list_item_count >= 2 or has_steps)
        )
        direct_snippets = definition.snippets + ([HOW_IT_WORKS_SNIPPET] if has_how_heading else [])
        direct_snippets = [sanitize_short(s, HEADING_MAX_CHARS) for s in direct_snippets]

        # Structured data
        ld_scripts = soup.find_all("script", attrs={"type": patterns.is_ld_json_type})
        has_structured_data = bool(ld_scripts) or patterns.has_schema_context_window(
            html, self.schema_context_window
        )
        schema_types = self._schema_types(ld_scripts) if has_structured_data else []
        schema_sample = self._schema_raw_sample(ld_scripts) if has_structured_data else None

        # Commercial
        pricing_match = patterns.find_pricing(visible_text)
        has_pricing = pricing_match is not None
        pricing_evidence = self._pricing_evidence(visible_text) if has_pricing else []

        # Trust
        has_about = any(patterns.is_about_link(href, text) for href, text in links)
        about_evidence = uniq_strings(
            [
                render_link_evidence(href, text)
                for href, text in links
                if patterns.is_about_evidence_link(href, text)
            ]
        )
        contact_evidence = self._contact_evidence(links, visible_text)

        evidence = Evidence(
            title_text=sanitize_short(title, TITLE_MAX_CHARS) if title else None,
            meta_description=(
                sanitize_short(meta_description, META_MAX_CHARS) if meta_description else None
            ),
            h1_text=sanitize_short(h1s[0], HEADING_MAX_CHARS) if h1s else None,
            h2_texts=tuple(sanitize_short(h, H2_MAX_CHARS) for h in h2s[:MAX_EVIDENCE_H2S]),
            schema_types=tuple(schema_types[:MAX_SCHEMA_TYPES]),
            schema_raw_sample=(
                sanitize_short(schema_sample, SCHEMA_SAMPLE_MAX_CHARS) if schema_sample else None
            ),
            contact_evidence=tuple(contact_evidence[:MAX_EVIDENCE_SNIPPETS]),
            about_evidence=tuple(about_evidence[:MAX_EVIDENCE_SNIPPETS]),
            pricing_evidence=tuple(pricing_evidence[:MAX_EVIDENCE_SNIPPETS]),
            faq=FaqEvidence(
                explicit_faq_detected=has_faq,
                indirect_faq_links=tuple(indirect_links),
                direct_answer_snippets=tuple(direct_snippets[:MAX_EVIDENCE_SNIPPETS]),
            ),
        )

        return ExtractedSignals(
            url=url,
            domain=domain,
            brand_guess=brand,
            title=title,
            meta_description=meta_description,
            canonical_url=canonical_url,
            h1s=tuple(h1s),
            h2s=tuple(h2s),
            h3s=tuple(h3s),
            has_faq=has_faq,
            has_indirect_faq=has_indirect_faq,
            has_direct_answer_block=has_direct_answer_block,
            has_structured_data=has_structured_data,
            schema_types=tuple(schema_types),
            has_pricing=has_pricing,
            has_about=has_about,
            has_contact_signals=bool(contact_evidence),
            contact_evidence=tuple(contact_evidence),
            evidence=evidence,
        )

    def _extract_title(self, soup: BeautifulSoup) -> str | None:
        if soup.title:
            title = collapse_whitespace(soup.title.get_text())
            return title or None
        return None

    def _extract_meta_description(self, soup: BeautifulSoup) -> str | None:
        meta = soup.find("meta", attrs={"name": lambda v: v and v.lower() == "description"})
        if meta and meta.get("content"):
            content = collapse_whitespace(meta["content"])
            return content or None
        return None

    def _extract_canonical(self, soup: BeautifulSoup) -> str | None:
        for link in soup.find_all("link", href=True):
            rel = link.get("rel") or []
            if isinstance(rel, str):
                rel = [rel]
            if any(r.lower() == "canonical" for r in rel):
                return link["href"].strip() or None
        return None

    def _heading_texts(self, soup: BeautifulSoup, level: str) -> list[str]:
        texts = []
        for heading in soup.find_all(level):
            text = collapse_whitespace(heading.get_text(" "))
            if text:
                texts.append(text)
        return texts

    def _links(self, soup: BeautifulSoup) -> list[tuple[str, str]]:
        links = []
        for anchor in soup.find_all("a", href=True):
            href = anchor["href"].strip()
            if not href:
                continue
            links.append((href, collapse_whitespace(anchor.get_text(" "))))
        return links

    def _detect_explicit_faq(self, soup: BeautifulSoup, h2s: list[str], h3s: list[str]) -> bool:
        if any(patterns.is_faq_heading(h) for h in (*h2s, *h3s)):
            return True
        if soup.find("section", id=patterns.FAQ_SECTION_ID_RE):
            return True
        return soup.find("div", class_=patterns.is_faq_container_class) is not None

    def _indirect_faq_links(self, links: list[tuple[str, str]]) -> list[str]:
        matches = []
        for href, _text in links:
            if patterns.is_indirect_faq_href(href):
                matches.append(href)
            if len(matches) >= self.indirect_faq_link_limit:
                break
        return uniq_strings(matches)[: self.indirect_faq_link_limit]

    def _detect_definition(self, text: str, brand: str) -> _DefinitionMatch:
        """Definition-like sentences near the top of the page."""
        snippets: list[str] = []
        if not text:
            return _DefinitionMatch(hit=False, snippets=snippets)

        if brand and len(brand) >= 2:
            definition_re, what_is_re = patterns.brand_definition_patterns(brand)
            for pattern in (definition_re, what_is_re):
                match = pattern.search(text)
                if match:
                    snippets.append(extract_context(text, match.start(), DEFINITION_CONTEXT_CHARS))

        generic = patterns.GENERIC_DEFINITION_RE.search(text)
        if generic:
            snippets.append(extract_context(text, generic.start(), DEFINITION_CONTEXT_CHARS))

        unique = uniq_strings(snippets)
        return _DefinitionMatch(hit=bool(unique), snippets=unique[:MAX_EVIDENCE_SNIPPETS])

    def _schema_types(self, scripts: list) -> list[str]:
        types: list[str] = []
        for script in scripts:
            raw = script.get_text().strip()
            if not raw:
                continue
            try:
                data = json.loads(raw)
            except (json.JSONDecodeError, TypeError) as e:
                # Presence still counts; only the types are lost
                logger.debug("jsonld_parse_failed", error=str(e))
                continue
            _collect_schema_types(data, types)
        return list(dict.fromkeys(types))

    def _schema_raw_sample(self, scripts: list) -> str | None:
        if not scripts:
            return None
        raw = collapse_whitespace(scripts[0].get_text())
        return raw[:SCHEMA_SAMPLE_MAX_CHARS] or None

    def _pricing_evidence(self, visible_text: str) -> list[str]:
        cleaned = clean_evidence_text(visible_text)
        match = patterns.find_pricing(cleaned)
        if match:
            return [
                sanitize_short(
                    extract_context(cleaned, match.start(), PRICING_CONTEXT_CHARS),
                    SNIPPET_MAX_CHARS,
                )
            ]
        # The only match sat on a line the evidence cleaner dropped
        return ["Pricing detected"]

    def _contact_evidence(self, links: list[tuple[str, str]], visible_text: str) -> list[str]:
        evidence = []
        hrefs = [href for href, _ in links]
        if any(href.lower().startswith("mailto:") for href in hrefs):
            evidence.append("mailto link")
        if patterns.contains_email(visible_text) or any(
            patterns.contains_email(href) for href in hrefs
        ):
            evidence.append("email found")
        if any(patterns.is_contact_link(href, text) for href, text in links):
            evidence.append("support/contact link")
        if patterns.contains_phone_like(collapse_whitespace(visible_text)):
            evidence.append("phone-like pattern")
        return evidence


def extract_signals(html: str, url: str) -> ExtractedSignals:
    """Convenience function to extract signals from one snapshot."""
    extractor = SignalExtractor()
    return extractor.extract(html, url)
