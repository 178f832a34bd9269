"""Merge signals from several pages of the same site.

The homepage record stays the base. Presence flags from secondary pages
(pricing, FAQ, about, contact, structured data) are OR-ed in, and the
evidence notes which pages each signal was found on.
"""

from dataclasses import replace
from urllib.parse import urljoin, urlparse

import structlog

from defaultanswer.extraction.cleaner import parse_html
from defaultanswer.extraction.evidence import uniq_strings
from defaultanswer.extraction.signals import ExtractedSignals
from defaultanswer.extraction.url import extract_domain, url_path

logger = structlog.get_logger(__name__)

MERGED_SIGNALS = ("pricing", "faq", "about", "contact", "schema")

MAX_PAGES = 10

# Fallback paths, tried after links discovered on the homepage
COMMON_PATHS = (
    "/pricing",
    "/plans",
    "/purchase",
    "/subscribe",
    "/about",
    "/about-us",
    "/company",
    "/team",
    "/contact",
    "/contact-us",
    "/support",
    "/features",
    "/solutions",
    "/faq",
)
PAGE_KEYWORDS = (
    "pricing",
    "plans",
    "about",
    "contact",
    "support",
    "features",
    "solutions",
    "faq",
)
SKIPPED_HREF_PREFIXES = ("#", "javascript:", "mailto:")


def _page_name(signals: ExtractedSignals, is_homepage: bool) -> str:
    path = url_path(signals.url)
    return "homepage" if is_homepage or path == "/" else path


def merge_page_signals(pages: list[ExtractedSignals]) -> ExtractedSignals:
    """
    Merge per-page signals into one site-level record.

    Args:
        pages: Extracted signals, homepage first

    Returns:
        Homepage signals with flags and evidence widened by the other pages

    Raises:
        ValueError: If no pages are given
    """
    if not pages:
        raise ValueError("At least one page is required to merge signals")

    homepage = pages[0]
    sources: dict[str, list[str]] = {name: [] for name in MERGED_SIGNALS}
    contact_evidence = list(homepage.contact_evidence)
    schema_types = list(homepage.schema_types)

    for index, page in enumerate(pages):
        name = _page_name(page, is_homepage=index == 0)
        if page.has_pricing and name not in sources["pricing"]:
            sources["pricing"].append(name)
        if page.has_faq and name not in sources["faq"]:
            sources["faq"].append(name)
        if page.has_about and name not in sources["about"]:
            sources["about"].append(name)
        if page.has_contact_signals and name not in sources["contact"]:
            sources["contact"].append(name)
            contact_evidence.extend(page.contact_evidence)
        if page.has_structured_data and name not in sources["schema"]:
            sources["schema"].append(name)
            schema_types.extend(page.schema_types)

    evidence = homepage.evidence
    if sources["pricing"]:
        evidence = replace(
            evidence,
            pricing_evidence=(
                *evidence.pricing_evidence,
                f"Found on: {', '.join(sources['pricing'])}",
            ),
        )
    if sources["faq"]:
        evidence = replace(
            evidence,
            faq=replace(
                evidence.faq,
                explicit_faq_detected=True,
                indirect_faq_links=(
                    *evidence.faq.indirect_faq_links,
                    f"FAQ found on: {', '.join(sources['faq'])}",
                ),
            ),
        )
    if sources["contact"]:
        evidence = replace(
            evidence,
            contact_evidence=(
                *evidence.contact_evidence,
                f"Contact info found on: {', '.join(sources['contact'])}",
            ),
        )

    merged_schema_types = tuple(uniq_strings(schema_types))
    if sources["schema"]:
        evidence = replace(evidence, schema_types=merged_schema_types)

    merged = replace(
        homepage,
        has_pricing=bool(sources["pricing"]),
        has_faq=bool(sources["faq"]),
        has_about=bool(sources["about"]),
        has_contact_signals=bool(sources["contact"]),
        contact_evidence=tuple(uniq_strings(contact_evidence)),
        has_structured_data=bool(sources["schema"]),
        schema_types=merged_schema_types,
        evidence=evidence,
    )

    logger.info(
        "page_signals_merged",
        url=homepage.url,
        pages=len(pages),
        sources={name: found for name, found in sources.items() if found},
    )
    return merged


def find_pages_to_analyze(
    homepage_html: str, base_url: str, max_pages: int = MAX_PAGES
) -> list[str]:
    """
    Pick secondary pages worth fetching for a multi-page analysis.

    Same-site links from the homepage whose path or text mentions pricing,
    about, contact, FAQ or a similar topic come first, in page order.
    Common paths fill the remaining slots. One slot of max_pages is left
    for the homepage itself.

    Args:
        homepage_html: Homepage snapshot
        base_url: Homepage URL links are resolved against
        max_pages: Page budget including the homepage

    Returns:
        Absolute URLs in fetch order
    """
    parsed = urlparse(base_url)
    origin = f"{parsed.scheme}://{parsed.netloc}"
    domain = extract_domain(base_url)

    candidates: list[str] = []

    soup = parse_html(homepage_html or "")
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if not href or href.lower().startswith(SKIPPED_HREF_PREFIXES):
            continue
        absolute = urljoin(base_url, href)
        if extract_domain(absolute) != domain:
            continue
        path = url_path(absolute).lower()
        text = anchor.get_text(" ", strip=True).lower()
        if any(keyword in path or keyword in text for keyword in PAGE_KEYWORDS):
            candidates.append(absolute)

    candidates.extend(f"{origin}{path}" for path in COMMON_PATHS)

    pages = uniq_strings(candidates)[: max(0, max_pages - 1)]
    logger.debug("pages_selected", url=base_url, pages=len(pages))
    return pages
