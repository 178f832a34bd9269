"""HTML snapshots and cold-summary transcripts shared by the test suite."""

FILLER_PARAGRAPH = (
    "<p>Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod tempor "
    "incididunt ut labore et dolore magna aliqua.</p>\n"
)


def with_filler(html: str, paragraphs: int = 180) -> str:
    """Pad a page with neutral body copy so it clears the snapshot quality gate."""
    return html.replace("</body>", FILLER_PARAGRAPH * paragraphs + "</body>")


# Title, one descriptive H1, an FAQ heading, an About link and a mailto link.
# No meta description, no structured data, no pricing.
ACME_HOMEPAGE = """
<html>
<head><title>Acme Payroll</title></head>
<body>
    <nav>
        <a href="/about">About</a>
        <a href="mailto:hello@acme.com">Email us</a>
    </nav>
    <h1>Payroll for startups</h1>
    <h2>FAQ</h2>
    <p>Run payroll in minutes.</p>
</body>
</html>
"""

ACME_PRICING_PAGE = """
<html>
<head><title>Acme Payroll pricing</title></head>
<body>
    <h1>Simple payroll pricing</h1>
    <p>Plans start at $49/month.</p>
</body>
</html>
"""

ACME_HOMEPAGE_WITH_PRICING = ACME_HOMEPAGE.replace(
    "<p>Run payroll in minutes.</p>",
    "<p>Run payroll in minutes.</p>\n    <p>Plans start at $49/month.</p>",
)

BRIGHTSIDE_HOMEPAGE = """
<html>
<head>
    <title>Brightside | Expense management for remote teams</title>
    <meta name="description" content="Brightside tracks receipts and reimbursements for
        distributed companies.">
    <link rel="canonical" href="https://brightside.io/">
    <script type="application/ld+json">
    {"@context": "https://schema.org", "@graph": [
        {"@type": "Organization", "name": "Brightside"},
        {"@type": "WebSite", "url": "https://brightside.io"}
    ]}
    </script>
</head>
<body>
    <header>
        <a href="/company">Company</a>
        <a href="/contact">Contact</a>
    </header>
    <h1>Expense management for remote teams</h1>
    <h2>How it works</h2>
    <ol><li>Snap a receipt</li><li>Approve in one click</li></ol>
    <h2>Pricing and plans</h2>
    <p>Starter is $12/month per seat.</p>
    <h2>Frequently asked questions</h2>
    <h3>Who is Brightside for?</h3>
    <h2>Integrations for finance teams</h2>
</body>
</html>
"""

DEFINITION_ONLY_HOMEPAGE = """
<html>
<head><title>Ledgerly</title></head>
<body>
    <h1>Bookkeeping without the busywork</h1>
    <p>Ledgerly is a bookkeeping service for freelancers.</p>
    <a href="/help/getting-started">Help center</a>
</body>
</html>
"""

INDIRECT_FAQ_HOMEPAGE = """
<html>
<head><title>Orbit</title></head>
<body>
    <h1>Orbit</h1>
    <a href="/docs/quickstart">Docs</a>
    <a href="/docs/quickstart">Read the docs</a>
</body>
</html>
"""

BARE_PAGE = "<html><body><p>Hello</p></body></html>"

JS_SHELL_PAGE = """
<html>
<head><title>App</title></head>
<body>
    <div id="root"></div>
    <script src="/static/js/main.chunk.js"></script>
</body>
</html>
"""


CLEAR_RESPONSE = """\
1) Category/Type: Payroll software
2) Who it is for: Early-stage startups
3) What problem it solves: Running payroll without an accountant
4) What it offers: Automated payroll and tax filing
5) 1-sentence plain summary: Acme runs payroll for startups.
"""

HEDGED_RESPONSE = """\
1) Category/Type: Payroll software
2) Who it is for: Early-stage startups
3) What problem it solves: Running payroll without an accountant
4) What it offers: It appears to offer payroll tools
5) 1-sentence plain summary: Acme runs payroll for startups.
"""

PARTIAL_RESPONSE = """\
1) Category/Type: Payroll software
2) Who it is for: Unknown
3) What problem it solves: Unknown
4) What it offers: Payroll tools
5) 1-sentence plain summary: Acme runs payroll.
"""

UNCLEAR_RESPONSE = """\
1) Category/Type: Unknown
2) Who it is for: Unknown
3) What problem it solves: Unknown
4) What it offers: Unknown
5) 1-sentence plain summary: A website called Acme.
6) Why uncertain: The domain name alone is ambiguous.
"""

BROWSING_REFUSAL_RESPONSE = (
    "I'm sorry, but I can't browse the internet, so I cannot tell what this site is."
)

UNKNOWN_WITH_ACCESS_REASON_RESPONSE = """\
1) Category/Type: Unknown
2) Who it is for: Unknown
3) What problem it solves: Unknown
4) What it offers: Unknown
5) 1-sentence plain summary: Unknown
6) Why uncertain: The model cannot access the page.
"""

MARKDOWN_RESPONSE = """\
**1. Category/Type:** Payroll software
- **Who it is for:** Startups
2) What problem it solves: "Unknown"
* What it offers: Unknown.
5) 1-sentence plain summary: Acme runs payroll.
"""
