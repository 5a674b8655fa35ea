import os

# the API tests share one app instance; keep the limiter out of their way
os.environ.setdefault("RATE_LIMIT_REQUESTS", "10000")

import pytest


GOOD_URL = "https://example.com/blog/coffee-brewing-guide"

GOOD_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>Coffee Brewing Guide: How to Make Better Coffee at Home</title>
    <meta name="description" content="Learn coffee brewing at home with this practical guide covering grind size, water temperature, ratios and the best methods for a rich, balanced cup.">
    <meta name="author" content="Jane Barista">
    <meta property="article:published_time" content="2026-09-01T08:00:00Z">
    <link rel="canonical" href="https://example.com/blog/coffee-brewing-guide">
    <link rel="icon" href="/favicon.ico">
    <meta property="og:title" content="The Complete Coffee Brewing Guide">
    <meta property="og:description" content="Grind, water, ratios and methods for better coffee at home.">
    <meta property="og:image" content="https://example.com/images/pour-over-coffee.webp">
    <meta property="og:type" content="article">
    <meta property="og:url" content="https://example.com/blog/coffee-brewing-guide">
    <meta name="twitter:card" content="summary_large_image">
    <script type="application/ld+json">
    {
        "@context": "https://schema.org",
        "@type": "Article",
        "headline": "The Complete Coffee Brewing Guide",
        "author": {"@type": "Person", "name": "Jane Barista"},
        "datePublished": "2026-09-01",
        "image": "https://example.com/images/pour-over-coffee.webp",
        "publisher": {"@type": "Organization", "name": "Example Coffee"}
    }
    </script>
</head>
<body>
<header>
    <nav aria-label="Main">
        <a href="/">Home</a>
        <a href="/blog/">Blog</a>
        <a href="/about/">About the author</a>
    </nav>
</header>
<main>
    <article>
        <h1>The Complete Coffee Brewing Guide</h1>
        <p>Coffee brewing at home is easier than most people think. You need fresh beans, clean water and a little patience.
        This guide walks you through each step. We keep the advice simple and practical. By the end you will know how
        to make a rich cup every morning. You will also learn which small changes make the biggest difference.</p>
        <img src="https://example.com/images/pour-over-coffee.webp" alt="Pour-over coffee brewing setup on a wooden table" width="800" height="533">

        <h2>Choosing Beans for Coffee Brewing</h2>
        <p>Start with whole beans from a local roaster. Look for a roast date on the bag. Beans taste best within a few
        weeks of roasting. Buy small bags so they stay fresh. Store them in a sealed jar away from light and heat.
        Grind them just before you brew. Ground coffee loses its aroma within hours. A burr grinder gives a more even
        grind than a blade grinder.</p>

        <h2>Water and Temperature</h2>
        <p>Good coffee is mostly water, so the water matters. Use filtered water if your tap water tastes of chlorine.
        Heat it to just below boiling. A simple rule is to let the kettle rest for thirty seconds after it boils.
        Water that is too hot can make the cup bitter. Water that is too cool leaves it sour and thin.</p>

        <h2>Ratios and Grind Size</h2>
        <p>Most people brew with one gram of coffee for every sixteen grams of water. A kitchen scale makes this easy
        to repeat. Use a medium grind for drip machines and a coarse grind for a French press. Use a fine grind for
        espresso. If the cup tastes weak, grind a little finer. If it tastes harsh, grind a little coarser. Small steps
        help you find the sweet spot. Our <a href="/blog/espresso-basics">espresso basics guide</a> covers the finer end.</p>
        <ul>
            <li>Fresh whole beans</li>
            <li>A burr grinder</li>
            <li>A kitchen scale</li>
            <li>Filtered water</li>
        </ul>

        <h2>Simple Coffee Brewing Methods</h2>
        <p>Pour-over, French press and drip machines all make a great cup. Pour-over gives a clean and bright flavor.
        A French press gives a heavier body. Drip machines are best when you brew for a crowd. Try each method once
        and keep notes. Good coffee brewing is a habit you build over time. Enjoy the process and share a cup with a
        friend. The <a href="https://sca.coffee/research">Specialty Coffee Association research</a> has more detail.</p>

        <h2>Cleaning Your Gear</h2>
        <p>Clean your grinder and brewer once a week. Old oils build up and spoil the taste. Rinse the carafe with hot
        water after each use. Descale your kettle every month if you live in a hard water area. Clean gear keeps every
        cup tasting fresh.</p>
    </article>
</main>
<footer>
    <p>Example Coffee, brewing notes since 2015.</p>
</footer>
</body>
</html>
"""

GOOD_HEADERS = {
    "Content-Type": "text/html; charset=utf-8",
    "Content-Encoding": "gzip",
    "Cache-Control": "max-age=600",
    "Strict-Transport-Security": "max-age=31536000",
    "Content-Security-Policy": "default-src 'self'",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

TITLE_ONLY_HTML = "<html><head><title>T</title></head><body></body></html>"


@pytest.fixture
def good_page():
    return GOOD_HTML, GOOD_URL, dict(GOOD_HEADERS)


@pytest.fixture
def title_only_html():
    return TITLE_ONLY_HTML
