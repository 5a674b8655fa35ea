import math
import re
import logging
from datetime import datetime, timezone
from typing import Callable, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from . import keywords as kw
from .accessibility import extract_accessibility
from .headers import extract_header_signals, extract_mixed_content, normalise_headers
from .links import extract_images, extract_links
from .models import PageSignals
from .parser import (
    clean_text,
    count_meta,
    element_text,
    find_links,
    get_meta,
    load,
    paragraphs,
    visible_text,
)
from .readability import compute_readability, sentence_length_stats
from .schema import extract_structured_data
from .scorer import round_half_up
from .url_analysis import analyze_url, url_depth

logger = logging.getLogger(__name__)

WORDS_PER_MINUTE = 238
LONG_PARAGRAPH_WORDS = 150
FIRST_WORDS = 200
CHARSET_WINDOW_BYTES = 1024

_DOCTYPE_RE = re.compile(r"^\s*(?:<!--.*?-->\s*)*<!doctype\s+html", re.IGNORECASE | re.DOTALL)
_HEAD_OPEN_RE = re.compile(r"<head[\s>]", re.IGNORECASE)
_BODY_OPEN_RE = re.compile(r"<body[\s>]", re.IGNORECASE)
_CHARSET_RE = re.compile(r"<meta[^>]+charset\s*=", re.IGNORECASE)
_LANG_RE = re.compile(r"^[a-z]{2,3}(-[a-z0-9]{2,8})*$", re.IGNORECASE)
_HREFLANG_RE = re.compile(r"^(x-default|[a-z]{2,3}(-[a-z]{4})?(-([a-z]{2}|\d{3}))?)$", re.IGNORECASE)
_MAX_SCALE_RE = re.compile(r"maximum-scale\s*=\s*([\d.]+)", re.IGNORECASE)
_NO_ZOOM_RE = re.compile(r"user-scalable\s*=\s*(no|0)", re.IGNORECASE)
_QUESTION_RE = re.compile(r"^(how|what|why|when|where|who|which|is|are|can|do|does|did|will|should|would)\b", re.IGNORECASE)
_FAQ_RE = re.compile(r"\bfaq\b|frequently asked", re.IGNORECASE)
_EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_LOREM_RE = re.compile(r"lorem ipsum", re.IGNORECASE)


def _directives(*values: Optional[str]) -> set[str]:
    found = set()
    for value in values:
        for part in (value or "").lower().replace(";", ",").split(","):
            # X-Robots-Tag may be prefixed with a user agent ("googlebot: noindex")
            found.add(part.split(":")[-1].strip())
    return found


def _same_text(a: Optional[str], b: Optional[str]) -> bool:
    return bool(a) and bool(b) and a.strip().lower() == b.strip().lower()


def _freshness_years(date_value: Optional[str]) -> Optional[float]:
    if not date_value:
        return None
    try:
        parsed = datetime.fromisoformat(date_value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return round((datetime.now(timezone.utc) - parsed).days / 365.25, 1)


def extract_head(soup: BeautifulSoup, html: str, final_url: str, headers) -> dict:
    """Title, meta description, canonical, social tags, robots and document basics."""
    titles = soup.find_all("title")
    title = clean_text(titles[0].get_text()) if titles else None
    description = get_meta(soup, name="description")

    canonicals = find_links(soup, "canonical")
    canonical_url = (canonicals[0].get("href") or "").strip() or None if canonicals else None
    og_url = get_meta(soup, prop="og:url")

    canonical = {}
    if canonical_url:
        page = urlparse(final_url)
        target = urlparse(canonical_url)
        absolute = bool(target.scheme and target.netloc)
        canonical = {
            "canonical_outside_head": any(c.find_parent("head") is None for c in canonicals),
            "canonical_is_relative": not absolute,
            "canonical_protocol_mismatch": absolute and target.scheme.lower() != page.scheme.lower(),
            "canonical_has_fragment": bool(target.fragment),
            "canonical_has_query_string": bool(target.query),
            "canonical_is_self": absolute and target._replace(fragment="").geturl().rstrip("/") == page._replace(fragment="").geturl().rstrip("/"),
            "canonical_og_url_mismatch": bool(og_url) and og_url.rstrip("/") != canonical_url.rstrip("/"),
        }

    robots_meta = get_meta(soup, name="robots")
    googlebot_meta = get_meta(soup, name="googlebot")
    x_robots_tag = headers.get("x-robots-tag")
    directives = _directives(robots_meta, googlebot_meta, x_robots_tag)

    viewport = get_meta(soup, name="viewport")
    zoom_disabled = False
    if viewport:
        max_scale = _MAX_SCALE_RE.search(viewport)
        try:
            zoom_disabled = bool(_NO_ZOOM_RE.search(viewport)) or (max_scale is not None and float(max_scale.group(1)) < 2)
        except ValueError:
            zoom_disabled = bool(_NO_ZOOM_RE.search(viewport))

    html_tag = soup.find("html")
    lang = (html_tag.get("lang") or "").strip() or None if html_tag else None

    charset_match = _CHARSET_RE.search(html or "")
    content_type = headers.get("content-type", "")
    has_charset = charset_match is not None or "charset=" in content_type.lower()
    charset_too_late = charset_match is not None and len(html[: charset_match.start()].encode("utf-8")) > CHARSET_WINDOW_BYTES

    hreflang_tags = [
        {"lang": (link.get("hreflang") or "").strip(), "href": (link.get("href") or "").strip()}
        for link in find_links(soup, "alternate") if link.get("hreflang")
    ]
    hreflang_codes = [t["lang"] for t in hreflang_tags]

    date_published = (
        get_meta(soup, prop="article:published_time")
        or get_meta(soup, name="date")
        or (soup.find("time", datetime=True) or {}).get("datetime")
    )
    date_modified = get_meta(soup, prop="article:modified_time") or get_meta(soup, name="last-modified")
    refresh = soup.find("meta", attrs={"http-equiv": lambda v: v and v.strip().lower() == "refresh"})

    return {
        "title": title,
        "title_count": len(titles),
        "meta_description": description,
        "meta_description_count": count_meta(soup, "description"),
        "meta_keywords": get_meta(soup, name="keywords"),
        "canonical_url": canonical_url,
        "canonical_count": len(canonicals),
        **canonical,
        "og_title": get_meta(soup, prop="og:title"),
        "og_description": get_meta(soup, prop="og:description"),
        "og_image": get_meta(soup, prop="og:image"),
        "og_type": get_meta(soup, prop="og:type"),
        "og_url": og_url,
        "og_site_name": get_meta(soup, prop="og:site_name"),
        "twitter_card": get_meta(soup, name="twitter:card"),
        "twitter_title": get_meta(soup, name="twitter:title"),
        "twitter_description": get_meta(soup, name="twitter:description"),
        "twitter_image": get_meta(soup, name="twitter:image"),
        "robots_meta": robots_meta,
        "googlebot_meta": googlebot_meta,
        "x_robots_tag": x_robots_tag,
        "is_noindex": "noindex" in directives or "none" in directives,
        "is_nofollow": "nofollow" in directives or "none" in directives,
        "has_charset": has_charset,
        "charset_too_late": charset_too_late,
        "has_doctype": bool(_DOCTYPE_RE.match(html or "")),
        "viewport_meta": viewport,
        "viewport_zoom_disabled": zoom_disabled,
        "lang_tag": lang,
        "html_lang_invalid": bool(lang) and not _LANG_RE.match(lang),
        "has_favicon": bool(find_links(soup, "icon")),
        "has_meta_refresh": refresh is not None,
        "multiple_head_tags": len(_HEAD_OPEN_RE.findall(html or "")) > 1,
        "multiple_body_tags": len(_BODY_OPEN_RE.findall(html or "")) > 1,
        "author_meta": get_meta(soup, name="author"),
        "date_published": date_published,
        "date_modified": date_modified,
        "content_freshness_years": _freshness_years(date_modified or date_published),
        "hreflang_tags": hreflang_tags,
        "invalid_hreflang_codes": [c for c in hreflang_codes if not _HREFLANG_RE.match(c)],
        "hreflang_missing_x_default": bool(hreflang_codes) and "x-default" not in {c.lower() for c in hreflang_codes},
        "has_pagination_rel": bool(find_links(soup, "next") or find_links(soup, "prev")),
    }


def extract_headings(soup: BeautifulSoup) -> dict:
    """Document-order heading outline plus the structural faults found in it."""
    hierarchy = []
    for tag in soup.find_all(["h1", "h2", "h3", "h4", "h5", "h6"]):
        hierarchy.append({"level": int(tag.name[1]), "text": element_text(tag)[:150]})

    skips = []
    for prev, cur in zip(hierarchy, hierarchy[1:]):
        if cur["level"] > prev["level"] + 1:
            skip = f"H{prev['level']}→H{cur['level']}"
            if skip not in skips:
                skips.append(skip)

    h1_texts = [h["text"] for h in hierarchy if h["level"] == 1]
    h1 = next((t for t in h1_texts if t), None)
    texts = [h["text"] for h in hierarchy if h["text"]]

    return {
        "h1": h1,
        "h1_count": len(h1_texts),
        "h2_count": sum(1 for h in hierarchy if h["level"] == 2),
        "h3_count": sum(1 for h in hierarchy if h["level"] == 3),
        "h4_count": sum(1 for h in hierarchy if h["level"] == 4),
        "heading_hierarchy": hierarchy,
        "heading_skips": skips,
        "empty_headings": sum(1 for h in hierarchy if not h["text"]),
        # single short words ("FAQ", "USA") are not shouting
        "all_caps_headings": sum(1 for t in texts if t.isupper() and len(re.sub(r"[^A-Za-z]", "", t)) > 4),
        "headings_duplicating_h1": sum(1 for h in hierarchy if h["level"] > 1 and _same_text(h["text"], h1)),
        "question_heading_count": sum(1 for t in texts if _QUESTION_RE.match(t)),
    }


def _has_table_of_contents(soup: BeautifulSoup) -> bool:
    for container in soup.find_all(["nav", "ul", "ol"]):
        in_page = [a for a in container.find_all("a") if (a.get("href") or "").startswith("#") and len(a["href"]) > 1]
        if len(in_page) >= 3:
            return True
    return False


def extract_content(soup: BeautifulSoup, html: str, body_text: str) -> dict:
    words = body_text.split()
    paras = paragraphs(soup)
    para_lengths = [len(p.split()) for p in paras]
    headings = [element_text(h) for h in soup.find_all(["h2", "h3"])]

    return {
        "word_count": len(words),
        "paragraph_count": len(paras),
        "avg_paragraph_length": round_half_up(sum(para_lengths) / len(para_lengths)) if para_lengths else 0,
        "long_paragraphs": sum(1 for n in para_lengths if n > LONG_PARAGRAPH_WORDS),
        "readability": compute_readability(body_text[:80000]).__dict__,
        "sentence_length_stats": sentence_length_stats(body_text[:80000]).__dict__,
        "reading_time_minutes": math.ceil(len(words) / WORDS_PER_MINUTE) if words else 0,
        "first_words": " ".join(words[:FIRST_WORDS]),
        "code_to_text_ratio": round_half_up(len(body_text) / len(html) * 100) if html else 0,
        "has_lorem_ipsum": bool(_LOREM_RE.search(body_text)),
        "plaintext_emails": sorted(set(_EMAIL_RE.findall(body_text)))[:20],
        "has_list_elements": soup.find(["ul", "ol"]) is not None,
        "has_faq_section": any(_FAQ_RE.search(h) for h in headings)
            or soup.find(attrs={"itemtype": lambda v: v and "FAQPage" in v}) is not None,
        "has_table_of_contents": _has_table_of_contents(soup),
    }


def extract_keywords(raw_keywords, fields: dict, body_text: str, final_url: str) -> dict:
    """Placement and density for the supplied keywords."""
    keywords = kw.parse_keywords(raw_keywords)
    subheadings = [h["text"] for h in fields.get("heading_hierarchy", []) if h["level"] > 1]
    word_count = fields.get("word_count", 0)

    return {
        "keywords": keywords,
        "keyword_density": [d.__dict__ for d in kw.keyword_density(keywords, body_text, word_count)],
        "keyword_placement": [
            p.__dict__ for p in kw.keyword_placement(
                keywords,
                title=fields.get("title") or "",
                meta_description=fields.get("meta_description") or "",
                h1=fields.get("h1") or "",
                url=final_url,
                first_words=fields.get("first_words", ""),
                subheadings=subheadings,
            )
        ],
        "keyword_in_alt_text": kw.keyword_in_alt_text(keywords, fields.get("alt_texts", [])),
    }


def extract_topics(fields: dict, body_text: str) -> dict:
    """TF-IDF topics of the page, suggested when no keywords were supplied."""
    corpus = kw.build_corpus(
        fields.get("title") or "",
        fields.get("meta_description") or "",
        [h["text"] for h in fields.get("heading_hierarchy", [])],
        body_text,
    )
    return {"topics": kw.extract_topics(corpus)}


def _guarded(family: str, fn: Callable[..., dict], *args) -> dict:
    """
    Run one extraction family. A family that blows up on hostile markup is
    logged and contributes nothing, so its fields keep their neutral defaults.
    """
    try:
        return fn(*args) or {}
    except Exception as exc:
        logger.warning("Signal extraction '%s' failed: %s", family, exc, exc_info=True)
        return {}


def extract_signals(
    html: str,
    final_url: str,
    response_headers=None,
    status_code: int = 200,
    fetch_duration_ms: Optional[int] = None,
    keywords=None,
) -> PageSignals:
    """
    Turn raw HTML plus its response metadata into a PageSignals record.
    Never raises on malformed input.
    """
    html = html or ""
    final_url = final_url or ""
    headers = normalise_headers(response_headers)

    try:
        soup = load(html)
    except Exception as exc:
        logger.warning("HTML parse failed for %s: %s", final_url, exc)
        soup = load("")

    body_text = _guarded("visible_text", lambda: {"text": visible_text(html)}).get("text", "")

    fields: dict = {
        "url": final_url,
        "http_status_code": status_code,
        "response_time_ms": fetch_duration_ms,
        "page_size_kb": round_half_up(len(html.encode("utf-8", errors="replace")) / 1024),
    }
    fields.update(_guarded("head", extract_head, soup, html, final_url, headers))
    fields.update(_guarded("headings", extract_headings, soup))
    fields.update(_guarded("content", extract_content, soup, html, body_text))
    fields.update(_guarded("links", extract_links, soup, final_url))
    fields.update(_guarded("images", extract_images, soup))
    fields.update(_guarded("structured_data", extract_structured_data, soup))
    fields.update(_guarded("headers", extract_header_signals, headers, final_url))
    fields.update(_guarded("mixed_content", extract_mixed_content, soup, final_url))
    fields.update(_guarded("accessibility", extract_accessibility, soup))
    fields.update(_guarded("url", lambda: {"url_analysis": analyze_url(final_url).__dict__, "url_depth": url_depth(final_url)}))

    # cross-field comparisons only need fields already gathered above
    fields["title_equals_h1"] = _same_text(fields.get("title"), fields.get("h1"))
    fields["title_equals_description"] = _same_text(fields.get("title"), fields.get("meta_description"))

    fields.update(_guarded("keywords", extract_keywords, keywords, fields, body_text, final_url))
    fields.update(_guarded("topics", extract_topics, fields, body_text))

    return PageSignals.from_dict(fields)
