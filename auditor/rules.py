from dataclasses import dataclass
from typing import Callable, Union

from .models import PageSignals

SLOW_RESPONSE_MS = 3000
SLUGGISH_RESPONSE_MS = 1000
LARGE_PAGE_KB = 2048
MIN_WORDS = 300
MAX_WORDS = 5000
STALE_YEARS = 2


@dataclass(frozen=True)
class Rule:
    """
    One row of the scoring table. `predicate` decides whether the rule fires;
    `points` (int or callable) is subtracted from `category`; `message` (str or
    callable) becomes the issue text. Negative points reward a positive signal.
    """
    id: str
    category: str
    severity: str
    points: Union[int, Callable[[PageSignals], int]]
    message: Union[str, Callable[[PageSignals], str]]
    predicate: Callable[[PageSignals], bool]

    def points_for(self, s: PageSignals) -> int:
        return self.points(s) if callable(self.points) else self.points

    def message_for(self, s: PageSignals) -> str:
        return self.message(s) if callable(self.message) else self.message


# --- signal helpers ---

def _len(value) -> int:
    return len(value.strip()) if value else 0


def _https(s: PageSignals) -> bool:
    return s.is_https or bool(s.url_analysis and s.url_analysis.is_https)


def _og_missing(s: PageSignals) -> list[str]:
    return [name for name, value in (("og:title", s.og_title), ("og:description", s.og_description), ("og:image", s.og_image)) if not value]


def _has_canonical(s: PageSignals) -> bool:
    return bool(s.canonical_url)


def _url_issues(s: PageSignals) -> list[str]:
    # HTTPS has its own rule
    if not s.url_analysis:
        return []
    return [i for i in s.url_analysis.issues if "HTTPS" not in i]


def _density(s: PageSignals, status: str) -> list[str]:
    return [d.keyword for d in s.keyword_density if d.status == status]


def _not_placed(s: PageSignals, attr: str) -> list[str]:
    return [p.keyword for p in s.keyword_placement if not getattr(p, attr)]


def _quoted(keywords: list[str]) -> str:
    return ", ".join(f'"{k}"' for k in keywords)


# --- rule table ---
# Issues are reported in this order; within a category, more important rules first.

RULES: tuple[Rule, ...] = (
    # metaTags
    Rule("title_missing", "metaTags", "high", 25,
         "Missing <title> tag",
         lambda s: not _len(s.title)),
    Rule("title_too_short", "metaTags", "medium", 15,
         lambda s: f"Title is too short ({_len(s.title)} chars, aim for 30-60)",
         lambda s: 0 < _len(s.title) < 30),
    Rule("title_too_long", "metaTags", "medium", 8,
         lambda s: f"Title is too long ({_len(s.title)} chars, may be truncated past 60)",
         lambda s: _len(s.title) > 60),
    Rule("title_duplicate_tags", "metaTags", "medium", 10,
         lambda s: f"Page has {s.title_count} <title> tags",
         lambda s: s.title_count > 1),
    Rule("description_missing", "metaTags", "high", 25,
         "Missing meta description",
         lambda s: not _len(s.meta_description)),
    Rule("description_too_short", "metaTags", "medium", 10,
         lambda s: f"Meta description is too short ({_len(s.meta_description)} chars, aim for 70-160)",
         lambda s: 0 < _len(s.meta_description) < 70),
    Rule("description_too_long", "metaTags", "low", 5,
         lambda s: f"Meta description is too long ({_len(s.meta_description)} chars, may be truncated past 160)",
         lambda s: _len(s.meta_description) > 160),
    Rule("description_duplicate_tags", "metaTags", "medium", 10,
         lambda s: f"Page has {s.meta_description_count} meta description tags",
         lambda s: s.meta_description_count > 1),
    Rule("h1_missing", "metaTags", "high", 20,
         "Missing H1 heading",
         lambda s: s.h1_count == 0),
    Rule("h1_multiple", "metaTags", "medium", 10,
         lambda s: f"Page has {s.h1_count} H1 headings (use exactly one)",
         lambda s: s.h1_count > 1),
    Rule("title_equals_description", "metaTags", "medium", 5,
         "Title and meta description are identical",
         lambda s: s.title_equals_description),
    Rule("title_equals_h1", "metaTags", "low", 2,
         "Title and H1 are identical; vary them to cover more queries",
         lambda s: s.title_equals_h1),
    Rule("canonical_missing", "metaTags", "medium", 8,
         "No canonical URL declared",
         lambda s: not _has_canonical(s)),
    Rule("canonical_multiple", "metaTags", "high", 10,
         lambda s: f"Page declares {s.canonical_count} canonical URLs",
         lambda s: _has_canonical(s) and s.canonical_count > 1),
    Rule("canonical_outside_head", "metaTags", "medium", 8,
         "Canonical link is outside <head> and will be ignored",
         lambda s: _has_canonical(s) and s.canonical_outside_head),
    Rule("canonical_relative", "metaTags", "low", 4,
         "Canonical URL is relative; use an absolute URL",
         lambda s: _has_canonical(s) and s.canonical_is_relative),
    Rule("canonical_protocol_mismatch", "metaTags", "medium", 8,
         "Canonical URL protocol differs from the page's",
         lambda s: _has_canonical(s) and s.canonical_protocol_mismatch),
    Rule("canonical_fragment", "metaTags", "low", 4,
         "Canonical URL contains a #fragment",
         lambda s: _has_canonical(s) and s.canonical_has_fragment),
    Rule("canonical_query_string", "metaTags", "low", 3,
         "Canonical URL contains a query string",
         lambda s: _has_canonical(s) and s.canonical_has_query_string),
    Rule("canonical_og_url_mismatch", "metaTags", "low", 3,
         "Canonical URL and og:url disagree",
         lambda s: _has_canonical(s) and s.canonical_og_url_mismatch),
    Rule("canonical_self", "metaTags", "info", -2,
         "Self-referencing canonical URL",
         lambda s: _has_canonical(s) and s.canonical_is_self),
    Rule("og_missing", "metaTags", "medium", 12,
         "No Open Graph tags (og:title, og:description, og:image)",
         lambda s: len(_og_missing(s)) == 3),
    Rule("og_incomplete", "metaTags", "low", 6,
         lambda s: f"Open Graph tags incomplete, missing: {', '.join(_og_missing(s))}",
         lambda s: 0 < len(_og_missing(s)) < 3),
    Rule("twitter_card_missing", "metaTags", "low", 5,
         "No twitter:card meta tag",
         lambda s: not s.twitter_card),

    # content
    Rule("content_empty", "content", "high", 55,
         "No readable body text found",
         lambda s: s.word_count == 0),
    Rule("content_thin", "content", "high", 25,
         lambda s: f"Thin content ({s.word_count} words, aim for {MIN_WORDS}+)",
         lambda s: 0 < s.word_count < MIN_WORDS),
    Rule("content_very_long", "content", "low", 3,
         lambda s: f"Very long page ({s.word_count} words); consider splitting it",
         lambda s: s.word_count > MAX_WORDS),
    Rule("lorem_ipsum", "content", "high", 20,
         "Placeholder lorem ipsum text found",
         lambda s: s.has_lorem_ipsum),
    Rule("no_subheadings", "content", "medium", 10,
         "No H2 subheadings to structure the content",
         lambda s: s.h2_count == 0),
    Rule("heading_skips", "content", "medium", 5,
         lambda s: f"Heading levels skip: {', '.join(s.heading_skips)}",
         lambda s: bool(s.heading_skips)),
    Rule("empty_headings", "content", "low", 4,
         lambda s: f"{s.empty_headings} empty heading(s)",
         lambda s: s.empty_headings > 0),
    Rule("all_caps_headings", "content", "low", 3,
         lambda s: f"{s.all_caps_headings} heading(s) written in ALL CAPS",
         lambda s: s.all_caps_headings > 0),
    Rule("headings_duplicate_h1", "content", "low", 3,
         lambda s: f"{s.headings_duplicating_h1} subheading(s) repeat the H1",
         lambda s: s.headings_duplicating_h1 > 0),
    Rule("readability_very_difficult", "content", "medium", 10,
         lambda s: f"Text is very hard to read (Flesch {s.readability.score})",
         lambda s: s.word_count >= 100 and s.readability.score < 30),
    Rule("readability_difficult", "content", "low", 5,
         lambda s: f"Text is fairly hard to read (Flesch {s.readability.score})",
         lambda s: s.word_count >= 100 and 30 <= s.readability.score < 50),
    Rule("long_sentences", "content", "low", 5,
         lambda s: f"{s.sentence_length_stats.long_percent}% of sentences are over 20 words",
         lambda s: s.sentence_length_stats.long_percent > 25),
    Rule("long_paragraphs", "content", "low", lambda s: min(9, 3 * s.long_paragraphs),
         lambda s: f"{s.long_paragraphs} paragraph(s) over 150 words",
         lambda s: s.long_paragraphs > 0),
    Rule("no_author", "content", "medium", 8,
         "No author attribution (meta author or author page link)",
         lambda s: not s.author_meta and not s.has_author_page_link),
    Rule("no_publish_date", "content", "low", 6,
         "No published date found",
         lambda s: not s.date_published),
    Rule("stale_content", "content", "low", 5,
         lambda s: f"Content last dated {s.content_freshness_years} years ago",
         lambda s: s.content_freshness_years is not None and s.content_freshness_years > STALE_YEARS),
    Rule("no_lists", "content", "low", 3,
         "Long text without any bulleted or numbered lists",
         lambda s: s.word_count >= 600 and not s.has_list_elements),
    Rule("low_text_ratio", "content", "low", 3,
         lambda s: f"Low text-to-HTML ratio ({s.code_to_text_ratio}%)",
         lambda s: s.word_count > 0 and s.code_to_text_ratio < 10),
    Rule("plaintext_emails", "content", "low", 3,
         lambda s: f"{len(s.plaintext_emails)} plain-text email address(es) exposed to scrapers",
         lambda s: bool(s.plaintext_emails)),
    Rule("faq_schema", "content", "info", -3,
         "FAQ schema present (eligible for FAQ rich results)",
         lambda s: s.has_faq_schema),

    # technical
    Rule("http_error", "technical", "high", 40,
         lambda s: f"Page returned HTTP {s.http_status_code}",
         lambda s: s.http_status_code >= 400),
    Rule("noindex", "technical", "high", 30,
         "Page is set to noindex and will not appear in search results",
         lambda s: s.is_noindex),
    Rule("nofollow", "technical", "medium", 10,
         "Page is set to nofollow; its links pass no equity",
         lambda s: s.is_nofollow),
    Rule("not_https", "technical", "high", 20,
         "Page is not served over HTTPS",
         lambda s: bool(s.url) and not _https(s)),
    Rule("mixed_content", "technical", "high", 15,
         lambda s: f"{len(s.mixed_content_items)} insecure http:// resource(s) on an HTTPS page",
         lambda s: s.has_mixed_content),
    Rule("aria_hidden_body", "technical", "high", 15,
         "aria-hidden=\"true\" on <body> hides the whole page from assistive technology",
         lambda s: s.aria_hidden_on_body),
    Rule("viewport_missing", "technical", "high", 15,
         "No viewport meta tag (page is not mobile-friendly)",
         lambda s: not s.viewport_meta),
    Rule("viewport_zoom_disabled", "technical", "medium", 5,
         "Viewport disables zooming",
         lambda s: bool(s.viewport_meta) and s.viewport_zoom_disabled),
    Rule("lang_missing", "technical", "medium", 10,
         "Missing lang attribute on <html>",
         lambda s: not s.lang_tag),
    Rule("lang_invalid", "technical", "low", 4,
         lambda s: f"Invalid lang attribute \"{s.lang_tag}\"",
         lambda s: bool(s.lang_tag) and s.html_lang_invalid),
    Rule("meta_refresh", "technical", "medium", 8,
         "Meta refresh redirect found; use a server-side redirect",
         lambda s: s.has_meta_refresh),
    Rule("duplicate_head_body", "technical", "medium", 5,
         "Document contains more than one <head> or <body> tag",
         lambda s: s.multiple_head_tags or s.multiple_body_tags),
    Rule("schema_missing", "technical", "medium", 10,
         "No structured data (JSON-LD or microdata)",
         lambda s: not s.schema_markup),
    Rule("schema_invalid", "technical", "medium", lambda s: min(10, 5 * s.json_ld_validity.invalid),
         lambda s: f"{s.json_ld_validity.invalid} JSON-LD block(s) failed to parse",
         lambda s: s.json_ld_validity.invalid > 0),
    Rule("schema_incomplete", "technical", "low", lambda s: min(10, 4 * len(s.schema_issues)),
         lambda s: "; ".join(s.schema_issues),
         lambda s: bool(s.schema_issues)),
    Rule("breadcrumb_schema", "technical", "info", -2,
         "Breadcrumb schema present",
         lambda s: s.has_breadcrumb_schema),
    Rule("charset_missing", "technical", "low", 5,
         "No character encoding declared",
         lambda s: not s.has_charset),
    Rule("charset_late", "technical", "low", 3,
         "Charset declared after the first 1024 bytes",
         lambda s: s.has_charset and s.charset_too_late),
    Rule("doctype_missing", "technical", "low", 5,
         "Missing <!DOCTYPE html>",
         lambda s: not s.has_doctype),
    Rule("favicon_missing", "technical", "low", 3,
         "No favicon link",
         lambda s: not s.has_favicon),
    Rule("url_structure", "technical", "medium", lambda s: min(15, 5 * len(_url_issues(s))),
         lambda s: "URL issues: " + "; ".join(_url_issues(s)),
         lambda s: bool(_url_issues(s))),
    Rule("url_depth", "technical", "low", 3,
         lambda s: f"URL is {s.url_depth} directories deep",
         lambda s: s.url_depth > 4),
    Rule("slow_response", "technical", "medium", 8,
         lambda s: f"Slow server response ({s.response_time_ms} ms)",
         lambda s: (s.response_time_ms or 0) > SLOW_RESPONSE_MS),
    Rule("sluggish_response", "technical", "low", 3,
         lambda s: f"Server response over 1s ({s.response_time_ms} ms)",
         lambda s: SLUGGISH_RESPONSE_MS < (s.response_time_ms or 0) <= SLOW_RESPONSE_MS),
    Rule("large_page", "technical", "medium", 5,
         lambda s: f"Large HTML document ({s.page_size_kb} KB)",
         lambda s: s.page_size_kb > LARGE_PAGE_KB),
    Rule("no_compression", "technical", "low", 3,
         "Response is not compressed (gzip/brotli)",
         lambda s: not s.has_compression),
    Rule("no_cache_control", "technical", "low", 2,
         "No Cache-Control header",
         lambda s: not s.cache_control),
    Rule("no_hsts", "technical", "low", 3,
         "Missing Strict-Transport-Security header",
         lambda s: _https(s) and not s.has_hsts),
    Rule("no_csp", "technical", "low", 3,
         "Missing Content-Security-Policy header",
         lambda s: not s.has_csp),
    Rule("no_x_frame_options", "technical", "low", 2,
         "Missing X-Frame-Options header",
         lambda s: not s.has_x_frame_options),
    Rule("no_x_content_type_options", "technical", "low", 2,
         "Missing X-Content-Type-Options: nosniff header",
         lambda s: not s.has_x_content_type_options),
    Rule("no_referrer_policy", "technical", "low", 1,
         "Missing Referrer-Policy header",
         lambda s: not s.has_referrer_policy),
    Rule("server_version_leak", "technical", "low", 2,
         lambda s: f"Server header reveals version: {s.server_header_leak}",
         lambda s: bool(s.server_header_leak)),
    Rule("x_powered_by", "technical", "low", 2,
         lambda s: f"X-Powered-By header reveals stack: {s.x_powered_by}",
         lambda s: bool(s.x_powered_by)),
    Rule("hreflang_invalid", "technical", "medium", 5,
         lambda s: f"Invalid hreflang code(s): {', '.join(s.invalid_hreflang_codes)}",
         lambda s: bool(s.invalid_hreflang_codes)),
    Rule("hreflang_no_x_default", "technical", "low", 2,
         "hreflang set without an x-default entry",
         lambda s: s.hreflang_missing_x_default),
    Rule("focusable_aria_hidden", "technical", "high", lambda s: min(10, 4 * s.focusable_aria_hidden),
         lambda s: f"{s.focusable_aria_hidden} focusable element(s) inside aria-hidden content",
         lambda s: s.focusable_aria_hidden > 0),
    Rule("form_labels", "technical", "medium", lambda s: min(10, 3 * s.form_without_labels),
         lambda s: f"{s.form_without_labels} form field(s) without a label",
         lambda s: s.form_without_labels > 0),
    Rule("empty_buttons", "technical", "medium", lambda s: min(8, 3 * s.empty_buttons),
         lambda s: f"{s.empty_buttons} button(s) without an accessible name",
         lambda s: s.empty_buttons > 0),
    Rule("duplicate_ids", "technical", "medium", lambda s: min(8, 2 * len(s.duplicate_ids)),
         lambda s: f"Duplicate id attribute(s): {', '.join(s.duplicate_ids[:5])}",
         lambda s: bool(s.duplicate_ids)),
    Rule("nested_interactive", "technical", "medium", 5,
         lambda s: f"{s.nested_interactive} interactive element(s) nested inside links or buttons",
         lambda s: s.nested_interactive > 0),
    Rule("plugin_elements", "technical", "medium", 5,
         "Page uses <object>/<embed>/<applet> plugins",
         lambda s: s.plugin_elements > 0),
    Rule("no_main_landmark", "technical", "low", 3,
         "No <main> landmark",
         lambda s: not s.has_main_landmark),
    Rule("duplicate_landmarks", "technical", "low", 2,
         "More than one top-level banner or contentinfo landmark",
         lambda s: s.duplicate_banner_landmark or s.duplicate_contentinfo_landmark),
    Rule("unlabelled_navs", "technical", "low", 2,
         "Multiple <nav> landmarks without distinguishing labels",
         lambda s: s.multiple_nav_without_label),
    Rule("tabindex_positive", "technical", "low", 3,
         lambda s: f"{s.tabindex_positive} element(s) with tabindex > 0",
         lambda s: s.tabindex_positive > 0),
    Rule("iframe_titles", "technical", "low", 3,
         lambda s: f"{s.iframes_without_title} iframe(s) without a title",
         lambda s: s.iframes_without_title > 0),
    Rule("invalid_aria_roles", "technical", "low", 3,
         lambda s: f"Invalid ARIA role(s): {', '.join(s.invalid_aria_roles)}",
         lambda s: bool(s.invalid_aria_roles)),
    Rule("deprecated_tags", "technical", "low", 3,
         lambda s: f"Deprecated HTML tags: {', '.join(s.deprecated_tags_found)}",
         lambda s: bool(s.deprecated_tags_found)),
    Rule("tables_without_headers", "technical", "low", 2,
         lambda s: f"{s.tables_without_headers} table(s) without header cells",
         lambda s: s.tables_without_headers > 0),
    Rule("autofocus", "technical", "low", 2,
         "autofocus moves focus unexpectedly on load",
         lambda s: s.autofocus_elements > 0),
    Rule("excessive_dom_depth", "technical", "low", 3,
         lambda s: f"DOM nested {s.max_dom_depth} levels deep",
         lambda s: s.excessive_dom_depth),

    # linksImages
    Rule("no_internal_links", "linksImages", "high", 25,
         "No internal links",
         lambda s: s.internal_links == 0),
    Rule("few_internal_links", "linksImages", "low", 5,
         lambda s: f"Only {s.internal_links} internal link(s); aim for 3+",
         lambda s: 0 < s.internal_links < 3),
    Rule("no_external_links", "linksImages", "low", 10,
         "No outbound links to external sources",
         lambda s: s.external_links == 0),
    Rule("images_missing_alt", "linksImages", "high", lambda s: min(15, 3 * s.images_missing_alt_attribute),
         lambda s: f"{s.images_missing_alt_attribute} image(s) missing an alt attribute",
         lambda s: s.images_missing_alt_attribute > 0),
    Rule("localhost_links", "linksImages", "high", 10,
         lambda s: f"{len(s.localhost_links)} link(s) point at localhost",
         lambda s: bool(s.localhost_links)),
    Rule("image_links_without_alt", "linksImages", "medium", lambda s: min(8, 4 * s.image_links_without_alt),
         lambda s: f"{s.image_links_without_alt} image link(s) with no alt text to describe the target",
         lambda s: s.image_links_without_alt > 0),
    # one combined rule so turning an empty anchor into a generic one never costs more
    Rule("weak_anchor_text", "linksImages", "medium",
         lambda s: min(12, 3 * s.empty_anchor_links + 2 * s.generic_link_count),
         lambda s: f"{s.empty_anchor_links} empty and {s.generic_link_count} generic (\"click here\") anchor text(s)",
         lambda s: s.empty_anchor_links > 0 or s.generic_link_count > 0),
    Rule("images_missing_dimensions", "linksImages", "medium", lambda s: min(10, 2 * s.images_missing_dimensions),
         lambda s: f"{s.images_missing_dimensions} image(s) without width/height (layout shift risk)",
         lambda s: s.images_missing_dimensions > 0),
    Rule("nested_anchors", "linksImages", "medium", 5,
         lambda s: f"{s.nested_anchor_tags} link(s) nested inside another link",
         lambda s: s.nested_anchor_tags > 0),
    Rule("file_protocol_links", "linksImages", "medium", 5,
         lambda s: f"{s.file_protocol_links} file:// link(s)",
         lambda s: s.file_protocol_links > 0),
    Rule("javascript_links", "linksImages", "low", lambda s: min(6, 2 * s.javascript_links),
         lambda s: f"{s.javascript_links} javascript: link(s) search engines cannot follow",
         lambda s: s.javascript_links > 0),
    Rule("unsafe_blank_links", "linksImages", "low", 3,
         lambda s: f"{s.unsafe_cross_origin_links} target=_blank link(s) without rel=noopener",
         lambda s: s.unsafe_cross_origin_links > 0),
    Rule("generic_image_filenames", "linksImages", "low", lambda s: min(6, 2 * s.image_filenames.generic),
         lambda s: f"{s.image_filenames.generic} image(s) with non-descriptive filenames",
         lambda s: s.image_filenames.generic > 0),
    Rule("legacy_image_formats", "linksImages", "low", 3,
         "No images use modern formats (WebP/AVIF)",
         lambda s: s.modern_image_ratio == 0 and s.legacy_formats >= 3),
    Rule("no_lazy_loading", "linksImages", "low", 2,
         "No images are lazy-loaded",
         lambda s: s.image_count >= 5 and s.lazy_loaded_images == 0),
    Rule("empty_hrefs", "linksImages", "low", 2,
         lambda s: f"{s.empty_href_links + s.links_missing_href} link(s) with an empty or missing href",
         lambda s: s.empty_href_links + s.links_missing_href > 0),
    Rule("hash_only_links", "linksImages", "low", 2,
         lambda s: f"{s.hash_only_anchors} link(s) pointing at \"#\"",
         lambda s: s.hash_only_anchors > 0),
    Rule("too_many_links", "linksImages", "low", 3,
         lambda s: f"{s.total_links} links on one page",
         lambda s: s.total_links > 300),
    Rule("empty_alt", "linksImages", "info", 0,
         lambda s: f"{s.images_empty_alt} image(s) with empty alt (fine only for decorative images)",
         lambda s: s.images_empty_alt > 0),
    Rule("long_alt", "linksImages", "info", 0,
         lambda s: f"{s.long_alt_texts} alt text(s) over 125 characters",
         lambda s: s.long_alt_texts > 0),

    # keywords
    Rule("no_keywords", "keywords", "medium", 15,
         lambda s: "No target keywords supplied" + (f"; page topics suggest: {', '.join(s.topics[:5])}" if s.topics else ""),
         lambda s: not s.keywords),
    Rule("keyword_stuffing", "keywords", "high", 25,
         lambda s: f"Keyword stuffing: {_quoted(_density(s, 'stuffing'))} above 3% density",
         lambda s: bool(_density(s, "stuffing"))),
    Rule("keyword_absent", "keywords", "high", 20,
         lambda s: f"Keyword(s) never used in the body: {_quoted(_density(s, 'missing'))}",
         lambda s: bool(_density(s, "missing"))),
    Rule("keyword_not_in_title", "keywords", "medium", 15,
         lambda s: f"Keyword(s) missing from the title: {_quoted(_not_placed(s, 'in_title'))}",
         lambda s: bool(_not_placed(s, "in_title"))),
    Rule("keyword_not_in_h1", "keywords", "medium", 10,
         lambda s: f"Keyword(s) missing from the H1: {_quoted(_not_placed(s, 'in_h1'))}",
         lambda s: bool(_not_placed(s, "in_h1"))),
    Rule("keyword_not_in_intro", "keywords", "medium", 8,
         lambda s: f"Keyword(s) missing from the first 100 words: {_quoted(_not_placed(s, 'in_first_100_words'))}",
         lambda s: bool(_not_placed(s, "in_first_100_words"))),
    Rule("keyword_not_in_description", "keywords", "low", 8,
         lambda s: f"Keyword(s) missing from the meta description: {_quoted(_not_placed(s, 'in_meta_description'))}",
         lambda s: bool(_not_placed(s, "in_meta_description"))),
    Rule("keyword_low_density", "keywords", "low", 5,
         lambda s: f"Low keyword density (under 0.5%): {_quoted(_density(s, 'low'))}",
         lambda s: bool(_density(s, "low"))),
    Rule("keyword_not_in_url", "keywords", "low", 5,
         lambda s: f"Keyword(s) missing from the URL: {_quoted(_not_placed(s, 'in_url'))}",
         lambda s: bool(_not_placed(s, "in_url"))),
    Rule("keyword_not_in_subheadings", "keywords", "low", 5,
         lambda s: f"Keyword(s) missing from subheadings: {_quoted(_not_placed(s, 'in_subheadings'))}",
         lambda s: bool(_not_placed(s, "in_subheadings"))),
    Rule("keyword_not_in_alt", "keywords", "low", 3,
         "No image alt text mentions a target keyword",
         lambda s: bool(s.keywords) and s.images_with_alt > 0 and not s.keyword_in_alt_text),
    Rule("meta_keywords_tag", "keywords", "info", 0,
         "meta keywords tag is ignored by search engines",
         lambda s: bool(s.meta_keywords)),
)
