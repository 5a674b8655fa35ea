from dataclasses import asdict, dataclass, field, fields, is_dataclass
from typing import Optional, Union, get_args, get_origin


# Scoring categories and their share of the overall score (must sum to 100)
CATEGORY_WEIGHTS: dict[str, int] = {
    "metaTags":    30,
    "content":     25,
    "technical":   20,
    "linksImages": 15,
    "keywords":    10,
}

SEVERITIES = ("high", "medium", "low", "info")


@dataclass
class Readability:
    score: int = 0
    grade: str = "N/A"
    avg_sentence_len: float = 0.0
    avg_word_len: float = 0.0           # syllables per word


@dataclass
class SentenceStats:
    total: int = 0
    avg_length: float = 0.0
    long_count: int = 0                 # sentences over 20 words
    long_percent: int = 0


@dataclass
class UrlAnalysis:
    slug: str = ""
    length: int = 0
    is_https: bool = False
    issues: list[str] = field(default_factory=list)
    score: int = 100


@dataclass
class HeadingEntry:
    level: int
    text: str


@dataclass
class ImageFilenames:
    total: int = 0
    descriptive: int = 0
    generic: int = 0
    details: list[dict] = field(default_factory=list)


@dataclass
class JsonLdValidity:
    count: int = 0
    valid: int = 0
    invalid: int = 0


@dataclass
class KeywordDensity:
    keyword: str
    count: int = 0
    density: float = 0.0
    status: str = "missing"             # missing | low | optimal | stuffing


@dataclass
class KeywordPlacement:
    keyword: str
    in_title: bool = False
    in_meta_description: bool = False
    in_h1: bool = False
    in_url: bool = False
    in_first_100_words: bool = False
    in_subheadings: bool = False


@dataclass
class PageSignals:
    # response
    url: str = ""
    http_status_code: int = 0
    response_time_ms: Optional[int] = None
    page_size_kb: int = 0

    # title / description
    title: Optional[str] = None
    title_count: int = 0
    meta_description: Optional[str] = None
    meta_description_count: int = 0
    meta_keywords: Optional[str] = None

    # canonical
    canonical_url: Optional[str] = None
    canonical_count: int = 0
    canonical_outside_head: bool = False
    canonical_is_relative: bool = False
    canonical_protocol_mismatch: bool = False
    canonical_has_fragment: bool = False
    canonical_has_query_string: bool = False
    canonical_is_self: bool = False
    canonical_og_url_mismatch: bool = False

    # open graph / twitter card
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None
    og_type: Optional[str] = None
    og_url: Optional[str] = None
    og_site_name: Optional[str] = None
    twitter_card: Optional[str] = None
    twitter_title: Optional[str] = None
    twitter_description: Optional[str] = None
    twitter_image: Optional[str] = None

    # robots directives (meta tags + X-Robots-Tag header)
    robots_meta: Optional[str] = None
    googlebot_meta: Optional[str] = None
    x_robots_tag: Optional[str] = None
    is_noindex: bool = False
    is_nofollow: bool = False

    # document basics
    has_charset: bool = False
    charset_too_late: bool = False
    has_doctype: bool = False
    viewport_meta: Optional[str] = None
    viewport_zoom_disabled: bool = False
    lang_tag: Optional[str] = None
    html_lang_invalid: bool = False
    has_favicon: bool = False
    has_meta_refresh: bool = False
    multiple_head_tags: bool = False
    multiple_body_tags: bool = False
    author_meta: Optional[str] = None
    date_published: Optional[str] = None
    date_modified: Optional[str] = None
    content_freshness_years: Optional[float] = None
    hreflang_tags: list[dict] = field(default_factory=list)
    invalid_hreflang_codes: list[str] = field(default_factory=list)
    hreflang_missing_x_default: bool = False
    has_pagination_rel: bool = False
    title_equals_h1: bool = False
    title_equals_description: bool = False

    # headings
    h1: Optional[str] = None
    h1_count: int = 0
    h2_count: int = 0
    h3_count: int = 0
    h4_count: int = 0
    heading_hierarchy: list[HeadingEntry] = field(default_factory=list)
    heading_skips: list[str] = field(default_factory=list)
    empty_headings: int = 0
    all_caps_headings: int = 0
    headings_duplicating_h1: int = 0
    question_heading_count: int = 0

    # content
    word_count: int = 0
    paragraph_count: int = 0
    avg_paragraph_length: int = 0
    long_paragraphs: int = 0
    readability: Readability = field(default_factory=Readability)
    sentence_length_stats: SentenceStats = field(default_factory=SentenceStats)
    reading_time_minutes: int = 0
    first_words: str = ""
    code_to_text_ratio: int = 0
    has_lorem_ipsum: bool = False
    plaintext_emails: list[str] = field(default_factory=list)
    has_list_elements: bool = False
    has_faq_section: bool = False
    has_table_of_contents: bool = False
    topics: list[str] = field(default_factory=list)

    # links
    total_links: int = 0
    internal_links: int = 0
    external_links: int = 0
    internal_link_details: list[dict] = field(default_factory=list)
    external_link_details: list[dict] = field(default_factory=list)
    nofollow_external_count: int = 0
    followed_external_count: int = 0
    sponsored_links: int = 0
    ugc_links: int = 0
    generic_link_count: int = 0
    generic_link_anchors: list[str] = field(default_factory=list)
    empty_anchor_links: int = 0
    empty_href_links: int = 0
    duplicate_links: int = 0
    localhost_links: list[str] = field(default_factory=list)
    file_protocol_links: int = 0
    javascript_links: int = 0
    hash_only_anchors: int = 0
    links_missing_href: int = 0
    self_links: int = 0
    unsafe_cross_origin_links: int = 0
    image_links_without_alt: int = 0
    nested_anchor_tags: int = 0
    has_author_page_link: bool = False

    # images
    image_count: int = 0
    images_with_alt: int = 0
    images_missing_alt_attribute: int = 0
    images_empty_alt: int = 0
    long_alt_texts: int = 0
    images_missing_dimensions: int = 0
    image_filenames: ImageFilenames = field(default_factory=ImageFilenames)
    modern_formats: int = 0
    legacy_formats: int = 0
    modern_image_ratio: Optional[int] = None
    srcset_images: int = 0
    picture_elements: int = 0
    lazy_loaded_images: int = 0
    alt_texts: list[str] = field(default_factory=list)

    # structured data
    schema_markup: bool = False
    schema_types: list[str] = field(default_factory=list)
    json_ld_validity: JsonLdValidity = field(default_factory=JsonLdValidity)
    schema_issues: list[str] = field(default_factory=list)
    has_faq_schema: bool = False
    has_breadcrumb_schema: bool = False
    has_microdata: bool = False
    microdata_types: list[str] = field(default_factory=list)

    # security / performance headers
    is_https: bool = False
    has_hsts: bool = False
    has_csp: bool = False
    has_x_frame_options: bool = False
    has_x_content_type_options: bool = False
    has_referrer_policy: bool = False
    has_permissions_policy: bool = False
    has_compression: bool = False
    cache_control: Optional[str] = None
    server_header_leak: Optional[str] = None
    x_powered_by: Optional[str] = None
    has_mixed_content: bool = False
    mixed_content_items: list[str] = field(default_factory=list)

    # accessibility
    has_main_landmark: bool = False
    has_nav_landmark: bool = False
    has_banner_landmark: bool = False
    has_contentinfo_landmark: bool = False
    duplicate_banner_landmark: bool = False
    duplicate_contentinfo_landmark: bool = False
    multiple_nav_without_label: bool = False
    form_without_labels: int = 0
    select_without_label: int = 0
    duplicate_ids: list[str] = field(default_factory=list)
    focusable_aria_hidden: int = 0
    aria_hidden_on_body: bool = False
    tabindex_positive: int = 0
    nested_interactive: int = 0
    empty_buttons: int = 0
    iframes_without_title: int = 0
    has_skip_link: bool = False
    autofocus_elements: int = 0
    invalid_aria_roles: list[str] = field(default_factory=list)
    tables_without_headers: int = 0
    deprecated_tags_found: list[str] = field(default_factory=list)
    plugin_elements: int = 0
    total_dom_elements: int = 0
    max_dom_depth: int = 0
    excessive_dom_depth: bool = False

    # url / crawlability
    url_analysis: Optional[UrlAnalysis] = None
    url_depth: int = 0

    # keywords
    keywords: list[str] = field(default_factory=list)
    keyword_density: list[KeywordDensity] = field(default_factory=list)
    keyword_placement: list[KeywordPlacement] = field(default_factory=list)
    keyword_in_alt_text: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict, strict: bool = False) -> "PageSignals":
        """
        Build a record from loosely-typed input (e.g. a hand-built JSON body).
        Unknown keys are ignored; nested structures are rebuilt from dicts.
        With strict=True every supplied value must match its field's shape,
        otherwise TypeError names the offending field.
        """
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in (data or {}).items() if k in known and v is not None}
        if strict:
            _check_fields(cls, values)

        nested = {
            "readability": Readability,
            "sentence_length_stats": SentenceStats,
            "url_analysis": UrlAnalysis,
            "image_filenames": ImageFilenames,
            "json_ld_validity": JsonLdValidity,
        }
        for name, record in nested.items():
            if isinstance(values.get(name), dict):
                values[name] = _build(record, values[name])

        listed = {
            "heading_hierarchy": HeadingEntry,
            "keyword_density": KeywordDensity,
            "keyword_placement": KeywordPlacement,
        }
        for name, record in listed.items():
            if isinstance(values.get(name), list):
                values[name] = [_build(record, item) if isinstance(item, dict) else item for item in values[name]]

        return cls(**values)


def _build(record, data: dict):
    known = {f.name for f in fields(record)}
    return record(**{k: v for k, v in data.items() if k in known})


def _matches(value, annotation) -> bool:
    origin = get_origin(annotation)
    if origin is Union:
        return any(_matches(value, arg) for arg in get_args(annotation) if arg is not type(None))
    if origin is list:
        (item_type,) = get_args(annotation) or (object,)
        return isinstance(value, list) and all(_matches(item, item_type) for item in value)
    if origin is dict:
        return isinstance(value, dict)
    if is_dataclass(annotation):
        if isinstance(value, annotation):
            return True
        if not isinstance(value, dict):
            return False
        try:
            _check_fields(annotation, value)
        except TypeError:
            return False
        return True
    if annotation in (int, float):
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if annotation is bool:
        return isinstance(value, bool)
    if annotation is object:
        return True
    return isinstance(value, annotation)


def _check_fields(record, values: dict) -> None:
    by_name = {f.name: f.type for f in fields(record)}
    for name, value in values.items():
        if name in by_name and value is not None and not _matches(value, by_name[name]):
            raise TypeError(f"field '{name}' has the wrong shape: {value!r:.60}")


@dataclass
class Issue:
    category: str                       # metaTags | content | technical | linksImages | keywords
    severity: str                       # high | medium | low | info
    message: str
    impact: int                         # display-only: raw penalty rescaled by category weight
    rule: str = ""


@dataclass
class CategoryScore:
    weight: int
    score: int = 100


@dataclass
class ScoreResult:
    overall: int
    grade: str
    categories: dict[str, CategoryScore]
    issues: list[Issue] = field(default_factory=list)
    issue_count: int = 0
    high_issues: int = 0
    medium_issues: int = 0
    low_issues: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class PageAnalysis:
    url: str
    ok: bool
    status_code: int = 0
    signals: Optional[PageSignals] = None
    scored: Optional[ScoreResult] = None

    # error info (populated only on failure)
    error: Optional[str] = None

    def to_dict(self) -> dict:
        """Flatten signals into the top level, the shape the HTTP layer returns."""
        if not self.ok or self.signals is None:
            data = {"ok": False, "url": self.url, "error": self.error}
            if self.status_code:
                data["status"] = self.status_code
            return data
        data = {"ok": True, **self.signals.to_dict()}
        data["url"] = self.signals.url or self.url
        data["scored"] = self.scored.to_dict() if self.scored else None
        return data
