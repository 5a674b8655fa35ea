import re
from collections import Counter
from urllib.parse import urldefrag, urljoin, urlparse

from bs4 import BeautifulSoup

from .parser import element_text, rel_tokens
from .scorer import round_half_up

MAX_LINK_DETAILS = 50
MAX_FILENAME_DETAILS = 30
LONG_ALT_CHARS = 125

GENERIC_ANCHOR_RE = re.compile(
    r"^(click here|here|read more|learn more|this|this post|more info|link|this link|read this|"
    r"find out|visit|check out|see more|more details|see also|more|continue reading|go|details)$",
    re.IGNORECASE,
)
_AUTHOR_PAGE_RE = re.compile(r"/author/|/about/?|/team/|/staff/|/profile/", re.IGNORECASE)
_LOCAL_HOSTS = {"localhost", "127.0.0.1", "0.0.0.0", "::1"}

# camera defaults, screenshots, CMS placeholders and bare hashes / numbers
GENERIC_FILENAME_RE = re.compile(
    r"^(?:img|image|dsc|dscn|dscf|dcim|pic|photo|picture|screenshot|screen[-_ ]?shot|untitled|download|"
    r"unnamed|pxl|gopr|mvimg|whatsapp[-_ ]?image|capture|scan|file|placeholder|default)"
    r"[-_ ]?\d*(?:[-_ ]\d+)*$"
    r"|^\d+$"
    r"|^[0-9a-f]{8,}$"
    r"|^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
_MODERN_EXT = {"webp", "avif"}
_LEGACY_EXT = {"jpg", "jpeg", "png", "gif", "bmp", "tif", "tiff"}


def _host(url: str) -> str:
    return (urlparse(url).hostname or "").lower()


def _normalise(url: str) -> str:
    return urldefrag(url)[0].rstrip("/")


def extract_links(soup: BeautifulSoup, final_url: str) -> dict:
    """
    Classify every anchor as internal / external against the final URL's
    hostname and collect link-hygiene counts.
    """
    base_host = _host(final_url)
    page = _normalise(final_url)

    internal, external = [], []
    resolved_hrefs = []
    generic_anchors = []
    localhost = []
    counts = Counter()

    for a in soup.find_all("a"):
        if a.find_parent("a") is not None:
            counts["nested"] += 1

        href = a.get("href")
        if href is None:
            counts["missing_href"] += 1
            continue
        href = href.strip()
        anchor = element_text(a)
        if not anchor:
            img = a.find("img")
            if img is not None and not (img.get("alt") or "").strip():
                counts["image_no_alt"] += 1
            anchor = (img.get("alt") or "").strip() if img is not None else ""
            anchor = anchor or (a.get("aria-label") or "").strip() or (a.get("title") or "").strip()

        lower = href.lower()
        if lower.startswith("javascript:"):
            counts["javascript"] += 1
            continue
        if lower.startswith("file:"):
            counts["file"] += 1
            continue
        if href == "#":
            counts["hash_only"] += 1
            continue
        if lower.startswith(("mailto:", "tel:", "sms:", "data:")):
            continue
        if not href:
            counts["empty_href"] += 1
            continue

        resolved = urljoin(final_url, href)
        parsed = urlparse(resolved)
        if parsed.scheme not in ("http", "https"):
            continue
        host = (parsed.hostname or "").lower()

        if not anchor:
            counts["empty_anchor"] += 1
        elif GENERIC_ANCHOR_RE.match(anchor):
            generic_anchors.append(anchor)
        if host in _LOCAL_HOSTS:
            localhost.append(resolved)
        if _normalise(resolved) == page and not href.startswith("#"):
            counts["self"] += 1

        resolved_hrefs.append(_normalise(resolved))
        rel = rel_tokens(a)
        detail = {"href": resolved[:300], "anchor": anchor[:100] or "(empty)"}

        if host == base_host:
            internal.append(detail)
        else:
            nofollow = "nofollow" in rel
            detail.update(rel=" ".join(rel), nofollow=nofollow)
            external.append(detail)
            counts["nofollow_external" if nofollow else "followed_external"] += 1
            if "sponsored" in rel:
                counts["sponsored"] += 1
            if "ugc" in rel:
                counts["ugc"] += 1
            if (a.get("target") or "").lower() == "_blank" and not {"noopener", "noreferrer"} & set(rel):
                counts["unsafe_blank"] += 1

    duplicates = sum(n - 1 for n in Counter(resolved_hrefs).values() if n > 1)

    return {
        "total_links": len(internal) + len(external),
        "internal_links": len(internal),
        "external_links": len(external),
        "internal_link_details": internal[:MAX_LINK_DETAILS],
        "external_link_details": external[:MAX_LINK_DETAILS],
        "nofollow_external_count": counts["nofollow_external"],
        "followed_external_count": counts["followed_external"],
        "sponsored_links": counts["sponsored"],
        "ugc_links": counts["ugc"],
        "generic_link_count": len(generic_anchors),
        "generic_link_anchors": generic_anchors[:20],
        "empty_anchor_links": counts["empty_anchor"],
        "empty_href_links": counts["empty_href"],
        "duplicate_links": duplicates,
        "localhost_links": localhost[:20],
        "file_protocol_links": counts["file"],
        "javascript_links": counts["javascript"],
        "hash_only_anchors": counts["hash_only"],
        "links_missing_href": counts["missing_href"],
        "self_links": counts["self"],
        "unsafe_cross_origin_links": counts["unsafe_blank"],
        "image_links_without_alt": counts["image_no_alt"],
        "nested_anchor_tags": counts["nested"],
        "has_author_page_link": any(_AUTHOR_PAGE_RE.search(d["href"]) for d in internal + external),
    }


def image_filename(src: str) -> tuple[str, str]:
    """(stem, extension) of an image URL's last path segment."""
    path = urlparse(src).path
    name = path.rsplit("/", 1)[-1]
    if "." in name:
        stem, ext = name.rsplit(".", 1)
        return stem, ext.lower()
    return name, ""


def extract_images(soup: BeautifulSoup) -> dict:
    images = soup.find_all("img")
    counts = Counter()
    alt_texts = []
    details = []
    modern = legacy = 0

    for img in images:
        alt = img.get("alt")
        if alt is None:
            counts["missing_alt"] += 1
        elif not alt.strip():
            counts["empty_alt"] += 1
        else:
            counts["with_alt"] += 1
            alt_texts.append(alt.strip())
            if len(alt.strip()) > LONG_ALT_CHARS:
                counts["long_alt"] += 1

        if not img.get("width") or not img.get("height"):
            counts["missing_dimensions"] += 1
        if img.get("srcset"):
            counts["srcset"] += 1
        if (img.get("loading") or "").lower() == "lazy":
            counts["lazy"] += 1

        src = (img.get("src") or img.get("data-src") or "").strip()
        if not src or src.lower().startswith("data:"):
            continue
        stem, ext = image_filename(src)
        if ext in _MODERN_EXT:
            modern += 1
        elif ext in _LEGACY_EXT:
            legacy += 1
        if not stem:
            continue
        generic = bool(GENERIC_FILENAME_RE.match(stem))
        counts["generic" if generic else "descriptive"] += 1
        details.append({"src": src[:200], "filename": f"{stem}.{ext}" if ext else stem, "generic": generic})

    # <source type="image/webp"> inside <picture> also counts as a modern format
    modern += sum(1 for s in soup.find_all("source") if (s.get("type") or "").lower() in ("image/webp", "image/avif"))
    typed = modern + legacy

    return {
        "image_count": len(images),
        "images_with_alt": counts["with_alt"],
        "images_missing_alt_attribute": counts["missing_alt"],
        "images_empty_alt": counts["empty_alt"],
        "long_alt_texts": counts["long_alt"],
        "images_missing_dimensions": counts["missing_dimensions"],
        "image_filenames": {
            "total": counts["generic"] + counts["descriptive"],
            "descriptive": counts["descriptive"],
            "generic": counts["generic"],
            "details": details[:MAX_FILENAME_DETAILS],
        },
        "modern_formats": modern,
        "legacy_formats": legacy,
        "modern_image_ratio": round_half_up(modern / typed * 100) if typed else None,
        "srcset_images": counts["srcset"],
        "picture_elements": len(soup.find_all("picture")),
        "lazy_loaded_images": counts["lazy"],
        "alt_texts": alt_texts[:100],
    }
