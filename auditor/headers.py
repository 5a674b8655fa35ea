import re
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from requests.structures import CaseInsensitiveDict

MAX_MIXED_CONTENT_ITEMS = 20

_COMPRESSION = {"gzip", "br", "deflate", "zstd", "compress"}
_VERSION_RE = re.compile(r"\d+(\.\d+)+")

# element -> attribute that loads a subresource
_SUBRESOURCE_ATTRS = (
    ("img", "src"),
    ("script", "src"),
    ("iframe", "src"),
    ("source", "src"),
    ("video", "src"),
    ("audio", "src"),
    ("embed", "src"),
    ("link", "href"),
)


def normalise_headers(headers) -> CaseInsensitiveDict:
    """Response headers from any mapping, looked up case-insensitively."""
    return CaseInsensitiveDict({str(k): str(v) for k, v in dict(headers or {}).items()})


def extract_header_signals(headers, final_url: str) -> dict:
    encoding = {e.strip().lower() for e in headers.get("content-encoding", "").split(",") if e.strip()}
    server = headers.get("server")
    return {
        "is_https": urlparse(final_url or "").scheme.lower() == "https",
        "has_hsts": "strict-transport-security" in headers,
        "has_csp": "content-security-policy" in headers,
        "has_x_frame_options": "x-frame-options" in headers,
        "has_x_content_type_options": headers.get("x-content-type-options", "").strip().lower() == "nosniff",
        "has_referrer_policy": "referrer-policy" in headers,
        "has_permissions_policy": "permissions-policy" in headers,
        "has_compression": bool(encoding & _COMPRESSION),
        "cache_control": headers.get("cache-control"),
        "server_header_leak": server if server and _VERSION_RE.search(server) else None,
        "x_powered_by": headers.get("x-powered-by"),
    }


def extract_mixed_content(soup: BeautifulSoup, final_url: str) -> dict:
    """http:// subresources on an https page."""
    if urlparse(final_url or "").scheme.lower() != "https":
        return {"has_mixed_content": False, "mixed_content_items": []}

    items = []
    for tag_name, attr in _SUBRESOURCE_ATTRS:
        for tag in soup.find_all(tag_name):
            if tag_name == "link" and "stylesheet" not in (tag.get("rel") or []):
                continue
            value = (tag.get(attr) or "").strip()
            if value.lower().startswith("http://") and value not in items:
                items.append(value)
    return {"has_mixed_content": bool(items), "mixed_content_items": items[:MAX_MIXED_CONTENT_ITEMS]}
