from requests.structures import CaseInsensitiveDict

from auditor.headers import extract_header_signals, extract_mixed_content, normalise_headers
from auditor.parser import load


def test_normalise_headers_is_case_insensitive():
    headers = normalise_headers({"Content-Encoding": "br", "X-FRAME-OPTIONS": "DENY"})
    assert isinstance(headers, CaseInsensitiveDict)
    assert headers["content-encoding"] == "br"
    assert "x-frame-options" in headers
    assert headers.get("X-Frame-Options") == "DENY"
    assert len(normalise_headers(None)) == 0


def test_mixed_case_header_names_are_recognised():
    headers = normalise_headers({"STRICT-TRANSPORT-SECURITY": "max-age=1", "content-encoding": "GZIP", "Server": "nginx/1.25.3"})
    result = extract_header_signals(headers, "https://example.com/")
    assert result["has_hsts"] is True
    assert result["has_compression"] is True
    assert result["server_header_leak"] == "nginx/1.25.3"


def test_security_headers_present():
    headers = normalise_headers({
        "Strict-Transport-Security": "max-age=63072000",
        "Content-Security-Policy": "default-src 'self'",
        "X-Frame-Options": "DENY",
        "X-Content-Type-Options": "nosniff",
        "Referrer-Policy": "no-referrer",
        "Permissions-Policy": "camera=()",
        "Content-Encoding": "gzip",
        "Cache-Control": "no-cache",
    })
    result = extract_header_signals(headers, "https://example.com/")
    assert result["is_https"] is True
    assert all(result[k] for k in (
        "has_hsts", "has_csp", "has_x_frame_options", "has_x_content_type_options",
        "has_referrer_policy", "has_permissions_policy", "has_compression",
    ))
    assert result["cache_control"] == "no-cache"


def test_missing_headers():
    result = extract_header_signals({}, "http://example.com/")
    assert result["is_https"] is False
    assert result["has_hsts"] is False
    assert result["has_compression"] is False
    assert result["cache_control"] is None


def test_x_content_type_options_must_be_nosniff():
    result = extract_header_signals({"x-content-type-options": "sniff-away"}, "https://example.com/")
    assert result["has_x_content_type_options"] is False


def test_server_version_leak():
    assert extract_header_signals({"server": "Apache/2.4.41 (Ubuntu)"}, "")["server_header_leak"] == "Apache/2.4.41 (Ubuntu)"
    assert extract_header_signals({"server": "cloudflare"}, "")["server_header_leak"] is None


def test_mixed_content_on_https_page():
    soup = load("""
        <link rel="stylesheet" href="http://cdn.example.com/site.css">
        <link rel="alternate" href="http://example.com/feed">
        <img src="http://cdn.example.com/a.png">
        <img src="https://cdn.example.com/b.png">
        <script src="http://cdn.example.com/app.js"></script>
    """)
    result = extract_mixed_content(soup, "https://example.com/")
    assert result["has_mixed_content"] is True
    assert sorted(result["mixed_content_items"]) == [
        "http://cdn.example.com/a.png",
        "http://cdn.example.com/app.js",
        "http://cdn.example.com/site.css",
    ]


def test_mixed_content_not_applicable_on_http_page():
    soup = load('<img src="http://cdn.example.com/a.png">')
    assert extract_mixed_content(soup, "http://example.com/")["has_mixed_content"] is False
