import logging
import re
from urllib.parse import parse_qsl, unquote, urlparse

from .models import UrlAnalysis

logger = logging.getLogger(__name__)

MAX_SLUG_LENGTH = 75
MAX_URL_LENGTH = 200
PENALTY_PER_ISSUE = 20

_SESSION_PARAMS = {"sid", "sessionid", "session_id", "phpsessid", "jsessionid", "aspsessionid", "sess", "s_id"}
# "+" only means a space inside the query string
_PATH_SPACE_RE = re.compile(r"%20")
_QUERY_SPACE_RE = re.compile(r"%20|\+")


def _slug(path: str) -> str:
    segments = [s for s in path.split("/") if s]
    return segments[-1] if segments else ""


def analyze_url(url: str) -> UrlAnalysis:
    """
    Lint a single URL for crawlability / SEO anti-patterns.
    Each check is independent; every issue found costs 20 points.
    """
    try:
        parsed = urlparse(url or "")
    except ValueError as exc:
        logger.warning("Unparseable URL %r: %s", url, exc)
        return UrlAnalysis(issues=["URL could not be parsed"], score=100 - PENALTY_PER_ISSUE)

    path = parsed.path or ""
    slug = _slug(path)
    is_https = parsed.scheme.lower() == "https"
    issues: list[str] = []

    if any(c.isupper() for c in path):
        issues.append("URL path contains uppercase characters")
    if "_" in path:
        issues.append("URL uses underscores instead of hyphens as word separators")
    if len(slug) > MAX_SLUG_LENGTH:
        issues.append(f"URL slug is {len(slug)} characters (over {MAX_SLUG_LENGTH})")
    if len(url or "") > MAX_URL_LENGTH:
        issues.append(f"Full URL is {len(url)} characters (over {MAX_URL_LENGTH})")

    params = {k.lower() for k, _ in parse_qsl(parsed.query, keep_blank_values=True)}
    if params & _SESSION_PARAMS or ";jsessionid=" in (url or "").lower():
        issues.append("URL contains a session ID parameter")

    if "//" in path:
        issues.append("URL path contains double slashes")
    if any(ord(c) > 127 for c in unquote(url or "")):
        issues.append("URL contains non-ASCII characters")
    if _PATH_SPACE_RE.search(path) or _QUERY_SPACE_RE.search(parsed.query):
        issues.append("URL contains encoded spaces")

    segments = [s.lower() for s in path.split("/") if s]
    if len(segments) != len(set(segments)):
        issues.append("URL path repeats the same segment")

    if not is_https:
        issues.append("URL does not use HTTPS")

    return UrlAnalysis(
        slug=slug,
        length=len(slug),
        is_https=is_https,
        issues=issues,
        score=max(0, 100 - PENALTY_PER_ISSUE * len(issues)),
    )


def url_depth(url: str) -> int:
    try:
        return len([s for s in urlparse(url or "").path.split("/") if s])
    except ValueError:
        return 0
