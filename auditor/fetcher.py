import asyncio
import logging
import os
import time
from dataclasses import dataclass, field

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

# realistic browser UA, avoids most trivial bot blocks
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0.0.0 Safari/537.36"
)

DEFAULT_TIMEOUT = float(os.getenv("AUDIT_FETCH_TIMEOUT", "12"))  # seconds
DEFAULT_RETRIES = int(os.getenv("AUDIT_FETCH_RETRIES", "1"))
MAX_CONTENT_BYTES = 5 * 1024 * 1024  # 5 MB ceiling to avoid runaway pages
RETRY_STATUSES = (429, 500, 502, 503, 504)


class FetchError(Exception):
    """Network failure, timeout or non-2xx response. status_code is set for the latter."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class FetchedPage:
    html: str
    status_code: int
    final_url: str
    headers: dict[str, str] = field(default_factory=dict)
    elapsed_ms: int = 0


def _session(retries: int) -> requests.Session:
    session = requests.Session()
    retry = Retry(
        total=retries,
        backoff_factor=0.3,
        status_forcelist=RETRY_STATUSES,
        allowed_methods=["HEAD", "GET"],
        # hand the last response back instead of raising, so the status is reported
        raise_on_status=False,
        respect_retry_after_header=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update({
        "User-Agent": USER_AGENT,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
    })
    return session


def _sync_fetch(url: str, timeout: float = DEFAULT_TIMEOUT, retries: int = DEFAULT_RETRIES) -> FetchedPage:
    """Synchronous fetch using requests, run inside a thread executor."""
    started = time.perf_counter()
    with _session(retries) as session:
        try:
            response = session.get(url, timeout=timeout, allow_redirects=True)
        except requests.Timeout as exc:
            raise FetchError(f"Timed out after {timeout:g}s fetching {url}") from exc
        except requests.RequestException as exc:
            raise FetchError(f"Could not fetch {url}: {exc}") from exc
    elapsed_ms = int((time.perf_counter() - started) * 1000)

    if not 200 <= response.status_code < 300:
        raise FetchError(f"Page returned HTTP {response.status_code}", status_code=response.status_code)

    return FetchedPage(
        html=response.text[:MAX_CONTENT_BYTES],
        status_code=response.status_code,
        final_url=response.url or url,
        headers=dict(response.headers),
        elapsed_ms=elapsed_ms,
    )


async def fetch_page(url: str, timeout: float = DEFAULT_TIMEOUT, retries: int = DEFAULT_RETRIES) -> FetchedPage:
    """
    Fetch the HTML content of a URL asynchronously.

    Uses requests in a thread executor to stay non-blocking inside the async
    event loop. Raises FetchError on network failure or a non-2xx response.
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, _sync_fetch, url, timeout, retries)
