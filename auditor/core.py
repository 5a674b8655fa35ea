import logging

from .extractor import extract_signals
from .fetcher import FetchError, fetch_page
from .models import PageAnalysis
from .scorer import score_signals

logger = logging.getLogger(__name__)


async def analyze_page(url: str, keywords=None) -> PageAnalysis:
    """
    Top-level entry point. Fetches a URL, extracts its signals and scores them.
    Returns a PageAnalysis and never raises; errors are captured in result.error.
    """
    try:
        page = await fetch_page(url)
    except FetchError as exc:
        logger.error("Fetch failed for %s: %s", url, exc)
        return PageAnalysis(url=url, ok=False, status_code=exc.status_code or 0, error=str(exc))
    except Exception as exc:
        logger.error("Fetch failed for %s: %s", url, exc)
        return PageAnalysis(url=url, ok=False, error=str(exc))

    try:
        signals = extract_signals(
            page.html,
            page.final_url,
            response_headers=page.headers,
            status_code=page.status_code,
            fetch_duration_ms=page.elapsed_ms,
            keywords=keywords,
        )
        scored = score_signals(signals)
    except Exception as exc:
        logger.error("Extract/score failed for %s: %s", url, exc)
        return PageAnalysis(url=url, ok=False, status_code=page.status_code, error=str(exc))

    logger.info("Analyzed %s: score %d (%d issues)", page.final_url, scored.overall, scored.issue_count)
    return PageAnalysis(url=url, ok=True, status_code=page.status_code, signals=signals, scored=scored)
