import asyncio
import logging
import os

from .core import analyze_page
from .models import PageAnalysis
from .scorer import round_half_up

logger = logging.getLogger(__name__)

BATCH_CONCURRENCY = int(os.getenv("AUDIT_BATCH_CONCURRENCY", "5"))

COMPARE_MIN_URLS, COMPARE_MAX_URLS = 2, 5
BULK_MIN_URLS, BULK_MAX_URLS = 1, 20


def _error_entry(url: str, error: str) -> dict:
    return {"url": url, "status": "error", "error": error, "score": 0}


def _summarise(analysis: PageAnalysis) -> dict:
    """Per-URL result row: headline signals plus the score breakdown."""
    if not analysis.ok:
        return _error_entry(analysis.url, analysis.error or "Unknown error")

    s, scored = analysis.signals, analysis.scored
    return {
        "url": analysis.url,
        "final_url": s.url,
        "status": "ok",
        "score": scored.overall,
        "grade": scored.grade,
        "categories": {name: c.score for name, c in scored.categories.items()},
        "title": s.title,
        "meta_description": s.meta_description,
        "h1": s.h1,
        "word_count": s.word_count,
        "internal_links": s.internal_links,
        "external_links": s.external_links,
        "image_count": s.image_count,
        "schema_types": s.schema_types,
        "readability": s.readability.score,
        "issue_count": scored.issue_count,
        "high_issues": scored.high_issues,
        "issues": [i.__dict__ for i in scored.issues],
    }


async def _run(urls: list[str], keywords, concurrency: int) -> list[dict]:
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def one(url: str) -> dict:
        async with semaphore:
            analysis = await analyze_page(url, keywords=keywords)
        return _summarise(analysis)

    outcomes = await asyncio.gather(*(one(u) for u in urls), return_exceptions=True)

    results = []
    for url, outcome in zip(urls, outcomes):
        if isinstance(outcome, Exception):
            logger.error("Batch item failed for %s: %s", url, outcome)
            results.append(_error_entry(url, str(outcome)))
        else:
            results.append(outcome)
    return results


def _check_count(urls: list[str], low: int, high: int) -> None:
    if not low <= len(urls) <= high:
        raise ValueError(f"Expected between {low} and {high} URLs, got {len(urls)}")


async def compare(urls: list[str], keywords=None, concurrency: int = BATCH_CONCURRENCY) -> list[dict]:
    """Analyze 2-5 pages side by side. Results keep the input order."""
    _check_count(urls, COMPARE_MIN_URLS, COMPARE_MAX_URLS)
    return await _run(urls, keywords, concurrency)


def summarise_batch(results: list[dict]) -> dict:
    scanned = [r for r in results if r.get("status") != "error"]
    return {
        "avg_score": round_half_up(sum(r["score"] for r in scanned) / len(scanned)) if scanned else 0,
        "total_issues": sum(r.get("issue_count", 0) for r in scanned),
        "total_high_issues": sum(r.get("high_issues", 0) for r in scanned),
        "scanned": len(scanned),
        "failed": len(results) - len(scanned),
    }


async def bulk_scan(urls: list[str], keywords=None, concurrency: int = BATCH_CONCURRENCY) -> dict:
    """Analyze 1-20 pages and aggregate a summary over the ones that succeeded."""
    _check_count(urls, BULK_MIN_URLS, BULK_MAX_URLS)
    results = await _run(urls, keywords, concurrency)
    summary = summarise_batch(results)
    logger.info("Bulk scan: %d scanned, %d failed, avg score %d", summary["scanned"], summary["failed"], summary["avg_score"])
    return {"results": results, "summary": summary}
