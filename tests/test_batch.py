import asyncio

import pytest
from unittest.mock import patch

from auditor.batch import bulk_scan, compare, summarise_batch
from auditor.fetcher import FetchError, FetchedPage


def _fake_fetch(good_page):
    html, _, headers = good_page

    async def fetch(url, *args, **kwargs):
        if "dead" in url:
            raise FetchError(f"Could not fetch {url}: connection refused")
        if "missing" in url:
            raise FetchError("Page returned HTTP 404", status_code=404)
        return FetchedPage(html=html, status_code=200, final_url=url, headers=headers, elapsed_ms=50)

    return fetch


@pytest.mark.asyncio
async def test_compare_isolates_failures(good_page):
    urls = ["https://example.com/blog/coffee-brewing-guide", "https://dead.example.com/"]
    with patch("auditor.core.fetch_page", side_effect=_fake_fetch(good_page)):
        results = await compare(urls, keywords="coffee brewing")

    assert len(results) == 2
    ok, failed = results
    assert ok["status"] == "ok"
    assert ok["url"] == urls[0]
    assert ok["score"] >= 85
    assert set(ok["categories"]) == {"metaTags", "content", "technical", "linksImages", "keywords"}
    assert failed == {
        "url": urls[1],
        "status": "error",
        "error": "Could not fetch https://dead.example.com/: connection refused",
        "score": 0,
    }


@pytest.mark.asyncio
async def test_compare_requires_two_to_five_urls():
    with pytest.raises(ValueError):
        await compare(["https://example.com/"])
    with pytest.raises(ValueError):
        await compare([f"https://example.com/{i}" for i in range(6)])


@pytest.mark.asyncio
async def test_bulk_scan_summary(good_page):
    urls = [
        "https://example.com/blog/coffee-brewing-guide",
        "https://example.com/missing",
        "https://dead.example.com/",
        "https://example.com/blog/coffee-brewing-guide",
    ]
    with patch("auditor.core.fetch_page", side_effect=_fake_fetch(good_page)):
        outcome = await bulk_scan(urls, concurrency=2)

    results, summary = outcome["results"], outcome["summary"]
    assert [r["url"] for r in results] == urls
    assert summary["scanned"] == 2
    assert summary["failed"] == 2
    assert summary["avg_score"] == results[0]["score"]
    assert summary["total_issues"] == results[0]["issue_count"] * 2


@pytest.mark.asyncio
async def test_bulk_scan_limits():
    with pytest.raises(ValueError):
        await bulk_scan([])
    with pytest.raises(ValueError):
        await bulk_scan([f"https://example.com/{i}" for i in range(21)])


@pytest.mark.asyncio
async def test_concurrency_is_bounded():
    running = 0
    peak = 0

    async def slow_analyze(url, keywords=None):
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await asyncio.sleep(0.01)
        running -= 1
        raise RuntimeError("analysis crashed")

    with patch("auditor.batch.analyze_page", side_effect=slow_analyze):
        outcome = await bulk_scan([f"https://example.com/{i}" for i in range(6)], concurrency=2)

    assert peak == 2
    # an unexpected exception still becomes a per-item error entry
    assert all(r["status"] == "error" and r["error"] == "analysis crashed" for r in outcome["results"])
    assert outcome["summary"]["failed"] == 6


def test_summarise_batch_empty():
    assert summarise_batch([]) == {"avg_score": 0, "total_issues": 0, "total_high_issues": 0, "scanned": 0, "failed": 0}


def test_summarise_batch_rounds_half_up():
    results = [
        {"status": "ok", "score": 70, "issue_count": 3, "high_issues": 1},
        {"status": "ok", "score": 71, "issue_count": 2, "high_issues": 0},
    ]
    summary = summarise_batch(results)
    assert summary["avg_score"] == 71
    assert summary["total_issues"] == 5
    assert summary["total_high_issues"] == 1
