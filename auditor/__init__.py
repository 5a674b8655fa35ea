from .core import analyze_page
from .batch import bulk_scan, compare
from .extractor import extract_signals
from .fetcher import FetchError, fetch_page
from .models import PageAnalysis, PageSignals, ScoreResult
from .scorer import score_payload, score_signals

__all__ = [
    "analyze_page", "bulk_scan", "compare", "extract_signals", "fetch_page", "FetchError",
    "PageAnalysis", "PageSignals", "ScoreResult", "score_payload", "score_signals",
]
