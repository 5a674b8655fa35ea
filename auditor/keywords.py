import re
import logging
from functools import lru_cache

import nltk
from nltk.corpus import stopwords
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS, TfidfVectorizer

from .models import KeywordDensity, KeywordPlacement

logger = logging.getLogger(__name__)

STUFFING_THRESHOLD = 3.0    # percent
OPTIMAL_THRESHOLD = 0.5

# bare minimum additional noise words common on web pages
_EXTRA_NOISE = {
    "click", "please", "read", "more", "also", "like", "get", "use",
    "new", "one", "two", "first", "will", "may", "can", "make", "see",
    "home", "menu", "search", "cart", "account", "login", "sign", "share",
    "cookie", "cookies", "privacy", "policy", "terms", "copyright",
}


@lru_cache(maxsize=1)
def _stop_words() -> frozenset:
    """NLTK's English list, fetched on first use; sklearn's list when offline."""
    try:
        nltk.data.find("corpora/stopwords")
    except LookupError:
        nltk.download("stopwords", quiet=True)
    try:
        return frozenset(stopwords.words("english")) | ENGLISH_STOP_WORDS
    except LookupError:
        logger.warning("NLTK stopwords unavailable, using sklearn's English list")
        return frozenset(ENGLISH_STOP_WORDS)


def parse_keywords(raw) -> list[str]:
    """Comma-separated free text (or a list) -> de-duplicated lowercase keywords."""
    if not raw:
        return []
    parts = raw if isinstance(raw, (list, tuple)) else str(raw).split(",")
    seen: list[str] = []
    for part in parts:
        kw = re.sub(r"\s+", " ", str(part)).strip().lower()
        if kw and kw not in seen:
            seen.append(kw)
    return seen


def _keyword_pattern(keyword: str) -> re.Pattern:
    words = keyword.split()
    if len(words) > 1:
        # whole-phrase match, tolerant of any whitespace between words
        body = r"\s+".join(re.escape(w) for w in words)
        return re.compile(rf"(?<!\w){body}(?!\w)", re.IGNORECASE)
    # single word with simple plural tolerance
    return re.compile(rf"(?<!\w){re.escape(keyword)}(?:s|es)?(?!\w)", re.IGNORECASE)


def density_status(density: float, count: int) -> str:
    if count == 0 or density == 0:
        return "missing"
    if density > STUFFING_THRESHOLD:
        return "stuffing"
    if density >= OPTIMAL_THRESHOLD:
        return "optimal"
    return "low"


def keyword_density(keywords: list[str], body_text: str, word_count: int) -> list[KeywordDensity]:
    results = []
    for kw in keywords:
        count = len(_keyword_pattern(kw).findall(body_text or ""))
        density = round(count / word_count * 100, 2) if word_count else 0.0
        results.append(KeywordDensity(keyword=kw, count=count, density=density, status=density_status(density, count)))
    return results


def keyword_placement(
    keywords: list[str],
    title: str = "",
    meta_description: str = "",
    h1: str = "",
    url: str = "",
    first_words: str = "",
    subheadings: list[str] = (),
) -> list[KeywordPlacement]:
    """Case-insensitive substring membership of each keyword in each placement."""
    first_100 = " ".join((first_words or "").split()[:100]).lower()
    sub_text = " ".join(subheadings or []).lower()
    title, meta_description, h1 = (title or "").lower(), (meta_description or "").lower(), (h1 or "").lower()
    # hyphens and underscores stand in for spaces in URL slugs
    url_text = re.sub(r"[-_+]|%20", " ", (url or "").lower())

    return [
        KeywordPlacement(
            keyword=kw,
            in_title=kw in title,
            in_meta_description=kw in meta_description,
            in_h1=kw in h1,
            in_url=kw in url_text or kw.replace(" ", "-") in (url or "").lower(),
            in_first_100_words=kw in first_100,
            in_subheadings=kw in sub_text,
        )
        for kw in keywords
    ]


def keyword_in_alt_text(keywords: list[str], alt_texts: list[str]) -> list[str]:
    joined = " ".join(alt_texts or []).lower()
    return [kw for kw in keywords if kw in joined]


def _tokenize(text: str) -> list[str]:
    """Lowercase, strip punctuation, remove short/stop words."""
    stop = _stop_words()
    tokens = re.findall(r"[a-zA-Z]{3,}", text.lower())
    return [t for t in tokens if t not in stop and t not in _EXTRA_NOISE]


def build_corpus(title: str, description: str, headings: list[str], body_text: str) -> str:
    """
    Weighted corpus for TF-IDF: high-signal fields are repeated so they
    outrank body text.
    """
    parts = []
    if title:
        parts.extend([title] * 5)
    if description:
        parts.extend([description] * 3)
    for h in headings or []:
        parts.extend([h] * 2)
    if body_text:
        # cap body at 10k chars to keep TF-IDF fast
        parts.append(body_text[:10000])
    return " ".join(parts)


def extract_topics(corpus: str, top_n: int = 10) -> list[str]:
    """
    Top TF-IDF terms (unigrams + bigrams) of a single weighted document.
    Used to suggest target keywords when none were supplied.
    """
    if not corpus.strip():
        return []

    tokens = _tokenize(corpus)
    if not tokens:
        return []

    try:
        vectorizer = TfidfVectorizer(ngram_range=(1, 2), max_features=200, sublinear_tf=True)
        matrix = vectorizer.fit_transform([" ".join(tokens)])
        scores = zip(vectorizer.get_feature_names_out(), matrix.toarray()[0])
        # tie-break on the term so output is stable across runs
        ranked = sorted(scores, key=lambda x: (-x[1], x[0]))
        return [term for term, score in ranked[:top_n] if score > 0]
    except ValueError as exc:
        logger.warning("TF-IDF extraction failed: %s", exc)
        return []
