import re

from .models import Readability, SentenceStats
from .scorer import round_half_up

LONG_SENTENCE_WORDS = 20

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_SUFFIX_RE = re.compile(r"(?:[^laeiouy]es|ed|[^laeiouy]e)$")
_VOWEL_GROUP_RE = re.compile(r"[aeiouy]{1,2}")

# (lower bound, label), checked top-down against the clamped score
_GRADE_BANDS = (
    (90, "Very Easy"),
    (80, "Easy"),
    (70, "Fairly Easy"),
    (60, "Standard"),
    (50, "Fairly Difficult"),
    (30, "Difficult"),
)


def count_syllables(word: str) -> int:
    """
    Heuristic syllable count: vowel groups after stripping silent suffixes.
    Not dictionary-exact, but stable enough for Flesch scoring.
    """
    word = re.sub(r"[^a-z]", "", word.lower())
    if not word:
        return 0
    if len(word) <= 3:
        return 1
    word = _SUFFIX_RE.sub("", word)
    word = re.sub(r"^y", "", word)
    return max(1, len(_VOWEL_GROUP_RE.findall(word)))


def split_sentences(text: str) -> list[str]:
    # fragments of 5 chars or less are usually abbreviations / list markers
    return [s.strip() for s in _SENTENCE_SPLIT_RE.split(text or "") if len(s.strip()) > 5]


def grade_label(score: float) -> str:
    for floor, label in _GRADE_BANDS:
        if score >= floor:
            return label
    return "Very Difficult"


def compute_readability(text: str) -> Readability:
    """Flesch Reading Ease over already-visible text."""
    words = (text or "").split()
    sentences = split_sentences(text)
    if not words or not sentences:
        return Readability()

    syllables = sum(count_syllables(w) for w in words)
    words_per_sentence = len(words) / len(sentences)
    syllables_per_word = syllables / len(words)

    ease = 206.835 - 1.015 * words_per_sentence - 84.6 * syllables_per_word
    score = round_half_up(max(0.0, min(100.0, ease)))

    return Readability(
        score=score,
        grade=grade_label(score),
        avg_sentence_len=round(words_per_sentence, 1),
        avg_word_len=round(syllables_per_word, 2),
    )


def sentence_length_stats(text: str) -> SentenceStats:
    lengths = [len(s.split()) for s in split_sentences(text)]
    if not lengths:
        return SentenceStats()
    long_count = sum(1 for n in lengths if n > LONG_SENTENCE_WORDS)
    return SentenceStats(
        total=len(lengths),
        avg_length=round(sum(lengths) / len(lengths), 1),
        long_count=long_count,
        long_percent=round_half_up(long_count / len(lengths) * 100),
    )
