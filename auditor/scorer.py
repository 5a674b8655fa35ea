import math
import logging

from .models import CATEGORY_WEIGHTS, CategoryScore, Issue, PageSignals, ScoreResult
from .rules import RULES, Rule
from .url_analysis import analyze_url

logger = logging.getLogger(__name__)

# (lower bound, grade), checked top-down against the overall score
GRADE_BANDS = ((90, "A"), (75, "B"), (60, "C"), (40, "D"))


def round_half_up(value: float) -> int:
    """round() in Python is banker's rounding; scores round .5 upwards."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: int = 0, high: int = 100) -> float:
    return max(low, min(high, value))


def grade_for(score: int) -> str:
    for floor, grade in GRADE_BANDS:
        if score >= floor:
            return grade
    return "F"


def score_signals(signals: PageSignals, rules: tuple[Rule, ...] = RULES) -> ScoreResult:
    """
    Run every rule over the signals. Matching rules subtract their points from
    their category and add an Issue; categories are clamped to [0, 100] only
    after all rules ran, so penalty order never changes a score.
    """
    running = {name: 100 for name in CATEGORY_WEIGHTS}
    issues: list[Issue] = []

    for rule in rules:
        if not rule.predicate(signals):
            continue
        points = rule.points_for(signals)
        running[rule.category] -= points
        issues.append(Issue(
            category=rule.category,
            severity=rule.severity,
            message=rule.message_for(signals),
            impact=round_half_up(points * CATEGORY_WEIGHTS[rule.category] / 100),
            rule=rule.id,
        ))

    categories = {
        name: CategoryScore(weight=weight, score=round_half_up(clamp(running[name])))
        for name, weight in CATEGORY_WEIGHTS.items()
    }
    overall = round_half_up(clamp(sum(c.score * c.weight / 100 for c in categories.values())))

    return ScoreResult(
        overall=overall,
        grade=grade_for(overall),
        categories=categories,
        issues=issues,
        issue_count=len(issues),
        high_issues=sum(1 for i in issues if i.severity == "high"),
        medium_issues=sum(1 for i in issues if i.severity == "medium"),
        low_issues=sum(1 for i in issues if i.severity == "low"),
    )


def score_payload(data: dict) -> ScoreResult:
    """
    Score hand-supplied signal fields without fetching anything.
    When a url is given without url_analysis, the URL is linted first.
    """
    data = dict(data or {})
    if data.get("url") and not data.get("url_analysis"):
        data["url_analysis"] = analyze_url(data["url"]).__dict__
    signals = PageSignals.from_dict(data, strict=True)
    logger.debug("Scoring %d supplied fields for %s", len(data), signals.url or "(no url)")
    return score_signals(signals)
