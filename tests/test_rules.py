import pytest
from auditor.models import CATEGORY_WEIGHTS, KeywordDensity, KeywordPlacement, PageSignals, SEVERITIES
from auditor.rules import RULES, Rule


def _fired(signals: PageSignals) -> set[str]:
    return {rule.id for rule in RULES if rule.predicate(signals)}


def test_rule_ids_are_unique():
    ids = [r.id for r in RULES]
    assert len(ids) == len(set(ids))


def test_rules_use_known_categories_and_severities():
    for rule in RULES:
        assert rule.category in CATEGORY_WEIGHTS, rule.id
        assert rule.severity in SEVERITIES, rule.id


def test_every_rule_evaluates_on_default_signals():
    s = PageSignals()
    for rule in RULES:
        if rule.predicate(s):
            assert isinstance(rule.points_for(s), int), rule.id
            assert rule.message_for(s), rule.id


def test_only_positive_signal_rules_have_negative_points():
    negative = {r.id for r in RULES if isinstance(r.points, int) and r.points < 0}
    assert negative == {"canonical_self", "faq_schema", "breadcrumb_schema"}


def test_callable_points_and_message():
    rule = Rule("x", "content", "low", lambda s: s.word_count * 2, lambda s: f"{s.word_count} words", lambda s: True)
    s = PageSignals(word_count=4)
    assert rule.points_for(s) == 8
    assert rule.message_for(s) == "4 words"


# --- mutually exclusive pairs ---

@pytest.mark.parametrize("title, expected", [
    (None, {"title_missing"}),
    ("", {"title_missing"}),
    ("Short", {"title_too_short"}),
    ("A reasonable page title that is long enough", set()),
    ("x" * 61, {"title_too_long"}),
])
def test_title_length_rules_are_exclusive(title, expected):
    fired = _fired(PageSignals(title=title)) & {"title_missing", "title_too_short", "title_too_long"}
    assert fired == expected


@pytest.mark.parametrize("description, expected", [
    (None, {"description_missing"}),
    ("Too short.", {"description_too_short"}),
    ("d" * 120, set()),
    ("d" * 161, {"description_too_long"}),
])
def test_description_length_rules_are_exclusive(description, expected):
    fired = _fired(PageSignals(meta_description=description))
    assert fired & {"description_missing", "description_too_short", "description_too_long"} == expected


def test_duplicate_tags_fire_even_when_content_is_fine():
    s = PageSignals(title="A reasonable page title that is long enough", title_count=2,
                    meta_description="d" * 120, meta_description_count=3)
    fired = _fired(s)
    assert {"title_duplicate_tags", "description_duplicate_tags"} <= fired
    assert not fired & {"title_missing", "title_too_short", "description_missing"}


def test_content_empty_and_thin_are_exclusive():
    assert "content_empty" in _fired(PageSignals(word_count=0))
    assert "content_thin" not in _fired(PageSignals(word_count=0))
    assert "content_thin" in _fired(PageSignals(word_count=120))
    assert not {"content_empty", "content_thin"} & _fired(PageSignals(word_count=800))


# --- canonical gating ---

def test_canonical_sub_checks_need_a_canonical_url():
    flags = dict(canonical_outside_head=True, canonical_is_relative=True, canonical_protocol_mismatch=True,
                 canonical_has_fragment=True, canonical_is_self=True, canonical_count=2)
    sub_checks = {"canonical_outside_head", "canonical_relative", "canonical_protocol_mismatch",
                  "canonical_fragment", "canonical_self", "canonical_multiple"}
    without = _fired(PageSignals(**flags))
    assert "canonical_missing" in without
    assert not without & sub_checks

    with_url = _fired(PageSignals(canonical_url="/x", **flags))
    assert sub_checks <= with_url
    assert "canonical_missing" not in with_url


# --- keywords ---

def test_stuffing_is_high_severity_even_with_perfect_placement():
    s = PageSignals(
        keywords=["seo"],
        keyword_density=[KeywordDensity("seo", count=10, density=5.0, status="stuffing")],
        keyword_placement=[KeywordPlacement("seo", True, True, True, True, True, True)],
    )
    keyword_rules = [r for r in RULES if r.category == "keywords" and r.predicate(s)]
    assert [r.id for r in keyword_rules] == ["keyword_stuffing"]
    assert keyword_rules[0].severity == "high"
    assert '"seo"' in keyword_rules[0].message_for(s)


def test_no_keywords_suggests_topics():
    rule = next(r for r in RULES if r.id == "no_keywords")
    s = PageSignals(topics=["tents", "camping"])
    assert rule.predicate(s)
    assert "tents, camping" in rule.message_for(s)


def test_placement_rules_name_the_keyword():
    s = PageSignals(
        keywords=["tents"],
        keyword_density=[KeywordDensity("tents", count=3, density=1.0, status="optimal")],
        keyword_placement=[KeywordPlacement("tents", in_title=False, in_meta_description=True, in_h1=True,
                                            in_url=True, in_first_100_words=True, in_subheadings=True)],
    )
    rule = next(r for r in RULES if r.id == "keyword_not_in_title")
    assert rule.predicate(s)
    assert rule.message_for(s) == 'Keyword(s) missing from the title: "tents"'


# --- links / images ---

def test_missing_alt_points_are_capped():
    rule = next(r for r in RULES if r.id == "images_missing_alt")
    assert rule.points_for(PageSignals(images_missing_alt_attribute=2)) == 6
    assert rule.points_for(PageSignals(images_missing_alt_attribute=50)) == 15


def test_generic_anchor_never_costs_more_than_empty_anchor():
    rule = next(r for r in RULES if r.id == "weak_anchor_text")
    for empty in range(0, 8):
        before = rule.points_for(PageSignals(empty_anchor_links=empty + 1))
        after = rule.points_for(PageSignals(empty_anchor_links=empty, generic_link_count=1))
        assert after <= before


def test_not_https_needs_a_url():
    assert "not_https" not in _fired(PageSignals())
    assert "not_https" in _fired(PageSignals(url="http://example.com/"))
    assert "not_https" not in _fired(PageSignals(url="https://example.com/", is_https=True))


def test_http_status_rule():
    assert "http_error" in _fired(PageSignals(http_status_code=404))
    assert "http_error" not in _fired(PageSignals(http_status_code=0))


def test_response_time_rules_are_exclusive():
    assert "slow_response" in _fired(PageSignals(response_time_ms=4500))
    assert "sluggish_response" not in _fired(PageSignals(response_time_ms=4500))
    assert "sluggish_response" in _fired(PageSignals(response_time_ms=1500))
    assert not {"slow_response", "sluggish_response"} & _fired(PageSignals(response_time_ms=None))
