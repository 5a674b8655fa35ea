import pytest
from auditor.parser import load
from auditor.schema import extract_structured_data, missing_properties


def _page(*blocks: str, extra: str = "") -> str:
    scripts = "".join(f'<script type="application/ld+json">{b}</script>' for b in blocks)
    return f"<html><head>{scripts}</head><body>{extra}</body></html>"


def test_one_malformed_block_does_not_hide_the_other():
    html = _page(
        '{"@context": "https://schema.org", "@type": "Article", "headline": "Hi"}',
        '{"@type": "Product", "name": ',
    )
    data = extract_structured_data(load(html))
    assert data["json_ld_validity"] == {"count": 2, "valid": 1, "invalid": 1}
    assert data["schema_types"] == ["Article"]
    # type checks still ran against the valid block
    assert data["schema_issues"] == ["Article schema missing: author, datePublished, image, publisher"]


def test_deeply_nested_block_counts_as_invalid():
    depth = 100000
    html = _page(
        "[" * depth + "]" * depth,
        '{"@type": "Article", "headline": "H", "author": "A", "datePublished": "2024-01-01",'
        ' "image": "https://x/y.jpg", "publisher": "P"}',
    )
    data = extract_structured_data(load(html))
    assert data["json_ld_validity"] == {"count": 2, "valid": 1, "invalid": 1}
    assert data["schema_types"] == ["Article"]
    assert data["schema_markup"] is True


def test_complete_article_has_no_issues():
    html = _page("""{
        "@type": "BlogPosting", "headline": "H", "author": {"name": "A"},
        "datePublished": "2024-01-01", "image": "https://x/y.jpg", "publisher": {"name": "P"}
    }""")
    data = extract_structured_data(load(html))
    assert data["schema_markup"] is True
    assert data["schema_issues"] == []


def test_graph_is_flattened():
    html = _page("""{
        "@context": "https://schema.org",
        "@graph": [
            {"@type": "WebPage", "name": "Home"},
            {"@type": "BreadcrumbList", "itemListElement": []},
            {"@type": "FAQPage", "mainEntity": []}
        ]
    }""")
    data = extract_structured_data(load(html))
    assert data["schema_types"] == ["WebPage", "BreadcrumbList", "FAQPage"]
    assert data["has_breadcrumb_schema"] is True
    assert data["has_faq_schema"] is True


def test_top_level_array_and_multiple_types():
    html = _page('[{"@type": ["Product", "Thing"], "name": "Tent", "offers": {}, "image": "a.jpg", "brand": "X"}]')
    data = extract_structured_data(load(html))
    assert data["schema_types"] == ["Product", "Thing"]
    # an empty offers object does not satisfy the requirement
    assert data["schema_issues"] == ["Product schema missing: offers"]


def test_local_business_accepts_opening_hours_specification():
    item = {
        "@type": "Restaurant", "address": "1 Main St", "telephone": "555",
        "openingHoursSpecification": [{"dayOfWeek": "Monday"}], "geo": {"latitude": 1},
    }
    assert missing_properties(item, "LocalBusiness") == []


def test_microdata_detected():
    html = _page(extra='<div itemscope itemtype="https://schema.org/Recipe/"><span itemprop="name">Soup</span></div>')
    data = extract_structured_data(load(html))
    assert data["has_microdata"] is True
    assert data["microdata_types"] == ["Recipe"]
    assert data["schema_markup"] is True
    assert data["json_ld_validity"] == {"count": 0, "valid": 0, "invalid": 0}


def test_no_structured_data():
    data = extract_structured_data(load("<html><body><p>plain</p></body></html>"))
    assert data["schema_markup"] is False
    assert data["schema_types"] == []
    assert data["has_faq_schema"] is False


@pytest.mark.parametrize("block", ["", "null", "42", '"just a string"'])
def test_odd_json_values_do_not_raise(block):
    data = extract_structured_data(load(_page(block)))
    assert data["json_ld_validity"]["count"] == 1
