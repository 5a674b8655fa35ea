import pytest
from auditor.accessibility import extract_accessibility, is_focusable
from auditor.parser import load


def _a11y(body: str, body_attrs: str = "") -> dict:
    return extract_accessibility(load(f"<html><head></head><body {body_attrs}>{body}</body></html>"))


def test_landmarks_from_tags():
    result = _a11y("<header>Site</header><nav>Links</nav><main>Content</main><footer>Foot</footer>")
    assert result["has_main_landmark"]
    assert result["has_nav_landmark"]
    assert result["has_banner_landmark"]
    assert result["has_contentinfo_landmark"]


def test_landmarks_from_roles():
    result = _a11y('<div role="banner"></div><div role="main"></div><div role="contentinfo"></div>')
    assert result["has_main_landmark"]
    assert result["has_banner_landmark"]
    assert result["has_contentinfo_landmark"]
    assert not result["has_nav_landmark"]


def test_header_inside_article_is_not_a_banner():
    result = _a11y("<main><article><header>Post title</header><footer>Post meta</footer></article></main>")
    assert not result["has_banner_landmark"]
    assert not result["has_contentinfo_landmark"]


def test_tag_with_matching_role_counts_once():
    result = _a11y('<header role="banner">Site</header>')
    assert result["has_banner_landmark"]
    assert not result["duplicate_banner_landmark"]


def test_duplicate_banners_and_unlabelled_navs():
    result = _a11y('<header>A</header><header>B</header><nav>One</nav><nav aria-label="Footer">Two</nav>')
    assert result["duplicate_banner_landmark"]
    assert result["multiple_nav_without_label"]


def test_form_labels():
    result = _a11y("""
        <label for="email">Email</label><input id="email" type="email">
        <label>Name <input type="text"></label>
        <input type="text" aria-label="Search">
        <input type="text" placeholder="unlabelled">
        <input type="hidden" name="token">
        <input type="submit" value="Go">
        <select><option>One</option></select>
        <textarea></textarea>
    """)
    assert result["form_without_labels"] == 3
    assert result["select_without_label"] == 1


def test_duplicate_ids():
    result = _a11y('<div id="a"></div><div id="a"></div><div id="b"></div><span id="c"></span><span id="c"></span>')
    assert result["duplicate_ids"] == ["a", "c"]


def test_focusable_inside_aria_hidden():
    result = _a11y("""
        <div aria-hidden="true">
            <a href="/x">Link</a>
            <button>Btn</button>
            <a href="/y" tabindex="-1">Removed from tab order</a>
            <span>Not focusable</span>
        </div>
        <a href="/visible">Visible</a>
    """)
    assert result["focusable_aria_hidden"] == 2


def test_aria_hidden_on_body():
    assert _a11y("<p>x</p>", body_attrs='aria-hidden="true"')["aria_hidden_on_body"]


def test_positive_tabindex():
    result = _a11y('<div tabindex="0"></div><a href="/" tabindex="3">x</a><input tabindex="1" aria-label="q">')
    assert result["tabindex_positive"] == 2


def test_nested_interactive():
    result = _a11y('<a href="/buy"><button>Buy now</button></a><button>Plain</button>')
    assert result["nested_interactive"] == 1


def test_empty_buttons():
    result = _a11y("""
        <button></button>
        <button aria-label="Close"></button>
        <button><img src="x.png" alt="Search"></button>
        <button><img src="x.png"></button>
        <button>Save</button>
    """)
    assert result["empty_buttons"] == 2


def test_iframe_table_and_deprecated_tags():
    result = _a11y("""
        <iframe src="/a"></iframe><iframe src="/b" title="Map"></iframe>
        <table><tr><td>1</td></tr></table>
        <table><tr><th>H</th></tr></table>
        <center><font>old</font></center>
        <object data="x.swf"></object>
    """)
    assert result["iframes_without_title"] == 1
    assert result["tables_without_headers"] == 1
    assert result["deprecated_tags_found"] == ["center", "font"]
    assert result["plugin_elements"] == 1


def test_invalid_aria_roles():
    result = _a11y('<div role="navigation"></div><div role="banana"></div><div role="button fancy"></div>')
    assert result["invalid_aria_roles"] == ["banana", "fancy"]


def test_skip_link_and_autofocus():
    result = _a11y('<a href="#main">Skip to content</a><input autofocus aria-label="q">')
    assert result["has_skip_link"]
    assert result["autofocus_elements"] == 1


def test_dom_depth():
    deep = "<div>" * 40 + "x" + "</div>" * 40
    result = _a11y(deep)
    assert result["max_dom_depth"] > 32
    assert result["excessive_dom_depth"]
    assert not _a11y("<div><p>x</p></div>")["excessive_dom_depth"]


@pytest.mark.parametrize("html, expected", [
    ('<a href="/">x</a>', True),
    ("<a>x</a>", False),
    ('<input type="hidden">', False),
    ("<button disabled>x</button>", False),
    ('<div tabindex="0">x</div>', True),
    ('<button tabindex="-1">x</button>', False),
])
def test_is_focusable(html, expected):
    tag = load(html).body.find(True)
    assert is_focusable(tag) is expected
