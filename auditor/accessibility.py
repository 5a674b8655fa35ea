import re
from collections import Counter

from bs4 import BeautifulSoup, Tag

EXCESSIVE_DOM_DEPTH = 32

DEPRECATED_TAGS = (
    "acronym", "applet", "basefont", "big", "blink", "center", "dir", "font",
    "frame", "frameset", "isindex", "marquee", "strike", "tt",
)
PLUGIN_TAGS = ("object", "embed", "applet")

# WAI-ARIA 1.2 roles (abstract roles excluded)
VALID_ROLES = {
    "alert", "alertdialog", "application", "article", "banner", "blockquote", "button", "caption",
    "cell", "checkbox", "code", "columnheader", "combobox", "complementary", "contentinfo",
    "definition", "deletion", "dialog", "directory", "document", "emphasis", "feed", "figure",
    "form", "generic", "grid", "gridcell", "group", "heading", "img", "insertion", "link", "list",
    "listbox", "listitem", "log", "main", "marquee", "math", "meter", "menu", "menubar",
    "menuitem", "menuitemcheckbox", "menuitemradio", "navigation", "none", "note", "option",
    "paragraph", "presentation", "progressbar", "radio", "radiogroup", "region", "row",
    "rowgroup", "rowheader", "scrollbar", "search", "searchbox", "separator", "slider",
    "spinbutton", "status", "strong", "subscript", "superscript", "switch", "tab", "table",
    "tablist", "tabpanel", "term", "textbox", "time", "timer", "toolbar", "tooltip", "tree",
    "treegrid", "treeitem", "image",
}

# header/footer only map to banner/contentinfo when not scoped to a sectioning element
_SECTIONING = ["article", "aside", "main", "nav", "section"]
_UNLABELLED_INPUT_TYPES = {"hidden", "submit", "button", "reset", "image"}
_SKIP_LINK_RE = re.compile(r"skip|jump to (main|content)", re.IGNORECASE)


def _role(tag: Tag) -> str:
    return (tag.get("role") or "").strip().lower()


def _tabindex(tag: Tag):
    try:
        return int(str(tag.get("tabindex")).strip())
    except (TypeError, ValueError):
        return None


def is_focusable(tag: Tag) -> bool:
    tabindex = _tabindex(tag)
    if tabindex is not None:
        return tabindex >= 0
    if tag.has_attr("disabled"):
        return False
    if tag.name in ("a", "area"):
        return tag.has_attr("href")
    if tag.name == "input":
        return (tag.get("type") or "").lower() != "hidden"
    return tag.name in ("button", "select", "textarea", "iframe", "summary") or tag.has_attr("contenteditable")


def is_interactive(tag: Tag) -> bool:
    if tag.name == "a":
        return tag.has_attr("href")
    if tag.name == "input":
        return (tag.get("type") or "").lower() != "hidden"
    return tag.name in ("button", "select", "textarea", "details", "iframe", "embed")


def _landmarks(soup: BeautifulSoup, tag_name: str, role: str, scoped: bool = False) -> list[Tag]:
    found = soup.find_all(attrs={"role": lambda v: v and v.strip().lower() == role})
    for tag in soup.find_all(tag_name):
        if scoped and tag.find_parent(_SECTIONING) is not None:
            continue
        if not any(tag is f for f in found):
            found.append(tag)
    return found


def _has_label(field: Tag, label_for: set) -> bool:
    if field.get("aria-label", "").strip() or field.get("aria-labelledby", "").strip() or field.get("title", "").strip():
        return True
    if field.get("id") and field["id"] in label_for:
        return True
    return field.find_parent("label") is not None


def _dom_depth(soup: BeautifulSoup) -> int:
    deepest = 0
    for tag in soup.find_all(True):
        depth = sum(1 for _ in tag.parents) - 1   # BeautifulSoup object itself is a parent
        deepest = max(deepest, depth)
    return deepest


def extract_accessibility(soup: BeautifulSoup) -> dict:
    main = _landmarks(soup, "main", "main")
    navs = _landmarks(soup, "nav", "navigation")
    banners = _landmarks(soup, "header", "banner", scoped=True)
    footers = _landmarks(soup, "footer", "contentinfo", scoped=True)
    unlabelled_navs = [n for n in navs if not (n.get("aria-label") or n.get("aria-labelledby"))]

    label_for = {lbl.get("for") for lbl in soup.find_all("label") if lbl.get("for")}
    unlabelled = 0
    unlabelled_selects = 0
    for field in soup.find_all(["input", "select", "textarea"]):
        if field.name == "input" and (field.get("type") or "text").lower() in _UNLABELLED_INPUT_TYPES:
            continue
        if not _has_label(field, label_for):
            unlabelled += 1
            if field.name == "select":
                unlabelled_selects += 1

    ids = Counter(tag["id"] for tag in soup.find_all(id=True) if isinstance(tag.get("id"), str) and tag["id"].strip())
    duplicate_ids = sorted(i for i, n in ids.items() if n > 1)

    # focusable elements inside (or carrying) aria-hidden="true"
    focusable_hidden = set()
    for hidden in soup.find_all(attrs={"aria-hidden": lambda v: v and v.strip().lower() == "true"}):
        for tag in [hidden, *hidden.find_all(True)]:
            if is_focusable(tag):
                focusable_hidden.add(id(tag))
    body = soup.find("body")

    nested_interactive = 0
    for tag in soup.find_all(True):
        if not is_interactive(tag):
            continue
        parent = tag.find_parent(lambda p: p.name in ("a", "button") and is_interactive(p))
        if parent is not None:
            nested_interactive += 1

    empty_buttons = 0
    for button in soup.find_all("button"):
        img = button.find("img")
        if not (button.get_text(strip=True) or button.get("aria-label", "").strip()
                or button.get("aria-labelledby") or button.get("title", "").strip()
                or (img is not None and (img.get("alt") or "").strip())):
            empty_buttons += 1

    invalid_roles = []
    for tag in soup.find_all(attrs={"role": True}):
        for role in _role(tag).split():
            if role not in VALID_ROLES and role not in invalid_roles:
                invalid_roles.append(role)

    skip_link = any(
        (a.get("href") or "").startswith("#") and len(a.get("href")) > 1 and _SKIP_LINK_RE.search(a.get_text(" ", strip=True))
        for a in soup.find_all("a")[:10]
    )
    deprecated = sorted({t.name for t in soup.find_all(list(DEPRECATED_TAGS))})
    depth = _dom_depth(soup)

    return {
        "has_main_landmark": bool(main),
        "has_nav_landmark": bool(navs),
        "has_banner_landmark": bool(banners),
        "has_contentinfo_landmark": bool(footers),
        "duplicate_banner_landmark": len(banners) > 1,
        "duplicate_contentinfo_landmark": len(footers) > 1,
        "multiple_nav_without_label": len(navs) > 1 and len(unlabelled_navs) > 0,
        "form_without_labels": unlabelled,
        "select_without_label": unlabelled_selects,
        "duplicate_ids": duplicate_ids[:50],
        "focusable_aria_hidden": len(focusable_hidden),
        "aria_hidden_on_body": body is not None and (body.get("aria-hidden") or "").strip().lower() == "true",
        "tabindex_positive": sum(1 for t in soup.find_all(attrs={"tabindex": True}) if (_tabindex(t) or 0) > 0),
        "nested_interactive": nested_interactive,
        "empty_buttons": empty_buttons,
        "iframes_without_title": sum(1 for f in soup.find_all("iframe") if not (f.get("title") or "").strip()),
        "has_skip_link": skip_link,
        "autofocus_elements": len(soup.find_all(attrs={"autofocus": True})),
        "invalid_aria_roles": invalid_roles,
        "tables_without_headers": sum(1 for t in soup.find_all("table") if t.find("th") is None),
        "deprecated_tags_found": deprecated,
        "plugin_elements": len(soup.find_all(list(PLUGIN_TAGS))),
        "total_dom_elements": len(soup.find_all(True)),
        "max_dom_depth": depth,
        "excessive_dom_depth": depth > EXCESSIVE_DOM_DEPTH,
    }
