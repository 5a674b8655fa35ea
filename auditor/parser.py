import re
from typing import Optional

from bs4 import BeautifulSoup, Tag

# elements whose text never counts as readable page content
NON_CONTENT_TAGS = ["script", "style", "noscript", "template", "svg", "nav", "footer"]


def load(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "lxml")


def clean_text(raw: str) -> str:
    """Collapse whitespace and strip control characters from extracted text."""
    text = re.sub(r"[\r\n\t]+", " ", raw or "")
    text = re.sub(r" {2,}", " ", text)
    return text.strip()


def get_meta(soup: BeautifulSoup, name: str = None, prop: str = None) -> Optional[str]:
    """Pull content from a <meta> tag by name or property attribute (case-insensitive)."""
    tag = None
    if name:
        tag = soup.find("meta", attrs={"name": lambda v: v and v.strip().lower() == name})
    if not tag and prop:
        tag = soup.find("meta", attrs={"property": lambda v: v and v.strip().lower() == prop})
    if tag:
        return clean_text(tag.get("content") or "") or None
    return None


def count_meta(soup: BeautifulSoup, name: str) -> int:
    return len(soup.find_all("meta", attrs={"name": lambda v: v and v.strip().lower() == name}))


def rel_tokens(tag: Tag) -> list[str]:
    """bs4 already splits multi-valued rel into a list; normalise either way."""
    rel = tag.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return [r.lower() for r in rel]


def find_links(soup: BeautifulSoup, rel: str) -> list[Tag]:
    return [tag for tag in soup.find_all("link") if rel in rel_tokens(tag)]


def element_text(tag: Tag) -> str:
    return clean_text(tag.get_text(separator=" "))


def visible_text(html: str) -> str:
    """
    Readable body text: scripts, styles, navigation and footer removed.
    Parses a fresh tree because decompose() mutates it.
    """
    soup = load(html)
    for tag in soup(NON_CONTENT_TAGS):
        tag.decompose()
    body = soup.find("body")
    raw = body.get_text(separator=" ") if body else ""
    return clean_text(raw)


def paragraphs(soup: BeautifulSoup) -> list[str]:
    texts = (element_text(p) for p in soup.find_all("p"))
    return [t for t in texts if len(t) > 10]
