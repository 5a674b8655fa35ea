import json
import logging

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

# schema.org type families and the properties rich results need from them
_ARTICLE_TYPES = {"article", "newsarticle", "blogposting", "techarticle", "scholarlyarticle", "report"}
_LOCAL_BUSINESS_TYPES = {
    "localbusiness", "restaurant", "store", "cafeorcoffeeshop", "bakery", "barorpub",
    "dentist", "medicalbusiness", "autorepair", "hotel", "legalservice", "homeandconstructionbusiness",
    "professionalservice", "healthandbeautybusiness", "foodestablishment",
}
REQUIRED_PROPERTIES = {
    "Article": ("headline", "author", "datePublished", "image", "publisher"),
    "Product": ("name", "offers", "image", "brand"),
    "LocalBusiness": ("address", "telephone", "openingHours", "geo"),
}
# alternative property names that satisfy a requirement
_EQUIVALENTS = {"openingHours": ("openingHours", "openingHoursSpecification")}


def _types_of(item: dict) -> list[str]:
    raw = item.get("@type")
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, list):
        return [t for t in raw if isinstance(t, str)]
    return []


def _flatten(data) -> list[dict]:
    """Top-level item(s) plus any @graph members."""
    items = data if isinstance(data, list) else [data]
    flat = []
    for item in items:
        if not isinstance(item, dict):
            continue
        flat.append(item)
        graph = item.get("@graph")
        if isinstance(graph, list):
            flat.extend(g for g in graph if isinstance(g, dict))
    return flat


def _family(schema_type: str):
    lower = schema_type.lower()
    if lower in _ARTICLE_TYPES:
        return "Article"
    if lower == "product":
        return "Product"
    if lower in _LOCAL_BUSINESS_TYPES:
        return "LocalBusiness"
    return None


def missing_properties(item: dict, family: str) -> list[str]:
    missing = []
    for prop in REQUIRED_PROPERTIES[family]:
        names = _EQUIVALENTS.get(prop, (prop,))
        if not any(item.get(name) not in (None, "", [], {}) for name in names):
            missing.append(prop)
    return missing


def _is_json_ld(tag) -> bool:
    return (tag.get("type") or "").split(";")[0].strip().lower() == "application/ld+json"


def extract_structured_data(soup: BeautifulSoup) -> dict:
    """
    Parse every JSON-LD block on its own, so one malformed block never hides
    the others, then run completeness checks per recognised type.
    """
    blocks = [s for s in soup.find_all("script") if _is_json_ld(s)]
    valid = invalid = 0
    items: list[dict] = []

    for block in blocks:
        raw = block.string if block.string is not None else block.get_text()
        try:
            data = json.loads(raw)
        except (TypeError, ValueError, RecursionError) as exc:
            # RecursionError: nesting deeper than the decoder can follow
            invalid += 1
            logger.debug("Malformed JSON-LD block: %s", exc)
            continue
        valid += 1
        items.extend(_flatten(data))

    schema_types: list[str] = []
    schema_issues: list[str] = []
    for item in items:
        for schema_type in _types_of(item):
            if schema_type not in schema_types:
                schema_types.append(schema_type)
            family = _family(schema_type)
            if family:
                missing = missing_properties(item, family)
                if missing:
                    schema_issues.append(f"{schema_type} schema missing: {', '.join(missing)}")

    microdata_types = []
    for tag in soup.find_all(attrs={"itemtype": True}):
        name = (tag.get("itemtype") or "").rstrip("/").rsplit("/", 1)[-1]
        if name and name not in microdata_types:
            microdata_types.append(name)

    lower_types = {t.lower() for t in schema_types} | {t.lower() for t in microdata_types}
    return {
        "schema_markup": bool(schema_types or microdata_types),
        "schema_types": schema_types,
        "json_ld_validity": {"count": len(blocks), "valid": valid, "invalid": invalid},
        "schema_issues": schema_issues,
        "has_faq_schema": "faqpage" in lower_types,
        "has_breadcrumb_schema": "breadcrumblist" in lower_types,
        "has_microdata": bool(soup.find(attrs={"itemscope": True})),
        "microdata_types": microdata_types,
    }
