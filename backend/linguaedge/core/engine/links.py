"""Internal link rewriting - keeps navigation inside the active locale."""

import re

from bs4.element import Tag

from linguaedge.models.enums import TagKind

# Anything with a scheme (http:, mailto:, tel:, javascript:...) or a
# protocol-relative host is not an internal link.
_EXTERNAL_RE = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.\-]*:|//)")


def locale_prefix(language: str) -> str:
    return f"/{language}"


def is_internal_href(href: str) -> bool:
    if not href or href.startswith("#"):
        return False
    return not _EXTERNAL_RE.match(href)


def rewrite_href(href: str, language: str) -> str:
    """Prefix an internal href with the locale, exactly once.

    External, fragment, ``mailto:`` and ``tel:`` links are returned as-is.
    """
    if not is_internal_href(href):
        return href

    prefix = locale_prefix(language)
    rest = href[len(prefix):]
    if href.startswith(prefix) and (not rest or rest[0] in "/?#"):
        return href

    if href == "/":
        return prefix
    if href.startswith("/"):
        return prefix + href
    if href.startswith("./"):
        return f"{prefix}/{href[2:]}"
    return f"{prefix}/{href}"


def rewrite_links(root: Tag, language: str) -> int:
    """Rewrite every ``<a href>`` under ``root`` (root included).

    Returns:
        Number of links changed
    """
    anchors = root.find_all(TagKind.ANCHOR.value, href=True)
    if TagKind.of(root.name) is TagKind.ANCHOR and root.has_attr("href"):
        anchors.insert(0, root)

    changed = 0
    for anchor in anchors:
        href = anchor.get("href")
        if not isinstance(href, str):
            continue
        rewritten = rewrite_href(href, language)
        if rewritten != href:
            anchor["href"] = rewritten
            changed += 1
    return changed
