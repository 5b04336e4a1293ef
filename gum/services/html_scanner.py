"""Extract short link redirects from static HTML documents.

A document maps to redirects when it carries both a ``rel="shortlink"`` link
and a ``rel="canonical"`` link. Every shortlink (and every URL listed in its
``data-alt-href`` attribute) becomes a mapping to the first canonical URL.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Union
from urllib.parse import urlsplit

from selectolax.parser import HTMLParser

from gum.models.mapping import Mapping

logger = logging.getLogger(__name__)

REL_SHORTLINK = "shortlink"
REL_CANONICAL = "canonical"
ATTR_ALT_HREF = "data-alt-href"

LINK_TAGS = ("link", "a")


def scan_html(html: Union[str, bytes], *, source: Optional[str] = None) -> List[Mapping]:
    """Parse ``html`` and return the mappings it declares, in document order.

    Returns an empty list when the document has no shortlink or no canonical
    link. Shortlinks that cannot be parsed, or whose path is empty or ``/``,
    are skipped.
    """
    doc = HTMLParser(html)
    root = doc.root
    if root is None:
        return []

    permalink = ""
    shortlinks: List[str] = []
    for node in root.traverse():
        if node.tag not in LINK_TAGS:
            continue
        attrs = node.attributes
        href = attrs.get("href") or ""
        rel = attrs.get("rel") or ""
        if not href or not rel:
            continue
        for token in rel.split():
            if token == REL_SHORTLINK:
                shortlinks.append(href)
                shortlinks.extend((attrs.get(ATTR_ALT_HREF) or "").split())
            elif token == REL_CANONICAL and not permalink:
                permalink = href

    if not shortlinks or not permalink:
        return []

    mappings: List[Mapping] = []
    for link in shortlinks:
        path = _shortlink_path(link, source)
        if path is not None:
            mappings.append(Mapping(short_path=path, permalink=permalink))
    return mappings


def _shortlink_path(link: str, source: Optional[str]) -> Optional[str]:
    try:
        path = urlsplit(link).path
    except ValueError as exc:
        logger.warning("Error parsing shortlink %r in %s: %s", link, source or "<document>", exc)
        return None
    if len(path) <= 1:
        return None
    if not path.startswith("/"):
        logger.warning("Skipping relative shortlink %r in %s", link, source or "<document>")
        return None
    return path


def scan_file(path: str) -> List[Mapping]:
    """Read and scan one document. ``OSError`` propagates to the caller."""
    with open(path, "rb") as f:
        data = f.read()
    return scan_html(data, source=path)
