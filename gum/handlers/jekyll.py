from __future__ import annotations

import logging
from typing import List

from gum.db.ingest import MappingSender
from gum.errors import ConfigurationError
from gum.models.mapping import Mapping
from gum.services.jekyll import Site

from .base import Handler

logger = logging.getLogger(__name__)


class JekyllHandler(Handler):
    """Short URLs for Jekyll posts, taken from post front matter.

    The site is parsed once at construction; ``mappings`` sends one record per
    short URL and returns.
    """

    name = "jekyll"

    def __init__(self, base: str) -> None:
        self.site = Site.load(base)
        self._mappings = self._build_mappings()

    def _build_mappings(self) -> List[Mapping]:
        template = self.site.permalink_template()
        out: List[Mapping] = []
        for post in self.site.posts:
            permalink = post.permalink(template)
            try:
                short_urls = post.short_urls()
            except ConfigurationError as exc:
                raise ConfigurationError(f"error reading short urls for {post.name}: {exc}") from exc
            for url in short_urls:
                if not url:
                    continue
                if not url.startswith("/"):
                    logger.warning("Skipping short url %r for %s: must begin with '/'", url, post.name)
                    continue
                out.append(Mapping(short_path=url, permalink=permalink))
        return out

    def mappings(self, sender: MappingSender) -> None:
        logger.info("Jekyll handler added for site: %s", self.site.base)
        for mapping in self._mappings:
            sender.send(mapping)
        logger.info("Loaded %d mappings from %s", len(self._mappings), self.site.base)
