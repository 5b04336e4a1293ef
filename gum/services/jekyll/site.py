from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

import yaml

from gum.errors import ConfigurationError

from .page import Page

logger = logging.getLogger(__name__)

CONFIG_FILE = "_config.yml"
POSTS_DIR = "_posts"

# Jekyll's built-in permalink styles.
PERMALINK_STYLES = {
    "": "/:year/:month/:day/:title.html",
    "date": "/:year/:month/:day/:title.html",
    "pretty": "/:year/:month/:day/:title/",
    "none": "/:title.html",
}


class Site:
    """A Jekyll site rooted at the directory holding ``_config.yml``."""

    def __init__(self, base: str, config: Optional[Dict[str, Any]] = None, posts: Optional[List[Page]] = None) -> None:
        self.base = base
        self.config: Dict[str, Any] = config or {}
        self.posts: List[Page] = posts or []

    @classmethod
    def load(cls, base: str) -> "Site":
        """Parse the site config and every post. Any failure is a configuration error."""
        site = cls(base)
        site.config = site._parse_config()
        site.posts = site._load_posts()
        return site

    def permalink_template(self) -> str:
        permalink = self.config.get("permalink")
        if not isinstance(permalink, str):
            permalink = ""
        return PERMALINK_STYLES.get(permalink, permalink)

    def posts_path(self) -> str:
        source = self.config.get("source")
        if not isinstance(source, str):
            source = ""
        return os.path.join(self.base, source, POSTS_DIR)

    def _parse_config(self) -> Dict[str, Any]:
        path = os.path.join(self.base, CONFIG_FILE)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as exc:
            raise ConfigurationError(f"cannot read Jekyll config {path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"invalid Jekyll config {path}: {exc}") from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Jekyll config {path} must be a mapping")
        return data

    def _load_posts(self) -> List[Page]:
        posts: List[Page] = []
        posts_path = self.posts_path()
        if not os.path.isdir(posts_path):
            logger.warning("Jekyll site %s has no posts directory at %s", self.base, posts_path)
            return posts

        for dirpath, dirnames, filenames in os.walk(posts_path):
            dirnames.sort()
            for filename in sorted(filenames):
                path = os.path.join(dirpath, filename)
                try:
                    posts.append(Page.from_file(path))
                except (OSError, UnicodeDecodeError) as exc:
                    raise ConfigurationError(f"cannot read post {path}: {exc}") from exc
                except ConfigurationError as exc:
                    raise ConfigurationError(f"error parsing post {path}: {exc}") from exc
        return posts
