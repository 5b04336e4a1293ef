from __future__ import annotations

import datetime as dt
import io
import os
from typing import Any, Dict, List, Optional, TextIO

import yaml

from gum.errors import ConfigurationError
from gum.services.newbase60 import encode_int

DELIMITER = "---\n"

# Default string form of Ruby Time values, e.g. "2014-05-28 07:12:00 -0700".
RUBY_DATE_FORMAT = "%Y-%m-%d %H:%M:%S %z"

_UNIX_EPOCH = dt.datetime(1970, 1, 1, tzinfo=dt.timezone.utc)


class Page:
    """A Jekyll page or post: its file name plus parsed YAML front matter."""

    def __init__(self, name: str = "", front_matter: Optional[Dict[str, Any]] = None) -> None:
        self.name = name
        self.front_matter: Dict[str, Any] = front_matter or {}

    @classmethod
    def from_file(cls, path: str) -> "Page":
        with open(path, "r", encoding="utf-8") as f:
            return cls.parse(f, name=os.path.basename(path))

    @classmethod
    def parse(cls, stream: TextIO, *, name: str = "") -> "Page":
        page = cls(name=name)
        page.front_matter = parse_front_matter(stream)
        return page

    @classmethod
    def from_string(cls, text: str, *, name: str = "") -> "Page":
        return cls.parse(io.StringIO(text), name=name)

    def slug(self) -> str:
        """Slug from a ``YYYY-MM-DD-slug.ext`` file name."""
        base, _ext = os.path.splitext(self.name)
        parts = base.split("-", 3)
        return parts[3] if len(parts) == 4 else base

    def time(self) -> dt.datetime:
        """Publication time from the ``date`` key, else the file name."""
        value = self.front_matter.get("date")
        if isinstance(value, dt.datetime):
            return value
        if isinstance(value, dt.date):
            return dt.datetime(value.year, value.month, value.day)
        if isinstance(value, str):
            parsed = _parse_date(value)
            if parsed is not None:
                return parsed

        if self.name:
            parts = self.name.split("-", 3)
            if len(parts) >= 3:
                try:
                    return dt.datetime.strptime("-".join(parts[:3]), "%Y-%m-%d")
                except ValueError:
                    pass
        return _UNIX_EPOCH

    def short_urls(self) -> List[str]:
        """Short URLs declared in front matter.

        ``short_url``/``shortlink`` may be a string or a list of strings. A
        ``wordpress_id`` adds the NewBase60 ``/b/`` form and the old ``/p/``
        numeric form used by posts imported from WordPress.
        """
        urls: List[str] = []
        for key in ("short_url", "shortlink"):
            if key not in self.front_matter:
                continue
            value = self.front_matter[key]
            if isinstance(value, str):
                urls.append(value)
            elif isinstance(value, list):
                urls.extend(v for v in value if isinstance(v, str))
            elif value is not None:
                raise ConfigurationError(f"unable to parse {key} in {self.name or 'page'}: {value!r}")

        if "wordpress_id" in self.front_matter:
            wp_id = self.front_matter["wordpress_id"]
            if not isinstance(wp_id, int) or isinstance(wp_id, bool):
                raise ConfigurationError(f"unable to parse wordpress_id in {self.name or 'page'}: {wp_id!r}")
            urls.append(f"/b/{encode_int(wp_id)}")
            urls.append(f"/p/{wp_id}")
        return urls

    def permalink(self, template: str) -> str:
        perm = self.front_matter.get("permalink")
        if isinstance(perm, str):
            return perm

        t = self.time()
        replacements = [
            (":short_year", str(t.year % 100)),
            (":i_month", str(t.month)),
            (":i_day", str(t.day)),
            (":year", str(t.year)),
            (":month", f"{t.month:02d}"),
            (":day", f"{t.day:02d}"),
            (":title", self.slug()),
        ]
        out = template
        for placeholder, value in replacements:
            out = out.replace(placeholder, value)
        return out

    def __repr__(self) -> str:
        return f"Page(name={self.name!r})"


def parse_front_matter(stream: TextIO) -> Dict[str, Any]:
    """Read YAML front matter between leading ``---`` lines.

    A stream that does not start with the delimiter has no front matter. A
    block that is never closed is an error.
    """
    first = stream.readline()
    if first != DELIMITER:
        return {}

    lines: List[str] = []
    for line in stream:
        if line == DELIMITER:
            break
        lines.append(line)
    else:
        raise ConfigurationError("front matter is not terminated")

    try:
        data = yaml.safe_load("".join(lines))
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"invalid front matter: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"front matter must be a mapping, got {type(data).__name__}")
    return data


def _parse_date(value: str) -> Optional[dt.datetime]:
    try:
        return dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        pass
    try:
        return dt.datetime.strptime(value, RUBY_DATE_FORMAT)
    except ValueError:
        return None
