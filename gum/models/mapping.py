from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Mapping:
    """A short path and the destination it redirects to.

    An empty ``permalink`` asks the store to delete ``short_path``.
    """

    short_path: str
    permalink: str = ""

    def __post_init__(self) -> None:
        if not self.short_path.startswith("/"):
            raise ValueError(f"short path must begin with '/': {self.short_path!r}")

    @property
    def is_delete(self) -> bool:
        return self.permalink == ""
