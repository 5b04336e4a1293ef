from .page import Page, parse_front_matter
from .site import Site

__all__ = ["Page", "Site", "parse_front_matter"]
