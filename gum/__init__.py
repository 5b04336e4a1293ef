"""gum: a personal short URL redirection server."""

__version__ = "0.3.0"
