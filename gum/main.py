"""Application factory.

Run with uvicorn's factory mode:

    uvicorn --factory gum.main:create_app
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI

from gum.config import Settings, load_settings
from gum.handlers import JekyllHandler, RedirectHandler, StaticHandler
from gum.server import Server

logger = logging.getLogger(__name__)


def build_server(settings: Settings) -> Server:
    """Construct a Server with every handler named in ``settings``.

    Handler construction errors (ConfigurationError) propagate; no server
    threads are left running when that happens.
    """
    handlers = [RedirectHandler(r.prefix, r.destination) for r in settings.redirects]
    for root in settings.static_roots:
        handlers.append(StaticHandler(root, extensions=settings.document_extensions))
    if settings.jekyll_root:
        handlers.append(JekyllHandler(settings.jekyll_root))

    server = Server()
    for handler in handlers:
        server.add_handler(handler)
    return server


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    return build_server(settings or load_settings()).app
