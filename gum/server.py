"""The gum server: mapping table, ingestion channel and HTTP application.

Usage:
    from gum.server import Server
    from gum.handlers import RedirectHandler, StaticHandler

    server = Server()
    server.add_handler(RedirectHandler("w", "/wiki/"))
    server.add_handler(StaticHandler("/var/www/site"))
    app = server.app  # serve with uvicorn

Handlers must be added before ``app`` is first used; their routes are
mounted ahead of the catch-all dispatcher.
"""
from __future__ import annotations

import logging
import threading
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import APIRouter, FastAPI

from gum import __version__
from gum.api.routers.dispatch import create_router
from gum.db.ingest import MappingChannel, drain
from gum.db.mapping_store import MappingStore
from gum.handlers.base import Handler

logger = logging.getLogger(__name__)


class Server:
    def __init__(self) -> None:
        self.store = MappingStore()
        self.channel = MappingChannel()
        self._routes = APIRouter()
        self._handlers: List[Handler] = []
        self._threads: List[threading.Thread] = []
        self._app: Optional[FastAPI] = None
        self._lock = threading.Lock()
        self._closed = False

        self._drain_thread = threading.Thread(
            target=drain, args=(self.channel, self.store), name="gum-drain", daemon=True
        )
        self._drain_thread.start()

    def add_handler(self, handler: Handler) -> None:
        """Register ``handler``'s routes and start its mapping producer."""
        with self._lock:
            if self._app is not None:
                raise RuntimeError("handlers must be added before the application is built")
            if self._closed:
                raise RuntimeError("server is closed")
            handler.register(self._routes)
            self._handlers.append(handler)
            thread = threading.Thread(
                target=self._run_producer,
                args=(handler,),
                name=f"gum-{handler.name}-{len(self._handlers)}",
                daemon=True,
            )
            self._threads.append(thread)
        thread.start()

    def _run_producer(self, handler: Handler) -> None:
        try:
            handler.mappings(self.channel.sender())
        except Exception:
            logger.exception("Mapping producer for %s handler stopped with an error", handler.name)

    @property
    def app(self) -> FastAPI:
        with self._lock:
            if self._app is None:
                self._app = self._build_app()
            return self._app

    def _build_app(self) -> FastAPI:
        @asynccontextmanager
        async def lifespan(app: FastAPI):
            """Stop producers and the drain thread on shutdown."""
            try:
                yield
            finally:
                self.close()

        app = FastAPI(
            title="gum",
            version=__version__,
            lifespan=lifespan,
            docs_url=None,
            redoc_url=None,
            openapi_url=None,
        )
        app.include_router(self._routes)
        app.include_router(create_router(self.store))
        return app

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until every mapping sent so far has been applied."""
        return self.channel.wait_idle(timeout)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            handlers = list(self._handlers)
        for handler in handlers:
            try:
                handler.close()
            except Exception:
                logger.exception("Error closing %s handler", handler.name)
        self.channel.close()
        self._drain_thread.join(5)
