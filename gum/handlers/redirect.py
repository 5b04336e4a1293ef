import logging
from urllib.parse import urljoin, urlsplit

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse

from gum.errors import ConfigurationError

from .base import METHODS, Handler

logger = logging.getLogger(__name__)


class RedirectHandler(Handler):
    """Redirect every URL under a path prefix to a destination base URL.

    With prefix ``x`` and destination ``http://example/``::

        /x          =>  http://example/
        /x/         =>  http://example/
        /x/a/b?c=d  =>  http://example/a/b?c=d

    ``/x123`` is not handled. The rest of the path is resolved against the
    destination as a relative reference, so a destination path without a
    trailing slash has its last segment replaced. An empty prefix claims
    every path.
    """

    name = "redirect"

    def __init__(self, prefix: str, destination: str, *, status_code: int = 301) -> None:
        try:
            urlsplit(destination)
        except ValueError as exc:
            raise ConfigurationError(f"invalid redirect destination {destination!r}: {exc}") from exc
        self.prefix = prefix.strip("/")
        self.destination = destination
        self.status_code = int(status_code)

    def rewrite(self, path: str, query: str = "") -> str:
        rest = path
        if rest.startswith("/" + self.prefix):
            rest = rest[len(self.prefix) + 1 :]
        if rest.startswith("/"):
            rest = rest[1:]
        # keep a leading "seg:" from being read as a URL scheme
        if ":" in rest.split("/", 1)[0]:
            rest = "./" + rest
        if query:
            rest = f"{rest}?{query}"
        return urljoin(self.destination or "/", rest)

    def serve(self, request: Request) -> RedirectResponse:
        target = self.rewrite(request.url.path, request.url.query)
        return RedirectResponse(target, status_code=self.status_code)

    def register(self, router: APIRouter) -> None:
        logger.info("New redirect handler: %s => %s", self.prefix or "/", self.destination)
        if self.prefix:
            router.add_api_route("/" + self.prefix, self.serve, methods=METHODS, include_in_schema=False)
            router.add_api_route(
                "/" + self.prefix + "/{rest:path}", self.serve, methods=METHODS, include_in_schema=False
            )
        else:
            router.add_api_route("/{rest:path}", self.serve, methods=METHODS, include_in_schema=False)
