from fastapi import APIRouter, Request, Response
from fastapi.responses import RedirectResponse

from gum.db.mapping_store import MappingStore
from gum.handlers.base import METHODS


def create_router(store: MappingStore) -> APIRouter:
    """Catch-all route answering from the mapping table.

    Must be included after every handler route so it only sees paths no
    handler claimed.
    """
    router = APIRouter(tags=["dispatch"])

    @router.api_route("/{path:path}", methods=METHODS, include_in_schema=False)
    def dispatch(request: Request):
        permalink = store.lookup(request.url.path)
        if not permalink:
            return Response(status_code=404)
        return RedirectResponse(permalink, status_code=301)

    return router
