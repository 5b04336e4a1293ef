from __future__ import annotations

from fastapi import APIRouter

from gum.db.ingest import MappingSender

# Redirect routes answer every method, like a plain mux would.
METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


class Handler:
    """Minimal handler contract.

    ``register`` is called once when the handler is added to the server and
    may add stateless routes to ``router``. ``mappings`` is then run on its
    own thread with a write-only sender; it may return after a finite batch
    or keep producing for the life of the process.
    """

    name: str = "base"

    def register(self, router: APIRouter) -> None:
        return None

    def mappings(self, sender: MappingSender) -> None:
        return None

    def close(self) -> None:
        """Release background resources. Called on server shutdown."""
        return None
