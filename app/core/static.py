"""Serving the prebuilt web client."""
from pathlib import PurePosixPath

from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException
from starlette.types import Scope


class ClientFiles(StaticFiles):
    """Static files for a single-page client.

    Unknown paths that look like client routes (``/events/123``) get
    ``index.html`` so the client router can handle them. Missing assets and
    unknown ``/api`` paths still return 404.
    """

    async def get_response(self, path: str, scope: Scope):
        try:
            return await super().get_response(path, scope)
        except HTTPException as e:
            if e.status_code != 404 or not self.is_client_route(path):
                raise
            return await super().get_response("index.html", scope)

    @staticmethod
    def is_client_route(path: str) -> bool:
        parts = PurePosixPath(path).parts
        if parts and parts[0] == "api":
            return False
        return not PurePosixPath(path).suffix
