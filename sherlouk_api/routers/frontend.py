"""
Single-page-application fallback for the built frontend bundle.

Must be included after every /api router: it catches all remaining GETs.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, RedirectResponse

from sherlouk_api.core.errors import NotFoundError

router = APIRouter(prefix="", tags=["frontend"])


@router.get("/{full_path:path}", include_in_schema=False)
def spa_fallback(full_path: str, request: Request):
    if full_path == "api" or full_path.startswith("api/"):
        stripped = full_path.rstrip("/")
        # /api/users/ -> /api/users, same as Starlette's redirect_slashes
        if stripped != full_path and stripped != "api":
            return RedirectResponse(str(request.url.replace(path="/" + stripped)), status_code=307)
        raise NotFoundError("Not found")
    static_dir = request.app.state.settings.static_dir
    index = static_dir / "index.html"
    if not index.is_file():
        raise NotFoundError("Not found")
    root = static_dir.resolve()
    candidate = (root / full_path).resolve()
    if full_path and candidate.is_file() and candidate.is_relative_to(root):
        return FileResponse(candidate)
    return FileResponse(index)
