from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Request

from sherlouk_api.services.auth_service import Authenticator

router = APIRouter(prefix="/api", tags=["auth"])


def _authenticator(request: Request) -> Authenticator:
    auth = getattr(getattr(request.app, "state", None), "authenticator", None)
    if not auth:
        raise RuntimeError("Authenticator not configured")
    return auth


@router.post("/login")
def login(request: Request, payload: Optional[dict] = Body(None)):
    body = payload or {}
    result = _authenticator(request).login(body.get("email"), body.get("password"))
    return result.as_dict()
