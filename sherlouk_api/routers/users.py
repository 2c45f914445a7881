from __future__ import annotations

from fastapi import APIRouter, Body, Request

from sherlouk_api.repositories.collection_repository import CollectionRepository

router = APIRouter(prefix="/api/users", tags=["users"])


def _repo(request: Request) -> CollectionRepository:
    repos = getattr(getattr(request.app, "state", None), "repositories", None) or {}
    repo = repos.get("users")
    if not repo:
        raise RuntimeError("users repository not configured")
    return repo


@router.get("")
def list_users(request: Request):
    return _repo(request).list()


@router.post("")
def create_user(request: Request, payload: dict = Body(...)):
    return _repo(request).create(payload)


@router.get("/{user_id}")
def get_user(user_id: str, request: Request):
    return _repo(request).get(user_id)


@router.delete("/{user_id}")
def delete_user(user_id: str, request: Request):
    _repo(request).delete_by_id(user_id)
    return {"ok": True}
