from __future__ import annotations

from fastapi import APIRouter, Body, Request

from sherlouk_api.repositories.collection_repository import CollectionRepository

router = APIRouter(prefix="/api/tables", tags=["tables"])


def _repo(request: Request) -> CollectionRepository:
    repos = getattr(getattr(request.app, "state", None), "repositories", None) or {}
    repo = repos.get("tables")
    if not repo:
        raise RuntimeError("tables repository not configured")
    return repo


@router.get("")
def list_tables(request: Request):
    return _repo(request).list()


@router.post("")
def create_table(request: Request, payload: dict = Body(...)):
    return _repo(request).create(payload)


@router.get("/{table_id}")
def get_table(table_id: str, request: Request):
    return _repo(request).get(table_id)


@router.delete("/{table_id}")
def delete_table(table_id: str, request: Request):
    _repo(request).delete_by_id(table_id)
    return {"ok": True}
