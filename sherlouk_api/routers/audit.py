"""
Audit trail endpoints.

Entries are append-only: there is no delete route, and ``timestamp`` is
always the server time at creation.
"""

from __future__ import annotations

from fastapi import APIRouter, Body, Request

from sherlouk_api.repositories.collection_repository import CollectionRepository

router = APIRouter(prefix="/api/audit", tags=["audit"])


def _repo(request: Request) -> CollectionRepository:
    repos = getattr(getattr(request.app, "state", None), "repositories", None) or {}
    repo = repos.get("audit")
    if not repo:
        raise RuntimeError("audit repository not configured")
    return repo


@router.get("")
def list_audit(request: Request):
    return _repo(request).list()


@router.post("")
def create_audit_entry(request: Request, payload: dict = Body(...)):
    return _repo(request).create(payload)


@router.get("/{entry_id}")
def get_audit_entry(entry_id: str, request: Request):
    return _repo(request).get(entry_id)
