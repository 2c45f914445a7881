from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Keep the package importable when running pytest from a plain checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sherlouk_api.app import create_app  # noqa: E402
from sherlouk_api.core.config import Settings  # noqa: E402
from sherlouk_api.repositories import DocumentStore  # noqa: E402


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        app_env="test",
        host="127.0.0.1",
        port=4000,
        data_file=tmp_path / "db.json",
        static_dir=tmp_path / "dist",
        cors_origins=("*",),
        log_level="INFO",
    )


@pytest.fixture()
def store(tmp_path) -> DocumentStore:
    db = DocumentStore(tmp_path / "db.json")
    db.load()
    return db


@pytest.fixture()
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client
