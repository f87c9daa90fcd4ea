"""
Shared fixtures for the CSV review test suite.

Every test gets its own SQLite file under pytest's tmp_path, so tests never
share rows and never touch the configured DATABASE_URL.
"""

from __future__ import annotations

from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from csvreview.database import Database
from csvreview.main import create_app
from csvreview.services.csv_codec import decode_csv
from csvreview.services.csv_store import ingest_csv

SAMPLE_CSV = b"name,age\nAlice,30\nBob,\nCarol,25\n"


@pytest.fixture
def database(tmp_path) -> Generator[Database, None, None]:
    db = Database(f"sqlite:///{tmp_path / 'csvreview.db'}")
    assert db.connect()
    yield db
    db.dispose()


@pytest.fixture
def db_session(database: Database) -> Generator[Session, None, None]:
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(database: Database) -> Generator[TestClient, None, None]:
    app = create_app(database)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def stored_csv(db_session: Session) -> Callable[..., str]:
    """Store CSV bytes directly through the service layer and return the file id."""

    def _store(contents: bytes = SAMPLE_CSV, filename: str = "people.csv") -> str:
        csv_file, _ = ingest_csv(db_session, filename, decode_csv(contents))
        return csv_file.id

    return _store


@pytest.fixture
def upload(client: TestClient) -> Callable[..., dict]:
    """Upload CSV bytes through the API and return the JSON response."""

    def _upload(
        contents: bytes = SAMPLE_CSV,
        filename: str = "people.csv",
        content_type: str = "text/csv",
    ) -> dict:
        response = client.post("/upload", files={"file": (filename, contents, content_type)})
        assert response.status_code == 200, response.text
        return response.json()

    return _upload
