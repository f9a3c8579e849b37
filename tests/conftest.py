import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.db.base import Base
from app.db.session import get_db
from app.main import app


class FakeGeocoder:
    """Returns canned coordinates per address and records every call."""

    def __init__(self, results=None, default=(34.70, 135.50)):
        self.results = results or {}
        self.default = default
        self.calls = []

    async def geocode(self, address):
        self.calls.append(address)
        if address in self.results:
            return self.results[address]
        return self.default


class RecordingUpserter:
    def __init__(self, fail_for=None):
        self.payloads = []
        self.fail_for = set(fail_for or [])

    def upsert(self, payload):
        if payload["source_id"] in self.fail_for:
            raise RuntimeError("duplicate key value violates unique constraint")
        self.payloads.append(payload)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "osaka_toilets.csv"
    path.write_text(
        "source_id,name,address,category,note\n"
        "t-1,梅田公衆便所,北区梅田3丁目,toilet,24時間\n"
        "t-2,難波公衆便所,中央区難波5丁目,toilet,身障者用あり\n"
        "t-3,,天王寺区悲田院町,toilet,\n",
        encoding="utf-8",
    )
    return path
