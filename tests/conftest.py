from datetime import date

import pytest
from fastapi.testclient import TestClient

from src.certifier.db.session import Database
from src.certifier.repositories.intern_repository import InternRepository


class FakeBlobStore:
    """In-memory stand-in for S3BlobStore."""

    def __init__(self):
        self.objects = {}
        self.uploads = []
        self.exists_error = None

    async def upload_pdf(self, pdf_bytes, intern_email):
        key = f"certificates/2025-07-16/{intern_email.replace('@', '_')}_{len(self.uploads):08x}.pdf"
        self.objects[key] = pdf_bytes
        self.uploads.append(key)
        return key

    async def exists(self, key):
        if self.exists_error is not None:
            raise self.exists_error
        return key in self.objects

    async def generate_signed_url(self, key, expires_in=3600):
        return f"https://bucket.example/{key}?disposition=attachment&expires={expires_in}"

    async def generate_preview_url(self, key, expires_in=3600):
        return f"https://bucket.example/{key}?disposition=inline&expires={expires_in}"


class CountingRenderer:
    def __init__(self):
        self.calls = []

    def __call__(self, data):
        self.calls.append(data)
        return b"%PDF-1.4 fake certificate for " + data.student_name.encode()


@pytest.fixture()
def database():
    db = Database("sqlite://")
    db.connect()
    yield db
    db.disconnect()


@pytest.fixture()
def repository(database):
    with database.session() as session:
        yield InternRepository(session)


@pytest.fixture()
def blob_store():
    return FakeBlobStore()


@pytest.fixture()
def renderer():
    return CountingRenderer()


@pytest.fixture()
def alice(repository):
    return repository.create(
        name="Alice Smith",
        college="X University",
        email="a@x.edu",
        field="Web Development",
        start_date=date(2025, 7, 2),
        end_date=date(2025, 7, 16),
    )


@pytest.fixture()
def client(database, blob_store):
    from src.certifier.main import app

    app.state.database = database
    app.state.blob_store = blob_store
    app.state.allow_list = frozenset({"new@x.edu"})
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        for name in ("database", "blob_store", "allow_list"):
            if hasattr(app.state, name):
                delattr(app.state, name)
