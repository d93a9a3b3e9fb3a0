"""
SML Cars Backend test configuration.

Shared fixtures: an in-memory stand-in for the Supabase client (tables and a
storage bucket), an isolated upload staging directory, an ASGI test client
and admin auth headers.
"""

import os
import re
import tempfile
import uuid
from itertools import count

# Settings are cached on first use; configure the environment before any app import
os.environ["ENVIRONMENT"] = "development"
os.environ["SUPABASE_URL"] = "https://fake.supabase.co"
os.environ["SUPABASE_SERVICE_ROLE_KEY"] = "test-service-role-key"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "admin123"
os.environ["UPLOAD_TMP_DIR"] = tempfile.mkdtemp(prefix="sml_cars_test_")
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from postgrest.exceptions import APIError

from core.config import get_settings
from core.database import db_manager


UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeTable:
    """Rows of one table plus a log of executed operations."""

    def __init__(self):
        self.rows = []
        self.calls = []
        self.error = None
        self._sequence = count(1)

    def next_created_at(self) -> str:
        return f"2024-01-01T00:00:{next(self._sequence):02d}+00:00"


class FakeQuery:
    """Chainable query mimicking the postgrest builder used by the services."""

    def __init__(self, table: FakeTable):
        self._table = table
        self._op = "select"
        self._payload = None
        self._filters = []
        self._order = None
        self._limit = None
        self._count = None

    def select(self, *columns, count=None):
        self._op = "select"
        self._count = count
        return self

    def insert(self, payload):
        self._op = "insert"
        self._payload = payload
        return self

    def update(self, payload):
        self._op = "update"
        self._payload = payload
        return self

    def delete(self):
        self._op = "delete"
        return self

    def eq(self, column, value):
        if column == "id" and not UUID_PATTERN.match(str(value)):
            raise_invalid_uuid(value)
        self._filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self._order = (column, desc)
        return self

    def limit(self, size):
        self._limit = size
        return self

    def _matching(self):
        return [
            row for row in self._table.rows
            if all(row.get(column) == value for column, value in self._filters)
        ]

    def execute(self):
        self._table.calls.append(self._op)
        if self._table.error is not None:
            raise self._table.error

        if self._op == "insert":
            row = {
                "id": str(uuid.uuid4()),
                "created_at": self._table.next_created_at(),
                **self._payload
            }
            self._table.rows.append(row)
            return FakeResponse([dict(row)])

        matching = self._matching()

        if self._op == "update":
            for row in matching:
                row.update(self._payload)
            return FakeResponse([dict(row) for row in matching])

        if self._op == "delete":
            self._table.rows = [row for row in self._table.rows if row not in matching]
            return FakeResponse([dict(row) for row in matching])

        total = len(matching)
        if self._order:
            column, desc = self._order
            matching = sorted(matching, key=lambda row: row.get(column), reverse=desc)
        if self._limit is not None:
            matching = matching[:self._limit]
        return FakeResponse(
            [dict(row) for row in matching],
            count=total if self._count == "exact" else None
        )


def raise_invalid_uuid(value):
    raise APIError({
        "message": f'invalid input syntax for type uuid: "{value}"',
        "code": "22P02",
        "hint": None,
        "details": None
    })


class FakeBucket:
    """Public bucket; ``fail_on(path, data)`` returning True makes an upload fail."""

    def __init__(self, name: str):
        self.name = name
        self.objects = {}
        self.calls = []
        self.fail_on = None

    def upload(self, path, file, file_options=None):
        self.calls.append(("upload", path))
        if self.fail_on is not None and self.fail_on(path, file):
            raise Exception({
                "statusCode": 403,
                "error": "Unauthorized",
                "message": "new row violates row-level security policy"
            })
        self.objects[path] = (file, file_options or {})
        return {"Key": f"{self.name}/{path}"}

    def get_public_url(self, path):
        return f"https://fake.supabase.co/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths):
        self.calls.append(("remove", tuple(paths)))
        removed = [{"name": path} for path in paths if path in self.objects]
        for path in paths:
            self.objects.pop(path, None)
        return removed

    def list(self, path=None, options=None):
        self.calls.append(("list", path))
        limit = (options or {}).get("limit", 100)
        names = [key for key in self.objects if not path or key.startswith(f"{path}/")]
        return [{"name": name} for name in names[:limit]]


class FakeStorage:
    def __init__(self):
        self.buckets = {}

    def from_(self, bucket_name):
        if bucket_name not in self.buckets:
            self.buckets[bucket_name] = FakeBucket(bucket_name)
        return self.buckets[bucket_name]


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.storage = FakeStorage()

    def table(self, name):
        if name not in self.tables:
            self.tables[name] = FakeTable()
        return FakeQuery(self.tables[name])


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def fake_supabase():
    """Installs an in-memory Supabase client on the shared database manager."""
    client = FakeSupabase()
    db_manager._client = client
    yield client
    db_manager._client = None


@pytest.fixture
def cars_table(fake_supabase, settings):
    fake_supabase.table(settings.cars_table)
    return fake_supabase.tables[settings.cars_table]


@pytest.fixture
def bucket(fake_supabase, settings):
    return fake_supabase.storage.from_(settings.storage_bucket)


@pytest.fixture
def staging_dir(tmp_path, settings, monkeypatch):
    """A fresh staging directory for uploaded files."""
    directory = tmp_path / "staging"
    directory.mkdir()
    monkeypatch.setattr(settings, "upload_tmp_dir", str(directory))
    return directory


@pytest.fixture
def sample_image_bytes():
    """Smallest JPEG: SOI + JFIF header + EOI."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def auth_headers():
    from services.auth_service import AuthService
    token = AuthService().issue_token("admin")
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def test_client(fake_supabase, staging_dir):
    """HTTPX client talking to the app in-process."""
    from main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
