import os
import uuid
from types import SimpleNamespace

import pytest
from postgrest.exceptions import APIError
from storage3.utils import StorageException

# Variables mínimas para que Settings cargue sin .env
os.environ.setdefault("SUPABASE_URL", "https://demo.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "anon-key")

from unistay.config import Settings  # noqa: E402
from unistay.database import SupabaseClient, build_repositories  # noqa: E402
from unistay.storage import ImageStorage, LocalImage  # noqa: E402

SUPABASE_URL = "https://demo.supabase.co"
ADMIN_TOKEN = "admin-token"
STUDENT_TOKEN = "student-token"


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    """Imita el query builder de postgrest sobre tablas en memoria."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.count = None
        self.head = False
        self.max_rows = None

    def select(self, *columns, count=None, head=False):
        self.count = count
        self.head = head
        return self

    def insert(self, rows):
        self.op = "insert"
        self.payload = rows if isinstance(rows, list) else [rows]
        return self

    def update(self, data):
        self.op = "update"
        self.payload = data
        return self

    def upsert(self, data, on_conflict=None):
        self.op = "upsert"
        self.payload = data
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def limit(self, n):
        self.max_rows = n
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        self.db.calls.append((self.table, self.op, list(self.filters)))
        if (self.table, self.op) in self.db.failures:
            raise APIError({"message": "simulated failure", "code": "500"})

        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "select":
            found = [dict(r) for r in rows if self._matches(r)]
            if self.max_rows is not None:
                found = found[: self.max_rows]
            count = len(found) if self.count else None
            return FakeResponse([] if self.head else found, count=count)

        if self.op == "insert":
            created = []
            for row in self.payload:
                row = dict(row)
                row.setdefault("id", str(uuid.uuid4()))
                if any(r["id"] == row["id"] for r in rows):
                    raise APIError({"message": "duplicate key", "code": "23505"})
                rows.append(row)
                created.append(dict(row))
            return FakeResponse(created)

        if self.op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return FakeResponse(updated)

        if self.op == "upsert":
            row = dict(self.payload)
            for index, existing in enumerate(rows):
                if existing["id"] == row["id"]:
                    rows[index] = row
                    break
            else:
                rows.append(row)
            return FakeResponse([dict(row)])

        if self.op == "delete":
            removed = [dict(r) for r in rows if self._matches(r)]
            rows[:] = [r for r in rows if not self._matches(r)]
            return FakeResponse(removed)

        raise AssertionError(f"operación no soportada: {self.op}")


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def upload(self, path, file, file_options=None):
        self.storage.uploads.append((self.name, path))
        if self.storage.fail_uploads:
            raise StorageException({"message": "upload failed"})
        self.storage.objects[(self.name, path)] = file

    def get_public_url(self, path):
        return f"{SUPABASE_URL}/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths):
        self.storage.removals.extend((self.name, p) for p in paths)
        if self.storage.fail_removals:
            raise StorageException({"message": "remove failed"})
        for path in paths:
            self.storage.objects.pop((self.name, path), None)


class FakeStorage:
    def __init__(self):
        self.objects = {}
        self.uploads = []
        self.removals = []
        self.fail_uploads = False
        self.fail_removals = False

    def from_(self, name):
        return FakeBucket(self, name)


class FakeAuth:
    def __init__(self):
        self.users = {
            ADMIN_TOKEN: SimpleNamespace(
                id="admin-user-id",
                email="admin@unistay.com",
                user_metadata={"full_name": "Admin User"},
            ),
            STUDENT_TOKEN: SimpleNamespace(
                id="profile-1",
                email="sarah@unistay.com",
                user_metadata={"name": "Sarah"},
            ),
        }

    def get_user(self, token):
        if token not in self.users:
            raise RuntimeError("invalid JWT")
        return SimpleNamespace(user=self.users[token])


class FakeSupabase:
    """Cliente de Supabase en memoria: tablas, storage y auth."""

    def __init__(self):
        self.tables = {}
        self.calls = []
        self.failures = set()
        self.storage = FakeStorage()
        self.auth = FakeAuth()

    def table(self, name):
        return FakeQuery(self, name)

    def network_calls(self):
        return len(self.calls) + len(self.storage.uploads) + len(self.storage.removals)


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def client(fake_supabase):
    return SupabaseClient(fake_supabase, url=SUPABASE_URL)


@pytest.fixture
def repositories(client):
    return build_repositories(client)


@pytest.fixture
def image_storage(client):
    return ImageStorage(client)


@pytest.fixture
def settings():
    return Settings(
        supabase_url=SUPABASE_URL,
        supabase_key="anon-key",
        admin_emails=["admin@unistay.com"],
    )


@pytest.fixture
def photo():
    return LocalImage(filename="photo.jpg", content=b"\xff\xd8jpeg", content_type="image/jpeg")


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def student_headers():
    return {"Authorization": f"Bearer {STUDENT_TOKEN}"}
