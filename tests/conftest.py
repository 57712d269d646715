import os
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "service-role-key")
os.environ.setdefault("SUPABASE_ANON_KEY", "anon-key")

from techradar.main import app  # noqa: E402
from techradar.supabase_client import get_supabase_anon_client, get_supabase_client  # noqa: E402

NO_ROWS = {
    "code": "PGRST116",
    "message": "JSON object requested, multiple (or no) rows returned",
    "details": "The result contains 0 rows",
    "hint": None,
}


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """The slice of the PostgREST query builder the app uses, over in-memory rows."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.filters = []
        self.columns = "*"
        self.ordering = None
        self.is_single = False
        self.rows_to_insert = None

    def select(self, columns="*"):
        self.columns = columns
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: str(row.get(column)) == str(value))
        return self

    def ilike(self, column, pattern):
        needle = pattern.strip("%").lower()
        self.filters.append(lambda row: needle in str(row.get(column, "")).lower())
        return self

    def in_(self, column, values):
        wanted = {str(v) for v in values}
        self.filters.append(lambda row: str(row.get(column)) in wanted)
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def single(self):
        self.is_single = True
        return self

    def insert(self, rows):
        self.rows_to_insert = rows if isinstance(rows, list) else [rows]
        return self

    def execute(self):
        action = "insert" if self.rows_to_insert is not None else "select"
        self.db.calls.append((self.table, action))

        failure = self.db.failures.get((self.table, action))
        if failure:
            raise APIError(failure)

        if self.rows_to_insert is not None:
            created = [self.db.add(self.table, row) for row in self.rows_to_insert]
            return FakeResponse([dict(row) for row in created])

        rows = [row for row in self.db.tables.get(self.table, []) if all(f(row) for f in self.filters)]
        if self.ordering:
            column, desc = self.ordering
            rows = sorted(rows, key=lambda row: row.get(column) or "", reverse=desc)
        if self.columns != "*":
            names = [c.strip() for c in self.columns.split(",")]
            rows = [{name: row.get(name) for name in names} for row in rows]

        if self.is_single:
            if len(rows) != 1:
                raise APIError(NO_ROWS)
            return FakeResponse(dict(rows[0]))
        return FakeResponse([dict(row) for row in rows])


class FakeAdmin:
    def __init__(self, auth):
        self.auth = auth

    def sign_out(self, jwt, scope="global"):
        self.auth.signed_out.append(jwt)
        self.auth.tokens.pop(jwt, None)


class FakeAuth:
    def __init__(self):
        self.tokens = {}
        self.passwords = {}
        self.reset_requests = []
        self.signed_out = []
        self.admin = FakeAdmin(self)

    def issue_token(self, user_id, email):
        token = f"token-{uuid4().hex}"
        self.tokens[token] = SimpleNamespace(id=user_id, email=email)
        return token

    def get_user(self, token):
        if token not in self.tokens:
            raise Exception("invalid JWT")
        return SimpleNamespace(user=self.tokens[token])

    def sign_in_with_password(self, credentials):
        account = self.passwords.get(credentials["email"])
        if not account or account["password"] != credentials["password"]:
            raise Exception("Invalid login credentials")
        token = self.issue_token(account["id"], credentials["email"])
        return SimpleNamespace(
            user=SimpleNamespace(id=account["id"], email=credentials["email"]),
            session=SimpleNamespace(access_token=token),
        )

    def sign_up(self, credentials):
        if credentials["email"] in self.passwords:
            raise Exception("User already registered")
        user_id = str(uuid4())
        self.passwords[credentials["email"]] = {"id": user_id, "password": credentials["password"]}
        token = self.issue_token(user_id, credentials["email"])
        return SimpleNamespace(
            user=SimpleNamespace(id=user_id, email=credentials["email"]),
            session=SimpleNamespace(access_token=token),
        )

    def reset_password_for_email(self, email, options=None):
        self.reset_requests.append((email, options))


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.calls = []
        self.failures = {}
        self.auth = FakeAuth()
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def table(self, name):
        return FakeQuery(self, name)

    def add(self, table, row):
        self._clock += timedelta(seconds=1)
        stored = {"id": str(uuid4()), "created_at": self._clock.isoformat(), **row}
        self.tables.setdefault(table, []).append(stored)
        return stored

    def fail(self, table, action="select", code="42501", message="permission denied"):
        self.failures[(table, action)] = {"code": code, "message": message, "details": None, "hint": None}

    def rows(self, table):
        return self.tables.get(table, [])

    def sign_in_as(self, user_type, user_id=None, email=None):
        """Registers a user, returns (user_id, auth headers)."""
        user_id = user_id or str(uuid4())
        email = email or f"{user_id}@example.com"
        self.add("users", {"id": user_id, "email": email, "user_type": user_type})
        token = self.auth.issue_token(user_id, email)
        return user_id, {"Authorization": f"Bearer {token}"}


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def client(supabase):
    app.dependency_overrides[get_supabase_client] = lambda: supabase
    app.dependency_overrides[get_supabase_anon_client] = lambda: supabase
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def customer(supabase):
    user_id, headers = supabase.sign_in_as("customer")
    return SimpleNamespace(id=user_id, headers=headers)


@pytest.fixture
def seller(supabase):
    user_id, headers = supabase.sign_in_as("seller")
    return SimpleNamespace(id=user_id, headers=headers)
