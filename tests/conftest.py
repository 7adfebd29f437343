"""
Pytest fixtures for backend tests.

The Supabase client is replaced by FakeSupabase, an in-memory stand-in for the
parts of the SDK the service uses (table query builder, rpc, auth). Every
query issued through it is recorded in `calls` so tests can count round-trips.

Usage:
    pytest tests/
"""
import os
import re
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Callable, Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient

# Set test environment before importing app modules
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ["RATE_LIMIT"] = "10000/minute"
os.environ["SQL_RATE_LIMIT"] = "10000/minute"
os.environ["LOGIN_RATE_LIMIT"] = "10000/minute"
os.environ["KEEP_ALIVE_INTERVAL_SECONDS"] = "0"

from seatfinder.database.supabase_client import get_supabase, get_service_supabase
from seatfinder.main import app
from seatfinder.modules.activity.service import reset_dropped_writes
from seatfinder.modules.auth.service import clear_auth_cache, invalidate_role_cache


# ============================================================================
# In-memory Supabase
# ============================================================================

class FakeAPIError(Exception):
    """Mimics postgrest's APIError, which carries the platform text in .message"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _ilike(pattern: str) -> re.Pattern:
    parts = [re.escape(p) for p in pattern.split("%")]
    return re.compile("^" + ".*".join(parts) + "$", re.IGNORECASE | re.DOTALL)


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.op = "select"
        self.columns = "*"
        self.count_mode = None
        self.payload: Any = None
        self.on_conflict: Optional[str] = None
        self.filters: List[Callable[[Dict], bool]] = []
        self.eq_filters: Dict[str, Any] = {}
        self.order_by: List[tuple] = []
        self.limit_to: Optional[int] = None

    def select(self, columns: str = "*", count: Optional[str] = None):
        self.columns = columns
        self.count_mode = count
        return self

    def insert(self, data):
        self.op = "insert"
        self.payload = data
        return self

    def upsert(self, data, on_conflict: Optional[str] = None):
        self.op = "upsert"
        self.payload = data
        self.on_conflict = on_conflict
        return self

    def update(self, data):
        self.op = "update"
        self.payload = data
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column: str, value):
        self.eq_filters[column] = value
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column: str, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def ilike(self, column: str, pattern: str):
        regex = _ilike(pattern)
        self.filters.append(lambda row: bool(regex.match(str(row.get(column) or ""))))
        return self

    def or_(self, expression: str):
        clauses = []
        for part in expression.split(","):
            column, operator, pattern = part.split(".", 2)
            assert operator == "ilike", f"unsupported or_ operator {operator}"
            clauses.append((column, _ilike(pattern)))
        self.filters.append(
            lambda row: any(regex.match(str(row.get(col) or "")) for col, regex in clauses)
        )
        return self

    def order(self, column: str, desc: bool = False):
        self.order_by.append((column, desc))
        return self

    def limit(self, count: int):
        self.limit_to = count
        return self

    def _matching(self) -> List[Dict]:
        rows = self.db.tables.setdefault(self.table_name, [])
        return [row for row in rows if all(f(row) for f in self.filters)]

    def _project(self, row: Dict) -> Dict:
        if self.columns.strip() == "*":
            return dict(row)
        wanted = [c.strip() for c in self.columns.split(",")]
        return {c: row.get(c) for c in wanted}

    def execute(self):
        self.db.calls.append((self.table_name, self.op))
        self.db.raise_if_failing(self.table_name, self.op, self.eq_filters.get("id"))
        rows = self.db.tables.setdefault(self.table_name, [])

        if self.op == "select":
            matched = self._matching()
            for column, desc in reversed(self.order_by):
                matched.sort(key=lambda r: (r.get(column) is None, r.get(column) or ""), reverse=desc)
            total = len(matched)
            if self.limit_to is not None:
                matched = matched[:self.limit_to]
            count = total if self.count_mode == "exact" else None
            return SimpleNamespace(data=[self._project(r) for r in matched], count=count)

        if self.op == "insert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = [self.db.add_row(self.table_name, item) for item in items]
            return SimpleNamespace(data=[dict(r) for r in inserted], count=None)

        if self.op == "upsert":
            keys = [k.strip() for k in (self.on_conflict or "id").split(",")]
            existing = next(
                (r for r in rows if all(r.get(k) == self.payload.get(k) for k in keys)), None
            )
            if existing is not None:
                existing.update(self.payload)
                return SimpleNamespace(data=[dict(existing)], count=None)
            return SimpleNamespace(data=[dict(self.db.add_row(self.table_name, self.payload))], count=None)

        if self.op == "update":
            matched = self._matching()
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=[dict(r) for r in matched], count=None)

        if self.op == "delete":
            matched = self._matching()
            self.db.tables[self.table_name] = [r for r in rows if r not in matched]
            return SimpleNamespace(data=[dict(r) for r in matched], count=None)

        raise AssertionError(f"unsupported op {self.op}")


class FakeRpc:
    def __init__(self, db: "FakeSupabase", name: str, params: Dict):
        self.db = db
        self.name = name
        self.params = params

    def execute(self):
        self.db.calls.append((self.name, "rpc"))
        self.db.rpc_calls.append((self.name, self.params))
        handler = self.db.rpc_handlers.get(self.name)
        if handler is None:
            return SimpleNamespace(data=None, count=None)
        return SimpleNamespace(data=handler(self.params), count=None)


class FakeAuthAdmin:
    def __init__(self, auth: "FakeAuth"):
        self.auth = auth
        self.password_updates: List[tuple] = []

    def update_user_by_id(self, user_id: str, attributes: Dict):
        if user_id not in {u.id for u in self.auth.users.values()}:
            raise FakeAPIError("User not found")
        self.password_updates.append((user_id, attributes))
        return SimpleNamespace(user=SimpleNamespace(id=user_id))

    def list_users(self):
        return list(self.auth.users.values())

    def create_user(self, attributes: Dict):
        user = self.auth.add_user(
            f"user-{uuid.uuid4().hex[:8]}",
            attributes["email"],
            attributes["password"],
        )
        user.email_confirmed_at = _now() if attributes.get("email_confirm") else None
        return SimpleNamespace(user=user)


class FakeAuth:
    def __init__(self):
        self.users: Dict[str, SimpleNamespace] = {}  # token -> user
        self.passwords: Dict[str, str] = {}  # email -> password
        self.get_user_calls = 0
        self.sign_out_calls = 0
        self.admin = FakeAuthAdmin(self)

    def add_user(self, user_id: str, email: str, password: str = "secret123", token: Optional[str] = None):
        user = SimpleNamespace(
            id=user_id,
            email=email,
            user_metadata={},
            app_metadata={},
            email_confirmed_at=None,
            created_at=_now(),
        )
        self.users[token or f"token-{user_id}"] = user
        self.passwords[email] = password
        return user

    def token_for(self, user_id: str) -> str:
        return next(t for t, u in self.users.items() if u.id == user_id)

    def get_user(self, jwt: Optional[str] = None):
        self.get_user_calls += 1
        user = self.users.get(jwt)
        if user is None:
            raise FakeAPIError("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=user)

    def sign_in_with_password(self, credentials: Dict):
        email = credentials["email"]
        if self.passwords.get(email) != credentials["password"]:
            raise FakeAPIError("Invalid login credentials")
        token, user = next((t, u) for t, u in self.users.items() if u.email == email)
        return SimpleNamespace(user=user, session=SimpleNamespace(access_token=token))

    def sign_out(self):
        self.sign_out_calls += 1


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict]] = {}
        self.calls: List[tuple] = []
        self.rpc_calls: List[tuple] = []
        self.rpc_handlers: Dict[str, Callable[[Dict], Any]] = {"execute_sql": lambda params: []}
        self.failures: List[tuple] = []
        self.auth = FakeAuth()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: Dict) -> FakeRpc:
        return FakeRpc(self, name, params)

    def add_row(self, table: str, row: Dict) -> Dict:
        stored = {"id": str(uuid.uuid4()), "created_at": _now(), **row}
        self.tables.setdefault(table, []).append(stored)
        return stored

    def fail(self, table: str, op: str, message: str, row_id: Optional[str] = None):
        """Make matching queries raise FakeAPIError(message)"""
        self.failures.append((table, op, row_id, message))

    def raise_if_failing(self, table: str, op: str, row_id: Optional[str]):
        for f_table, f_op, f_row_id, message in self.failures:
            if f_table == table and f_op == op and (f_row_id is None or f_row_id == row_id):
                raise FakeAPIError(message)

    def count_calls(self, table: str, op: str = "select") -> int:
        return sum(1 for c in self.calls if c == (table, op))


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def reset_process_state():
    """Caches and counters are module-level; start every test clean."""
    clear_auth_cache()
    invalidate_role_cache()
    reset_dropped_writes()
    yield
    clear_auth_cache()
    invalidate_role_cache()
    reset_dropped_writes()


@pytest.fixture
def fake_db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def client(fake_db: FakeSupabase) -> Generator[TestClient, None, None]:
    """
    FastAPI test client with both Supabase clients replaced by the fake.
    """
    app.dependency_overrides[get_supabase] = lambda: fake_db
    app.dependency_overrides[get_service_supabase] = lambda: fake_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(fake_db: FakeSupabase):
    user = fake_db.auth.add_user("admin-1", "admin@example.com", "admin-pass", token="admin-token")
    fake_db.add_row("user_roles", {"user_id": user.id, "role": "admin"})
    return user


@pytest.fixture
def admin_headers(admin_user) -> dict:
    return {"Authorization": "Bearer admin-token"}


@pytest.fixture
def user_headers(fake_db: FakeSupabase) -> dict:
    """Authenticated user without any user_roles row"""
    fake_db.auth.add_user("user-1", "user@example.com", "user-pass", token="user-token")
    return {"Authorization": "Bearer user-token"}


@pytest.fixture
def sample_teacher_data() -> dict:
    return {"teacher_id": "T100", "name": "A. Karim", "department": "CSE"}


@pytest.fixture
def sample_student_data() -> dict:
    return {
        "roll_number": "123456",
        "name": "Nusrat Jahan",
        "institution": "Jahangirnagar University",
        "building": "Science Complex",
        "room": "204",
        "floor": "2nd",
        "report_time": "09:30 AM",
        "start_time": "10:00 AM",
        "end_time": "11:30 AM",
        "directions": "Enter through the north gate",
        "map_url": "https://maps.google.com/?q=23.8800,90.2672",
        "exam_date": "2026-11-02",
        "unit": "UNIT-B",
    }
