"""
In-memory stand-in for the supabase-py client.

Covers the surface this service uses: table queries (shared schema and
``postgrest.schema(...)`` tenant schemas), RPCs, auth (user and admin) and
storage buckets. Query semantics come from ``MemoryStore``. Failures are
injected per table, RPC or operation.
"""

import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Callable, Optional

from supabase import AuthError, PostgrestAPIError, StorageException

from modules.tenants.memory import MemoryResponse, MemoryStore
from modules.tenants.query import Filter, QuerySpec

PUBLIC_SCHEMA = "public"


def backend_error(message: str = "backend unavailable", code: str = "XX000") -> PostgrestAPIError:
    return PostgrestAPIError({"message": message, "code": code, "hint": None, "details": None})


def permission_denied(table: str = "trainers") -> PostgrestAPIError:
    return backend_error(f"permission denied for table {table}", "42501")


def make_user(
    user_id: Optional[str] = None,
    email: str = "user@example.com",
    full_name: Optional[str] = None,
) -> SimpleNamespace:
    """A supabase-py ``User``-shaped object."""
    return SimpleNamespace(
        id=user_id or str(uuid.uuid4()),
        email=email,
        user_metadata={"full_name": full_name} if full_name else {},
        email_confirmed_at=datetime.now(timezone.utc).isoformat(),
        created_at=datetime.now(timezone.utc).isoformat(),
        last_sign_in_at=None,
    )


# -----------------------------------------------------------------------------
# Tables
# -----------------------------------------------------------------------------


class FakeQuery:
    def __init__(self, backend: "FakeSupabase", schema: str, table: str):
        self._backend = backend
        self._schema = schema
        self.spec = QuerySpec(table=table)

    def select(self, columns: str = "*", count: Optional[str] = None) -> "FakeQuery":
        self.spec.action = "select"
        self.spec.columns = columns
        self.spec.count = count
        return self

    def insert(self, payload: Any) -> "FakeQuery":
        self.spec.action = "insert"
        self.spec.payload = payload
        return self

    def update(self, payload: dict[str, Any]) -> "FakeQuery":
        self.spec.action = "update"
        self.spec.payload = payload
        return self

    def delete(self) -> "FakeQuery":
        self.spec.action = "delete"
        return self

    def _filter(self, column: str, op: str, value: Any) -> "FakeQuery":
        self.spec.filters.append(Filter(column, op, value))
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        return self._filter(column, "eq", value)

    def neq(self, column: str, value: Any) -> "FakeQuery":
        return self._filter(column, "neq", value)

    def gt(self, column: str, value: Any) -> "FakeQuery":
        return self._filter(column, "gt", value)

    def gte(self, column: str, value: Any) -> "FakeQuery":
        return self._filter(column, "gte", value)

    def lt(self, column: str, value: Any) -> "FakeQuery":
        return self._filter(column, "lt", value)

    def lte(self, column: str, value: Any) -> "FakeQuery":
        return self._filter(column, "lte", value)

    def ilike(self, column: str, pattern: str) -> "FakeQuery":
        return self._filter(column, "ilike", pattern)

    def or_(self, expression: str) -> "FakeQuery":
        self.spec.or_filters.append(expression)
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self.spec.order.append((column, desc))
        return self

    def limit(self, size: int) -> "FakeQuery":
        self.spec.limit = size
        return self

    def single(self) -> "FakeQuery":
        self.spec.single = True
        return self

    def execute(self) -> MemoryResponse:
        return self._backend.run(self._schema, self.spec)


class FakeSchema:
    def __init__(self, backend: "FakeSupabase", schema: str):
        self._backend = backend
        self._schema = schema

    def from_(self, table: str) -> FakeQuery:
        return FakeQuery(self._backend, self._schema, table)

    table = from_


class FakePostgrest:
    def __init__(self, backend: "FakeSupabase"):
        self._backend = backend
        self.token: Optional[str] = None

    def schema(self, name: str) -> FakeSchema:
        return FakeSchema(self._backend, name)

    def auth(self, token: str) -> None:
        self.token = token


class FakeRpc:
    def __init__(self, backend: "FakeSupabase", name: str, params: dict[str, Any]):
        self._backend = backend
        self._name = name
        self._params = params

    def execute(self) -> MemoryResponse:
        self._backend.rpc_calls.append((self._name, self._params))
        result = self._backend.rpc_results.get(self._name)
        if isinstance(result, Exception):
            raise result
        if callable(result):
            result = result(self._params)
        return MemoryResponse(data=result)


# -----------------------------------------------------------------------------
# Auth
# -----------------------------------------------------------------------------


class FakeSubscription:
    def __init__(self, auth: "FakeAuth", callback: Callable):
        self._auth = auth
        self.callback = callback

    def unsubscribe(self) -> None:
        if self.callback in self._auth.listeners:
            self._auth.listeners.remove(self.callback)


class FakeAuthAdmin:
    def __init__(self, auth: "FakeAuth"):
        self._auth = auth
        self.create_error: Optional[AuthError] = None
        self.update_error: Optional[AuthError] = None
        self.updated: list[tuple[str, dict[str, Any]]] = []

    def create_user(self, attributes: dict[str, Any]) -> SimpleNamespace:
        if self.create_error is not None:
            raise self.create_error
        metadata = attributes.get("user_metadata") or {}
        user = self._auth.register(attributes["email"], attributes["password"], metadata.get("full_name"))
        return SimpleNamespace(user=user)

    def update_user_by_id(self, uid: str, attributes: dict[str, Any]) -> SimpleNamespace:
        if self.update_error is not None:
            raise self.update_error
        self.updated.append((uid, attributes))
        return SimpleNamespace(user=None)


class FakeAuth:
    def __init__(self):
        self.accounts: dict[str, tuple[str, SimpleNamespace]] = {}
        self.session: Optional[SimpleNamespace] = None
        self.listeners: list[Callable] = []
        self.sign_out_error: Optional[AuthError] = None
        self.sign_up_error: Optional[AuthError] = None
        self.confirm_on_sign_up = True
        self.metadata_updates: list[dict[str, Any]] = []
        self.admin = FakeAuthAdmin(self)

    def register(
        self,
        email: str,
        password: str,
        full_name: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> SimpleNamespace:
        user = make_user(user_id, email, full_name)
        self.accounts[email.lower()] = (password, user)
        return user

    def _session_for(self, user: SimpleNamespace) -> SimpleNamespace:
        return SimpleNamespace(access_token=f"token-{user.id}", user=user)

    def sign_in_with_password(self, credentials: dict[str, str]) -> SimpleNamespace:
        account = self.accounts.get(credentials["email"].lower())
        if account is None or account[0] != credentials["password"]:
            raise AuthError("Invalid login credentials", "invalid_credentials")
        self.session = self._session_for(account[1])
        return SimpleNamespace(user=account[1], session=self.session)

    def sign_out(self) -> None:
        if self.sign_out_error is not None:
            raise self.sign_out_error
        self.session = None

    def get_session(self) -> Optional[SimpleNamespace]:
        return self.session

    def sign_up(self, credentials: dict[str, Any]) -> SimpleNamespace:
        if self.sign_up_error is not None:
            raise self.sign_up_error
        data = (credentials.get("options") or {}).get("data") or {}
        user = self.register(credentials["email"], credentials["password"], data.get("full_name"))
        session = self._session_for(user) if self.confirm_on_sign_up else None
        if session is not None:
            self.session = session
        return SimpleNamespace(user=user, session=session)

    def on_auth_state_change(self, callback: Callable) -> FakeSubscription:
        self.listeners.append(callback)
        return FakeSubscription(self, callback)

    def update_user(self, attributes: dict[str, Any]) -> SimpleNamespace:
        self.metadata_updates.append(attributes)
        return SimpleNamespace(user=None)


# -----------------------------------------------------------------------------
# Storage
# -----------------------------------------------------------------------------


class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str):
        self._storage = storage
        self._name = name

    @property
    def _objects(self) -> dict[str, bytes]:
        return self._storage.objects.setdefault(self._name, {})

    def upload(self, path: str, file: bytes, file_options: Optional[dict[str, str]] = None) -> SimpleNamespace:
        if self._storage.fail_with is not None:
            raise self._storage.fail_with
        if path in self._objects:
            raise StorageException("The resource already exists")
        self._objects[path] = file
        self._storage.options[(self._name, path)] = dict(file_options or {})
        return SimpleNamespace(path=path, full_path=f"{self._name}/{path}")

    def get_public_url(self, path: str) -> str:
        return f"https://fake.supabase.co/storage/v1/object/public/{self._name}/{path}"

    def list(self, path: Optional[str] = None, options: Optional[dict[str, Any]] = None) -> list[dict[str, Any]]:
        if self._storage.fail_with is not None:
            raise self._storage.fail_with
        prefix = f"{path}/" if path else ""
        limit = (options or {}).get("limit", 100)
        names = sorted(p[len(prefix):] for p in self._objects if p.startswith(prefix))
        return [{"name": name, "id": name, "created_at": None} for name in names[:limit]]


class FakeStorage:
    def __init__(self):
        self.objects: dict[str, dict[str, bytes]] = {}
        self.options: dict[tuple[str, str], dict[str, str]] = {}
        self.fail_with: Optional[StorageException] = None

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self, bucket)


# -----------------------------------------------------------------------------
# Client
# -----------------------------------------------------------------------------


class FakeSupabase:
    """
    Usage:
        db = FakeSupabase({"trainers": [{"id": "...", "email": "..."}]})
        db.fail("orders", action="insert")
        db.rpc_results["execute_sql"] = backend_error("function does not exist", "42883")
    """

    def __init__(self, tables: Optional[dict[str, list[dict[str, Any]]]] = None):
        self._stores: dict[str, MemoryStore] = {PUBLIC_SCHEMA: MemoryStore(tables)}
        self._failures: list[tuple[str, str, Optional[str], Exception]] = []
        self.queries: list[tuple[str, QuerySpec]] = []
        self.rpc_results: dict[str, Any] = {}
        self.rpc_calls: list[tuple[str, dict[str, Any]]] = []
        self.postgrest = FakePostgrest(self)
        self.auth = FakeAuth()
        self.storage = FakeStorage()

    def store(self, schema: str = PUBLIC_SCHEMA) -> MemoryStore:
        return self._stores.setdefault(schema, MemoryStore())

    def rows(self, table: str, schema: str = PUBLIC_SCHEMA) -> list[dict[str, Any]]:
        return self.store(schema).rows(table)

    def seed(self, table: str, rows: list[dict[str, Any]], schema: str = PUBLIC_SCHEMA) -> None:
        self.store(schema).seed(table, rows)

    def fail(
        self,
        table: str,
        action: Optional[str] = None,
        error: Optional[Exception] = None,
        schema: str = PUBLIC_SCHEMA,
    ) -> None:
        """Make queries on a table fail (optionally only one action)."""
        self._failures.append((schema, table, action, error or backend_error()))

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, PUBLIC_SCHEMA, name)

    from_ = table

    def schema(self, name: str) -> FakeSchema:
        return FakeSchema(self, name)

    def rpc(self, name: str, params: Optional[dict[str, Any]] = None) -> FakeRpc:
        return FakeRpc(self, name, params or {})

    def run(self, schema: str, spec: QuerySpec) -> MemoryResponse:
        self.queries.append((schema, spec))
        for f_schema, f_table, f_action, error in self._failures:
            if f_schema == schema and f_table == spec.table and f_action in (None, spec.action):
                raise error
        return self.store(schema).execute(spec)
