"""Shared test fixtures.

Supabase and the completion provider are swapped for in-memory fakes at the
SDK seam, so the service code runs unchanged against them.
"""

import os
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

os.environ.setdefault("SUPABASE_URL", "https://project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "anon-key")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "service-role-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length-for-hs256")
os.environ.setdefault("OPENAI_API_KEY", "sk-test")
os.environ.setdefault("GROQ_API_KEY", "gsk-test")

import jwt
import pytest
from fastapi.testclient import TestClient
from supabase import AuthApiError

from src.config.settings import get_settings
from src.db import client as db_client
from src.llm import client as llm_client
from src.llm.client import CompletionError, LLMClient
from src.main import app


# --- Fake Supabase tables ---

class FakeQuery:
    def __init__(self, db, table, op, payload=None, on_conflict=None):
        self._db = db
        self._table = table
        self._op = op
        self._payload = payload
        self._on_conflict = on_conflict
        self._columns = "*"
        self._filters: list[tuple[str, object]] = []
        self._orders: list[tuple[str, bool]] = []
        self._limit: int | None = None
        self._range: tuple[int, int] | None = None

    def select(self, columns="*", count=None):
        self._columns = columns
        return self

    def eq(self, column, value):
        self._filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self._orders.append((column, desc))
        return self

    def limit(self, n):
        self._limit = n
        return self

    def range(self, start, end):
        self._range = (start, end)
        return self

    def _matches(self, row):
        return all(row.get(col) == val for col, val in self._filters)

    def _project(self, row):
        if self._columns.strip() == "*":
            return dict(row)
        return {c.strip(): row.get(c.strip()) for c in self._columns.split(",")}

    def execute(self):
        rows = self._db.tables.setdefault(self._table, [])
        if self._db.fail_tables.get(self._table) == self._op:
            raise RuntimeError(f"{self._table} {self._op} failed")

        if self._op == "select":
            found = [r for r in rows if self._matches(r)]
            for column, desc in reversed(self._orders):
                found.sort(key=lambda r: r[column], reverse=desc)
            if self._range:
                found = found[self._range[0]:self._range[1] + 1]
            if self._limit is not None:
                found = found[:self._limit]
            data = [self._project(r) for r in found]
            return SimpleNamespace(data=data, count=len(data))

        if self._op == "insert":
            payload = self._payload if isinstance(self._payload, list) else [self._payload]
            data = [dict(self._db.insert_row(self._table, p)) for p in payload]
            return SimpleNamespace(data=data, count=len(data))

        if self._op == "upsert":
            key = self._on_conflict or "id"
            existing = [r for r in rows if r.get(key) == self._payload.get(key)]
            if existing:
                existing[0].update(self._db.stamp_fields(self._payload))
                return SimpleNamespace(data=[dict(existing[0])], count=1)
            return SimpleNamespace(data=[dict(self._db.insert_row(self._table, self._payload))], count=1)

        if self._op == "update":
            found = [r for r in rows if self._matches(r)]
            for r in found:
                r.update(self._db.stamp_fields(self._payload))
            return SimpleNamespace(data=[dict(r) for r in found], count=len(found))

        if self._op == "delete":
            found = [r for r in rows if self._matches(r)]
            self._db.tables[self._table] = [r for r in rows if not self._matches(r)]
            return SimpleNamespace(data=[dict(r) for r in found], count=len(found))

        raise AssertionError(f"unsupported op {self._op}")


class FakeTable:
    def __init__(self, db, name):
        self._db = db
        self._name = name

    def select(self, columns="*", count=None):
        return FakeQuery(self._db, self._name, "select").select(columns, count)

    def insert(self, payload):
        return FakeQuery(self._db, self._name, "insert", payload)

    def upsert(self, payload, on_conflict=None):
        return FakeQuery(self._db, self._name, "upsert", payload, on_conflict)

    def update(self, payload):
        return FakeQuery(self._db, self._name, "update", payload)

    def delete(self):
        return FakeQuery(self._db, self._name, "delete")


class FakeDatabase:
    """Rows keyed by table; timestamps strictly increase across all writes."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.fail_tables: dict[str, str] = {}
        self._last_ts = datetime.now(timezone.utc)

    def _stamp(self, value=None) -> str:
        ts = datetime.fromisoformat(value) if value else datetime.now(timezone.utc)
        if ts <= self._last_ts:
            ts = self._last_ts + timedelta(microseconds=1)
        self._last_ts = ts
        return ts.isoformat(timespec="microseconds")

    def stamp_fields(self, payload: dict) -> dict:
        return {k: self._stamp(v) if k.endswith("_at") and isinstance(v, str) else v for k, v in payload.items()}

    def insert_row(self, table: str, payload: dict) -> dict:
        row = self.stamp_fields(payload)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", self._stamp())
        if table == "chats":
            row.setdefault("updated_at", row["created_at"])
        if table == "users":
            row.setdefault("email_verified", False)
        self.tables.setdefault(table, []).append(row)
        return row

    def table(self, name):
        return FakeTable(self, name)


# --- Fake Supabase Auth ---

class FakeAdminAuth:
    def __init__(self, auth):
        self._auth = auth

    def create_user(self, attributes):
        email = attributes["email"]
        if email in self._auth.accounts:
            raise AuthApiError("A user with this email address has already been registered", 422, "email_exists")
        account = self._auth.add_account(
            email, attributes["password"], attributes.get("user_metadata", {}), confirmed=attributes.get("email_confirm", False),
        )
        return SimpleNamespace(user=self._auth.user_obj(account))

    def sign_out(self, token, scope="global"):
        self._auth.signed_out.append(token)

    def delete_user(self, user_id, should_soft_delete=False):
        self._auth.deleted.append(user_id)
        self._auth.accounts = {e: a for e, a in self._auth.accounts.items() if a["id"] != user_id}


class FakeAuth:
    def __init__(self, secret):
        self._secret = secret
        self.accounts: dict[str, dict] = {}
        self.confirmation_hashes: dict[str, str] = {}
        self.sign_in_calls = 0
        self.signed_out: list[str] = []
        self.resent: list[dict] = []
        self.signups: list[dict] = []
        self.deleted: list[str] = []
        self.admin = FakeAdminAuth(self)

    def add_account(self, email, password, metadata, confirmed):
        account = {
            "id": str(uuid.uuid4()),
            "email": email,
            "password": password,
            "metadata": metadata,
            "confirmed_at": datetime.now(timezone.utc) if confirmed else None,
        }
        self.accounts[email] = account
        return account

    def user_obj(self, account, identities=None):
        return SimpleNamespace(
            id=account["id"],
            email=account["email"],
            user_metadata=account["metadata"],
            email_confirmed_at=account["confirmed_at"],
            identities=[{"provider": "email"}] if identities is None else identities,
        )

    def issue_token(self, account) -> str:
        return jwt.encode(
            {
                "sub": account["id"],
                "email": account["email"],
                "aud": "authenticated",
                "role": "authenticated",
                "exp": datetime.now(timezone.utc) + timedelta(hours=1),
            },
            self._secret,
            algorithm="HS256",
        )

    def _session(self, account):
        return SimpleNamespace(access_token=self.issue_token(account), refresh_token=uuid.uuid4().hex)

    def sign_in_with_password(self, credentials):
        self.sign_in_calls += 1
        account = self.accounts.get(credentials["email"])
        if account is None or account["password"] != credentials["password"]:
            raise AuthApiError("Invalid login credentials", 400, "invalid_credentials")
        if account["confirmed_at"] is None:
            raise AuthApiError("Email not confirmed", 400, "email_not_confirmed")
        return SimpleNamespace(user=self.user_obj(account), session=self._session(account))

    def sign_up(self, credentials):
        self.signups.append(credentials)
        email = credentials["email"]
        if email in self.accounts:
            return SimpleNamespace(user=self.user_obj(self.accounts[email], identities=[]), session=None)
        if len(credentials["password"]) < 6:
            raise AuthApiError("Password should be at least 6 characters.", 422, "weak_password")
        options = credentials.get("options", {})
        account = self.add_account(email, credentials["password"], options.get("data", {}), confirmed=False)
        self.confirmation_hashes[email] = uuid.uuid4().hex
        return SimpleNamespace(user=self.user_obj(account), session=None)

    def resend(self, credentials):
        self.resent.append(credentials)
        return SimpleNamespace(user=None, session=None)

    def verify_otp(self, params):
        for email, token_hash in self.confirmation_hashes.items():
            if token_hash == params["token_hash"]:
                account = self.accounts[email]
                account["confirmed_at"] = datetime.now(timezone.utc)
                del self.confirmation_hashes[email]
                return SimpleNamespace(user=self.user_obj(account), session=self._session(account))
        raise AuthApiError("Email link is invalid or has expired", 403, "otp_expired")


class FakeLLM(LLMClient):
    def __init__(self):
        self.calls: list[dict] = []
        self.error: CompletionError | None = None
        self.reply = "Hello from the assistant."

    async def generate(self, messages, model, temperature, max_tokens):
        self.calls.append({"messages": messages, "model": model, "temperature": temperature, "max_tokens": max_tokens})
        if self.error is not None:
            raise self.error
        return {"content": self.reply, "finish_reason": "stop", "input_tokens": 12, "output_tokens": 5}


# --- Fixtures ---

@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def fake_auth(settings):
    return FakeAuth(settings.SUPABASE_JWT_SECRET)


@pytest.fixture(autouse=True)
def fake_supabase(monkeypatch, fake_db, fake_auth):
    fake = SimpleNamespace(table=fake_db.table, auth=fake_auth)
    monkeypatch.setattr(db_client, "_client", None)
    monkeypatch.setattr(db_client, "create_client", lambda *args, **kwargs: fake)
    return fake


@pytest.fixture(autouse=True)
def fake_llm(monkeypatch, settings):
    llm = FakeLLM()
    monkeypatch.setitem(llm_client._clients, settings.LLM_PROVIDER, llm)
    return llm


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def auto_confirm(monkeypatch, settings):
    monkeypatch.setattr(settings, "AUTH_AUTO_CONFIRM_EMAIL", True)


@pytest.fixture
def register(client, auto_confirm):
    """Sign up a confirmed user and return the auth response data."""

    def _register(name="Alice", email=None, password="secret1"):
        email = email or f"user_{uuid.uuid4().hex[:8]}@example.com"
        resp = client.post("/api/auth", json={"action": "signup", "name": name, "email": email, "password": password})
        assert resp.status_code == 201
        return resp.json()["data"]

    return _register


@pytest.fixture
def auth_header(register):
    return {"Authorization": f"Bearer {register()['token']}"}


@pytest.fixture
def other_auth_header(register):
    return {"Authorization": f"Bearer {register(name='Mallory')['token']}"}


@pytest.fixture
def chat_id(client, auth_header):
    resp = client.post("/api/chat", json={"title": "Test chat"}, headers=auth_header)
    assert resp.status_code == 201
    return resp.json()["data"]["id"]
