"""Shared pytest fixtures: in-memory databases, fakes for the booking store and chat-service."""
from __future__ import annotations

import os

# Service modules read their configuration at import time.
os.environ["BOOKING_DB"] = "sqlite+aiosqlite://"
os.environ["CHAT_DB"] = "sqlite+aiosqlite://"
os.environ["USER_DB"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ.pop("RABBIT_URL", None)

import asyncio
import copy
import itertools
from datetime import datetime, timezone

import httpx
import pytest
from jose import jwt

from booking_service.conversations import ConversationError
from booking_service.identity import WorkerIdentity
from booking_service.store import (
    WRITABLE_FIELDS,
    BookingNotFound,
    BookingStoreError,
    BookingWriteConflict,
)

WORKER_EMAIL = "w@x.com"

_ids = itertools.count(1)


def make_booking_doc(booking_id: str | None = None, **overrides) -> dict:
    doc = {
        "id": booking_id or f"b{next(_ids)}",
        "category_service": "Cleaning",
        "specific_service": "Deep house cleaning",
        "customer_id": "c1",
        "customer_email": "customer@x.com",
        "customer_name": "Maria Santos",
        "customer_profile_img": "https://img.example/c1.png",
        "worker_email": None,
        "region": {"code": "07", "name": "Central Visayas"},
        "province": {"code": "0722", "name": "Cebu"},
        "city": {"code": "072217", "name": "Cebu City"},
        "barangay": {"code": "072217001", "name": "Lahug"},
        "additional_detail": "Two bedrooms",
        "status": "pending",
        "if_done_status": None,
        "service_amount_paid": None,
        "rating": None,
        "created_at": datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc),
    }
    doc.update(overrides)
    return doc


class FakeBookingStore:
    """Dict-backed booking store with the same query/update contract as SqlBookingStore."""

    def __init__(self, docs: list[dict] | None = None):
        self.docs: dict[str, dict] = {}
        for doc in docs or []:
            self.docs[doc["id"]] = dict(doc)
        self.updates: list[tuple[str, dict]] = []
        self.queries: list[dict] = []
        self.fail_queries = False
        self.fail_writes = False

    def add(self, doc: dict):
        self.docs[doc["id"]] = dict(doc)

    async def query(self, **filters) -> list[dict]:
        self.queries.append(filters)
        if self.fail_queries:
            raise BookingStoreError("store unavailable")
        return [
            copy.deepcopy(doc)
            for doc in self.docs.values()
            if all(doc.get(k) == v for k, v in filters.items())
        ]

    async def update(self, booking_id: str, fields: dict, expect: dict | None = None) -> None:
        unknown = set(fields) - WRITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not writable: {sorted(unknown)}")
        if self.fail_writes:
            raise BookingStoreError("write rejected")
        doc = self.docs.get(booking_id)
        if doc is None:
            raise BookingNotFound(booking_id)
        if any(doc.get(k) != v for k, v in (expect or {}).items()):
            raise BookingWriteConflict(booking_id)
        doc.update(fields)
        self.updates.append((booking_id, dict(fields)))


class FakeConversations:
    def __init__(self, conversation_id: str = "conv-1", fail: bool = False):
        self.conversation_id = conversation_id
        self.fail = fail
        self.calls: list[tuple] = []

    async def ensure_conversation(self, *args) -> str:
        await asyncio.sleep(0)
        self.calls.append(args)
        if self.fail:
            raise ConversationError("chat-service down")
        return self.conversation_id


def make_token(sub: str, roles: list[str]) -> str:
    return jwt.encode({"sub": sub, "roles": roles}, "test-secret", algorithm="HS256")


def auth_headers(sub: str, roles: list[str]) -> dict:
    return {"Authorization": f"Bearer {make_token(sub, roles)}"}


@pytest.fixture
def worker() -> WorkerIdentity:
    return WorkerIdentity(
        id="w1",
        email=WORKER_EMAIL,
        full_name="Juan Dela Cruz",
        image_url="https://img.example/w1.png",
        is_worker_approved=True,
    )


@pytest.fixture
def store() -> FakeBookingStore:
    return FakeBookingStore()


@pytest.fixture
def conversations() -> FakeConversations:
    return FakeConversations()


@pytest.fixture
async def booking_db():
    from booking_service.db import Base, engine
    from booking_service import models  # noqa: F401  registers tables

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def chat_db():
    from chat_service.db import Base, engine
    from chat_service import models  # noqa: F401  registers tables

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def user_db():
    from user_service.db import Base, engine
    from user_service import models  # noqa: F401  registers tables

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


def asgi_client(app) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")
