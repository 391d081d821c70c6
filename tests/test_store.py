"""Tests for the SQLAlchemy booking store adapter (in-memory SQLite)."""
from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from booking_service.db import SessionLocal
from booking_service.models import BookingRecord
from booking_service.store import BookingNotFound, BookingWriteConflict, SqlBookingStore
from conftest import WORKER_EMAIL, make_booking_doc


async def _insert(*docs):
    async with SessionLocal() as db:
        for doc in docs:
            db.add(BookingRecord(**doc))
        await db.commit()


@pytest.fixture
def sql_store(booking_db) -> SqlBookingStore:
    return SqlBookingStore(SessionLocal)


@pytest.mark.asyncio
async def test_query_filters_by_field(sql_store):
    await _insert(
        make_booking_doc("b1"),
        make_booking_doc("b2", status="accepted", worker_email=WORKER_EMAIL),
    )

    pending = await sql_store.query(status="pending")
    mine = await sql_store.query(worker_email=WORKER_EMAIL)
    unassigned = await sql_store.query(worker_email=None)

    assert [d["id"] for d in pending] == ["b1"]
    assert [d["id"] for d in mine] == ["b2"]
    assert [d["id"] for d in unassigned] == ["b1"]
    assert pending[0]["barangay"] == {"code": "072217001", "name": "Lahug"}


@pytest.mark.asyncio
async def test_query_rejects_unknown_field(sql_store):
    with pytest.raises(ValueError):
        await sql_store.query(colour="red")


@pytest.mark.asyncio
async def test_update_sets_fields(sql_store):
    await _insert(make_booking_doc("b1"))

    await sql_store.update("b1", {"status": "accepted", "worker_email": WORKER_EMAIL}, expect={"status": "pending"})

    doc = await sql_store.get("b1")
    assert doc["status"] == "accepted"
    assert doc["worker_email"] == WORKER_EMAIL


@pytest.mark.asyncio
async def test_conditional_update_conflict(sql_store):
    await _insert(make_booking_doc("b1", status="accepted", worker_email="other@x.com"))

    with pytest.raises(BookingWriteConflict):
        await sql_store.update("b1", {"status": "accepted", "worker_email": WORKER_EMAIL}, expect={"status": "pending"})

    doc = await sql_store.get("b1")
    assert doc["worker_email"] == "other@x.com"


@pytest.mark.asyncio
async def test_conditional_update_on_unset_field(sql_store):
    await _insert(make_booking_doc("b1", status="accepted", worker_email=WORKER_EMAIL))

    await sql_store.update(
        "b1",
        {"if_done_status": "done", "service_amount_paid": 150.5},
        expect={"status": "accepted", "if_done_status": None},
    )
    with pytest.raises(BookingWriteConflict):
        await sql_store.update(
            "b1",
            {"if_done_status": "done", "service_amount_paid": 1.0},
            expect={"if_done_status": None},
        )

    doc = await sql_store.get("b1")
    assert doc["service_amount_paid"] == 150.5


@pytest.mark.asyncio
async def test_update_missing_booking(sql_store):
    with pytest.raises(BookingNotFound):
        await sql_store.update("nope", {"status": "accepted"})


@pytest.mark.asyncio
async def test_update_refuses_non_lifecycle_fields(sql_store):
    await _insert(make_booking_doc("b1"))
    with pytest.raises(ValueError):
        await sql_store.update("b1", {"customer_name": "Someone else"})


@pytest.mark.asyncio
async def test_amount_without_done_is_rejected_by_the_table(booking_db):
    with pytest.raises(IntegrityError):
        await _insert(make_booking_doc("b1", status="accepted", worker_email=WORKER_EMAIL, service_amount_paid=99.0))

    with pytest.raises(IntegrityError):
        await _insert(make_booking_doc("b2", status="accepted", worker_email=WORKER_EMAIL, if_done_status="done"))
