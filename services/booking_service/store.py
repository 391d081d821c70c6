import logging
from typing import Protocol

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from .models import BookingRecord

logger = logging.getLogger(__name__)

DOCUMENT_FIELDS = (
    "id",
    "category_service",
    "specific_service",
    "customer_id",
    "customer_email",
    "customer_name",
    "customer_profile_img",
    "worker_email",
    "region",
    "province",
    "city",
    "barangay",
    "additional_detail",
    "status",
    "if_done_status",
    "service_amount_paid",
    "rating",
    "created_at",
)

# fields the lifecycle is allowed to touch
WRITABLE_FIELDS = {"status", "worker_email", "if_done_status", "service_amount_paid", "rating"}


class BookingStoreError(Exception):
    pass


class BookingNotFound(BookingStoreError):
    pass


class BookingWriteConflict(BookingStoreError):
    """The booking exists but no longer matches the expected field values."""


class BookingStore(Protocol):
    async def query(self, **filters) -> list[dict]:
        ...

    async def update(self, booking_id: str, fields: dict, expect: dict | None = None) -> None:
        ...


def to_document(record: BookingRecord) -> dict:
    return {name: getattr(record, name) for name in DOCUMENT_FIELDS}


def _column(name: str):
    if name not in DOCUMENT_FIELDS:
        raise ValueError(f"Unknown booking field: {name}")
    return getattr(BookingRecord, name)


def _conditions(filters: dict) -> list:
    conds = []
    for name, value in filters.items():
        col = _column(name)
        conds.append(col.is_(None) if value is None else col == value)
    return conds


class SqlBookingStore:
    def __init__(self, session_factory):
        self._session_factory = session_factory

    async def query(self, **filters) -> list[dict]:
        stmt = (
            select(BookingRecord)
            .where(*_conditions(filters))
            .order_by(BookingRecord.created_at, BookingRecord.id)
        )
        try:
            async with self._session_factory() as db:
                res = await db.execute(stmt)
                return [to_document(r) for r in res.scalars().all()]
        except SQLAlchemyError as e:
            raise BookingStoreError(f"Booking query failed: {e}") from e

    async def get(self, booking_id: str) -> dict | None:
        docs = await self.query(id=booking_id)
        return docs[0] if docs else None

    async def update(self, booking_id: str, fields: dict, expect: dict | None = None) -> None:
        """
        Partial single-row update. With `expect`, the row is only written
        while it still holds those values; otherwise BookingWriteConflict.
        """
        unknown = set(fields) - WRITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not writable: {sorted(unknown)}")
        if not fields:
            return

        stmt = (
            update(BookingRecord)
            .where(BookingRecord.id == booking_id, *_conditions(expect or {}))
            .values(**fields)
        )
        try:
            async with self._session_factory() as db:
                res = await db.execute(stmt)
                if res.rowcount == 1:
                    await db.commit()
                    return

                await db.rollback()
                exists = await db.scalar(select(BookingRecord.id).where(BookingRecord.id == booking_id))
        except SQLAlchemyError as e:
            raise BookingStoreError(f"Booking update failed: {e}") from e

        if not exists:
            raise BookingNotFound(f"Booking {booking_id} not found")
        logger.info("conditional update of booking %s did not match %s", booking_id, expect)
        raise BookingWriteConflict(f"Booking {booking_id} changed before the update")
