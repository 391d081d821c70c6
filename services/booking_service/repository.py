import logging
from datetime import datetime
from typing import Sequence

from .domain import Booking, InvalidBookingDocument, PENDING, booking_from_document
from .store import BookingStore, BookingStoreError

logger = logging.getLogger(__name__)


def _oldest_first(booking: Booking):
    # same order as the store: created_at, then id; undated last
    created_at = booking.created_at
    return (created_at is None, created_at or datetime.min, booking.id)


class _BookingListRepository:
    """
    Holds the last fetched bookings, oldest first. `refresh()` re-runs the query and
    replaces the held sequence; a failed query is logged and leaves an
    empty sequence behind.
    """

    def __init__(self, store: BookingStore):
        self._store = store
        self._bookings: tuple[Booking, ...] = ()

    async def _load(self) -> list[dict]:
        raise NotImplementedError

    def fetch(self) -> Sequence[Booking]:
        return self._bookings

    def get(self, booking_id: str) -> Booking | None:
        for booking in self._bookings:
            if booking.id == booking_id:
                return booking
        return None

    async def refresh(self) -> Sequence[Booking]:
        try:
            documents = await self._load()
        except BookingStoreError:
            logger.exception("Error fetching bookings")
            documents = []

        bookings = []
        for doc in documents:
            try:
                bookings.append(booking_from_document(doc))
            except InvalidBookingDocument as e:
                logger.warning("Skipping booking %s: %s", doc.get("id"), e)

        self._bookings = tuple(sorted(bookings, key=_oldest_first))
        return self._bookings


class BookingListRepository(_BookingListRepository):
    """Open bookings plus the ones already assigned to `worker_email`."""

    def __init__(self, store: BookingStore, worker_email: str):
        super().__init__(store)
        self.worker_email = worker_email

    async def _load(self) -> list[dict]:
        pending = await self._store.query(status=PENDING)
        assigned = await self._store.query(worker_email=self.worker_email)

        seen = set()
        documents = []
        for doc in pending + assigned:
            if doc["id"] in seen:
                continue
            seen.add(doc["id"])
            documents.append(doc)
        return documents


class CustomerHistoryRepository(_BookingListRepository):
    def __init__(self, store: BookingStore, customer_email: str):
        super().__init__(store)
        self.customer_email = customer_email

    async def _load(self) -> list[dict]:
        return await self._store.query(customer_email=self.customer_email)
