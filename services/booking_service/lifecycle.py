"""
Worker-side booking lifecycle: accepting an open booking and marking an
accepted one as done.

A controller is built per screen (per request on the HTTP side) around a
ViewState that carries the busy flags and the completion modal. The
one-active-booking rule is checked against the worker's last fetched list,
so it only holds for sequential use. Acceptance itself is written
conditionally on the booking still being pending.
"""
import enum
import logging
import math
from dataclasses import dataclass
from typing import Sequence

from .conversations import ConversationError
from .domain import ACCEPTED, DONE, PENDING, Booking, format_amount
from .identity import WorkerIdentity
from .repository import BookingListRepository
from .store import BookingStore, BookingStoreError

logger = logging.getLogger(__name__)

ONE_ACTIVE_BOOKING_MESSAGE = (
    "You already have 1 pending task/booking. Please complete to accept another booking."
)


class InvalidAmount(ValueError):
    pass


def parse_amount(value) -> float:
    text = "" if value is None else str(value).strip()
    if not text:
        raise InvalidAmount("Enter the amount paid by the customer.")
    try:
        amount = float(text)
    except ValueError:
        raise InvalidAmount(f"Amount must be a number, got {text!r}.") from None
    if not math.isfinite(amount) or amount < 0:
        raise InvalidAmount("Amount must be zero or more.")
    return amount


class Reason(str, enum.Enum):
    ACCEPTED = "accepted"
    COMPLETED = "completed"
    BUSY = "busy"
    UNAVAILABLE = "unavailable"
    ALREADY_ACCEPTED = "already_accepted"
    ACTIVE_BOOKING_LIMIT = "active_booking_limit"
    NOT_ACCEPTED = "not_accepted"
    INVALID_AMOUNT = "invalid_amount"
    FAILED = "failed"


@dataclass(frozen=True)
class Notice:
    title: str
    message: str = ""


@dataclass(frozen=True)
class Outcome:
    ok: bool
    reason: Reason
    notice: Notice
    booking_id: str | None = None
    conversation_id: str | None = None
    amount_paid: float | None = None


@dataclass
class ViewState:
    accepting: bool = False
    completing: bool = False
    refreshing: bool = False
    modal_visible: bool = False
    modal_booking_id: str | None = None
    amount_input: str = ""


_BUSY = Notice("Please wait..", "Another request for this screen is still running.")
_UNAVAILABLE = Notice("Booking unavailable", "The booking is no longer in your list. Pull to refresh.")


class BookingLifecycleController:
    def __init__(
        self,
        worker: WorkerIdentity,
        repository: BookingListRepository,
        store: BookingStore,
        conversations,
        view: ViewState | None = None,
    ):
        self.worker = worker
        self.repository = repository
        self.store = store
        self.conversations = conversations
        self.view = view or ViewState()

    @property
    def bookings(self) -> Sequence[Booking]:
        return self.repository.fetch()

    def active_bookings(self) -> list[Booking]:
        return [b for b in self.repository.fetch() if b.is_active_for(self.worker.email)]

    async def refresh(self) -> Sequence[Booking]:
        self.view.refreshing = True
        try:
            return await self.repository.refresh()
        finally:
            self.view.refreshing = False

    # ---- accept ----

    async def accept_booking(
        self,
        booking_id: str,
        customer_id: str,
        customer_name: str,
        customer_avatar: str,
    ) -> Outcome:
        if self.view.accepting:
            return Outcome(False, Reason.BUSY, _BUSY, booking_id)

        booking = self.repository.get(booking_id)
        if booking is None:
            return Outcome(False, Reason.UNAVAILABLE, _UNAVAILABLE, booking_id)

        if not booking.is_pending:
            return Outcome(
                False,
                Reason.ALREADY_ACCEPTED,
                Notice("Booking already accepted", "This booking has already been accepted."),
                booking_id,
            )

        active = self.active_bookings()
        logger.debug("worker %s holds %d active bookings", self.worker.email, len(active))
        if active:
            return Outcome(False, Reason.ACTIVE_BOOKING_LIMIT, Notice(ONE_ACTIVE_BOOKING_MESSAGE), booking_id)

        self.view.accepting = True
        self.view.completing = True
        try:
            conversation_id = await self.conversations.ensure_conversation(
                self.worker.id,
                customer_id,
                self.worker.full_name,
                customer_name,
                self.worker.image_url,
                customer_avatar,
            )
            await self.store.update(
                booking_id,
                {"status": ACCEPTED, "worker_email": self.worker.email},
                expect={"status": PENDING},
            )
        except (ConversationError, BookingStoreError) as e:
            logger.error("Failed to accept booking %s: %s", booking_id, e)
            return Outcome(False, Reason.FAILED, Notice("Error", "Failed to accept the booking."), booking_id)
        else:
            await self.repository.refresh()
            return Outcome(
                True,
                Reason.ACCEPTED,
                Notice("Booking Accepted", "The booking has been accepted."),
                booking_id,
                conversation_id=conversation_id,
            )
        finally:
            self.view.accepting = False
            self.view.completing = False

    # ---- complete ----

    async def complete_booking(self, booking_id: str, amount_paid) -> Outcome:
        if self.view.completing:
            return Outcome(False, Reason.BUSY, _BUSY, booking_id)

        try:
            amount = parse_amount(amount_paid)
        except InvalidAmount as e:
            return Outcome(False, Reason.INVALID_AMOUNT, Notice("Invalid amount", str(e)), booking_id)

        booking = self.repository.get(booking_id)
        if booking is None:
            return Outcome(False, Reason.UNAVAILABLE, _UNAVAILABLE, booking_id)

        if not booking.is_active_for(self.worker.email):
            return Outcome(
                False,
                Reason.NOT_ACCEPTED,
                Notice("Cannot mark as done", "Only a booking you accepted and have not finished can be marked done."),
                booking_id,
            )

        self.view.completing = True
        try:
            await self.store.update(
                booking_id,
                {"if_done_status": DONE, "service_amount_paid": amount},
                expect={"status": ACCEPTED, "worker_email": self.worker.email, "if_done_status": None},
            )
        except BookingStoreError as e:
            logger.error("Failed to complete booking %s: %s", booking_id, e)
            return Outcome(False, Reason.FAILED, Notice("Error", "Failed to complete the booking."), booking_id)
        else:
            self.close_completion()
            await self.repository.refresh()
            return Outcome(
                True,
                Reason.COMPLETED,
                Notice("Booking Done", f"Amount paid: {format_amount(amount)}"),
                booking_id,
                amount_paid=amount,
            )
        finally:
            self.view.completing = False

    # ---- completion modal ----

    def open_completion(self, booking_id: str) -> bool:
        if self.view.completing:
            return False
        booking = self.repository.get(booking_id)
        if booking is None or not booking.is_active_for(self.worker.email):
            return False
        self.view.modal_visible = True
        self.view.modal_booking_id = booking_id
        return True

    def set_amount(self, text: str):
        self.view.amount_input = text

    def close_completion(self):
        self.view.modal_visible = False
        self.view.modal_booking_id = None
        self.view.amount_input = ""

    cancel_completion = close_completion

    async def confirm_completion(self) -> Outcome:
        booking_id = self.view.modal_booking_id
        if not self.view.modal_visible or booking_id is None:
            return Outcome(False, Reason.UNAVAILABLE, Notice("Nothing to confirm"), booking_id)
        return await self.complete_booking(booking_id, self.view.amount_input)
