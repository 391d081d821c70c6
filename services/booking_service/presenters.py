from datetime import datetime

from .domain import Booking, format_amount
from .lifecycle import BookingLifecycleController, Notice, ViewState
from .schemas import (
    ActionButton,
    BookingCard,
    BookingScreen,
    CompletionModal,
    HistoryItem,
    NoticeResponse,
)

WAIT_LABEL = "Please wait.."


def format_date(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.strftime("%m/%d/%Y, %I:%M:%S %p")


def accept_button(booking: Booking, view: ViewState) -> ActionButton:
    if view.accepting:
        label = WAIT_LABEL
    elif not booking.is_pending:
        label = "Accepted"
    else:
        label = "Accept"
    return ActionButton(label=label, enabled=booking.is_pending and not view.accepting)


def done_button(booking: Booking, view: ViewState, worker_email: str) -> ActionButton:
    if view.completing:
        label = WAIT_LABEL
    elif booking.is_completed:
        label = "Done"
    else:
        label = "Click to done"
    return ActionButton(
        label=label,
        enabled=booking.is_active_for(worker_email) and not view.completing,
    )


def booking_card(booking: Booking, view: ViewState, worker_email: str) -> BookingCard:
    amount = booking.service_amount_paid
    return BookingCard(
        booking_id=booking.id,
        service=booking.specific_service,
        customer=f"Customer: {booking.customer_name}",
        location=f"Location: {booking.barangay.name}, {booking.city.name}, {booking.province.name}",
        additional_detail=f"Additional Details: {booking.additional_detail or ''}",
        status=booking.status,
        if_done_status=booking.if_done_status,
        service_amount_paid=amount,
        amount_paid_label=f"Amount Paid: {format_amount(amount)}" if amount is not None else None,
        rating=booking.rating,
        created_at=format_date(booking.created_at),
        accept=accept_button(booking, view),
        done=done_button(booking, view, worker_email),
    )


def completion_modal(view: ViewState) -> CompletionModal:
    return CompletionModal(
        visible=view.modal_visible,
        booking_id=view.modal_booking_id,
        amount_input=view.amount_input,
        confirm_enabled=view.modal_visible and bool(view.amount_input.strip()) and not view.completing,
    )


def booking_screen(controller: BookingLifecycleController) -> BookingScreen:
    view = controller.view
    return BookingScreen(
        bookings=[booking_card(b, view, controller.worker.email) for b in controller.bookings],
        modal=completion_modal(view),
        refreshing=view.refreshing,
    )


def notice(n: Notice) -> NoticeResponse:
    return NoticeResponse(title=n.title, message=n.message)


def history_item(booking: Booking) -> HistoryItem:
    return HistoryItem(
        booking_id=booking.id,
        category_service=booking.category_service,
        specific_service=booking.specific_service,
        location=(
            f"{booking.region.name}, {booking.province.name}, "
            f"{booking.city.name}, {booking.barangay.name}"
        ),
        additional_detail=booking.additional_detail or "",
        status=f"Status: {booking.status}",
        created_at=format_date(booking.created_at),
    )
