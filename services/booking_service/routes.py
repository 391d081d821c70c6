from fastapi import APIRouter, Depends, HTTPException, Request, status

from shared.rbac import require_role
from shared.security import get_current_user

from .conversations import ConversationClient
from .db import SessionLocal
from .identity import IdentityError, IdentityNotFound, WorkerIdentity, fetch_identity
from .lifecycle import BookingLifecycleController, Reason
from .presenters import booking_screen, history_item, notice
from .publisher import publisher
from .repository import BookingListRepository, CustomerHistoryRepository
from .schemas import (
    AcceptBookingRequest,
    AcceptBookingResponse,
    BookingScreen,
    CompleteBookingRequest,
    CompleteBookingResponse,
    HistoryItem,
)
from .store import BookingStore, SqlBookingStore

router = APIRouter()

REJECTION_STATUS = {
    Reason.BUSY: status.HTTP_409_CONFLICT,
    Reason.UNAVAILABLE: status.HTTP_404_NOT_FOUND,
    Reason.ALREADY_ACCEPTED: status.HTTP_409_CONFLICT,
    Reason.ACTIVE_BOOKING_LIMIT: status.HTTP_409_CONFLICT,
    Reason.NOT_ACCEPTED: status.HTTP_409_CONFLICT,
    Reason.INVALID_AMOUNT: status.HTTP_400_BAD_REQUEST,
    Reason.FAILED: status.HTTP_502_BAD_GATEWAY,
}


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def get_store() -> BookingStore:
    return SqlBookingStore(SessionLocal)


def get_conversations(request: Request) -> ConversationClient:
    return ConversationClient(request_id=_request_id(request))


async def get_worker(request: Request, user=Depends(get_current_user)) -> WorkerIdentity:
    require_role(user, ["worker"])
    try:
        worker = await fetch_identity(user["sub"], request_id=_request_id(request))
    except IdentityNotFound:
        raise HTTPException(status_code=404, detail="User profile not found")
    except IdentityError as e:
        raise HTTPException(status_code=502, detail=str(e))

    if not worker.is_worker_approved:
        raise HTTPException(status_code=403, detail="Worker application is not approved yet")
    return worker


async def get_screen(
    worker: WorkerIdentity = Depends(get_worker),
    store: BookingStore = Depends(get_store),
    conversations=Depends(get_conversations),
) -> BookingLifecycleController:
    repository = BookingListRepository(store, worker.email)
    await repository.refresh()
    return BookingLifecycleController(worker, repository, store, conversations)


def _raise_rejection(outcome):
    raise HTTPException(
        status_code=REJECTION_STATUS[outcome.reason],
        detail=outcome.notice.message or outcome.notice.title,
    )


@router.get("/workers/me/bookings", response_model=BookingScreen)
async def list_worker_bookings(screen: BookingLifecycleController = Depends(get_screen)):
    return booking_screen(screen)


@router.post("/workers/me/bookings/refresh", response_model=BookingScreen)
async def refresh_worker_bookings(screen: BookingLifecycleController = Depends(get_screen)):
    await screen.refresh()
    return booking_screen(screen)


@router.post("/workers/me/bookings/{booking_id}/accept", response_model=AcceptBookingResponse)
async def accept_booking(
    booking_id: str,
    data: AcceptBookingRequest,
    screen: BookingLifecycleController = Depends(get_screen),
):
    outcome = await screen.accept_booking(
        booking_id,
        data.customer_id,
        data.customer_name,
        data.customer_avatar,
    )
    if not outcome.ok:
        _raise_rejection(outcome)

    await publisher.publish_event(
        "booking.accepted",
        {
            "booking_id": booking_id,
            "worker_email": screen.worker.email,
            "customer_id": data.customer_id,
            "conversation_id": outcome.conversation_id,
        },
    )

    return AcceptBookingResponse(
        booking_id=booking_id,
        status="accepted",
        worker_email=screen.worker.email,
        conversation_id=outcome.conversation_id,
        notice=notice(outcome.notice),
    )


@router.post("/workers/me/bookings/{booking_id}/complete", response_model=CompleteBookingResponse)
async def complete_booking(
    booking_id: str,
    data: CompleteBookingRequest,
    screen: BookingLifecycleController = Depends(get_screen),
):
    outcome = await screen.complete_booking(booking_id, data.amount_paid)
    if not outcome.ok:
        _raise_rejection(outcome)

    await publisher.publish_event(
        "booking.completed",
        {
            "booking_id": booking_id,
            "worker_email": screen.worker.email,
            "service_amount_paid": outcome.amount_paid,
        },
    )

    return CompleteBookingResponse(
        booking_id=booking_id,
        if_done_status="done",
        service_amount_paid=outcome.amount_paid,
        notice=notice(outcome.notice),
    )


@router.get("/customers/me/bookings", response_model=list[HistoryItem])
async def list_customer_bookings(
    user=Depends(get_current_user),
    store: BookingStore = Depends(get_store),
):
    require_role(user, ["customer"])
    history = CustomerHistoryRepository(store, user["sub"])
    return [history_item(b) for b in await history.refresh()]
