from pydantic import BaseModel, Field


class ActionButton(BaseModel):
    label: str
    enabled: bool


class BookingCard(BaseModel):
    booking_id: str
    service: str
    customer: str
    location: str
    additional_detail: str
    status: str
    if_done_status: str | None = None
    service_amount_paid: float | None = None
    amount_paid_label: str | None = None
    rating: int | None = None
    created_at: str | None = None
    accept: ActionButton
    done: ActionButton


class CompletionModal(BaseModel):
    visible: bool
    booking_id: str | None = None
    amount_input: str = ""
    confirm_enabled: bool = False


class BookingScreen(BaseModel):
    bookings: list[BookingCard]
    modal: CompletionModal
    refreshing: bool = False


class NoticeResponse(BaseModel):
    title: str
    message: str = ""


class AcceptBookingRequest(BaseModel):
    customer_id: str = Field(min_length=1)
    customer_name: str
    customer_avatar: str = ""


class AcceptBookingResponse(BaseModel):
    booking_id: str
    status: str
    worker_email: str
    conversation_id: str | None = None
    notice: NoticeResponse


class CompleteBookingRequest(BaseModel):
    amount_paid: str | float


class CompleteBookingResponse(BaseModel):
    booking_id: str
    if_done_status: str
    service_amount_paid: float
    notice: NoticeResponse


class HistoryItem(BaseModel):
    booking_id: str
    category_service: str
    specific_service: str
    location: str
    additional_detail: str
    status: str
    created_at: str | None = None
