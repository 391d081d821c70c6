"""
Booking domain model.

Stored documents keep the flat `status` / `if_done_status` /
`service_amount_paid` fields. In memory a booking carries exactly one of
the states below, so a paid amount without completion, or an accepted
booking without a worker, cannot be represented.
"""
from dataclasses import dataclass
from datetime import datetime

from dateutil import parser

PENDING = "pending"
ACCEPTED = "accepted"
DONE = "done"


class InvalidBookingDocument(ValueError):
    pass


@dataclass(frozen=True)
class Place:
    name: str
    code: str | None = None

    @classmethod
    def from_value(cls, value) -> "Place":
        if isinstance(value, Place):
            return value
        if isinstance(value, str):
            return cls(name=value)
        if isinstance(value, dict) and value.get("name"):
            code = value.get("code")
            return cls(name=str(value["name"]), code=str(code) if code is not None else None)
        raise InvalidBookingDocument(f"Invalid place reference: {value!r}")

    def to_value(self) -> dict:
        return {"code": self.code, "name": self.name}


@dataclass(frozen=True)
class Pending:
    pass


@dataclass(frozen=True)
class Accepted:
    worker_email: str


@dataclass(frozen=True)
class Completed:
    worker_email: str
    amount_paid: float


BookingState = Pending | Accepted | Completed


@dataclass(frozen=True)
class Booking:
    id: str
    category_service: str
    specific_service: str
    customer_id: str
    customer_name: str
    region: Place
    province: Place
    city: Place
    barangay: Place
    state: BookingState
    customer_email: str | None = None
    customer_profile_img: str | None = None
    additional_detail: str | None = None
    rating: int | None = None
    created_at: datetime | None = None

    @property
    def is_pending(self) -> bool:
        return isinstance(self.state, Pending)

    @property
    def is_completed(self) -> bool:
        return isinstance(self.state, Completed)

    @property
    def worker_email(self) -> str | None:
        if isinstance(self.state, (Accepted, Completed)):
            return self.state.worker_email
        return None

    @property
    def status(self) -> str:
        return PENDING if self.is_pending else ACCEPTED

    @property
    def if_done_status(self) -> str | None:
        return DONE if self.is_completed else None

    @property
    def service_amount_paid(self) -> float | None:
        if isinstance(self.state, Completed):
            return self.state.amount_paid
        return None

    def is_active_for(self, worker_email: str) -> bool:
        """Accepted by `worker_email` and not yet done."""
        return isinstance(self.state, Accepted) and self.state.worker_email == worker_email


def state_from_document(doc: dict) -> BookingState:
    status = doc.get("status")
    worker_email = doc.get("worker_email")
    if_done_status = doc.get("if_done_status")
    amount = doc.get("service_amount_paid")

    if status == PENDING:
        if worker_email or if_done_status is not None or amount is not None:
            raise InvalidBookingDocument("pending booking carries acceptance or completion fields")
        return Pending()

    if status != ACCEPTED:
        raise InvalidBookingDocument(f"Unknown booking status: {status!r}")

    if not worker_email:
        raise InvalidBookingDocument("accepted booking has no worker_email")

    if if_done_status is None:
        if amount is not None:
            raise InvalidBookingDocument("service_amount_paid set on a booking that is not done")
        return Accepted(worker_email=worker_email)

    if if_done_status != DONE:
        raise InvalidBookingDocument(f"Unknown if_done_status: {if_done_status!r}")
    if amount is None:
        raise InvalidBookingDocument("done booking has no service_amount_paid")

    return Completed(worker_email=worker_email, amount_paid=float(amount))


def state_fields(state: BookingState) -> dict:
    if isinstance(state, Pending):
        return {"status": PENDING, "worker_email": None, "if_done_status": None, "service_amount_paid": None}
    if isinstance(state, Accepted):
        return {"status": ACCEPTED, "worker_email": state.worker_email, "if_done_status": None, "service_amount_paid": None}
    return {
        "status": ACCEPTED,
        "worker_email": state.worker_email,
        "if_done_status": DONE,
        "service_amount_paid": state.amount_paid,
    }


def _created_at(value) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return parser.isoparse(str(value))
    except ValueError as e:
        raise InvalidBookingDocument(f"Invalid created_at: {value!r}") from e


def booking_from_document(doc: dict) -> Booking:
    try:
        booking_id = doc["id"]
        rating = doc.get("rating")
        return Booking(
            id=str(booking_id),
            category_service=doc["category_service"],
            specific_service=doc["specific_service"],
            customer_id=str(doc["customer_id"]),
            customer_name=doc["customer_name"],
            customer_email=doc.get("customer_email"),
            customer_profile_img=doc.get("customer_profile_img"),
            region=Place.from_value(doc["region"]),
            province=Place.from_value(doc["province"]),
            city=Place.from_value(doc["city"]),
            barangay=Place.from_value(doc["barangay"]),
            additional_detail=doc.get("additional_detail"),
            state=state_from_document(doc),
            rating=int(rating) if rating is not None else None,
            created_at=_created_at(doc.get("created_at")),
        )
    except KeyError as e:
        raise InvalidBookingDocument(f"Booking document missing field {e.args[0]!r}") from e


def format_amount(amount: float) -> str:
    """Shortest exact rendering: 150.5, 1234567, 12345.67."""
    amount = float(amount)
    if amount.is_integer():
        return str(int(amount))
    return repr(amount)
