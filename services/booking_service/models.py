from sqlalchemy import CheckConstraint, Column, DateTime, Float, Integer, JSON, String, func

from .db import Base


class BookingRecord(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint(
            "(if_done_status IS NULL) = (service_amount_paid IS NULL)",
            name="ck_bookings_amount_only_when_done",
        ),
    )

    id = Column(String, primary_key=True)

    category_service = Column(String, nullable=False)
    specific_service = Column(String, nullable=False)

    customer_id = Column(String, nullable=False, index=True)
    customer_email = Column(String, nullable=True, index=True)
    customer_name = Column(String, nullable=False)
    customer_profile_img = Column(String, nullable=True)

    worker_email = Column(String, nullable=True, index=True)

    # {"code": ..., "name": ...}
    region = Column(JSON, nullable=False)
    province = Column(JSON, nullable=False)
    city = Column(JSON, nullable=False)
    barangay = Column(JSON, nullable=False)

    additional_detail = Column(String, nullable=True)

    status = Column(String, nullable=False, index=True)  # pending/accepted
    if_done_status = Column(String, nullable=True)  # done
    service_amount_paid = Column(Float, nullable=True)
    rating = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
