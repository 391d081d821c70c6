from sqlalchemy import Boolean, Column, DateTime, Integer, String, func

from .db import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, unique=True, nullable=False)
    full_name = Column(String, nullable=True)
    age = Column(Integer, nullable=True)
    gender = Column(String, nullable=True)
    image_url = Column(String, nullable=True)
    role = Column(String, nullable=False)  # customer/worker/admin
    is_worker_approved = Column(Boolean, nullable=False, default=False)


class WorkerApplication(Base):
    """Documents a worker uploads when applying; reviewed by an admin."""

    __tablename__ = "worker_applications"

    id = Column(String, primary_key=True)
    email = Column(String, nullable=False, index=True)

    certificate_url = Column(String, nullable=True)
    certificate_file_name = Column(String, nullable=True)
    license_url = Column(String, nullable=True)
    license_file_name = Column(String, nullable=True)
    valid_id_url = Column(String, nullable=True)
    valid_id_file_name = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
