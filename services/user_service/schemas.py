from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class CreateUser(BaseModel):
    email: str
    full_name: str | None = None
    age: int | None = None
    gender: str | None = None
    image_url: str | None = None
    role: Literal["customer", "worker", "admin"] = "customer"


class UserResponse(BaseModel):
    id: str
    email: str
    full_name: str | None = None
    age: int | None = None
    gender: str | None = None
    image_url: str | None = None
    role: str
    is_worker_approved: bool


class UpdateApproval(BaseModel):
    is_worker_approved: bool


class ApplicationResponse(BaseModel):
    id: str
    email: str
    certificate_url: str | None = None
    certificate_file_name: str | None = None
    license_url: str | None = None
    license_file_name: str | None = None
    valid_id_url: str | None = None
    valid_id_file_name: str | None = None
    created_at: datetime | None = None
    is_worker_approved: bool = False
