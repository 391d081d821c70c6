import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.rbac import require_role
from shared.security import get_current_user

from .db import SessionLocal
from .models import User, WorkerApplication
from .publisher import publisher
from .schemas import ApplicationResponse, CreateUser, UpdateApproval, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


async def get_db():
    async with SessionLocal() as session:
        yield session


def _to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        age=user.age,
        gender=user.gender,
        image_url=user.image_url,
        role=user.role,
        is_worker_approved=bool(user.is_worker_approved),
    )


@router.post("/users", response_model=UserResponse)
async def create_user(data: CreateUser, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).where(User.email == data.email))
    existing = result.scalar_one_or_none()

    if existing:
        raise HTTPException(status_code=400, detail="User already exists")

    user = User(
        id=str(uuid.uuid4()),
        email=data.email,
        full_name=data.full_name,
        age=data.age,
        gender=data.gender,
        image_url=data.image_url,
        role=data.role,
        is_worker_approved=False,
    )

    db.add(user)
    await db.commit()

    await publisher.publish_event(
        "user.created",
        {"id": user.id, "email": user.email, "role": user.role},
    )

    return _to_response(user)


@router.get("/users", response_model=list[UserResponse])
async def list_users(db: AsyncSession = Depends(get_db), user=Depends(get_current_user)):
    require_role(user, ["admin"])
    result = await db.execute(select(User).order_by(User.email))
    return [_to_response(u) for u in result.scalars().all()]


@router.get("/users/{email}", response_model=UserResponse)
async def get_user(email: str, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    return _to_response(user)


@router.put("/users/{email}/approval", response_model=UserResponse)
async def update_approval(
    email: str,
    data: UpdateApproval,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    require_role(user, ["admin"])

    result = await db.execute(select(User).where(User.email == email))
    applicant = result.scalar_one_or_none()

    if not applicant:
        logger.info("No user found with email %s", email)
        raise HTTPException(status_code=404, detail="User not found")

    applicant.is_worker_approved = data.is_worker_approved
    await db.commit()

    logger.info("worker approval for %s set to %s by %s", email, data.is_worker_approved, user.get("sub"))
    await publisher.publish_event(
        "user.worker_approval_changed",
        {"email": applicant.email, "is_worker_approved": data.is_worker_approved},
    )

    return _to_response(applicant)


@router.get("/applications", response_model=list[ApplicationResponse])
async def list_applications(db: AsyncSession = Depends(get_db), user=Depends(get_current_user)):
    require_role(user, ["admin"])

    apps = (await db.execute(select(WorkerApplication).order_by(WorkerApplication.created_at))).scalars().all()
    emails = {a.email for a in apps}

    approved = {}
    if emails:
        res = await db.execute(select(User.email, User.is_worker_approved).where(User.email.in_(emails)))
        approved = {email: bool(flag) for email, flag in res.all()}

    return [
        ApplicationResponse(
            id=a.id,
            email=a.email,
            certificate_url=a.certificate_url,
            certificate_file_name=a.certificate_file_name,
            license_url=a.license_url,
            license_file_name=a.license_file_name,
            valid_id_url=a.valid_id_url,
            valid_id_file_name=a.valid_id_file_name,
            created_at=a.created_at,
            is_worker_approved=approved.get(a.email, False),
        )
        for a in apps
    ]
