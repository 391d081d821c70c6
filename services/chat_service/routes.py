import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .db import SessionLocal
from .models import Conversation, pair_key
from .publisher import publisher
from .schemas import ConversationResponse, EnsureConversation, EnsureConversationResponse

logger = logging.getLogger(__name__)

router = APIRouter()


async def get_db():
    async with SessionLocal() as session:
        yield session


def _to_response(c: Conversation) -> ConversationResponse:
    return ConversationResponse(
        conversation_id=c.id,
        participant_a=c.participant_a,
        participant_b=c.participant_b,
        display_name_a=c.display_name_a,
        display_name_b=c.display_name_b,
        avatar_a=c.avatar_a,
        avatar_b=c.avatar_b,
        created_at=c.created_at,
    )


async def _find_by_pair(db: AsyncSession, key: str) -> Conversation | None:
    res = await db.execute(select(Conversation).where(Conversation.pair_key == key))
    return res.scalar_one_or_none()


@router.post("/conversations/ensure", response_model=EnsureConversationResponse)
async def ensure_conversation(data: EnsureConversation, db: AsyncSession = Depends(get_db)):
    if data.participant_a == data.participant_b:
        raise HTTPException(status_code=400, detail="A conversation needs two different participants")

    key = pair_key(data.participant_a, data.participant_b)

    existing = await _find_by_pair(db, key)
    if existing:
        return EnsureConversationResponse(conversation_id=existing.id, created=False)

    conversation = Conversation(
        id=str(uuid.uuid4()),
        pair_key=key,
        participant_a=data.participant_a,
        participant_b=data.participant_b,
        display_name_a=data.display_name_a,
        display_name_b=data.display_name_b,
        avatar_a=data.avatar_a,
        avatar_b=data.avatar_b,
    )
    db.add(conversation)
    try:
        await db.commit()
    except IntegrityError:
        # lost a race against another ensure for the same pair
        await db.rollback()
        existing = await _find_by_pair(db, key)
        if not existing:
            raise
        return EnsureConversationResponse(conversation_id=existing.id, created=False)

    logger.info("conversation %s created", conversation.id)
    await publisher.publish_event(
        "conversation.created",
        {
            "conversation_id": conversation.id,
            "participants": [data.participant_a, data.participant_b],
        },
    )

    return EnsureConversationResponse(conversation_id=conversation.id, created=True)


@router.get("/conversations/{conversation_id}", response_model=ConversationResponse)
async def get_conversation(conversation_id: str, db: AsyncSession = Depends(get_db)):
    res = await db.execute(select(Conversation).where(Conversation.id == conversation_id))
    conversation = res.scalar_one_or_none()
    if not conversation:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return _to_response(conversation)


@router.get("/conversations", response_model=list[ConversationResponse])
async def list_conversations(participant: str, db: AsyncSession = Depends(get_db)):
    res = await db.execute(
        select(Conversation)
        .where(or_(Conversation.participant_a == participant, Conversation.participant_b == participant))
        .order_by(Conversation.created_at)
    )
    return [_to_response(c) for c in res.scalars().all()]
