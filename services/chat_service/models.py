from sqlalchemy import Column, DateTime, String, func

from .db import Base


class Conversation(Base):
    __tablename__ = "conversations"

    id = Column(String, primary_key=True)
    # sorted "a|b" so each unordered pair has one thread
    pair_key = Column(String, unique=True, nullable=False, index=True)

    participant_a = Column(String, nullable=False, index=True)
    participant_b = Column(String, nullable=False, index=True)
    display_name_a = Column(String, nullable=False, default="")
    display_name_b = Column(String, nullable=False, default="")
    avatar_a = Column(String, nullable=False, default="")
    avatar_b = Column(String, nullable=False, default="")

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


def pair_key(participant_a: str, participant_b: str) -> str:
    return "|".join(sorted([participant_a, participant_b]))
