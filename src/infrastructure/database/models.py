"""SQLAlchemy ORM models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ProfileModel(Base):
    """User profile model (synced from the profile backend, read-only here)."""

    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint("age >= 18", name="ck_profiles_adult"),
        CheckConstraint(
            "gender IN ('male', 'female', 'other')", name="ck_profiles_gender"
        ),
        CheckConstraint(
            "interested_in IN ('male', 'female', 'everyone')",
            name="ck_profiles_interested_in",
        ),
    )

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    gender: Mapped[str] = mapped_column(String(20), nullable=False)
    interested_in: Mapped[str] = mapped_column(String(20), nullable=False)
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    hobbies: Mapped[str | None] = mapped_column(Text)
    image_url: Mapped[str | None] = mapped_column(String(500))
    dating_preference: Mapped[str | None] = mapped_column(String(20))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class LikeModel(Base):
    """Directional like (composite PK on from_id + to_id)."""

    __tablename__ = "likes"

    from_id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
    )
    to_id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class MatchModel(Base):
    """Match model keyed by the sorted-pair identifier."""

    __tablename__ = "matches"
    __table_args__ = (
        CheckConstraint("user_a < user_b", name="ck_matches_canonical_order"),
    )

    id: Mapped[str] = mapped_column(String(80), primary_key=True)
    user_a: Mapped[UUID] = mapped_column(
        Uuid,
        nullable=False,
        index=True,
    )
    user_b: Mapped[UUID] = mapped_column(
        Uuid,
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    messages: Mapped[list["MessageModel"]] = relationship(
        "MessageModel",
        back_populates="match",
        passive_deletes=True,
    )


class MessageModel(Base):
    """Message in a match's conversation."""

    __tablename__ = "messages"
    __table_args__ = (
        UniqueConstraint("match_id", "position", name="uq_messages_match_position"),
        Index("ix_messages_match_order", "match_id", "created_at", "position"),
    )

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )
    match_id: Mapped[str] = mapped_column(
        String(80),
        ForeignKey("matches.id", ondelete="CASCADE"),
        nullable=False,
    )
    sender_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    seen: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Relationships
    match: Mapped["MatchModel"] = relationship(
        "MatchModel",
        back_populates="messages",
    )
