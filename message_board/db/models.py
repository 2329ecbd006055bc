"""ORM models for users and messages.

Column names (``userId``, ``creationDate``) match the original table layout
so existing SQLite files stay readable.
"""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    creation_date: Mapped[str] = mapped_column("creationDate", Text, nullable=False)

    messages: Mapped[list["Message"]] = relationship(back_populates="user", lazy="raise")

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, name={self.name!r})"


class Message(Base):
    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_user_id_creation_date", "userId", "creationDate"),
    )

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    user_id: Mapped[str] = mapped_column(
        "userId", Text, ForeignKey("users.id"), nullable=False
    )
    body: Mapped[str] = mapped_column(Text, nullable=False)
    creation_date: Mapped[str] = mapped_column("creationDate", Text, nullable=False)

    user: Mapped[User] = relationship(back_populates="messages", lazy="raise")

    def __repr__(self) -> str:
        return f"Message(id={self.id!r}, user_id={self.user_id!r})"
