"""
SQLAlchemy ORM models for persistent storage.

Accounts own tracked sets and per-account card slots. Catalog identifiers
are copied in when a set is added and are never re-validated.
"""

from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    ForeignKeyConstraint,
    Integer,
    String,
    UniqueConstraint,
    false,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class AccountDB(Base):
    """
    Internal account record for an authenticated user.

    Keyed by the identity provider's subject id, created on first sight.
    """

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    subject_id: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    def __repr__(self) -> str:
        return f"<AccountDB(id={self.id}, subject_id={self.subject_id})>"


class TrackedSetDB(Base):
    """
    A catalog set an account has chosen to collect.

    collected_cards is a cached count of the account's collected cards for
    this set. It is always recomputed from card rows, never incremented.
    """

    __tablename__ = "tracked_sets"
    __table_args__ = (UniqueConstraint("account_id", "set_api_id", name="uq_account_set"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("accounts.id", ondelete="CASCADE"), index=True
    )
    set_api_id: Mapped[str] = mapped_column(String(100))
    set_name: Mapped[str] = mapped_column(String(255))
    set_series: Mapped[str | None] = mapped_column(String(255), nullable=True)
    total_cards: Mapped[int] = mapped_column(Integer)
    collected_cards: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    @property
    def completion_percent(self) -> float:
        """Share of the set collected, as a percentage with one decimal."""
        if self.total_cards <= 0:
            return 0.0
        return round(100 * self.collected_cards / self.total_cards, 1)

    def __repr__(self) -> str:
        return (
            f"<TrackedSetDB(set={self.set_api_id}, "
            f"progress={self.collected_cards}/{self.total_cards})>"
        )


class UserCardDB(Base):
    """
    One account's collection slot for a catalog card within a tracked set.

    The (account_id, set_api_id) pair references the parent tracked set, so a
    card only exists while its set does.
    """

    __tablename__ = "user_cards"
    __table_args__ = (
        UniqueConstraint("account_id", "set_api_id", "card_api_id", name="uq_account_set_card"),
        ForeignKeyConstraint(
            ["account_id", "set_api_id"],
            ["tracked_sets.account_id", "tracked_sets.set_api_id"],
            ondelete="CASCADE",
            name="fk_user_cards_tracked_set",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("accounts.id", ondelete="CASCADE"), index=True
    )
    set_api_id: Mapped[str] = mapped_column(String(100), index=True)
    card_api_id: Mapped[str] = mapped_column(String(100))
    card_name: Mapped[str] = mapped_column(String(255))
    # Catalog-defined format ("3", "TG05", "SV001"), not numerically sortable
    card_number: Mapped[str] = mapped_column(String(50))
    collected: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false())

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    def __repr__(self) -> str:
        return f"<UserCardDB(card={self.card_api_id}, collected={self.collected})>"
