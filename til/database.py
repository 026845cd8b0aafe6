"""
Database models and session management for the local fact store.

Uses SQLAlchemy with SQLite by default. The table mirrors the hosted
``fact`` table, camelCase vote columns included, so either store can
sit behind the board.
"""

from datetime import datetime, UTC

from sqlalchemy import Integer, String, Text, DateTime, create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker, Mapped, mapped_column

from til.config import get_settings


# =============================================================================
# Database Setup
# =============================================================================


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def get_engine():
    """Create database engine."""
    settings = get_settings()
    return create_engine(
        settings.database_url,
        connect_args={"check_same_thread": False} if "sqlite" in settings.database_url else {},
        echo=settings.debug
    )


engine = get_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db():
    """Initialize database tables."""
    Base.metadata.create_all(bind=engine)


# =============================================================================
# Database Models
# =============================================================================


class Fact(Base):
    """A fact shared on the board."""

    __tablename__ = "fact"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    text: Mapped[str] = mapped_column(Text, nullable=False)
    source: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(50), index=True, nullable=False)

    votes_interesting: Mapped[int] = mapped_column(
        "votesInteresting", Integer, default=0, index=True, nullable=False
    )
    votes_mindblowing: Mapped[int] = mapped_column(
        "votesMindblowing", Integer, default=0, nullable=False
    )
    votes_false: Mapped[int] = mapped_column(
        "votesFalse", Integer, default=0, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(UTC), nullable=False
    )
