"""SQLAlchemy models for splitbill database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Bill(Base):
    """Split bill model."""

    __tablename__ = "bills"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    total_amount = Column(Numeric(14, 3), nullable=False)
    date = Column(DateTime, nullable=False)
    currency = Column(String(3), nullable=False)
    location = Column(String, nullable=True)
    description = Column(String, nullable=True)
    is_settled = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Relationships
    participants = relationship(
        "BillParticipant",
        back_populates="bill",
        cascade="all, delete-orphan",
        order_by="BillParticipant.position",
    )


class BillParticipant(Base):
    """Participant share stored with a bill."""

    __tablename__ = "bill_participants"

    row_id = Column(Integer, primary_key=True)
    id = Column(String, nullable=False)
    bill_id = Column(String, ForeignKey("bills.id"), nullable=False)
    position = Column(Integer, nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    amount_owed = Column(Numeric(14, 3), nullable=False)
    has_paid = Column(Boolean, default=False, nullable=False)

    # Relationships
    bill = relationship("Bill", back_populates="participants")


class SavedParticipant(Base):
    """Address-book entry for participants reused across bills."""

    __tablename__ = "saved_participants"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    last_used_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
