"""SQLAlchemy models for tillbook database."""

from datetime import datetime, UTC
from sqlalchemy import (
    JSON,
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    Index,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(UTC)


class Counter(Base):
    """Point-of-sale counter model."""

    __tablename__ = "counters"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    kind = Column(String, nullable=False, default="simple")
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)


class DayEntry(Base):
    """Day entry model: one row per counter per business day.

    Denomination breakdowns and sales figures are stored as JSON documents.
    """

    __tablename__ = "day_entries"

    id = Column(Integer, primary_key=True)
    counter_name = Column(String, nullable=False)
    date = Column(Date, nullable=False)

    opening_cash = Column(Numeric(12, 2), nullable=False, default=0)
    opening_denominations = Column(JSON, nullable=False, default=dict)
    opening_verified = Column(Boolean, nullable=False, default=False)
    opening_verified_at = Column(DateTime(timezone=True), nullable=True)

    sales = Column(JSON, nullable=False, default=dict)
    closing_denominations = Column(JSON, nullable=False, default=dict)

    next_day_opening_cash = Column(Numeric(12, 2), nullable=True)
    next_day_opening_denominations = Column(JSON, nullable=True)

    submitted_expected_cash = Column(Numeric(12, 2), nullable=True)
    submitted_actual_cash = Column(Numeric(12, 2), nullable=True)
    submitted_shortage = Column(Numeric(12, 2), nullable=True)
    closed_by = Column(String, nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=True)

    status = Column(String, nullable=False, default="open")
    confirmed_by = Column(String, nullable=True)
    confirmed_at = Column(DateTime(timezone=True), nullable=True)

    # Highest payment_no ever issued for this entry; never decreases
    last_payment_id = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_now, nullable=False)

    # One entry per counter per day; also serves the "latest before date" lookup
    __table_args__ = (
        UniqueConstraint("counter_name", "date", name="uq_counter_date"),
        Index("ix_day_entries_counter_date", "counter_name", "date"),
    )

    # Relationships
    payments = relationship(
        "Payment",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="Payment.position",
    )


class Payment(Base):
    """Payment model.

    ``payment_no`` is the stable id of the payment within its entry;
    ``position`` preserves insertion order.
    """

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    entry_id = Column(Integer, ForeignKey("day_entries.id"), nullable=False)
    payment_no = Column(Integer, nullable=False)
    position = Column(Integer, nullable=False)
    time = Column(DateTime(timezone=True), default=_now, nullable=False)
    description = Column(String, nullable=False, default="")
    amount = Column(Numeric(12, 2), nullable=False)
    # NULL for legacy rows recorded before payments carried a direction
    direction = Column(String, nullable=True)

    __table_args__ = (UniqueConstraint("entry_id", "payment_no", name="uq_entry_payment_no"),)

    # Relationships
    entry = relationship("DayEntry", back_populates="payments")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
