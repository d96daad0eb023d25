"""SQLAlchemy models for timebill database.

Timestamps are stored as epoch milliseconds in BigInteger columns.
"""

from sqlalchemy import (
    JSON,
    BigInteger,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    create_engine,
)
from sqlalchemy.orm import Session, declarative_base, relationship, sessionmaker

from timebill.utils.date_parser import now_millis

Base = declarative_base()


class Project(Base):
    """Project model."""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(BigInteger, default=now_millis, nullable=False)

    # Relationships
    time_entries = relationship("TimeEntry", back_populates="project")
    invoices = relationship("Invoice", back_populates="project")


class TimeEntry(Base):
    """Tracked time interval; ``ended_at`` is NULL while running."""

    __tablename__ = "time_entries"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    issue_id = Column(String, nullable=True)
    issue_title = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    started_at = Column(BigInteger, nullable=False)
    ended_at = Column(BigInteger, nullable=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=True)
    created_at = Column(BigInteger, default=now_millis, nullable=False)

    __table_args__ = (
        Index("ix_time_entries_project_started", "project_id", "started_at"),
        Index("ix_time_entries_ended", "ended_at"),
        Index("ix_time_entries_invoice_started", "invoice_id", "started_at"),
    )

    # Relationships
    project = relationship("Project", back_populates="time_entries")
    invoice = relationship("Invoice", back_populates="time_entries")


class Invoice(Base):
    """Finalized invoice model."""

    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True)
    invoice_number = Column(String, unique=True, nullable=False)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    status = Column(String, nullable=False, default="saved")
    currency = Column(String, nullable=False, default="USD")
    hourly_rate_cents = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)
    period_start = Column(BigInteger, nullable=False)
    period_end = Column(BigInteger, nullable=False)
    client_name = Column(String, nullable=True)
    client_location = Column(Text, nullable=True)
    from_location = Column(Text, nullable=True)
    payment_instructions = Column(Text, nullable=True)
    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=False)
    sent_at = Column(BigInteger, nullable=True)
    paid_at = Column(BigInteger, nullable=True)
    voided_at = Column(BigInteger, nullable=True)

    __table_args__ = (Index("ix_invoices_status_created", "status", "created_at"),)

    # Relationships
    project = relationship("Project", back_populates="invoices")
    time_entries = relationship("TimeEntry", back_populates="invoice")


class InvoiceDraft(Base):
    """Invoice draft with a JSON snapshot of the time entries it covers."""

    __tablename__ = "invoice_drafts"

    draft_id = Column(String, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    project_name = Column(String, nullable=False)
    currency = Column(String, nullable=False, default="USD")
    hourly_rate_cents = Column(Integer, nullable=False)
    period_start = Column(BigInteger, nullable=False)
    period_end = Column(BigInteger, nullable=False)
    client_name = Column(String, nullable=True)
    client_location = Column(Text, nullable=True)
    from_location = Column(Text, nullable=True)
    payment_instructions = Column(Text, nullable=True)
    time_entries = Column(JSON, nullable=False, default=list)
    created_at = Column(BigInteger, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
