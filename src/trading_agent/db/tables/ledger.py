"""SQLAlchemy ORM model for the trading_ledger schema."""

from sqlalchemy import BigInteger, Index, Integer, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import DateTime

from trading_agent.db.base import Base

SCHEMA = "trading_ledger"


class LedgerRecordRow(Base):
    __tablename__ = "records"
    __table_args__ = (
        UniqueConstraint("record_type", "instrument", "ts", "seq"),
        Index("ix_records_instrument_ts", "instrument", "ts"),
        {"schema": SCHEMA},
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    record_type: Mapped[str] = mapped_column(Text, nullable=False)
    instrument: Mapped[str] = mapped_column(Text, nullable=False)
    ts: Mapped[DateTime] = mapped_column(DateTime(timezone=True), nullable=False)
    seq: Mapped[int] = mapped_column(Integer, nullable=False)
    payload: Mapped[dict] = mapped_column(JSONB, nullable=False)
