"""SQLAlchemy ORM models."""

from sqlalchemy import Column, Float, Integer, String, Text

from .base import Base
from .types import IsoTimestamp, utcnow


class ClaimHistory(Base):
    __tablename__ = "claim_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    wallet_address = Column(String(64), nullable=False, unique=True)
    ip_address = Column(Text, nullable=False, default="")
    last_claim_time = Column(IsoTimestamp(), nullable=False)
    claim_count = Column(Integer, nullable=False, default=1)


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    wallet_address = Column(String(64), nullable=False, index=True)
    ip_address = Column(Text, nullable=False, default="")
    amount = Column(Float, nullable=False)
    status = Column(String(20), nullable=False)
    tx_hash = Column(String(128))
    error_message = Column(Text)
    timestamp = Column(IsoTimestamp(), nullable=False, default=utcnow, index=True)
