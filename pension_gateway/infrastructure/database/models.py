"""SQLAlchemy ORM models for quote audit records and transaction flows"""

import uuid
from sqlalchemy import Column, String, BigInteger, Integer, DateTime, Text, JSON, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class PlanQuote(Base):
    """Deposit quote served to a wallet"""

    __tablename__ = "plan_quote"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    wallet_address = Column(String(42), nullable=True, index=True)
    monthly_amount_minor = Column(BigInteger, nullable=False)
    duration_months = Column(Integer, nullable=False)
    required_deposit_minor = Column(BigInteger, nullable=False)
    total_payout_minor = Column(BigInteger, nullable=False)
    violated_rule = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class PlanFlow(Base):
    """Approve-then-create transaction flow for one plan"""

    __tablename__ = "plan_flow"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    wallet_address = Column(String(42), nullable=False, index=True)
    monthly_amount_minor = Column(BigInteger, nullable=False)
    duration_months = Column(Integer, nullable=False)
    required_deposit_minor = Column(BigInteger, nullable=False)
    step = Column(Text, nullable=False, default="idle")
    allowance_minor = Column(BigInteger, nullable=False, default=0)
    approval_tx_hash = Column(Text, nullable=True)
    creation_tx_hash = Column(Text, nullable=True)
    error = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
