"""Data access layer for pension gateway entities"""

import uuid
from dataclasses import asdict
from typing import List, Optional
from sqlalchemy.orm import Session
from pension_gateway.infrastructure.database.models import PlanQuote, PlanFlow
from pension_gateway.domain.exceptions import FlowNotFoundError
from pension_gateway.domain.models import DepositQuote, PlanCreationArgs, UserFriendlyError, ValidationRule
from pension_gateway.domain.transactions import TransactionFlow, TransactionStep


class QuoteRepository:
    """Repository for deposit quotes"""

    def __init__(self, db: Session):
        self.db = db

    def create_quote(
        self,
        wallet_address: Optional[str],
        plan_args: PlanCreationArgs,
        quote: DepositQuote,
        violated_rule: Optional[ValidationRule],
    ) -> PlanQuote:
        """Persist a served quote"""
        db_quote = PlanQuote(
            wallet_address=wallet_address,
            monthly_amount_minor=plan_args.monthly_amount_minor,
            duration_months=plan_args.months,
            required_deposit_minor=quote.required_deposit_minor,
            total_payout_minor=quote.total_payout_minor,
            violated_rule=violated_rule.value if violated_rule else None,
        )
        self.db.add(db_quote)
        self.db.flush()  # Get ID without committing
        return db_quote

    def get_quotes_by_wallet(self, wallet_address: str, limit: int = 10) -> List[PlanQuote]:
        """Fetch recent quotes for a wallet"""
        return (
            self.db.query(PlanQuote)
            .filter(PlanQuote.wallet_address == wallet_address)
            .order_by(PlanQuote.created_at.desc())
            .limit(limit)
            .all()
        )


class FlowRepository:
    """Repository for plan-creation transaction flows"""

    def __init__(self, db: Session):
        self.db = db

    def create_flow(
        self,
        wallet_address: str,
        plan_args: PlanCreationArgs,
        flow: TransactionFlow,
    ) -> PlanFlow:
        """Persist a new flow in its initial step"""
        db_flow = PlanFlow(
            wallet_address=wallet_address,
            monthly_amount_minor=plan_args.monthly_amount_minor,
            duration_months=plan_args.months,
            required_deposit_minor=flow.required_deposit_minor,
        )
        self.save_flow(db_flow, flow)
        self.db.add(db_flow)
        self.db.flush()
        return db_flow

    def get_flow(self, flow_id: uuid.UUID) -> PlanFlow:
        """Fetch a flow or raise FlowNotFoundError"""
        db_flow = (
            self.db.query(PlanFlow)
            .filter(PlanFlow.id == flow_id)
            .first()
        )
        if db_flow is None:
            raise FlowNotFoundError(f"Flow {flow_id} not found")
        return db_flow

    def save_flow(self, db_flow: PlanFlow, flow: TransactionFlow) -> None:
        """Copy a flow snapshot onto its row"""
        db_flow.step = flow.step.value
        db_flow.allowance_minor = flow.allowance_minor
        db_flow.approval_tx_hash = flow.approval_tx_hash
        db_flow.creation_tx_hash = flow.creation_tx_hash
        db_flow.error = asdict(flow.error) if flow.error else None


def to_transaction_flow(db_flow: PlanFlow) -> TransactionFlow:
    """Rebuild the domain snapshot from a stored row"""
    return TransactionFlow(
        required_deposit_minor=db_flow.required_deposit_minor,
        step=TransactionStep(db_flow.step),
        allowance_minor=db_flow.allowance_minor,
        approval_tx_hash=db_flow.approval_tx_hash,
        creation_tx_hash=db_flow.creation_tx_hash,
        error=UserFriendlyError(**db_flow.error) if db_flow.error else None,
    )
