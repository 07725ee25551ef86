"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Annotated, List, Optional, Union

from pension_gateway.domain.transactions import FlowEventType, TransactionStep

WALLET_ADDRESS_PATTERN = r"^0x[a-fA-F0-9]{40}$"
TX_HASH_PATTERN = r"^0x[a-fA-F0-9]{64}$"

# Form input: non-numeric text is accepted and counts as 0
MonthlyAmount = Union[
    Annotated[Decimal, Field(max_digits=40)],
    Annotated[str, Field(max_length=64)],
]

# Wide enough for out-of-range answers, narrow enough for BIGINT minor units
DurationYears = Annotated[int, Field(ge=-100, le=100, description="Plan length in years")]


class QuoteRequest(BaseModel):
    """Request body for POST /v1/quote"""

    monthly_amount: MonthlyAmount = Field("0", description="Desired monthly pension in USDC")
    duration_years: DurationYears
    wallet_address: Optional[str] = Field(None, pattern=WALLET_ADDRESS_PATTERN)


class PlanArgsSchema(BaseModel):
    """Arguments for the plan-creation contract call"""

    monthly_amount_minor: int
    months: int
    total_deposit_minor: int


class QuoteResponse(BaseModel):
    """Response for POST /v1/quote"""

    quote_id: str
    required_deposit: Decimal
    required_deposit_minor: int
    required_deposit_display: str
    total_payout: Decimal
    total_payout_minor: int
    total_payout_display: str
    plan_args: PlanArgsSchema
    violated_rule: Optional[str] = None


class ValidateRequest(BaseModel):
    """Request body for POST /v1/validate"""

    monthly_amount: MonthlyAmount = "0"
    duration_years: DurationYears
    wallet_balance_minor: Optional[int] = Field(None, ge=0)
    contract_min_deposit_minor: Optional[int] = Field(None, ge=0)
    wallet_address: Optional[str] = Field(None, pattern=WALLET_ADDRESS_PATTERN)


class ValidateResponse(BaseModel):
    """Response for POST /v1/validate"""

    ok: bool
    violated_rule: Optional[str] = None
    message: Optional[str] = None
    wallet_balance_minor: Optional[int] = None
    contract_min_deposit_minor: Optional[int] = None


class QuoteHistoryItem(BaseModel):
    """Single quote in history"""

    quote_id: str
    monthly_amount_minor: int
    duration_months: int
    required_deposit_minor: int
    total_payout_minor: int
    violated_rule: Optional[str] = None
    created_at: str


class QuoteHistoryResponse(BaseModel):
    """Response for GET /v1/quote/history"""

    wallet_address: str
    quotes: List[QuoteHistoryItem]


class FlowCreateRequest(BaseModel):
    """Request body for POST /v1/flows"""

    wallet_address: str = Field(..., pattern=WALLET_ADDRESS_PATTERN)
    monthly_amount: MonthlyAmount
    duration_years: DurationYears


class FlowEventRequest(BaseModel):
    """Request body for POST /v1/flows/{flow_id}/events"""

    event: FlowEventType
    tx_hash: Optional[str] = Field(None, pattern=TX_HASH_PATTERN)
    allowance_minor: Optional[int] = Field(None, ge=0)
    error_message: Optional[str] = None


class FlowErrorSchema(BaseModel):
    title: str
    message: str
    action: Optional[str] = None
    action_url: Optional[str] = None


class FlowResponse(BaseModel):
    """Transaction flow snapshot"""

    flow_id: str
    wallet_address: str
    step: TransactionStep
    approval_needed: bool
    allowance_minor: int
    plan_args: PlanArgsSchema
    approval_tx_hash: Optional[str] = None
    approval_tx_url: Optional[str] = None
    approval_tx_display: Optional[str] = None
    creation_tx_hash: Optional[str] = None
    creation_tx_url: Optional[str] = None
    creation_tx_display: Optional[str] = None
    error: Optional[FlowErrorSchema] = None


class PlanSchema(BaseModel):
    """On-chain plan with derived schedule fields"""

    plan_id: int
    payment_amount_minor: int
    payments_remaining: int
    remaining_payout_minor: int
    status: str
    last_paid_at: Optional[datetime] = None
    next_payment_at: Optional[datetime] = None


class PlansResponse(BaseModel):
    """Response for GET /v1/plans"""

    wallet_address: str
    interval_days: int
    plans: List[PlanSchema]
