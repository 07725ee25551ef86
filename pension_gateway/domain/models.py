"""Domain models - pure Python dataclasses representing pension plan values"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional


MONTHS_PER_YEAR = 12


class ValidationRule(str, Enum):
    """Plan-creation rules, declared in evaluation order"""

    MIN_PENSION = "MinPension"
    MAX_PENSION = "MaxPension"
    DURATION_RANGE = "DurationRange"
    INSUFFICIENT_BALANCE = "InsufficientBalance"
    BELOW_CONTRACT_MINIMUM = "BelowContractMinimum"


@dataclass(frozen=True)
class PlanBounds:
    """Product policy limits, independent of contract-reported bounds"""

    min_monthly_pension: Decimal = Decimal(1)
    max_monthly_pension: Decimal = Decimal(1_000_000)
    min_years: int = 1
    max_years: int = 10


@dataclass(frozen=True)
class PlanRequest:
    """User's desired pension terms before any on-chain effect"""

    monthly_amount: Decimal
    duration_months: int

    @classmethod
    def from_years(cls, monthly_amount: Decimal, duration_years: int) -> "PlanRequest":
        return cls(monthly_amount=monthly_amount, duration_months=duration_years * MONTHS_PER_YEAR)


@dataclass(frozen=True)
class DepositQuote:
    """Deposit and payout derived from a PlanRequest"""

    required_deposit: Decimal
    total_payout: Decimal
    required_deposit_minor: int
    total_payout_minor: int


@dataclass(frozen=True)
class PlanCreationArgs:
    """Arguments of the plan-creation contract call, in contract integer types"""

    monthly_amount_minor: int
    months: int
    total_deposit_minor: int


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of the plan-creation gate"""

    ok: bool
    violated_rule: Optional[ValidationRule] = None

    @classmethod
    def passed(cls) -> "ValidationResult":
        return cls(ok=True)

    @classmethod
    def failed(cls, rule: ValidationRule) -> "ValidationResult":
        return cls(ok=False, violated_rule=rule)


@dataclass(frozen=True)
class ContractConfig:
    """Contract parameters read from chain"""

    min_deposit_minor: int
    interval_seconds: int
    min_duration: int
    max_duration: int


@dataclass
class ContractPlan:
    """Pension plan as stored by the contract"""

    plan_id: int
    beneficiary: str
    payment_amount_minor: int
    payments_remaining: int
    last_paid: int  # unix seconds, 0 until the first payment
    active: bool


@dataclass(frozen=True)
class UserFriendlyError:
    """Transaction failure translated for display"""

    title: str
    message: str
    action: Optional[str] = None
    action_url: Optional[str] = None
