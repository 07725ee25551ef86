"""Pension plan economics - deposit formula, payout and the plan-creation gate"""

import math
from decimal import Decimal, InvalidOperation, localcontext
from fractions import Fraction
from typing import Any, Optional

from pension_gateway.domain.models import (
    MONTHS_PER_YEAR,
    DepositQuote,
    PlanBounds,
    PlanCreationArgs,
    PlanRequest,
    ValidationResult,
    ValidationRule,
)

USDC_DECIMALS = 6
FEE_PERCENT = 10  # origination fee charged on top of the deposit
TRUNCATION_STEP = 100
PAYOUT_MULTIPLIER = Decimal("1.1")

# Monthly amounts outside [MIN, MAX) cannot describe a fundable plan and
# compute as 0; the pension bounds in the validation gate still reject them.
MAX_MONTHLY_AMOUNT = Decimal("1e9")
MIN_MONTHLY_AMOUNT = Decimal("1e-18")

# Amounts with a larger decimal exponent convert to 0 instead of being expanded
MAX_AMOUNT_EXPONENT = 30

ZERO = Decimal(0)


def parse_amount(value: Any) -> Decimal:
    """
    Coerce user input into a Decimal amount.

    Empty, non-numeric and non-finite input becomes 0. Floats go through
    their shortest repr so 0.1 stays 0.1 instead of its binary expansion.
    Magnitude is preserved, so 1e999999 compares above any pension bound.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            return ZERO
    if not amount.is_finite():
        return ZERO
    return amount


def _within_exponent_range(amount: Decimal) -> bool:
    return amount == 0 or abs(amount.adjusted()) <= MAX_AMOUNT_EXPONENT


def _plan_amount(value: Any) -> Decimal:
    """Monthly amount usable by the formulas, 0 when out of range"""
    amount = parse_amount(value)
    if not MIN_MONTHLY_AMOUNT <= abs(amount) < MAX_MONTHLY_AMOUNT:
        return ZERO
    return amount


def to_minor_units(amount: Any) -> int:
    """
    Convert a decimal USDC amount to 6-decimal minor units (half-up).

    Amounts whose exponent is beyond ±MAX_AMOUNT_EXPONENT convert to 0.
    """
    value = parse_amount(amount)
    if not _within_exponent_range(value):
        return 0

    scaled = abs(Fraction(value)) * 10**USDC_DECIMALS
    minor = math.floor(scaled + Fraction(1, 2))
    return -minor if value < 0 else minor


def from_minor_units(amount_minor: int) -> Decimal:
    """Convert minor units back to a decimal USDC amount"""
    return Decimal(amount_minor).scaleb(-USDC_DECIMALS)


def compute_deposit(monthly_amount: Any, number_of_months: int) -> Decimal:
    """
    Calculate the deposit the pension contract accepts for a plan.

    Requirements:
    - total_to_receive = monthly_amount * number_of_months
    - Invert the 10% fee: total_with_fee = total_to_receive * 100 / 110
    - Truncate: floor(total_with_fee / 100) * 100, even for exact multiples
    - Non-positive or out-of-range inputs give 0, the validation gate
      rejects them later

    The contract recomputes the same value and rejects any mismatch, so the
    arithmetic is exact (rationals) rather than binary floating point.

    Raises:
        TypeError: number_of_months is not an integer

    Example:
        1000/month for 12 months → 12000 → 10909.09... → 10900
    """
    if isinstance(number_of_months, bool) or not isinstance(number_of_months, int):
        raise TypeError(f"number_of_months must be an int, got {type(number_of_months).__name__}")

    monthly = _plan_amount(monthly_amount)
    if monthly <= 0 or number_of_months <= 0:
        return ZERO

    total_to_receive = Fraction(monthly) * number_of_months
    total_with_fee = total_to_receive * 100 / (100 + FEE_PERCENT)
    truncated = math.floor(total_with_fee / TRUNCATION_STEP) * TRUNCATION_STEP

    return Decimal(truncated)


def compute_total_payout(required_deposit: Any) -> Decimal:
    """
    Total the beneficiary receives across all payments: deposit * 1.1.

    Always derived from the truncated deposit, never from
    monthly_amount * months, so it can be slightly below what the user typed.
    """
    deposit = parse_amount(required_deposit)
    if deposit <= 0 or not _within_exponent_range(deposit):
        return ZERO

    with localcontext() as ctx:
        # Room for every digit of the product so the result is exact
        ctx.prec = max(ctx.prec, len(deposit.as_tuple().digits) + 2)
        return deposit * PAYOUT_MULTIPLIER


def quote_plan(monthly_amount: Any, duration_years: int) -> DepositQuote:
    """Deposit and payout for the given form values, in decimal and minor units"""
    deposit = compute_deposit(monthly_amount, duration_years * MONTHS_PER_YEAR)
    payout = compute_total_payout(deposit)

    return DepositQuote(
        required_deposit=deposit,
        total_payout=payout,
        required_deposit_minor=to_minor_units(deposit),
        total_payout_minor=to_minor_units(payout),
    )


def plan_creation_args(request: PlanRequest) -> PlanCreationArgs:
    """Build the (monthly amount, months, total deposit) contract arguments"""
    deposit = compute_deposit(request.monthly_amount, request.duration_months)

    return PlanCreationArgs(
        monthly_amount_minor=to_minor_units(_plan_amount(request.monthly_amount)),
        months=request.duration_months,
        total_deposit_minor=to_minor_units(deposit),
    )


def validate_plan_inputs(
    monthly_amount: Any,
    duration_years: int,
    wallet_balance: Optional[int] = None,
    contract_min_deposit: Optional[int] = None,
    bounds: Optional[PlanBounds] = None,
) -> ValidationResult:
    """
    Gate that must pass before a plan-creation transaction is submitted.

    Rules are checked in order and the first failure is the only one
    reported:
    1. 0 < monthly_amount < min pension       → MinPension
    2. monthly_amount > max pension           → MaxPension
    3. duration outside [min_years, max_years] → DurationRange
    4. deposit > wallet_balance               → InsufficientBalance
    5. deposit < contract_min_deposit         → BelowContractMinimum

    Args:
        monthly_amount: Form value, empty or non-numeric counts as 0
        duration_years: Plan length in years
        wallet_balance: USDC balance in minor units, None while unknown
        contract_min_deposit: Contract minimum in minor units, None while unknown
        bounds: Product limits (defaults to PlanBounds())

    Rules 4 and 5 are skipped, not failed, while their input is unknown.
    """
    bounds = bounds or PlanBounds()
    monthly = parse_amount(monthly_amount)

    if 0 < monthly < bounds.min_monthly_pension:
        return ValidationResult.failed(ValidationRule.MIN_PENSION)

    if monthly > bounds.max_monthly_pension:
        return ValidationResult.failed(ValidationRule.MAX_PENSION)

    if duration_years < bounds.min_years or duration_years > bounds.max_years:
        return ValidationResult.failed(ValidationRule.DURATION_RANGE)

    deposit_minor = to_minor_units(compute_deposit(monthly, duration_years * MONTHS_PER_YEAR))

    if wallet_balance is not None and deposit_minor > wallet_balance:
        return ValidationResult.failed(ValidationRule.INSUFFICIENT_BALANCE)

    if contract_min_deposit is not None and deposit_minor < contract_min_deposit:
        return ValidationResult.failed(ValidationRule.BELOW_CONTRACT_MINIMUM)

    return ValidationResult.passed()


def describe_violation(rule: ValidationRule, bounds: Optional[PlanBounds] = None) -> str:
    """UI message for a violated rule"""
    bounds = bounds or PlanBounds()
    messages = {
        ValidationRule.MIN_PENSION: f"Pension must be at least ${bounds.min_monthly_pension}",
        ValidationRule.MAX_PENSION: f"Pension cannot exceed ${bounds.max_monthly_pension}",
        ValidationRule.DURATION_RANGE: (
            f"Duration must be between {bounds.min_years} and {bounds.max_years} years"
        ),
        ValidationRule.INSUFFICIENT_BALANCE: "Insufficient balance for this plan",
        ValidationRule.BELOW_CONTRACT_MINIMUM: "Deposit is below minimum required",
    }
    return messages[rule]
