"""Unit tests for the plan-creation validation gate"""

from decimal import Decimal
from pension_gateway.domain.economics import describe_violation, validate_plan_inputs
from pension_gateway.domain.models import PlanBounds, ValidationRule

USDC = 1_000_000


def test_below_min_pension():
    """0 < 0.5 < 1 → MinPension even with a huge balance"""
    result = validate_plan_inputs(0.5, 1, 1_000_000_000, 0)

    assert result.ok is False
    assert result.violated_rule == ValidationRule.MIN_PENSION


def test_above_max_pension():
    result = validate_plan_inputs(2_000_000, 1)
    assert result.violated_rule == ValidationRule.MAX_PENSION


def test_duration_out_of_range():
    assert validate_plan_inputs(100, 15).violated_rule == ValidationRule.DURATION_RANGE
    assert validate_plan_inputs(100, 0).violated_rule == ValidationRule.DURATION_RANGE
    assert validate_plan_inputs(100, -3).violated_rule == ValidationRule.DURATION_RANGE


def test_duration_bounds_inclusive():
    assert validate_plan_inputs(100, 1).ok is True
    assert validate_plan_inputs(100, 10).ok is True


def test_insufficient_balance():
    """100/month for a year needs 1000 USDC, wallet holds 5000 minor units"""
    result = validate_plan_inputs(100, 1, wallet_balance=5000, contract_min_deposit=0)
    assert result.violated_rule == ValidationRule.INSUFFICIENT_BALANCE


def test_balance_exactly_covers_deposit():
    result = validate_plan_inputs(100, 1, wallet_balance=1000 * USDC, contract_min_deposit=0)
    assert result.ok is True


def test_below_contract_minimum():
    result = validate_plan_inputs(100, 1, wallet_balance=None, contract_min_deposit=2000 * USDC)
    assert result.violated_rule == ValidationRule.BELOW_CONTRACT_MINIMUM


def test_first_failing_rule_wins():
    """Several rules fail, only the earliest is reported"""
    assert validate_plan_inputs(0.5, 15, 0, 10**12).violated_rule == ValidationRule.MIN_PENSION
    assert validate_plan_inputs(5_000_000, 15, 0, 10**12).violated_rule == ValidationRule.MAX_PENSION
    assert validate_plan_inputs(100, 15, 0, 10**12).violated_rule == ValidationRule.DURATION_RANGE
    assert validate_plan_inputs(100, 1, 5000, 10**12).violated_rule == ValidationRule.INSUFFICIENT_BALANCE


def test_unknown_external_state_skips_rules():
    """Pending balance/minimum reads are skipped, not failed"""
    result = validate_plan_inputs(100, 1, wallet_balance=None, contract_min_deposit=None)

    assert result.ok is True
    assert result.violated_rule is None


def test_empty_amount_bypasses_pension_bounds():
    """Empty input shows no pension error; zero deposit still meets the minimum check"""
    assert validate_plan_inputs("", 1).ok is True
    assert validate_plan_inputs("", 1, wallet_balance=0, contract_min_deposit=0).ok is True

    result = validate_plan_inputs("", 1, wallet_balance=1000, contract_min_deposit=10 * USDC)
    assert result.violated_rule == ValidationRule.BELOW_CONTRACT_MINIMUM


def test_malformed_amount_never_raises():
    for value in ["abc", None, "1e", "--5"]:
        result = validate_plan_inputs(value, 1, wallet_balance=0, contract_min_deposit=0)
        assert result.ok is True


def test_negative_amount_falls_through_to_minimum():
    result = validate_plan_inputs(-5, 1, wallet_balance=0, contract_min_deposit=1)
    assert result.violated_rule == ValidationRule.BELOW_CONTRACT_MINIMUM


def test_custom_bounds():
    bounds = PlanBounds(min_monthly_pension=Decimal(50), max_monthly_pension=Decimal(500), min_years=2, max_years=5)

    assert validate_plan_inputs(10, 3, bounds=bounds).violated_rule == ValidationRule.MIN_PENSION
    assert validate_plan_inputs(600, 3, bounds=bounds).violated_rule == ValidationRule.MAX_PENSION
    assert validate_plan_inputs(100, 1, bounds=bounds).violated_rule == ValidationRule.DURATION_RANGE
    assert validate_plan_inputs(100, 3, bounds=bounds).ok is True


def test_describe_violation_messages():
    assert describe_violation(ValidationRule.MIN_PENSION) == "Pension must be at least $1"
    assert describe_violation(ValidationRule.MAX_PENSION) == "Pension cannot exceed $1000000"
    assert describe_violation(ValidationRule.DURATION_RANGE) == "Duration must be between 1 and 10 years"
    assert describe_violation(ValidationRule.INSUFFICIENT_BALANCE) == "Insufficient balance for this plan"
    assert describe_violation(ValidationRule.BELOW_CONTRACT_MINIMUM) == "Deposit is below minimum required"


def test_extreme_amounts_hit_pension_bounds():
    assert validate_plan_inputs("1e999999", 1).violated_rule == ValidationRule.MAX_PENSION
    assert validate_plan_inputs("1e-999999", 1).violated_rule == ValidationRule.MIN_PENSION
