"""Read-only views over pension plans stored on chain"""

from datetime import datetime
from typing import Optional
from pension_gateway.domain.models import ContractPlan
from pension_gateway.utils.date_utils import from_unix_timestamp, seconds_to_days

PLAN_ACTIVE = "active"
PLAN_COMPLETED = "completed"
PLAN_DEACTIVATED = "deactivated"


def plan_status(plan: ContractPlan) -> str:
    """active, completed (all payments made) or deactivated (stopped early)"""
    if plan.active:
        return PLAN_ACTIVE
    if plan.payments_remaining == 0:
        return PLAN_COMPLETED
    return PLAN_DEACTIVATED


def next_payment_at(plan: ContractPlan, interval_seconds: int) -> Optional[datetime]:
    """
    Expected time of the next payout: last payment + contract interval.

    None when the plan has never paid out or has nothing left to pay.
    """
    if not plan.active or plan.payments_remaining <= 0 or plan.last_paid == 0:
        return None
    return from_unix_timestamp(plan.last_paid + interval_seconds)


def last_paid_at(plan: ContractPlan) -> Optional[datetime]:
    if plan.last_paid == 0:
        return None
    return from_unix_timestamp(plan.last_paid)


def remaining_payout_minor(plan: ContractPlan) -> int:
    """USDC still owed to the beneficiary, in minor units"""
    return plan.payment_amount_minor * max(plan.payments_remaining, 0)


def interval_days(interval_seconds: int) -> int:
    return seconds_to_days(interval_seconds)
