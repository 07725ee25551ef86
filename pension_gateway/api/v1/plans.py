"""GET /v1/plans - On-chain pension plans of a wallet"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from pension_gateway.api.v1.schemas import PlanSchema, PlansResponse, WALLET_ADDRESS_PATTERN
from pension_gateway.api.dependencies import get_chain_client, get_request_id
from pension_gateway.infrastructure.clients.chain import ChainStateClient
from pension_gateway.infrastructure.observability.metrics import chain_fetch_failures_counter
from pension_gateway.domain.exceptions import ChainAPIError
from pension_gateway.domain.plans import (
    interval_days,
    last_paid_at,
    next_payment_at,
    plan_status,
    remaining_payout_minor,
)

router = APIRouter()


@router.get("/plans", response_model=PlansResponse)
async def get_plans(
    request: Request,
    wallet_address: str = Query(..., pattern=WALLET_ADDRESS_PATTERN, description="Beneficiary wallet"),
    chain_client: ChainStateClient = Depends(get_chain_client),
):
    """
    List a beneficiary's plans with status and payout schedule.

    Returns:
        Plans as stored on chain plus next payment date from the contract interval
    """
    try:
        contract = await chain_client.get_contract_config()
        plans = await chain_client.get_plans(wallet_address)
    except ChainAPIError as e:
        chain_fetch_failures_counter.inc()
        logging.error(f"Chain API error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Chain state unavailable")

    return PlansResponse(
        wallet_address=wallet_address,
        interval_days=interval_days(contract.interval_seconds),
        plans=[
            PlanSchema(
                plan_id=plan.plan_id,
                payment_amount_minor=plan.payment_amount_minor,
                payments_remaining=plan.payments_remaining,
                remaining_payout_minor=remaining_payout_minor(plan),
                status=plan_status(plan),
                last_paid_at=last_paid_at(plan),
                next_payment_at=next_payment_at(plan, contract.interval_seconds),
            )
            for plan in plans
        ],
    )
