"""POST /v1/quote and POST /v1/validate - deposit quotes and the plan-creation gate"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from pension_gateway.api.v1.schemas import (
    PlanArgsSchema,
    QuoteRequest,
    QuoteResponse,
    ValidateRequest,
    ValidateResponse,
)
from pension_gateway.api.dependencies import get_chain_client, get_plan_bounds, get_request_id
from pension_gateway.infrastructure.database.session import get_db
from pension_gateway.infrastructure.database.repositories import QuoteRepository
from pension_gateway.infrastructure.clients.chain import ChainStateClient
from pension_gateway.domain.economics import (
    describe_violation,
    parse_amount,
    plan_creation_args,
    quote_plan,
    validate_plan_inputs,
)
from pension_gateway.domain.exceptions import ChainAPIError
from pension_gateway.domain.models import PlanBounds, PlanRequest
from pension_gateway.infrastructure.observability.metrics import (
    chain_fetch_failures_counter,
    record_quote,
    record_validation,
)
from pension_gateway.infrastructure.observability.logging import log_quote
from pension_gateway.utils.formatting import format_usd

router = APIRouter()


@router.post("/quote", response_model=QuoteResponse)
def create_quote(
    request_body: QuoteRequest,
    request: Request,
    db: Session = Depends(get_db),
    bounds: PlanBounds = Depends(get_plan_bounds),
):
    """
    Compute the deposit and total payout for a monthly pension and duration.

    Flow:
    1. Apply the deposit formula and truncation rule
    2. Check product bounds (balance and contract minimum are not consulted)
    3. Persist the quote for the wallet's history
    4. Return decimal and minor-unit figures plus the contract call arguments
    """
    start_time = time.time()
    request_id = get_request_id(request)

    monthly_amount = parse_amount(request_body.monthly_amount)
    quote = quote_plan(monthly_amount, request_body.duration_years)
    plan_args = plan_creation_args(PlanRequest.from_years(monthly_amount, request_body.duration_years))
    validation = validate_plan_inputs(monthly_amount, request_body.duration_years, bounds=bounds)

    try:
        db_quote = QuoteRepository(db).create_quote(
            wallet_address=request_body.wallet_address,
            plan_args=plan_args,
            quote=quote,
            violated_rule=validation.violated_rule,
        )
        db.commit()

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    violated_rule = validation.violated_rule.value if validation.violated_rule else None
    duration_ms = (time.time() - start_time) * 1000
    record_quote(quote.required_deposit_minor)
    log_quote(request_id, request_body.wallet_address, quote.required_deposit_minor, violated_rule, duration_ms)

    return QuoteResponse(
        quote_id=str(db_quote.id),
        required_deposit=quote.required_deposit,
        required_deposit_minor=quote.required_deposit_minor,
        required_deposit_display=format_usd(quote.required_deposit),
        total_payout=quote.total_payout,
        total_payout_minor=quote.total_payout_minor,
        total_payout_display=format_usd(quote.total_payout),
        plan_args=PlanArgsSchema(
            monthly_amount_minor=plan_args.monthly_amount_minor,
            months=plan_args.months,
            total_deposit_minor=plan_args.total_deposit_minor,
        ),
        violated_rule=violated_rule,
    )


@router.post("/validate", response_model=ValidateResponse)
async def validate_plan(
    request_body: ValidateRequest,
    request: Request,
    chain_client: ChainStateClient = Depends(get_chain_client),
    bounds: PlanBounds = Depends(get_plan_bounds),
):
    """
    Run the plan-creation gate.

    Balance and contract minimum are taken from the body; when a wallet is
    given, missing values are read from chain. Failed reads leave them
    unknown, which skips the corresponding rule.
    """
    request_id = get_request_id(request)
    balance = request_body.wallet_balance_minor
    min_deposit = request_body.contract_min_deposit_minor

    if request_body.wallet_address:
        if balance is None:
            try:
                balance = await chain_client.get_usdc_balance(request_body.wallet_address)
            except ChainAPIError as e:
                chain_fetch_failures_counter.inc()
                logging.warning(f"Balance unavailable: {e}", extra={"request_id": request_id})

        if min_deposit is None:
            try:
                min_deposit = (await chain_client.get_contract_config()).min_deposit_minor
            except ChainAPIError as e:
                chain_fetch_failures_counter.inc()
                logging.warning(f"Contract config unavailable: {e}", extra={"request_id": request_id})

    result = validate_plan_inputs(
        request_body.monthly_amount,
        request_body.duration_years,
        wallet_balance=balance,
        contract_min_deposit=min_deposit,
        bounds=bounds,
    )
    record_validation(result.violated_rule.value if result.violated_rule else None)

    return ValidateResponse(
        ok=result.ok,
        violated_rule=result.violated_rule.value if result.violated_rule else None,
        message=describe_violation(result.violated_rule, bounds) if result.violated_rule else None,
        wallet_balance_minor=balance,
        contract_min_deposit_minor=min_deposit,
    )
