"""Plan-creation transaction flows - open, inspect and advance with wallet events"""

import uuid
import logging
from dataclasses import asdict
from fastapi import APIRouter, Depends, HTTPException, BackgroundTasks, Request
from sqlalchemy.orm import Session

from pension_gateway.api.v1.schemas import (
    FlowCreateRequest,
    FlowErrorSchema,
    FlowEventRequest,
    FlowResponse,
    PlanArgsSchema,
)
from pension_gateway.api.dependencies import get_chain_client, get_notifier, get_plan_bounds, get_request_id
from pension_gateway.config import settings
from pension_gateway.infrastructure.database.session import get_db
from pension_gateway.infrastructure.database.models import PlanFlow
from pension_gateway.infrastructure.database.repositories import FlowRepository, to_transaction_flow
from pension_gateway.infrastructure.clients.chain import ChainStateClient
from pension_gateway.infrastructure.clients.notifier import PlanEventNotifier
from pension_gateway.domain.economics import describe_violation, parse_amount, plan_creation_args, validate_plan_inputs
from pension_gateway.domain.exceptions import ChainAPIError, FlowNotFoundError, InvalidTransitionError
from pension_gateway.domain.models import PlanBounds, PlanRequest
from pension_gateway.domain.transactions import FlowEvent, TransactionFlow, TransactionStep, apply_event
from pension_gateway.infrastructure.observability.metrics import (
    chain_fetch_failures_counter,
    record_flow_transition,
    record_validation,
)
from pension_gateway.infrastructure.observability.logging import log_flow_transition
from pension_gateway.utils.formatting import explorer_tx_url, format_transaction_hash

router = APIRouter()


def _load_flow(flow_repo: FlowRepository, flow_id: str) -> PlanFlow:
    try:
        flow_uuid = uuid.UUID(flow_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid flow ID format")

    try:
        return flow_repo.get_flow(flow_uuid)
    except FlowNotFoundError:
        raise HTTPException(status_code=404, detail="Flow not found")


def _flow_response(db_flow: PlanFlow, flow: TransactionFlow) -> FlowResponse:
    return FlowResponse(
        flow_id=str(db_flow.id),
        wallet_address=db_flow.wallet_address,
        step=flow.step,
        approval_needed=flow.approval_needed,
        allowance_minor=flow.allowance_minor,
        plan_args=PlanArgsSchema(
            monthly_amount_minor=db_flow.monthly_amount_minor,
            months=db_flow.duration_months,
            total_deposit_minor=db_flow.required_deposit_minor,
        ),
        approval_tx_hash=flow.approval_tx_hash,
        approval_tx_url=(
            explorer_tx_url(settings.explorer_base_url, flow.approval_tx_hash) if flow.approval_tx_hash else None
        ),
        approval_tx_display=format_transaction_hash(flow.approval_tx_hash) or None,
        creation_tx_hash=flow.creation_tx_hash,
        creation_tx_url=(
            explorer_tx_url(settings.explorer_base_url, flow.creation_tx_hash) if flow.creation_tx_hash else None
        ),
        creation_tx_display=format_transaction_hash(flow.creation_tx_hash) or None,
        error=FlowErrorSchema(**asdict(flow.error)) if flow.error else None,
    )


@router.post("/flows", response_model=FlowResponse, status_code=201)
async def create_flow(
    request_body: FlowCreateRequest,
    request: Request,
    db: Session = Depends(get_db),
    chain_client: ChainStateClient = Depends(get_chain_client),
    bounds: PlanBounds = Depends(get_plan_bounds),
):
    """
    Open a plan-creation flow for a wallet.

    Flow:
    1. Read balance, allowance and contract minimum from chain
    2. Run the plan-creation gate with the live values
    3. Persist the flow in the idle step with the exact contract arguments
    """
    request_id = get_request_id(request)
    wallet = request_body.wallet_address

    try:
        balance = await chain_client.get_usdc_balance(wallet)
        allowance = await chain_client.get_allowance(wallet)
        contract = await chain_client.get_contract_config()
    except ChainAPIError as e:
        chain_fetch_failures_counter.inc()
        logging.error(f"Chain API error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Chain state unavailable")

    monthly_amount = parse_amount(request_body.monthly_amount)
    result = validate_plan_inputs(
        monthly_amount,
        request_body.duration_years,
        wallet_balance=balance,
        contract_min_deposit=contract.min_deposit_minor,
        bounds=bounds,
    )
    record_validation(result.violated_rule.value if result.violated_rule else None)

    if not result.ok:
        raise HTTPException(
            status_code=422,
            detail={
                "violated_rule": result.violated_rule.value,
                "message": describe_violation(result.violated_rule, bounds),
            },
        )

    plan_args = plan_creation_args(PlanRequest.from_years(monthly_amount, request_body.duration_years))
    if plan_args.total_deposit_minor == 0:
        raise HTTPException(
            status_code=422,
            detail={"violated_rule": None, "message": "Monthly amount and duration produce no deposit"},
        )

    flow = TransactionFlow(required_deposit_minor=plan_args.total_deposit_minor, allowance_minor=allowance)

    try:
        db_flow = FlowRepository(db).create_flow(wallet, plan_args, flow)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    logging.info(
        "Flow opened",
        extra={
            "request_id": request_id,
            "flow_id": str(db_flow.id),
            "wallet_address": wallet,
            "required_deposit_minor": plan_args.total_deposit_minor,
        },
    )
    return _flow_response(db_flow, flow)


@router.get("/flows/{flow_id}", response_model=FlowResponse)
def get_flow(flow_id: str, db: Session = Depends(get_db)):
    """Current snapshot of a flow"""
    db_flow = _load_flow(FlowRepository(db), flow_id)
    return _flow_response(db_flow, to_transaction_flow(db_flow))


@router.post("/flows/{flow_id}/events", response_model=FlowResponse)
def post_flow_event(
    flow_id: str,
    request_body: FlowEventRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    db: Session = Depends(get_db),
    notifier: PlanEventNotifier = Depends(get_notifier),
):
    """
    Advance a flow with an event reported by the wallet collaborator.

    A confirmed creation schedules a PENSION_PLAN_CREATED webhook.
    """
    request_id = get_request_id(request)
    flow_repo = FlowRepository(db)
    db_flow = _load_flow(flow_repo, flow_id)
    current = to_transaction_flow(db_flow)

    event = FlowEvent(
        type=request_body.event,
        tx_hash=request_body.tx_hash,
        allowance_minor=request_body.allowance_minor,
        error_message=request_body.error_message,
    )

    try:
        updated = apply_event(current, event)
    except InvalidTransitionError as e:
        logging.warning(f"Rejected flow event: {e}", extra={"request_id": request_id, "flow_id": flow_id})
        raise HTTPException(status_code=409, detail=str(e))

    try:
        flow_repo.save_flow(db_flow, updated)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id, "flow_id": flow_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_flow_transition(current.step.value, updated.step.value)
    log_flow_transition(request_id, flow_id, current.step.value, updated.step.value, event.type.value)

    if updated.step == TransactionStep.SUCCESS:
        background_tasks.add_task(
            notifier.send_plan_created_event,
            {
                "event": "PENSION_PLAN_CREATED",
                "flow_id": flow_id,
                "wallet_address": db_flow.wallet_address,
                "monthly_amount_minor": db_flow.monthly_amount_minor,
                "months": db_flow.duration_months,
                "total_deposit_minor": db_flow.required_deposit_minor,
                "tx_hash": updated.creation_tx_hash,
            },
        )

    return _flow_response(db_flow, updated)
