"""Plan-creation transaction flow - approve allowance, then create the plan"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from pension_gateway.domain.contract_errors import parse_contract_error
from pension_gateway.domain.exceptions import InvalidTransitionError
from pension_gateway.domain.models import UserFriendlyError


class TransactionStep(str, Enum):
    IDLE = "idle"
    APPROVING = "approving"
    APPROVED = "approved"
    CREATING = "creating"
    SUCCESS = "success"
    ERROR = "error"


class FlowEventType(str, Enum):
    APPROVAL_SUBMITTED = "approval_submitted"
    APPROVAL_CONFIRMED = "approval_confirmed"
    ALLOWANCE_REFRESHED = "allowance_refreshed"
    CREATION_SUBMITTED = "creation_submitted"
    CREATION_CONFIRMED = "creation_confirmed"
    FAILED = "failed"
    RESET = "reset"


TERMINAL_STEPS = frozenset({TransactionStep.SUCCESS, TransactionStep.ERROR})


@dataclass(frozen=True)
class FlowEvent:
    """External signal from the wallet/contract collaborator"""

    type: FlowEventType
    tx_hash: Optional[str] = None
    allowance_minor: Optional[int] = None
    error_message: Optional[str] = None


@dataclass(frozen=True)
class TransactionFlow:
    """Snapshot of one plan-creation attempt"""

    required_deposit_minor: int
    step: TransactionStep = TransactionStep.IDLE
    allowance_minor: int = 0
    approval_tx_hash: Optional[str] = None
    creation_tx_hash: Optional[str] = None
    error: Optional[UserFriendlyError] = None

    @property
    def approval_needed(self) -> bool:
        return self.allowance_minor < self.required_deposit_minor


def _require_hash(event: FlowEvent) -> str:
    if not event.tx_hash:
        raise InvalidTransitionError(f"{event.type.value} requires a transaction hash")
    return event.tx_hash


def _approval_submitted(flow: TransactionFlow, event: FlowEvent) -> TransactionFlow:
    if not flow.approval_needed:
        raise InvalidTransitionError("Allowance already covers the deposit")
    return replace(
        flow,
        step=TransactionStep.APPROVING,
        approval_tx_hash=_require_hash(event),
        error=None,
    )


def _approval_confirmed(flow: TransactionFlow, event: FlowEvent) -> TransactionFlow:
    return replace(flow, step=TransactionStep.APPROVED)


def _allowance_refreshed(flow: TransactionFlow, event: FlowEvent) -> TransactionFlow:
    if event.allowance_minor is None or event.allowance_minor < 0:
        raise InvalidTransitionError("allowance_refreshed requires a non-negative allowance")

    refreshed = replace(flow, allowance_minor=event.allowance_minor)
    # Approval landed on chain, ready to create
    if refreshed.step == TransactionStep.APPROVED and not refreshed.approval_needed:
        refreshed = replace(refreshed, step=TransactionStep.IDLE)
    return refreshed


def _creation_submitted(flow: TransactionFlow, event: FlowEvent) -> TransactionFlow:
    if flow.approval_needed:
        raise InvalidTransitionError("USDC allowance does not cover the deposit")
    return replace(
        flow,
        step=TransactionStep.CREATING,
        creation_tx_hash=_require_hash(event),
        error=None,
    )


def _creation_confirmed(flow: TransactionFlow, event: FlowEvent) -> TransactionFlow:
    # transferFrom consumed the deposit from the allowance
    return replace(
        flow,
        step=TransactionStep.SUCCESS,
        allowance_minor=max(flow.allowance_minor - flow.required_deposit_minor, 0),
    )


def _failed(flow: TransactionFlow, event: FlowEvent) -> TransactionFlow:
    return replace(flow, step=TransactionStep.ERROR, error=parse_contract_error(event.error_message))


def _reset(flow: TransactionFlow, event: FlowEvent) -> TransactionFlow:
    return replace(
        flow,
        step=TransactionStep.IDLE,
        approval_tx_hash=None,
        creation_tx_hash=None,
        error=None,
    )


Handler = Callable[[TransactionFlow, FlowEvent], TransactionFlow]

TRANSITIONS: Dict[Tuple[TransactionStep, FlowEventType], Handler] = {
    (TransactionStep.IDLE, FlowEventType.APPROVAL_SUBMITTED): _approval_submitted,
    (TransactionStep.APPROVING, FlowEventType.APPROVAL_CONFIRMED): _approval_confirmed,
    (TransactionStep.IDLE, FlowEventType.ALLOWANCE_REFRESHED): _allowance_refreshed,
    (TransactionStep.APPROVED, FlowEventType.ALLOWANCE_REFRESHED): _allowance_refreshed,
    (TransactionStep.IDLE, FlowEventType.CREATION_SUBMITTED): _creation_submitted,
    (TransactionStep.CREATING, FlowEventType.CREATION_CONFIRMED): _creation_confirmed,
    (TransactionStep.SUCCESS, FlowEventType.RESET): _reset,
    (TransactionStep.ERROR, FlowEventType.RESET): _reset,
}

for _step in TransactionStep:
    if _step not in TERMINAL_STEPS:
        TRANSITIONS[(_step, FlowEventType.FAILED)] = _failed


def apply_event(flow: TransactionFlow, event: FlowEvent) -> TransactionFlow:
    """
    Advance the flow by one event.

    idle → approving → approved → idle (allowance refreshed) → creating → success;
    any non-terminal step → error on failure; success/error → idle on reset.

    Raises:
        InvalidTransitionError: Event not allowed in the current step
    """
    handler = TRANSITIONS.get((flow.step, event.type))
    if handler is None:
        raise InvalidTransitionError(
            f"Cannot apply {event.type.value} while {flow.step.value}"
        )
    return handler(flow, event)
