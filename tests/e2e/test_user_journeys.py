"""
E2E journeys through quote → validate → flow for typical wallets.

The chain state API and the plan webhook are patched; everything else
(routers, economics, state machine, database) runs for real.

Wallets:
- saver: funded, no allowance yet, walks the full approve-then-create path
- dust: funded but asks for a pension too small to clear the contract minimum
- retry: wallet rejects the first signature, then succeeds after reset
"""

from decimal import Decimal
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient
from pension_gateway.domain.models import ContractConfig

CHAIN = "pension_gateway.infrastructure.clients.chain.ChainStateClient"
NOTIFIER = "pension_gateway.infrastructure.clients.notifier.PlanEventNotifier"
SAVER = "0x" + "5" * 40
USDC = 1_000_000


def _event(client: TestClient, flow_id: str, **body) -> dict:
    response = client.post(f"/v1/flows/{flow_id}/events", json=body)
    assert response.status_code == 200, response.text
    return response.json()


@patch(f"{NOTIFIER}.send_plan_created_event")
@patch(f"{CHAIN}.get_contract_config")
@patch(f"{CHAIN}.get_allowance")
@patch(f"{CHAIN}.get_usdc_balance")
def test_saver_full_journey(
    mock_balance: AsyncMock,
    mock_allowance: AsyncMock,
    mock_config: AsyncMock,
    mock_notify: AsyncMock,
    client: TestClient,
    contract_config: ContractConfig,
):
    """
    saver: 500/month for 5 years
    Expected: 30000 total → 27272.72 → deposit 27200, payout 29920
    """
    mock_balance.return_value = 50_000 * USDC
    mock_allowance.return_value = 0
    mock_config.return_value = contract_config
    mock_notify.return_value = None

    quote = client.post(
        "/v1/quote",
        json={"monthly_amount": "500", "duration_years": 5, "wallet_address": SAVER},
    ).json()
    assert Decimal(quote["required_deposit"]) == Decimal("27200")
    assert Decimal(quote["total_payout"]) == Decimal("29920")

    validation = client.post(
        "/v1/validate",
        json={"monthly_amount": "500", "duration_years": 5, "wallet_address": SAVER},
    ).json()
    assert validation["ok"] is True

    flow = client.post(
        "/v1/flows",
        json={"wallet_address": SAVER, "monthly_amount": "500", "duration_years": 5},
    ).json()
    assert flow["step"] == "idle"
    assert flow["approval_needed"] is True
    assert flow["plan_args"]["total_deposit_minor"] == quote["required_deposit_minor"]
    flow_id = flow["flow_id"]

    flow = _event(client, flow_id, event="approval_submitted", tx_hash="0x" + "a" * 64)
    assert flow["step"] == "approving"
    assert flow["approval_tx_url"] == "https://basescan.org/tx/0x" + "a" * 64
    assert flow["approval_tx_display"] == "0xaaaa...aaaa"

    flow = _event(client, flow_id, event="approval_confirmed")
    assert flow["step"] == "approved"

    flow = _event(client, flow_id, event="allowance_refreshed", allowance_minor=27_200 * USDC)
    assert flow["step"] == "idle"
    assert flow["approval_needed"] is False

    flow = _event(client, flow_id, event="creation_submitted", tx_hash="0x" + "c" * 64)
    assert flow["step"] == "creating"
    assert flow["creation_tx_display"] == "0xcccc...cccc"

    flow = _event(client, flow_id, event="creation_confirmed")
    assert flow["step"] == "success"

    payload = mock_notify.call_args.args[0]
    assert payload["event"] == "PENSION_PLAN_CREATED"
    assert payload["total_deposit_minor"] == 27_200 * USDC
    assert payload["months"] == 60


@patch(f"{CHAIN}.get_contract_config")
@patch(f"{CHAIN}.get_allowance")
@patch(f"{CHAIN}.get_usdc_balance")
def test_dust_pension_below_contract_minimum(
    mock_balance: AsyncMock,
    mock_allowance: AsyncMock,
    mock_config: AsyncMock,
    client: TestClient,
    contract_config: ContractConfig,
):
    """
    dust: 5/month for 1 year
    Expected: 60 total truncates to a 0 deposit, below the 10 USDC minimum
    """
    mock_balance.return_value = 1_000 * USDC
    mock_allowance.return_value = 0
    mock_config.return_value = contract_config

    response = client.post(
        "/v1/flows",
        json={"wallet_address": SAVER, "monthly_amount": "5", "duration_years": 1},
    )

    assert response.status_code == 422
    assert response.json()["detail"] == {
        "violated_rule": "BelowContractMinimum",
        "message": "Deposit is below minimum required",
    }


@patch(f"{CHAIN}.get_contract_config")
@patch(f"{CHAIN}.get_allowance")
@patch(f"{CHAIN}.get_usdc_balance")
def test_rejected_signature_then_retry(
    mock_balance: AsyncMock,
    mock_allowance: AsyncMock,
    mock_config: AsyncMock,
    client: TestClient,
    contract_config: ContractConfig,
):
    """
    retry: wallet cancels the approval, user resets and approves again
    Expected: error step with a cancellation message, then a clean idle flow
    """
    mock_balance.return_value = 50_000 * USDC
    mock_allowance.return_value = 0
    mock_config.return_value = contract_config

    flow_id = client.post(
        "/v1/flows",
        json={"wallet_address": SAVER, "monthly_amount": "100", "duration_years": 2},
    ).json()["flow_id"]

    _event(client, flow_id, event="approval_submitted", tx_hash="0x" + "a" * 64)
    flow = _event(client, flow_id, event="failed", error_message="User rejected the request.")
    assert flow["step"] == "error"
    assert flow["error"]["title"] == "Transaction Cancelled"

    flow = _event(client, flow_id, event="reset")
    assert flow["step"] == "idle"
    assert flow["error"] is None
    assert flow["approval_tx_hash"] is None

    flow = _event(client, flow_id, event="approval_submitted", tx_hash="0x" + "b" * 64)
    assert flow["step"] == "approving"
