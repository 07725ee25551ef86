"""Translate wallet, contract and network failures into user-facing errors"""

from typing import List, Tuple
from pension_gateway.domain.models import UserFriendlyError

BRIDGE_URL = "https://www.base.org/bridge"
MAX_RAW_MESSAGE_LENGTH = 100

# Checked top to bottom, first matching substring wins
ERROR_TABLE: List[Tuple[Tuple[str, ...], UserFriendlyError]] = [
    (
        ("user rejected", "User denied", "rejected"),
        UserFriendlyError(
            title="Transaction Cancelled",
            message="You cancelled the transaction in your wallet.",
            action="Try again when ready",
        ),
    ),
    (
        ("insufficient funds", "insufficient balance", "exceeds balance"),
        UserFriendlyError(
            title="Insufficient USDC Balance",
            message="You do not have enough USDC in your wallet to complete this transaction.",
            action="Get USDC on Base",
            action_url=BRIDGE_URL,
        ),
    ),
    (
        ("insufficient allowance", "ERC20: transfer amount exceeds allowance"),
        UserFriendlyError(
            title="Approval Required",
            message="You need to approve USDC spending before creating a pension plan.",
            action='Click "Approve USDC" first',
        ),
    ),
    (
        ("invalid amounts",),
        UserFriendlyError(
            title="Invalid Amounts",
            message="Monthly amount and months must be greater than zero.",
            action="Check your input values",
        ),
    ),
    (
        ("invalid totalPay",),
        UserFriendlyError(
            title="Incorrect Total Amount",
            message="The calculated total does not match the required deposit amount.",
            action="Verify your amounts",
        ),
    ),
    (
        ("below minDeposit",),
        UserFriendlyError(
            title="Deposit Too Low",
            message="Your deposit is below the minimum required amount for a pension plan.",
            action="Increase monthly amount or duration",
        ),
    ),
    (
        ("duration < min", "duration > max"),
        UserFriendlyError(
            title="Invalid Duration",
            message="The total duration of your plan is outside the allowed range (1-10 years).",
            action="Adjust the duration",
        ),
    ),
    (
        ("transferFrom failed",),
        UserFriendlyError(
            title="Transfer Failed",
            message="Unable to transfer USDC from your wallet to the contract.",
            action="Check your balance and approval",
        ),
    ),
    (
        ("network", "timeout", "fetch"),
        UserFriendlyError(
            title="Network Error",
            message=(
                "Unable to connect to the blockchain network. "
                "Please check your internet connection."
            ),
            action="Try again",
        ),
    ),
    (
        ("gas",),
        UserFriendlyError(
            title="Insufficient Gas",
            message="You do not have enough ETH to pay for transaction gas fees on Base network.",
            action="Add ETH to your wallet",
            action_url=BRIDGE_URL,
        ),
    ),
    (
        ("chain",),
        UserFriendlyError(
            title="Wrong Network",
            message="Please switch to Base network in your wallet.",
            action="Switch to Base",
        ),
    ),
]


def parse_contract_error(error_message: str | None) -> UserFriendlyError:
    """
    Map a raw error string to a display-ready error.

    Unknown errors fall back to a generic "Transaction Failed"; raw text
    longer than 100 characters is replaced by a generic sentence.
    """
    error_message = error_message or ""

    for needles, friendly in ERROR_TABLE:
        if any(needle in error_message for needle in needles):
            return friendly

    if len(error_message) > MAX_RAW_MESSAGE_LENGTH:
        message = "An unexpected error occurred. Please try again or contact support."
    else:
        message = error_message or "An unexpected error occurred."

    return UserFriendlyError(title="Transaction Failed", message=message, action="Try again")
