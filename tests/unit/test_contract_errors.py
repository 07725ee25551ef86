"""Unit tests for wallet/contract error translation"""

from pension_gateway.domain.contract_errors import parse_contract_error


def test_user_rejection():
    error = parse_contract_error("MetaMask Tx Signature: User denied transaction signature.")
    assert error.title == "Transaction Cancelled"
    assert error.action_url is None


def test_insufficient_usdc_balance():
    error = parse_contract_error("execution reverted: ERC20: transfer amount exceeds balance")
    assert error.title == "Insufficient USDC Balance"
    assert error.action_url == "https://www.base.org/bridge"


def test_missing_allowance():
    error = parse_contract_error("execution reverted: ERC20: transfer amount exceeds allowance")
    assert error.title == "Approval Required"


def test_contract_revert_reasons():
    assert parse_contract_error("execution reverted: invalid amounts").title == "Invalid Amounts"
    assert parse_contract_error("execution reverted: invalid totalPay").title == "Incorrect Total Amount"
    assert parse_contract_error("execution reverted: below minDeposit").title == "Deposit Too Low"
    assert parse_contract_error("execution reverted: duration > max").title == "Invalid Duration"
    assert parse_contract_error("execution reverted: transferFrom failed").title == "Transfer Failed"


def test_infrastructure_errors():
    assert parse_contract_error("request timeout").title == "Network Error"
    assert parse_contract_error("intrinsic gas too low").title == "Insufficient Gas"
    assert parse_contract_error("unsupported chain id 1").title == "Wrong Network"


def test_unknown_error_passes_short_message_through():
    error = parse_contract_error("something odd")
    assert error.title == "Transaction Failed"
    assert error.message == "something odd"


def test_unknown_error_hides_long_message():
    error = parse_contract_error("x" * 150)
    assert error.message == "An unexpected error occurred. Please try again or contact support."


def test_empty_error():
    assert parse_contract_error(None).message == "An unexpected error occurred."
    assert parse_contract_error("").title == "Transaction Failed"
