"""Display helpers for transaction hashes and USDC amounts"""

from decimal import Decimal, ROUND_HALF_UP


def format_transaction_hash(tx_hash: str | None) -> str:
    """Shorten a hash for display: 0x1234...abcd"""
    if not tx_hash:
        return ""
    return f"{tx_hash[:6]}...{tx_hash[-4:]}"


def explorer_tx_url(explorer_base_url: str, tx_hash: str) -> str:
    return f"{explorer_base_url.rstrip('/')}/tx/{tx_hash}"


def format_usd(amount: Decimal) -> str:
    """Two-decimal currency string with thousands separators, e.g. $10,900.00"""
    return f"${amount.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP):,}"
