"""GET /v1/quote/history - Fetch a wallet's quote history"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from pension_gateway.api.v1.schemas import QuoteHistoryResponse, QuoteHistoryItem, WALLET_ADDRESS_PATTERN
from pension_gateway.infrastructure.database.session import get_db
from pension_gateway.infrastructure.database.repositories import QuoteRepository

router = APIRouter()


@router.get("/quote/history", response_model=QuoteHistoryResponse)
def get_quote_history(
    wallet_address: str = Query(..., pattern=WALLET_ADDRESS_PATTERN, description="Wallet address"),
    db: Session = Depends(get_db),
):
    """
    Retrieve recent quotes served to a wallet.

    Returns:
        Newest first, with the rule each quote violated (if any)
    """
    quotes = QuoteRepository(db).get_quotes_by_wallet(wallet_address, limit=20)

    return QuoteHistoryResponse(
        wallet_address=wallet_address,
        quotes=[
            QuoteHistoryItem(
                quote_id=str(q.id),
                monthly_amount_minor=q.monthly_amount_minor,
                duration_months=q.duration_months,
                required_deposit_minor=q.required_deposit_minor,
                total_payout_minor=q.total_payout_minor,
                violated_rule=q.violated_rule,
                created_at=q.created_at.isoformat(),
            )
            for q in quotes
        ],
    )
