"""Chain state API HTTP client for balances, allowances, contract config and plans"""

import httpx
from typing import Any, Dict, List
from pension_gateway.domain.models import ContractConfig, ContractPlan
from pension_gateway.domain.exceptions import ChainAPIError
from pension_gateway.config import settings


class ChainStateClient:
    """Client for the chain state (indexer) API; all amounts are USDC minor units"""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = base_url or settings.chain_api_base
        self.timeout = timeout or settings.http_timeout_seconds

    async def _get(self, path: str, params: Dict[str, Any] | None = None) -> Dict[str, Any]:
        """
        GET a JSON document from the chain API.

        Raises:
            ChainAPIError: On timeout, HTTP errors, or a non-JSON response
        """
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.get(f"{self.base_url}{path}", params=params)
                response.raise_for_status()
                return response.json()

            except httpx.TimeoutException as e:
                raise ChainAPIError(f"Chain API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise ChainAPIError(f"Chain API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise ChainAPIError(f"Chain API unreachable: {e}") from e
            except ValueError as e:
                raise ChainAPIError(f"Invalid JSON from chain API: {e}") from e

    async def get_usdc_balance(self, wallet_address: str) -> int:
        """USDC balance of a wallet"""
        data = await self._get(f"/accounts/{wallet_address}/balance")
        try:
            return int(data["balance_minor"])
        except (KeyError, ValueError, TypeError) as e:
            raise ChainAPIError(f"Invalid balance data from chain API: {e}") from e

    async def get_allowance(self, wallet_address: str) -> int:
        """USDC allowance granted by a wallet to the pension contract"""
        data = await self._get(
            f"/accounts/{wallet_address}/allowance",
            params={"spender": settings.pension_contract_address},
        )
        try:
            return int(data["allowance_minor"])
        except (KeyError, ValueError, TypeError) as e:
            raise ChainAPIError(f"Invalid allowance data from chain API: {e}") from e

    async def get_contract_config(self) -> ContractConfig:
        """Minimum deposit, payout interval and duration bounds of the pension contract"""
        data = await self._get("/contract/config", params={"address": settings.pension_contract_address})
        try:
            return ContractConfig(
                min_deposit_minor=int(data["min_deposit_minor"]),
                interval_seconds=int(data["interval_seconds"]),
                min_duration=int(data["min_duration"]),
                max_duration=int(data["max_duration"]),
            )
        except (KeyError, ValueError, TypeError) as e:
            raise ChainAPIError(f"Invalid contract config from chain API: {e}") from e

    async def get_plans(self, wallet_address: str) -> List[ContractPlan]:
        """Plans whose beneficiary is the given wallet"""
        data = await self._get(f"/accounts/{wallet_address}/plans")
        try:
            return [
                ContractPlan(
                    plan_id=int(plan["plan_id"]),
                    beneficiary=plan["beneficiary"],
                    payment_amount_minor=int(plan["payment_amount_minor"]),
                    payments_remaining=int(plan["payments_remaining"]),
                    last_paid=int(plan["last_paid"]),
                    active=bool(plan["active"]),
                )
                for plan in data.get("plans", [])
            ]
        except (KeyError, ValueError, TypeError) as e:
            raise ChainAPIError(f"Invalid plan data from chain API: {e}") from e
