"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from pension_gateway.config import settings
from pension_gateway.domain.models import PlanBounds
from pension_gateway.infrastructure.clients.chain import ChainStateClient
from pension_gateway.infrastructure.clients.notifier import PlanEventNotifier


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_chain_client() -> ChainStateClient:
    """Provide chain state API client instance"""
    return ChainStateClient()


def get_notifier() -> PlanEventNotifier:
    """Provide plan event webhook client instance"""
    return PlanEventNotifier()


def get_plan_bounds() -> PlanBounds:
    """Product policy limits from configuration"""
    return PlanBounds(
        min_monthly_pension=settings.min_monthly_pension,
        max_monthly_pension=settings.max_monthly_pension,
        min_years=settings.min_plan_years,
        max_years=settings.max_plan_years,
    )
