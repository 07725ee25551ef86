"""Plan event webhook client with exponential backoff retry logic"""

import httpx
import asyncio
import logging
from typing import Dict, Any
from pension_gateway.config import settings
from pension_gateway.infrastructure.observability.metrics import webhook_latency_histogram, webhook_failure_counter


class PlanEventNotifier:
    """Client for announcing confirmed plan creations to downstream services"""

    def __init__(self, webhook_url: str | None = None):
        self.webhook_url = webhook_url or settings.plan_webhook_url
        self.max_retries = settings.webhook_max_retries
        self.backoff_base = settings.webhook_backoff_base

    async def send_plan_created_event(self, payload: Dict[str, Any]) -> None:
        """
        Send PENSION_PLAN_CREATED event with retry logic.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s (base * 2^(attempt-1))
        - Retries on HTTP errors and network failures
        - Tracks latency histogram and failure counter

        Args:
            payload: Event data to send
        """
        attempt = 0
        async with httpx.AsyncClient() as client:
            while attempt < self.max_retries:
                try:
                    with webhook_latency_histogram.time():
                        response = await client.post(
                            self.webhook_url,
                            json=payload,
                            timeout=10.0,
                        )
                        response.raise_for_status()
                        return

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    webhook_failure_counter.inc()

                    if attempt >= self.max_retries:
                        logging.error(
                            f"Plan event delivery failed after {attempt} attempts: {e}",
                            extra={"flow_id": payload.get("flow_id")},
                        )
                        raise

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)
