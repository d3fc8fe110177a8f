"""Guardian notifiers — concrete ``GuardianNotifier`` implementations.

  - WebhookGuardianNotifier: POSTs the alert to an HTTP endpoint (e.g. a
    messaging gateway) and reports delivery from the response status
  - LoggingGuardianNotifier: used when no delivery channel is configured;
    logs the dispatch and reports it as not delivered

Neither implementation raises on delivery failure; the outcome is carried
by the returned ``NotificationResult``.
"""

from __future__ import annotations

import logging

import httpx

from mindcheck.interfaces import GuardianNotifier
from mindcheck.models.result import AnalysisResult, NotificationResult
from mindcheck.models.session import UserProfile

logger = logging.getLogger(__name__)


def build_alert_payload(profile: UserProfile, result: AnalysisResult) -> dict:
    """JSON body sent to the guardian alert endpoint."""
    return {
        "guardian_phone": profile.guardian_phone,
        "user_name": profile.name,
        "user_phone": profile.phone,
        "risk_alert": result.risk_alert,
        "message": result.crisis_support or result.supportive_message,
    }


class WebhookGuardianNotifier(GuardianNotifier):
    """Deliver guardian alerts by POSTing JSON to *url*.

    Args:
        url: alert endpoint
        timeout: per-request timeout in seconds
        client: optional shared ``httpx.AsyncClient`` (tests inject a
            client with a mock transport)
    """

    channel = "webhook"

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._client = client

    async def notify(
        self, profile: UserProfile, result: AnalysisResult
    ) -> NotificationResult:
        payload = build_alert_payload(profile, result)
        try:
            if self._client is not None:
                resp = await self._client.post(self._url, json=payload, timeout=self._timeout)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.post(self._url, json=payload)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Guardian alert rejected with HTTP %d", exc.response.status_code,
            )
            return NotificationResult(
                delivered=False,
                channel=self.channel,
                detail=f"HTTP {exc.response.status_code}",
            )
        except httpx.HTTPError as exc:
            logger.warning("Guardian alert transport error: %s", exc)
            return NotificationResult(
                delivered=False, channel=self.channel, detail=str(exc) or type(exc).__name__,
            )

        logger.info("Guardian alert delivered via webhook")
        return NotificationResult(delivered=True, channel=self.channel)


class LoggingGuardianNotifier(GuardianNotifier):
    """Fallback notifier that only records the dispatch in the log."""

    channel = "log"

    async def notify(
        self, profile: UserProfile, result: AnalysisResult
    ) -> NotificationResult:
        logger.warning(
            "High-risk result for %s; guardian alert not sent (no delivery channel)",
            profile.name or "<unnamed>",
        )
        return NotificationResult(
            delivered=False,
            channel=self.channel,
            detail="no delivery channel configured",
        )
