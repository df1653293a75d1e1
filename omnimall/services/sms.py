"""Sendexa SMS gateway client.

POST {SENDEXA_API_URL} with a Basic credential header and JSON body
{recipient, sender, message}. Sending is fire-and-forget from the caller's
point of view: every failure is logged and reported in the SmsResult,
never raised.
"""

from dataclasses import dataclass
import logging

import httpx

from omnimall.services.phone import canonicalize
from omnimall.settings import get_settings

logger = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class SmsResult:
    success: bool
    error: str | None = None


class SendexaClient:
    """Client for the Sendexa SMS send endpoint."""

    def __init__(
        self,
        token: str | None = None,
        sender_id: str | None = None,
        api_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        settings = get_settings()
        self.token = token if token is not None else settings.sendexa_basic_token
        self.sender_id = sender_id if sender_id is not None else settings.sendexa_sender_id
        self.api_url = api_url or settings.sendexa_api_url
        self._http_client = http_client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=15.0)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def send_sms(self, recipient: str, message: str) -> SmsResult:
        """Send a text message.

        Args:
            recipient: Phone number in any format; canonicalized before sending.
            message: Message body.

        Returns:
            SmsResult with success flag and error message on failure.
        """
        if not self.token or not self.sender_id:
            logger.error("Sendexa credentials (token or sender ID) are not configured.")
            return SmsResult(success=False, error="SMS service is not configured.")

        payload = {
            "recipient": canonicalize(recipient),
            "sender": self.sender_id,
            "message": message,
        }
        headers = {
            "Authorization": f"Basic {self.token}",
            "Content-Type": "application/json",
        }

        try:
            client = await self._get_client()
            resp = await client.post(self.api_url, json=payload, headers=headers)
            if resp.status_code < 200 or resp.status_code >= 300:
                logger.error(f"Sendexa API error: {resp.status_code} - {resp.text[:200]}")
                return SmsResult(success=False, error=_error_message(resp))
        except httpx.HTTPError as e:
            logger.error(f"Failed to send SMS via Sendexa: {e}")
            return SmsResult(success=False, error=str(e) or e.__class__.__name__)

        logger.info(f"SMS sent via Sendexa to {payload['recipient'][:5]}***")
        return SmsResult(success=True)


def _error_message(resp: httpx.Response) -> str:
    """Prefer the gateway's own message, fall back to the status code."""
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return f"API Error: Status {resp.status_code}"
