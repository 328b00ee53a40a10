"""WhatsApp Business (Cloud API) template messaging."""
import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from app.core.config import settings
from app.utils.errors import ExternalServiceError

logger = logging.getLogger(__name__)


class WhatsAppService:
    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        # transport lets tests plug in httpx.MockTransport
        self.transport = transport

    @property
    def messages_url(self) -> str:
        return f"{settings.WA_API_URL.rstrip('/')}/{settings.WA_PHONE_NUMBER_ID}/messages"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {settings.WA_ACCESS_TOKEN}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def build_template_payload(recipient_phone: str, template_name: str, variables: List[str]) -> Dict[str, Any]:
        return {
            "messaging_product": "whatsapp",
            "to": recipient_phone,
            "type": "template",
            "template": {
                "name": template_name,
                "language": {"code": settings.WA_TEMPLATE_LANGUAGE},
                "components": [
                    {
                        "type": "body",
                        "parameters": [{"type": "text", "text": str(v)} for v in variables],
                    }
                ],
            },
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=settings.WA_TIMEOUT_SECONDS, transport=self.transport)

    async def _post(self, client: httpx.AsyncClient, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await client.post(self.messages_url, json=payload, headers=self._headers())
        response.raise_for_status()
        return response.json()

    async def send_template_message(
        self,
        recipient_phone: str,
        template_name: str,
        variables: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        payload = self.build_template_payload(recipient_phone, template_name, variables or [])
        try:
            async with self._client() as client:
                return await self._post(client, payload)
        except httpx.HTTPError as e:
            logger.error(f"Failed to send WhatsApp message to {recipient_phone}: {e}")
            raise ExternalServiceError("WhatsApp message sending failed")

    async def broadcast_template_message(
        self,
        recipients: List[str],
        template_name: str,
        variables: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        """Send to every recipient concurrently; one failure never aborts the rest."""
        async with self._client() as client:

            async def _send_one(phone: str) -> Dict[str, Any]:
                payload = self.build_template_payload(phone, template_name, variables or [])
                try:
                    data = await self._post(client, payload)
                    return {"recipient_phone": phone, "status": "success", "response": data}
                except httpx.HTTPStatusError as e:
                    logger.error(f"WhatsApp broadcast failed for {phone}: {e.response.text}")
                    return {"recipient_phone": phone, "status": "failed", "error": _error_body(e.response)}
                except httpx.HTTPError as e:
                    logger.error(f"WhatsApp broadcast failed for {phone}: {e}")
                    return {"recipient_phone": phone, "status": "failed", "error": str(e)}

            return list(await asyncio.gather(*(_send_one(p) for p in recipients)))


def _error_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


whatsapp_service = WhatsAppService()
