"""
StudyBot — ManyChat Outbound Client

Pushes a reply to a subscriber through the ManyChat send API. Used when the
webhook is configured for async delivery instead of returning text inline.
"""

import logging
from typing import Optional

import httpx

from studybot.config import (
    MANYCHAT_API_BASE, MANYCHAT_API_TOKEN, MANYCHAT_MESSAGE_TAG, MANYCHAT_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)


def build_payload(subscriber_id: str, text: str, message_tag: Optional[str] = MANYCHAT_MESSAGE_TAG) -> dict:
    payload = {
        "subscriber_id": subscriber_id,
        "data": {
            "version": "v2",
            "content": {"messages": [{"type": "text", "text": text}]},
        },
    }
    if message_tag:
        payload["message_tag"] = message_tag
    return payload


class ManyChatClient:

    def __init__(
        self,
        token: str = MANYCHAT_API_TOKEN,
        base_url: str = MANYCHAT_API_BASE,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = MANYCHAT_TIMEOUT_SECONDS,
    ):
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._transport = transport
        self.timeout = timeout

    async def send_text(self, subscriber_id: str, text: str) -> dict:
        """POST /sending/sendContent. Raises httpx.HTTPError on failure."""
        async with httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Authorization": f"Bearer {self._token}"},
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            response = await client.post("/sending/sendContent", json=build_payload(subscriber_id, text))
            response.raise_for_status()
            logger.info(f"ManyChat delivered {len(text)} chars to {subscriber_id}")
            return response.json()
