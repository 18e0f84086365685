"""
StudyBot — Webhook Router
Transport boundary for the chat platform.

POST /api/webhook  {subscriber_id | psid, message}
    → Dispatcher.handle_message
    → truncate to MAX_REPLY_LENGTH
    → optional ManyChat push
    → {"status", "message", "command_type", "menu", "elapsed_ms"}
"""

import logging
import time
from typing import Optional, Union

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from studybot.config import MANYCHAT_SEND_ENABLED, MAX_REPLY_LENGTH
from studybot.messages import MESSAGES

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["webhook"])

ELLIPSIS = "..."


class WebhookRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    subscriber_id: Optional[Union[str, int]] = None
    psid: Optional[Union[str, int]] = None
    message: Optional[Union[str, int]] = None


class WebhookResponse(BaseModel):
    status: str
    message: str
    command_type: Optional[str] = None
    menu: Optional[str] = None
    elapsed_ms: int


def truncate_reply(text: str, limit: int = MAX_REPLY_LENGTH) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)].rstrip() + ELLIPSIS


@router.post("/webhook", response_model=WebhookResponse)
async def webhook(payload: WebhookRequest, request: Request):
    start = time.perf_counter()
    subscriber_id = payload.subscriber_id or payload.psid
    if subscriber_id is not None:
        subscriber_id = str(subscriber_id).strip()
    message = str(payload.message) if payload.message is not None else None
    if not subscriber_id or message is None:
        return JSONResponse(
            status_code=400,
            content={"error": "subscriber_id (or psid) and message are required"},
        )

    try:
        dispatcher = request.app.state.dispatcher
        result = await dispatcher.handle_message(subscriber_id, message)
        reply = truncate_reply(result.reply)

        if MANYCHAT_SEND_ENABLED:
            try:
                await request.app.state.manychat.send_text(subscriber_id, reply)
            except httpx.HTTPError as e:
                # The reply is still returned inline
                logger.warning(f"ManyChat push failed for {subscriber_id}: {e}")

        return WebhookResponse(
            status="error" if result.failed else "success",
            message=reply,
            command_type=result.command.type.value if result.command else None,
            menu=result.menu.value if result.menu else None,
            elapsed_ms=int((time.perf_counter() - start) * 1000),
        )
    except Exception:
        logger.exception(f"Webhook failed for {subscriber_id}")
        # 200 so the platform does not retry into the same failure
        return JSONResponse(
            status_code=200,
            content={"status": "error", "message": MESSAGES["errors"]["generic"]},
        )
