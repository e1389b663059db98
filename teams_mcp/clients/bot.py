"""
BotConnectorClient — posts as the bot into one configured conversation.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from .base import MessagingClient
from ..auth import TokenBroker
from ..cards import CardDocument, card_attachment
from ..config import Settings
from ..models import PostResult

logger = logging.getLogger(__name__)


class BotConnectorClient(MessagingClient):
    """Bot Framework Connector API, scoped to ``settings.conversation_id``."""

    allow_action_sets = True

    def __init__(self, settings: Settings, broker: TokenBroker,
                 transport: Optional[httpx.BaseTransport] = None):
        settings.require_bot()
        super().__init__(settings.service_url, settings.http_timeout,
                         transport)
        self._conversation_id = settings.conversation_id
        self._default_thread = settings.thread_id
        self._broker = broker

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._broker.token}"}

    def _activities_path(self, thread_id: Optional[str]) -> str:
        path = f"/v3/conversations/{quote(self._conversation_id, safe='')}/activities"
        if thread_id:
            path += f"/{quote(thread_id, safe='')}"
        return path

    def _send(self, activity: Dict[str, Any],
              thread_id: Optional[str], kind: str) -> PostResult:
        thread_id = thread_id or self._default_thread
        if thread_id:
            activity["replyToId"] = thread_id
        result = self._request("POST", self._activities_path(thread_id),
                               json=activity)
        action = "Reply sent to thread" if thread_id else f"{kind} posted"
        logger.info("%s (activity %s)", action, result.get("id"))
        return PostResult(success=True, message_id=result.get("id"),
                          thread_id=thread_id, action=action)

    # -- tools ----------------------------------------------------------------
    def post_message(self, text: str,
                     thread_id: Optional[str] = None) -> PostResult:
        activity = {"type": "message", "text": text, "textFormat": "markdown"}
        return self._send(activity, thread_id, "Message")

    def post_rich_message(self, text: Optional[str] = None,
                          card: Optional[CardDocument] = None,
                          thread_id: Optional[str] = None) -> PostResult:
        if card is None:
            return self._send(
                {"type": "message", "text": text, "textFormat": "markdown"},
                thread_id, "Rich message")
        activity: Dict[str, Any] = {
            "type": "message",
            "attachments": [card_attachment(card)],
        }
        if text:
            activity["summary"] = text
        return self._send(activity, thread_id, "Rich message")
