"""
GraphClient — delegated-user access to team channels via Microsoft Graph.
"""

import json
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from .base import MessagingClient
from ..cards import CARD_CONTENT_TYPE, CardDocument, card_to_payload
from ..config import Settings
from ..models import (
    ChannelSummary, ChatMessageSummary, PostResult, TeamSummary,
)

logger = logging.getLogger(__name__)

ATTACHMENT_ID = "1"


def _q(segment: str) -> str:
    return quote(segment, safe="")


class GraphClient(MessagingClient):
    """Teams channels through Graph, using a pre-issued user token."""

    allow_action_sets = False

    def __init__(self, settings: Settings,
                 transport: Optional[httpx.BaseTransport] = None):
        settings.require_graph()
        super().__init__(settings.graph_url, settings.http_timeout, transport)
        self._access_token = settings.access_token

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._access_token}"}

    @staticmethod
    def _messages_path(team_id: str, channel_id: str,
                       reply_to_id: Optional[str] = None) -> str:
        path = f"/teams/{_q(team_id)}/channels/{_q(channel_id)}/messages"
        if reply_to_id:
            path += f"/{_q(reply_to_id)}/replies"
        return path

    # -- read ---------------------------------------------------------------
    def list_teams(self) -> List[TeamSummary]:
        data = self._request("GET", "/me/joinedTeams")
        return [TeamSummary.model_validate(t) for t in data.get("value", [])]

    def list_channels(self, team_id: str) -> List[ChannelSummary]:
        data = self._request("GET", f"/teams/{_q(team_id)}/channels")
        return [ChannelSummary.model_validate(c)
                for c in data.get("value", [])]

    def get_channel_history(self, team_id: str, channel_id: str,
                            top: int = 20) -> List[ChatMessageSummary]:
        data = self._request("GET", self._messages_path(team_id, channel_id),
                             params={"$top": top})
        return [ChatMessageSummary.from_graph(m)
                for m in data.get("value", [])]

    def get_thread_replies(self, team_id: str, channel_id: str,
                           message_id: str,
                           top: int = 20) -> List[ChatMessageSummary]:
        data = self._request(
            "GET", self._messages_path(team_id, channel_id, message_id),
            params={"$top": top})
        return [ChatMessageSummary.from_graph(m)
                for m in data.get("value", [])]

    # -- write --------------------------------------------------------------
    def _post(self, team_id: str, channel_id: str, reply_to_id: Optional[str],
              message: Dict[str, Any], kind: str) -> PostResult:
        result = self._request(
            "POST", self._messages_path(team_id, channel_id, reply_to_id),
            json=message)
        action = "Reply sent to thread" if reply_to_id else f"{kind} posted"
        logger.info("%s (message %s)", action, result.get("id"))
        return PostResult(success=True, message_id=result.get("id"),
                          thread_id=reply_to_id, action=action)

    def post_message(self, team_id: str, channel_id: str, text: str,
                     reply_to_id: Optional[str] = None) -> PostResult:
        message = {"body": {"contentType": "html", "content": text}}
        return self._post(team_id, channel_id, reply_to_id, message, "Message")

    def post_rich_message(self, team_id: str, channel_id: str,
                          text: Optional[str] = None,
                          card: Optional[CardDocument] = None,
                          reply_to_id: Optional[str] = None) -> PostResult:
        if card is None:
            message: Dict[str, Any] = {
                "body": {"contentType": "html", "content": text}}
        else:
            # Graph only renders attachments referenced from the body.
            content = (text or "") + f'<attachment id="{ATTACHMENT_ID}"></attachment>'
            message = {
                "body": {"contentType": "html", "content": content},
                "attachments": [{
                    "id": ATTACHMENT_ID,
                    "contentType": CARD_CONTENT_TYPE,
                    "content": json.dumps(card_to_payload(card)),
                }],
            }
        return self._post(team_id, channel_id, reply_to_id, message,
                          "Rich message")
