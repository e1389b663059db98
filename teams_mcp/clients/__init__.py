"""
Client factory — returns the messaging client for the configured API mode.
"""

from typing import Optional, Union

import httpx

from ..auth import TokenBroker
from ..config import Settings
from .base import MessagingClient
from .bot import BotConnectorClient
from .graph import GraphClient

__all__ = ["MessagingClient", "BotConnectorClient", "GraphClient",
           "get_client"]


def get_client(settings: Settings,
               transport: Optional[httpx.BaseTransport] = None,
               ) -> Union[BotConnectorClient, GraphClient]:
    """Return a BotConnectorClient (default) or GraphClient.

    Set TEAMS_API_MODE=graph to post as a user through Microsoft Graph.
    """
    if settings.api_mode == "graph":
        return GraphClient(settings, transport=transport)
    broker = TokenBroker(settings.app_id, settings.app_password,
                         settings.tenant_id, timeout=settings.http_timeout,
                         transport=transport)
    return BotConnectorClient(settings, broker, transport=transport)
