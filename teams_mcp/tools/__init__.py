"""
Register the MCP tools matching the configured API variant.
"""

from typing import Union

from ..clients import BotConnectorClient, GraphClient
from . import bot_tools, graph_tools


def register_all(mcp, client: Union[BotConnectorClient, GraphClient]):
    if isinstance(client, GraphClient):
        graph_tools.register(mcp, client)
    else:
        bot_tools.register(mcp, client)
