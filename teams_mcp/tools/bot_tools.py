"""
Bot tools — post into the conversation configured by TEAMS_CONVERSATION_ID.
"""

from typing import Any, Dict, Optional

from ..clients.bot import BotConnectorClient
from ..models import (
    PostMessageArgs, PostRichMessageArgs, compact_args, parse_args,
    validate_post_rich_message_args,
)


def register(mcp, client: BotConnectorClient):

    @mcp.tool()
    def teams_post_message(text: str,
                           thread_id: Optional[str] = None) -> Dict[str, Any]:
        """Post a plain text message to the connected Teams channel.

        Args:
            text: The message text to post. Supports markdown formatting.
            thread_id: Activity ID to reply to in a thread. If not provided
                and TEAMS_THREAD_ID is set, replies to that thread.
        """
        args = parse_args(PostMessageArgs,
                          compact_args(text=text, thread_id=thread_id))
        return client.post_message(args.text, args.thread_id).model_dump()

    @mcp.tool()
    def teams_post_rich_message(text: Optional[str] = None,
                                card: Optional[Dict[str, Any]] = None,
                                thread_id: Optional[str] = None
                                ) -> Dict[str, Any]:
        """Post a rich message with an Adaptive Card to the connected channel.

        Supports TextBlock, Image, FactSet, ColumnSet/Column, Container and
        ActionSet elements (card body limited to 50 elements, 10 facts per
        FactSet).

        Args:
            text: Fallback text for notifications and screen readers.
                Required if card is not provided.
            card: Adaptive Card JSON ({"type": "AdaptiveCard", "body": [...]})
                for structured content like test results or status updates.
            thread_id: Activity ID to reply to in a thread
        """
        args = validate_post_rich_message_args(
            compact_args(text=text, card=card, thread_id=thread_id),
            allow_action_sets=client.allow_action_sets,
            model=PostRichMessageArgs)
        return client.post_rich_message(
            args.text, args.card, args.thread_id).model_dump()
