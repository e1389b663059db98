"""
Graph tools — read and post in any team channel the signed-in user can see.
"""

from typing import Any, Dict, List, Optional

from ..clients.graph import GraphClient
from ..models import (
    ChannelHistoryArgs, ChannelPostMessageArgs, ChannelPostRichMessageArgs,
    TeamArgs, ThreadRepliesArgs, compact_args, parse_args,
    validate_post_rich_message_args,
)


def _dump(items) -> List[Dict[str, Any]]:
    return [i.model_dump(by_alias=True, exclude_none=True) for i in items]


def register(mcp, client: GraphClient):

    @mcp.tool()
    def teams_list_teams() -> List[Dict[str, Any]]:
        """List all Microsoft Teams that the user has joined"""
        return _dump(client.list_teams())

    @mcp.tool()
    def teams_list_channels(team_id: str) -> List[Dict[str, Any]]:
        """List all channels in a Microsoft Teams team

        Args:
            team_id: ID of the team (see teams_list_teams)
        """
        args = parse_args(TeamArgs, {"team_id": team_id})
        return _dump(client.list_channels(args.team_id))

    @mcp.tool()
    def teams_post_message(team_id: str, channel_id: str, text: str,
                           reply_to_id: Optional[str] = None
                           ) -> Dict[str, Any]:
        """Post a plain text or HTML message to a channel or reply to a thread

        Args:
            team_id: ID of the team
            channel_id: ID of the channel
            text: Message content (HTML allowed)
            reply_to_id: Message ID to reply to (optional)
        """
        args = parse_args(ChannelPostMessageArgs, compact_args(
            team_id=team_id, channel_id=channel_id, text=text,
            reply_to_id=reply_to_id))
        return client.post_message(args.team_id, args.channel_id, args.text,
                                   args.reply_to_id).model_dump()

    @mcp.tool()
    def teams_post_rich_message(team_id: str, channel_id: str,
                                text: Optional[str] = None,
                                card: Optional[Dict[str, Any]] = None,
                                reply_to_id: Optional[str] = None
                                ) -> Dict[str, Any]:
        """Post a rich structured message with Adaptive Card support.

        Can post to channels or reply to threads. Supports text, images,
        fact sets, column layouts and containers.

        Args:
            team_id: ID of the team
            channel_id: ID of the channel
            text: Message text, required if card is not provided
            card: Adaptive Card JSON ({"type": "AdaptiveCard", "body": [...]})
            reply_to_id: Message ID to reply to (optional)
        """
        args = validate_post_rich_message_args(
            compact_args(team_id=team_id, channel_id=channel_id, text=text,
                         card=card, reply_to_id=reply_to_id),
            allow_action_sets=client.allow_action_sets,
            model=ChannelPostRichMessageArgs)
        return client.post_rich_message(
            args.team_id, args.channel_id, args.text, args.card,
            args.reply_to_id).model_dump()

    @mcp.tool()
    def teams_get_channel_history(team_id: str, channel_id: str,
                                  top: int = 20) -> List[Dict[str, Any]]:
        """Get recent messages from a channel, newest first.

        Args:
            team_id: ID of the team
            channel_id: ID of the channel
            top: Number of messages to return (1-50, default 20)
        """
        args = parse_args(ChannelHistoryArgs, {
            "team_id": team_id, "channel_id": channel_id, "top": top})
        return _dump(client.get_channel_history(
            args.team_id, args.channel_id, args.top))

    @mcp.tool()
    def teams_get_thread_replies(team_id: str, channel_id: str,
                                 message_id: str,
                                 top: int = 20) -> List[Dict[str, Any]]:
        """Get all replies in a message thread

        Args:
            team_id: ID of the team
            channel_id: ID of the channel
            message_id: ID of the thread's root message
            top: Number of replies to return (1-50, default 20)
        """
        args = parse_args(ThreadRepliesArgs, {
            "team_id": team_id, "channel_id": channel_id,
            "message_id": message_id, "top": top})
        return _dump(client.get_thread_replies(
            args.team_id, args.channel_id, args.message_id, args.top))
