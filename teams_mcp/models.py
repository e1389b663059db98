"""
Pydantic models for tool arguments and structured tool responses.
"""

from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .cards import CardDocument, issues_from_pydantic, validate_card
from .errors import CardValidationError, ValidationIssue

MAX_HISTORY = 50


# ---------------------------------------------------------------------------
# Tool arguments
# ---------------------------------------------------------------------------

class ToolArgs(BaseModel):
    model_config = ConfigDict(strict=True, extra="forbid")


class PostMessageArgs(ToolArgs):
    """Plain message to the configured bot conversation."""
    text: str = Field(min_length=1, description="Message text, markdown allowed")
    thread_id: Optional[str] = Field(
        default=None, description="Activity ID to reply to in a thread")


class PostRichMessageArgs(ToolArgs):
    text: Optional[str] = Field(
        default=None, description="Fallback text for notifications")
    card: Optional[CardDocument] = None
    thread_id: Optional[str] = None


class ChannelPostMessageArgs(ToolArgs):
    """Plain message to a Graph team channel."""
    team_id: str = Field(min_length=1)
    channel_id: str = Field(min_length=1)
    text: str = Field(min_length=1)
    reply_to_id: Optional[str] = None


class ChannelPostRichMessageArgs(ToolArgs):
    team_id: str = Field(min_length=1)
    channel_id: str = Field(min_length=1)
    text: Optional[str] = None
    card: Optional[CardDocument] = None
    reply_to_id: Optional[str] = None


class TeamArgs(ToolArgs):
    team_id: str = Field(min_length=1)


class ChannelHistoryArgs(TeamArgs):
    channel_id: str = Field(min_length=1)
    top: int = Field(default=20, ge=1, le=MAX_HISTORY)


class ThreadRepliesArgs(ChannelHistoryArgs):
    message_id: str = Field(min_length=1)


A = TypeVar("A", bound=ToolArgs)


def compact_args(**kwargs: Any) -> Dict[str, Any]:
    """Drop arguments the caller left unset."""
    return {k: v for k, v in kwargs.items() if v is not None}


def parse_args(model: Type[A], data: Dict[str, Any]) -> A:
    """Validate *data* against *model*, raising ``CardValidationError``."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise CardValidationError(issues_from_pydantic(e))


def validate_post_rich_message_args(data: Dict[str, Any], *,
                                    allow_action_sets: bool = True,
                                    model: Type[A] = PostRichMessageArgs) -> A:
    """Validate rich-message arguments and require one of text or card.

    The card itself goes through ``validate_card()`` so that nested paths
    are reported as ``card.body[0]...`` and the ActionSet policy applies.
    """
    if not isinstance(data, dict):
        raise CardValidationError([ValidationIssue(
            path="", message="Arguments must be an object",
            expected="object", actual=type(data).__name__)])

    fields = dict(data)
    raw_card = fields.pop("card", None)
    card = None
    if raw_card is not None:
        card = validate_card(raw_card, allow_action_sets=allow_action_sets,
                             prefix=("card",))

    args = parse_args(model, fields)
    if card is not None:
        args = args.model_copy(update={"card": card})

    if not args.text and args.card is None:
        message = "Either text or card must be provided"
        raise CardValidationError([
            ValidationIssue(path="text", message=message),
            ValidationIssue(path="card", message=message),
        ])
    return args


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class PostResult(BaseModel):
    """Outcome of a send tool."""
    success: bool = Field(description="Whether the message was accepted")
    message_id: Optional[str] = Field(
        default=None, description="ID the API assigned to the new message")
    thread_id: Optional[str] = Field(
        default=None, description="Parent message the post replied to")
    action: str = Field(description="Human-readable summary")


class _GraphModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TeamSummary(_GraphModel):
    id: str
    display_name: Optional[str] = Field(default=None, alias="displayName")
    description: Optional[str] = None


class ChannelSummary(_GraphModel):
    id: str
    display_name: Optional[str] = Field(default=None, alias="displayName")
    description: Optional[str] = None
    membership_type: Optional[str] = Field(default=None,
                                           alias="membershipType")


class MessageBody(_GraphModel):
    content_type: Optional[str] = Field(default=None, alias="contentType")
    content: Optional[str] = None


class ChatMessageSummary(_GraphModel):
    id: str
    created_date_time: Optional[str] = Field(default=None,
                                             alias="createdDateTime")
    reply_to_id: Optional[str] = Field(default=None, alias="replyToId")
    sender: Optional[str] = None
    body: Optional[MessageBody] = None

    @classmethod
    def from_graph(cls, raw: Dict[str, Any]) -> "ChatMessageSummary":
        """Flatten Graph's ``from.user.displayName`` into ``sender``."""
        origin = raw.get("from") or {}
        who = origin.get("user") or origin.get("application") or {}
        msg = cls.model_validate(raw)
        return msg.model_copy(update={"sender": who.get("displayName")})

