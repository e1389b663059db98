"""
Adaptive Card grammar.

Pydantic models for the subset of Adaptive Card elements the Teams tools
accept, plus ``validate_card()`` which turns an untrusted JSON-like value
into a typed ``CardDocument`` or raises ``CardValidationError`` with the
path of every offending field.
"""

from typing import (
    Annotated, Any, Dict, Iterator, List, Literal, Optional, Sequence, Tuple,
    Union,
)

from pydantic import (
    AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from .errors import CardValidationError, ValidationIssue

CARD_CONTENT_TYPE = "application/vnd.microsoft.card.adaptive"
DEFAULT_VERSION = "1.4"
MAX_BODY_ELEMENTS = 50
MAX_FACTS = 10
MAX_DEPTH = 100

Spacing = Literal["None", "Small", "Default", "Medium", "Large", "ExtraLarge"]
HorizontalAlignment = Literal["Left", "Center", "Right"]

_url_adapter = TypeAdapter(AnyUrl)


class CardModel(BaseModel):
    """Base for every card element: strict types, camelCase on the wire."""
    model_config = ConfigDict(
        strict=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ---------------------------------------------------------------------------
# Leaf elements
# ---------------------------------------------------------------------------

class TextBlock(CardModel):
    type: Literal["TextBlock"]
    text: str
    weight: Optional[Literal["Default", "Lighter", "Bolder"]] = None
    size: Optional[Literal["Default", "Small", "Medium", "Large",
                           "ExtraLarge"]] = None
    color: Optional[Literal["Default", "Dark", "Light", "Accent", "Good",
                            "Warning", "Attention"]] = None
    wrap: Optional[bool] = None
    is_subtle: Optional[bool] = None
    max_lines: Optional[Union[int, float]] = None
    horizontal_alignment: Optional[HorizontalAlignment] = None
    spacing: Optional[Spacing] = None
    separator: Optional[bool] = None


class Image(CardModel):
    type: Literal["Image"]
    url: str
    alt_text: Optional[str] = None
    size: Optional[Literal["Auto", "Stretch", "Small", "Medium",
                           "Large"]] = None
    style: Optional[Literal["Default", "Person"]] = None
    horizontal_alignment: Optional[HorizontalAlignment] = None
    width: Optional[str] = None
    height: Optional[str] = None

    @field_validator("url")
    @classmethod
    def _check_url(cls, v: str) -> str:
        try:
            _url_adapter.validate_python(v)
        except ValidationError:
            raise ValueError("must be a valid absolute URL")
        return v


class Fact(CardModel):
    title: str
    value: str


class FactSet(CardModel):
    type: Literal["FactSet"]
    facts: List[Fact] = Field(max_length=MAX_FACTS)
    spacing: Optional[Spacing] = None
    separator: Optional[bool] = None


class Action(CardModel):
    type: Literal["Action.Submit", "Action.OpenUrl", "Action.ShowCard"]
    title: str
    data: Optional[Any] = None
    url: Optional[str] = None
    style: Optional[Literal["default", "positive", "destructive"]] = None


class ActionSet(CardModel):
    type: Literal["ActionSet"]
    actions: List[Action]


# ---------------------------------------------------------------------------
# Containers (recursive)
# ---------------------------------------------------------------------------

class Column(CardModel):
    type: Literal["Column"]
    width: Optional[Union[str, int, float]] = None
    items: Optional[List["CardElement"]] = None
    vertical_content_alignment: Optional[Literal["Top", "Center",
                                                 "Bottom"]] = None
    spacing: Optional[Spacing] = None


class ColumnSet(CardModel):
    type: Literal["ColumnSet"]
    columns: List[Column]
    spacing: Optional[Spacing] = None
    separator: Optional[bool] = None


class Container(CardModel):
    type: Literal["Container"]
    items: List["CardElement"]
    style: Optional[Literal["Default", "Emphasis", "Good", "Attention",
                            "Warning"]] = None
    spacing: Optional[Spacing] = None
    separator: Optional[bool] = None


CardElement = Annotated[
    Union[TextBlock, Image, FactSet, ColumnSet, Container, ActionSet],
    Field(discriminator="type"),
]

Column.model_rebuild()
ColumnSet.model_rebuild()
Container.model_rebuild()

# Union tags appear in pydantic error locations, never in reported paths.
ELEMENT_TYPES = frozenset(
    ("TextBlock", "Image", "FactSet", "ColumnSet", "Container", "ActionSet"))
_SCALAR_MEMBERS = frozenset(("str", "int", "float"))


class CardDocument(CardModel):
    """Root of a rich message."""
    type: Literal["AdaptiveCard"]
    version: str = DEFAULT_VERSION
    body: List[CardElement] = Field(max_length=MAX_BODY_ELEMENTS)
    actions: Optional[List[Action]] = None
    schema_: Optional[str] = Field(default=None, alias="$schema")


# ---------------------------------------------------------------------------
# Error translation
# ---------------------------------------------------------------------------

def format_path(loc: Sequence[Union[str, int]]) -> str:
    """Render a pydantic location as ``body[2].facts[11]``."""
    out = ""
    for part in loc:
        if isinstance(part, int):
            out += f"[{part}]"
        elif part in ELEMENT_TYPES or part in _SCALAR_MEMBERS:
            continue
        else:
            out += f".{part}" if out else str(part)
    return out


def _describe(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return type(value).__name__
    text = repr(value)
    return text if len(text) <= 60 else text[:57] + "..."


def _expected(err: Dict[str, Any]) -> Optional[str]:
    ctx = err.get("ctx") or {}
    kind = err["type"]
    if "expected" in ctx:
        return str(ctx["expected"])
    if "expected_tags" in ctx:
        return f"one of {ctx['expected_tags']}"
    if "max_length" in ctx:
        return f"at most {ctx['max_length']} items"
    if kind in ("model_type", "model_attributes_type", "dict_type"):
        return "object"
    if kind.endswith("_type"):
        return kind[:-len("_type")]
    return None


def issues_from_pydantic(exc: ValidationError,
                         prefix: Tuple[Union[str, int], ...] = ()) -> List[ValidationIssue]:
    issues = []
    for err in exc.errors():
        if err["type"] == "missing":
            actual = None
        elif err["type"] == "union_tag_invalid":
            actual = repr((err.get("ctx") or {}).get("tag"))
        else:
            actual = _describe(err.get("input"))
        issues.append(ValidationIssue(
            path=format_path(prefix + tuple(err["loc"])),
            message=err["msg"],
            expected=_expected(err),
            actual=actual,
        ))
    return issues


# ---------------------------------------------------------------------------
# Validation entry points
# ---------------------------------------------------------------------------

def _check_depth(data: Any, max_depth: int, prefix: str) -> None:
    """Reject nesting deeper than *max_depth* levels without recursing."""
    if not isinstance(data, dict) or not isinstance(data.get("body"), list):
        return
    base = f"{prefix}.body" if prefix else "body"
    stack = [(data["body"], base, 1)]
    while stack:
        elements, path, depth = stack.pop()
        for i, element in enumerate(elements):
            if not isinstance(element, dict):
                continue
            for key in ("items", "columns"):
                children = element.get(key)
                if not isinstance(children, list):
                    continue
                child_path = f"{path}[{i}].{key}"
                if depth + 1 > max_depth:
                    raise CardValidationError([ValidationIssue(
                        path=child_path,
                        message=f"Card nesting exceeds {max_depth} levels",
                        expected=f"at most {max_depth} levels",
                    )])
                stack.append((children, child_path, depth + 1))


def iter_elements(card: CardDocument) -> Iterator[Tuple[str, BaseModel]]:
    """Yield ``(path, element)`` for every element of *card*, depth first."""
    stack: List[Tuple[str, BaseModel]] = [
        (f"body[{i}]", el) for i, el in reversed(list(enumerate(card.body)))]
    while stack:
        path, el = stack.pop()
        yield path, el
        if isinstance(el, ColumnSet):
            children = [(f"{path}.columns[{i}]", c)
                        for i, c in enumerate(el.columns)]
        elif isinstance(el, (Column, Container)) and el.items:
            children = [(f"{path}.items[{i}]", c)
                        for i, c in enumerate(el.items)]
        else:
            children = []
        stack.extend(reversed(children))


def validate_card(data: Any, *, allow_action_sets: bool = True,
                  max_depth: int = MAX_DEPTH,
                  prefix: Tuple[Union[str, int], ...] = ()) -> CardDocument:
    """Validate *data* as an Adaptive Card.

    Args:
        data: Untrusted JSON-like value (usually a dict from the tool call)
        allow_action_sets: Whether ``ActionSet`` elements are accepted.
            The Graph channel-message API does not render them.
        max_depth: Maximum container nesting below ``body``
        prefix: Location of the card inside a larger argument record,
            prepended to every reported path

    Raises:
        CardValidationError: listing every offending path
    """
    _check_depth(data, max_depth, format_path(prefix))
    try:
        card = CardDocument.model_validate(data)
    except ValidationError as e:
        raise CardValidationError(issues_from_pydantic(e, prefix))

    if not allow_action_sets:
        base = format_path(prefix)
        rejected = [
            ValidationIssue(
                path=f"{base}.{path}" if base else path,
                message="ActionSet is not supported by this API",
                actual="'ActionSet'")
            for path, el in iter_elements(card) if isinstance(el, ActionSet)
        ]
        if rejected:
            raise CardValidationError(rejected)
    return card


def card_to_payload(card: CardDocument) -> Dict[str, Any]:
    """Serialize *card* to the JSON object Teams expects."""
    return card.model_dump(mode="json", by_alias=True, exclude_none=True)


def card_attachment(card: CardDocument) -> Dict[str, Any]:
    return {"contentType": CARD_CONTENT_TYPE, "content": card_to_payload(card)}
