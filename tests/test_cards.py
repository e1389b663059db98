import copy

import pytest

from teams_mcp.cards import (
    CARD_CONTENT_TYPE, ActionSet, CardDocument, Column, ColumnSet, Container,
    TextBlock, card_attachment, card_to_payload, format_path, iter_elements,
    validate_card,
)
from teams_mcp.errors import CardValidationError


def card(*body, **extra):
    doc = {"type": "AdaptiveCard", "body": list(body)}
    doc.update(extra)
    return doc


def text(value="hello", **kw):
    return dict(type="TextBlock", text=value, **kw)


def rejected_paths(data, **kwargs):
    with pytest.raises(CardValidationError) as exc:
        validate_card(data, **kwargs)
    return exc.value.paths


STATUS_CARD = card(
    text("Build #42", weight="Bolder", size="Large", color="Good", wrap=True),
    {"type": "Image", "url": "https://example.com/logo.png",
     "altText": "logo", "size": "Small", "style": "Person"},
    {"type": "FactSet", "facts": [
        {"title": "Branch", "value": "main"},
        {"title": "Duration", "value": "3m 12s"}]},
    {"type": "ActionSet", "actions": [
        {"type": "Action.OpenUrl", "title": "Open", "url": "https://ci.example.com/42"},
        {"type": "Action.Submit", "title": "Retry", "data": {"id": 42},
         "style": "positive"}]},
    version="1.5",
    actions=[{"type": "Action.ShowCard", "title": "Details"}],
)


def test_well_formed_card_round_trips():
    doc = validate_card(STATUS_CARD)
    assert isinstance(doc, CardDocument)
    assert card_to_payload(doc) == STATUS_CARD


def test_version_defaults_to_1_4():
    doc = validate_card(card(text()))
    assert doc.version == "1.4"
    assert card_to_payload(doc)["version"] == "1.4"


def test_schema_key_is_kept():
    data = card(text(), **{"$schema": "http://adaptivecards.io/schemas/adaptive-card.json"})
    payload = card_to_payload(validate_card(data))
    assert payload["$schema"] == data["$schema"]


def test_unknown_keys_are_dropped():
    payload = card_to_payload(validate_card(card(text(id="t1"))))
    assert payload["body"] == [{"type": "TextBlock", "text": "hello"}]


def test_empty_body_is_allowed():
    assert validate_card(card()).body == []


def test_body_limit():
    assert len(validate_card(card(*[text()] * 50)).body) == 50
    assert rejected_paths(card(*[text()] * 51)) == ["body"]


def test_fact_limit():
    facts = [{"title": f"t{i}", "value": "v"} for i in range(11)]
    paths = rejected_paths(card(text(), {"type": "FactSet", "facts": facts}))
    assert paths == ["body[1].facts"]


def test_fact_requires_title_and_value():
    paths = rejected_paths(card({"type": "FactSet", "facts": [{"title": "only"}]}))
    assert paths == ["body[0].facts[0].value"]


def test_image_url_must_be_valid():
    paths = rejected_paths(card({"type": "Image", "url": "not a url"}))
    assert paths == ["body[0].url"]


def test_image_url_is_preserved_verbatim():
    doc = validate_card(card({"type": "Image", "url": "https://example.com"}))
    assert doc.body[0].url == "https://example.com"


def test_unknown_type_is_rejected():
    with pytest.raises(CardValidationError) as exc:
        validate_card(card(text(), {"type": "Bogus"}))
    issue = exc.value.issues[0]
    assert issue.path == "body[1]"
    assert issue.actual == "'Bogus'"
    assert "TextBlock" in issue.expected


def test_missing_type_is_rejected():
    assert rejected_paths(card({"text": "no type"})) == ["body[0]"]


def test_wrong_typed_required_field():
    with pytest.raises(CardValidationError) as exc:
        validate_card(card(text(123)))
    issue = exc.value.issues[0]
    assert issue.path == "body[0].text"
    assert issue.expected == "string"
    assert issue.actual == "123"


@pytest.mark.parametrize("field, value", [
    ("color", "good"),
    ("color", "Purple"),
    ("size", "Huge"),
    ("weight", "Bold"),
    ("horizontalAlignment", "left"),
    ("spacing", "Tiny"),
])
def test_enumerations_are_exact(field, value):
    assert rejected_paths(card(text(**{field: value}))) == [f"body[0].{field}"]


def test_booleans_are_not_coerced():
    assert rejected_paths(card(text(wrap="true"))) == ["body[0].wrap"]


def test_action_type_and_style():
    data = card({"type": "ActionSet", "actions": [
        {"type": "Action.Execute", "title": "x"},
        {"type": "Action.Submit", "title": "y", "style": "Positive"}]})
    assert rejected_paths(data) == [
        "body[0].actions[0].type", "body[0].actions[1].style"]


def test_root_must_be_adaptive_card():
    assert rejected_paths({"type": "MessageCard", "body": []}) == ["type"]
    assert rejected_paths({"type": "AdaptiveCard"}) == ["body"]
    assert rejected_paths({"type": "AdaptiveCard", "body": "text"}) == ["body"]


def test_non_object_input():
    with pytest.raises(CardValidationError) as exc:
        validate_card("hello")
    assert exc.value.issues[0].path == ""
    assert "(root)" in str(exc.value)


def test_multiple_problems_are_all_reported():
    data = card(text(1), {"type": "Image", "url": "nope"}, {"type": "Bogus"})
    assert rejected_paths(data) == ["body[0].text", "body[1].url", "body[2]"]


NESTED = card({
    "type": "Container", "style": "Emphasis", "items": [
        {"type": "ColumnSet", "columns": [
            {"type": "Column", "width": "auto", "items": [
                {"type": "Container", "items": [text("a"), text("b")]}]},
            {"type": "Column", "width": 2, "items": [
                {"type": "Container", "items": [text("c")]}]},
        ]},
        text("after"),
    ]})


def test_recursive_containment_preserves_structure():
    doc = validate_card(NESTED)
    assert card_to_payload(doc) == {**NESTED, "version": "1.4"}

    outer = doc.body[0]
    assert isinstance(outer, Container)
    columns = outer.items[0]
    assert isinstance(columns, ColumnSet)
    assert [c.width for c in columns.columns] == ["auto", 2]
    inner = columns.columns[0].items[0]
    assert [t.text for t in inner.items] == ["a", "b"]


def test_nested_errors_are_located():
    data = copy.deepcopy(NESTED)
    data["body"][0]["items"][0]["columns"][1]["items"][0]["items"][0]["color"] = "Pink"
    assert rejected_paths(data) == [
        "body[0].items[0].columns[1].items[0].items[0].color"]


def test_columns_must_be_columns():
    data = card({"type": "ColumnSet", "columns": [text()]})
    assert rejected_paths(data) == ["body[0].columns[0].type"]


def test_nested_arrays_are_unbounded():
    data = card({"type": "Container", "items": [text()] * 80})
    assert len(validate_card(data).body[0].items) == 80


def nested_containers(depth):
    node = text("leaf")
    for _ in range(depth):
        node = {"type": "Container", "items": [node]}
    return card(node)


def test_depth_ceiling():
    validate_card(nested_containers(99))
    with pytest.raises(CardValidationError) as exc:
        validate_card(nested_containers(100))
    assert exc.value.issues[0].path.endswith(".items")
    assert "100" in exc.value.issues[0].message


def test_depth_ceiling_is_configurable():
    validate_card(nested_containers(3), max_depth=4)
    with pytest.raises(CardValidationError):
        validate_card(nested_containers(4), max_depth=4)


def test_action_sets_can_be_disallowed():
    data = card(text(), {"type": "Container", "items": [
        {"type": "ActionSet", "actions": []}]})
    validate_card(data)
    assert rejected_paths(data, allow_action_sets=False) == ["body[1].items[0]"]


def test_prefix_is_prepended():
    with pytest.raises(CardValidationError) as exc:
        validate_card(card(text(1)), prefix=("card",))
    assert exc.value.paths == ["card.body[0].text"]


def test_iter_elements_is_depth_first():
    doc = validate_card(NESTED)
    kinds = [(path, type(el).__name__) for path, el in iter_elements(doc)]
    assert kinds[:4] == [
        ("body[0]", "Container"),
        ("body[0].items[0]", "ColumnSet"),
        ("body[0].items[0].columns[0]", "Column"),
        ("body[0].items[0].columns[0].items[0]", "Container"),
    ]
    assert kinds[-1] == ("body[0].items[1]", "TextBlock")


def test_models_accept_python_names():
    block = TextBlock(type="TextBlock", text="x", is_subtle=True, max_lines=2)
    assert block.model_dump(by_alias=True, exclude_none=True) == {
        "type": "TextBlock", "text": "x", "isSubtle": True, "maxLines": 2}
    assert Column(type="Column").items is None
    assert ActionSet(type="ActionSet", actions=[]).actions == []


def test_card_attachment():
    doc = validate_card(card(text()))
    assert card_attachment(doc) == {
        "contentType": CARD_CONTENT_TYPE,
        "content": {"type": "AdaptiveCard", "version": "1.4",
                    "body": [{"type": "TextBlock", "text": "hello"}]},
    }


def test_format_path_skips_union_tags():
    assert format_path(("body", 2, "FactSet", "facts", 11)) == "body[2].facts[11]"
    assert format_path(()) == ""


def test_max_lines_accepts_any_number():
    doc = validate_card(card(text(maxLines=2.0), text(maxLines=3)))
    assert [b["maxLines"] for b in card_to_payload(doc)["body"]] == [2.0, 3]
    assert set(rejected_paths(card(text(maxLines="2")))) == {"body[0].maxLines"}
