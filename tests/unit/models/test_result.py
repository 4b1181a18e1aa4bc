"""Tests for TestResult serialization."""

import json

from result_listener.models.result import Label, Link, TestResult


def test_serializes_with_camel_case_names() -> None:
    """Serialized field names are camelCase and unset fields are omitted."""
    result = TestResult(
        uuid="u-1",
        history_id="h-1",
        name="shouldWork",
        full_name="com.example.Foo.shouldWork",
        status="passed",
        links=frozenset({Link(name="PAY-1", type="issue")}),
        labels=[Label(name="tag", value="smoke")],
    )

    data = json.loads(result.model_dump_json(by_alias=True, exclude_none=True))

    assert data["historyId"] == "h-1"
    assert data["fullName"] == "com.example.Foo.shouldWork"
    assert data["links"] == [{"name": "PAY-1", "type": "issue"}]
    assert data["labels"] == [{"name": "tag", "value": "smoke"}]
    assert "statusMessage" not in data


def test_parses_serialized_form() -> None:
    """Accepts the camelCase form produced by writers."""
    result = TestResult.model_validate(
        {
            "uuid": "u-1",
            "name": "shouldWork",
            "fullName": "com.example.Foo.shouldWork",
            "statusMessage": "x!=y",
            "status": "failed",
        }
    )

    assert result.full_name == "com.example.Foo.shouldWork"
    assert result.status_message == "x!=y"


def test_labels_named() -> None:
    """Returns label values of one name in order."""
    result = TestResult(
        uuid="u-1",
        name="n",
        full_name="f",
        labels=[
            Label(name="tag", value="c"),
            Label(name="owner", value="alice"),
            Label(name="tag", value="a"),
        ],
    )

    assert result.labels_named("tag") == ["c", "a"]
