"""
Prompt extraction and model selection
"""

import pytest

from models import models_response, select_model_id
from translation import extract_prompt


def test_uses_most_recent_user_message():
    messages = [
        {"role": "user", "content": "first"},
        {"role": "assistant", "content": "reply"},
        {"role": "user", "content": "second"},
        {"role": "assistant", "content": "another reply"},
    ]

    assert extract_prompt(messages) == "second"


def test_joins_text_parts_with_single_spaces():
    messages = [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": "look at"},
                {"type": "image", "source": {"data": "..."}},
                {"type": "text", "text": "this"},
            ],
        }
    ]

    assert extract_prompt(messages) == "look at this"


def test_no_user_message_yields_empty_prompt():
    assert extract_prompt([{"role": "system", "content": "be nice"}]) == ""
    assert extract_prompt([]) == ""
    assert extract_prompt(None) == ""


def test_user_message_without_text_yields_empty_prompt():
    assert extract_prompt([{"role": "user", "content": [{"type": "image"}]}]) == ""
    assert extract_prompt([{"role": "user", "content": None}]) == ""


def test_user_message_with_only_empty_text_parts_yields_empty_prompt():
    messages = [{"role": "user", "content": [{"type": "text", "text": ""}, {"type": "text", "text": ""}]}]

    assert extract_prompt(messages) == ""


@pytest.mark.parametrize(
    "requested,expected",
    [
        ("claude-sonnet-4.5", "claude-sonnet-4.5"),
        ("claude-sonnet-4", "claude-sonnet-4"),
        ("amazon-q", "claude-sonnet-4.5"),
        ("gpt-4o", "claude-sonnet-4.5"),
        ("gateway/claude-sonnet-4", "claude-sonnet-4"),
        ("", "claude-sonnet-4.5"),
        (None, "claude-sonnet-4.5"),
    ],
)
def test_select_model_id(requested, expected):
    assert select_model_id(requested) == expected


def test_models_list_contains_public_ids():
    listing = models_response()

    assert listing["object"] == "list"
    assert [model["id"] for model in listing["data"]] == ["claude-sonnet-4.5", "claude-sonnet-4", "amazon-q"]
