"""
Prompt extraction from OpenAI and Anthropic message lists.
"""
from typing import Any, List


def extract_prompt(messages: Any) -> str:
    """
    Return the text of the most recent user message.

    Structured content joins the ``text`` of every ``type == "text"`` part with
    single spaces; plain string content is returned as-is. An empty result means
    there is nothing to send upstream and must be rejected by the caller.
    """
    if not isinstance(messages, list):
        return ""

    for message in reversed(messages):
        if not isinstance(message, dict) or message.get("role") != "user":
            continue

        content = message.get("content")
        if isinstance(content, list):
            parts: List[str] = []
            for item in content:
                if isinstance(item, dict) and item.get("type") == "text":
                    text = item.get("text")
                    parts.append(text if isinstance(text, str) else "")
            if not any(parts):
                return ""
            return " ".join(parts)
        if isinstance(content, str):
            return content
        return ""

    return ""
