"""Request body for the generateAssistantResponse operation"""

from typing import Any, Dict, Optional


def build_conversation_payload(
    prompt: str,
    conversation_id: str,
    model_id: str,
    profile_arn: Optional[str] = None,
) -> Dict[str, Any]:
    """Wrap a single prompt as a fresh, history-less conversation"""
    payload: Dict[str, Any] = {
        "conversationState": {
            "chatTriggerType": "MANUAL",
            "conversationId": conversation_id,
            "currentMessage": {
                "userInputMessage": {
                    "content": prompt,
                    "images": [],
                    "modelId": model_id,
                    "origin": "IDE",
                    "userInputMessageContext": {
                        "editorState": {
                            "useRelevantDocuments": False,
                            "workspaceFolders": [],
                        },
                        "envState": {
                            "operatingSystem": "linux",
                        },
                    },
                },
            },
            "history": [],
        },
    }
    if profile_arn:
        payload["profileArn"] = profile_arn
    return payload


def build_request_headers(access_token: str) -> Dict[str, str]:
    return {
        "content-type": "application/json",
        "authorization": f"Bearer {access_token}",
        "x-amzn-codewhisperer-optout": "false",
    }
