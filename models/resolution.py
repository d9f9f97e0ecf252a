"""Public model id to upstream model id resolution"""

from typing import Optional
import logging

from .registry import MODEL_REGISTRY
from .specifications import DEFAULT_UPSTREAM_MODEL

logger = logging.getLogger(__name__)


def select_model_id(requested: Optional[str], default: str = DEFAULT_UPSTREAM_MODEL) -> str:
    """
    Map a caller-supplied model name to the upstream ``modelId``.

    Never fails: anything unrecognized resolves to ``default``.

    Examples:
        >>> select_model_id("claude-sonnet-4")
        'claude-sonnet-4'

        >>> select_model_id("amazon-q")
        'claude-sonnet-4.5'

        >>> select_model_id("gpt-4o")
        'claude-sonnet-4.5'
    """
    if not isinstance(requested, str) or not requested:
        return default

    # Handle format "provider/model-name"
    model_name = requested.split("/", 1)[-1] if "/" in requested else requested

    entry = MODEL_REGISTRY.get(model_name)
    if entry:
        return entry.upstream_id

    logger.debug("Unknown model '%s', using default upstream model %s", requested, default)
    return default
