"""Public model specifications and their upstream counterparts"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class ModelSpec:
    public_id: str
    upstream_id: str
    created: int
    owned_by: str
    include_in_listing: bool = True

    def to_model_listing(self) -> Dict[str, int | str]:
        return {
            "id": self.public_id,
            "object": "model",
            "created": self.created,
            "owned_by": self.owned_by,
        }


DEFAULT_UPSTREAM_MODEL = "claude-sonnet-4.5"

MODEL_SPECS: List[ModelSpec] = [
    ModelSpec(
        public_id="claude-sonnet-4.5",
        upstream_id="claude-sonnet-4.5",
        created=1759104000,
        owned_by="anthropic",
    ),
    ModelSpec(
        public_id="claude-sonnet-4",
        upstream_id="claude-sonnet-4",
        created=1747267200,
        owned_by="anthropic",
    ),
    # Amazon Q's own alias routes to the current default
    ModelSpec(
        public_id="amazon-q",
        upstream_id=DEFAULT_UPSTREAM_MODEL,
        created=1759104000,
        owned_by="amazon",
    ),
]
