"""Model registry for the public model identifiers"""

from typing import Dict, List
import logging

from .specifications import ModelSpec, MODEL_SPECS

logger = logging.getLogger(__name__)

MODEL_REGISTRY: Dict[str, ModelSpec] = {}
MODELS_LIST: List[Dict[str, int | str]] = []


def _register_model(spec: ModelSpec) -> None:
    existing = MODEL_REGISTRY.get(spec.public_id)
    if existing and existing != spec:
        logger.debug("Overwriting model registry entry for %s", spec.public_id)
    MODEL_REGISTRY[spec.public_id] = spec
    if spec.include_in_listing:
        MODELS_LIST.append(spec.to_model_listing())


def _build_registry() -> None:
    for spec in MODEL_SPECS:
        _register_model(spec)


# Build the registry on module import
_build_registry()


def models_response() -> Dict[str, object]:
    """OpenAI-style ``list`` object for ``GET /v1/models``"""
    return {"object": "list", "data": [dict(model) for model in MODELS_LIST]}
