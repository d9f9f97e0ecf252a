"""Model registry and resolution package for the Amazon Q gateway"""

from .specifications import ModelSpec, MODEL_SPECS, DEFAULT_UPSTREAM_MODEL
from .registry import MODEL_REGISTRY, MODELS_LIST, models_response
from .resolution import select_model_id

__all__ = [
    "ModelSpec",
    "MODEL_SPECS",
    "DEFAULT_UPSTREAM_MODEL",
    "MODEL_REGISTRY",
    "MODELS_LIST",
    "models_response",
    "select_model_id",
]
