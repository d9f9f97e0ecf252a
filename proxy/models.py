"""
Pydantic models for the public chat schemas and the credential endpoints.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict


class ChatRequest(BaseModel):
    """Fields the gateway reads from an OpenAI or Anthropic chat request

    Everything else (temperature, tools, system, ...) is accepted and ignored.
    ``stream`` stays untyped because clients send booleans, numbers, strings
    and objects for it.
    """
    model_config = ConfigDict(extra="allow")

    model: Optional[str] = None
    messages: Optional[List[Dict[str, Any]]] = None
    stream: Any = None


class CredentialsStatus(BaseModel):
    """Response of GET /credentials"""
    has_credentials: bool
    has_access_token: bool
    token_expiry: Optional[str] = None


class CredentialsSaved(BaseModel):
    """Response of POST /credentials"""
    message: str
    has_profile_arn: bool


class HealthStatus(BaseModel):
    status: str
    timestamp: str
    has_credentials: bool
