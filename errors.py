"""Gateway error taxonomy

Every error raised across the gateway derives from GatewayError so the FastAPI
handlers can render the same JSON envelope for all of them.
"""

from typing import Any, Dict, List, Optional


class GatewayError(Exception):
    """Base class carrying the HTTP status and error envelope fields"""

    status_code = 500
    error_type = "server_error"
    code: Optional[str] = "internal_error"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        error: Dict[str, Any] = {
            "message": self.message,
            "type": self.error_type,
        }
        if self.code:
            error["code"] = self.code
        error.update(self.details)
        return {"error": error}


class InputValidationError(GatewayError):
    """Malformed request body, empty prompt or missing credential fields"""

    status_code = 400
    error_type = "invalid_request_error"
    code = None


class MissingFieldsError(InputValidationError):
    """Required fields absent from a submitted record"""

    def __init__(self, missing: List[str]):
        super().__init__(
            f"Missing required fields: {', '.join(missing)}",
            details={"missing_fields": list(missing)},
        )
        self.missing = list(missing)


class ConfigurationError(GatewayError):
    """Token refresh attempted without the fields it needs"""

    status_code = 500
    error_type = "configuration_error"
    code = "missing_credentials"


class UpstreamError(GatewayError):
    """Non-success answer from the vendor or its token endpoint"""

    error_type = "amazon_q_error"

    def __init__(self, status: int, body: str = "", message: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message or f"Amazon Q API call failed: {body}", status_code=status, code=code)
        self.status = status
        self.body = body


class UpstreamAuthError(UpstreamError):
    """Token exchange failed or the upstream rejected a freshly refreshed token"""

    error_type = "amazon_q_auth_error"
    code = "unauthorized"


class UpstreamTransportError(UpstreamError):
    """Any other non-2xx answer or a connection failure talking to the vendor"""

    code = "service_unavailable"


class StreamFault(GatewayError):
    """I/O or parse failure after the streaming response has started"""

    error_type = "stream_error"
    code = None


class BufferOverflowError(StreamFault):
    """An upstream fragment outgrew the configured buffer under the reject policy"""
