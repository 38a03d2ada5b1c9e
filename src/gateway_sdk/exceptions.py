"""
Exception classes for Gateway Python SDK
"""

from typing import Optional, Dict, Any


class GatewaySDKError(Exception):
    """Base exception for all Gateway SDK errors"""

    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ConfigurationError(GatewaySDKError):
    """Exception raised for a missing or invalid base URI, identity or secret"""

    def __init__(self, message: str, error_code: str = "CONFIG_ERROR",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class TransportError(GatewaySDKError):
    """Exception raised when a request could not be completed (connectivity, timeout)"""

    def __init__(self, message: str, error_code: str = "TRANSPORT_ERROR",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class ProtocolError(GatewaySDKError):
    """
    Exception raised for non-2xx responses and malformed authentication responses.

    Carries the request and response context needed to diagnose the failure.
    For business calls ``curl_command`` holds a replayable reconstruction of
    the request that failed.
    """

    def __init__(
        self,
        message: str,
        error_code: str = "HTTP_ERROR",
        http_status: int = 0,
        method: Optional[str] = None,
        url: Optional[str] = None,
        response_body: Optional[str] = None,
        request_headers: Optional[Dict[str, str]] = None,
        curl_command: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        details = dict(details or {})
        details.setdefault('status_code', http_status)
        if method:
            details.setdefault('method', method)
        if url:
            details.setdefault('url', url)
        super().__init__(message, error_code, details)
        self.http_status = http_status
        self.method = method
        self.url = url
        self.response_body = response_body
        self.request_headers = dict(request_headers or {})
        self.curl_command = curl_command
