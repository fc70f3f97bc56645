"""
DevMind Backend — Custom Exception Hierarchy
==============================================

What:  Defines application-specific exceptions for the AI provider layer.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       status codes and user-friendly messages. They replace vendor SDK
       exceptions whose payloads can carry credential-adjacent diagnostics.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by adapters, the registry and the HTTP boundary.
When:  During request processing and administrative provider changes.

Exception Hierarchy:
    DevMindError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── ProviderNotRegistered    → 404 Not Found (vendor not configured)
    ├── NoActiveProvider         → 503 Service Unavailable (nothing selected)
    ├── ProviderCallFailed       → 503 Service Unavailable (vendor failed)
    └── AssistanceTimeoutError   → 504 Gateway Timeout (boundary timeout)

Never Retried:
    ProviderCallFailed is raised once per failed vendor call. Nothing in the
    provider layer re-issues the call; best-effort callers (tags, titles,
    code suggestions) substitute an empty result at the HTTP boundary.
"""

from typing import Any, Dict, Optional


class DevMindError(Exception):
    """
    Base exception for all DevMind application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client
                  unless a handler explicitly chooses to)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(DevMindError):
    """
    Raised when client input fails a business rule.

    HTTP: 400 Bad Request
    Schema-level problems are caught by pydantic before reaching services;
    the request-validation handler in main.py reports both the same way.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ProviderNotRegistered(DevMindError):
    """
    Raised when activating, fetching or removing a vendor that has no adapter.

    HTTP: 404 Not Found
    Always surfaced to the caller; the one exception is the credential
    probe (ProviderRegistry.validate), which answers False instead.
    """

    def __init__(self, vendor_id: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["vendor_id"] = str(vendor_id)
        super().__init__(
            message=f"AI provider '{vendor_id}' is not configured",
            context=ctx,
        )
        self.vendor_id = str(vendor_id)


class NoActiveProvider(DevMindError):
    """
    Raised when generation is requested but no adapter is active.

    HTTP: 503 Service Unavailable
    Happens when no vendor credential was configured at startup, or the
    active vendor was removed and the user has not picked another one.
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="No AI provider is active. Configure an API key in the provider settings.",
            context=context,
        )


class ProviderCallFailed(DevMindError):
    """
    Raised when a vendor generation call fails for any reason.

    What:    Transport error, non-2xx vendor status, or a response we could
             not read. One uniform type regardless of vendor.
    HTTP:    503 Service Unavailable

    Attributes:
        vendor_id: Which vendor failed ("openai", "gemini", "claude")
        cause:     The underlying exception. Logged server-side only; its
                   text may echo request metadata from the vendor.
    """

    def __init__(
        self,
        vendor_id: str,
        cause: BaseException,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["vendor_id"] = str(vendor_id)
        ctx["error_type"] = type(cause).__name__
        super().__init__(
            message="The AI provider could not complete the request. Please try again later.",
            context=ctx,
        )
        self.vendor_id = str(vendor_id)
        self.cause = cause


class AssistanceTimeoutError(DevMindError):
    """
    Raised by the HTTP boundary when AI_REQUEST_TIMEOUT elapses.

    HTTP: 504 Gateway Timeout
    The provider layer itself defines no timeout; this only exists when an
    operator opts in through configuration.
    """

    def __init__(self, timeout: float, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["timeout_seconds"] = timeout
        super().__init__(
            message=f"The AI provider did not answer within {timeout:g} seconds.",
            context=ctx,
        )
        self.timeout = timeout
