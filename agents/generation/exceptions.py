"""
Exception hierarchy for the generation pipeline.

Provides specific exceptions for different failure scenarios
so stages can decide between falling back and propagating.
"""

from typing import Optional, Dict, Any, List


class GenerationError(Exception):
    """Base exception for all generation errors"""

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.context = context or {}

    def __str__(self):
        parts = [super().__str__()]
        if self.cause:
            parts.append(f" (caused by: {type(self.cause).__name__}: {str(self.cause)})")
        if self.context:
            parts.append(f" Context: {self.context}")
        return "".join(parts)


# === Configuration exceptions ===

class ConfigurationError(GenerationError):
    """Configuration error"""
    pass


class MissingConfigError(ConfigurationError):
    """Required credential or setting missing"""

    def __init__(self, setting: str, message: Optional[str] = None, **kwargs):
        super().__init__(message or f"{setting} is not configured", **kwargs)
        self.setting = setting
        self.context.setdefault('setting', setting)


# === Provider exceptions ===

class ProviderError(GenerationError):
    """Provider returned a non-success status or the request never completed.

    ``status_code`` is None for transport failures and timeouts.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
        provider: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.body = body
        self.provider = provider
        self.context.update({
            'provider': provider,
            'status_code': status_code,
        })


class ProviderTimeoutError(ProviderError):
    """Provider request exceeded the configured timeout"""
    pass


class ExtractionError(GenerationError):
    """Every JSON recovery strategy failed on the model output"""

    def __init__(self, message: str, label: str = "unknown", preview: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.label = label
        self.preview = preview
        self.context.setdefault('label', label)


# === Validation exceptions ===

class ValidationError(GenerationError):
    """Caller-supplied request failed schema validation"""

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.details = details or []


# === Orchestration exceptions ===

class OrchestrationError(GenerationError):
    """Whole-pipeline failure"""
    pass


class PipelineCancelledError(OrchestrationError):
    """The run's cancellation signal fired while work was in flight"""
    pass


# === Recovery helpers ===

def is_fallback_error(error: Exception) -> bool:
    """Errors a stage absorbs by switching to its deterministic fallback.

    Only provider outages and unparseable model output qualify. A
    ConfigurationError such as a missing API key is a deployment fault and
    must reach the caller instead of producing a silently degraded deck.
    """
    return isinstance(error, (ProviderError, ExtractionError))


def is_retryable(error: Exception) -> bool:
    """Check if a whole-pipeline failure deserves the caller's single retry"""
    if isinstance(error, (ConfigurationError, ValidationError, PipelineCancelledError)):
        return False
    return True


def to_error_payload(error: Exception) -> Dict[str, Any]:
    """Structured, user-visible error payload (never a stack trace)."""
    payload: Dict[str, Any] = {
        "type": "error",
        "message": getattr(error, "message", None) or str(error) or "Internal server error",
    }
    if isinstance(error, ValidationError) and error.details:
        payload["details"] = error.details
    if isinstance(error, PipelineCancelledError):
        payload["cancelled"] = True
    return payload
