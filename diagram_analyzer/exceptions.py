"""
Custom Exception Hierarchy for Azure Diagram Analyzer

Structured errors shared by the detection engine, the policy engine and the
command line surface. Data-shape problems (unknown operators, unresolvable
property paths, malformed policies) are not raised out of the engines; these
classes describe the remaining truly exceptional conditions and carry the
context the loader logs when it drops a policy.
"""

from typing import Any, Dict, List, Optional


class DiagramAnalyzerError(Exception):
    """
    Base exception class for all Azure Diagram Analyzer errors.

    Provides structured error information including context, error codes,
    and optional recovery suggestions.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        recovery_suggestion: Optional[str] = None,
    ) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error message
            error_code: Optional error code for programmatic handling
            context: Optional dictionary with error context
            cause: Optional underlying exception that caused this error
            recovery_suggestion: Optional suggestion for error recovery
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause
        self.recovery_suggestion = recovery_suggestion

    def __str__(self) -> str:
        """Return a formatted error message with context."""
        result = self.message
        if self.error_code:
            result = f"[{self.error_code}] {result}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            result += f" (context: {context_str})"
        if self.cause:
            result += f" (caused by: {self.cause})"
        if self.recovery_suggestion:
            result += f" (suggestion: {self.recovery_suggestion})"
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None,
            "recovery_suggestion": self.recovery_suggestion,
        }


# Catalog-related exceptions
class CatalogError(DiagramAnalyzerError):
    """Base class for service catalog errors."""

    pass


class DuplicateServiceError(CatalogError):
    """Raised when a catalog is built with two services sharing an id."""

    def __init__(
        self, message: str, service_id: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context", {})
        if service_id:
            context["service_id"] = service_id
        kwargs["context"] = context
        kwargs.setdefault("error_code", "CATALOG_DUPLICATE_SERVICE")
        super().__init__(message, **kwargs)


# Detection-related exceptions
class DetectionError(DiagramAnalyzerError):
    """Base class for detection engine errors."""

    pass


class InvalidDetectionInputError(DetectionError):
    """Raised when the detector is handed something that is not text."""

    def __init__(
        self, message: str, received_type: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context", {})
        if received_type:
            context["received_type"] = received_type
        kwargs["context"] = context
        kwargs.setdefault("error_code", "DETECTION_INVALID_INPUT")
        kwargs.setdefault(
            "recovery_suggestion",
            "Extract diagram text before calling the detector",
        )
        super().__init__(message, **kwargs)


# Policy-related exceptions
class PolicyError(DiagramAnalyzerError):
    """Base class for policy errors."""

    pass


class PolicyValidationError(PolicyError):
    """Raised when a policy definition fails validation."""

    def __init__(
        self,
        message: str,
        policy_id: Optional[str] = None,
        validation_errors: Optional[List[str]] = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if policy_id:
            context["policy_id"] = policy_id
        if validation_errors:
            context["validation_errors"] = validation_errors
        kwargs["context"] = context
        kwargs.setdefault("error_code", "POLICY_VALIDATION_FAILED")
        super().__init__(message, **kwargs)


class PolicyLoadError(PolicyError):
    """Raised when a policy file cannot be read or parsed."""

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        category: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if file_path:
            context["file_path"] = file_path
        if category:
            context["category"] = category
        kwargs["context"] = context
        kwargs.setdefault("error_code", "POLICY_LOAD_FAILED")
        kwargs.setdefault(
            "recovery_suggestion", "Check that the policy file is valid JSON or YAML"
        )
        super().__init__(message, **kwargs)


class PolicyFixError(PolicyError):
    """Raised when a fix cannot be applied to a resource."""

    def __init__(
        self,
        message: str,
        action: Optional[str] = None,
        property_path: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if action:
            context["action"] = action
        if property_path:
            context["property"] = property_path
        kwargs["context"] = context
        kwargs.setdefault("error_code", "POLICY_FIX_FAILED")
        super().__init__(message, **kwargs)


# Configuration-related exceptions
class ConfigurationError(DiagramAnalyzerError):
    """Raised when configuration validation fails."""

    def __init__(
        self, message: str, config_section: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context", {})
        if config_section:
            context["config_section"] = config_section
        kwargs["context"] = context
        kwargs.setdefault("error_code", "INVALID_CONFIG")
        kwargs.setdefault(
            "recovery_suggestion", "Check environment variables and the .env file"
        )
        super().__init__(message, **kwargs)


def wrap_exception(
    exc: Exception,
    error_class: type = DiagramAnalyzerError,
    message: Optional[str] = None,
    **kwargs: Any,
) -> DiagramAnalyzerError:
    """
    Wrap a generic exception in our custom exception hierarchy.

    Args:
        exc: The original exception
        error_class: DiagramAnalyzerError subclass to construct
        message: Optional message prefix; defaults to the original message
        **kwargs: Extra keyword arguments for the error class

    Returns:
        DiagramAnalyzerError: Wrapped exception with the original as its cause
    """
    error_message = f"{message}: {exc}" if message else str(exc)
    return error_class(error_message, cause=exc, **kwargs)
