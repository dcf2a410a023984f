"""Error types and error handling helpers for the Lacework CLI."""
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import requests


class LaceworkError(Exception):
    """Base class for all errors raised by the Lacework CLI."""

    def __init__(self, message: str, details: Optional[Any] = None):
        """Initialize the error.

        Args:
            message: Human readable error message
            details: Additional error details (optional)
        """
        super().__init__(message)
        self.message = message
        self.details = details


class ConfigurationError(LaceworkError):
    """Raised when the CLI configuration is missing or unusable."""

    def __init__(self, message: str, config_key: Optional[str] = None,
                 details: Optional[Any] = None):
        super().__init__(message, details)
        self.config_key = config_key


class ConfigDecodeError(ConfigurationError):
    """Raised when the configuration file cannot be decoded."""

    def __init__(self, message: str, path: Optional[str] = None,
                 details: Optional[Any] = None):
        super().__init__(message, details=details)
        self.path = path


class ConfigNotFoundError(ConfigDecodeError):
    """Raised when the configuration file does not exist."""

    def __init__(self, path: str):
        super().__init__(f"config file not found: {path}", path=path)


class ProfileNotFoundError(ConfigurationError):
    """Raised when a named profile is not present in the configuration."""

    def __init__(self, profile: str):
        super().__init__(f"profile '{profile}' not found", config_key="profiles")
        self.profile = profile


class ValidationError(LaceworkError):
    """Raised when user supplied values are invalid."""

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[Any] = None):
        super().__init__(message)
        self.field = field
        self.value = value


class UnsupportedSeverityError(ValidationError):
    """Raised when a severity or severity threshold is not recognized."""

    def __init__(self, severity: str, valid_severities):
        message = (
            f"the severity {severity} is not valid, use one of "
            f"{', '.join(valid_severities)}"
        )
        super().__init__(message, field="severity", value=severity)
        self.valid_severities = list(valid_severities)


class ApiError(LaceworkError):
    """Raised when a request to the Lacework API fails."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 response: Optional[Any] = None,
                 request_info: Optional[Dict[str, Any]] = None):
        if status_code is not None:
            message = f"API Error ({status_code}): {message}"
        super().__init__(message, details=response)
        self.status_code = status_code
        self.response = response
        self.request_info = request_info


class AuthenticationError(ApiError):
    """Raised when the API rejects the provided credentials."""

    def __init__(self, message: str = "Authentication failed", status_code: Optional[int] = 401,
                 response: Optional[Any] = None,
                 request_info: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code, response, request_info)


class ResourceNotFoundError(ApiError):
    """Raised when the requested resource does not exist."""

    def __init__(self, resource_type: str, resource_id: str, status_code: Optional[int] = 404,
                 response: Optional[Any] = None,
                 request_info: Optional[Dict[str, Any]] = None):
        message = f"{resource_type.capitalize()} with ID '{resource_id}' not found"
        super().__init__(message, status_code, response, request_info)
        self.resource_type = resource_type
        self.resource_id = resource_id


def _response_payload(response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {"raw": response.text}


def _error_message(payload: Any, default: str) -> str:
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        if isinstance(error, str) and error:
            return error
        if payload.get("message"):
            return payload["message"]
    return default


def handle_api_error(error: Exception) -> LaceworkError:
    """Convert an exception raised while talking to the API into a LaceworkError.

    Args:
        error: The exception to convert

    Returns:
        LaceworkError: The matching error type
    """
    if isinstance(error, LaceworkError):
        return error

    if isinstance(error, requests.exceptions.HTTPError) and error.response is not None:
        response = error.response
        status_code = response.status_code
        payload = _response_payload(response)
        message = _error_message(payload, str(error))

        request_info = None
        if error.request is not None:
            request_info = {"method": error.request.method, "url": error.request.url}

        if status_code in (401, 403):
            return AuthenticationError(message, status_code, payload, request_info)

        if status_code == 404 and request_info:
            # /api/v1/external/<resource>/<id>
            parts = [p for p in urlparse(request_info["url"]).path.split("/") if p]
            resource_type = parts[-2] if len(parts) >= 2 else "resource"
            resource_id = parts[-1] if parts else ""
            return ResourceNotFoundError(resource_type, resource_id, status_code,
                                         payload, request_info)

        return ApiError(message, status_code, payload, request_info)

    if isinstance(error, requests.exceptions.ConnectionError):
        return ApiError(f"Connection error: {error}")

    if isinstance(error, requests.exceptions.Timeout):
        return ApiError(f"Request timed out: {error}")

    if isinstance(error, requests.exceptions.RequestException):
        return ApiError(f"Request failed: {error}")

    return LaceworkError(f"Unexpected error: {error}")


class ErrorHandler:
    """Helpers to display errors at the command boundary."""

    @staticmethod
    def format_error_for_display(error: Exception) -> Dict[str, Any]:
        """Turn an error into a dictionary suitable for table or JSON output."""
        if not isinstance(error, LaceworkError):
            return {"message": str(error), "type": error.__class__.__name__}

        result = {"message": error.message, "type": error.__class__.__name__}
        if error.details is not None:
            result["details"] = error.details

        if isinstance(error, ApiError):
            result["status_code"] = error.status_code
        if isinstance(error, ResourceNotFoundError):
            result["resource_type"] = error.resource_type
            result["resource_id"] = error.resource_id
        if isinstance(error, ValidationError) and error.field:
            result["field"] = error.field
        if isinstance(error, ConfigurationError) and error.config_key:
            result["config_key"] = error.config_key

        return result
