from typing import Dict, List, Optional, TypedDict, Union


class InputShapeDetails(TypedDict, total=False):
    """Type-safe details for malformed batch elements."""

    index: int
    field_name: str
    received_type: str


class MetricsDetails(TypedDict, total=False):
    """Type-safe details for metric read failures."""

    source: str
    reason: str


class ValidationDetails(TypedDict, total=False):
    """Type-safe details for validation errors."""

    field_name: str
    field_value: Union[str, int, float, bool]
    constraints: str


class AdmissionDetails(TypedDict, total=False):
    """Type-safe details for rejected work."""

    heap_used_mb: float
    active_connections: int
    heap_limit_mb: float
    connection_limit: int


ErrorDetails = Union[
    InputShapeDetails,
    MetricsDetails,
    ValidationDetails,
    AdmissionDetails,
    Dict[str, Union[str, int, float, bool, List[str]]],
]


class DesignGateError(Exception):
    """Base exception for all design-gate errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        details: Optional[ErrorDetails] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, object]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": dict(self.details),
        }


class InputShapeError(DesignGateError):
    """Raised when a batch element is missing required fields."""

    def __init__(self, message: str, details: Optional[InputShapeDetails] = None):
        super().__init__(message=message, error_code="DG001", details=details)


class MetricsUnavailableError(DesignGateError):
    """Raised when process metrics or the cache size cannot be read."""

    def __init__(self, message: str, details: Optional[MetricsDetails] = None):
        super().__init__(message=message, error_code="DG002", details=details)


class ValidationError(DesignGateError):
    """Raised when an argument is outside its accepted range."""

    def __init__(self, message: str, details: Optional[ValidationDetails] = None):
        super().__init__(message=message, error_code="DG003", details=details)


class AdmissionRejectedError(DesignGateError):
    """Raised when work is refused because the service is unhealthy."""

    def __init__(self, message: str, details: Optional[AdmissionDetails] = None):
        super().__init__(message=message, error_code="DG004", details=details)
