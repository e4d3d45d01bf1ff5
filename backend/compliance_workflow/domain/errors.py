"""Domain Errors - Centralized Exception Hierarchy"""
from typing import Any, Dict, Optional, TYPE_CHECKING

from .enums import TransitionFailure

if TYPE_CHECKING:
    from .models import TransitionResult


class DomainError(Exception):
    """Base domain error - all errors extend this"""

    error_code: str = "DOMAIN_ERROR"
    http_status: int = 400

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to API response dict"""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


# Validation Errors
class ValidationError(DomainError):
    """Input validation failed"""
    error_code = "VALIDATION_ERROR"
    http_status = 400


class WorkflowValidationError(ValidationError):
    """Workflow definition validation failed"""
    error_code = "WORKFLOW_VALIDATION_ERROR"


class InvalidDefinitionError(WorkflowValidationError):
    """Definition is structurally invalid; no engine can be built from it"""
    error_code = "INVALID_WORKFLOW_DEFINITION"


# Not Found Errors
class NotFoundError(DomainError):
    """Resource not found"""
    error_code = "NOT_FOUND"
    http_status = 404


class WorkflowNotFoundError(NotFoundError):
    """Workflow definition not found"""
    error_code = "WORKFLOW_NOT_FOUND"


class StateNotFoundError(NotFoundError):
    """State is not part of the workflow definition"""
    error_code = "STATE_NOT_FOUND"


class TransitionNotFoundError(NotFoundError):
    """Event is not defined on the current state"""
    error_code = "TRANSITION_NOT_FOUND"


# Conflict Errors
class ConflictError(DomainError):
    """Action not valid for current state"""
    error_code = "CONFLICT"
    http_status = 409


class GuardRejectedError(ConflictError):
    """Transition guard refused the transition"""
    error_code = "GUARD_REJECTED"


# Engine Errors
class EngineError(DomainError):
    """Workflow engine error"""
    error_code = "ENGINE_ERROR"
    http_status = 500


class GuardError(EngineError):
    """Transition guard raised instead of returning a decision"""
    error_code = "GUARD_ERROR"


class HookError(EngineError):
    """A lifecycle hook or transition action failed"""
    error_code = "HOOK_ERROR"


_FAILURE_ERRORS = {
    TransitionFailure.STATE_NOT_FOUND: StateNotFoundError,
    TransitionFailure.TRANSITION_NOT_FOUND: TransitionNotFoundError,
    TransitionFailure.GUARD_REJECTED: GuardRejectedError,
    TransitionFailure.GUARD_ERROR: GuardError,
    TransitionFailure.HOOK_ERROR: HookError,
}


def error_for_result(result: "TransitionResult") -> Optional[DomainError]:
    """
    Convert a failed transition result into the matching domain error

    Boundary layers (e.g. an HTTP handler) can raise the returned error or
    map its http_status directly.

    Returns:
        None for successful results
    """
    if result.success:
        return None

    error_class = _FAILURE_ERRORS.get(result.error_code, EngineError)
    return error_class(
        result.error or "Transition failed",
        details={
            "state": result.previous_state,
            "event": result.transition_event,
        }
    )
