"""Compliance Workflow - state machine engine for regulatory lifecycles"""
from .domain.models import (
    Transition,
    StateDefinition,
    StateMetadata,
    WorkflowHooks,
    WorkflowDefinition,
    WorkflowEngineOptions,
    AvailableTransition,
    TransitionResult,
    EvaluationResult,
    WorkflowInstance,
)
from .domain.enums import TransitionFailure
from .domain.errors import InvalidDefinitionError, error_for_result
from .engine import (
    WorkflowEngine,
    create_workflow_engine,
    create_transition,
    create_auto_transition,
    AuditTrailRecorder,
)

__version__ = "1.0.0"

__all__ = [
    "Transition",
    "StateDefinition",
    "StateMetadata",
    "WorkflowHooks",
    "WorkflowDefinition",
    "WorkflowEngineOptions",
    "AvailableTransition",
    "TransitionResult",
    "EvaluationResult",
    "WorkflowInstance",
    "TransitionFailure",
    "InvalidDefinitionError",
    "error_for_result",
    "WorkflowEngine",
    "create_workflow_engine",
    "create_transition",
    "create_auto_transition",
    "AuditTrailRecorder",
]
