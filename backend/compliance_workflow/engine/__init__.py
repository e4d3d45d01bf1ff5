"""Workflow Engine - Generic state machine for compliance lifecycles"""
from .engine import (
    WorkflowEngine,
    create_workflow_engine,
    create_transition,
    create_auto_transition,
)
from .definition_validator import DefinitionValidator
from .transition_resolver import TransitionResolver
from .audit_hooks import AuditTrailRecorder, InMemoryAuditSink

__all__ = [
    "WorkflowEngine",
    "create_workflow_engine",
    "create_transition",
    "create_auto_transition",
    "DefinitionValidator",
    "TransitionResolver",
    "AuditTrailRecorder",
    "InMemoryAuditSink",
]
