"""Domain Enumerations - Engine outcomes and built-in workflow vocabularies"""
from enum import Enum


# ============================================================================
# Engine
# ============================================================================

class TransitionFailure(str, Enum):
    """Why a transition did not happen"""
    STATE_NOT_FOUND = "STATE_NOT_FOUND"
    TRANSITION_NOT_FOUND = "TRANSITION_NOT_FOUND"
    GUARD_REJECTED = "GUARD_REJECTED"
    GUARD_ERROR = "GUARD_ERROR"
    HOOK_ERROR = "HOOK_ERROR"


class HookStage(str, Enum):
    """Pipeline stages of a single transition, in execution order"""
    BEFORE_TRANSITION = "before_transition"
    ON_EXIT = "on_exit"
    ON_TRANSITION = "on_transition"
    ON_ENTER = "on_enter"
    AFTER_TRANSITION = "after_transition"


class AuditEventType(str, Enum):
    """Types of transition audit events"""
    TRANSITION_STARTED = "TRANSITION_STARTED"
    TRANSITION_COMPLETED = "TRANSITION_COMPLETED"
    TRANSITION_FAILED = "TRANSITION_FAILED"


# ============================================================================
# Authorization Workflow
# ============================================================================

class AuthorizationState(str, Enum):
    """EU Space Act authorization states"""
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    READY_FOR_SUBMISSION = "ready_for_submission"
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


# ============================================================================
# Incident Workflow
# ============================================================================

class IncidentState(str, Enum):
    """Incident lifecycle states"""
    REPORTED = "reported"
    TRIAGED = "triaged"
    INVESTIGATING = "investigating"
    MITIGATING = "mitigating"
    RESOLVED = "resolved"
    NCA_NOTIFIED = "nca_notified"
    CLOSED = "closed"


class IncidentCategory(str, Enum):
    """Incident categories, each with its own NCA deadline"""
    LOSS_OF_CONTACT = "loss_of_contact"
    DEBRIS_GENERATION = "debris_generation"
    CYBER_INCIDENT = "cyber_incident"
    SPACECRAFT_ANOMALY = "spacecraft_anomaly"
    CONJUNCTION_EVENT = "conjunction_event"
    REGULATORY_BREACH = "regulatory_breach"
    OTHER = "other"


class IncidentSeverity(str, Enum):
    """Incident severity levels"""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
