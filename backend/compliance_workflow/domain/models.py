"""Domain Models - Pydantic schemas for workflow definitions and results"""
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

from .enums import (
    TransitionFailure, AuditEventType, IncidentCategory, IncidentSeverity
)
from .errors import InvalidDefinitionError
from ..config.settings import get_settings
from ..utils.time import utc_now


# Every hook and guard receives the caller-owned context dict. Guards and
# hooks may return an awaitable; auto conditions must return a plain bool.
WorkflowContext = Dict[str, Any]
TransitionCondition = Callable[[WorkflowContext], bool]
TransitionGuard = Callable[[WorkflowContext], Any]
TransitionAction = Callable[[WorkflowContext], Any]
ErrorHook = Callable[[BaseException, WorkflowContext], Any]


# ============================================================================
# Workflow Definition
# ============================================================================

class Transition(BaseModel):
    """One edge of the state graph"""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    to: str = Field(..., description="Target state after transition")
    description: Optional[str] = Field(None, description="Human-readable label")
    guard: Optional[TransitionGuard] = Field(None, description="Must pass for the transition to fire")
    auto: bool = Field(default=False, description="Eligible for unattended evaluation")
    auto_condition: Optional[TransitionCondition] = Field(
        None, description="Synchronous predicate for auto transitions"
    )
    on_transition: Optional[TransitionAction] = Field(None, description="Action run during the transition")
    required_permissions: List[str] = Field(
        default_factory=list, description="Permissions the caller should enforce for manual use"
    )


class StateMetadata(BaseModel):
    """Metadata for UI/reporting"""
    model_config = ConfigDict(frozen=True, extra="allow")

    label: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    phase: Optional[str] = None
    is_terminal: bool = False


class StateDefinition(BaseModel):
    """State definition within a workflow"""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: Optional[str] = Field(None, description="Human-readable name")
    description: Optional[str] = None
    on_enter: Optional[TransitionAction] = None
    on_exit: Optional[TransitionAction] = None
    transitions: Dict[str, Transition] = Field(
        default_factory=dict, description="Event name -> transition, in evaluation order"
    )
    metadata: StateMetadata = Field(default_factory=StateMetadata)

    @field_validator("transitions", mode="before")
    @classmethod
    def _reject_duplicate_events(cls, value: Any) -> Any:
        """Accept (event, transition) pairs, refusing a repeated event"""
        if isinstance(value, dict):
            return value

        transitions: Dict[str, Any] = {}
        for event, transition in value:
            if event in transitions:
                raise InvalidDefinitionError(
                    f'Invalid workflow definition: duplicate transition "{event}"',
                    details={"event": event}
                )
            transitions[event] = transition
        return transitions


class WorkflowHooks(BaseModel):
    """Global hooks invoked around every transition"""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    before_transition: Optional[TransitionAction] = None
    after_transition: Optional[TransitionAction] = None
    on_error: Optional[ErrorHook] = None


class WorkflowDefinition(BaseModel):
    """Complete, immutable workflow definition"""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str = Field(..., description="Unique identifier for the workflow type")
    name: Optional[str] = None
    description: Optional[str] = None
    version: str = "1.0.0"
    initial_state: str = Field(..., description="State a new instance starts in")
    states: Dict[str, StateDefinition] = Field(..., description="All states in the workflow")
    hooks: WorkflowHooks = Field(default_factory=WorkflowHooks)


# ============================================================================
# Engine Options & Results
# ============================================================================

class WorkflowEngineOptions(BaseModel):
    """Options for creating a workflow engine; defaults come from settings"""
    model_config = ConfigDict(frozen=True)

    auto_evaluate: bool = Field(default_factory=lambda: get_settings().workflow_auto_evaluate)
    max_auto_transitions: int = Field(
        default_factory=lambda: get_settings().workflow_max_auto_transitions, ge=1
    )
    debug: bool = Field(
        default_factory=lambda: get_settings().workflow_debug,
        description="Log every successful transition at INFO level"
    )


class AvailableTransition(BaseModel):
    """A transition defined on a state, with its current eligibility"""
    event: str
    to: str
    description: Optional[str] = None
    auto: bool = False
    condition_met: bool = True


class TransitionResult(BaseModel):
    """Result of executing a transition"""
    success: bool
    previous_state: str
    current_state: str
    transition_event: str
    error: Optional[str] = None
    error_code: Optional[TransitionFailure] = None
    timestamp: datetime = Field(default_factory=utc_now)


class EvaluationResult(BaseModel):
    """Result of an auto-transition evaluation pass"""
    transitioned: bool = False
    transitions: List[TransitionResult] = Field(default_factory=list)
    final_state: str
    errors: List[str] = Field(default_factory=list)


# ============================================================================
# Workflow Instance (caller-owned record)
# ============================================================================

class WorkflowInstance(BaseModel):
    """One concrete run of a definition, persisted by the caller"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    instance_id: str
    workflow_type: str
    current_state: str
    context: WorkflowContext = Field(default_factory=dict)
    history: List[TransitionResult] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def apply_transition(self, result: TransitionResult) -> bool:
        """Record a successful transition; failed results leave the instance untouched"""
        if not result.success:
            return False
        self.history.append(result)
        self.current_state = result.current_state
        self.updated_at = result.timestamp
        return True

    def apply_evaluation(self, result: EvaluationResult) -> int:
        """Record every transition an evaluation pass applied"""
        applied = 0
        for transition in result.transitions:
            if self.apply_transition(transition):
                applied += 1
        return applied


# ============================================================================
# Audit
# ============================================================================

class TransitionAuditEvent(BaseModel):
    """Audit record produced from the global transition hooks"""
    model_config = ConfigDict(extra="forbid")

    audit_event_id: str
    workflow_id: str
    event_type: AuditEventType
    from_state: Optional[str] = None
    to_state: Optional[str] = None
    entity_id: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime
    correlation_id: Optional[str] = None


# ============================================================================
# Built-in Workflow Contexts
# ============================================================================

class AuthorizationContext(BaseModel):
    """Context for the authorization workflow; use model_dump() as the engine context"""
    model_config = ConfigDict(extra="forbid")

    workflow_id: str
    user_id: str
    operator_type: str = ""
    primary_nca: str = ""

    # Document status
    total_documents: int = 0
    ready_documents: int = 0
    mandatory_documents: int = 0
    mandatory_ready: int = 0

    # Completeness
    completeness_percentage: float = 0
    all_mandatory_complete: bool = False
    has_blockers: bool = False

    # Timeline
    target_submission: Optional[datetime] = None
    started_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None

    pathway: str = ""
    nca_requirements: List[str] = Field(default_factory=list)


class IncidentContext(BaseModel):
    """Context for the incident workflow; use model_dump() as the engine context"""
    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    incident_id: str
    user_id: str
    category: IncidentCategory
    severity: IncidentSeverity

    # NCA reporting
    requires_nca_notification: bool = False
    nca_deadline_hours: int = 72
    nca_notified_at: Optional[datetime] = None
    nca_report_id: Optional[str] = None

    # Timeline
    reported_at: datetime = Field(default_factory=utc_now)
    triaged_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None

    has_active_deadline: bool = False
    deadline_at: Optional[datetime] = None
