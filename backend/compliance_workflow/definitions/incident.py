"""
Incident Workflow Definition

Lifecycle of operational incidents that may have to be reported to the
National Competent Authority (NCA) within a category-specific deadline.

reported -> triaged -> investigating -> mitigating -> resolved
resolved -> nca_notified (auto, once an NCA report exists) -> closed
resolved -> closed (only when no NCA notification is pending)
"""
from datetime import datetime
from typing import Dict, Optional, Union
from pydantic import BaseModel, ConfigDict

from ..domain.models import (
    WorkflowDefinition, StateDefinition, StateMetadata, WorkflowHooks,
    IncidentContext, WorkflowContext
)
from ..domain.enums import IncidentCategory, IncidentSeverity, IncidentState
from ..engine.engine import create_transition, create_auto_transition
from ..utils.logger import get_logger
from ..utils.time import add_hours, ensure_datetime, is_overdue, utc_now

logger = get_logger(__name__)

DEFAULT_NCA_DEADLINE_HOURS = 72


class IncidentClassification(BaseModel):
    """Classification rules for an incident category"""
    model_config = ConfigDict(frozen=True)

    default_severity: IncidentSeverity
    nca_deadline_hours: int
    requires_nca_notification: bool
    requires_euspa_notification: bool
    description: str
    article_ref: str


INCIDENT_CLASSIFICATION: Dict[IncidentCategory, IncidentClassification] = {
    IncidentCategory.LOSS_OF_CONTACT: IncidentClassification(
        default_severity=IncidentSeverity.CRITICAL,
        nca_deadline_hours=4,
        requires_nca_notification=True,
        requires_euspa_notification=True,
        description="Loss of communication or control with spacecraft",
        article_ref="Art. 33-34",
    ),
    IncidentCategory.DEBRIS_GENERATION: IncidentClassification(
        default_severity=IncidentSeverity.CRITICAL,
        nca_deadline_hours=4,
        requires_nca_notification=True,
        requires_euspa_notification=True,
        description="Debris-generating event or fragmentation",
        article_ref="Art. 58-72",
    ),
    IncidentCategory.CYBER_INCIDENT: IncidentClassification(
        default_severity=IncidentSeverity.CRITICAL,
        nca_deadline_hours=4,
        requires_nca_notification=True,
        requires_euspa_notification=True,
        description="Cybersecurity breach or attack on space systems",
        article_ref="Art. 74-95",
    ),
    IncidentCategory.SPACECRAFT_ANOMALY: IncidentClassification(
        default_severity=IncidentSeverity.HIGH,
        nca_deadline_hours=24,
        requires_nca_notification=True,
        requires_euspa_notification=False,
        description="Significant spacecraft malfunction or anomaly",
        article_ref="Art. 33-34",
    ),
    IncidentCategory.CONJUNCTION_EVENT: IncidentClassification(
        default_severity=IncidentSeverity.HIGH,
        nca_deadline_hours=72,
        requires_nca_notification=True,
        requires_euspa_notification=True,
        description="Close approach or collision avoidance maneuver",
        article_ref="Art. 55-57",
    ),
    IncidentCategory.REGULATORY_BREACH: IncidentClassification(
        default_severity=IncidentSeverity.MEDIUM,
        nca_deadline_hours=72,
        requires_nca_notification=True,
        requires_euspa_notification=False,
        description="Non-compliance with regulatory requirements",
        article_ref="Art. 33-34",
    ),
    IncidentCategory.OTHER: IncidentClassification(
        default_severity=IncidentSeverity.LOW,
        nca_deadline_hours=168,  # 7 days
        requires_nca_notification=False,
        requires_euspa_notification=False,
        description="Other operational incident",
        article_ref="Art. 33-34",
    ),
}


# ============================================================================
# Deadlines
# ============================================================================

def calculate_nca_deadline(
    category: Union[IncidentCategory, str],
    detected_at: Union[datetime, str]
) -> datetime:
    """
    Calculate NCA notification deadline based on category and detection time

    Args:
        category: Incident category (unknown categories get 72 hours)
        detected_at: Detection time, datetime or ISO 8601 string

    Returns:
        Deadline as an aware UTC datetime
    """
    classification = INCIDENT_CLASSIFICATION.get(category)
    hours = classification.nca_deadline_hours if classification else DEFAULT_NCA_DEADLINE_HOURS
    return add_hours(ensure_datetime(detected_at), hours)


def is_nca_deadline_overdue(
    category: Union[IncidentCategory, str],
    detected_at: Union[datetime, str],
    now: Optional[datetime] = None
) -> bool:
    """Check whether the NCA notification deadline has passed"""
    return is_overdue(calculate_nca_deadline(category, detected_at), now)


def new_incident_context(
    incident_id: str,
    user_id: str,
    category: IncidentCategory,
    severity: Optional[IncidentSeverity] = None,
    reported_at: Optional[datetime] = None
) -> IncidentContext:
    """Build an incident context with classification defaults applied"""
    classification = INCIDENT_CLASSIFICATION[IncidentCategory(category)]
    return IncidentContext(
        incident_id=incident_id,
        user_id=user_id,
        category=category,
        severity=severity or classification.default_severity,
        requires_nca_notification=classification.requires_nca_notification,
        nca_deadline_hours=classification.nca_deadline_hours,
        reported_at=reported_at or utc_now(),
    )


# ============================================================================
# Hooks
# ============================================================================

def _nca_pending(ctx: WorkflowContext) -> bool:
    return bool(ctx.get("requires_nca_notification")) and not ctx.get("nca_notified_at")


def _start_triage(ctx: WorkflowContext) -> None:
    if not ctx.get("triaged_at"):
        ctx["triaged_at"] = utc_now()
    if ctx.get("requires_nca_notification") and not ctx.get("deadline_at"):
        ctx["deadline_at"] = calculate_nca_deadline(ctx["category"], ctx["reported_at"])
        ctx["has_active_deadline"] = True


def _enter_resolved(ctx: WorkflowContext) -> None:
    if not ctx.get("resolved_at"):
        ctx["resolved_at"] = utc_now()


def _enter_nca_notified(ctx: WorkflowContext) -> None:
    if not ctx.get("nca_notified_at"):
        ctx["nca_notified_at"] = utc_now()
    ctx["has_active_deadline"] = False


def _on_error(error: BaseException, ctx: WorkflowContext) -> None:
    logger.error(
        f"[Incident {ctx.get('incident_id')}] Error: {error}",
        extra={"workflow_id": "incident"}
    )


INCIDENT_WORKFLOW = WorkflowDefinition(
    id="incident",
    name="Incident Response",
    description="Incident lifecycle with NCA notification deadlines",
    version="1.0.0",
    initial_state=IncidentState.REPORTED.value,
    states={
        IncidentState.REPORTED.value: StateDefinition(
            name="Reported",
            description="Incident detected and logged",
            metadata=StateMetadata(phase="intake"),
            transitions={
                "triage": create_transition(
                    IncidentState.TRIAGED.value,
                    description="Classify the incident and start the NCA clock",
                    on_transition=_start_triage
                ),
                "dismiss": create_transition(
                    IncidentState.CLOSED.value,
                    description="Close a non-reportable false alarm",
                    guard=lambda ctx: not ctx.get("requires_nca_notification")
                ),
            },
        ),
        IncidentState.TRIAGED.value: StateDefinition(
            name="Triaged",
            description="Severity and reporting obligations determined",
            metadata=StateMetadata(phase="intake"),
            transitions={
                "investigate": create_transition(
                    IncidentState.INVESTIGATING.value,
                    description="Start root-cause investigation"
                ),
                "resolve": create_transition(
                    IncidentState.RESOLVED.value,
                    description="Resolve without further investigation"
                ),
            },
        ),
        IncidentState.INVESTIGATING.value: StateDefinition(
            name="Investigating",
            description="Root cause under investigation",
            metadata=StateMetadata(phase="response"),
            transitions={
                "mitigate": create_transition(
                    IncidentState.MITIGATING.value,
                    description="Apply mitigation measures"
                ),
                "resolve": create_transition(
                    IncidentState.RESOLVED.value,
                    description="Root cause addressed"
                ),
            },
        ),
        IncidentState.MITIGATING.value: StateDefinition(
            name="Mitigating",
            description="Mitigation measures in progress",
            metadata=StateMetadata(phase="response"),
            transitions={
                "resolve": create_transition(
                    IncidentState.RESOLVED.value,
                    description="Mitigation complete"
                ),
                "reinvestigate": create_transition(
                    IncidentState.INVESTIGATING.value,
                    description="Mitigation ineffective, investigate further"
                ),
            },
        ),
        IncidentState.RESOLVED.value: StateDefinition(
            name="Resolved",
            description="Incident resolved operationally",
            on_enter=_enter_resolved,
            metadata=StateMetadata(phase="reporting"),
            transitions={
                "notify_nca": create_auto_transition(
                    IncidentState.NCA_NOTIFIED.value,
                    lambda ctx: _nca_pending(ctx) and bool(ctx.get("nca_report_id")),
                    description="NCA report filed"
                ),
                "close": create_transition(
                    IncidentState.CLOSED.value,
                    description="Close the incident",
                    guard=lambda ctx: not _nca_pending(ctx)
                ),
            },
        ),
        IncidentState.NCA_NOTIFIED.value: StateDefinition(
            name="NCA Notified",
            description="National Competent Authority has been notified",
            on_enter=_enter_nca_notified,
            metadata=StateMetadata(phase="reporting"),
            transitions={
                "close": create_transition(
                    IncidentState.CLOSED.value,
                    description="Close the incident"
                ),
            },
        ),
        IncidentState.CLOSED.value: StateDefinition(
            name="Closed",
            description="Incident closed",
            metadata=StateMetadata(phase="closed", is_terminal=True),
            transitions={},
        ),
    },
    hooks=WorkflowHooks(on_error=_on_error),
)
