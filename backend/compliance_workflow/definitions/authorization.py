"""
Authorization Workflow Definition

State machine for EU Space Act authorization workflows.

States:
- not_started: Initial state, no documents uploaded
- in_progress: At least one document uploaded/started
- ready_for_submission: All mandatory documents ready
- submitted: Application submitted to NCA
- under_review: NCA reviewing the application
- approved: Authorization granted
- rejected: Authorization denied
- withdrawn: Application withdrawn by operator

Auto-transitions:
- not_started -> in_progress: When first document is uploaded
- in_progress -> ready_for_submission: When all mandatory docs are complete
- ready_for_submission -> in_progress: If a mandatory doc becomes incomplete
"""
from typing import Any, Dict, List

from ..domain.models import (
    WorkflowDefinition, StateDefinition, StateMetadata, WorkflowHooks, WorkflowContext
)
from ..domain.enums import AuthorizationState
from ..engine.engine import create_transition, create_auto_transition
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_COLOR = "#6B7280"
DEFAULT_ICON = "Circle"


def _documents_started(ctx: WorkflowContext) -> bool:
    return ctx.get("total_documents", 0) > 0 and ctx.get("ready_documents", 0) > 0


def _submission_ready(ctx: WorkflowContext) -> bool:
    return bool(ctx.get("all_mandatory_complete")) and not ctx.get("has_blockers")


async def _submission_guard(ctx: WorkflowContext) -> bool:
    return _submission_ready(ctx)


async def _before_transition(ctx: WorkflowContext) -> None:
    logger.debug(
        f"[Authorization {ctx.get('workflow_id')}] Transition: {ctx['from']} -> {ctx['to']}",
        extra={"workflow_id": ctx.get("workflow_id"), "from_state": ctx["from"], "to_state": ctx["to"]}
    )


async def _on_error(error: BaseException, ctx: WorkflowContext) -> None:
    logger.error(
        f"[Authorization {ctx.get('workflow_id')}] Error: {error}",
        extra={"workflow_id": ctx.get("workflow_id")}
    )


def _withdraw():
    return create_transition(
        AuthorizationState.WITHDRAWN.value,
        description="Withdraw the application"
    )


def _request_info():
    return create_transition(
        AuthorizationState.IN_PROGRESS.value,
        description="NCA requests additional information"
    )


AUTHORIZATION_WORKFLOW = WorkflowDefinition(
    id="authorization",
    name="EU Space Act Authorization",
    description="Multi-authority authorization workflow for EU space operations",
    version="1.0.0",
    initial_state=AuthorizationState.NOT_STARTED.value,
    states={
        AuthorizationState.NOT_STARTED.value: StateDefinition(
            name="Not Started",
            description="Authorization workflow created but no documents uploaded",
            metadata=StateMetadata(color="#6B7280", icon="Circle", phase="pre_authorization"),
            transitions={
                "start": create_auto_transition(
                    AuthorizationState.IN_PROGRESS.value,
                    _documents_started,
                    description="First document uploaded or started"
                ),
                "manual_start": create_transition(
                    AuthorizationState.IN_PROGRESS.value,
                    description="Manually start the workflow"
                ),
            },
        ),
        AuthorizationState.IN_PROGRESS.value: StateDefinition(
            name="In Progress",
            description="Documents being prepared, not all mandatory documents complete",
            metadata=StateMetadata(color="#3B82F6", icon="Clock", phase="pre_authorization"),
            transitions={
                "complete": create_auto_transition(
                    AuthorizationState.READY_FOR_SUBMISSION.value,
                    _submission_ready,
                    description="All mandatory documents ready and no blockers"
                ),
                "withdraw": _withdraw(),
            },
        ),
        AuthorizationState.READY_FOR_SUBMISSION.value: StateDefinition(
            name="Ready for Submission",
            description="All mandatory documents ready, can submit to NCA",
            metadata=StateMetadata(color="#22C55E", icon="CheckCircle", phase="pre_authorization"),
            transitions={
                "incomplete": create_auto_transition(
                    AuthorizationState.IN_PROGRESS.value,
                    lambda ctx: not _submission_ready(ctx),
                    description="Mandatory document became incomplete or new blocker detected"
                ),
                "submit": create_transition(
                    AuthorizationState.SUBMITTED.value,
                    description="Submit application to NCA",
                    guard=_submission_guard
                ),
                "withdraw": _withdraw(),
            },
        ),
        AuthorizationState.SUBMITTED.value: StateDefinition(
            name="Submitted",
            description="Application submitted to National Competent Authority",
            metadata=StateMetadata(color="#8B5CF6", icon="Send", phase="under_review"),
            transitions={
                "review": create_transition(
                    AuthorizationState.UNDER_REVIEW.value,
                    description="NCA begins formal review"
                ),
                "request_info": _request_info(),
                "withdraw": _withdraw(),
            },
        ),
        AuthorizationState.UNDER_REVIEW.value: StateDefinition(
            name="Under Review",
            description="NCA actively reviewing the application",
            metadata=StateMetadata(color="#F59E0B", icon="Eye", phase="under_review"),
            transitions={
                "approve": create_transition(
                    AuthorizationState.APPROVED.value,
                    description="NCA approves the authorization"
                ),
                "reject": create_transition(
                    AuthorizationState.REJECTED.value,
                    description="NCA rejects the authorization"
                ),
                "request_info": _request_info(),
            },
        ),
        AuthorizationState.APPROVED.value: StateDefinition(
            name="Approved",
            description="Authorization granted by NCA",
            metadata=StateMetadata(
                color="#22C55E", icon="CheckCircle2", phase="authorized", is_terminal=True
            ),
            # TODO: renewal and revocation transitions once NCA renewal rules are modelled
            transitions={},
        ),
        AuthorizationState.REJECTED.value: StateDefinition(
            name="Rejected",
            description="Authorization denied by NCA",
            metadata=StateMetadata(color="#EF4444", icon="XCircle", phase="closed", is_terminal=True),
            transitions={
                "appeal": create_transition(
                    AuthorizationState.UNDER_REVIEW.value,
                    description="Appeal the rejection decision"
                ),
                "resubmit": create_transition(
                    AuthorizationState.NOT_STARTED.value,
                    description="Start a new application"
                ),
            },
        ),
        AuthorizationState.WITHDRAWN.value: StateDefinition(
            name="Withdrawn",
            description="Application withdrawn by operator",
            metadata=StateMetadata(color="#6B7280", icon="MinusCircle", phase="closed", is_terminal=True),
            transitions={
                "restart": create_transition(
                    AuthorizationState.NOT_STARTED.value,
                    description="Start a new application"
                ),
            },
        ),
    },
    hooks=WorkflowHooks(
        before_transition=_before_transition,
        on_error=_on_error
    ),
)


# Authorization state order for progress indicators
AUTHORIZATION_STATE_ORDER: List[str] = [
    AuthorizationState.NOT_STARTED.value,
    AuthorizationState.IN_PROGRESS.value,
    AuthorizationState.READY_FOR_SUBMISSION.value,
    AuthorizationState.SUBMITTED.value,
    AuthorizationState.UNDER_REVIEW.value,
    AuthorizationState.APPROVED.value,
]


def get_authorization_status_info(status: str) -> Dict[str, Any]:
    """
    Get status display information for a state

    Unknown statuses fall back to the raw status as label and a neutral style.
    """
    state = AUTHORIZATION_WORKFLOW.states.get(status)
    if state is None:
        return {
            "label": status,
            "color": DEFAULT_COLOR,
            "icon": DEFAULT_ICON,
            "phase": "unknown",
        }

    return {
        "label": state.name,
        "color": state.metadata.color or DEFAULT_COLOR,
        "icon": state.metadata.icon or DEFAULT_ICON,
        "phase": state.metadata.phase or "unknown",
    }


def get_authorization_progress(current_state: str) -> int:
    """Progress percentage along the happy path; 0 for states off it"""
    if current_state not in AUTHORIZATION_STATE_ORDER:
        return 0
    index = AUTHORIZATION_STATE_ORDER.index(current_state)
    return round(index / (len(AUTHORIZATION_STATE_ORDER) - 1) * 100)


def is_authorization_terminal(status: str) -> bool:
    """Check if authorization is in a state explicitly marked terminal"""
    state = AUTHORIZATION_WORKFLOW.states.get(status)
    return state is not None and state.metadata.is_terminal
