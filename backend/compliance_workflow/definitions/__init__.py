"""Built-in workflow definitions"""
from typing import Dict, List

from ..domain.models import WorkflowDefinition
from ..domain.errors import WorkflowNotFoundError
from .authorization import (
    AUTHORIZATION_WORKFLOW,
    AUTHORIZATION_STATE_ORDER,
    get_authorization_status_info,
    get_authorization_progress,
    is_authorization_terminal,
)
from .incident import (
    INCIDENT_WORKFLOW,
    INCIDENT_CLASSIFICATION,
    calculate_nca_deadline,
    is_nca_deadline_overdue,
    new_incident_context,
)

WORKFLOW_DEFINITIONS: Dict[str, WorkflowDefinition] = {
    AUTHORIZATION_WORKFLOW.id: AUTHORIZATION_WORKFLOW,
    INCIDENT_WORKFLOW.id: INCIDENT_WORKFLOW,
}


def get_workflow_definition(workflow_id: str) -> WorkflowDefinition:
    """Look up a built-in definition by id"""
    definition = WORKFLOW_DEFINITIONS.get(workflow_id)
    if definition is None:
        raise WorkflowNotFoundError(
            f"Workflow {workflow_id} not found",
            details={"workflow_id": workflow_id, "available": list_workflow_ids()}
        )
    return definition


def list_workflow_ids() -> List[str]:
    """Ids of all built-in definitions"""
    return list(WORKFLOW_DEFINITIONS.keys())


__all__ = [
    "AUTHORIZATION_WORKFLOW",
    "AUTHORIZATION_STATE_ORDER",
    "get_authorization_status_info",
    "get_authorization_progress",
    "is_authorization_terminal",
    "INCIDENT_WORKFLOW",
    "INCIDENT_CLASSIFICATION",
    "calculate_nca_deadline",
    "is_nca_deadline_overdue",
    "new_incident_context",
    "WORKFLOW_DEFINITIONS",
    "get_workflow_definition",
    "list_workflow_ids",
]
