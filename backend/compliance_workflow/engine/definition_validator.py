"""Definition Validator - Reject structurally invalid workflow definitions"""
import inspect

from ..domain.models import WorkflowDefinition
from ..domain.errors import InvalidDefinitionError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class DefinitionValidator:
    """
    Validate a workflow definition before any transition is attempted

    Checks:
    1. initial_state exists in states
    2. every transition target exists in states
    3. auto conditions are synchronous (coroutine functions are refused)

    An auto transition without a condition is allowed but never fires;
    it is only reported as a warning.
    """

    def validate(self, definition: WorkflowDefinition) -> None:
        """
        Validate the definition

        Raises:
            InvalidDefinitionError: On the first structural problem found
        """
        states = definition.states

        if definition.initial_state not in states:
            raise InvalidDefinitionError(
                f'Invalid workflow definition: initial state "{definition.initial_state}" '
                f"not found in states",
                details={
                    "workflow_id": definition.id,
                    "initial_state": definition.initial_state
                }
            )

        for state_name, state in states.items():
            for event, transition in state.transitions.items():
                if transition.to not in states:
                    raise InvalidDefinitionError(
                        f'Invalid workflow definition: transition "{event}" from "{state_name}" '
                        f'targets unknown state "{transition.to}"',
                        details={
                            "workflow_id": definition.id,
                            "state": state_name,
                            "event": event,
                            "target": transition.to
                        }
                    )

                if transition.auto_condition is not None and inspect.iscoroutinefunction(
                    transition.auto_condition
                ):
                    raise InvalidDefinitionError(
                        f'Invalid workflow definition: auto condition of "{event}" from '
                        f'"{state_name}" must be synchronous',
                        details={
                            "workflow_id": definition.id,
                            "state": state_name,
                            "event": event
                        }
                    )

                if transition.auto and transition.auto_condition is None:
                    logger.warning(
                        f"Auto transition {state_name} --[{event}]--> {transition.to} "
                        f"has no auto condition and will never fire",
                        extra={"workflow_id": definition.id, "event": event}
                    )
