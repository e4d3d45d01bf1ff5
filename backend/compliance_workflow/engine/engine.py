"""
Workflow Engine - Core State Machine

Generic state machine executor for regulator-mandated lifecycles
(authorization, incident, ...). The engine is built once from an immutable
definition and holds no per-instance state: every call receives the
instance's current state and its caller-owned context dict.

=============================================================================
MODULE STRUCTURE
=============================================================================

1. CONSTRUCTION
   - Definition validation (fail fast, InvalidDefinitionError)

2. QUERIES (never raise)
   - get_available_transitions / can_transition

3. SINGLE TRANSITION
   - execute_transition: guard, then the ordered hook pipeline
     before_transition -> on_exit -> on_transition -> on_enter -> after_transition

4. AUTO EVALUATION
   - evaluate_transitions: cascade through eligible auto transitions,
     capped by max_auto_transitions

5. INTROSPECTION
   - get_next_states / is_terminal_state / get_all_states / get_terminal_states

=============================================================================
CALLER OBLIGATIONS
=============================================================================

- Persist the returned state and any context mutations.
- Serialize calls for the same instance; hooks mutate the context in place
  and the engine takes no locks.
- Audit through the global hooks (see AuditTrailRecorder).

=============================================================================
"""
import logging
from datetime import datetime
from typing import Any, Callable, List, Mapping, Optional, Union

from ..domain.models import (
    WorkflowDefinition, WorkflowEngineOptions, StateDefinition, Transition,
    AvailableTransition, TransitionResult, EvaluationResult, WorkflowInstance,
    WorkflowContext, TransitionAction, TransitionCondition
)
from ..domain.enums import HookStage, TransitionFailure
from .definition_validator import DefinitionValidator
from .transition_resolver import TransitionResolver
from .hook_runner import call_hook, run_pipeline, error_message
from ..utils.idgen import generate_instance_id
from ..utils.time import utc_now
from ..utils.logger import get_logger


def _bracketed(
    hook: Optional[TransitionAction],
    from_state: str,
    to_state: str
) -> Optional[Callable[[WorkflowContext], Any]]:
    """Wrap a global hook so it sees a copy of the context plus from/to"""
    if hook is None:
        return None

    def invoke(context: WorkflowContext) -> Any:
        return hook({**context, "from": from_state, "to": to_state})

    return invoke


class WorkflowEngine:
    """
    The Workflow Engine - stateless executor over one workflow definition

    Safe to share across any number of workflow instances.
    """

    def __init__(
        self,
        definition: Union[WorkflowDefinition, Mapping[str, Any]],
        options: Optional[Union[WorkflowEngineOptions, Mapping[str, Any]]] = None,
        logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None
    ):
        if not isinstance(definition, WorkflowDefinition):
            definition = WorkflowDefinition.model_validate(definition)
        if options is None:
            options = WorkflowEngineOptions()
        elif not isinstance(options, WorkflowEngineOptions):
            options = WorkflowEngineOptions(**options)

        self.definition = definition
        self.options = options
        self._logger = logger or get_logger(__name__)

        DefinitionValidator().validate(definition)
        self.transition_resolver = TransitionResolver(definition)

    # =========================================================================
    # Definition Access
    # =========================================================================

    def get_definition(self) -> WorkflowDefinition:
        """Get the workflow definition"""
        return self.definition

    def get_state(self, state: str) -> Optional[StateDefinition]:
        """Get a state definition, None if the state is unknown"""
        return self.transition_resolver.get_state(state)

    def create_instance(
        self,
        context: Optional[WorkflowContext] = None,
        instance_id: Optional[str] = None
    ) -> WorkflowInstance:
        """Start a new caller-owned instance in the initial state"""
        return WorkflowInstance(
            instance_id=instance_id or generate_instance_id(),
            workflow_type=self.definition.id,
            current_state=self.definition.initial_state,
            context=context if context is not None else {}
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def get_available_transitions(
        self,
        current_state: str,
        context: WorkflowContext
    ) -> List[AvailableTransition]:
        """
        Get all transitions defined on a state

        condition_met reflects the auto condition when present, else True.
        Unknown states yield an empty list.
        """
        return self.transition_resolver.get_available_transitions(current_state, context)

    async def can_transition(
        self,
        current_state: str,
        event: str,
        context: WorkflowContext
    ) -> bool:
        """Check whether a transition exists and its guard passes"""
        transition = self.transition_resolver.resolve(current_state, event)
        if transition is None:
            return False

        outcome = await self.transition_resolver.check_guard(transition, context)
        if outcome.error is not None:
            self._logger.warning(
                f"Guard for {current_state} --[{event}]--> {transition.to} raised: {outcome.error}",
                extra={"workflow_id": self.definition.id, "from_state": current_state, "event": event}
            )
        return outcome.allowed

    # =========================================================================
    # Single Transition
    # =========================================================================

    async def execute_transition(
        self,
        current_state: str,
        event: str,
        context: WorkflowContext
    ) -> TransitionResult:
        """
        Execute a specific transition

        Algorithm:
        1. Resolve the state, then the event on it
        2. Evaluate the guard (refusal and error are distinct outcomes)
        3. Run before_transition, on_exit, on_transition, on_enter,
           after_transition in order, stopping at the first failure
        4. On a hook failure notify on_error once

        Never raises; failures come back with success=False and the
        original state in current_state.
        """
        timestamp = utc_now()
        state_def = self.transition_resolver.get_state(current_state)

        if state_def is None:
            return self._failure(
                current_state, event, timestamp,
                f'State "{current_state}" not found in workflow',
                TransitionFailure.STATE_NOT_FOUND
            )

        transition = state_def.transitions.get(event)
        if transition is None:
            return self._failure(
                current_state, event, timestamp,
                f'Transition "{event}" not found in state "{current_state}"',
                TransitionFailure.TRANSITION_NOT_FOUND
            )

        guard = await self.transition_resolver.check_guard(transition, context)
        if guard.error is not None:
            return self._failure(
                current_state, event, timestamp,
                f"Guard error: {error_message(guard.error)}",
                TransitionFailure.GUARD_ERROR
            )
        if not guard.allowed:
            return self._failure(
                current_state, event, timestamp,
                "Transition guard rejected the transition",
                TransitionFailure.GUARD_REJECTED
            )

        target_state = transition.to
        target_def = self.transition_resolver.get_state(target_state)
        if target_def is None:
            return self._failure(
                current_state, event, timestamp,
                f'State "{target_state}" not found in workflow',
                TransitionFailure.STATE_NOT_FOUND
            )

        hooks = self.definition.hooks

        failure = await run_pipeline([
            (HookStage.BEFORE_TRANSITION,
             _bracketed(hooks.before_transition, current_state, target_state), (context,)),
            (HookStage.ON_EXIT, state_def.on_exit, (context,)),
            (HookStage.ON_TRANSITION, transition.on_transition, (context,)),
            (HookStage.ON_ENTER, target_def.on_enter, (context,)),
            (HookStage.AFTER_TRANSITION,
             _bracketed(hooks.after_transition, current_state, target_state), (context,)),
        ])

        if failure is not None:
            await self._notify_error(failure.error, context)
            return self._failure(
                current_state, event, timestamp,
                error_message(failure.error),
                TransitionFailure.HOOK_ERROR
            )

        if self.options.debug:
            self._logger.info(
                f"[Workflow {self.definition.id}] Transition: "
                f"{current_state} --[{event}]--> {target_state}",
                extra={
                    "workflow_id": self.definition.id,
                    "from_state": current_state,
                    "to_state": target_state,
                    "event": event
                }
            )

        return TransitionResult(
            success=True,
            previous_state=current_state,
            current_state=target_state,
            transition_event=event,
            timestamp=timestamp
        )

    async def _notify_error(self, error: Exception, context: WorkflowContext) -> None:
        """Route a hook failure to on_error without letting it mask the original"""
        on_error = self.definition.hooks.on_error
        if on_error is None:
            return
        try:
            await call_hook(on_error, error, context)
        except Exception:
            self._logger.exception(
                f"on_error hook failed while handling: {error_message(error)}",
                extra={"workflow_id": self.definition.id}
            )

    def _failure(
        self,
        current_state: str,
        event: str,
        timestamp: datetime,
        error: str,
        error_code: TransitionFailure
    ) -> TransitionResult:
        return TransitionResult(
            success=False,
            previous_state=current_state,
            current_state=current_state,
            transition_event=event,
            error=error,
            error_code=error_code,
            timestamp=timestamp
        )

    # =========================================================================
    # Auto Evaluation
    # =========================================================================

    async def evaluate_transitions(
        self,
        current_state: str,
        context: WorkflowContext
    ) -> EvaluationResult:
        """
        Evaluate and execute auto transitions

        Each iteration fires the first auto transition (in definition order)
        whose condition holds and whose execution succeeds, then re-scans from
        the new state, since hooks may have changed the context. Stops when a
        state offers nothing eligible or after max_auto_transitions.
        """
        result = EvaluationResult(final_state=current_state)
        max_transitions = self.options.max_auto_transitions

        state = current_state
        iteration_count = 0

        while iteration_count < max_transitions:
            state_def = self.transition_resolver.get_state(state)
            if state_def is None:
                break

            auto_transition_found = False

            for event, transition in state_def.transitions.items():
                if not self.transition_resolver.is_auto_candidate(transition):
                    continue

                condition = self.transition_resolver.check_auto_condition(transition, context)
                if condition.error:
                    result.errors.append(condition.error)
                if not condition.met:
                    continue

                transition_result = await self.execute_transition(state, event, context)

                if transition_result.success:
                    result.transitioned = True
                    result.transitions.append(transition_result)
                    state = transition_result.current_state
                    auto_transition_found = True
                    break  # one auto transition per iteration
                elif transition_result.error:
                    result.errors.append(transition_result.error)

            if not auto_transition_found:
                break

            iteration_count += 1

        if iteration_count >= max_transitions:
            self._logger.warning(
                f"[Workflow {self.definition.id}] Auto evaluation from {current_state} "
                f"stopped at {state} after {max_transitions} transitions",
                extra={"workflow_id": self.definition.id, "iteration": iteration_count}
            )
            result.errors.append(
                f"Maximum auto-transitions ({max_transitions}) reached. Possible infinite loop."
            )

        result.final_state = state
        return result

    # =========================================================================
    # Introspection
    # =========================================================================

    def get_next_states(self, current_state: str) -> List[str]:
        """Distinct states reachable in one transition"""
        return self.transition_resolver.get_next_states(current_state)

    def is_terminal_state(self, state: str) -> bool:
        """
        Check if a state is terminal

        True when metadata marks it terminal, when it has no outgoing
        transitions, or when the state is unknown.
        """
        state_def = self.transition_resolver.get_state(state)
        if state_def is None:
            return True
        return state_def.metadata.is_terminal or not state_def.transitions

    def get_all_states(self) -> List[str]:
        """Get all states in the workflow"""
        return list(self.definition.states.keys())

    def get_terminal_states(self) -> List[str]:
        """Get terminal states"""
        return [state for state in self.get_all_states() if self.is_terminal_state(state)]


# =============================================================================
# Factories
# =============================================================================

def create_workflow_engine(
    definition: Union[WorkflowDefinition, Mapping[str, Any]],
    options: Optional[Union[WorkflowEngineOptions, Mapping[str, Any]]] = None,
    logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None
) -> WorkflowEngine:
    """Factory function to create a workflow engine"""
    return WorkflowEngine(definition, options, logger=logger)


def create_transition(to: str, **options: Any) -> Transition:
    """Create a manual transition"""
    return Transition(to=to, **options)


def create_auto_transition(
    to: str,
    condition: TransitionCondition,
    **options: Any
) -> Transition:
    """Create an auto transition fired when condition(context) holds"""
    options.pop("auto", None)
    options.pop("auto_condition", None)
    return Transition(to=to, auto=True, auto_condition=condition, **options)
