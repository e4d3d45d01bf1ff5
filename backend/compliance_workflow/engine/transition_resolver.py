"""Transition Resolver - Look up transitions and decide whether they may fire"""
import inspect
from typing import List, NamedTuple, Optional

from ..domain.models import (
    WorkflowDefinition, StateDefinition, Transition, AvailableTransition,
    WorkflowContext
)
from .hook_runner import call_hook, error_message
from ..utils.logger import get_logger

logger = get_logger(__name__)


class GuardOutcome(NamedTuple):
    """Guard decision; a raising guard is reported separately from a refusal"""
    allowed: bool
    error: Optional[Exception] = None


class ConditionOutcome(NamedTuple):
    """Auto condition decision with the reason it could not be evaluated"""
    met: bool
    error: Optional[str] = None


class TransitionResolver:
    """
    Resolve transitions for a definition

    Given state S and event E:
    1. Find the state definition for S (None if unknown)
    2. Find the transition for E on S (None if undefined)
    3. Evaluate its guard / auto condition on demand

    Lookup misses are normal outcomes and never raise.
    """

    def __init__(self, definition: WorkflowDefinition):
        self.definition = definition

    def get_state(self, state: str) -> Optional[StateDefinition]:
        """Find state definition by name"""
        return self.definition.states.get(state)

    def resolve(self, state: str, event: str) -> Optional[Transition]:
        """Find the transition for an event on a state"""
        state_def = self.get_state(state)
        if state_def is None:
            return None
        return state_def.transitions.get(event)

    async def check_guard(
        self,
        transition: Transition,
        context: WorkflowContext
    ) -> GuardOutcome:
        """
        Evaluate a transition guard

        Returns:
            allowed=True when there is no guard or it returned truthy;
            error set when the guard raised or its result has no truth value
        """
        if transition.guard is None:
            return GuardOutcome(allowed=True)

        try:
            allowed = bool(await call_hook(transition.guard, context))
        except Exception as e:
            return GuardOutcome(allowed=False, error=e)

        return GuardOutcome(allowed=allowed)

    def check_auto_condition(
        self,
        transition: Transition,
        context: WorkflowContext
    ) -> ConditionOutcome:
        """
        Evaluate an auto condition synchronously

        A missing condition counts as met here; callers deciding auto
        eligibility must also require transition.auto and a condition.
        Fails closed on errors and on awaitable results.
        """
        if transition.auto_condition is None:
            return ConditionOutcome(met=True)

        try:
            result = transition.auto_condition(context)
            if inspect.isawaitable(result):
                if inspect.iscoroutine(result):
                    result.close()
                logger.warning(f"Auto condition for transition to {transition.to} returned an awaitable")
                return ConditionOutcome(
                    met=False,
                    error=f'Auto condition for transition to "{transition.to}" must be synchronous'
                )
            met = bool(result)
        except Exception as e:
            logger.warning(f"Auto condition evaluation failed: {e}")
            return ConditionOutcome(met=False, error=f"Auto condition error: {error_message(e)}")

        return ConditionOutcome(met=met)

    def is_auto_candidate(self, transition: Transition) -> bool:
        """Only flagged transitions with a condition are evaluated automatically"""
        return transition.auto and transition.auto_condition is not None

    def get_available_transitions(
        self,
        state: str,
        context: WorkflowContext
    ) -> List[AvailableTransition]:
        """List every transition on a state with its condition status"""
        state_def = self.get_state(state)
        if state_def is None:
            return []

        return [
            AvailableTransition(
                event=event,
                to=transition.to,
                description=transition.description,
                auto=transition.auto,
                condition_met=self.check_auto_condition(transition, context).met
            )
            for event, transition in state_def.transitions.items()
        ]

    def get_next_states(self, state: str) -> List[str]:
        """Distinct targets reachable in one transition, in definition order"""
        state_def = self.get_state(state)
        if state_def is None:
            return []
        return list(dict.fromkeys(t.to for t in state_def.transitions.values()))
