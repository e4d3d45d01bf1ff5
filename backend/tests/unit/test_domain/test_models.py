"""Tests for domain models and the caller-owned workflow instance"""
import pytest
from pydantic import ValidationError as PydanticValidationError

from compliance_workflow.domain.models import (
    EvaluationResult, Transition, TransitionResult, WorkflowEngineOptions, WorkflowInstance
)
from compliance_workflow.engine import create_auto_transition, create_transition


class TestTransitionFactories:

    def test_create_transition(self):
        guard = lambda ctx: True  # noqa: E731
        transition = create_transition("submitted", description="Submit", guard=guard)

        assert transition.to == "submitted"
        assert transition.description == "Submit"
        assert transition.guard is guard
        assert transition.auto is False

    def test_create_auto_transition(self):
        condition = lambda ctx: ctx["ready"]  # noqa: E731
        transition = create_auto_transition("ready", condition, description="Auto", auto=False)

        assert transition.auto is True
        assert transition.auto_condition is condition
        assert transition.description == "Auto"

    def test_transition_is_frozen(self):
        transition = Transition(to="a")
        with pytest.raises(PydanticValidationError):
            transition.to = "b"

    def test_max_auto_transitions_must_be_positive(self):
        with pytest.raises(PydanticValidationError):
            WorkflowEngineOptions(max_auto_transitions=0)


class TestWorkflowInstance:

    @pytest.mark.asyncio
    async def test_created_in_initial_state(self, engine):
        instance = engine.create_instance({"documents_complete": True}, instance_id="inst-1")

        assert instance.instance_id == "inst-1"
        assert instance.workflow_type == "test-workflow"
        assert instance.current_state == "draft"
        assert instance.history == []

    def test_generated_instance_id(self, engine):
        assert engine.create_instance().instance_id.startswith("WFI-")

    @pytest.mark.asyncio
    async def test_apply_successful_transition(self, engine):
        instance = engine.create_instance({"documents_complete": False, "is_approved": False})

        result = await engine.execute_transition(instance.current_state, "submit", instance.context)

        assert instance.apply_transition(result) is True
        assert instance.current_state == "pending_review"
        assert instance.history == [result]
        assert instance.updated_at == result.timestamp

    def test_failed_result_is_not_applied(self):
        instance = WorkflowInstance(instance_id="i", workflow_type="t", current_state="draft")
        failed = TransitionResult(
            success=False, previous_state="draft", current_state="draft",
            transition_event="submit", error="Transition guard rejected the transition"
        )

        assert instance.apply_transition(failed) is False
        assert instance.history == []

    @pytest.mark.asyncio
    async def test_apply_evaluation(self, engine):
        instance = engine.create_instance({"documents_complete": True, "is_approved": True})
        instance.current_state = "pending_review"

        evaluation = await engine.evaluate_transitions(instance.current_state, instance.context)

        assert isinstance(evaluation, EvaluationResult)
        assert instance.apply_evaluation(evaluation) == 1
        assert instance.current_state == "approved"
