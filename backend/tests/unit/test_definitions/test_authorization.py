"""Tests for the authorization workflow definition"""
import pytest

from compliance_workflow.definitions import (
    AUTHORIZATION_WORKFLOW, get_authorization_progress, get_authorization_status_info,
    get_workflow_definition, is_authorization_terminal, list_workflow_ids
)
from compliance_workflow.domain.enums import TransitionFailure
from compliance_workflow.domain.errors import WorkflowNotFoundError
from compliance_workflow.domain.models import AuthorizationContext
from compliance_workflow.engine import WorkflowEngine


@pytest.fixture
def authorization_engine() -> WorkflowEngine:
    return WorkflowEngine(AUTHORIZATION_WORKFLOW)


def _context(**overrides) -> dict:
    values = {
        "workflow_id": "auth-1",
        "user_id": "user-1",
        "total_documents": 5,
        "ready_documents": 0,
        "all_mandatory_complete": False,
        "has_blockers": False,
    }
    values.update(overrides)
    return AuthorizationContext(**values).model_dump()


class TestAuthorizationWorkflow:

    def test_definition_is_valid(self, authorization_engine):
        assert authorization_engine.get_definition().initial_state == "not_started"
        assert len(authorization_engine.get_all_states()) == 8

    @pytest.mark.asyncio
    async def test_no_progress_without_ready_documents(self, authorization_engine):
        result = await authorization_engine.evaluate_transitions("not_started", _context())
        assert result.transitioned is False

    @pytest.mark.asyncio
    async def test_first_ready_document_starts_workflow(self, authorization_engine):
        result = await authorization_engine.evaluate_transitions(
            "not_started", _context(ready_documents=1)
        )

        assert result.final_state == "in_progress"
        assert [t.transition_event for t in result.transitions] == ["start"]

    @pytest.mark.asyncio
    async def test_complete_documents_reach_ready_for_submission(self, authorization_engine):
        ctx = _context(ready_documents=5, all_mandatory_complete=True)

        result = await authorization_engine.evaluate_transitions("not_started", ctx)

        assert result.final_state == "ready_for_submission"
        assert len(result.transitions) == 2
        assert result.errors == []

    @pytest.mark.asyncio
    async def test_new_blocker_reverts_to_in_progress(self, authorization_engine):
        ctx = _context(ready_documents=5, all_mandatory_complete=True, has_blockers=True)

        result = await authorization_engine.evaluate_transitions("ready_for_submission", ctx)

        assert result.final_state == "in_progress"

    @pytest.mark.asyncio
    async def test_submit_requires_complete_documents(self, authorization_engine):
        rejected = await authorization_engine.execute_transition(
            "ready_for_submission", "submit", _context(ready_documents=5)
        )
        assert rejected.error_code == TransitionFailure.GUARD_REJECTED

        submitted = await authorization_engine.execute_transition(
            "ready_for_submission", "submit",
            _context(ready_documents=5, all_mandatory_complete=True)
        )
        assert submitted.success is True
        assert submitted.current_state == "submitted"

    @pytest.mark.asyncio
    async def test_can_transition_with_async_guard(self, authorization_engine):
        ctx = _context(all_mandatory_complete=True)
        assert await authorization_engine.can_transition("ready_for_submission", "submit", ctx) is True

    def test_terminal_states(self, authorization_engine):
        assert set(authorization_engine.get_terminal_states()) == {"approved", "rejected", "withdrawn"}


class TestAuthorizationHelpers:

    @pytest.mark.parametrize("state,expected", [
        ("not_started", 0),
        ("in_progress", 20),
        ("ready_for_submission", 40),
        ("submitted", 60),
        ("under_review", 80),
        ("approved", 100),
        ("rejected", 0),
        ("withdrawn", 0),
    ])
    def test_progress(self, state, expected):
        assert get_authorization_progress(state) == expected

    def test_status_info(self):
        info = get_authorization_status_info("under_review")
        assert info == {"label": "Under Review", "color": "#F59E0B", "icon": "Eye", "phase": "under_review"}

    def test_status_info_fallback(self):
        info = get_authorization_status_info("mystery")
        assert info == {"label": "mystery", "color": "#6B7280", "icon": "Circle", "phase": "unknown"}

    def test_is_authorization_terminal(self):
        assert is_authorization_terminal("approved") is True
        assert is_authorization_terminal("submitted") is False
        assert is_authorization_terminal("mystery") is False


class TestWorkflowRegistry:

    def test_lookup(self):
        assert get_workflow_definition("authorization") is AUTHORIZATION_WORKFLOW
        assert list_workflow_ids() == ["authorization", "incident"]

    def test_unknown_workflow(self):
        with pytest.raises(WorkflowNotFoundError) as exc_info:
            get_workflow_definition("licensing")

        assert exc_info.value.http_status == 404
        assert exc_info.value.details["available"] == ["authorization", "incident"]
