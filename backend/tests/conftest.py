"""
Pytest Configuration and Fixtures

This file contains shared fixtures and configuration for all tests.
"""

from typing import Any, Callable, Dict, List, Optional

import pytest

from compliance_workflow.domain.models import (
    WorkflowDefinition, StateDefinition, StateMetadata, Transition, WorkflowHooks
)
from compliance_workflow.engine import WorkflowEngine


def _review_definition() -> WorkflowDefinition:
    return WorkflowDefinition(
        id="test-workflow",
        name="Test Workflow",
        version="1.0",
        initial_state="draft",
        states={
            "draft": StateDefinition(
                metadata=StateMetadata(label="Draft"),
                transitions={
                    "submit": Transition(to="pending_review", description="Submit for review"),
                    "archive": Transition(to="archived", description="Archive draft"),
                },
            ),
            "pending_review": StateDefinition(
                metadata=StateMetadata(label="Pending Review"),
                transitions={
                    "approve": Transition(
                        to="approved",
                        description="Approve the workflow",
                        guard=lambda ctx: ctx["documents_complete"],
                    ),
                    "reject": Transition(to="rejected", description="Reject the workflow"),
                    "auto_approve": Transition(
                        to="approved",
                        auto=True,
                        auto_condition=lambda ctx: ctx["is_approved"] and ctx["documents_complete"],
                        description="Auto-approve when conditions are met",
                    ),
                },
            ),
            "approved": StateDefinition(
                metadata=StateMetadata(label="Approved", is_terminal=True),
            ),
            "rejected": StateDefinition(
                metadata=StateMetadata(label="Rejected"),
                transitions={
                    "resubmit": Transition(to="pending_review", description="Resubmit for review"),
                },
            ),
            "archived": StateDefinition(
                metadata=StateMetadata(label="Archived", is_terminal=True),
            ),
        },
    )


@pytest.fixture
def review_definition() -> WorkflowDefinition:
    """Five-state review workflow with a guard and one auto transition"""
    return _review_definition()


@pytest.fixture
def engine(review_definition: WorkflowDefinition) -> WorkflowEngine:
    return WorkflowEngine(review_definition)


@pytest.fixture
def context() -> Dict[str, Any]:
    return {
        "documents_complete": False,
        "is_approved": False,
        "user_id": "user-1",
    }


@pytest.fixture
def instrumented_definition() -> Callable[..., WorkflowDefinition]:
    """
    Factory for a two-state definition whose hooks append to a shared log

    The stage named by fail_at raises RuntimeError("<stage> failed").
    """

    def build(
        log: List[str],
        fail_at: Optional[str] = None,
        guard: Optional[Callable[[Dict[str, Any]], Any]] = None,
        on_error_raises: bool = False,
    ) -> WorkflowDefinition:
        def hook(name: str):
            async def run(*args: Any) -> None:
                log.append(name)
                if name == fail_at:
                    raise RuntimeError(f"{name} failed")
            return run

        async def on_error(error: BaseException, ctx: Dict[str, Any]) -> None:
            log.append(f"on_error:{error}")
            if on_error_raises:
                raise ValueError("on_error exploded")

        return WorkflowDefinition(
            id="instrumented",
            initial_state="a",
            states={
                "a": StateDefinition(
                    on_exit=hook("on_exit"),
                    transitions={
                        "go": Transition(to="b", guard=guard, on_transition=hook("on_transition")),
                    },
                ),
                "b": StateDefinition(on_enter=hook("on_enter")),
            },
            hooks=WorkflowHooks(
                before_transition=hook("before_transition"),
                after_transition=hook("after_transition"),
                on_error=on_error,
            ),
        )

    return build
