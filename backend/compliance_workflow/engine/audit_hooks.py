"""Audit Hooks - Transition audit records produced from the global hooks"""
from typing import Any, Callable, Dict, List, Optional

from ..domain.models import (
    TransitionAuditEvent, WorkflowDefinition, WorkflowHooks, WorkflowContext
)
from ..domain.enums import AuditEventType
from .hook_runner import call_hook, error_message
from ..utils.idgen import generate_audit_event_id
from ..utils.logger import get_correlation_id, get_logger
from ..utils.time import utc_now

logger = get_logger(__name__)

AuditSink = Callable[[TransitionAuditEvent], Any]


class InMemoryAuditSink:
    """Append-only in-memory sink, mainly for tests and local tooling"""

    def __init__(self):
        self.events: List[TransitionAuditEvent] = []

    def __call__(self, event: TransitionAuditEvent) -> None:
        self.events.append(event)


class AuditTrailRecorder:
    """
    Write transition audit events (append-only)

    The engine never audits by itself. The recorder plugs into the global
    hooks of a definition:
    - before_transition -> TRANSITION_STARTED
    - after_transition  -> TRANSITION_COMPLETED
    - on_error          -> TRANSITION_FAILED

    Hooks already present on the definition keep running; STARTED is
    written before them and COMPLETED after them. A failing sink fails the
    transition like any other hook.
    """

    def __init__(
        self,
        workflow_id: str,
        sink: AuditSink,
        entity_key: Optional[str] = None
    ):
        self.workflow_id = workflow_id
        self.sink = sink
        self.entity_key = entity_key

    async def write_event(
        self,
        event_type: AuditEventType,
        context: WorkflowContext,
        details: Optional[Dict[str, Any]] = None
    ) -> TransitionAuditEvent:
        """Write a single audit event"""
        event = TransitionAuditEvent(
            audit_event_id=generate_audit_event_id(),
            workflow_id=self.workflow_id,
            event_type=event_type,
            from_state=context.get("from"),
            to_state=context.get("to"),
            entity_id=self._entity_id(context),
            details=details or {},
            timestamp=utc_now(),
            correlation_id=get_correlation_id()
        )

        await call_hook(self.sink, event)

        logger.info(
            f"Audit {event_type.value}: {event.from_state} -> {event.to_state}",
            extra={
                "workflow_id": self.workflow_id,
                "from_state": event.from_state,
                "to_state": event.to_state
            }
        )
        return event

    def _entity_id(self, context: WorkflowContext) -> Optional[str]:
        if not self.entity_key:
            return None
        value = context.get(self.entity_key)
        return str(value) if value is not None else None

    def as_hooks(self, hooks: Optional[WorkflowHooks] = None) -> WorkflowHooks:
        """Build global hooks that audit around the given ones"""
        hooks = hooks or WorkflowHooks()

        async def before_transition(context: WorkflowContext) -> None:
            await self.write_event(AuditEventType.TRANSITION_STARTED, context)
            if hooks.before_transition is not None:
                await call_hook(hooks.before_transition, context)

        async def after_transition(context: WorkflowContext) -> None:
            if hooks.after_transition is not None:
                await call_hook(hooks.after_transition, context)
            await self.write_event(AuditEventType.TRANSITION_COMPLETED, context)

        async def on_error(error: BaseException, context: WorkflowContext) -> None:
            await self.write_event(
                AuditEventType.TRANSITION_FAILED,
                context,
                details={"error": error_message(error), "error_type": error.__class__.__name__}
            )
            if hooks.on_error is not None:
                await call_hook(hooks.on_error, error, context)

        return WorkflowHooks(
            before_transition=before_transition,
            after_transition=after_transition,
            on_error=on_error
        )

    def attach(self, definition: WorkflowDefinition) -> WorkflowDefinition:
        """Return a copy of the definition with audited hooks"""
        return definition.model_copy(update={"hooks": self.as_hooks(definition.hooks)})
