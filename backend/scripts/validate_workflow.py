"""Script to validate a built-in workflow definition

Usage:
    python scripts/validate_workflow.py authorization
    python scripts/validate_workflow.py incident
"""
import argparse
import io
import sys
sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
sys.path.insert(0, ".")

from compliance_workflow.definitions import get_workflow_definition, list_workflow_ids
from compliance_workflow.domain.errors import DomainError
from compliance_workflow.engine import WorkflowEngine
from compliance_workflow.utils.logger import setup_logging


def validate_workflow(workflow_id: str) -> int:
    try:
        definition = get_workflow_definition(workflow_id)
        # Construction runs the definition validator
        engine = WorkflowEngine(definition)
    except DomainError as e:
        print(f"❌ {e.message}")
        for key, value in e.details.items():
            print(f"   {key}: {value}")
        return 1

    print(f"✅ Valid workflow: {definition.name}")
    print(f"   Version: {definition.version}")
    print()

    states = engine.get_all_states()
    terminal_states = engine.get_terminal_states()

    print("=" * 60)
    print("WORKFLOW ANALYSIS")
    print("=" * 60)
    print(f"\n📊 STATES: {len(states)}")
    print(f"🚀 INITIAL STATE: {definition.initial_state}")
    print(f"🏁 TERMINAL STATES: {', '.join(terminal_states)}")

    print("\n" + "=" * 60)
    print("TRANSITION FLOW")
    print("=" * 60)

    auto_count = 0
    for i, state_name in enumerate(states):
        state = engine.get_state(state_name)
        print(f"\n{i+1}. {state.name or state_name} ({state_name})")
        if state_name == definition.initial_state:
            print("   ⭐ INITIAL STATE")
        if state_name in terminal_states:
            print("   🏁 TERMINAL STATE")
        if state.metadata.phase:
            print(f"   Phase: {state.metadata.phase}")

        for event, transition in state.transitions.items():
            markers = []
            if transition.auto:
                auto_count += 1
                markers.append("auto")
            if transition.guard is not None:
                markers.append("guarded")
            suffix = f" [{', '.join(markers)}]" if markers else ""
            print(f"   → {event}: {state_name} → {transition.to}{suffix}")

    unreachable = set(states) - _reachable(engine, definition.initial_state)

    print("\n" + "=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print(f"   Auto transitions: {auto_count}")
    if unreachable:
        print(f"   ⚠️ Unreachable from initial state: {', '.join(sorted(unreachable))}")
    else:
        print("   All states reachable from the initial state")
    return 0


def _reachable(engine: WorkflowEngine, start: str) -> set:
    seen = {start}
    pending = [start]
    while pending:
        for next_state in engine.get_next_states(pending.pop()):
            if next_state not in seen:
                seen.add(next_state)
                pending.append(next_state)
    return seen


def main():
    parser = argparse.ArgumentParser(description="Validate a built-in workflow definition")
    parser.add_argument("workflow_id", choices=list_workflow_ids(), help="Workflow to analyse")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL for this run")
    args = parser.parse_args()
    setup_logging(args.log_level)
    sys.exit(validate_workflow(args.workflow_id))


if __name__ == "__main__":
    main()
