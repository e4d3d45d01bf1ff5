"""Hook Runner - Sequential execution of guards, hooks and transition actions"""
import inspect
from typing import Any, Callable, List, NamedTuple, Optional, Sequence, Tuple

from ..domain.enums import HookStage
from ..utils.logger import get_logger

logger = get_logger(__name__)


class StageFailure(NamedTuple):
    """The pipeline stage that failed and what it raised"""
    stage: HookStage
    error: Exception


PipelineStep = Tuple[HookStage, Optional[Callable[..., Any]], Sequence[Any]]


async def call_hook(hook: Callable[..., Any], *args: Any) -> Any:
    """
    Call a hook that may be sync or async

    Plain callables returning an awaitable (e.g. a lambda wrapping a
    coroutine function) are awaited as well.
    """
    result = hook(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


async def run_pipeline(steps: List[PipelineStep]) -> Optional[StageFailure]:
    """
    Run pipeline steps strictly in order, stopping at the first failure

    Steps without a hook are skipped. Later steps never start once an
    earlier one has raised.

    Returns:
        None when every step completed, otherwise the failing stage
    """
    for stage, hook, args in steps:
        if hook is None:
            continue
        try:
            await call_hook(hook, *args)
        except Exception as e:
            logger.warning(
                f"Hook failed at stage {stage.value}: {e}",
                extra={"stage": stage.value}
            )
            return StageFailure(stage=stage, error=e)
    return None


def error_message(error: BaseException) -> str:
    """Message preserved in transition results"""
    return str(error) or error.__class__.__name__
