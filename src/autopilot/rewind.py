"""Run a list of steps and undo the completed ones when a later step fails."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .errors import AutopilotError
from .utils.logging import get_logger

logger = get_logger(__name__)

Operation = Callable[[], None]


@dataclass(frozen=True)
class ActionStep:
    """A forward operation paired with the operation that undoes it.

    Operations report failure by raising. Steps without a reverse cannot be
    undone; unwinding simply passes over them.
    """

    forward: Operation
    reverse: Optional[Operation] = None
    description: str = ""


class RewindFailure(AutopilotError):
    """A forward step failed; carries any errors hit while unwinding."""

    def __init__(
        self,
        primary: BaseException,
        unwind_errors: Sequence[BaseException],
        fallback_message: str,
    ) -> None:
        self.primary = primary
        self.unwind_errors = list(unwind_errors)
        self.fallback_message = fallback_message
        super().__init__(self._render())

    @property
    def recovered(self) -> bool:
        """True when every reverse operation that ran succeeded."""
        return not self.unwind_errors

    def _render(self) -> str:
        lines = [str(self.primary)]
        for error in self.unwind_errors:
            lines.append(f"rollback error: {error}")
        lines.append(self.fallback_message)
        return "\n".join(lines)


class SagaExecutor:
    """Executes a plan of ActionSteps once.

    On the first forward failure at index k, reverse operations of steps
    k-1 down to 0 are invoked. A failing reverse is recorded and the unwind
    carries on with the earlier steps.
    """

    def __init__(self, steps: Sequence[ActionStep], fallback_message: str) -> None:
        self.steps = list(steps)
        self.fallback_message = fallback_message
        self._executed = False

    def execute(self) -> None:
        if self._executed:
            raise RuntimeError("an action plan can only be executed once")
        self._executed = True

        total = len(self.steps)
        for index, step in enumerate(self.steps):
            label = step.description or f"step {index + 1}"
            logger.info("[%d/%d] %s", index + 1, total, label)
            try:
                step.forward()
            except Exception as exc:
                logger.error("[%d/%d] %s failed: %s", index + 1, total, label, exc)
                unwind_errors = self._unwind(index)
                raise RewindFailure(exc, unwind_errors, self.fallback_message) from exc

    def _unwind(self, failed_index: int) -> List[Exception]:
        errors: List[Exception] = []
        for index in range(failed_index - 1, -1, -1):
            step = self.steps[index]
            if step.reverse is None:
                continue
            label = step.description or f"step {index + 1}"
            logger.warning("Undoing %s", label)
            try:
                step.reverse()
            except Exception as exc:
                logger.error("Could not undo %s: %s", label, exc)
                errors.append(exc)
        return errors

