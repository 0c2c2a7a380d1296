"""
Compensating-action runner for multi-step backend writes.

The hosted backend offers no client-side transactions, so a chain of
dependent writes is run step by step. When a step fails, the undo action of
every step that already completed is run in reverse order and the original
failure is re-raised as :class:`~pathway.errors.RemoteError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..errors import PathwayError, RemoteError

logger = logging.getLogger(__name__)

Action = Callable[[Dict[str, Any]], Any]
Compensation = Callable[[Dict[str, Any]], None]


@dataclass
class SagaStep:
    name: str
    action: Action
    compensate: Optional[Compensation] = None


class SagaFailed(RemoteError):
    """A saga step failed; completed steps have been compensated."""

    def __init__(self, message: str, *, step: str, compensation_errors: Optional[List[str]] = None) -> None:
        super().__init__(message, operation=f"saga:{step}")
        self.step = step
        self.compensation_errors = compensation_errors or []


class Saga:
    """
    Ordered list of steps sharing a context dict.

    Each action receives the context and its return value is stored under
    the step name, so later steps and compensations can read what earlier
    steps produced.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.steps: List[SagaStep] = []
        self.completed: List[str] = []

    def step(self, name: str, action: Action, compensate: Optional[Compensation] = None) -> "Saga":
        self.steps.append(SagaStep(name=name, action=action, compensate=compensate))
        return self

    def run(self, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        ctx: Dict[str, Any] = dict(context or {})
        done: List[SagaStep] = []
        self.completed = []

        for current in self.steps:
            try:
                ctx[current.name] = current.action(ctx)
            except Exception as exc:
                logger.warning("Saga %s failed at step %s: %s", self.name, current.name, exc)
                errors = self._compensate(done, ctx)
                message = exc.message if isinstance(exc, PathwayError) else str(exc)
                raise SagaFailed(message or current.name, step=current.name, compensation_errors=errors) from exc
            done.append(current)
            self.completed.append(current.name)

        return ctx

    def _compensate(self, done: List[SagaStep], ctx: Dict[str, Any]) -> List[str]:
        errors: List[str] = []
        for finished in reversed(done):
            if finished.compensate is None:
                continue
            try:
                finished.compensate(ctx)
            except Exception as exc:
                # Keep undoing the remaining steps; report what could not be reverted.
                logger.error(
                    "Saga %s could not compensate step %s: %s",
                    self.name,
                    finished.name,
                    exc,
                )
                errors.append(f"{finished.name}: {exc}")
        return errors


__all__ = ["Saga", "SagaFailed", "SagaStep"]
