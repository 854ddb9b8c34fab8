"""
deploy-guard — postcondition checker chain

File: src/deploy_guard/checks/base.py
Last updated: 2026-10-19

Purpose
- Define the single ``check`` capability every checker implements.
- Provide the composite (ordered, short-circuiting) and empty checkers.

Functional requirements
- A cancelled input is returned unchanged.
- Children run strictly in declaration order; the first cancel stops the chain
  and later children are never invoked.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from deploy_guard.domain.models import CancelResponse, CheckResult

T = TypeVar("T")

logger = logging.getLogger(__name__)


@runtime_checkable
class PostconditionChecker(Protocol[T]):
    async def check(self, inputs: CheckResult[T]) -> CheckResult[T]: ...


class CompositePostconditionChecker(Generic[T]):
    """Runs child checkers in order, threading each output into the next."""

    def __init__(self, *checkers: PostconditionChecker[Any]) -> None:
        for index, checker in enumerate(checkers):
            if not isinstance(checker, PostconditionChecker):
                raise ValueError(
                    f"checkers[{index}]: expected a postcondition checker, "
                    f"got {type(checker).__name__}"
                )
        self._checkers: tuple[PostconditionChecker[Any], ...] = checkers

    @property
    def checkers(self) -> tuple[PostconditionChecker[Any], ...]:
        return self._checkers

    async def check(self, inputs: CheckResult[T]) -> CheckResult[T]:
        if isinstance(inputs, CancelResponse):
            return inputs

        result: CheckResult[Any] = inputs
        for index, checker in enumerate(self._checkers):
            result = await checker.check(result)
            if isinstance(result, CancelResponse):
                logger.debug(
                    "checker %s cancelled the chain at step %d",
                    type(checker).__name__,
                    index,
                )
                return result
        return result


class EmptyPostChecker:
    """Identity checker used where conflict checking is switched off."""

    async def check(self, inputs: CheckResult[T]) -> CheckResult[T]:
        return inputs


__all__ = ["CompositePostconditionChecker", "EmptyPostChecker", "PostconditionChecker"]
