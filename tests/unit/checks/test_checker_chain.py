"""
deploy-guard — unit tests for the postcondition checker chain

File: tests/unit/checks/test_checker_chain.py
Last updated: 2026-10-19

Purpose
- Verify ordering and short-circuit behavior of ``CompositePostconditionChecker``.

What this test file should cover
- Children run in declaration order with each output threaded into the next.
- The first cancel stops the chain and is returned as-is.
- A cancelled input never reaches any child.
- ``EmptyPostChecker`` is the identity for both variants.
"""

from __future__ import annotations

import pytest

from deploy_guard.checks import CompositePostconditionChecker, EmptyPostChecker
from deploy_guard.domain import CancelResponse, CheckResult, ContinueResponse


class _Recording:
    def __init__(self, name: str, calls: list[str], result: CheckResult[str] | None = None) -> None:
        self._name = name
        self._calls = calls
        self._result = result

    async def check(self, inputs: CheckResult[str]) -> CheckResult[str]:
        self._calls.append(self._name)
        if self._result is not None:
            return self._result
        assert isinstance(inputs, ContinueResponse)
        return ContinueResponse(f"{inputs.data}>{self._name}")


@pytest.mark.asyncio
async def test_children_run_in_order_and_thread_outputs() -> None:
    calls: list[str] = []
    chain = CompositePostconditionChecker(
        _Recording("a", calls), _Recording("b", calls), _Recording("c", calls)
    )

    result = await chain.check(ContinueResponse("start"))

    assert calls == ["a", "b", "c"]
    assert result == ContinueResponse("start>a>b>c")


@pytest.mark.asyncio
async def test_first_cancel_stops_chain_and_is_returned_unchanged() -> None:
    calls: list[str] = []
    cancel = CancelResponse("stop here")
    chain = CompositePostconditionChecker(
        _Recording("a", calls), _Recording("b", calls, cancel), _Recording("c", calls)
    )

    result = await chain.check(ContinueResponse("start"))

    assert calls == ["a", "b"]
    assert result is cancel
    assert result.message == "stop here"


@pytest.mark.asyncio
async def test_cancelled_input_skips_every_child() -> None:
    calls: list[str] = []
    chain = CompositePostconditionChecker(_Recording("a", calls))
    cancel = CancelResponse()

    assert await chain.check(cancel) is cancel
    assert calls == []


@pytest.mark.asyncio
async def test_empty_chain_returns_input() -> None:
    inputs = ContinueResponse(["x"])
    assert await CompositePostconditionChecker().check(inputs) is inputs


@pytest.mark.asyncio
async def test_nested_composites_short_circuit() -> None:
    calls: list[str] = []
    inner = CompositePostconditionChecker(
        _Recording("inner-a", calls), _Recording("inner-b", calls, CancelResponse())
    )
    outer = CompositePostconditionChecker(_Recording("a", calls), inner, _Recording("z", calls))

    result = await outer.check(ContinueResponse("start"))

    assert isinstance(result, CancelResponse)
    assert calls == ["a", "inner-a", "inner-b"]


def test_composite_rejects_non_checkers() -> None:
    with pytest.raises(ValueError, match=r"checkers\[1\]"):
        CompositePostconditionChecker(EmptyPostChecker(), object())  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_empty_post_checker_is_identity() -> None:
    checker = EmptyPostChecker()
    proceed = ContinueResponse("force-app")
    cancel = CancelResponse("nope")

    assert await checker.check(proceed) is proceed
    assert await checker.check(cancel) is cancel
