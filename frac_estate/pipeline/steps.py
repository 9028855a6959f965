"""Ordered pipeline of steps, each producing an explicit result."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, TypeVar

from frac_estate.exceptions import FracEstateError, TransactionRevertedError
from frac_estate.models import TransactionReceipt

logger = logging.getLogger(__name__)

S = TypeVar("S")


@dataclass
class StepResult:
    """Outcome of one pipeline step."""

    name: str
    ok: bool
    value: Any = None
    error: str | None = None
    tx_id: str | None = None
    elapsed: float = 0.0


@dataclass
class PipelineReport:
    """Results of every step that ran, in order."""

    results: list[StepResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(result.ok for result in self.results)

    @property
    def failed_step(self) -> StepResult | None:
        """First failed step, if any."""
        return next((result for result in self.results if not result.ok), None)

    def get(self, name: str) -> StepResult | None:
        return next((result for result in self.results if result.name == name), None)

    def value(self, name: str) -> Any:
        """Value returned by a step (``None`` if it did not run)."""
        result = self.get(name)
        return result.value if result is not None else None


class Pipeline(Generic[S]):
    """Run named steps over a shared state object, halting on first failure.

    A step is a callable taking the state and returning a value. When
    the value is a ``TransactionReceipt`` its id is recorded on the
    result. Failures are not retried.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._steps: list[tuple[str, Callable[[S], Any]]] = []

    def add(self, name: str, fn: Callable[[S], Any]) -> "Pipeline[S]":
        self._steps.append((name, fn))
        return self

    @property
    def step_names(self) -> list[str]:
        return [name for name, _ in self._steps]

    def run(self, state: S) -> PipelineReport:
        report = PipelineReport()
        logger.info("Pipeline %s: %d steps", self.name, len(self._steps))

        for name, fn in self._steps:
            start = time.perf_counter()
            try:
                value = fn(state)
            except TransactionRevertedError as exc:
                receipt = exc.receipt
                result = StepResult(
                    name=name,
                    ok=False,
                    error=str(exc),
                    tx_id=receipt.tx_id if receipt is not None else None,
                    elapsed=time.perf_counter() - start,
                )
            except FracEstateError as exc:
                result = StepResult(
                    name=name,
                    ok=False,
                    error=f"{type(exc).__name__}: {exc}",
                    elapsed=time.perf_counter() - start,
                )
            else:
                tx_id = value.tx_id if isinstance(value, TransactionReceipt) else None
                result = StepResult(
                    name=name,
                    ok=True,
                    value=value,
                    tx_id=tx_id,
                    elapsed=time.perf_counter() - start,
                )

            report.results.append(result)
            context = {
                "extra": {
                    "pipeline": self.name,
                    "step": name,
                    "ok": result.ok,
                    "tx_id": result.tx_id,
                    "elapsed": round(result.elapsed, 6),
                }
            }
            if not result.ok:
                logger.error("Step %s failed: %s", name, result.error, extra=context)
                break
            logger.debug("Step %s done in %.3fs", name, result.elapsed, extra=context)

        logger.info("Pipeline %s %s", self.name, "completed" if report.ok else "halted")
        return report
