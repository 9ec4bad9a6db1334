from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from turingsim.turing_machine import Machine


@dataclass(frozen=True)
class RunResult:
    halted: bool
    steps: int
    steps_taken: int
    ones: int


def run_bounded(
    machine: Machine,
    max_steps: int | None,
    *,
    one: str = "1",
    on_step: Callable[[Machine], object] | None = None,
) -> RunResult:
    """Drives `machine` until it halts or has taken `max_steps` further steps.

    The engine itself never stops a machine that does not halt, so this is where a step budget is imposed. Errors
    raised by `Machine.step` propagate unchanged.
    """
    if max_steps is not None and max_steps < 0:
        raise ValueError(f"The step limit must not be negative, got {max_steps}")
    start = machine.steps
    if on_step is None and max_steps is None:
        machine.run()
    else:
        while not machine.halted and (max_steps is None or machine.steps - start < max_steps):
            machine.step()
            if on_step is not None:
                on_step(machine)
    return RunResult(machine.halted, machine.steps, machine.steps - start, machine.count_ones(one))

