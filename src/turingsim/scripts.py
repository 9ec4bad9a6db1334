from collections import deque
from pathlib import Path
from typing import Annotated

from rich.console import Console
from rich.theme import Theme
from typer import Argument, Exit, Option, Typer

from turingsim.config import ConfigError, Settings, load_settings
from turingsim.descriptions import DescriptionError, load_machine, save_snapshot
from turingsim.driver import RunResult, run_bounded
from turingsim.turing_machine import Machine, MachineDefnError, UnserializableSymbol

app = Typer(pretty_exceptions_show_locals=False)
theme = Theme({
    "success": "green",
    "warning": "orange3",
    "error": "red",
    "attention": "magenta2",
    "heading": "blue",
    "info": "dim cyan",
})
console = Console(theme=theme)

MachinePath = Annotated[
    Path, Argument(help="Machine description: a .toml description, a .json snapshot or the standard text format.")
]
ConfigPath = Annotated[
    Path | None,
    Option("--config", help="Settings file. Defaults to turingsim.toml or [tool.turingsim] in pyproject.toml."),
]


def settings_or_abort(path: Path | None) -> Settings:
    try:
        return load_settings(path)
    except ConfigError as e:
        console.print(f"[error]Invalid configuration:[/] {e}")
        raise Exit(1) from e


def machine_or_abort(path: Path) -> Machine:
    try:
        return load_machine(path)
    except FileNotFoundError as e:
        console.print(f"[error]Could not find machine file '{path}'.")
        raise Exit(1) from e
    except OSError as e:
        console.print(f"[error]Could not read machine file '{path}':[/] {e.strerror}")
        raise Exit(1) from e
    except DescriptionError as e:
        console.print(f"[error]The machine file is formatted incorrectly:[/]\n{e}")
        raise Exit(1) from e


def save_or_abort(machine: Machine, path: Path) -> None:
    try:
        save_snapshot(machine, path)
    except UnserializableSymbol as e:
        console.print(f"[error]Could not write snapshot:[/] {e}.")
        raise Exit(1) from e


def format_configs(configs: deque[str], truncated: bool) -> str:
    out = [
        "Configuration sequence:\n",
        "[heading]    step    state    tape[/]\n",
        "       ⋮\n" if truncated else "",
        *(f"{c}\n" for c in configs),
    ]
    return "".join(out)


def report(result: RunResult, machine: Machine) -> None:
    if result.halted:
        console.print(f"[success]The machine halted after {result.steps} steps.")
    else:
        console.print(
            f"[warning]The machine did not halt within {result.steps_taken} steps, it is in state '{machine.state}'."
        )
    console.print(f"Ones on the tape: [attention]{result.ones}")


@app.command()
def run(
    machine_file: MachinePath,
    *,
    max_steps: Annotated[
        int | None,
        Option("--max-steps", "-n", min=0, help="Step limit for this run. Defaults to the configured limit."),
    ] = None,
    unbounded: Annotated[
        bool, Option("--unbounded", help="Run without a step limit. Will not return if the machine never halts.")
    ] = False,
    trace: Annotated[bool, Option("--trace", "-t", help="Print the last configurations of the run.")] = False,
    save: Annotated[
        Path | None, Option("--save", "-s", help="Write a JSON snapshot of the machine after the run.")
    ] = None,
    config: ConfigPath = None,
):
    settings = settings_or_abort(config)
    machine = machine_or_abort(machine_file)
    limit = None if unbounded else (settings.max_steps if max_steps is None else max_steps)

    configs = deque([machine.pretty()], maxlen=settings.trace_window)
    start = machine.steps
    on_step = (lambda m: configs.append(m.pretty())) if trace else None
    try:
        with console.status(f"[info]Running machine '{machine_file.name}'."):
            result = run_bounded(machine, limit, one=settings.one, on_step=on_step)
    except MachineDefnError as e:
        console.print(f"[error]The machine description is incomplete:[/] {e}.")
        if trace:
            console.print(format_configs(configs, machine.steps - start > settings.trace_window))
        raise Exit(1) from e

    if trace:
        console.print(format_configs(configs, result.steps_taken >= settings.trace_window))
    report(result, machine)
    if save is not None:
        save_or_abort(machine, save)
        console.print(f"[info]Saved snapshot to '{save}'.")


@app.command()
def show(machine_file: MachinePath):
    machine = machine_or_abort(machine_file)
    console.print(str(machine), highlight=False, markup=False)


@app.command()
def convert(
    machine_file: MachinePath,
    output: Annotated[Path, Argument(help="Path of the JSON snapshot to write.")],
):
    machine = machine_or_abort(machine_file)
    save_or_abort(machine, output)
    console.print(f"[success]Wrote snapshot of '{machine_file.name}' to '{output}'.")


if __name__ == "__main__":
    app()
