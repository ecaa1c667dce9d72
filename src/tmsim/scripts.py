from itertools import islice
from pathlib import Path
from typing import Annotated

from rich.console import Console
from rich.table import Table
from rich.theme import Theme
from typer import Argument, Exit, Option, Typer

from tmsim.configuration import Configuration, parse_symbols
from tmsim.model import ACCEPT, is_halting
from tmsim.turing_machine import TM_FOLDER, ContractViolation, TuringMachine, trace

app = Typer(pretty_exceptions_show_locals=False)
theme = Theme({
    "success": "green",
    "warning": "orange3",
    "error": "red",
    "heading": "blue",
    "info": "dim cyan",
})
console = Console(theme=theme)

DEFAULT_LIMIT = 1_000_000
INCONCLUSIVE = 3


def load_machine(machine: str) -> TuringMachine:
    path = Path(machine)
    try:
        if path.suffix == ".TM" or path.is_file():
            return TuringMachine.load(path)
        return TuringMachine.get(machine)
    except FileNotFoundError as e:
        console.print(f"[error]Could not find a TM named '{machine}'.")
        raise Exit(1) from e
    except (ValueError, AssertionError) as e:
        console.print(f"[error]The TM file is formatted incorrectly:[/]\n{e}")
        raise Exit(1) from e


def bounded_run(tm: TuringMachine, input: list[str], limit: int) -> tuple[list[Configuration], bool]:
    try:
        symbols = parse_symbols(" ".join(input))
    except ValueError as e:
        console.print(f"[error]Invalid input: {e}")
        raise Exit(1) from e
    configs = list[Configuration]()
    try:
        for config in islice(trace(tm, symbols), limit + 1):
            configs.append(config)
    except ContractViolation as e:
        console.print(f"[error]The TM broke its contract ({type(e).__name__}):[/]")
        console.print(", ".join(map(str, e.args)), markup=False, highlight=False)
        console.print(format_configs(configs))
        raise Exit(1) from e
    return configs, is_halting(configs[-1].state)


def format_configs(configs: list[Configuration], truncate: int | None = 20) -> str:
    if truncate is not None:
        offset = max(0, len(configs) - truncate)
        configs = configs[-truncate:]
    else:
        offset = 0
    out = [
        "Configuration sequence:\n",
        "[heading]step    configuration[/]\n",
        "  ⋮\n" if offset else "",
        *(f"{i: >3}    {c:>}\n" for i, c in enumerate(configs, offset)),
    ]
    return "".join(out)


def report(configs: list[Configuration], halted: bool, limit: int) -> None:
    final = configs[-1]
    if not halted:
        console.print(f"[warning]The TM did not halt within {limit} steps, the result is inconclusive.")
        raise Exit(INCONCLUSIVE)
    style = "success" if final.state == ACCEPT else "error"
    tape = " ".join(map(str, final.project())) or "(blank)"
    console.print(f"[{style}]Halted in state {final.state} after {len(configs) - 1} steps.")
    console.print(f"Tape: {tape}", highlight=False)


@app.command()
def run(
    machine: Annotated[str, Argument(help="Name of a bundled TM or path to a '.TM' file.")],
    input: Annotated[list[str], Argument(help="Input symbols, '_' for blank.")] = [],  # noqa: B006
    *,
    limit: Annotated[
        int, Option("--limit", "-l", min=0, help="Number of steps after which the run is reported as inconclusive.")
    ] = DEFAULT_LIMIT,
):
    tm = load_machine(machine)
    configs, halted = bounded_run(tm, input, limit)
    console.print(f"[info]Final configuration:[/] {configs[-1]:>}")
    report(configs, halted, limit)


@app.command(name="trace")
def trace_command(
    machine: Annotated[str, Argument(help="Name of a bundled TM or path to a '.TM' file.")],
    input: Annotated[list[str], Argument(help="Input symbols, '_' for blank.")] = [],  # noqa: B006
    *,
    limit: Annotated[
        int, Option("--limit", "-l", min=0, help="Number of steps after which the run is reported as inconclusive.")
    ] = DEFAULT_LIMIT,
    tail: Annotated[
        int, Option("--tail", "-t", min=0, help="Number of configurations to show, counted from the end. 0 shows all.")
    ] = 20,
):
    tm = load_machine(machine)
    configs, halted = bounded_run(tm, input, limit)
    console.print(format_configs(configs, tail or None))
    report(configs, halted, limit)


@app.command()
def machines():
    table = Table("name", "states", "symbols", header_style="heading")
    for file in sorted(TM_FOLDER.glob("*.TM")):
        tm = TuringMachine.get(file.stem)
        table.add_row(file.stem, str(tm.max_state), str(tm.max_symbol))
    console.print(table)


if __name__ == "__main__":
    app()
