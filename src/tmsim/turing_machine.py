from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import ClassVar, Self

from tmsim.configuration import Configuration
from tmsim.model import (
    Halt,
    Move,
    State,
    Symbol,
    TransitionFunction,
    TransitionStep,
    is_halting,
    parse_state,
)

TM_FOLDER = Path(__file__).parent / "tms"


class ContractViolation(Exception):
    pass


class HaltedConfiguration(ContractViolation):
    pass


class StateOutOfBounds(ContractViolation):
    pass


class SymbolOutOfBounds(ContractViolation):
    pass


class MissingTransition(ContractViolation):
    pass


@dataclass(frozen=True)
class TransitionTable:
    """Transition function backed by an explicit `(state, symbol)` lookup."""

    entries: Mapping[tuple[int, Symbol], TransitionStep] = field(default_factory=dict)

    def __call__(self, state: int, symbol: Symbol) -> TransitionStep:
        try:
            return self.entries[state, symbol]
        except KeyError as e:
            raise MissingTransition(state, symbol) from e


@dataclass(frozen=True)
class TuringMachine:
    max_state: int
    max_symbol: int
    transition: TransitionFunction

    _cache: ClassVar[dict[str, Self]] = {}

    def __post_init__(self) -> None:
        assert self.max_state >= 1, f"Machine needs at least one state, got {self.max_state}"
        assert self.max_symbol >= 1, f"Machine needs at least one non-blank symbol, got {self.max_symbol}"
        if isinstance(self.transition, TransitionTable):
            for (state, symbol), (write, target, _) in self.transition.entries.items():
                assert not is_halting(state), f"Transition '{(state, symbol)}' starts from a halting state"
                assert 1 <= state <= self.max_state, f"Transition '{(state, symbol)}' starts from a nonexistent state"
                assert symbol <= self.max_symbol, f"Transition '{(state, symbol)}' starts from a nonexistent symbol"
                assert self.valid_state(target), f"Transition '{(state, symbol)}' goes to a nonexistent state {target}"
                assert write <= self.max_symbol, f"Transition '{(state, symbol)}' writes a nonexistent symbol {write}"

    def valid_state(self, state: State) -> bool:
        return is_halting(state) or (isinstance(state, int) and 1 <= state <= self.max_state)

    @classmethod
    def from_spec(cls, spec: str) -> Self:
        max_state, max_symbol, *trans_graph = spec.splitlines()
        trans: dict[tuple[int, Symbol], TransitionStep] = {}
        for line in trans_graph:
            if line.startswith(("#", "/")) or not line.strip():
                continue
            try:
                state, symbol, out_state, out_symbol, dir, *_ = line.split()
            except ValueError as e:
                raise ValueError(f"Malformed transition '{line}'") from e
            from_state = parse_state(state)
            if isinstance(from_state, Halt):
                raise ValueError(f"Transition '{line}' starts from the halting state {from_state}")
            key = from_state, Symbol.parse(symbol)
            if key in trans:
                raise ValueError(f"Duplicate transition for '{(state, symbol)}'")
            trans[key] = TransitionStep(Symbol.parse(out_symbol), parse_state(out_state), Move.parse(dir))
        return cls(
            max_state=int(max_state),
            max_symbol=int(max_symbol),
            transition=TransitionTable(trans),
        )

    @classmethod
    def load(cls, path: Path) -> Self:
        return cls.from_spec(path.read_text())

    @classmethod
    def get(cls, name: str) -> Self:
        if name not in cls._cache:
            cls._cache[name] = cls.load(TM_FOLDER.joinpath(f"{name}.TM"))
        return cls._cache[name]

    def __call__(self, input: Iterable[int]) -> Configuration:
        return simulate(self, input)


def simulate_step(machine: TuringMachine, before: Configuration) -> Configuration:
    state = before.state
    if is_halting(state):
        raise HaltedConfiguration(before)
    if not machine.valid_state(state):
        raise StateOutOfBounds(before)
    symbol = before.current_symbol()
    if symbol > machine.max_symbol:
        raise SymbolOutOfBounds(before, symbol)

    write, target, move = machine.transition(state, symbol)
    write = Symbol(write)
    if write > machine.max_symbol:
        raise SymbolOutOfBounds(before, write)
    if not machine.valid_state(target):
        raise StateOutOfBounds(before, target)
    return replace(before.advance(write, Move(move)), state=target)


def run(machine: TuringMachine, config: Configuration) -> Configuration:
    while not is_halting(config.state):
        config = simulate_step(machine, config)
    return config


def simulate(machine: TuringMachine, input: Iterable[int]) -> Configuration:
    return run(machine, Configuration.initial(input))


def trace(machine: TuringMachine, input: Iterable[int]) -> Iterator[Configuration]:
    """Yields every configuration of the run, starting with the initial one and ending with the halting one.

    The run has no step bound of its own. Callers that cannot guarantee halting should slice the iterator.
    """
    config = Configuration.initial(input)
    yield config
    while not is_halting(config.state):
        config = simulate_step(machine, config)
        yield config

