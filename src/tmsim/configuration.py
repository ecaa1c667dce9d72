from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from itertools import chain
from typing import Self, TypeAlias

from tmsim.model import BLANK, START, Move, State, Symbol, parse_state


@dataclass(frozen=True, slots=True, eq=False)
class Cell:
    symbol: Symbol
    rest: Cell | None = None


Cells: TypeAlias = Cell | None


def cells(symbols: Iterable[int]) -> Cells:
    """Builds a stack holding `symbols` with the first one on top."""
    stack = None
    for symbol in reversed(list(symbols)):
        stack = Cell(Symbol(symbol), stack)
    return stack


def iter_cells(stack: Cells) -> Iterator[Symbol]:
    while stack is not None:
        yield stack.symbol
        stack = stack.rest


def trimmed(stack: Cells) -> tuple[Symbol, ...]:
    """Contents of the stack without the blank padding at its far end."""
    symbols = list(iter_cells(stack))
    while symbols and symbols[-1].is_blank:
        symbols.pop()
    return tuple(symbols)


def parse_symbols(data: str) -> list[Symbol]:
    return [Symbol.parse(token) for token in data.replace(",", " ").split()]


@dataclass(frozen=True, eq=False)
class Configuration:
    """One instant of a run.

    The tape is split at the head into two persistent stacks. `left` holds the cells strictly left of the head,
    nearest first. `right` holds the head cell followed by the cells to its right. Cells beyond either stack are
    blank, and both stacks may carry blank padding at their far ends.
    """

    state: State
    left: Cells = None
    right: Cells = None

    @classmethod
    def initial(cls, input: Iterable[int], state: State = START) -> Self:
        return cls(state, None, cells(input))

    @classmethod
    def from_tape(cls, left: Iterable[int], state: State, right: Iterable[int]) -> Self:
        """Builds a configuration from tape-ordered cells left of the head and from the head onwards."""
        return cls(state, cells(reversed(list(left))), cells(right))

    def current_symbol(self) -> Symbol:
        return BLANK if self.right is None else self.right.symbol

    def advance(self, write: Symbol, move: Move) -> Self:
        """Writes `write` into the head cell and moves the head one cell, keeping the state."""
        rest = None if self.right is None else self.right.rest
        match move:
            case Move.R:
                return replace(self, left=Cell(write, self.left), right=rest)
            case Move.L:
                if self.left is None:
                    head, left = BLANK, None
                else:
                    head, left = self.left.symbol, self.left.rest
                return replace(self, left=left, right=Cell(head, Cell(write, rest)))
            case _:
                raise ValueError(f"Invalid move {move!r}")

    def project(self) -> tuple[Symbol, ...]:
        """Tape contents from the leftmost to the rightmost non-blank cell.

        Blank cells at both outer ends are dropped, so an input ending in a blank does not project back unchanged.
        """
        tape = list(chain(reversed(trimmed(self.left)), iter_cells(self.right)))
        start = next((i for i, symbol in enumerate(tape) if not symbol.is_blank), len(tape))
        end = len(tape)
        while end > start and tape[end - 1].is_blank:
            end -= 1
        return tuple(tape[start:end])

    def _key(self) -> tuple[State, tuple[Symbol, ...], tuple[Symbol, ...]]:
        return self.state, trimmed(self.left), trimmed(self.right)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Configuration):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        left = " ".join(map(str, reversed(trimmed(self.left))))
        right = " ".join(map(str, trimmed(self.right)))
        return f"...{left} [{self.state}] {right}..."

    def __format__(self, format: str) -> str:
        if not format:
            return str(self)
        elif format == ">":
            return self.pretty()
        else:
            raise ValueError

    def pretty(self) -> str:
        left = ["[grey58]_[/]" if s.is_blank else str(s) for s in reversed(trimmed(self.left))]
        state = f"[cyan]\\[{self.state}][/]"
        right = ["[grey58]_[/]" if s.is_blank else str(s) for s in trimmed(self.right)]
        return f"...[grey58]_[/] {' '.join([*left, state, *right])} [grey58]_[/]..."

    @classmethod
    def parse(cls, data: str) -> Self:
        left, open, rest = data.strip(" .").partition("[")
        state, close, right = rest.partition("]")
        if not open or not close:
            raise ValueError(f"No bracketed state in TM configuration '{data}'")
        return cls.from_tape(
            parse_symbols(left.strip(" .")),
            parse_state(state.strip()),
            parse_symbols(right.strip(" .")),
        )
