from collections.abc import Callable
from enum import Enum, IntEnum
from typing import Final, NamedTuple, Self, TypeAlias


class Symbol(int):
    __slots__ = ()

    def __new__(cls, value: int = 0) -> Self:
        if not isinstance(value, int):
            raise TypeError(f"Symbol must be an int, got {value!r}")
        if value < 0:
            raise ValueError(f"Symbol {value} is neither blank nor positive")
        return super().__new__(cls, value)

    @property
    def is_blank(self) -> bool:
        return self == 0

    def __str__(self) -> str:
        return "_" if self.is_blank else str(int(self))

    def __repr__(self) -> str:
        return f"Symbol({int(self)})"

    @classmethod
    def parse(cls, val: str) -> Self:
        match val:
            case "_":
                return cls(0)
            case _ if val.isdecimal() and int(val) > 0:
                return cls(int(val))
            case _:
                raise ValueError(f"Invalid symbol '{val}'")


BLANK: Final = Symbol(0)


class Halt(Enum):
    accept = "A"
    reject = "R"

    def __str__(self) -> str:
        return self.value


ACCEPT: Final = Halt.accept
REJECT: Final = Halt.reject
START: Final = 1

State: TypeAlias = int | Halt


def is_halting(state: State) -> bool:
    return isinstance(state, Halt)


def parse_state(val: str) -> State:
    match val.removeprefix("q"):
        case "A" | "R" as halt:
            return Halt(halt)
        case num if num.isdecimal() and int(num) > 0:
            return int(num)
        case _:
            raise ValueError(f"Invalid state '{val}'")


class Move(IntEnum):
    L = -1
    R = 1

    @classmethod
    def parse(cls, val: str) -> Self:
        match val:
            case "L" | "R":
                return getattr(cls, val)
            case _:
                raise ValueError(f"Invalid move '{val}'")


class TransitionStep(NamedTuple):
    write: Symbol
    state: State
    move: Move


TransitionFunction: TypeAlias = Callable[[int, Symbol], TransitionStep]
