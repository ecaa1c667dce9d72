import pytest

from tmsim.model import ACCEPT, BLANK, REJECT, START, Halt, Move, Symbol, TransitionStep, is_halting, parse_state


def test_blank_symbol():
    assert BLANK == Symbol()
    assert BLANK.is_blank
    assert not Symbol(1).is_blank
    assert str(BLANK) == "_"
    assert str(Symbol(12)) == "12"


def test_negative_symbol_is_invalid():
    with pytest.raises(ValueError):
        Symbol(-1)


@pytest.mark.parametrize(("text", "expected"), [("_", BLANK), ("1", Symbol(1)), ("17", Symbol(17))])
def test_symbol_parse(text: str, expected: Symbol):
    assert Symbol.parse(text) == expected


@pytest.mark.parametrize("text", ["0", "-1", "B", "", "x"])
def test_symbol_parse_rejects(text: str):
    with pytest.raises(ValueError):
        Symbol.parse(text)


def test_halting_states_are_distinct():
    assert ACCEPT != REJECT
    assert ACCEPT != 1
    assert REJECT != 1
    assert is_halting(ACCEPT)
    assert is_halting(REJECT)
    assert not is_halting(START)


@pytest.mark.parametrize(("text", "expected"), [("A", ACCEPT), ("R", REJECT), ("1", 1), ("q3", 3), ("qA", ACCEPT)])
def test_parse_state(text: str, expected):
    assert parse_state(text) == expected


@pytest.mark.parametrize("text", ["0", "H", "", "q"])
def test_parse_state_rejects(text: str):
    with pytest.raises(ValueError):
        parse_state(text)


def test_move_parse():
    assert Move.parse("L") is Move.L
    assert Move.parse("R") is Move.R
    with pytest.raises(ValueError):
        Move.parse("N")


def test_transition_step_unpacks():
    write, state, move = TransitionStep(Symbol(1), Halt.accept, Move.R)
    assert (write, state, move) == (1, ACCEPT, Move.R)


@pytest.mark.parametrize("value", [1.7, "1", None])
def test_non_int_symbol_is_invalid(value):
    with pytest.raises(TypeError):
        Symbol(value)
