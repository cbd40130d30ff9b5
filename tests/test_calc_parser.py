"""Tests for gridcalc.calc postfix compiler and CompiledExpression."""

from __future__ import annotations

import dataclasses

import pytest

from gridcalc._utils import Position
from gridcalc.calc._lexer import INVALID, CellRef, Number, Op, tokenize
from gridcalc.calc._parser import CompiledExpression, compile_formula, references, to_postfix


class TestToPostfix:
    def test_single_operand(self) -> None:
        assert to_postfix(tokenize("7")) == (Number(7),)

    def test_simple_addition(self) -> None:
        assert to_postfix(tokenize("3+4")) == (Number(3), Number(4), Op.ADD)

    def test_multiplication_binds_tighter(self) -> None:
        assert to_postfix(tokenize("2+3*4")) == (
            Number(2), Number(3), Number(4), Op.MUL, Op.ADD,
        )

    def test_tighter_operator_popped_first(self) -> None:
        assert to_postfix(tokenize("2*3+4")) == (
            Number(2), Number(3), Op.MUL, Number(4), Op.ADD,
        )

    def test_equal_precedence_left_to_right(self) -> None:
        assert to_postfix(tokenize("10-2-3")) == (
            Number(10), Number(2), Op.SUB, Number(3), Op.SUB,
        )

    def test_division_chain(self) -> None:
        assert to_postfix(tokenize("8/4*2")) == (
            Number(8), Number(4), Op.DIV, Number(2), Op.MUL,
        )

    def test_cell_operands(self) -> None:
        assert to_postfix(tokenize("A1-5")) == (
            CellRef(Position(0, 0)), Number(5), Op.SUB,
        )

    def test_empty_program(self) -> None:
        assert to_postfix(tokenize("")) == ()

    def test_invalid_fails_whole_compilation(self) -> None:
        assert to_postfix(tokenize("1+2*@")) is None

    def test_invalid_first(self) -> None:
        assert to_postfix([INVALID, Number(1)]) is None


class TestReferences:
    def test_first_appearance_order(self) -> None:
        program = to_postfix(tokenize("B2+A1*B2"))
        assert references(program) == [Position(1, 1), Position(0, 0)]

    def test_no_references(self) -> None:
        assert references(to_postfix(tokenize("1+2"))) == []

    def test_failed_compilation(self) -> None:
        assert references(None) == []


class TestCompileFormula:
    def test_keeps_text(self) -> None:
        expr = compile_formula("=A1 + 2")
        assert expr.text == "=A1 + 2"
        assert expr.body == "A1 + 2"
        assert str(expr) == "=A1 + 2"

    def test_ok(self) -> None:
        expr = compile_formula("=A1+2")
        assert expr.ok
        assert expr.program == (CellRef(Position(0, 0)), Number(2), Op.ADD)
        assert expr.references == [Position(0, 0)]

    def test_compile_error(self) -> None:
        expr = compile_formula("=A1+@")
        assert not expr.ok
        assert expr.program is None
        assert expr.references == []

    def test_requires_marker(self) -> None:
        with pytest.raises(ValueError, match="must start with"):
            compile_formula("A1+2")

    def test_compiling_twice_is_equal(self) -> None:
        assert compile_formula("=2+3*4") == compile_formula("=2+3*4")

    def test_immutable(self) -> None:
        expr = compile_formula("=1")
        with pytest.raises(dataclasses.FrozenInstanceError):
            expr.text = "=2"  # type: ignore[misc]

    def test_hashable(self) -> None:
        assert len({compile_formula("=1+1"), compile_formula("=1+1")}) == 1

    def test_direct_construction(self) -> None:
        expr = CompiledExpression("=bad", None)
        assert not expr.ok
