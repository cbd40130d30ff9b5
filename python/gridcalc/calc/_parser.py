"""Formula compiler: operator-precedence translation to a postfix program."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from gridcalc._utils import Position
from gridcalc.calc._errors import CalcError
from gridcalc.calc._evaluator import execute
from gridcalc.calc._lexer import CellRef, Invalid, Lexer, Number, Op, Token

if TYPE_CHECKING:
    from gridcalc.calc._protocol import CellSource

logger = logging.getLogger(__name__)

FORMULA_MARKER = "="

Instruction = Union[Number, CellRef, Op]
Program = tuple[Instruction, ...]


# ---------------------------------------------------------------------------
# Shunting-yard
# ---------------------------------------------------------------------------


def to_postfix(tokens: Iterable[Token]) -> Program | None:
    """Translate an infix token stream into postfix order.

    Operands go straight to the output.  Before an operator is pushed, every
    stacked operator that binds at least as tightly is popped to the output,
    which keeps equal-precedence chains left-associative.  There are no
    parentheses.

    Returns None as soon as an ``INVALID`` token shows up; no partial
    program is produced.
    """
    output: list[Instruction] = []
    stack: list[Op] = []

    for tok in tokens:
        if isinstance(tok, Invalid):
            return None
        if isinstance(tok, Op):
            while stack and stack[-1].precedence <= tok.precedence:
                output.append(stack.pop())
            stack.append(tok)
        else:
            output.append(tok)

    while stack:
        output.append(stack.pop())

    return tuple(output)


def references(program: Program | None) -> list[Position]:
    """Cell positions read by *program*, in first-appearance order."""
    if program is None:
        return []
    refs: list[Position] = []
    seen: set[Position] = set()
    for ins in program:
        if isinstance(ins, CellRef) and ins.position not in seen:
            refs.append(ins.position)
            seen.add(ins.position)
    return refs


# ---------------------------------------------------------------------------
# CompiledExpression
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CompiledExpression:
    """Formula text bundled with its compiled postfix program.

    ``program`` is None when the text failed to compile.  Instances are
    immutable and may be shared by any number of cells; the evaluation
    outcome lives in the owning cell, not here.
    """

    text: str
    program: Program | None

    @property
    def ok(self) -> bool:
        return self.program is not None

    @property
    def body(self) -> str:
        """Formula text without the leading marker."""
        return self.text[len(FORMULA_MARKER):]

    @property
    def references(self) -> list[Position]:
        return references(self.program)

    def execute(self, source: CellSource | None = None) -> int | CalcError:
        """Run the program against *source*; see :func:`execute`."""
        return execute(self.program, source)

    def __str__(self) -> str:
        return self.text


def compile_formula(text: str) -> CompiledExpression:
    """Compile formula text (including the leading ``=``).

    Tokenizing or compiling problems don't raise: the result carries a
    None program and executes to ``CalcError.COMPILE``.
    """
    if not text.startswith(FORMULA_MARKER):
        raise ValueError(f"Formula must start with {FORMULA_MARKER!r}: {text!r}")
    program = to_postfix(Lexer(text[len(FORMULA_MARKER):]))
    if program is None:
        logger.debug("Cannot compile formula %r", text)
    return CompiledExpression(text, program)
