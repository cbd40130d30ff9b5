"""Stack machine that executes compiled postfix programs.

Programs come from :func:`gridcalc.calc.compile_formula`.  Execution is
read-only with respect to the cell source; every failure is returned as a
:class:`CalcError` value instead of raised, so a broken formula only ever
affects its own cell.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gridcalc.calc._errors import CalcError
from gridcalc.calc._lexer import INT64_MAX, INT64_MIN, CellRef, Number, Op

if TYPE_CHECKING:
    from gridcalc.calc._parser import Program
    from gridcalc.calc._protocol import CellSource

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Integer arithmetic
# ---------------------------------------------------------------------------


def _binary_op(left: int, op: Op, right: int) -> int | CalcError:
    """Apply *op* with signed 64-bit semantics.

    Division truncates toward zero.  A zero divisor gives ``DIV0`` and a
    result that doesn't fit 64 bits gives ``OVERFLOW``.
    """
    if op is Op.ADD:
        result = left + right
    elif op is Op.SUB:
        result = left - right
    elif op is Op.MUL:
        result = left * right
    else:
        if right == 0:
            return CalcError.DIV0
        result = abs(left) // abs(right)
        if (left < 0) != (right < 0):
            result = -result
    if not INT64_MIN <= result <= INT64_MAX:
        return CalcError.OVERFLOW
    return result


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------


def execute(program: Program | None, source: CellSource | None = None) -> int | CalcError:
    """Execute a postfix *program*, resolving cell operands through *source*.

    - A failed compilation (``None`` program) gives ``COMPILE``.
    - A cell operand with no *source* to resolve it gives ``NOT_IMPLEMENTED``.
    - A cell operand whose cell has no numeric value gives ``CELL_NOT_FOUND``.
    - An operator short of two operands, or an empty final stack, gives
      ``OUT_OF_STACK``.

    The result is the value left on top of the stack.
    """
    if program is None:
        return CalcError.COMPILE

    stack: list[int] = []
    for ins in program:
        if isinstance(ins, Number):
            stack.append(ins.value)
        elif isinstance(ins, CellRef):
            if source is None:
                return CalcError.NOT_IMPLEMENTED
            val = source.value(ins.position)
            if val is None:
                logger.debug("Unresolved reference to %s", ins.position)
                return CalcError.CELL_NOT_FOUND
            stack.append(val)
        else:
            if len(stack) < 2:
                return CalcError.OUT_OF_STACK
            # Postfix keeps source operand order: the right operand is on top.
            right = stack.pop()
            left = stack.pop()
            result = _binary_op(left, ins, right)
            if isinstance(result, CalcError):
                return result
            stack.append(result)

    if not stack:
        return CalcError.OUT_OF_STACK
    return stack[-1]
