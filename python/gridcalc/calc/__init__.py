"""gridcalc.calc - Formula compiler, evaluator and dependency graph."""

from gridcalc.calc._errors import CalcError, is_error
from gridcalc.calc._evaluator import execute
from gridcalc.calc._graph import DependencyGraph
from gridcalc.calc._lexer import INVALID, CellRef, Lexer, Number, Op, tokenize
from gridcalc.calc._parser import CompiledExpression, compile_formula, references, to_postfix
from gridcalc.calc._protocol import CellDelta, CellSource, RecalcResult

__all__ = [
    "INVALID",
    "CalcError",
    "CellDelta",
    "CellRef",
    "CellSource",
    "CompiledExpression",
    "DependencyGraph",
    "Lexer",
    "Number",
    "Op",
    "RecalcResult",
    "compile_formula",
    "execute",
    "is_error",
    "references",
    "to_postfix",
    "tokenize",
]
