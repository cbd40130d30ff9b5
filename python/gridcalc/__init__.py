"""gridcalc - integer spreadsheet formula engine.

Usage::

    from gridcalc import Sheet

    sheet = Sheet()
    sheet["A1"] = 5
    sheet["B1"] = "=A1+1"
    print(sheet.value("B1"))  # 6
    print(sheet.entry("B1"))  # =A1+1

    sheet["A1"] = "=B1"  # circular: cached as CalcError.CYCLIC
    print(sheet["A1"].result)
"""

from gridcalc._cell import EMPTY, Cell, Empty, Formula, Text, Value, parse_entry
from gridcalc._config import SheetConfig
from gridcalc._sheet import Sheet
from gridcalc._utils import Position
from gridcalc.calc import CalcError, CompiledExpression, compile_formula, is_error

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "EMPTY",
    "CalcError",
    "Cell",
    "CompiledExpression",
    "Empty",
    "Formula",
    "Position",
    "Sheet",
    "SheetConfig",
    "Text",
    "Value",
    "compile_formula",
    "is_error",
    "parse_entry",
]
