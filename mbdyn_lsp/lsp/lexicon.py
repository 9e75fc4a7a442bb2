"""Static vocabulary of the MBDyn input language.

The catalog lists every completion label with its category.  Documentation
is looked up by exact label within a category; a few categories share one
text for all of their labels.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from lsprotocol.types import CompletionItemKind


class LexiconCategory(Enum):
    """Closed set of completion item categories carried in ``CompletionItem.data``."""

    STATEMENT = "statement"
    BUILTIN_TYPE = "builtin-type"
    KEYWORD = "keyword"
    DECLARATION_MODIFIER = "declaration-modifier"
    TYPE_MODIFIER = "type-modifier"
    BUILTIN_VARIABLE = "builtin-variable"
    BUILTIN_FUNCTION = "builtin-function"
    DIRECTIVE = "directive"
    DRIVE = "drive"

    @property
    def detail(self) -> str:
        return _DETAILS[self]

    @classmethod
    def from_data(cls, data: Any) -> Optional["LexiconCategory"]:
        if isinstance(data, cls):
            return data
        if isinstance(data, Mapping):
            data = data.get("category")
        try:
            return cls(data)
        except ValueError:
            return None


_DETAILS = {
    LexiconCategory.STATEMENT: "Statement",
    LexiconCategory.BUILTIN_TYPE: "Built-in type",
    LexiconCategory.KEYWORD: "Miscellaneous keywords",
    LexiconCategory.DECLARATION_MODIFIER: "Declaration modifier",
    LexiconCategory.TYPE_MODIFIER: "Type modifier",
    LexiconCategory.BUILTIN_VARIABLE: "Built-in variable",
    LexiconCategory.BUILTIN_FUNCTION: "Built-in function",
    LexiconCategory.DIRECTIVE: "Directive",
    LexiconCategory.DRIVE: "Drive",
}


@dataclass(frozen=True, slots=True)
class LexiconEntry:
    label: str
    category: LexiconCategory
    kind: CompletionItemKind = CompletionItemKind.Text


class Lexicon:
    """Read-only catalog plus documentation tables."""

    def __init__(
        self,
        entries: Iterable[LexiconEntry],
        documentation: Mapping[LexiconCategory, Mapping[str, str]],
        shared_documentation: Optional[Mapping[LexiconCategory, str]] = None,
    ) -> None:
        self._entries = tuple(entries)
        self._documentation = {category: dict(table) for category, table in documentation.items()}
        self._shared = dict(shared_documentation or {})

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> Tuple[LexiconEntry, ...]:
        return self._entries

    def documentation(self, category: LexiconCategory, label: str) -> Optional[str]:
        shared = self._shared.get(category)
        if shared is not None:
            return shared
        return self._documentation.get(category, {}).get(label)


def _doc(*lines: str) -> str:
    return "\n".join(lines)


def _entries(
    category: LexiconCategory,
    labels: Iterable[str],
    kind: CompletionItemKind = CompletionItemKind.Text,
) -> Tuple[LexiconEntry, ...]:
    return tuple(LexiconEntry(label=label, category=category, kind=kind) for label in labels)


CATALOG: Tuple[LexiconEntry, ...] = (
    _entries(LexiconCategory.STATEMENT, ("begin:", "end:", "set:", "include:"))
    + _entries(LexiconCategory.BUILTIN_TYPE, ("bool", "integer", "real", "string"))
    + _entries(
        LexiconCategory.KEYWORD,
        (
            "reference",
            "derivatives",
            "coefficient",
            "modified",
            "tolerance",
            "iterations",
            "newton raphson",
            "crank nicolson",
            "position",
            "orientation",
            "rotation",
            "constraint",
            "proportional",
            "viscoelastic",
            "dynamic",
            "static",
            "hydraulic",
            "direction",
            "compressible",
            "incompressible",
            "fluid",
            "skip initial joint assembly",
            "residual",
        ),
    )
    + _entries(LexiconCategory.DECLARATION_MODIFIER, ("ifndef",))
    + _entries(LexiconCategory.TYPE_MODIFIER, ("const",))
    + _entries(
        LexiconCategory.BUILTIN_VARIABLE,
        (
            "Time",
            "TimeStep",
            "Step",
            "Var",
            "e",
            "pi",
            "FALSE",
            "TRUE",
            "INT_MAX",
            "INT_MIN",
            "RAND_MAX",
            "REAL_MAX",
            "REAL_MIN",
            "in2m",
            "m2in",
            "in2mm",
            "mm2in",
            "ft2m",
            "m2ft",
            "lb2kg",
            "kg2lb",
            "deg2rad",
            "rad2deg",
            "slug2kg",
            "kg2slug",
        ),
    )
    + _entries(
        LexiconCategory.BUILTIN_FUNCTION,
        (
            "abs",
            "acos",
            "acosh",
            "actan",
            "actan2",
            "actanh",
            "asinh",
            "atanh",
            "asin",
            "atan",
            "atan2",
            "ceil",
            "copysign",
            "cos",
            "cosh",
            "ctan",
            "ctanh",
            "exp",
            "floor",
            "in_ee",
            "in_el",
            "in_le",
            "in_ll",
            "log",
            "log10",
            "max",
            "min",
            "par",
            "print",
            "ramp",
            "rand",
            "random",
            "round",
            "seed",
            "sign",
            "sin",
            "sinh",
            "sprintf",
            "sqrt",
            "sramp",
            "step",
            "stop",
            "tan",
            "tanh",
        ),
        kind=CompletionItemKind.Function,
    )
    + _entries(
        LexiconCategory.DIRECTIVE,
        (
            "constitutive law:",
            "c81 data:",
            "drive caller:",
            "hydraulic fluid:",
            "include:",
            "module load:",
            "reference:",
        ),
    )
    + _entries(LexiconCategory.DRIVE, ("direct", "time", "timestep", "unit"))
)

SHARED_DOCUMENTATION: Dict[LexiconCategory, str] = {
    LexiconCategory.BUILTIN_TYPE: _doc(
        "Specify variable type.",
        "Example:",
        "set: <type> name = value",
    ),
    LexiconCategory.DECLARATION_MODIFIER: _doc(
        "The ifndef modifier prevents the declaration from being overwritten if it has already been declared.",
        "Example:",
        "set: ifndef type name = value",
    ),
    LexiconCategory.TYPE_MODIFIER: _doc(
        "The const modifier prevents the declaration from being overwritten.",
        "Example:",
        "set: const type name = value",
    ),
}

DOCUMENTATION: Dict[LexiconCategory, Dict[str, str]] = {
    LexiconCategory.STATEMENT: {
        "begin:": "Begin block of code",
        "end:": "End block of code",
        "set:": _doc(
            "Set variable value for the rest of the text file.",
            "Example:",
            "set: type name = value",
        ),
        "reference:": "Begin reference definition",
        "include:": "Include statement. Allows to include the contents of file_name into the current input file.",
    },
    LexiconCategory.KEYWORD: {
        "reference": "Explicit reference to element",
    },
    LexiconCategory.BUILTIN_VARIABLE: {
        "Time": "Current simulation time",
        "TimeStep": "Current simulation time step",
        "Step": "Current simulation step",
        "Var": (
            "Set by dof, node, or element drive callers with degree of freedom value, "
            "node or element private data value, respectively"
        ),
        "e": "Neper’s number",
        "pi": "Pi constant",
        "FALSE": "Bool false constant",
        "TRUE": "Bool true constant",
        "INT_MAX": "Largest integer",
        "INT_MIN": "Smallest integer",
        "RAND_MAX": "Largest random integer",
        "REAL_MAX": "Largest real",
        "REAL_MIN": "Smallest real",
        "in2m": "Inch to meter ratio (0.0254)",
        "m2in": "Meter to inch ratio (1.0/0.0254)",
        "in2mm": "Inch to millimeter ratio (25.4)",
        "mm2in": "Millimeter to inch ratio (1.0/25.4)",
        "ft2m": "Foot to meter ratio (0.3048)",
        "m2ft": "Meter to foot ratio (1.0/0.3048)",
        "lb2kg": "Pound to kilogram ratio (0.45359237)",
        "kg2lb": "Kilogram to pound ratio (1.0/0.45359237)",
        "deg2rad": "Degree to radian ratio (π/180)",
        "rad2deg": "Radian to degree ratio (180/π)",
        "slug2kg": "Slug to kilogram ratio (14.5939)",
        "kg2slug": "Kilogram to slug ratio (1.0/14.5939)",
    },
    LexiconCategory.BUILTIN_FUNCTION: {
        "abs": "absolute value",
        "acos": "arc cosine",
        "acosh": "hyperbolic arc cosine",
        "actan": "arc co-tangent",
        "actan2": "(robust) arc co-tangent of y/x",
        "actanh": "hyperbolic arc co-tangent",
        "asinh": "hyperbolic arc sine",
        "atanh": "hyperbolic arc tangent",
        "asin": "arc sine",
        "atan": "arc tangent",
        "atan2": "(robust) arc tangent of y/x",
        "ceil": "closest integer from above",
        "copysign": "first arg with sign of second",
        "cos": "cosine",
        "cosh": "hyperbolic cosine",
        "ctan": "co-tangent",
        "ctanh": "hyperbolic co-tangent",
        "exp": "exponential",
        "floor": "closest integer from below",
        "in_ee": "true when arg1 ≤ arg2 ≤ arg3, false otherwise",
        "in_el": "true when arg1 ≤ arg2 < arg3, false otherwise",
        "in_le": "true when arg1 < arg2 ≤ arg3, false otherwise",
        "in_ll": "true when arg1 < arg2 < arg3, false otherwise",
        "log": "natural logarithm",
        "log10": "base 10 logarithm",
        "max": "returns the largest of the two inputs",
        "min": "returns the smallest of the two inputs",
        "par": "parabolic function",
        "print": "prints a value to standard output",
        "ramp": "ramp function",
        "rand": "random integer [0, RAND_MAX]",
        "random": "random real [-1.0, 1.0]",
        "round": "closest integer",
        "seed": "seeds the random number generator",
        "sign": "sign of a number",
        "sin": "sine",
        "sinh": "hyperbolic sine",
        "sprintf": _doc(
            "returns a string with value formatted according to format (string, any) -> string",
            "Examples:",
            'sprintf("%04d", 9); -> "0009"',
            'sprintf("0x%x", 255); -> Print an integer in hexadecimal format',
        ),
        "sqrt": "square root",
        "sramp": "saturated ramp function",
        "step": "step function",
        "stop": "stops and returns second arg if first is true (bool, integer) -> integer",
        "tan": "tangent",
        "tanh": "hyperbolic tangent",
    },
    LexiconCategory.DIRECTIVE: {
        "constitutive law:": (
            "Constitutive laws are grouped by their dimensionality dim, which (up to now) can be any of 1, 3 and 6."
        ),
        "c81 data:": "This keyword allows to define and read the c81 data airfoil tables that are used by aerodynamic elements.",
        "drive caller:": _doc(
            "Allows to define a drive caller that can be subsequently reused. It is useful essentially in two cases:",
            "a) to define a drive that will be used many times throughout a model;",
            "b) to define a drive that needs to be used in a later defined part of a model, in order to make it parametric.",
        ),
        "hydraulic fluid:": "Allows to define a hydraulic fluid to be later used in hydraulic elements",
        "include:": _doc(
            "Allows to include the contents of the file file_name, which must be a valid filename for the operating",
            'system in use. The file name must be enclosed in double quotes ("). The full (absolute or relative) path',
            "must be given if the included file is not in the directory of the including one.",
        ),
        "print symbol table:": _doc(
            "allows to print to standard output the contents of the parser’s symbol table at any stage of the input",
            "phase. This may be useful for model debugging purposes.",
        ),
        "reference:": "A reference system is declared and defined.",
    },
    LexiconCategory.DRIVE: {
        "direct": "Direct drive caller. Transparently returns the input value. The arglist is empty",
        "time": "Yields the current time. The arglist is empty",
        "timestep": "Yields the current timestep. The arglist is empty",
        "unit": "Always 1. The arglist is empty",
    },
}

DEFAULT_LEXICON = Lexicon(CATALOG, DOCUMENTATION, SHARED_DOCUMENTATION)


__all__ = [
    "CATALOG",
    "DEFAULT_LEXICON",
    "DOCUMENTATION",
    "Lexicon",
    "LexiconCategory",
    "LexiconEntry",
    "SHARED_DOCUMENTATION",
]
