"""
Runtime values for safecond.

An expression only ever produces or consumes two kinds of value:
``Number`` (an IEEE-754 double) and ``Boolean``. There is no null, string
or object kind. Coercions between the two are total and explicit.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from safecond.core.errors import UnsupportedVariableTypeError


class ValueKind(StrEnum):
    """Kinds a value (or a statically inferred expression) can have."""

    NUMBER = "number"
    BOOLEAN = "boolean"
    ANY = "any"


class Number(BaseModel):
    """A numeric value."""

    value: float = Field(description="IEEE-754 double")

    model_config = ConfigDict(frozen=True, strict=True)

    @property
    def kind(self) -> ValueKind:
        return ValueKind.NUMBER

    def __str__(self) -> str:
        return format_number(self.value)

    def __eq__(self, other: object) -> bool:
        # NaN never equals itself as a float; two NaN results are the same value.
        if not isinstance(other, Number):
            return NotImplemented
        if math.isnan(self.value) and math.isnan(other.value):
            return True
        return self.value == other.value

    def __hash__(self) -> int:
        if math.isnan(self.value):
            return hash((ValueKind.NUMBER, "nan"))
        return hash((ValueKind.NUMBER, self.value))


class Boolean(BaseModel):
    """A boolean value."""

    value: bool

    model_config = ConfigDict(frozen=True, strict=True)

    @property
    def kind(self) -> ValueKind:
        return ValueKind.BOOLEAN

    def __str__(self) -> str:
        return "true" if self.value else "false"


Value = Number | Boolean

# Environment is what the evaluator reads; callers build it with to_environment().
Environment = Mapping[str, Value]

TRUE = Boolean(value=True)
FALSE = Boolean(value=False)


def number(value: float) -> Number:
    return Number(value=float(value))


def boolean(value: bool) -> Boolean:
    return TRUE if value else FALSE


def to_number(value: Value) -> float:
    """Coerce to a float: booleans become 1.0 / 0.0."""
    if isinstance(value, Boolean):
        return 1.0 if value.value else 0.0
    return value.value


def to_boolean(value: Value) -> bool:
    """Coerce to a bool: any number other than 0 is true.

    NaN is true, matching its behaviour as a non-zero float.
    """
    if isinstance(value, Boolean):
        return value.value
    return value.value != 0


def to_python(value: Value) -> float | bool:
    """Unwrap a value into the matching Python scalar."""
    return value.value


def from_python(name: object, raw: object) -> Value:
    """Convert a caller-supplied variable into a Value.

    Raises:
        UnsupportedVariableTypeError: For anything other than bool, int,
            float or an already wrapped Number/Boolean.
    """
    if isinstance(raw, (Number, Boolean)):
        return raw
    # bool is checked before int: it is an int subclass
    if isinstance(raw, bool):
        return boolean(raw)
    if isinstance(raw, (int, float)):
        try:
            return number(raw)
        except OverflowError as e:
            raise UnsupportedVariableTypeError(name, "int (out of float range)") from e
    raise UnsupportedVariableTypeError(name, type(raw).__name__)


def to_environment(variables: Mapping[str, object] | None) -> dict[str, Value]:
    """Validate and convert a caller mapping into an evaluation environment.

    Every entry is checked, referenced or not, so a bad variable is
    reported no matter which expression the mapping is used with.
    """
    if variables is None:
        return {}
    if not isinstance(variables, Mapping):
        raise UnsupportedVariableTypeError("<variables>", type(variables).__name__)
    env: dict[str, Value] = {}
    for name, raw in variables.items():
        if not isinstance(name, str):
            raise UnsupportedVariableTypeError(name, f"key of type {type(name).__name__}")
        env[name] = from_python(name, raw)
    return env


def format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)
