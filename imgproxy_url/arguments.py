"""
Argument textualization for processing options.

Every processing option renders its arguments through this module so
that the same primitive always produces the same text:

- int: decimal, no padding
- bool: "true" / "false"
- str: verbatim, no escaping
- float: shortest round-trippable decimal ("0.5", "200", "1e-05")
- Enum: its value
- None: empty argument
- anything exposing arguments(): its own arguments, joined

Fixed precision (gravity focus point, background alpha) is requested
explicitly through format_fixed().
"""

from enum import Enum
from typing import Any, ClassVar, Iterable, List, Tuple

ARGUMENT_SEPARATOR = ":"


class RenderableOption:
    """
    Shared render() for processing options.

    Concrete options declare a class-level key and an arguments() method
    that validates and returns the argument list in positional order.
    """

    key: ClassVar[str]

    def arguments(self) -> List[Any]:
        raise NotImplementedError

    def render(self) -> Tuple[str, str]:
        """Return (key, argument-string) for this option."""
        return self.key, join_arguments(self.arguments())


def format_float(value: float) -> str:
    """Shortest decimal that round-trips, without a trailing '.0'."""
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def format_fixed(value: float, decimals: int = 3) -> str:
    """Fixed-precision decimal, e.g. format_fixed(0.25) == '0.250'."""
    return f"{float(value):.{decimals}f}"


def format_argument(value: Any) -> str:
    """Render a single argument to its textual form."""
    # bool must be checked before int
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format_float(value)
    if isinstance(value, str):
        return value
    if hasattr(value, "arguments"):
        return join_arguments(value.arguments())
    return str(value)


def join_arguments(arguments: Iterable[Any]) -> str:
    """Render and join arguments with ':'. No arguments renders as ''."""
    return ARGUMENT_SEPARATOR.join(format_argument(argument) for argument in arguments)
