"""Object key computation from the printf-style ``sequence_format``.

Templates follow ``java.util.Formatter`` rules for integer arguments so
existing job files keep producing the same keys:

- ``%d``-style conversions consume the task index, then the file index;
- ``%2$d`` selects an argument explicitly and ``%<d`` reuses the previous one;
- surplus arguments are ignored, so ``""`` or ``".%03d"`` are valid;
- supported conversions are ``d o x X s S b B h H c C % n``;
- a missing argument, an unknown conversion, a precision on ``d o x c``, a
  ``-`` or ``0`` flag without a width, or a flag the conversion does not
  accept (``%#d``, ``%+x``, ``%,o``, ``%0s`` ...) is an error.
"""

import os
import re
from typing import Optional

from s3fileoutput.core.exceptions import ConfigurationError

DEFAULT_SEQUENCE_FORMAT = ".%03d.%02d"

_SPECIFIER = re.compile(
    r"%(?:(?P<index>\d+)\$)?"
    r"(?P<flags>[-#+ 0,(<]*)"
    r"(?P<width>\d+)?"
    r"(?:\.(?P<precision>\d+))?"
    r"(?P<conversion>[a-zA-Z%])"
)

_CONVERSIONS = frozenset("doxXsSbBhHcC")

# Flags rejected per conversion when the argument is an Integer
_BAD_FLAGS = {
    "d": "#",
    "o": ",+ (",
    "x": ",+ (",
    "c": "#+ 0,(",
    "s": "#+ 0,(",
    "b": "#+ 0,(",
    "h": "#+ 0,(",
}

_MAX_CODE_POINT = 0x10FFFF


class SequenceFormatError(ValueError):
    """Raised when a sequence format cannot be applied."""


def format_sequence(sequence_format: str, task_index: int, file_index: int) -> str:
    """Apply ``sequence_format`` to ``(task_index, file_index)``."""
    args = (task_index, file_index)
    pieces: list[str] = []
    ordinary = 0
    last: Optional[int] = None
    position = 0

    for match in _SPECIFIER.finditer(sequence_format):
        pieces.append(_literal(sequence_format[position : match.start()]))
        position = match.end()

        directive = match.group(0)
        conversion = match.group("conversion")
        flags = match.group("flags")
        width = int(match.group("width")) if match.group("width") else None
        precision = match.group("precision")

        if len(set(flags)) != len(flags):
            raise SequenceFormatError(f"Duplicate flags in '{directive}'")

        if conversion in "%n":
            pieces.append(_text(directive, conversion, flags, width, precision))
            continue

        _check(directive, conversion, flags, width, precision)

        index = match.group("index")
        if "<" in flags:
            if last is None:
                raise SequenceFormatError(
                    f"No previous argument for '{directive}'"
                )
            arg_position = last
        elif index is not None:
            arg_position = int(index) - 1
            if arg_position < 0:
                raise SequenceFormatError(
                    f"Illegal argument index in '{directive}'"
                )
        else:
            arg_position = ordinary
            ordinary += 1
        if arg_position >= len(args):
            raise SequenceFormatError(f"Missing argument for '{directive}'")
        last = arg_position

        text = _render(
            directive, conversion, flags, width, precision, args[arg_position]
        )
        pieces.append(_justify(text, flags, width))

    pieces.append(_literal(sequence_format[position:]))
    return "".join(pieces)


def _literal(text: str) -> str:
    if "%" in text:
        raise SequenceFormatError(f"Malformed format specifier near '{text}'")
    return text


def _text(
    directive: str,
    conversion: str,
    flags: str,
    width: Optional[int],
    precision: Optional[str],
) -> str:
    if precision is not None:
        raise SequenceFormatError(f"Precision is not allowed for '{directive}'")
    if conversion == "n":
        if flags or width is not None:
            raise SequenceFormatError(
                f"Flags and width are not allowed for '{directive}'"
            )
        return os.linesep
    if flags.replace("-", ""):
        raise SequenceFormatError(f"Illegal flags in '{directive}'")
    if "-" in flags and width is None:
        raise SequenceFormatError(f"Missing width in '{directive}'")
    return _justify("%", flags, width)


def _check(
    directive: str,
    conversion: str,
    flags: str,
    width: Optional[int],
    precision: Optional[str],
) -> None:
    if conversion not in _CONVERSIONS:
        raise SequenceFormatError(
            f"Unknown conversion '{conversion}' in '{directive}'"
        )

    kind = conversion.lower()
    if precision is not None and kind in "doxc":
        raise SequenceFormatError(f"Precision is not allowed for '{directive}'")
    if width is None and ("-" in flags or "0" in flags):
        raise SequenceFormatError(f"Missing width in '{directive}'")
    if ("+" in flags and " " in flags) or ("-" in flags and "0" in flags):
        raise SequenceFormatError(f"Illegal flag combination in '{directive}'")

    for flag in flags:
        if flag in _BAD_FLAGS[kind]:
            raise SequenceFormatError(
                f"Flag '{flag}' does not apply to '{directive}'"
            )


def _render(
    directive: str,
    conversion: str,
    flags: str,
    width: Optional[int],
    precision: Optional[str],
    value: int,
) -> str:
    kind = conversion.lower()
    if kind == "d":
        text = _decimal(value, flags, width)
    elif kind in "ox":
        text = _unsigned(value, kind, flags, width)
    elif kind == "c":
        if not 0 <= value <= _MAX_CODE_POINT:
            raise SequenceFormatError(
                f"Illegal code point {value} for '{directive}'"
            )
        text = chr(value)
    else:
        if kind == "b":
            text = "true"
        elif kind == "h":
            text = format(value & 0xFFFFFFFF, "x")
        else:
            text = str(value)
        if precision is not None:
            text = text[: int(precision)]
    return text.upper() if conversion.isupper() else text


def _decimal(value: int, flags: str, width: Optional[int]) -> str:
    digits = f"{abs(value):,}" if "," in flags else str(abs(value))
    if value < 0:
        sign, suffix = ("(", ")") if "(" in flags else ("-", "")
    else:
        sign = "+" if "+" in flags else " " if " " in flags else ""
        suffix = ""
    # zeros go between the sign and the digits, grouping separators are not added
    if "0" in flags:
        digits = digits.rjust(width - len(sign) - len(suffix), "0")
    return sign + digits + suffix


def _unsigned(value: int, kind: str, flags: str, width: Optional[int]) -> str:
    if value < 0:
        value &= 0xFFFFFFFF
    digits = format(value, kind)
    prefix = ("0" if kind == "o" else "0x") if "#" in flags else ""
    if "0" in flags:
        digits = digits.rjust(width - len(prefix), "0")
    return prefix + digits


def _justify(text: str, flags: str, width: Optional[int]) -> str:
    if width is None or len(text) >= width:
        return text
    if "-" in flags:
        return text.ljust(width)
    return text.rjust(width)


def build_key(
    path_prefix: str,
    sequence_format: str,
    task_index: int,
    file_index: int,
    file_ext: str,
) -> str:
    """Compose the object key for one output unit."""
    sequence = format_sequence(sequence_format, task_index, file_index)
    return path_prefix + sequence + file_ext


def validate_sequence_format(sequence_format: str) -> None:
    """Reject a template that cannot format ``(0, 0)``.

    Raises:
        ConfigurationError: If the template is invalid.
    """
    try:
        format_sequence(sequence_format, 0, 0)
    except SequenceFormatError as e:
        raise ConfigurationError(
            "Invalid sequence_format: parameter for file output plugin",
            context={"sequence_format": sequence_format, "error": str(e)},
        ) from e
