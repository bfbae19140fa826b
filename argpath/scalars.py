"""
Scalar codec: string -> bool / int / float / str conversions.

Kinds
- a destination is a scalar when its annotation is (a subclass of) bool, int, float
  or str, optionally wrapped in Annotated[..., Bits(...)] to pin a width:

    >>> parse_int("0x7f", 8)
    127
    >>> unmarshal_scalar("300", Uint8)
    Traceback (most recent call last):
    ValueError: parsing '300': value out of range

- subclasses are rebuilt from the parsed value, so enumerations validate
  membership (a StrEnum field rejects unknown literals) and IntEnum fields resolve
  to their members.

Grammar
- integers: optional sign (signed widths only), then decimal, 0x / 0b / 0o prefixed
  or legacy 0-prefixed octal digits; single underscores may separate digits or
  follow a base prefix; no surrounding whitespace.
- floats: decimal or exponent notation, hexadecimal mantissa with binary exponent,
  inf / infinity / nan (any case).
- booleans: "" and "true" are True, "false" is False. Nothing else is accepted,
  "TRUE" included.
- text: passed through unchanged.

Widths
- integers: 8, 16, 32 or 64 bits; 0 (the default) is the platform word size.
- floats: 32 or 64 bits; 32-bit values are rounded to single precision.
"""
import math
import re
import struct
import sys
from typing import Annotated, NamedTuple, get_args, get_origin

from .faults import UnmarshalableTypeError
from .utils import isclass, typename

# width used when an integer is declared without an explicit one
PLATFORM_WIDTH = sys.maxsize.bit_length() + 1

_INTEGER = re.compile(r"""
    (?P<sign>[+-]?)
    (?:
        0[xX](?P<hex>(?:_?[0-9a-fA-F])+)
      | 0[bB](?P<bin>(?:_?[01])+)
      | 0[oO](?P<oct>(?:_?[0-7])+)
      | (?P<legacy>0(?:_?[0-7])*)
      | (?P<dec>[1-9](?:_?[0-9])*)
    )
""", re.VERBOSE)

_BASES = (("hex", 16), ("bin", 2), ("oct", 8), ("legacy", 8), ("dec", 10))

_HEX_FLOAT = re.compile(r"[+-]?0[xX][0-9a-fA-F_.]+(?:[pP][+-]?[0-9]+)?")

_INFINITY = re.compile(r"[+-]?inf(?:inity)?", re.IGNORECASE)


class Bits:
    """
    Width marker for Annotated scalar aliases.

    Parameters
    - width: 0 (platform default), 8, 16, 32 or 64.
    - signed: whether negative integers are accepted (ignored for floats).
    """
    __slots__ = ("width", "signed")

    def __init__(self, width=0, /, *, signed=True):
        if not isinstance(width, int) or width not in (0, 8, 16, 32, 64):
            raise ValueError("bits width must be one of 0, 8, 16, 32 or 64")
        self.width = width
        self.signed = bool(signed)

    def __eq__(self, other):
        if not isinstance(other, Bits):
            return NotImplemented
        return (self.width, self.signed) == (other.width, other.signed)

    def __hash__(self):
        return hash((Bits, self.width, self.signed))

    def __repr__(self):
        return "Bits(%d%s)" % (self.width, "" if self.signed else ", signed=False")


class Scalar(NamedTuple):
    type: type
    kind: type
    width: int
    signed: bool


Int = Annotated[int, Bits(0)]
Int8 = Annotated[int, Bits(8)]
Int16 = Annotated[int, Bits(16)]
Int32 = Annotated[int, Bits(32)]
Int64 = Annotated[int, Bits(64)]
Uint = Annotated[int, Bits(0, signed=False)]
Uint8 = Annotated[int, Bits(8, signed=False)]
Uint16 = Annotated[int, Bits(16, signed=False)]
Uint32 = Annotated[int, Bits(32, signed=False)]
Uint64 = Annotated[int, Bits(64, signed=False)]
Float32 = Annotated[float, Bits(32)]
Float64 = Annotated[float, Bits(64)]


def scalar_kind(annotation, /):
    """
    Classify an annotation as a scalar, or return None.

    bool is checked before int (bool is an int subclass). Float widths other
    than 32/64 are not scalars.
    """
    metadata = ()
    if get_origin(annotation) is Annotated:
        annotation, *metadata = get_args(annotation)
    if not isclass(annotation):
        return None
    bits = next((item for item in metadata if isinstance(item, Bits)), Bits())

    for kind in (bool, int, float, str):
        if issubclass(annotation, kind):
            break
    else:
        return None

    if kind is float:
        width = bits.width or 64
        if width not in (32, 64):
            return None
    elif kind is int:
        width = bits.width or PLATFORM_WIDTH
    else:
        width = 0
    return Scalar(annotation, kind, width, bits.signed)


def parse_int(value, width=0, /, *, signed=True):
    if not isinstance(value, str):
        raise TypeError("parse_int() argument must be a string")
    match = _INTEGER.fullmatch(value)
    if match is None or (match["sign"] and not signed):
        raise ValueError("parsing %r: invalid syntax" % value)

    for group, base in _BASES:
        if (digits := match[group]) is not None:
            break
    number = int(digits.replace("_", ""), base)
    if match["sign"] == "-":
        number = -number

    width = width or PLATFORM_WIDTH
    if signed:
        low, high = -(1 << (width - 1)), (1 << (width - 1)) - 1
    else:
        low, high = 0, (1 << width) - 1
    if not low <= number <= high:
        raise ValueError("parsing %r: value out of range" % value)
    return number


def parse_float(value, width=64, /):
    if not isinstance(value, str):
        raise TypeError("parse_float() argument must be a string")
    if width not in (32, 64):
        raise ValueError("float width must be 32 or 64")

    try:
        if _HEX_FLOAT.fullmatch(value):
            number = float.fromhex(value.replace("_", ""))
        elif "_" in value or not value.isascii() or value != value.strip():
            raise ValueError(value)
        else:
            number = float(value)
    except OverflowError:
        raise ValueError("parsing %r: value out of range" % value) from None
    except ValueError:
        raise ValueError("parsing %r: invalid syntax" % value) from None

    if math.isinf(number) and not _INFINITY.fullmatch(value):
        raise ValueError("parsing %r: value out of range" % value)

    if width == 32 and math.isfinite(number):
        try:
            number, = struct.unpack("f", struct.pack("f", number))
        except OverflowError:
            raise ValueError("parsing %r: value out of range" % value) from None
    return number


def parse_bool(value, /):
    match value:
        case "" | "true":
            return True
        case "false":
            return False
        case _:
            raise ValueError("invalid boolean value")


def unmarshal_scalar(value, annotation, /):
    """
    Convert value to the scalar described by annotation.

    Raises
    - ValueError: the literal does not fit the kind/width (wrapped by the caller).
    - UnmarshalableTypeError: annotation is not a scalar; callers must only reach
      this function for terminal scalar destinations.
    """
    if (scalar := scalar_kind(annotation)) is None:
        raise UnmarshalableTypeError(
            "type %s cannot be unmarshaled from a single value" % typename(annotation),
            type=annotation,
        )

    if scalar.kind is bool:
        parsed = parse_bool(value)
    elif scalar.kind is int:
        parsed = parse_int(value, scalar.width, signed=scalar.signed)
    elif scalar.kind is float:
        parsed = parse_float(value, scalar.width)
    else:
        parsed = value

    if scalar.type is scalar.kind:
        return parsed
    return scalar.type(parsed)


__all__ = (
    "PLATFORM_WIDTH",
    "Bits",
    "Scalar",
    "Int",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "Float32",
    "Float64",
    "scalar_kind",
    "parse_int",
    "parse_float",
    "parse_bool",
    "unmarshal_scalar",
)
