"""
Built-in domain decoders, registered on the global registry at import.

- Size: byte quantities given in decimal gigabytes ("10G", "10GB", "1.5gb").
- ipaddress literals: addresses, networks (CIDR) and interfaces, v4 and v6.
- streams: TextIO / IO[str] read the value as text, BinaryIO / IO[bytes] as UTF-8 bytes.

Any of these can be overridden with register_decoder() (last registration wins).
"""
import io
import ipaddress
import re
from typing import IO, BinaryIO, TextIO

from .registry import register_decoder
from .utils import rename

# decimal multipliers of the only accepted units
SIZE_UNITS = {
    "g": 1000 ** 3,
    "gb": 1000 ** 3,
}

MAX_SIZE = 1 << 64

_SIZE_NUMBER = re.compile(r"[0-9.,]*")


class Size(int):
    """
    A quantity of bytes.

    Sizes are given in gigabytes using decimal units: Size 10G == 10 * 1000**3.
    """

    def __repr__(self):
        return "Size(%d)" % self


@register_decoder(Size)
def parse_size(value, /):
    """
    Parse a size literal expressed in G or GB (case-insensitive).

    The number may be fractional and may carry ',' thousands separators; blanks
    are allowed between the number and the unit.
    """
    value = value.lower()
    if not value.endswith(("g", "gb")):
        raise ValueError("size must be defined using the G or GB unit")

    number = _SIZE_NUMBER.match(value).group()
    unit = value[len(number):].strip()
    try:
        quantity = float(number.replace(",", ""))
    except ValueError:
        raise ValueError("invalid size %r" % value) from None

    if (multiplier := SIZE_UNITS.get(unit)) is None:
        raise ValueError("unhandled size name: %s" % unit)
    if (quantity := quantity * multiplier) >= MAX_SIZE:
        raise ValueError("too large: %s" % value)
    return Size(quantity)


for _type in (ipaddress.IPv4Address, ipaddress.IPv6Address, ipaddress.IPv4Interface, ipaddress.IPv6Interface):
    register_decoder(_type, _type)

for _type in (ipaddress.IPv4Network, ipaddress.IPv6Network):
    # host bits are masked off instead of rejected ("10.0.0.7/24" -> 10.0.0.0/24)
    register_decoder(_type, rename(lambda value, _type=_type: _type(value, strict=False), "parse_" + _type.__name__))


def parse_text_stream(value, /):
    return io.StringIO(value)


def parse_binary_stream(value, /):
    return io.BytesIO(value.encode())


register_decoder(TextIO, parse_text_stream)
register_decoder(IO[str], parse_text_stream)
register_decoder(BinaryIO, parse_binary_stream)
register_decoder(IO[bytes], parse_binary_stream)

del _type


__all__ = (
    "SIZE_UNITS",
    "Size",
    "parse_size",
    "parse_text_stream",
    "parse_binary_stream",
)
