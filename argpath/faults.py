"""
argpath faults (unmarshaling errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every class of malformed
  input. Codes are grouped by domain to keep copy consistent and make
  logs/searches predictable.
- UnmarshalException: base type that carries a message + options (the context of
  the fault: offending index, destination, type...) and knows how to render itself
  in a friendly, lowercased, and actionable way.
- ArgumentError: the single wrapper surfaced by unmarshal(); it attaches the
  offending name/value pair to the fault detected deep in the resolver.
- trigger(): central entry point to surface a fault (respecting shell/fancy/colorful).

Inspection
- every option given at construction is readable as an attribute:
    >>> error = InvalidIndexError("...", index="x")
    >>> error.index
    'x'
- callers should match on the exception class (or `error.code`), never on the text.

Integration
- the command layer calls unmarshal() and either inspects the ArgumentError it
  raises or hands it to trigger(error, shell=True) to print it and exit.
- the host application may customize rendering through __main__:
  __prog__ (program name), __styles__ (rich styles), __codes__ (code labels).
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from pathlib import Path
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the unmarshaler (stable identifiers).

    grouping (by high-level domain)
    - wrapper (2100x)
      • ARGUMENT_ERROR
    - argument names (2110x)
      • INVALID_ARGUMENT_NAME, UNKNOWN_ARGUMENT_NAME, DUPLICATE_ARGUMENT_NAME
    - destinations (2120x)
      • INVALID_DESTINATION, UNMARSHALABLE_TYPE
    - paths (213xx)
      • MISSING_INDEX, INVALID_INDEX, MISSING_INTERMEDIATE_INDICES (sequences)
      • MISSING_MAP_KEY (mappings)
      • MISSING_FIELD, UNKNOWN_FIELD (records)
      • NESTED_FIELD_ON_TERMINAL (leaves)
    - values (2140x)
      • CANNOT_UNMARSHAL_VALUE
    """
    # --- wrapper (210xx) ---
    ARGUMENT_ERROR                  = 21001

    # --- argument name errors (211xx) ---
    INVALID_ARGUMENT_NAME           = 21101
    UNKNOWN_ARGUMENT_NAME           = 21102
    DUPLICATE_ARGUMENT_NAME         = 21103

    # --- destination errors (212xx) ---
    INVALID_DESTINATION             = 21201
    UNMARSHALABLE_TYPE              = 21202

    # --- path errors (213xx) ---
    MISSING_INDEX                   = 21301
    INVALID_INDEX                   = 21302
    MISSING_INTERMEDIATE_INDICES    = 21303
    MISSING_MAP_KEY                 = 21311
    MISSING_FIELD                   = 21321
    UNKNOWN_FIELD                   = 21322
    NESTED_FIELD_ON_TERMINAL        = 21331

    # --- value errors (214xx) ---
    CANNOT_UNMARSHAL_VALUE          = 21401

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class UnmarshalException(Exception):
    """
    base class of every argpath fault.

    class-level defaults (overridable per instance through options)
    - __fault__: FaultCode of the kind.
    - __title__: short title used by renderers.
    - __hint__: one-sentence actionable hint.
    """
    __fault__ = Unset
    __title__ = "unmarshal error"
    __hint__ = Unset

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError("%s message must be a string" % type(self).__name__)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __getattr__(self, name):
        # only reached when regular lookup fails: expose the fault context
        try:
            return self.__dict__["options"][name]
        except KeyError:
            raise AttributeError(
                "%r object has no attribute %r" % (type(self).__name__, name)
            ) from None

    def __str__(self):
        return self.message

    def __reduce__(self):
        return _restore, (type(self), self.message, dict(self.options))

    @property
    def code(self):
        return self.options.get("code", type(self).__fault__)

    @property
    def title(self):
        return self.options.get("title", type(self).__title__)

    @property
    def hint(self):
        return self.options.get("hint", type(self).__hint__)

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", False)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style] if colorful else "")

        prog = text(getattr(main, "__prog__", Path(sys.argv[0]).name or "argpath"), "prog-name")
        code = self.code.normalize() if isinstance(self.code, FaultCode) else "-"

        header = Text.assemble("[ ", prog, " — ", text(code, "code"), " | ", text(self.title.title(), "error-title"), " ]")
        message = text(self.message, "error-message")

        renders = [message]
        if self.hint:
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(self.hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


def _restore(cls, message, options):
    return cls(message, **options)


class InvalidArgumentNameError(UnmarshalException):
    __fault__ = FaultCode.INVALID_ARGUMENT_NAME
    __title__ = "invalid argument name"
    __hint__ = "argument names are words made of letters, digits and hyphens, joined by dots (e.g. 'offer.size')"


class UnknownArgumentNameError(UnmarshalException):
    __fault__ = FaultCode.UNKNOWN_ARGUMENT_NAME
    __title__ = "unknown argument"
    __hint__ = "this looks like an id; pass it through the matching id argument (e.g. 'server-id=<uuid>')"


class DuplicateArgumentNameError(UnmarshalException):
    __fault__ = FaultCode.DUPLICATE_ARGUMENT_NAME
    __title__ = "duplicate argument"
    __hint__ = "pass each argument only once"


class InvalidDestinationError(UnmarshalException):
    __fault__ = FaultCode.INVALID_DESTINATION
    __title__ = "invalid destination"
    __hint__ = "unmarshal into a dataclass instance or a mutable mapping"


class UnmarshalableTypeError(UnmarshalException):
    __fault__ = FaultCode.UNMARSHALABLE_TYPE
    __title__ = "unmarshalable type"
    __hint__ = "register a decoder for this type or use a supported container"


class MissingIndexError(UnmarshalException):
    __fault__ = FaultCode.MISSING_INDEX
    __title__ = "missing index"
    __hint__ = "address list items by position (e.g. 'tags.0=value')"


class InvalidIndexError(UnmarshalException):
    __fault__ = FaultCode.INVALID_INDEX
    __title__ = "invalid index"
    __hint__ = "list indices are non-negative decimal integers"


class MissingIntermediateIndicesError(UnmarshalException):
    __fault__ = FaultCode.MISSING_INTERMEDIATE_INDICES
    __title__ = "missing indices"
    __hint__ = "list items must be given in order, starting from 0"


class MissingMapKeyError(UnmarshalException):
    __fault__ = FaultCode.MISSING_MAP_KEY
    __title__ = "missing key"
    __hint__ = "address mapping entries by key (e.g. 'labels.env=prod')"


class MissingFieldError(UnmarshalException):
    __fault__ = FaultCode.MISSING_FIELD
    __title__ = "missing field"
    __hint__ = "set one of the nested fields instead (e.g. 'offer.size=10G')"


class UnknownFieldError(UnmarshalException):
    __fault__ = FaultCode.UNKNOWN_FIELD
    __title__ = "unknown argument"
    __hint__ = "check the spelling of the argument name"


class NestedFieldOnTerminalError(UnmarshalException):
    __fault__ = FaultCode.NESTED_FIELD_ON_TERMINAL
    __title__ = "cannot set nested field"
    __hint__ = "this argument takes a single value; drop the trailing path"


class CannotUnmarshalError(UnmarshalException):
    __fault__ = FaultCode.CANNOT_UNMARSHAL_VALUE
    __title__ = "invalid value"


class ArgumentError(UnmarshalException):
    """
    wrapper raised by unmarshal() for any fault tied to one argument.

    options
    - name: the argument name as given by the user.
    - value: the raw value ("" when the argument had no '=').
    - position: 1-based position of the argument on the command line.
    - error: the underlying UnmarshalException (also chained as __cause__).
    """
    __fault__ = FaultCode.ARGUMENT_ERROR

    @property
    def code(self):
        return self.options.get("code", self.error.code)

    @property
    def title(self):
        return self.options.get("title", self.error.title)

    @property
    def hint(self):
        return self.options.get("hint", self.error.hint)


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see UnmarshalException).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode (shell=True) the fault is printed on stderr and the process exits
      with status 1; otherwise the fault is raised.

    typical options
    - shell, fancy, colorful, title, code, hint.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "UnmarshalException",
    "InvalidArgumentNameError",
    "UnknownArgumentNameError",
    "DuplicateArgumentNameError",
    "InvalidDestinationError",
    "UnmarshalableTypeError",
    "MissingIndexError",
    "InvalidIndexError",
    "MissingIntermediateIndicesError",
    "MissingMapKeyError",
    "MissingFieldError",
    "UnknownFieldError",
    "NestedFieldOnTerminalError",
    "CannotUnmarshalError",
    "ArgumentError",
    "trigger",
)
