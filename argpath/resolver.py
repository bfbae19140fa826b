"""
Path resolver: sets one (sub)value of a destination, following an argument path.

assign(annotation, current, words, value, registry) walks the destination node
described by `annotation` (whose current value is `current`) along `words`, the
dot-separated segments of an argument name, and returns the node's new value;
callers store that value back into the parent. Containers met on the way are
created on demand.

Example: words ("contacts", "0", "address", "city") set the city of the first
contact of a phone book.

Node kinds, in the order they are tried
- terminal (see argpath.registry): decoded from the value; no segment may remain.
- Annotated[T, ...]: resolved as T.
- Optional[T] / T | None: an empty node gets T's zero value first.
- list[T]: next segment is an unsigned 64-bit index; index == len appends one
  zero item, a larger index is rejected (no sparse lists).
- dict[K, V]: next segment is the key, taken as-is for str keys; a fresh zero V is
  built from the remaining segments and stored under the key.
- dataclass: next segment names a member (hyphens -> underscores). Direct members
  are searched first, then embedded members from the last declared to the first,
  each with the full, unconsumed path; an embedded member that does not know the
  name passes the search on to the previous one.

canonical() maps a path to the node it targets without touching the
destination; the driver uses it to detect duplicate arguments.

Values are stored only once the nested assignment succeeded: an argument that
fails leaves no half-built container behind.
"""
import dataclasses
import functools
import re
import types
from collections.abc import MutableMapping, MutableSequence
from types import MappingProxyType
from typing import Annotated, Any, NamedTuple, Union, get_args, get_origin, get_type_hints

from .faults import (
    MissingFieldError,
    MissingIndexError,
    MissingIntermediateIndicesError,
    MissingMapKeyError,
    InvalidIndexError,
    NestedFieldOnTerminalError,
    UnknownFieldError,
    UnmarshalableTypeError,
    UnmarshalException,
)
from .registry import capability
from .scalars import scalar_kind
from .utils import Unset, fieldname, isclass, typename

# dataclass field metadata key flagging embedded members
EMBEDDED = "argpath.embedded"

_INDEX = re.compile(r"[0-9]+")

# indices are unsigned 64-bit integers
MAX_INDEX = (1 << 64) - 1

_SEQUENCES = (list, MutableSequence)
_MAPPINGS = (dict, MutableMapping)


class Members(NamedTuple):
    direct: MappingProxyType
    embedded: tuple
    required: tuple


def embedded(**options):
    """
    Declare an embedded dataclass member: its own members are addressed as if they
    belonged to the enclosing dataclass.

    Accepts the keyword arguments of dataclasses.field():

        @dataclass
        class CreateServerRequest(ZonedRequest):
            common: CommonFields = embedded(default_factory=CommonFields)
            name: str = ""
    """
    metadata = dict(options.pop("metadata", None) or {})
    metadata[EMBEDDED] = True
    return dataclasses.field(metadata=metadata, **options)


@functools.cache
def members(cls, /):
    """
    Member tables of a dataclass, computed once per class.

    - direct: name -> annotation of regular members.
    - embedded: (name, annotation) of embedded members, in declaration order.
    - required: (name, annotation) of init members without a default.
    """
    try:
        hints = get_type_hints(cls, include_extras=True)
    except NameError as exception:
        raise UnmarshalableTypeError(
            "annotations of %s cannot be resolved: %s" % (typename(cls), exception),
            type=cls,
        ) from exception

    direct, embedded, required = {}, [], []
    for field in dataclasses.fields(cls):
        annotation = hints.get(field.name, field.type)
        if field.metadata.get(EMBEDDED, False):
            embedded.append((field.name, annotation))
        else:
            direct[field.name] = annotation
        if field.init and field.default is dataclasses.MISSING and field.default_factory is dataclasses.MISSING:
            required.append((field.name, annotation))
    return Members(MappingProxyType(direct), tuple(embedded), tuple(required))


def _record(annotation):
    return isclass(annotation) and dataclasses.is_dataclass(annotation)


def _optional(annotation):
    if get_origin(annotation) in (Union, types.UnionType):
        arguments = get_args(annotation)
        if len(arguments) == 2 and type(None) in arguments:
            return next(argument for argument in arguments if argument is not type(None))
    return Unset


def zero(annotation, registry, /):
    """
    Zero value of a destination type, used to materialize missing nodes.

    Dataclasses whose required members lead back to themselves have no zero
    value (UnmarshalableTypeError); declare such members Optional.
    """
    return _zero(annotation, registry, frozenset())


def _zero(annotation, registry, pending):
    if registry.is_terminal(annotation):
        if capability(annotation) is Unset and annotation not in registry:
            return scalar_kind(annotation).kind()
        return None
    if get_origin(annotation) is Annotated:
        return _zero(get_args(annotation)[0], registry, pending)
    if _optional(annotation) is not Unset:
        return None

    origin = get_origin(annotation) or annotation
    if origin in _SEQUENCES:
        return []
    if origin in _MAPPINGS:
        return {}
    if _record(annotation):
        if annotation in pending:
            raise UnmarshalableTypeError(
                "cannot create an empty %s: its required members refer back to it" % typename(annotation),
                type=annotation,
            )
        pending |= {annotation}
        arguments = {name: _zero(hint, registry, pending) for name, hint in members(annotation).required}
        try:
            return annotation(**arguments)
        except Exception as exception:
            raise UnmarshalableTypeError(
                "cannot create an empty %s: %s" % (typename(annotation), exception),
                type=annotation,
            ) from exception
    return None


def assign(annotation, current, words, value, registry, /):
    """
    Set value at path `words` below a node and return the node's new value.
    """
    words = tuple(words)

    if registry.is_terminal(annotation):
        if words:
            raise NestedFieldOnTerminalError(
                "cannot set nested field %r: %s takes a single value" % (".".join(words), typename(annotation)),
                dest=current,
                type=annotation,
                field=words[0],
            )
        return registry.decode(value, annotation, current)

    if get_origin(annotation) is Annotated:
        return assign(get_args(annotation)[0], current, words, value, registry)

    if (inner := _optional(annotation)) is not Unset:
        if current is None and not registry.is_terminal(inner):
            current = zero(inner, registry)
        return assign(inner, current, words, value, registry)

    origin = get_origin(annotation) or annotation
    arguments = get_args(annotation)

    if origin in _SEQUENCES:
        return _assign_item(arguments[0] if arguments else str, current, words, value, registry)
    if origin in _MAPPINGS:
        key, item = arguments if arguments else (str, str)
        return _assign_entry(key, item, current, words, value, registry)
    if _record(annotation):
        return _assign_field(annotation, current, words, value, registry)

    raise UnmarshalableTypeError(
        "type %s cannot be unmarshaled" % typename(annotation),
        dest=current,
        type=annotation,
    )


def _assign_item(annotation, current, words, value, registry):
    if current is None:
        current = []
    if not words:
        raise MissingIndexError(
            "missing index: a list of %s is set item by item" % typename(annotation),
            dest=current,
            type=annotation,
        )
    if not _INDEX.fullmatch(index := words[0]) or int(index) > MAX_INDEX:
        raise InvalidIndexError(
            "invalid index %r: list indices are non-negative integers" % index,
            dest=current,
            index=index,
        )

    position, length = int(index), len(current)
    if position > length:
        raise MissingIntermediateIndicesError(
            "cannot set index %d of a list of %d item(s): set index %d first" % (position, length, length),
            dest=current,
            index=position,
            length=length,
        )
    if position < length:
        current[position] = assign(annotation, current[position], words[1:], value, registry)
        return current

    current.append(zero(annotation, registry))
    try:
        current[position] = assign(annotation, current[position], words[1:], value, registry)
    except UnmarshalException:
        current.pop()
        raise
    return current


def _assign_entry(key, annotation, current, words, value, registry):
    if current is None:
        current = {}
    if not words:
        raise MissingMapKeyError(
            "missing key: a mapping of %s is set entry by entry" % typename(annotation),
            dest=current,
            type=annotation,
        )
    entry = words[0] if key is str or key is Any else registry.decode(words[0], key)
    current[entry] = assign(annotation, zero(annotation, registry), words[1:], value, registry)
    return current


def _assign_field(cls, current, words, value, registry):
    if current is None:
        current = zero(cls, registry)
    elif isinstance(current, cls) and dataclasses.is_dataclass(type(current)):
        cls = type(current)
    if not words:
        raise MissingFieldError(
            "missing field: %s is set field by field" % typename(cls),
            dest=current,
            type=cls,
        )

    table = members(cls)
    name = fieldname(words[0])
    if name in table.direct:
        setattr(current, name, assign(table.direct[name], getattr(current, name, None), words[1:], value, registry))
        return current

    # later embedded members shadow earlier ones
    for name, annotation in reversed(table.embedded):
        try:
            result = assign(annotation, getattr(current, name, None), words, value, registry)
        except UnknownFieldError:
            continue
        setattr(current, name, result)
        return current

    raise UnknownFieldError(
        "unknown field %r in %s" % (words[0], typename(cls)),
        dest=current,
        type=cls,
        field=words[0],
    )


def _unwrap(annotation):
    while True:
        if get_origin(annotation) is Annotated:
            annotation = get_args(annotation)[0]
        elif (inner := _optional(annotation)) is not Unset:
            annotation = inner
        else:
            return annotation


def _provides(cls, name):
    table = members(cls)
    if name in table.direct:
        return True
    return any(_record(hint := _unwrap(annotation)) and _provides(hint, name) for _, annotation in table.embedded)


def canonical(annotation, current, words, registry, /):
    """
    Normalized form of an argument path: two arguments with the same canonical
    path target the same destination node.

    - member names are converted like member lookups ("Organization-ID" -> "organization_id"),
    - list indices are reduced to their integer value ("01" -> "1"),
    - map keys are kept as typed,
    - embedded members contribute their own name in front of the fields they provide.

    Segments the destination cannot resolve are kept lowercased; assign() reports them.
    """
    words = tuple(words)
    annotation = _unwrap(annotation)
    if not words or registry.is_terminal(annotation):
        return tuple(word.lower() for word in words)

    origin = get_origin(annotation) or annotation
    arguments = get_args(annotation)
    head, rest = words[0], words[1:]

    if origin in _SEQUENCES:
        if not _INDEX.fullmatch(head):
            return tuple(word.lower() for word in words)
        position = int(head)
        item = current[position] if current is not None and position < len(current) else None
        return (str(position), *canonical(arguments[0] if arguments else str, item, rest, registry))
    if origin in _MAPPINGS:
        return (head, *canonical(arguments[1] if arguments else str, None, rest, registry))
    if not _record(annotation):
        return tuple(word.lower() for word in words)

    cls = type(current) if isinstance(current, annotation) and dataclasses.is_dataclass(type(current)) else annotation
    table = members(cls)
    name = fieldname(head)
    if name in table.direct:
        return (name, *canonical(table.direct[name], getattr(current, name, None), rest, registry))
    for member, hint in reversed(table.embedded):
        if _record(record := _unwrap(hint)) and _provides(record, name):
            return (member, *canonical(hint, getattr(current, member, None), words, registry))
    return tuple(word.lower() for word in words)


__all__ = (
    "EMBEDDED",
    "MAX_INDEX",
    "Members",
    "embedded",
    "members",
    "zero",
    "assign",
    "canonical",
)
