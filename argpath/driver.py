"""
Top-level driver: unmarshal(["name=value", ...], destination).

Flow
- split every token into (name, value) (see argpath.tokens),
- check the name against the argument-name grammar,
- reject names already given in this call (compared by the node they target),
- resolve the name's dot-separated path into the destination (see argpath.resolver).

Every fault tied to an argument is raised as an ArgumentError carrying `name`,
`value` and the underlying `error`; processing stops at the first failing
argument (arguments before it stay applied).

Destinations
- a dataclass instance: arguments address its members;
- a mutable mapping: arguments address its keys; the value type comes from
  `annotation=` (dict[str, str] by default);
- a RawArgs list: receives the arguments verbatim, nothing is parsed.

Example
    >>> @dataclass
    ... class Offer:
    ...     size: Size = Size(0)
    ...
    >>> @dataclass
    ... class CreateServerRequest:
    ...     name: str = ""
    ...     tags: list[str] = field(default_factory=list)
    ...     offer: Offer = field(default_factory=Offer)
    ...
    >>> unmarshal(["name=foo", "tags.0=prod", "offer.size=10G"], CreateServerRequest())
    CreateServerRequest(name='foo', tags=['prod'], offer=Offer(size=Size(10000000000)))
"""
import dataclasses
import logging
from collections.abc import MutableMapping

from . import decoders  # NOQA: F-401 (registers the built-in decoders)
from .faults import (
    ArgumentError,
    DuplicateArgumentNameError,
    InvalidArgumentNameError,
    InvalidDestinationError,
    UnknownArgumentNameError,
    UnknownFieldError,
    UnmarshalException,
)
from .registry import global_registry
from .resolver import assign, canonical
from .tokens import is_uuid, is_valid_name, split_raw
from .utils import Unset, coalesce, isclass, typename

logger = logging.getLogger(__name__)


class RawArgs(list):
    """
    Destination receiving the raw argument list, unparsed.

    Commands that forward their arguments elsewhere declare it instead of a dataclass.
    """


def unmarshal(args, data, /, *, annotation=Unset, registry=Unset):
    """
    Fill data from args and return it.

    Parameters
    - args: iterable of "name=value" (or bare "name") strings, in command-line order.
    - data: dataclass instance, mutable mapping, or RawArgs.
    - annotation: destination type; defaults to type(data) for dataclasses and to
      dict[str, str] for mappings.
    - registry: Registry used for terminal values; defaults to the global registry.

    Raises
    - InvalidDestinationError: data is neither a dataclass instance nor a mapping.
    - ArgumentError: an argument could not be unmarshaled; `error` holds the cause
      (InvalidArgumentNameError, DuplicateArgumentNameError, UnknownFieldError, ...).
    """
    if isinstance(args, str):
        raise TypeError("unmarshal() arguments must be a sequence of strings, not a string")
    args = list(args)

    if isinstance(data, RawArgs):
        data[:] = args
        return data

    if dataclasses.is_dataclass(data) and not isclass(data):
        annotation = coalesce(annotation, type(data))
    elif isinstance(data, MutableMapping):
        annotation = coalesce(annotation, dict[str, str])
    else:
        raise InvalidDestinationError(
            "destination must be a dataclass instance or a mutable mapping, not %s" % typename(type(data)),
            dest=data,
        )
    registry = coalesce(registry, global_registry)

    logger.debug("unmarshaling %d argument(s) into %s", len(args), typename(annotation))

    # arguments resolving to the same destination node are duplicates ("Name" and "name")
    processed = set()
    for position, (name, value) in enumerate(split_raw(args), start=1):
        try:
            if not is_valid_name(name):
                # resource ids given without their id argument get a dedicated hint
                if is_uuid(name):
                    raise UnknownArgumentNameError("unknown argument %r" % name, name=name)
                raise InvalidArgumentNameError("invalid argument name %r" % name, name=name)

            if (key := canonical(annotation, data, name.split("."), registry)) in processed:
                raise DuplicateArgumentNameError("argument %r is given more than once" % name, name=name)
            processed.add(key)

            try:
                data = assign(annotation, data, name.split("."), value, registry)
            except UnknownFieldError as exception:
                if not is_uuid(name):
                    raise
                raise UnknownArgumentNameError("unknown argument %r" % name, name=name) from exception
        except UnmarshalException as exception:
            logger.debug("argument %r rejected: %s", name, exception)
            raise ArgumentError(
                "invalid argument %r: %s" % (name, exception.message),
                name=name,
                value=value,
                position=position,
                error=exception,
            ) from exception
        logger.debug("argument %r set from %r", name, value)

    return data


__all__ = (
    "RawArgs",
    "unmarshal",
)
