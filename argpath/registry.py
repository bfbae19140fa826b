"""
Extension registry: pluggable single-string decoders.

A destination node is *terminal* (decoded from one string, no further path
descent) when, in precedence order:
1. its class implements the self-decoding hook `__unmarshal_args__(self, value, /)`;
2. a decoder was registered for its exact annotation;
3. it is a scalar kind (see argpath.scalars).

Decoders
- a decoder is a callable `decoder(value: str) -> object` that raises on bad input.
- registration is keyed by the annotation object itself (a class, or a typing
  construct such as IO[str]); Annotated[T, ...] falls back on T's decoder.
- registering twice for the same annotation silently replaces the previous decoder
  (last registration wins): domain layers use it to override built-in decoders.

Global state
- `global_registry` backs register_decoder(), is_unmarshalable() and unmarshal().
  Register decoders during program initialization, before any unmarshal() runs:
  lookups are not synchronized against concurrent registrations.
- callers wanting isolation pass their own Registry (or global_registry.copy())
  to unmarshal(..., registry=...).

Example
    >>> @register_decoder(Color)
    ... def parse_color(value):
    ...     return Color.from_hex(value)
"""
import logging
from typing import Annotated, get_args, get_origin

from .faults import CannotUnmarshalError, UnmarshalException
from .scalars import scalar_kind, unmarshal_scalar
from .utils import Unset, isclass, rename, typename

logger = logging.getLogger(__name__)

HOOK = "__unmarshal_args__"


def capability(annotation, /):
    """
    Return the class implementing the self-decoding hook for annotation, or Unset.
    """
    if get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]
    cls = annotation if isclass(annotation) else get_origin(annotation)
    if isclass(cls) and callable(getattr(cls, HOOK, None)):
        return cls
    return Unset


class Registry:
    """
    Table of decoders keyed by destination annotation.
    """

    def __init__(self, decoders=(), /):
        self._decoders = dict(decoders)
        for type, decoder in self._decoders.items():
            if not callable(decoder):
                raise TypeError("registry decoder for %s must be callable" % typename(type))

    def register(self, type, decoder=Unset, /):
        """
        Register decoder for type; without decoder, return a decorator.
        """
        if decoder is Unset:
            @rename("register")
            def wrapper(decoder):
                self.register(type, decoder)
                return decoder
            return wrapper

        if not callable(decoder):
            raise TypeError("register() decoder must be callable")
        try:
            hash(type)
        except TypeError:
            raise TypeError("register() type must be hashable") from None

        name = getattr(decoder, "__qualname__", repr(decoder))
        if type in self._decoders:
            logger.debug("overriding decoder for %s with %s", typename(type), name)
        else:
            logger.debug("registering decoder %s for %s", name, typename(type))
        self._decoders[type] = decoder
        return decoder

    def lookup(self, annotation, /):
        """
        Return the decoder registered for annotation, or Unset.
        """
        try:
            decoder = self._decoders.get(annotation, Unset)
        except TypeError:
            # unhashable annotations can't have been registered
            return Unset
        if decoder is Unset and get_origin(annotation) is Annotated:
            return self.lookup(get_args(annotation)[0])
        return decoder

    def __contains__(self, annotation):
        return self.lookup(annotation) is not Unset

    def __len__(self):
        return len(self._decoders)

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join(map(typename, self._decoders)))

    def copy(self):
        return type(self)(self._decoders)

    def is_terminal(self, annotation, /):
        return (
            capability(annotation) is not Unset or
            annotation in self or
            scalar_kind(annotation) is not None
        )

    def decode(self, value, annotation, current=None, /):
        """
        Decode value for a terminal annotation.

        - self-decoding classes update `current` in place when it is already an
          instance, otherwise a fresh `cls()`; the instance is returned.
        - registered decoders and scalars return the decoded value.

        Any failure other than an argpath fault is wrapped in CannotUnmarshalError,
        carrying the destination (`dest`), its annotation (`type`) and the original
        exception (`exception`, also chained as __cause__).
        """
        try:
            if (cls := capability(annotation)) is not Unset:
                target = current if isinstance(current, cls) else cls()
                getattr(target, HOOK)(value)
                return target
            if (decoder := self.lookup(annotation)) is not Unset:
                return decoder(value)
            return unmarshal_scalar(value, annotation)
        except UnmarshalException:
            raise
        except Exception as exception:
            logger.debug("decoding %r as %s failed: %s", value, typename(annotation), exception)
            raise CannotUnmarshalError(
                "cannot unmarshal %r into %s: %s" % (value, typename(annotation), exception),
                dest=current,
                type=annotation,
                value=value,
                exception=exception,
            ) from exception


global_registry = Registry()


def register_decoder(type, decoder=Unset, /):
    """
    Register a decoder on the global registry (decorator form when decoder is omitted).
    """
    return global_registry.register(type, decoder)


def is_unmarshalable(object, /):
    """
    Tell whether a value (or an annotation) is decoded from a single string.

    Classes and typing constructs are checked as annotations; any other object
    is checked through its type. None is never unmarshalable.
    """
    if object is None:
        return False
    if isclass(object) or get_origin(object) is not None:
        return global_registry.is_terminal(object)
    return global_registry.is_terminal(type(object))


__all__ = (
    "HOOK",
    "Registry",
    "capability",
    "global_registry",
    "register_decoder",
    "is_unmarshalable",
)
