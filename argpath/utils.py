"""
argpath utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the registry, the resolver and the driver.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
    None is a meaningful value in this package (an empty optional member), so keyword
    parameters such as `annotation=` or `registry=` default to Unset instead.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated decoders for clean tracebacks and logs.

- fieldname(word)
  • Convert one CLI path segment (“organization-id”) into a Python member name (“organization_id”).

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> fieldname("Organization-ID")
    'organization_id'
    >>> fieldname("class")
    'class_'
"""
import builtins
import functools
import keyword
import types
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., str | UnsetType).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Support reversed PEP 604 unions when UnsetType appears on the right.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns object unless it is Unset, in which case default is returned.
    Falsey values like None, 0, "" or [] are preserved as-is.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - rename(name) -> decorator

    Decoders built from lambdas or closures would otherwise show up as
    "<lambda>" in logs and in CannotUnmarshalError diagnostics.
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


@functools.lru_cache(maxsize=256)
def fieldname(word, /):
    """
    Convert an external (CLI style) path segment into a dataclass member name.

    Rules
    - lowercased (argument names are case-insensitive),
    - hyphens become underscores,
    - Python keywords get the conventional trailing underscore ("class" -> "class_").
    """
    if not isinstance(word, str):
        raise TypeError("fieldname() argument must be a string")
    name = word.lower().replace("-", "_")
    if keyword.iskeyword(name):
        name += "_"
    return name


def isclass(annotation, /):
    """
    True for real classes; parametrized generics such as list[int] are not classes.
    """
    return isinstance(annotation, type) and not isinstance(annotation, types.GenericAlias)


def typename(annotation, /):
    """
    Short, readable name of a destination type for messages and logs.

    - classes: their qualified name ("int", "Offer", "IPv4Network"),
    - typing constructs: their repr without the "typing." prefix ("list[str]", "Optional[Size]").
    """
    if isclass(annotation):
        return annotation.__qualname__
    return repr(annotation).replace("typing.", "")


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None is a valid, user-meaningful value but you still
need to distinguish “no input” from “explicitly passed None”.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "fieldname",
    "isclass",
    "typename",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
