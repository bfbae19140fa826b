"""
Raw argument tokens: splitting and name grammar.

Purely syntactic helpers used by the driver before any path resolution:
- split_raw(): ["a.b=1", "c"] -> [("a.b", "1"), ("c", "")]
- is_valid_name(): strict argument-name grammar (dot-separated segments).
- is_uuid(): detects resource ids passed where an argument name was expected.
"""
import re

# first segment: an identifier; next segments: identifiers, indices or map keys
NAME_PATTERN = re.compile(r"[a-z][a-z0-9-]*(\.[a-z0-9-]*)*", re.IGNORECASE | re.ASCII)

UUID_PATTERN = re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE | re.ASCII)


def split_raw(args, /):
    """
    Split raw "name=value" tokens into ordered (name, value) pairs.

    - the split happens at the first '=' only ("a=b=c" -> ("a", "b=c")),
    - a token without '=' yields an empty value,
    - order is preserved and nothing is validated or deduplicated here.
    """
    if isinstance(args, str):
        raise TypeError("split_raw() argument must be a sequence of strings, not a string")
    pairs = []
    for token in args:
        if not isinstance(token, str):
            raise TypeError("split_raw() arguments must be strings")
        name, _, value = token.partition("=")
        pairs.append((name, value))
    return pairs


def is_valid_name(name, /):
    return isinstance(name, str) and NAME_PATTERN.fullmatch(name) is not None


def is_uuid(name, /):
    return isinstance(name, str) and UUID_PATTERN.fullmatch(name) is not None


__all__ = (
    "NAME_PATTERN",
    "UUID_PATTERN",
    "split_raw",
    "is_valid_name",
    "is_uuid",
)
